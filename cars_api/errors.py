"""JSON error bodies.

Every error response carries an "error" message. Routes raise HTTPException
with either a plain message or a dict that already holds "error" plus any
extra keys ("errors", "details", ...).
"""

import logging
import sqlite3
from contextlib import contextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

_REQUEST_PARTS = {"body", "query", "path", "header"}


def error_body(detail) -> dict:
    if isinstance(detail, dict):
        return detail
    return {"error": str(detail)}


@contextmanager
def store_errors(message: str):
    """Turn a SQLite failure inside the block into a 500 response."""
    try:
        yield
    except sqlite3.Error as e:
        logger.error(f"{message}: {e}")
        raise HTTPException(500, {"error": message, "details": str(e)}) from e


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    # Raised by the router itself when no route matches path or method
    if exc.status_code in (404, 405) and exc.detail in ("Not Found", "Method Not Allowed"):
        return JSONResponse(
            status_code=404,
            content={
                "error": "Route not found",
                "message": f"Route {request.method} {request.url.path} does not exist",
            },
        )
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.detail),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    errors = []
    for err in exc.errors():
        loc = [str(part) for part in err.get("loc", ()) if part not in _REQUEST_PARTS]
        errors.append(
            {
                "field": ".".join(loc) or "body",
                "message": err.get("msg", "Invalid value"),
                "value": err.get("input"),
            }
        )
    return JSONResponse(
        status_code=400,
        content=jsonable_encoder({"error": "Invalid data", "errors": errors}),
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
