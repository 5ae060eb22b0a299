import logging
import sqlite3

from fastapi import APIRouter, Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from pydantic import BaseModel

from cars_api.auth.utils import create_token, decode_token, hash_password, verify_password
from cars_api.db import get_connection

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])

# Reads "Authorization: Bearer <token>"; returns None instead of raising when absent
bearer_scheme = HTTPBearer(auto_error=False)


class Credentials(BaseModel):
    username: str | None = None
    password: str | None = None


def _require_credentials(payload: Credentials) -> tuple[str, str]:
    username = (payload.username or "").strip()
    password = payload.password or ""
    if not username or not password:
        raise HTTPException(400, "Username and password are required")
    return username, password


@router.post("/register", status_code=201)
def register(payload: Credentials):
    username, password = _require_credentials(payload)

    try:
        password_hash = hash_password(password)
    except ValueError as e:
        logger.error(f"Password hashing failed for '{username}': {e}")
        raise HTTPException(500, "Error while hashing the password")

    try:
        with get_connection() as conn:
            cursor = conn.execute(
                "INSERT INTO users (username, password_hash) VALUES (?, ?)",
                (username, password_hash),
            )
            user_id = cursor.lastrowid
    except sqlite3.IntegrityError:
        raise HTTPException(409, "Username already taken")
    except sqlite3.Error as e:
        logger.error(f"Failed to create user '{username}': {e}")
        raise HTTPException(500, {"error": "Error while creating the user", "details": str(e)})

    logger.info(f"Registered user '{username}' (id={user_id})")
    return {"success": True, "id": user_id, "message": "User created"}


@router.post("/login")
def login(payload: Credentials):
    username, password = _require_credentials(payload)

    try:
        with get_connection() as conn:
            user = conn.execute(
                "SELECT id, username, password_hash FROM users WHERE username = ?", (username,)
            ).fetchone()
    except sqlite3.Error as e:
        logger.error(f"User lookup failed for '{username}': {e}")
        raise HTTPException(500, {"error": "Server error", "details": str(e)})

    if not user:
        logger.warning(f"Login attempt failed: user '{username}' not found")
        raise HTTPException(404, "User not found")

    if not verify_password(password, user["password_hash"]):
        logger.warning(f"Login attempt failed: invalid password for '{username}'")
        raise HTTPException(401, "Incorrect password")

    token = create_token(user["id"], user["username"])
    return {"success": True, "token": token, "message": "Login successful"}


def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> dict:
    """Resolve the bearer token into {id, username} or reject the request.

    No token at all is a 401; a token that fails verification is a 403.
    """
    if credentials is None:
        raise HTTPException(
            401,
            "Access denied. Missing token.",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user = decode_token(credentials.credentials)
    if user is None:
        raise HTTPException(403, "Access denied. Invalid or expired token.")
    return user
