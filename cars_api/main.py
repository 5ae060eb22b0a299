import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from cars_api.auth.router import get_current_user
from cars_api.auth.router import router as auth_router
from cars_api.cars.router import router as cars_router
from cars_api.config import settings
from cars_api.db import init_db
from cars_api.errors import register_error_handlers

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    init_db()
    logger.info(f"Cars API {settings.app_version} started")
    yield


app = FastAPI(title="Cars API", version=settings.app_version, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)
app.mount(
    settings.upload_url_prefix,
    StaticFiles(directory=settings.upload_dir, check_dir=False),
    name="uploads",
)
register_error_handlers(app)

app.include_router(auth_router)
app.include_router(cars_router)


@app.get("/health")
async def health():
    return {"status": "ok"}


@app.get("/")
async def index(user: dict = Depends(get_current_user)):
    return {
        "message": f"Welcome to the API, {user['username']}!",
        "version": settings.app_version,
        "endpoints": {
            "auth": ["POST /auth/register", "POST /auth/login"],
            "cars": [
                "GET /api/cars",
                "GET /api/cars/search",
                "GET /api/cars/favorites",
                "GET /api/cars/{id}",
                "POST /api/cars",
                "PUT /api/cars/{id}",
                "POST /api/cars/{id}/upload",
                "DELETE /api/cars/{id}",
            ],
        },
    }
