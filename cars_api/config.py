from pathlib import Path

from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    app_version: str = "1.0.0"
    secret_key: str = "dev-secret-change-me"
    database_path: str = "data/cars.db"

    # JWT settings
    jwt_algorithm: str = "HS256"
    jwt_expire_minutes: int = 60
    bcrypt_rounds: int = 10

    # Image uploads
    upload_dir: str = "uploads"
    upload_url_prefix: str = "/uploads"
    max_upload_bytes: int = 5 * 1024 * 1024

    class Config:
        env_file = ".env"


settings = Settings()

# Ensure data and upload directories exist
Path(settings.database_path).parent.mkdir(parents=True, exist_ok=True)
Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
