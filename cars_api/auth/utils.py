from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from cars_api.config import settings


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(password.encode(), salt).decode()


def verify_password(password: str, hashed: str) -> bool:
    try:
        return bcrypt.checkpw(password.encode(), hashed.encode())
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_token(user_id: int, username: str, expires_delta: timedelta | None = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.jwt_expire_minutes)
    )
    payload = {"sub": str(user_id), "id": user_id, "username": username, "exp": expire}
    return jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> dict | None:
    """Return the {id, username} carried by a valid token, None otherwise."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])
        return {"id": int(payload["id"]), "username": str(payload["username"])}
    except (JWTError, KeyError, TypeError, ValueError):
        return None
