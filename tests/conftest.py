import os
import shutil
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Point the store and uploads at a scratch directory before importing the app
os.environ["DATABASE_PATH"] = "test_data/cars.db"
os.environ["UPLOAD_DIR"] = "test_data/uploads"
os.environ["SECRET_KEY"] = "test-secret"

TEST_DB = Path("test_data/cars.db")


@pytest.fixture(scope="session", autouse=True)
def setup_test_dir():
    test_dir = Path("test_data")
    (test_dir / "uploads").mkdir(parents=True, exist_ok=True)
    yield
    if test_dir.exists():
        shutil.rmtree(test_dir)


@pytest.fixture
def fresh_db():
    import cars_api.db as db_module
    from cars_api.db import init_db

    db_module.DB_PATH = TEST_DB
    if TEST_DB.exists():
        TEST_DB.unlink()
    init_db()
    yield TEST_DB


@pytest.fixture
def client(fresh_db):
    from cars_api.main import app

    with TestClient(app) as c:
        yield c


def register_and_login(client, username="driver", password="password123") -> str:
    client.post("/auth/register", json={"username": username, "password": password})
    resp = client.post("/auth/login", json={"username": username, "password": password})
    return resp.json()["token"]


@pytest.fixture
def auth_headers(client):
    token = register_and_login(client)
    return {"Authorization": f"Bearer {token}"}
