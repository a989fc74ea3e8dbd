"""Shared fixtures: in-memory database, temporary upload root and an API client."""

import tempfile
import unittest
from pathlib import Path

from fastapi.testclient import TestClient

from app.core.config import Settings
from app.core.database import Database
from app.core.tokens import TokenService
from app.main import create_app
from app.models import Base

ACCESS_SECRET = "test-access-secret-0123456789abcdef"
REFRESH_SECRET = "test-refresh-secret-0123456789abcdef"
PASSWORD = "secret123"


def make_settings(upload_dir: Path, **overrides: object) -> Settings:
    values: dict[str, object] = {
        "APP_ENV": "test",
        "DATABASE_URL": "sqlite:///:memory:",
        "JWT_SECRET": ACCESS_SECRET,
        "JWT_REFRESH_SECRET": REFRESH_SECRET,
        "BCRYPT_ROUNDS": 4,
        "UPLOAD_DIR": str(upload_dir),
        "LOG_LEVEL": "WARNING",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def make_token_service() -> TokenService:
    return TokenService(ACCESS_SECRET, REFRESH_SECRET)


class DatabaseTestCase(unittest.TestCase):
    """Fresh in-memory schema and upload directory per test."""

    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        self.upload_dir = Path(tmp.name)
        self.settings = make_settings(self.upload_dir)
        self.database = Database(self.settings.DATABASE_URL)
        Base.metadata.create_all(self.database.engine)
        self.addCleanup(self.database.dispose)
        self.db = self.database.session_factory()
        self.addCleanup(self.db.close)


class ApiTestCase(DatabaseTestCase):
    """DatabaseTestCase plus a TestClient bound to the same database."""

    def setUp(self) -> None:
        super().setUp()
        self.app = create_app(self.settings, self.database)
        self.client = TestClient(self.app)
        self.prefix = self.settings.API_PREFIX

    def url(self, path: str) -> str:
        return f"{self.prefix}{path}"

    def register(self, email: str, name: str = "Test User", password: str = PASSWORD) -> dict:
        response = self.client.post(
            self.url("/auth/register"),
            json={
                "email": email,
                "password": password,
                "password_confirmation": password,
                "name": name,
            },
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]

    def setup_admin(self, email: str = "admin@example.com", password: str = PASSWORD) -> dict:
        response = self.client.post(
            self.url("/auth/setup-admin"),
            json={
                "email": email,
                "password": password,
                "password_confirmation": password,
                "name": "Admin",
            },
        )
        self.assertEqual(response.status_code, 201, response.text)
        return response.json()["data"]

    def login(self, email: str, password: str = PASSWORD) -> dict:
        response = self.client.post(self.url("/auth/login"), json={"email": email, "password": password})
        self.assertEqual(response.status_code, 200, response.text)
        return response.json()["data"]

    def auth_headers(self, email: str, password: str = PASSWORD) -> dict[str, str]:
        return {"Authorization": f"Bearer {self.login(email, password)['access_token']}"}
