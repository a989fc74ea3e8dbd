"""Core app configuration, database, security primitives and policy."""

from app.core.config import Settings, get_settings
from app.core.database import Database

__all__ = ["Database", "Settings", "get_settings"]
