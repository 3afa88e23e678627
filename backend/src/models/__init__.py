"""
SQLAlchemy models for the release server.

This module provides the declarative base class and imports all models
to ensure they are registered with SQLAlchemy's metadata.
"""

from sqlalchemy.orm import declarative_base

# All models inherit from this Base class
Base = declarative_base()


# Import all models here so they are registered with Base.metadata
# This is required for Alembic autogenerate to detect models
from backend.src.models.version import Version, DEFAULT_CHANNEL  # noqa: E402
from backend.src.models.asset import Asset  # noqa: E402

__all__ = [
    "Base",
    "Version",
    "Asset",
    "DEFAULT_CHANNEL",
]
