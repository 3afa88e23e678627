"""
Pytest configuration and fixtures for backend tests.

Provides shared fixtures for:
- Test database sessions
- Application settings
- Sample data factories (database rows and in-memory records)
- FastAPI test client
"""

import os
import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set test environment variables before importing app modules
os.environ['RELEASE_SERVER_DB_URL'] = 'sqlite:///:memory:'
os.environ['APP_URL'] = 'https://updates.example.com'

from backend.src.config.settings import AppSettings
from backend.src.models import Base, Version, Asset
from backend.src.services.version_repository import (
    InMemoryVersionRepository,
    new_version_record,
)


TEST_APP_URL = 'https://updates.example.com'

# Fixed reference instant; versions are created relative to it
BASE_TIME = datetime(2026, 1, 1, 12, 0, 0)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture(scope='function')
def test_db_engine():
    """Create an in-memory SQLite database engine for testing."""
    from sqlalchemy import event

    engine = create_engine(
        'sqlite:///:memory:',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )

    # Enable foreign key constraints for SQLite
    # This must be set for each connection
    def _fk_pragma_on_connect(dbapi_con, con_record):
        dbapi_con.execute('pragma foreign_keys=ON')

    event.listen(engine, 'connect', _fk_pragma_on_connect)

    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture(scope='function')
def test_db_session(test_db_engine):
    """Create a test database session."""
    TestingSessionLocal = sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=test_db_engine
    )
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.rollback()
        session.close()


# ============================================================================
# Settings Fixtures
# ============================================================================

@pytest.fixture
def test_asset_dir(tmp_path):
    """Empty asset directory."""
    asset_dir = tmp_path / "assets"
    asset_dir.mkdir()
    return asset_dir


@pytest.fixture
def test_settings(test_asset_dir):
    """Application settings pointing at the test asset directory."""
    return AppSettings(
        APP_URL=TEST_APP_URL,
        RELEASE_SERVER_ASSET_DIR=str(test_asset_dir),
    )


# ============================================================================
# Sample Data Fixtures
# ============================================================================

@pytest.fixture
def sample_version(test_db_session):
    """
    Factory for persisted versions.

    Assets are (platform, filetype, filename, size, hash) tuples, attached
    in the given order.
    """
    def _create(
        name="1.0.0",
        created_at=BASE_TIME,
        channel="stable",
        notes=None,
        assets=(),
    ):
        version = Version(
            name=name,
            channel=channel,
            notes=notes,
            created_at=created_at,
        )
        for platform, filetype, filename, size, content_hash in assets:
            version.assets.append(Asset(
                platform=platform,
                filetype=filetype,
                name=filename,
                size=size,
                hash=content_hash,
            ))
        test_db_session.add(version)
        test_db_session.commit()
        test_db_session.refresh(version)
        return version

    return _create


@pytest.fixture
def memory_repository():
    """Factory for in-memory repositories built from plain values."""
    def _create(*versions):
        return InMemoryVersionRepository(
            new_version_record(**spec) for spec in versions
        )

    return _create


@pytest.fixture
def at():
    """Timestamp helper: at(days=1) is one day after the reference instant."""
    def _at(**delta):
        return BASE_TIME + timedelta(**delta)

    return _at


# ============================================================================
# FastAPI Test Client Fixture
# ============================================================================

@pytest.fixture
def test_client(test_db_session, test_settings):
    """Create a test client for FastAPI application."""
    from fastapi.testclient import TestClient
    from backend.src.main import app

    # Override dependencies
    def get_test_db():
        try:
            yield test_db_session
        finally:
            pass

    def get_test_settings():
        return test_settings

    from backend.src.db.database import get_db
    from backend.src.config.settings import get_settings

    app.dependency_overrides[get_db] = get_test_db
    app.dependency_overrides[get_settings] = get_test_settings

    with TestClient(app) as client:
        yield client

    # Clear overrides
    app.dependency_overrides.clear()
