"""
Unit tests for version repositories.

Both implementations are run against the same behaviour:
- Lookup by name with assets in attachment order
- Channel listing, newest first, with strict and inclusive cutoffs
- Platform restriction keeping versions left without assets
- Idempotent deletions
"""

import pytest

from backend.src.models import Asset, Version
from backend.src.services.version_repository import (
    InMemoryVersionRepository,
    SqlAlchemyVersionRepository,
    new_version_record,
)


ZIP = ("osx_64", ".zip", "MyApp-mac.zip", 1024, "H1")
NUPKG = ("windows_32", ".nupkg", "MyApp-full.nupkg", 2048, "H2")


@pytest.fixture(params=["sqlalchemy", "memory"])
def make_repository(request, test_db_session, sample_version):
    """Factory building a populated repository of each implementation."""
    def _create(*versions):
        if request.param == "sqlalchemy":
            for spec in versions:
                sample_version(**spec)
            return SqlAlchemyVersionRepository(test_db_session)
        return InMemoryVersionRepository(new_version_record(**spec) for spec in versions)

    return _create


class TestFindOne:
    """Tests for find_one()."""

    def test_returns_version_with_assets(self, make_repository, at):
        """Test lookup returns the snapshot with assets in attachment order."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0), notes="first", assets=[ZIP, NUPKG]),
        )

        version = repo.find_one("1.0.0")

        assert version.name == "1.0.0"
        assert version.channel == "stable"
        assert version.notes == "first"
        assert version.created_at == at(days=0)
        assert [a.name for a in version.assets] == ["MyApp-mac.zip", "MyApp-full.nupkg"]
        assert all(a.version_name == "1.0.0" for a in version.assets)

    def test_unknown_version(self, make_repository):
        """Test lookup of an unknown name returns None."""
        assert make_repository().find_one("1.0.0") is None


class TestFind:
    """Tests for find()."""

    def test_newest_first_within_channel(self, make_repository, at):
        """Test listing is ordered by creation time and limited to the channel."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0)),
            dict(name="1.2.0", created_at=at(days=2)),
            dict(name="1.1.0", created_at=at(days=1)),
            dict(name="2.0.0-beta", created_at=at(days=3), channel="beta"),
        )

        assert [v.name for v in repo.find("stable")] == ["1.2.0", "1.1.0", "1.0.0"]

    def test_strict_cutoff(self, make_repository, at):
        """Test the default cutoff excludes versions created at the cutoff."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0)),
            dict(name="1.1.0", created_at=at(days=1)),
        )

        assert [v.name for v in repo.find("stable", created_after=at(days=0))] == ["1.1.0"]

    def test_inclusive_cutoff(self, make_repository, at):
        """Test the inclusive cutoff keeps versions created at the cutoff."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0)),
            dict(name="1.1.0", created_at=at(days=1)),
        )

        names = [v.name for v in repo.find("stable", created_after=at(days=0), inclusive=True)]

        assert names == ["1.1.0", "1.0.0"]

    def test_platform_restriction_keeps_empty_versions(self, make_repository, at):
        """Test assets are filtered by platform while every version is returned."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0), assets=[ZIP]),
            dict(name="1.1.0", created_at=at(days=1), assets=[ZIP, NUPKG]),
        )

        versions = repo.find("stable", platforms={"windows_32", "win32"})

        assert [v.name for v in versions] == ["1.1.0", "1.0.0"]
        assert [a.name for a in versions[0].assets] == ["MyApp-full.nupkg"]
        assert versions[1].assets == ()

    def test_ties_on_creation_time_prefer_latest_insert(self, make_repository, at):
        """Test versions created at the same instant list the newest record first."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0)),
            dict(name="1.0.1", created_at=at(days=0)),
        )

        assert [v.name for v in repo.find("stable")] == ["1.0.1", "1.0.0"]

    def test_find_latest(self, make_repository, at):
        """Test the most recent version of a channel."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0)),
            dict(name="1.1.0", created_at=at(days=1)),
        )

        assert repo.find_latest("stable").name == "1.1.0"
        assert repo.find_latest("beta") is None


class TestDelete:
    """Tests for delete_asset() and delete_version()."""

    def test_delete_asset(self, make_repository, at):
        """Test deleting one asset keeps the others."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0), assets=[ZIP, NUPKG]),
        )
        zip_asset = repo.find_one("1.0.0").assets[0]

        repo.delete_asset(zip_asset)
        repo.delete_asset(zip_asset)

        assert [a.name for a in repo.find_one("1.0.0").assets] == ["MyApp-full.nupkg"]

    def test_delete_version(self, make_repository, at):
        """Test deleting a version is idempotent."""
        repo = make_repository(
            dict(name="1.0.0", created_at=at(days=0), assets=[ZIP]),
        )

        repo.delete_version("1.0.0")
        repo.delete_version("1.0.0")

        assert repo.find_one("1.0.0") is None


class TestSqlAlchemyVersionRepository:
    """Database-specific behaviour."""

    def test_delete_version_removes_asset_rows(self, test_db_session, sample_version, at):
        """Test asset rows do not outlive their version."""
        sample_version(name="1.0.0", created_at=at(days=0), assets=[ZIP, NUPKG])
        repo = SqlAlchemyVersionRepository(test_db_session)

        repo.delete_version("1.0.0")

        assert test_db_session.query(Version).count() == 0
        assert test_db_session.query(Asset).count() == 0

    def test_snapshots_carry_storage_ids(self, test_db_session, sample_version, at):
        """Test records reference their rows."""
        row = sample_version(name="1.0.0", created_at=at(days=0), assets=[ZIP])
        repo = SqlAlchemyVersionRepository(test_db_session)

        version = repo.find_one("1.0.0")

        assert version.id == row.id
        assert version.assets[0].id == row.assets[0].id
