"""
Unit tests for update API schemas.
"""

from datetime import datetime, timedelta, timezone

from backend.src.schemas.update import (
    ReleaseNotesResponse,
    UpdateResponse,
    VersionResponse,
    format_pub_date,
)
from backend.src.services.update_service import UpdateDecision
from backend.src.services.version_repository import new_version_record


class TestFormatPubDate:
    """Tests for format_pub_date()."""

    def test_naive_utc(self):
        """Test naive timestamps are rendered as UTC with milliseconds."""
        assert format_pub_date(datetime(2026, 1, 5, 12, 0, 0)) == "2026-01-05T12:00:00.000Z"

    def test_aware_converted_to_utc(self):
        """Test aware timestamps are converted to UTC."""
        value = datetime(2026, 1, 5, 14, 30, 0, 250000, tzinfo=timezone(timedelta(hours=2)))

        assert format_pub_date(value) == "2026-01-05T12:30:00.250Z"


class TestResponses:
    """Tests for response construction."""

    def test_update_response_from_decision(self):
        decision = UpdateDecision(
            name="1.2.0",
            created_at=datetime(2026, 1, 5, 12, 0, 0),
            notes="## 1.2.0\nfix B",
            url="https://updates.example.com/download/version/1.2.0/osx_64?filetype=zip",
        )

        response = UpdateResponse.from_decision(decision)

        assert response.model_dump() == {
            "url": "https://updates.example.com/download/version/1.2.0/osx_64?filetype=zip",
            "name": "1.2.0",
            "notes": "## 1.2.0\nfix B",
            "pub_date": "2026-01-05T12:00:00.000Z",
        }

    def test_release_notes_response_without_notes(self):
        version = new_version_record(name="1.0.0", created_at=datetime(2026, 1, 1))

        response = ReleaseNotesResponse.from_record(version)

        assert response.notes is None
        assert response.pub_date == "2026-01-01T00:00:00.000Z"

    def test_version_response_lists_assets(self):
        version = new_version_record(
            name="1.0.0",
            created_at=datetime(2026, 1, 1),
            assets=[("osx_64", ".zip", "a.zip", 10, "H")],
        )

        response = VersionResponse.from_record(version)

        assert response.channel == "stable"
        assert response.assets[0].name == "a.zip"
        assert response.assets[0].size == 10
