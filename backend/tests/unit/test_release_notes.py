"""
Unit tests for release notes aggregation.
"""

from datetime import datetime

from backend.src.services.release_notes import (
    aggregate_release_notes,
    format_release_notes_section,
)
from backend.src.services.version_repository import new_version_record


def _version(name, notes):
    return new_version_record(name=name, created_at=datetime(2026, 1, 1), notes=notes)


class TestAggregateReleaseNotes:
    """Tests for aggregate_release_notes()."""

    def test_sections_in_input_order(self):
        """Test one section per version, newest first, separated by a blank line."""
        notes = aggregate_release_notes([
            _version("1.2.0", "fix B"),
            _version("1.1.0", "fix A"),
        ])

        assert notes == "## 1.2.0\nfix B\n\n## 1.1.0\nfix A"

    def test_versions_without_notes_are_skipped(self):
        """Test empty and missing notes produce no section."""
        notes = aggregate_release_notes([
            _version("1.3.0", None),
            _version("1.2.0", ""),
            _version("1.1.0", "fix A"),
        ])

        assert notes == "## 1.1.0\nfix A"

    def test_no_notes_gives_empty_string(self):
        """Test the aggregate of versions without notes is empty."""
        assert aggregate_release_notes([_version("1.0.0", None)]) == ""
        assert aggregate_release_notes([]) == ""

    def test_multiline_notes_kept_verbatim(self):
        """Test notes bodies are not reformatted."""
        section = format_release_notes_section(_version("2.0.0", "- one\n- two"))

        assert section == "## 2.0.0\n- one\n- two"
