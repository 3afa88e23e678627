"""
Release notes aggregation across skipped versions.

Clients that skip several releases see the notes of every release they
skipped, newest first, one Markdown section per release.
"""

from typing import Iterable

from backend.src.services.version_repository import VersionRecord


SECTION_SEPARATOR = "\n\n"


def format_release_notes_section(version: VersionRecord) -> str:
    """Format one release's notes as a level-2 Markdown section."""
    return f"## {version.name}\n{version.notes}"


def aggregate_release_notes(versions: Iterable[VersionRecord]) -> str:
    """
    Fold versions into a single Markdown release notes text.

    Args:
        versions: Versions in newest-first order

    Returns:
        One "## <name>" section per version with non-empty notes, in input
        order, separated by one blank line. Empty string if no version has
        notes.

    Example:
        >>> aggregate_release_notes([v120, v110])
        '## 1.2.0\\nfix B\\n\\n## 1.1.0\\nfix A'
    """
    return SECTION_SEPARATOR.join(
        format_release_notes_section(version)
        for version in versions
        if version.notes
    )
