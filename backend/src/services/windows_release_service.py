"""
RELEASES manifest generation for Squirrel.Windows.

The Squirrel.Windows updater downloads a plain-text file named RELEASES
listing the installable packages of the latest release:

    <hash> <url> <size>\\n

one line per package, in the order the packages were attached to the
release. The updater parses the file strictly, so a line with a missing
field is rejected here instead of being emitted.
"""

from typing import Iterable, List

from backend.src.services.exceptions import DataIntegrityError
from backend.src.services.version_repository import AssetRecord


RELEASES_FILENAME = "RELEASES"
RELEASES_MEDIA_TYPE = "application/octet-stream"


def format_release_entry(asset: AssetRecord) -> str:
    """
    Format one RELEASES line for an asset.

    Args:
        asset: Asset whose name already holds the full download URL

    Returns:
        "hash name size" followed by a newline

    Raises:
        DataIntegrityError: If hash, name or size is missing
    """
    if not asset.hash:
        raise DataIntegrityError(
            f"Asset '{asset.name}' of version '{asset.version_name}' has no hash",
            field="hash",
        )
    if not asset.name:
        raise DataIntegrityError(
            f"An asset of version '{asset.version_name}' has no name",
            field="name",
        )
    if asset.size is None:
        raise DataIntegrityError(
            f"Asset '{asset.name}' of version '{asset.version_name}' has no size",
            field="size",
        )
    return f"{asset.hash} {asset.name} {asset.size}\n"


def generate_releases_file(assets: Iterable[AssetRecord]) -> bytes:
    """
    Serialize assets into the RELEASES manifest.

    Args:
        assets: Assets in attachment order

    Returns:
        UTF-8 encoded manifest, one newline-terminated line per asset

    Raises:
        DataIntegrityError: If any asset lacks hash, name or size
    """
    lines: List[str] = [format_release_entry(asset) for asset in assets]
    return "".join(lines).encode("utf-8")
