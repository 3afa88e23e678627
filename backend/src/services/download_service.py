"""
Download link construction and asset file resolution.

Builds the absolute download URLs handed to updating clients and resolves
where an asset's file lives inside the asset directory.

Link layouts:
- /download/version/<version>/<platform>?filetype=<ext>  (general updates)
- /download/<version>/<filename>                        (RELEASES entries)

File layout:
- <asset_dir>/<version>/<filename>
"""

import re
from pathlib import Path
from typing import Optional, Tuple
from urllib.parse import quote, urljoin


# Version string validation: no path traversal characters
VERSION_PATTERN = re.compile(r'^[a-zA-Z0-9][a-zA-Z0-9.\-+_]*$')

UPDATE_PACKAGE_FILETYPE = ".zip"


def _segment(value: str) -> str:
    return quote(value, safe="")


def build_update_download_url(
    base_url: str,
    version_name: str,
    platform: str,
    filetype: str = UPDATE_PACKAGE_FILETYPE,
) -> str:
    """
    Build the download URL of a version's update package.

    Args:
        base_url: Configured application origin (APP_URL)
        version_name: Target version name (e.g., "1.2.0")
        platform: Platform of the matching asset (e.g., "osx_64")
        filetype: Package filetype pinned by the query string (default: ".zip")

    Returns:
        Absolute URL, e.g.
        "https://updates.example.com/download/version/1.2.0/osx_64?filetype=zip"
    """
    path = f"/download/version/{_segment(version_name)}/{_segment(platform)}"
    return f"{urljoin(base_url, path)}?filetype={filetype.lstrip('.')}"


def build_asset_download_url(base_url: str, version_name: str, filename: str) -> str:
    """
    Build the direct download URL of one asset file.

    Args:
        base_url: Configured application origin (APP_URL)
        version_name: Owning version name
        filename: Stored asset filename

    Returns:
        Absolute URL, e.g.
        "https://updates.example.com/download/1.2.0/MyApp-1.2.0-full.nupkg"
    """
    path = f"/download/{_segment(version_name)}/{_segment(filename)}"
    return urljoin(base_url, path)


def resolve_asset_path(
    asset_dir: str,
    version: str,
    filename: str,
) -> Tuple[Optional[Path], Optional[str]]:
    """
    Resolve and validate an asset file path within the asset directory.

    Performs path traversal prevention by:
    1. Validating the version string format
    2. Validating the filename (no path separators)
    3. Resolving the absolute path and verifying it's within asset_dir

    The file itself is not required to exist.

    Args:
        asset_dir: Path to the asset directory
        version: Version name (e.g., "1.0.0")
        filename: Asset filename (e.g., "MyApp-1.0.0-mac.zip")

    Returns:
        Tuple of (resolved_path, error_message). resolved_path is None on error.
    """
    if not version or not VERSION_PATTERN.match(version):
        return None, "Invalid version format"

    if not filename or '/' in filename or '\\' in filename or filename in ('.', '..'):
        return None, "Invalid filename"

    base_path = Path(asset_dir).resolve()
    file_path = (base_path / version / filename).resolve()

    # e.g. version=".." must not escape the asset directory
    if base_path not in file_path.parents:
        return None, "Invalid file path"

    return file_path, None
