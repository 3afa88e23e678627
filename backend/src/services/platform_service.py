"""
Platform normalization for update requests.

Maps a free-form platform token (an updater's platform string, a user agent
fragment or a filename) to the set of platform identifiers a stored asset
may carry for the request to match it.

Design:
- Six canonical identifiers: <family>_<arch>
- Each canonical identifier also matches the historical spellings older
  releases were stored under (e.g. plain "osx" before architectures were
  tracked)
- Unrecognized tokens fail open: they normalize to themselves, so new
  platform strings degrade to exact matching instead of an error
"""

from typing import Dict, FrozenSet, Optional

from backend.src.services.exceptions import ValidationError


WINDOWS_32 = "windows_32"
WINDOWS_64 = "windows_64"
OSX_64 = "osx_64"
OSX_ARM64 = "osx_arm64"
LINUX_32 = "linux_32"
LINUX_64 = "linux_64"

CANONICAL_PLATFORMS = (
    WINDOWS_32,
    WINDOWS_64,
    OSX_64,
    OSX_ARM64,
    LINUX_32,
    LINUX_64,
)

# Historical identifiers still present on older stored assets
PLATFORM_ALIASES: Dict[str, FrozenSet[str]] = {
    WINDOWS_32: frozenset({"windows", "win32"}),
    WINDOWS_64: frozenset({"win64", "win32_x64"}),
    OSX_64: frozenset({"osx", "darwin", "darwin_x64"}),
    OSX_ARM64: frozenset({"darwin_arm64"}),
    LINUX_32: frozenset({"linux_ia32"}),
    LINUX_64: frozenset({"linux", "linux_x64"}),
}

# Family hints are checked in this order; "darwin" contains "win"
_OSX_HINTS = ("darwin", "mac", "osx")
_OSX_SUFFIXES = (".dmg",)
_WINDOWS_HINTS = ("win",)
_WINDOWS_SUFFIXES = (".exe", ".nupkg")
_LINUX_HINTS = ("linux", "ubuntu")
_LINUX_SUFFIXES = (".deb", ".rpm", ".appimage", ".tar.gz")

_ARM64_HINTS = ("arm64", "aarch64")
_64_HINTS = ("64",)
_32_HINTS = ("32", "i386", "x86")

_DEFAULT_ARCH = {
    "osx": "64",
    "windows": "32",
    "linux": "64",
}


def _detect_family(token: str) -> Optional[str]:
    if any(hint in token for hint in _OSX_HINTS) or token.endswith(_OSX_SUFFIXES):
        return "osx"
    if (
        token == "releases"
        or any(hint in token for hint in _WINDOWS_HINTS)
        or token.endswith(_WINDOWS_SUFFIXES)
    ):
        return "windows"
    if any(hint in token for hint in _LINUX_HINTS) or token.endswith(_LINUX_SUFFIXES):
        return "linux"
    return None


def _detect_arch(token: str, family: str) -> str:
    if any(hint in token for hint in _ARM64_HINTS):
        # Only macOS ships separate arm64 builds; elsewhere arm64 means 64-bit
        return "arm64" if family == "osx" else "64"
    if any(hint in token for hint in _64_HINTS):
        return "64"
    if any(hint in token for hint in _32_HINTS):
        return "32"
    return _DEFAULT_ARCH[family]


def detect(raw_platform: str) -> Optional[str]:
    """
    Detect the canonical platform identifier for a token.

    Args:
        raw_platform: Free-form platform token (e.g., "darwin", "win32",
            "osx_arm64", "MyApp-1.0.0-full.nupkg")

    Returns:
        Canonical identifier (e.g., "osx_64"), or None if the token names
        no known platform family
    """
    token = raw_platform.strip().lower()
    family = _detect_family(token)
    if family is None:
        return None
    return f"{family}_{_detect_arch(token, family)}"


def normalize(raw_platform: str) -> FrozenSet[str]:
    """
    Expand a platform token into every identifier a matching asset may carry.

    Args:
        raw_platform: Non-empty free-form platform token

    Returns:
        Non-empty frozenset of platform identifiers. For a recognized token
        this is the canonical identifier plus its historical aliases; for
        an unrecognized token it is the token itself.

    Raises:
        ValidationError: If raw_platform is empty

    Example:
        >>> sorted(normalize("darwin"))
        ['darwin', 'darwin_x64', 'osx', 'osx_64']
        >>> normalize("freebsd")
        frozenset({'freebsd'})
    """
    if not raw_platform or not raw_platform.strip():
        raise ValidationError("Platform is required", field="platform")

    canonical = detect(raw_platform)
    if canonical is None:
        return frozenset({raw_platform})

    return frozenset({canonical}) | PLATFORM_ALIASES.get(canonical, frozenset())
