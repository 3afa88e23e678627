"""
Unit tests for platform normalization.

Tests:
- Canonical platform detection from updater tokens and filenames
- Architecture defaults per family
- Expansion into historical aliases
- Unknown tokens fail open
"""

import pytest

from backend.src.services.exceptions import ValidationError
from backend.src.services.platform_service import (
    CANONICAL_PLATFORMS,
    LINUX_32,
    LINUX_64,
    OSX_64,
    OSX_ARM64,
    PLATFORM_ALIASES,
    WINDOWS_32,
    WINDOWS_64,
    detect,
    normalize,
)


class TestDetect:
    """Tests for detect()."""

    @pytest.mark.parametrize("token,expected", [
        ("darwin", OSX_64),
        ("osx", OSX_64),
        ("darwin_x64", OSX_64),
        ("darwin_arm64", OSX_ARM64),
        ("osx_arm64", OSX_ARM64),
        ("MyApp-1.0.0.dmg", OSX_64),
        ("win32", WINDOWS_32),
        ("windows", WINDOWS_32),
        ("win64", WINDOWS_64),
        ("win32_x64", WINDOWS_64),
        ("MyApp-1.0.0-full.nupkg", WINDOWS_32),
        ("RELEASES", WINDOWS_32),
        ("linux", LINUX_64),
        ("linux_ia32", LINUX_32),
        ("linux_x64", LINUX_64),
        ("myapp_1.0.0_amd64.deb", LINUX_64),
    ])
    def test_detects_canonical_platform(self, token, expected):
        """Test tokens map to their canonical identifier."""
        assert detect(token) == expected

    def test_darwin_is_not_windows(self):
        """Test 'darwin' is detected as macOS even though it contains 'win'."""
        assert detect("darwin").startswith("osx")

    def test_arm64_outside_macos_is_64_bit(self):
        """Test arm64 builds on other families map to the 64-bit identifier."""
        assert detect("linux_arm64") == LINUX_64
        assert detect("win_arm64") == WINDOWS_64

    def test_case_and_whitespace_insensitive(self):
        """Test detection ignores case and surrounding whitespace."""
        assert detect("  Darwin ") == OSX_64

    def test_unknown_family(self):
        """Test tokens naming no known family return None."""
        assert detect("freebsd") is None

    @pytest.mark.parametrize("canonical", CANONICAL_PLATFORMS)
    def test_canonical_identifiers_detect_to_themselves(self, canonical):
        """Test every canonical identifier is a fixed point."""
        assert detect(canonical) == canonical

    @pytest.mark.parametrize("canonical,alias", [
        (canonical, alias)
        for canonical, aliases in PLATFORM_ALIASES.items()
        for alias in sorted(aliases)
    ])
    def test_aliases_detect_to_their_canonical_identifier(self, canonical, alias):
        """Test every historical alias maps back to its canonical identifier."""
        assert detect(alias) == canonical


class TestNormalize:
    """Tests for normalize()."""

    def test_expands_to_canonical_and_aliases(self):
        """Test a recognized token expands to canonical plus aliases."""
        assert normalize("darwin") == frozenset({"osx_64", "osx", "darwin", "darwin_x64"})

    def test_windows_32_expansion(self):
        """Test win32 matches assets stored under older Windows spellings."""
        assert normalize("win32") == frozenset({"windows_32", "windows", "win32"})

    def test_expansion_contains_canonical(self):
        """Test the canonical identifier is always part of the expansion."""
        for canonical in CANONICAL_PLATFORMS:
            assert canonical in normalize(canonical)

    def test_unknown_token_normalizes_to_itself(self):
        """Test unrecognized platforms fail open to exact matching."""
        assert normalize("freebsd") == frozenset({"freebsd"})

    def test_never_empty(self):
        """Test the result is never empty."""
        assert normalize("x")

    @pytest.mark.parametrize("raw", ["", "   "])
    def test_empty_token_rejected(self, raw):
        """Test empty platforms raise ValidationError."""
        with pytest.raises(ValidationError) as exc_info:
            normalize(raw)

        assert exc_info.value.field == "platform"
