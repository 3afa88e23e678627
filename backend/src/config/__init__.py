"""
Configuration module for the release server backend.

Provides centralized configuration for:
- Download link origin
- Release asset storage location
- Default release channel
"""

from backend.src.config.settings import AppSettings, get_settings

__all__ = [
    "AppSettings",
    "get_settings",
]
