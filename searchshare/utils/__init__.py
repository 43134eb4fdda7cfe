"""Utility modules for SearchShare."""

from .config import EngineSettings, get_settings

__all__ = [
    "EngineSettings",
    "get_settings",
]
