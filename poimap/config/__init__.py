"""
Configuration package for the POI map engine.
"""

from .settings import (
    Settings,
    Environment,
    LogLevel,
    FetchSettings,
    ViewportSettings,
    DeclutterSettings,
    DirectionsSettings,
    settings,
    get_settings,
    reload_settings,
)

__all__ = [
    "Settings",
    "Environment",
    "LogLevel",
    "FetchSettings",
    "ViewportSettings",
    "DeclutterSettings",
    "DirectionsSettings",
    "settings",
    "get_settings",
    "reload_settings",
]
