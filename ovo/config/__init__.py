"""
Configuration module for ovo.
"""

from ovo.config.settings import DEFAULT_TREND_WINDOW, Settings, load_settings

__all__ = ["DEFAULT_TREND_WINDOW", "Settings", "load_settings"]
