# Configuration package
"""
Configuration package for paygate
Exports settings from settings.py for easy import
"""
from .settings import settings, Settings, validate_settings

__all__ = ["settings", "Settings", "validate_settings"]
