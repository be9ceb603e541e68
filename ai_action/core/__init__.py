"""
Core utilities and configuration for ai_action.

This package provides settings, logging configuration and optional
monitoring shared by the rest of the package.
"""

from ai_action.core.config import Settings, get_settings, settings
from ai_action.core.logging_config import get_logger, setup_logging

__all__ = ["Settings", "get_logger", "get_settings", "settings", "setup_logging"]
