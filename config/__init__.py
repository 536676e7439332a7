"""
Configuration module for Prompt Exporter.
"""
from .constants import *
from .logging_config import setup_logger, get_logger, set_debug, logger
from .settings import Settings, get_settings

__all__ = [
    # Logging
    'setup_logger',
    'get_logger',
    'set_debug',
    'logger',
    # Settings
    'Settings',
    'get_settings',
    # Constants (all exported via *)
]
