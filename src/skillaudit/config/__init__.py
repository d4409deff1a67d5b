"""
Configuration module for skillaudit.

Uses pydantic-settings for environment variable and YAML loading.
"""

from skillaudit.config.settings import CONFIG_FILENAME, AuditSettings
from skillaudit.config.types import LimitsConfig, LoggingConfig

__all__ = ["CONFIG_FILENAME", "AuditSettings", "LimitsConfig", "LoggingConfig"]
