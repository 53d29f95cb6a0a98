"""Core EntityLens utilities.

This module exports configuration and logging helpers used throughout the
package.
"""

from entitylens.core.config import Settings, get_settings
from entitylens.core.logging import (
    LoggingContext,
    bind_correlation_id,
    clear_context,
    configure_logging,
    get_logger,
)

__all__ = [
    "Settings",
    "get_settings",
    "configure_logging",
    "get_logger",
    "LoggingContext",
    "bind_correlation_id",
    "clear_context",
]
