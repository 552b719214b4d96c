"""Logging configuration for kong_admin_api."""

from kong_admin_api.logging.config import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger"]
