"""Version information for kong_admin_api."""

__version__ = "0.1.0"
