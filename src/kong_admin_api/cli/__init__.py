"""Command-line interface for kong_admin_api."""
