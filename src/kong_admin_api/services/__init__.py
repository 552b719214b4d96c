"""Service layer for kong_admin_api."""
