"""External system integrations for kong_admin_api."""
