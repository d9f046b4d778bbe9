"""Constants used across the authentication package."""

DEFAULT_ROLE_NAME = "user"
DEFAULT_ROLE_DESCRIPTION = "Default user role"
ADMIN_ROLE_NAME = "admin"
ADMIN_ROLE_DESCRIPTION = "Reviews feedback and reports"
TOKEN_URL = "/auth/jwt/login"

__all__ = [
    "DEFAULT_ROLE_NAME",
    "DEFAULT_ROLE_DESCRIPTION",
    "ADMIN_ROLE_NAME",
    "ADMIN_ROLE_DESCRIPTION",
    "TOKEN_URL",
]
