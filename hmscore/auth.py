"""
Stable import path for authentication.

Settings and the router import ``TokenAuthentication`` and the auth views
from here so their implementation modules can move without touching
configuration.
"""

from .authentication import TokenAuthentication
from .auth_views import (
    jwt_logout_view,
    jwt_refresh_view,
    login_view,
    user_payload,
)

__all__ = [
    'TokenAuthentication',
    'login_view',
    'jwt_refresh_view',
    'jwt_logout_view',
    'user_payload',
]
