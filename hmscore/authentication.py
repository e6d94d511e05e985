"""
Token authentication for the legacy ``Authorization: Token <key>`` header.

Kept apart from the auth views so DRF can import the class from settings
without pulling in views, serializers or models.  simplejwt's
``JWTAuthentication`` is listed after it in ``REST_FRAMEWORK`` and handles
``Bearer`` tokens.
"""
from __future__ import annotations

from rest_framework import authentication, exceptions


class TokenAuthentication(authentication.TokenAuthentication):
    keyword = 'Token'

    def authenticate_credentials(self, key):
        user, token = super().authenticate_credentials(key)
        # role-less accounts cannot reach any gated view
        if not getattr(user, 'role', None):
            raise exceptions.AuthenticationFailed('User has no role.')
        return user, token
