"""Clerk-backed AuthProvider. The Clerk user id (the JWT ``sub``) is the store principal."""

import logging
from typing import Any

import jwt
from clerk_backend_api import Clerk, authenticate_request
from clerk_backend_api.security.types import AuthenticateRequestOptions

from layover.errors import AuthenticationError, ErrorCode

from .interface import AuthProvider, AuthUser

logger = logging.getLogger(__name__)


class _BearerRequest:
    """Minimal request object carrying only the Authorization header Clerk reads."""

    def __init__(self, token: str):
        self.headers = {"Authorization": f"Bearer {token}"}


def _display_name(user: Any) -> str:
    full = " ".join(part for part in (user.first_name, user.last_name) if part)
    return full or user.username or ""


def _to_auth_user(user: Any) -> AuthUser:
    emails = user.email_addresses or []
    return AuthUser(
        user_id=user.id,
        email=emails[0].email_address if emails else "",
        name=_display_name(user),
        metadata={key: str(value) for key, value in (user.public_metadata or {}).items()},
    )


class ClerkAuthProvider(AuthProvider):
    def __init__(self, secret_key: str):
        self._secret_key = secret_key
        self._client = Clerk(bearer_auth=secret_key)

    def _principal(self, token: str) -> str:
        state = authenticate_request(_BearerRequest(token), AuthenticateRequestOptions(secret_key=self._secret_key))
        if not state.is_signed_in or state.payload is None:
            reason = state.message or "unknown"
            logger.info("Rejected session token: %s", reason)
            raise AuthenticationError(f"Token verification failed: {reason}", code=ErrorCode.INVALID_TOKEN)
        return str(state.payload["sub"])

    async def verify_token(self, token: str) -> AuthUser:
        try:
            principal = self._principal(token)
        except AuthenticationError:
            raise
        except Exception as e:
            raise AuthenticationError(f"Token verification failed: {e}", code=ErrorCode.AUTH_FAILED) from e
        return await self.get_user(principal)

    async def get_user(self, user_id: str) -> AuthUser:
        try:
            return _to_auth_user(self._client.users.get(user_id=user_id))
        except Exception as e:
            raise AuthenticationError(f"Failed to fetch user {user_id}: {e}", code=ErrorCode.AUTH_FAILED) from e

    async def decode_claims(self, token: str) -> dict[str, object]:
        """Unverified claims, for logging only. Never authorize on these."""
        try:
            return jwt.decode(token, options={"verify_signature": False})
        except jwt.InvalidTokenError as e:
            raise AuthenticationError(f"Invalid token: {e}", code=ErrorCode.INVALID_TOKEN) from e
