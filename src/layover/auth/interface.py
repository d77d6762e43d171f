"""Identity is an external collaborator: all the itinerary needs from it is a principal."""

from abc import ABC, abstractmethod

from pydantic import BaseModel

from layover.errors import AuthenticationError, ErrorCode


class AuthUser(BaseModel):
    user_id: str  # the principal every store call is scoped by
    email: str
    name: str
    metadata: dict[str, str] = {}


class AuthProvider(ABC):
    @abstractmethod
    async def verify_token(self, token: str) -> AuthUser:
        """Verify a session token and resolve the signed-in user."""
        ...

    @abstractmethod
    async def get_user(self, user_id: str) -> AuthUser: ...

    @abstractmethod
    async def decode_claims(self, token: str) -> dict[str, object]: ...


def get_auth_provider() -> AuthProvider:
    """The configured provider. Without a Clerk secret no owner request can be verified."""
    from layover.config import get_config

    secret_key = get_config().clerk_secret_key
    if not secret_key:
        raise AuthenticationError("CLERK_SECRET_KEY not configured", code=ErrorCode.AUTH_FAILED)

    from layover.auth.clerk_provider import ClerkAuthProvider

    return ClerkAuthProvider(secret_key=secret_key)
