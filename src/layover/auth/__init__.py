"""Authentication abstraction layer."""

from layover.auth.clerk_provider import ClerkAuthProvider
from layover.auth.interface import AuthProvider, AuthUser, get_auth_provider

__all__ = ["AuthProvider", "AuthUser", "ClerkAuthProvider", "get_auth_provider"]
