"""HTTP API Lambda authorizer: validates the Clerk JWT on owner-mode routes.

The share route is deployed without this authorizer; it needs no identity.
"""

import asyncio
import logging
from typing import Any

from layover.auth import AuthProvider, AuthUser, get_auth_provider
from layover.errors import AuthenticationError

logger = logging.getLogger(__name__)


def _bearer_token(event: dict[str, Any]) -> str:
    headers = {k.lower(): v for k, v in (event.get("headers") or {}).items()}
    scheme, _, token = headers["authorization"].partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise KeyError("authorization")
    return token


def handler(event: dict[str, Any], context: object) -> dict[str, Any]:
    # AuthProvider methods are async; asyncio.run() bridges them into this sync handler.
    resource = event.get("routeArn") or event.get("methodArn", "")
    try:
        token = _bearer_token(event)
        auth_user = asyncio.run(_verify(get_auth_provider(), token))
        return _allow_policy(resource, auth_user.user_id)
    except (KeyError, AuthenticationError):
        return _deny_policy(resource)


async def _verify(auth_provider: AuthProvider, token: str) -> AuthUser:
    try:
        return await auth_provider.verify_token(token)
    except AuthenticationError as e:
        logger.info("Denied token for subject %s: %s", await _unverified_subject(auth_provider, token), e.message)
        raise


async def _unverified_subject(auth_provider: AuthProvider, token: str) -> str:
    """The token's ``sub`` claim, read without verification. For logs only."""
    try:
        claims = await auth_provider.decode_claims(token)
    except AuthenticationError:
        return "<undecodable>"
    return str(claims.get("sub", "<none>"))

def _allow_policy(resource: str, principal: str) -> dict[str, Any]:
    return {
        "principalId": principal,
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [{"Action": "execute-api:Invoke", "Effect": "Allow", "Resource": resource}],
        },
        "context": {"principalId": principal},
    }


def _deny_policy(resource: str) -> dict[str, Any]:
    return {
        "principalId": "unauthorized",
        "policyDocument": {
            "Version": "2012-10-17",
            "Statement": [{"Action": "execute-api:Invoke", "Effect": "Deny", "Resource": resource}],
        },
    }
