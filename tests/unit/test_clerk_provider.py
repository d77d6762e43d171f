from unittest.mock import MagicMock, patch

import jwt
import pytest

from layover.auth.clerk_provider import ClerkAuthProvider
from layover.auth.interface import AuthUser
from layover.errors import AuthenticationError, ErrorCode


@pytest.fixture
def mock_clerk_user():
    user = MagicMock()
    user.id = "user_123"
    user.first_name = "Jane"
    user.last_name = "Doe"
    user.username = "janedoe"
    user.email_addresses = [MagicMock(email_address="jane@example.com")]
    user.public_metadata = {"home_airport": "LAX"}
    return user


@pytest.mark.asyncio
async def test_verify_token_valid(mock_clerk_user):
    with (
        patch("layover.auth.clerk_provider.Clerk") as mock_clerk_class,
        patch("layover.auth.clerk_provider.authenticate_request") as mock_authenticate,
    ):
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client
        mock_authenticate.return_value = MagicMock(is_signed_in=True, payload={"sub": "user_123"})

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.verify_token("signed_jwt")

        assert isinstance(result, AuthUser)
        assert result.user_id == "user_123"
        assert result.email == "jane@example.com"
        assert result.name == "Jane Doe"
        mock_client.users.get.assert_called_once_with(user_id="user_123")


@pytest.mark.asyncio
async def test_verify_token_signed_out():
    with (
        patch("layover.auth.clerk_provider.Clerk"),
        patch("layover.auth.clerk_provider.authenticate_request") as mock_authenticate,
    ):
        mock_authenticate.return_value = MagicMock(is_signed_in=False, payload=None, message="token-expired")
        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="token-expired") as exc_info:
            await provider.verify_token("expired_jwt")
        assert exc_info.value.code == ErrorCode.INVALID_TOKEN


@pytest.mark.asyncio
async def test_verify_token_sdk_failure_is_wrapped():
    with (
        patch("layover.auth.clerk_provider.Clerk"),
        patch("layover.auth.clerk_provider.authenticate_request", side_effect=RuntimeError("jwks fetch failed")),
    ):
        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="Token verification failed"):
            await provider.verify_token("whatever")


@pytest.mark.asyncio
async def test_get_user_success(mock_clerk_user):
    with patch("layover.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.get_user("user_123")

        assert result.user_id == "user_123"
        assert result.metadata["home_airport"] == "LAX"


@pytest.mark.asyncio
async def test_get_user_no_email(mock_clerk_user):
    mock_clerk_user.email_addresses = []

    with patch("layover.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.get_user("user_123")

        assert result.email == ""


@pytest.mark.asyncio
async def test_get_user_no_name(mock_clerk_user):
    mock_clerk_user.first_name = None
    mock_clerk_user.last_name = None

    with patch("layover.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.return_value = mock_clerk_user
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        result = await provider.get_user("user_123")

        assert result.name == "janedoe"


@pytest.mark.asyncio
async def test_get_user_api_error():
    with patch("layover.auth.clerk_provider.Clerk") as mock_clerk_class:
        mock_client = MagicMock()
        mock_client.users.get.side_effect = Exception("API error")
        mock_clerk_class.return_value = mock_client

        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="Failed to fetch user"):
            await provider.get_user("user_123")


@pytest.mark.asyncio
async def test_decode_claims_valid():
    with patch("layover.auth.clerk_provider.Clerk"):
        provider = ClerkAuthProvider(secret_key="sk_test_mock")
        token = jwt.encode({"sub": "user_123", "exp": 9999999999}, "secret", algorithm="HS256")

        result = await provider.decode_claims(token)

        assert result["sub"] == "user_123"


@pytest.mark.asyncio
async def test_decode_claims_invalid():
    with patch("layover.auth.clerk_provider.Clerk"):
        provider = ClerkAuthProvider(secret_key="sk_test_mock")

        with pytest.raises(AuthenticationError, match="Invalid token"):
            await provider.decode_claims("not_a_jwt")
