"""
Unit tests for the Clerk Backend API client.
"""
from unittest.mock import MagicMock, patch

import pytest
import requests

from app.core.exceptions import ConfigurationError, ExternalServiceError
from app.integrations.clerk_client import ClerkClient


class TestClerkClient:
    @pytest.fixture
    def clerk_client(self):
        return ClerkClient(secret_key="sk_test_abc123", base_url="https://api.clerk.test/v1/", timeout=5)

    @pytest.mark.asyncio
    @patch("app.integrations.clerk_client.requests.patch")
    async def test_update_user_metadata(self, mock_patch, clerk_client):
        mock_response = MagicMock()
        mock_response.json.return_value = {"id": "user_123", "public_metadata": {"userId": "abc"}}
        mock_patch.return_value = mock_response

        result = await clerk_client.update_user_metadata("user_123", public_metadata={"userId": "abc"})

        assert result["public_metadata"] == {"userId": "abc"}
        mock_patch.assert_called_once_with(
            "https://api.clerk.test/v1/users/user_123/metadata",
            json={"public_metadata": {"userId": "abc"}},
            headers={"Authorization": "Bearer sk_test_abc123", "Content-Type": "application/json"},
            timeout=5,
        )
        mock_response.raise_for_status.assert_called_once()

    @pytest.mark.asyncio
    @patch("app.integrations.clerk_client.requests.patch")
    async def test_update_private_metadata(self, mock_patch, clerk_client):
        mock_patch.return_value = MagicMock(json=MagicMock(return_value={}))

        await clerk_client.update_user_metadata("user_123", private_metadata={"synced": True})

        assert mock_patch.call_args.kwargs["json"] == {"private_metadata": {"synced": True}}

    @pytest.mark.asyncio
    @patch("app.integrations.clerk_client.requests.patch")
    async def test_http_error_raises_external_service_error(self, mock_patch, clerk_client):
        mock_response = MagicMock()
        mock_response.raise_for_status.side_effect = requests.HTTPError("404 Client Error: Not Found")
        mock_patch.return_value = mock_response

        with pytest.raises(ExternalServiceError, match="Clerk"):
            await clerk_client.update_user_metadata("user_missing", public_metadata={"userId": "abc"})

    @pytest.mark.asyncio
    @patch("app.integrations.clerk_client.requests.patch")
    async def test_connection_error_raises_external_service_error(self, mock_patch, clerk_client):
        mock_patch.side_effect = requests.ConnectionError("connection refused")

        with pytest.raises(ExternalServiceError):
            await clerk_client.update_user_metadata("user_123", public_metadata={"userId": "abc"})

    @pytest.mark.asyncio
    @patch("app.integrations.clerk_client.requests.patch")
    async def test_missing_secret_key(self, mock_patch):
        with patch("app.integrations.clerk_client.settings") as mock_settings:
            mock_settings.clerk_secret_key = None
            mock_settings.clerk_api_url = "https://api.clerk.test/v1"
            mock_settings.clerk_api_timeout = 10
            client = ClerkClient()

        with pytest.raises(ConfigurationError, match="CLERK_SECRET_KEY"):
            await client.update_user_metadata("user_123", public_metadata={"userId": "abc"})

        mock_patch.assert_not_called()
