"""Clerk Backend API integration used to write sync metadata back to Clerk users."""

import asyncio
import logging
from typing import Any, Dict, Optional

import requests

from app.config.settings import settings
from app.core.exceptions import ConfigurationError, ExternalServiceError

logger = logging.getLogger(__name__)


class ClerkClient:
    """Minimal Clerk Backend API client."""

    def __init__(
        self,
        secret_key: Optional[str] = None,
        base_url: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialize the Clerk client.

        Args:
            secret_key: Clerk secret key (sk_live_... / sk_test_...)
            base_url: Clerk Backend API base URL
            timeout: Per-request timeout in seconds
        """
        self.secret_key = secret_key if secret_key is not None else settings.clerk_secret_key
        self.base_url = (base_url or settings.clerk_api_url).rstrip("/")
        self.timeout = timeout or settings.clerk_api_timeout

    def _headers(self) -> Dict[str, str]:
        if not self.secret_key:
            raise ConfigurationError("CLERK_SECRET_KEY not configured")
        return {
            "Authorization": f"Bearer {self.secret_key}",
            "Content-Type": "application/json",
        }

    def _patch_metadata(self, clerk_id: str, body: Dict[str, Any]) -> Dict[str, Any]:
        url = f"{self.base_url}/users/{clerk_id}/metadata"
        response = requests.patch(url, json=body, headers=self._headers(), timeout=self.timeout)
        response.raise_for_status()
        return response.json()

    async def update_user_metadata(
        self,
        clerk_id: str,
        public_metadata: Optional[Dict[str, Any]] = None,
        private_metadata: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """
        Merge metadata into a Clerk user.

        Args:
            clerk_id: Clerk user ID
            public_metadata: Keys to merge into the user's public metadata
            private_metadata: Keys to merge into the user's private metadata

        Returns:
            The updated Clerk user as returned by the API

        Raises:
            ConfigurationError: If no secret key is configured
            ExternalServiceError: If the Clerk API call fails
        """
        body: Dict[str, Any] = {}
        if public_metadata is not None:
            body["public_metadata"] = public_metadata
        if private_metadata is not None:
            body["private_metadata"] = private_metadata

        try:
            result = await asyncio.to_thread(self._patch_metadata, clerk_id, body)
        except ConfigurationError:
            raise
        except requests.RequestException as e:
            logger.error(f"Clerk metadata update failed for {clerk_id}: {e}")
            raise ExternalServiceError(service_name="Clerk", original_message=str(e))

        logger.info(f"Updated Clerk metadata for {clerk_id}: {sorted(body.keys())}")
        return result
