"""
Clerk webhook handler: Svix signature verification and user lifecycle sync.
"""

import base64
import binascii
import hashlib
import hmac
import logging
import time
from typing import List, Mapping, Optional

from pydantic import ValidationError

from app.core.exceptions import BadRequestError, ConfigurationError, DatabaseError, UserSyncError
from app.integrations.clerk_client import ClerkClient
from app.models.user import UserSyncRecord, UserUpdate
from app.repositories.user_repository import UserRepository
from app.schemas.clerk_event import ClerkEventType, ClerkUserData, ClerkWebhookEvent
from app.webhooks.base import WebhookHandler, WebhookPayloadError, WebhookResult, WebhookVerificationError

logger = logging.getLogger(__name__)

SVIX_ID_HEADER = "svix-id"
SVIX_TIMESTAMP_HEADER = "svix-timestamp"
SVIX_SIGNATURE_HEADER = "svix-signature"
SVIX_HEADERS = (SVIX_ID_HEADER, SVIX_TIMESTAMP_HEADER, SVIX_SIGNATURE_HEADER)

SECRET_PREFIX = "whsec_"
SIGNATURE_VERSION = "v1"
DEFAULT_TOLERANCE_SECONDS = 300


class ClerkWebhookHandler(WebhookHandler):
    """Handler for Clerk user lifecycle webhooks delivered through Svix."""

    def __init__(
        self,
        webhook_secret: str,
        user_repository: UserRepository,
        clerk_client: ClerkClient,
        tolerance_seconds: int = DEFAULT_TOLERANCE_SECONDS,
    ):
        """
        Initialize Clerk webhook handler.

        Args:
            webhook_secret: Svix signing secret (whsec_...)
            user_repository: Store receiving the user mutations
            clerk_client: Clerk API client for the metadata write-back
            tolerance_seconds: Allowed distance between svix-timestamp and now

        Raises:
            ConfigurationError: If the secret is empty or not valid base64
        """
        if not webhook_secret:
            raise ConfigurationError("WEBHOOK_SECRET not configured")

        self._signing_key = self._decode_secret(webhook_secret)
        self.user_repository = user_repository
        self.clerk_client = clerk_client
        self.tolerance_seconds = tolerance_seconds

    @staticmethod
    def _decode_secret(secret: str) -> bytes:
        if secret.startswith(SECRET_PREFIX):
            secret = secret[len(SECRET_PREFIX):]
        try:
            return base64.b64decode(secret, validate=True)
        except (binascii.Error, ValueError):
            raise ConfigurationError("WEBHOOK_SECRET is not a valid Svix signing secret")

    def sign(self, msg_id: str, timestamp: int, payload: bytes) -> str:
        """
        Compute the versioned Svix signature for a delivery.

        Args:
            msg_id: Value of the svix-id header
            timestamp: Unix timestamp in seconds (svix-timestamp)
            payload: Raw body

        Returns:
            Signature in "v1,<base64>" form
        """
        to_sign = f"{msg_id}.{timestamp}.".encode() + payload
        digest = hmac.new(self._signing_key, to_sign, hashlib.sha256).digest()
        return f"{SIGNATURE_VERSION},{base64.b64encode(digest).decode()}"

    def _verify_timestamp(self, timestamp_header: str) -> int:
        try:
            timestamp = int(timestamp_header)
        except ValueError:
            raise WebhookVerificationError("Invalid svix-timestamp header")

        now = int(time.time())
        if timestamp < now - self.tolerance_seconds:
            raise WebhookVerificationError("Message timestamp too old")
        if timestamp > now + self.tolerance_seconds:
            raise WebhookVerificationError("Message timestamp too new")
        return timestamp

    async def verify_signature(self, payload: bytes, headers: Mapping[str, str]) -> ClerkWebhookEvent:
        """
        Verify a Svix signature over the raw body and parse the event.

        Args:
            payload: Raw request body, exactly as received
            headers: Mapping holding svix-id, svix-timestamp and svix-signature

        Returns:
            The verified Clerk event

        Raises:
            WebhookVerificationError: If headers are missing, the timestamp is
                outside the tolerance window or no signature matches
            WebhookPayloadError: If the verified body is not a Clerk event
        """
        msg_id = headers.get(SVIX_ID_HEADER)
        timestamp_header = headers.get(SVIX_TIMESTAMP_HEADER)
        signature_header = headers.get(SVIX_SIGNATURE_HEADER)
        if not msg_id or not timestamp_header or not signature_header:
            raise WebhookVerificationError("Missing Svix headers")

        timestamp = self._verify_timestamp(timestamp_header)
        expected = self.sign(msg_id, timestamp, payload).partition(",")[2].encode()

        # The header may carry several space-separated "version,signature" entries
        for versioned in signature_header.split():
            version, _, signature = versioned.partition(",")
            if version != SIGNATURE_VERSION:
                continue
            if hmac.compare_digest(expected, signature.encode()):
                break
        else:
            logger.error(f"Signature verification failed for delivery {msg_id}")
            raise WebhookVerificationError("No matching signature found")

        try:
            event = ClerkWebhookEvent.model_validate_json(payload)
        except (ValidationError, ValueError) as e:
            logger.error(f"Verified delivery {msg_id} is not a valid Clerk event: {e}")
            raise WebhookPayloadError("Invalid webhook payload")

        logger.info(f"Clerk webhook {msg_id} verified successfully")
        return event

    async def process_event(self, event: ClerkWebhookEvent) -> WebhookResult:
        """
        Route a verified event to its user mutation.

        Args:
            event: Verified Clerk event

        Returns:
            WebhookResult carrying the affected user, or an acknowledged no-op
            for event types this service does not sync

        Raises:
            BadRequestError: If a user event carries an invalid user object or
                misses fields its type requires
            UserSyncError: If the user store or Clerk API call fails
        """
        event_type = event.type
        logger.info(f"Processing Clerk {event_type} event")

        if event_type == ClerkEventType.USER_CREATED.value:
            return await self._process_user_created(self._parse_user_data(event))
        elif event_type == ClerkEventType.USER_UPDATED.value:
            return await self._process_user_updated(self._parse_user_data(event))
        elif event_type == ClerkEventType.USER_DELETED.value:
            return await self._process_user_deleted(self._parse_user_data(event))

        # Other event types are acknowledged without looking at data
        logger.info(f"Webhook with ID {event.data_id} and type {event_type}")
        logger.debug(f"Webhook body: {event.model_dump_json()}")
        return WebhookResult(event_type=event_type, acknowledged=True)

    @staticmethod
    def _parse_user_data(event: ClerkWebhookEvent) -> ClerkUserData:
        try:
            return event.user_data()
        except ValidationError as e:
            logger.error(f"Clerk {event.type} event carries an invalid user object: {e}")
            raise BadRequestError("Invalid webhook payload")

    @staticmethod
    def _require_id(data: ClerkUserData) -> str:
        if not data.id:
            raise BadRequestError("User ID missing")
        return data.id

    async def _process_user_created(self, data: ClerkUserData) -> WebhookResult:
        if not data.email_addresses or not data.username:
            raise BadRequestError("Required fields missing")
        clerk_id = self._require_id(data)

        record = UserSyncRecord(
            clerk_id=clerk_id,
            email=data.primary_email,
            username=data.username,
            first_name=data.first_name or "",
            last_name=data.last_name or "",
            photo=data.image_url,
        )

        try:
            user = await self.user_repository.create_user(record)
            if user is None:
                raise DatabaseError(f"User store returned no record for Clerk user {clerk_id}")

            # Metadata write depends on the created record's internal ID
            await self.clerk_client.update_user_metadata(clerk_id, public_metadata={"userId": str(user.id)})
        except Exception as e:
            logger.error(f"Error creating user {clerk_id}: {e}", exc_info=True)
            raise UserSyncError("Failed to create user")

        return WebhookResult(event_type=ClerkEventType.USER_CREATED.value, user=user)

    async def _process_user_updated(self, data: ClerkUserData) -> WebhookResult:
        clerk_id = self._require_id(data)

        update = UserUpdate(
            first_name=data.first_name or "",
            last_name=data.last_name or "",
            username=data.username or "",
            photo=data.image_url,
        )

        try:
            user = await self.user_repository.update_user(clerk_id, update)
        except Exception as e:
            logger.error(f"Error updating user {clerk_id}: {e}", exc_info=True)
            raise UserSyncError("Failed to update user")

        return WebhookResult(event_type=ClerkEventType.USER_UPDATED.value, user=user)

    async def _process_user_deleted(self, data: ClerkUserData) -> WebhookResult:
        clerk_id = self._require_id(data)

        try:
            user = await self.user_repository.delete_user(clerk_id)
        except Exception as e:
            logger.error(f"Error deleting user {clerk_id}: {e}", exc_info=True)
            raise UserSyncError("Failed to delete user")

        return WebhookResult(event_type=ClerkEventType.USER_DELETED.value, user=user)


def missing_svix_headers(headers: Mapping[str, Optional[str]]) -> List[str]:
    """Names of the Svix headers that are absent or empty."""
    return [name for name in SVIX_HEADERS if not headers.get(name)]
