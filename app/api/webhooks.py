"""
Webhook endpoints for identity provider user synchronization.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Request, Response, status
from fastapi.responses import JSONResponse

from app.config.settings import settings
from app.core.exceptions import BadRequestError, ConfigurationError
from app.integrations.clerk_client import ClerkClient
from app.repositories.user_repository import UserRepository
from app.schemas.clerk_event import ClerkEventType
from app.webhooks.base import WebhookPayloadError, WebhookResult, WebhookVerificationError
from app.webhooks.clerk import (
    SVIX_ID_HEADER,
    SVIX_SIGNATURE_HEADER,
    SVIX_TIMESTAMP_HEADER,
    ClerkWebhookHandler,
    missing_svix_headers,
)

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/webhooks", tags=["Webhooks"])


def get_user_repository() -> UserRepository:
    """Dependency to provide a UserRepository instance."""
    return UserRepository()


def get_clerk_client() -> ClerkClient:
    """Dependency to provide a ClerkClient instance."""
    return ClerkClient()


def get_clerk_webhook_handler(
    user_repository: UserRepository = Depends(get_user_repository),
    clerk_client: ClerkClient = Depends(get_clerk_client),
) -> ClerkWebhookHandler:
    """
    Dependency to get the Clerk webhook handler.

    Runs before any header or body handling, so a missing secret always
    yields a 500 whatever the request carries.

    Raises:
        ConfigurationError: If the webhook secret is not configured
    """
    webhook_secret = settings.webhook_secret
    if not webhook_secret:
        raise ConfigurationError("Please add WEBHOOK_SECRET to .env or .env.local")

    return ClerkWebhookHandler(
        webhook_secret,
        user_repository,
        clerk_client,
        tolerance_seconds=settings.webhook_tolerance_seconds,
    )


def build_webhook_response(result: WebhookResult) -> Response:
    """Translate a processed event into the HTTP response sent back to Clerk."""
    if result.acknowledged:
        return Response(status_code=status.HTTP_200_OK)

    user = result.user.model_dump(mode="json") if result.user is not None else None
    return JSONResponse(status_code=status.HTTP_200_OK, content={"message": "OK", "user": user})


@router.post("/clerk", status_code=status.HTTP_200_OK)
async def clerk_webhook(
    request: Request,
    svix_id: Optional[str] = Header(None),
    svix_timestamp: Optional[str] = Header(None),
    svix_signature: Optional[str] = Header(None),
    handler: ClerkWebhookHandler = Depends(get_clerk_webhook_handler),
):
    """
    Handle Clerk user lifecycle webhooks.

    Headers:
        svix-id: Unique delivery ID
        svix-timestamp: Delivery timestamp (seconds)
        svix-signature: Space-separated v1 signatures

    Returns:
        200 with the synced user, or an empty 200 for events that are not synced
    """
    headers = {
        SVIX_ID_HEADER: svix_id,
        SVIX_TIMESTAMP_HEADER: svix_timestamp,
        SVIX_SIGNATURE_HEADER: svix_signature,
    }
    missing = missing_svix_headers(headers)
    if missing:
        logger.warning(f"Clerk webhook rejected, missing headers: {missing}")
        raise BadRequestError("Missing Svix headers")

    logger.info(f"Received Clerk webhook: delivery={svix_id}")

    # Signature covers the exact bytes received
    body = await request.body()

    try:
        event = await handler.verify_signature(body, headers)
    except WebhookVerificationError as e:
        logger.error(f"Error verifying webhook {svix_id}: {e}")
        raise BadRequestError("Webhook verification failed")
    except WebhookPayloadError as e:
        logger.error(f"Failed to parse webhook {svix_id}: {e}")
        raise BadRequestError("Invalid webhook payload")

    result = await handler.process_event(event)
    logger.info(f"Clerk webhook {svix_id} processed: type={result.event_type} acknowledged={result.acknowledged}")
    return build_webhook_response(result)


@router.get("/clerk/status", status_code=status.HTTP_200_OK)
async def clerk_webhook_status():
    """
    Check Clerk webhook configuration status.

    Returns:
        Configuration status and health information
    """
    is_configured = bool(settings.webhook_secret)

    return {
        "status": "healthy" if is_configured else "not_configured",
        "webhook_secret_configured": is_configured,
        "metadata_write_back_configured": bool(settings.clerk_secret_key),
        "endpoint": "/api/v1/webhooks/clerk",
        "supported_events": [event.value for event in ClerkEventType],
        "signature_headers": [SVIX_ID_HEADER, SVIX_TIMESTAMP_HEADER, SVIX_SIGNATURE_HEADER],
        "signature_algorithm": "HMAC-SHA256",
    }
