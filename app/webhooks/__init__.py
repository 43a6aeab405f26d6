"""
Webhook handlers for identity provider integrations.
"""

from .base import WebhookHandler, WebhookPayloadError, WebhookResult, WebhookVerificationError
from .clerk import ClerkWebhookHandler

__all__ = [
    "WebhookHandler",
    "WebhookPayloadError",
    "WebhookResult",
    "WebhookVerificationError",
    "ClerkWebhookHandler",
]
