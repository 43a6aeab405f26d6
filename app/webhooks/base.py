"""
Base webhook handler classes and utilities.
"""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)


class WebhookVerificationError(Exception):
    """Raised when webhook signature verification fails."""

    pass


class WebhookPayloadError(Exception):
    """Raised when a verified webhook body is not a valid event envelope."""

    pass


@dataclass(frozen=True)
class WebhookResult:
    """Terminal state of one webhook delivery.

    `acknowledged` marks events accepted without any mutation; those get an
    empty 200 response.
    """

    event_type: str
    user: Optional[Any] = None
    acknowledged: bool = False


class WebhookHandler(ABC):
    """Abstract base class for webhook handlers."""

    @abstractmethod
    async def verify_signature(self, payload: bytes, headers: Mapping[str, str]) -> Any:
        """
        Verify the webhook signature and parse the event.

        Args:
            payload: Raw request body, exactly as received
            headers: Signature headers from the request

        Returns:
            The parsed event

        Raises:
            WebhookVerificationError: If the signature is invalid
            WebhookPayloadError: If the verified body cannot be parsed
        """
        pass

    @abstractmethod
    async def process_event(self, event: Any) -> WebhookResult:
        """
        Process a verified webhook event.

        Args:
            event: Event returned by verify_signature

        Returns:
            Processing result
        """
        pass
