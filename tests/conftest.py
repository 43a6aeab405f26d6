"""
Shared fixtures for all tests in the project.

This file contains pytest fixtures that are accessible to all tests.
"""

import base64
import hashlib
import hmac
import os
import sys
import time
import uuid
from datetime import datetime, timezone
from unittest.mock import AsyncMock, MagicMock

import pytest

# Add the project root to the path so that we can import from the package
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from app.models.user import User  # noqa: E402

TEST_WEBHOOK_SECRET = "whsec_" + base64.b64encode(b"clerk-user-sync-test-signing-key").decode()


def _svix_signature(secret: str, msg_id: str, timestamp: int, body: bytes) -> str:
    key = base64.b64decode(secret[len("whsec_"):])
    digest = hmac.new(key, f"{msg_id}.{timestamp}.".encode() + body, hashlib.sha256).digest()
    return "v1," + base64.b64encode(digest).decode()


@pytest.fixture
def webhook_secret():
    """Svix signing secret used by tests."""
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def svix_headers(webhook_secret):
    """Factory building valid Svix headers for a raw body."""

    def _build(body: bytes, msg_id: str = "msg_2abcDEF123", timestamp: int = None, secret: str = None):
        ts = timestamp if timestamp is not None else int(time.time())
        return {
            "svix-id": msg_id,
            "svix-timestamp": str(ts),
            "svix-signature": _svix_signature(secret or webhook_secret, msg_id, ts, body),
        }

    return _build


@pytest.fixture
def clerk_user_data():
    """Clerk `data` object for a user with every field set."""
    return {
        "id": "user_2NNEqL2nrIRdJ194ndJqAHwEfxC",
        "object": "user",
        "email_addresses": [
            {"id": "idn_29w83yL7CwVlJXylYLxcslromF1", "email_address": "a@x.com"},
            {"id": "idn_39w83yL7CwVlJXylYLxcslromF2", "email_address": "alice@work.example"},
        ],
        "username": "alice",
        "first_name": "Alice",
        "last_name": "Liddell",
        "image_url": "https://img.clerk.com/alice.png",
    }


@pytest.fixture
def stored_user():
    """User record as returned by the user store."""
    return User(
        id=uuid.UUID("7d3f2c1e-4b5a-4c6d-8e9f-0a1b2c3d4e5f"),
        clerk_id="user_2NNEqL2nrIRdJ194ndJqAHwEfxC",
        email="a@x.com",
        username="alice",
        first_name="Alice",
        last_name="Liddell",
        photo="https://img.clerk.com/alice.png",
        created_at=datetime(2024, 1, 20, 10, 30, tzinfo=timezone.utc),
        updated_at=datetime(2024, 1, 20, 10, 30, tzinfo=timezone.utc),
    )


@pytest.fixture
def mock_user_repository(stored_user):
    """User repository whose async methods succeed with `stored_user`."""
    repo = MagicMock()
    repo.create_user = AsyncMock(return_value=stored_user)
    repo.update_user = AsyncMock(return_value=stored_user)
    repo.delete_user = AsyncMock(return_value=stored_user)
    return repo


@pytest.fixture
def mock_clerk_client():
    """Clerk API client whose metadata write succeeds."""
    client = MagicMock()
    client.update_user_metadata = AsyncMock(return_value={"id": "user_2NNEqL2nrIRdJ194ndJqAHwEfxC"})
    return client
