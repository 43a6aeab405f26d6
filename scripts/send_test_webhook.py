#!/usr/bin/env python3
"""Send a signed Clerk test webhook to a running instance.

Usage: send_test_webhook.py [user.created|user.updated|user.deleted|session.created] [clerk_user_id]
"""

import json
import os
import sys
import time
import uuid
from pathlib import Path

import requests
from dotenv import load_dotenv

sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

env_path = Path(__file__).parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)

from app.webhooks.clerk import ClerkWebhookHandler  # noqa: E402

API_BASE_URL = os.getenv("API_BASE_URL", "http://localhost:8000")
WEBHOOK_SECRET = os.getenv("WEBHOOK_SECRET")

if not WEBHOOK_SECRET:
    print("WEBHOOK_SECRET is not set")
    sys.exit(1)

event_type = sys.argv[1] if len(sys.argv) > 1 else "user.created"
clerk_id = sys.argv[2] if len(sys.argv) > 2 else f"user_{uuid.uuid4().hex[:24]}"

payload = {
    "object": "event",
    "type": event_type,
    "data": {
        "id": clerk_id,
        "email_addresses": [{"id": "idn_test", "email_address": "demo@example.com"}],
        "username": "demo_user",
        "first_name": "Demo",
        "last_name": "User",
        "image_url": "https://img.clerk.com/demo.png",
    },
}
body = json.dumps(payload).encode()

msg_id = f"msg_{uuid.uuid4().hex}"
timestamp = int(time.time())
# Only the signing key is needed to sign
signer = ClerkWebhookHandler(WEBHOOK_SECRET, user_repository=None, clerk_client=None)

headers = {
    "Content-Type": "application/json",
    "svix-id": msg_id,
    "svix-timestamp": str(timestamp),
    "svix-signature": signer.sign(msg_id, timestamp, body),
}

webhook_url = f"{API_BASE_URL}/api/v1/webhooks/clerk"
print(f"Sending {event_type} for {clerk_id} to {webhook_url}")

response = requests.post(webhook_url, data=body, headers=headers, timeout=30)
print(f"Status code: {response.status_code}")
print(f"Response: {response.text or '<empty>'}")
