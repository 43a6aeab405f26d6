import logging
import os
from contextlib import asynccontextmanager
from datetime import datetime

import uvicorn
from fastapi import FastAPI

from app.api.webhooks import router as webhooks_router
from app.config.settings import settings
from app.core.error_handlers import add_exception_handlers
from app.core.log_sanitizer import configure_secure_logging

# Configure logging
logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    handlers=[logging.StreamHandler()],
)

# Configure secure logging with sensitive data filtering
configure_secure_logging()

logger = logging.getLogger(__name__)

APP_VERSION = "1.0.0"


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Requests still fail with 500 per delivery; this surfaces the problem at boot
    if not settings.webhook_secret:
        logger.error("WEBHOOK_SECRET is not set; Clerk webhooks will be rejected with 500")
    if not settings.clerk_secret_key:
        logger.warning("CLERK_SECRET_KEY is not set; user.created metadata write-back will fail")
    yield


app = FastAPI(
    title="Clerk User Sync API",
    description="Synchronizes Clerk user lifecycle webhooks into the application user store",
    version=APP_VERSION,
    lifespan=lifespan,
)

app.include_router(webhooks_router)

# Register custom exception handlers
add_exception_handlers(app)


@app.get("/health", tags=["status"])
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now().isoformat(),
        "version": APP_VERSION,
    }


if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=int(os.getenv("PORT", "8000")),
        reload=settings.ENVIRONMENT == "development",
    )
