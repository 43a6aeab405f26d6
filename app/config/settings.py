import logging
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv
from pydantic import Field, HttpUrl
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

# Load .env file if it exists (for mounted secret files)
for env_path in [Path(".env"), Path("/etc/secrets/.env"), Path("/app/.env")]:
    if env_path.exists():
        load_dotenv(env_path)
        logger.info(f"Loaded environment from {env_path}")
        break
else:
    load_dotenv()


class Settings(BaseSettings):
    # Clerk webhook (Svix) signing
    WEBHOOK_SECRET: Optional[str] = Field(None)  # whsec_... from the Clerk dashboard
    WEBHOOK_TOLERANCE_SECONDS: int = Field(300)  # Allowed skew for svix-timestamp

    # Clerk Backend API (metadata write-back)
    CLERK_SECRET_KEY: Optional[str] = Field(None)
    CLERK_API_URL: str = Field("https://api.clerk.com/v1")
    CLERK_API_TIMEOUT: int = Field(10)

    # Supabase Config
    SUPABASE_URL: Optional[HttpUrl] = Field(None)
    SUPABASE_SERVICE_KEY: Optional[str] = Field(None)
    USERS_TABLE: str = Field("users")

    # General App Settings
    LOG_LEVEL: str = Field("INFO")
    ENVIRONMENT: str = Field("production")  # development, staging, production

    # Property aliases for consistent case access
    @property
    def webhook_secret(self):
        return self.WEBHOOK_SECRET

    @property
    def webhook_tolerance_seconds(self):
        return self.WEBHOOK_TOLERANCE_SECONDS

    @property
    def clerk_secret_key(self):
        return self.CLERK_SECRET_KEY

    @property
    def clerk_api_url(self):
        return self.CLERK_API_URL.rstrip("/")

    @property
    def clerk_api_timeout(self):
        return self.CLERK_API_TIMEOUT

    @property
    def supabase_url(self):
        return str(self.SUPABASE_URL) if self.SUPABASE_URL else None

    @property
    def supabase_service_key(self):
        return self.SUPABASE_SERVICE_KEY

    @property
    def users_table(self):
        return self.USERS_TABLE

    @property
    def log_level(self):
        return self.LOG_LEVEL.upper()

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


# Create a single instance for easy import
settings = Settings()


def get_settings() -> Settings:
    return settings
