import logging
from typing import Optional

from app.config.settings import settings
from app.core.exceptions import ConfigurationError
from supabase import Client, create_client

logger = logging.getLogger(__name__)

# Global Supabase client instance
_supabase_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get the Supabase client instance.
    Creates a new client if one doesn't exist.

    Returns:
        Client: The Supabase client instance.

    Raises:
        ConfigurationError: If the Supabase URL or service key is missing.
    """
    global _supabase_client

    if _supabase_client is None:
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ConfigurationError("SUPABASE_URL and SUPABASE_SERVICE_KEY must be set")

        _supabase_client = create_client(settings.supabase_url, settings.supabase_service_key)
        logger.info("Supabase client initialized")

    return _supabase_client

