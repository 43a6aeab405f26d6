import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from app.config.settings import settings
from app.config.supabase_client import get_supabase_client
from app.core.exceptions import DatabaseError, ResourceNotFoundError
from app.models.user import User, UserSyncRecord, UserUpdate
from supabase import Client, PostgrestAPIResponse

logger = logging.getLogger(__name__)


class UserRepository:
    """User records keyed by Clerk ID, stored in a Supabase table."""

    def __init__(self, client: Optional[Client] = None, table: Optional[str] = None):
        self._client = client
        self._table = table or settings.users_table

    @property
    def client(self) -> Client:
        # Lazy: secret and signature checks must not need a database connection
        if self._client is None:
            self._client = get_supabase_client()
        return self._client

    def _handle_supabase_error(self, response: PostgrestAPIResponse, context_message: str):
        """Helper to log and raise DatabaseError from Supabase errors."""
        if response is not None and getattr(response, "error", None):
            error = response.error
            logger.error(f"{context_message}: Supabase error code {getattr(error, 'code', 'N/A')} - {error.message}")
            raise DatabaseError(f"{context_message}: {error.message}")

    async def create_user(self, record: UserSyncRecord) -> Optional[User]:
        """Inserts a new user record for a Clerk user. Returns None if the store returned nothing."""
        try:
            response: PostgrestAPIResponse = await asyncio.to_thread(
                self.client.table(self._table).insert(record.model_dump()).execute
            )
            self._handle_supabase_error(response, f"Failed to create user {record.clerk_id}")
            if not response.data:
                logger.warning(f"Insert for Clerk user {record.clerk_id} returned no data")
                return None
            user = User(**response.data[0])
            logger.info(f"Created user {user.id} for Clerk user {record.clerk_id}")
            return user
        except DatabaseError:
            raise
        except Exception as e:
            logger.error(f"Unexpected error creating user {record.clerk_id}: {e}", exc_info=True)
            raise DatabaseError(f"Unexpected error creating user {record.clerk_id}: {str(e)}")

    async def update_user(self, clerk_id: str, update: UserUpdate) -> User:
        """Applies profile changes to the user with the given Clerk ID."""
        update_data: Dict[str, Any] = update.to_update_dict()
        update_data["updated_at"] = datetime.now(timezone.utc).isoformat()
        try:
            response: PostgrestAPIResponse = await asyncio.to_thread(
                self.client.table(self._table).update(update_data).eq("clerk_id", clerk_id).execute
            )
            self._handle_supabase_error(response, f"Failed to update user {clerk_id}")
            if not response.data:
                logger.error(f"Failed to update user: Clerk user {clerk_id} not found.")
                raise ResourceNotFoundError(resource_name="User", resource_id=clerk_id)
            logger.info(f"Updated user for Clerk user {clerk_id}")
            return User(**response.data[0])
        except (DatabaseError, ResourceNotFoundError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error updating user {clerk_id}: {e}", exc_info=True)
            raise DatabaseError(f"Unexpected error updating user {clerk_id}: {str(e)}")

    async def delete_user(self, clerk_id: str) -> User:
        """Deletes the user with the given Clerk ID and returns the removed record."""
        try:
            response: PostgrestAPIResponse = await asyncio.to_thread(
                self.client.table(self._table).delete().eq("clerk_id", clerk_id).execute
            )
            self._handle_supabase_error(response, f"Failed to delete user {clerk_id}")
            if not response.data:
                logger.warning(f"Attempted to delete non-existent user with Clerk ID {clerk_id}")
                raise ResourceNotFoundError(resource_name="User", resource_id=clerk_id)
            logger.info(f"Deleted user for Clerk user {clerk_id}")
            return User(**response.data[0])
        except (DatabaseError, ResourceNotFoundError):
            raise
        except Exception as e:
            logger.error(f"Unexpected error deleting user {clerk_id}: {e}", exc_info=True)
            raise DatabaseError(f"Unexpected error deleting user {clerk_id}: {str(e)}")
