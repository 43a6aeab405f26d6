from app.models.user import User, UserSyncRecord, UserUpdate

__all__ = ["User", "UserSyncRecord", "UserUpdate"]
