"""Database module."""

from .base import FileStore, LogStore, NotificationLedger
from .supabase import get_supabase_client, DatabaseService
from .storage import FileStoreError, SupabaseFileStore

__all__ = [
    "FileStore",
    "LogStore",
    "NotificationLedger",
    "get_supabase_client",
    "DatabaseService",
    "FileStoreError",
    "SupabaseFileStore",
]
