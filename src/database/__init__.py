"""
Knife Hit Database Layer.

Supabase integration for the durable player economy.
"""

from src.database.client import get_supabase_client
from src.database.models import StoredValue
from src.database.store import BackgroundWriteStore, MemoryStore, SupabaseStore, build_store

__all__ = [
    "get_supabase_client",
    "BackgroundWriteStore",
    "MemoryStore",
    "StoredValue",
    "SupabaseStore",
    "build_store",
]
