"""
Knife Hit - Supabase Client

Thread-safe singleton factory for the Supabase client.
"""

from functools import lru_cache

from supabase import Client, create_client

from src.config.settings import get_settings


@lru_cache(maxsize=1)
def get_supabase_client() -> Client:
    """Create and cache a Supabase client instance.

    Raises:
        ValueError: If the Supabase URL or key is not configured
    """
    settings = get_settings()
    if not settings.has_supabase:
        raise ValueError("SUPABASE_URL and SUPABASE_ANON_KEY must be set.")
    return create_client(settings.supabase_url, settings.supabase_anon_key)
