"""
Database client factory for Supabase.

The backend owns its own accounts and authorization, so every repository
talks to Supabase through a single service-role client.
"""

from typing import Optional
from supabase import create_client, Client

from .config import get_settings

# Module-level client cache
_service_client: Optional[Client] = None


def get_supabase_client() -> Client:
    """
    Get Supabase client with service role (bypasses RLS).

    Used for both table access (users, posts, relation tables) and the
    storage bucket holding uploaded files.

    Returns:
        Supabase client configured with service role key
    """
    global _service_client

    if _service_client is None:
        settings = get_settings()
        if not settings.supabase_url or not settings.supabase_service_role_key:
            raise RuntimeError(
                "Supabase configuration missing. "
                "Set SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY environment variables."
            )
        _service_client = create_client(
            settings.supabase_url,
            settings.supabase_service_role_key,
        )

    return _service_client


def is_unique_violation(error: Exception) -> bool:
    """Return True if a PostgREST error was caused by a unique/primary key clash."""
    return getattr(error, "code", None) == "23505"


def is_invalid_text_representation(error: Exception) -> bool:
    """Return True if PostgREST rejected a value for its column type (e.g. a malformed uuid)."""
    return getattr(error, "code", None) == "22P02"


def reset_client_cache() -> None:
    """
    Reset the cached database client.

    Useful for testing or when configuration changes.
    """
    global _service_client
    _service_client = None
