from __future__ import annotations

from functools import lru_cache

from supabase import Client, create_client
from supabase.lib.client_options import ClientOptions

from worker.config import get_settings
from worker.utils.logging import get_logger

logger = get_logger(__name__)


@lru_cache(maxsize=1)
def get_supabase_admin_client() -> Client:
    """Return a cached Supabase admin client using the service role key.

    Tagging runs as a background job on behalf of the link owner, so it needs
    to bypass RLS when reading tag usage and writing tag links.
    """
    logger.debug("Initializing Supabase admin client")
    settings = get_settings()
    if not settings.supabase_url:
        raise RuntimeError("supabase_url is required for admin client")
    if not settings.supabase_service_role_key:
        raise RuntimeError("supabase_service_role_key is required for admin client")
    return create_client(
        settings.supabase_url,
        settings.supabase_service_role_key,
        options=ClientOptions(auto_refresh_token=False, persist_session=False),
    )
