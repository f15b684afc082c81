"""Supabase client wrapper with async context manager support."""

import asyncio
import os
from typing import Optional
from supabase import acreate_client, AsyncClient, AsyncClientOptions
from src.utils.errors import SupabaseError
import logging

logger = logging.getLogger(__name__)

# One client per event loop; its HTTP pool belongs to the loop that opened it
_client: Optional[AsyncClient] = None
_client_loop: Optional[asyncio.AbstractEventLoop] = None


async def get_supabase_client() -> AsyncClient:
    """Get or create the async Supabase client for the running event loop."""
    global _client, _client_loop

    loop = asyncio.get_running_loop()
    if _client is None or _client_loop is not loop:
        url = os.environ.get("SUPABASE_URL")
        key = os.environ.get("SUPABASE_SERVICE_ROLE_KEY")

        if not url or not key:
            raise SupabaseError("SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY must be set")

        # Service-role client: no user session to refresh or persist
        options = AsyncClientOptions(
            auto_refresh_token=False,
            persist_session=False,
        )

        client = await acreate_client(url, key, options)
        if _client_loop is not loop:
            _client = client
            _client_loop = loop
            logger.info("Supabase client initialized", extra={"url": url})

    return _client


class SupabaseClient:
    """Async context manager for Supabase client."""

    def __init__(self):
        self.client: Optional[AsyncClient] = None

    async def __aenter__(self) -> AsyncClient:
        self.client = await get_supabase_client()
        return self.client

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        if exc_type:
            logger.error(
                "Supabase operation error",
                extra={"error": str(exc_val), "type": exc_type.__name__}
            )
        return False
