"""
Supabase client configuration for the garden gateway.
Handles Supabase initialization with proper error handling and per-user
client creation so row-level security sees the caller's access token.
"""

import logging
from functools import lru_cache
from typing import Optional

from postgrest import APIError
from supabase import AsyncClient, acreate_client
from supabase.lib.client_options import AsyncClientOptions

from .settings import get_settings

logger = logging.getLogger(__name__)


class SupabaseManager:
    """
    Supabase client manager with connection handling and error recovery.
    Provides the anonymous service client and per-user clients.
    """

    def __init__(self):
        self._client: Optional[AsyncClient] = None
        self.settings = get_settings()

    def _client_options(self) -> AsyncClientOptions:
        return AsyncClientOptions(
            schema=self.settings.SUPABASE_SCHEMA,
            headers={
                "User-Agent": f"GardenHub/{self.settings.APP_VERSION}",
            },
            auto_refresh_token=False,
            persist_session=False,
        )

    async def get_client(self) -> AsyncClient:
        """Get or create the shared anonymous client with lazy initialization."""
        if self._client is None:
            self._client = await self._create_client()
        return self._client

    async def _create_client(self) -> AsyncClient:
        """Create Supabase client with proper configuration."""
        try:
            client = await acreate_client(
                self.settings.SUPABASE_URL,
                self.settings.SUPABASE_ANON_KEY,
                options=self._client_options(),
            )
            logger.info("Supabase client initialized successfully")
            return client

        except Exception as e:
            logger.error(f"Failed to initialize Supabase client: {e}")
            raise ConnectionError(f"Supabase initialization failed: {e}") from e

    async def create_user_client(self, access_token: str) -> AsyncClient:
        """
        Create a client that issues queries as the given user.

        Args:
            access_token: Supabase access token of the caller

        Returns:
            AsyncClient: Client whose PostgREST and realtime calls carry the token
        """
        client = await self._create_client()
        client.postgrest.auth(access_token)
        await client.realtime.set_auth(access_token)
        return client

    async def health_check(self) -> dict:
        """Run a one-row query against the REST endpoint; never raises."""
        try:
            client = await self.get_client()
            await client.table("rules").select("id").limit(1).execute()
        except APIError as e:
            reachable, error = True, f"Supabase API error: {e.message}"
        except Exception as e:
            reachable, error = False, f"Supabase health check failed: {e}"
        else:
            return {"supabase_connection": True, "database_service": True, "error": None}

        logger.error(error)
        # An API error still proves the connection works
        return {"supabase_connection": reachable, "database_service": False, "error": error}

    async def close(self):
        """Close Supabase client connections."""
        if self._client:
            try:
                await self._client.realtime.close()
            except Exception as e:
                logger.warning(f"Realtime connection close failed: {e}")
            self._client = None
            logger.info("Supabase client connections closed")


@lru_cache()
def get_supabase_manager() -> SupabaseManager:
    """
    Get cached Supabase manager instance.

    Returns:
        SupabaseManager: Singleton Supabase manager
    """
    return SupabaseManager()


async def cleanup_supabase():
    """Cleanup Supabase connections on application shutdown."""
    manager = get_supabase_manager()
    await manager.close()
    logger.info("Supabase cleanup completed")
