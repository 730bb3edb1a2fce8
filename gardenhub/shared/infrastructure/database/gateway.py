# 📄 File: gardenhub/shared/infrastructure/database/gateway.py
# 🧭 Purpose (Layman Explanation):
# The single doorway between the garden app and its hosted database. Every read, write
# and live-update subscription goes through here, so problems are recognized in one place.
# 🧪 Purpose (Technical Summary):
# Thin async wrapper around a per-user Supabase AsyncClient. Offers CRUD helpers over
# PostgREST query builders, classifies every failure through handle_error, and manages
# realtime postgres_changes channels behind a Subscription handle with explicit disposal.
# 🔗 Dependencies:
# supabase (AsyncClient, realtime channels), postgrest query builders,
# gardenhub.shared.core.error_classification
# 🔄 Connected Modules / Calls From:
# Every Supabase*Repository implementation, gardenhub.shared.core.dependencies

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Dict, List, Optional, Set, Union

from supabase import AsyncClient

from ...core.error_classification import handle_error

logger = logging.getLogger(__name__)

Row = Dict[str, Any]
RealtimeCallback = Callable[[Row], Union[None, Awaitable[None]]]


def extract_record(payload: Dict[str, Any]) -> Optional[Row]:
    """
    Pull the changed row out of a postgres_changes payload.

    Depending on the realtime client version the row sits under
    ``data.record`` or directly under ``new``.
    """
    if not payload:
        return None
    data = payload.get("data")
    if isinstance(data, dict) and data.get("record"):
        return data["record"]
    if payload.get("new"):
        return payload["new"]
    if payload.get("record"):
        return payload["record"]
    return None


class Subscription:
    """
    Handle for one realtime channel.

    ``unsubscribe`` is idempotent; the handle is also an async context manager
    so callers can scope a subscription to a block. Coroutine callbacks run as
    tasks owned by the handle and are cancelled on unsubscribe.
    """

    def __init__(self, client: AsyncClient, channel: Any, name: str, loop: asyncio.AbstractEventLoop):
        self._client = client
        self._channel = channel
        self.name = name
        self._loop = loop
        self._tasks: Set[asyncio.Task] = set()
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def spawn(self, coroutine: Awaitable[None]) -> None:
        """Run a callback coroutine on the subscription's loop."""
        if not _in_loop(self._loop):
            # Realtime messages may arrive on the client's own thread
            self._loop.call_soon_threadsafe(self.spawn, coroutine)
            return
        task = asyncio.ensure_future(coroutine, loop=self._loop)
        self._tasks.add(task)
        task.add_done_callback(self._callback_done)

    def _callback_done(self, task: asyncio.Task) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Realtime callback on {self.name} failed: {error}", exc_info=error)

    async def unsubscribe(self) -> None:
        if not self._active:
            return
        self._active = False
        pending = [t for t in self._tasks if t is not asyncio.current_task()]
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        try:
            await self._client.remove_channel(self._channel)
            logger.info(f"Realtime channel {self.name} removed")
        except Exception as e:
            logger.warning(f"Failed to remove realtime channel {self.name}: {e}")

    async def __aenter__(self) -> "Subscription":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.unsubscribe()


class SupabaseGateway:
    """
    Authenticated access to the hosted database for one caller.

    Row-level security is evaluated against the access token the client
    was created with, so a gateway must never be shared between users.
    """

    def __init__(self, client: AsyncClient, schema: str = "public"):
        self._client = client
        self._schema = schema

    @property
    def client(self) -> AsyncClient:
        return self._client

    def table(self, name: str):
        """Start a PostgREST query on ``name``."""
        return self._client.table(name)

    async def execute(self, query, operation: str, table: str) -> List[Row]:
        """
        Execute a prepared query builder and return its rows.

        Raises:
            GardenHubException: classified failure (network, permission, validation...)
        """
        try:
            response = await query.execute()
        except Exception as e:
            app_error = handle_error(e, operation=operation, table=table)
            logger.error(
                f"Gateway {operation} on {table} failed: {app_error.message}",
                extra={"error_type": app_error.error_type.value}
            )
            raise app_error from e

        data = response.data if response is not None else None
        if data is None:
            return []
        if isinstance(data, dict):
            return [data]
        return data

    # =========================================================================
    # CRUD HELPERS
    # =========================================================================

    async def select(
        self,
        table: str,
        columns: str = "*",
        *,
        eq: Optional[Dict[str, Any]] = None,
        order: Optional[str] = None,
        desc: bool = False,
        limit: Optional[int] = None,
    ) -> List[Row]:
        query = self.table(table).select(columns)
        for column, value in (eq or {}).items():
            query = query.eq(column, value)
        if order:
            query = query.order(order, desc=desc)
        if limit is not None:
            query = query.limit(limit)
        return await self.execute(query, "select", table)

    async def select_one(self, table: str, columns: str = "*", **eq: Any) -> Optional[Row]:
        rows = await self.select(table, columns, eq=eq, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, rows: Union[Row, List[Row]]) -> List[Row]:
        return await self.execute(self.table(table).insert(rows), "insert", table)

    async def update(self, table: str, fields: Row, match: Dict[str, Any]) -> List[Row]:
        if not match:
            raise ValueError("update requires at least one match column")
        query = self.table(table).update(fields)
        for column, value in match.items():
            query = query.eq(column, value)
        return await self.execute(query, "update", table)

    async def upsert(self, table: str, rows: Union[Row, List[Row]]) -> List[Row]:
        return await self.execute(self.table(table).upsert(rows), "upsert", table)

    async def delete(self, table: str, match: Dict[str, Any]) -> List[Row]:
        if not match:
            raise ValueError("delete requires at least one match column")
        query = self.table(table).delete()
        for column, value in match.items():
            query = query.eq(column, value)
        return await self.execute(query, "delete", table)

    # =========================================================================
    # REALTIME
    # =========================================================================

    async def subscribe(
        self,
        channel_name: str,
        table: str,
        callback: RealtimeCallback,
        event: str = "INSERT",
        filter: Optional[str] = None,
    ) -> Subscription:
        """
        Subscribe to row changes on ``table``.

        The callback receives the changed row. Coroutine callbacks run as
        tasks owned by the returned Subscription.
        """
        channel = self._client.channel(channel_name)
        subscription = Subscription(self._client, channel, channel_name, asyncio.get_running_loop())

        def _dispatch(payload: Dict[str, Any]) -> None:
            record = extract_record(payload)
            if record is None:
                logger.debug(f"Ignoring realtime payload without a record on {channel_name}")
                return
            result = callback(record)
            if inspect.isawaitable(result):
                subscription.spawn(result)

        channel.on_postgres_changes(
            event,
            callback=_dispatch,
            table=table,
            schema=self._schema,
            filter=filter,
        )
        try:
            await channel.subscribe()
        except Exception as e:
            raise handle_error(e, operation="subscribe", table=table) from e

        logger.info(f"Subscribed to realtime channel {channel_name}")
        return subscription


def _in_loop(loop: asyncio.AbstractEventLoop) -> bool:
    try:
        return asyncio.get_running_loop() is loop
    except RuntimeError:
        return False
