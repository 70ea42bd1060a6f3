"""Identity store: cached session identity, single-flight lookup and broadcast.

One instance holds the only mutable piece of session state. Writes go
through ``commit``; reads through ``get_cached`` or ``resolve``.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

import structlog

from salesdesk.core.auth.types import Identity

logger = structlog.get_logger()

IdentityFetcher = Callable[[], Awaitable[Identity | None]]
IdentityListener = Callable[[Identity | None], None]


class IdentityStore:
    """Single-slot identity cache with a deduplicating fetch coordinator.

    Guarantees:
    1. At most one identity lookup is outstanding at any time; concurrent
       ``resolve`` callers share it and receive the same object.
    2. A failed lookup caches nothing and re-raises to every waiting caller.
    3. Every commit is pushed to all current subscribers.
    """

    def __init__(self, fetcher: IdentityFetcher) -> None:
        """Initialize the store.

        Args:
            fetcher: Coroutine function performing the underlying lookup.
        """
        self._fetcher = fetcher
        self._cached: Identity | None = None
        self._in_flight: asyncio.Task[Identity | None] | None = None
        self._listeners: set[IdentityListener] = set()

    def get_cached(self) -> Identity | None:
        """Return the cached identity without triggering a lookup."""
        return self._cached

    @property
    def is_resolving(self) -> bool:
        """True while a lookup is in flight."""
        return self._in_flight is not None

    async def resolve(self, force: bool = False) -> Identity | None:
        """Return the current identity, looking it up if necessary.

        Args:
            force: Ignore the cached value and look up again. The lookup
                is still shared with any other caller.

        Returns:
            Cached identity, or the result of the shared lookup.

        Raises:
            Exception: Whatever the fetcher raised, re-raised to all callers.
        """
        if self._cached is not None and not force:
            return self._cached

        task = self._in_flight
        if task is None:
            task = asyncio.ensure_future(self._lookup())
            self._in_flight = task

        # Shielded so one caller's cancellation cannot cancel the shared lookup.
        return await asyncio.shield(task)

    async def _lookup(self) -> Identity | None:
        current = asyncio.current_task()
        try:
            identity = await self._fetcher()
        except Exception as e:
            logger.warning("identity_lookup_failed", error=str(e))
            raise
        finally:
            invalidated = self._in_flight is not current
            if not invalidated:
                self._in_flight = None

        # A sign-out during the lookup already published None.
        if identity is None and invalidated:
            logger.debug("identity_lookup_superseded")
            return None

        self.commit(identity)
        return identity

    def commit(self, identity: Identity | None) -> None:
        """Replace the cached identity and notify subscribers.

        Committing None also drops any in-flight lookup marker, so a
        later ``resolve`` starts a fresh lookup. If that lookup then
        resolves to None it is not committed again; an identity it
        returns is still written.

        Args:
            identity: New identity, or None for signed out.
        """
        self._cached = identity
        if identity is None:
            self._in_flight = None

        logger.debug(
            "identity_committed",
            user_id=identity.id if identity else None,
            listeners=len(self._listeners),
        )
        self._notify(identity)

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register a listener for identity changes.

        Subscribing the same callable twice has no extra effect.

        Args:
            listener: Called with the new identity on every commit.

        Returns:
            Function that removes the listener.
        """
        self._listeners.add(listener)

        def unsubscribe() -> None:
            self._listeners.discard(listener)

        return unsubscribe

    def _notify(self, identity: Identity | None) -> None:
        for listener in list(self._listeners):
            try:
                listener(identity)
            except Exception:
                logger.exception("identity_listener_failed", listener=repr(listener))

    def reset(self) -> None:
        """Drop cached identity, pending lookup and all listeners."""
        if self._in_flight is not None and not self._in_flight.done():
            self._in_flight.cancel()
        self._in_flight = None
        self._cached = None
        self._listeners.clear()
