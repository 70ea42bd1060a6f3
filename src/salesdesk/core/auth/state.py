"""Observed auth state for UI adapters."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from salesdesk.core.auth.store import IdentityStore
from salesdesk.core.auth.types import Identity


@dataclass(frozen=True)
class AuthState:
    """Snapshot of the session as seen by one subscriber."""

    identity: Identity | None
    is_loading: bool

    @property
    def is_authenticated(self) -> bool:
        """True when an identity is present."""
        return self.identity is not None


class AuthStateTracker:
    """Keeps an AuthState current by subscribing to an IdentityStore.

    Usage:
        with AuthStateTracker(store, on_change=render) as tracker:
            await tracker.load()
            if tracker.state.is_authenticated:
                ...
    """

    def __init__(
        self,
        store: IdentityStore,
        on_change: Callable[[AuthState], None] | None = None,
    ) -> None:
        self._store = store
        self._on_change = on_change
        self._loading = False
        self._state = AuthState(identity=store.get_cached(), is_loading=False)
        self._unsubscribe: Callable[[], None] | None = store.subscribe(self._handle)

    @property
    def state(self) -> AuthState:
        """Latest computed state."""
        return self._state

    async def load(self) -> AuthState:
        """Resolve the identity through the store, tracking the loading flag."""
        self._loading = True
        self._recompute(self._store.get_cached())
        try:
            await self._store.resolve()
        finally:
            self._loading = False
            self._recompute(self._store.get_cached())
        return self._state

    def _handle(self, identity: Identity | None) -> None:
        self._recompute(identity)

    def _recompute(self, identity: Identity | None) -> None:
        # Identities are immutable, so reference equality means "unchanged".
        if identity is self._state.identity and self._loading == self._state.is_loading:
            return
        self._state = AuthState(identity=identity, is_loading=self._loading)
        if self._on_change is not None:
            self._on_change(self._state)

    def close(self) -> None:
        """Stop observing the store."""
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def __enter__(self) -> AuthStateTracker:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()
