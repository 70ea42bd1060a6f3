"""Navigation sinks used for sign-out redirects."""

from typing import Protocol, runtime_checkable

PUBLIC_PATHS: frozenset[str] = frozenset({"/", "/login", "/contact-admin", "/forgot-password"})


def is_public_path(path: str) -> bool:
    """True for pages reachable without a session."""
    return path in PUBLIC_PATHS or path.startswith("/reset-password/")


@runtime_checkable
class Navigator(Protocol):
    """Where the host application is and how to send it elsewhere."""

    @property
    def current_path(self) -> str:
        """Path currently displayed."""
        ...

    def redirect(self, path: str) -> None:
        """Navigate to path."""
        ...


class InMemoryNavigator:
    """Navigator that records redirects instead of performing them."""

    def __init__(self, current_path: str = "/") -> None:
        self._current_path = current_path
        self.history: list[str] = []

    @property
    def current_path(self) -> str:
        return self._current_path

    def redirect(self, path: str) -> None:
        self.history.append(path)
        self._current_path = path
