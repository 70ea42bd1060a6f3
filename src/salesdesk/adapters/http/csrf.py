"""Anti-forgery token providers."""

from typing import Protocol, runtime_checkable


@runtime_checkable
class CsrfTokenProvider(Protocol):
    """Holds the CSRF token sent with state-changing requests."""

    def get(self) -> str | None:
        """Return the current token, if one has been acquired."""
        ...

    def set(self, token: str | None) -> None:
        """Replace the current token."""
        ...


class InMemoryCsrfTokenProvider:
    """Process-local token holder."""

    def __init__(self, token: str | None = None) -> None:
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str | None) -> None:
        self._token = token
