"""HTTP transport adapter."""

from salesdesk.adapters.http.client import ApiClient
from salesdesk.adapters.http.csrf import CsrfTokenProvider, InMemoryCsrfTokenProvider

__all__ = ["ApiClient", "CsrfTokenProvider", "InMemoryCsrfTokenProvider"]
