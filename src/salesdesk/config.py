"""Settings and service wiring."""

import os
from functools import lru_cache

from salesdesk.adapters.http.client import ApiClient
from salesdesk.adapters.http.csrf import InMemoryCsrfTokenProvider
from salesdesk.adapters.navigation import InMemoryNavigator, Navigator
from salesdesk.adapters.session_flag import FileSessionFlagStore
from salesdesk.core.auth.service import SessionService
from salesdesk.services.roles import RoleService


class Settings:
    """Settings loaded from environment."""

    def __init__(self) -> None:
        """Load settings from environment variables."""
        self.api_base_url = os.getenv("SALESDESK_API_BASE_URL", "http://localhost:5000/api/v1")
        self.api_timeout_seconds = float(os.getenv("SALESDESK_API_TIMEOUT_SECONDS", "30"))
        self.session_flag_path = os.getenv(
            "SALESDESK_SESSION_FLAG_PATH", "~/.salesdesk/session.json"
        )
        self.login_path = os.getenv("SALESDESK_LOGIN_PATH", "/login")


@lru_cache
def get_settings() -> Settings:
    """Process-wide settings."""
    return Settings()


@lru_cache
def get_api_client() -> ApiClient:
    """Process-wide backend client."""
    settings = get_settings()
    return ApiClient(
        base_url=settings.api_base_url,
        csrf=InMemoryCsrfTokenProvider(),
        timeout_seconds=settings.api_timeout_seconds,
    )


def build_session_service(
    client: ApiClient, settings: Settings, navigator: Navigator | None = None
) -> SessionService:
    """Wire a SessionService and register it as the client's expiry handler."""
    service = SessionService(
        client=client,
        flags=FileSessionFlagStore(settings.session_flag_path),
        navigator=navigator or InMemoryNavigator(),
        login_path=settings.login_path,
    )
    client.session_expired_handler = service.handle_session_expired
    return service


@lru_cache
def get_session_service() -> SessionService:
    """Process-wide session service.

    Call ``get_session_service.cache_clear()`` (and ``reset()`` on its
    store) to start from a clean slate in tests.
    """
    return build_session_service(get_api_client(), get_settings())


@lru_cache
def get_role_service() -> RoleService:
    """Process-wide role administration service."""
    return RoleService(get_api_client())
