"""Session service for login, logout, and identity refresh."""

import time
from collections.abc import Callable
from typing import Any

import structlog
from pydantic import ValidationError

from salesdesk.adapters.http import endpoints
from salesdesk.adapters.http.client import ApiClient
from salesdesk.adapters.navigation import Navigator, is_public_path
from salesdesk.adapters.session_flag import SESSION_FLAG_KEY, SessionFlagStore
from salesdesk.core.auth.store import IdentityListener, IdentityStore
from salesdesk.core.auth.types import Identity, normalize_profile
from salesdesk.core.exceptions import ApiError, AuthError, PortalAccessDeniedError

logger = structlog.get_logger()

PORTAL_ACCESS_DENIED_MESSAGE = (
    "Web portal access is disabled for your account. Please contact your administrator."
)


class SessionService:
    """Service orchestrating the authenticated session.

    Owns the IdentityStore. Its lookup is the "who am I" request with the
    degrade-to-signed-out policy applied, so the store deduplicates the
    whole orchestrated lookup, error handling included.
    """

    def __init__(
        self,
        client: ApiClient,
        flags: SessionFlagStore,
        navigator: Navigator,
        login_path: str = "/login",
    ) -> None:
        """Initialize the service.

        Args:
            client: Backend client.
            flags: Durable store for the active-session indicator.
            navigator: Sink for sign-out redirects.
            login_path: Entry point to redirect to after sign-out.
        """
        self._client = client
        self._flags = flags
        self._navigator = navigator
        self._login_path = login_path
        self.store = IdentityStore(self._fetch_identity)

    # Store passthroughs

    def get_cached(self) -> Identity | None:
        """Return the cached identity without network activity."""
        return self.store.get_cached()

    async def resolve_identity(self) -> Identity | None:
        """Return the current identity, resolving it at most once concurrently."""
        return await self.store.resolve()

    def subscribe(self, listener: IdentityListener) -> Callable[[], None]:
        """Register an identity change listener; returns an unsubscribe callable."""
        return self.store.subscribe(listener)

    @property
    def has_session_flag(self) -> bool:
        """True when a previous login left the durable indicator set."""
        return self._flags.get(SESSION_FLAG_KEY) is not None

    async def restore_session(self) -> Identity | None:
        """Resolve the identity at process start.

        Skips the network entirely when no earlier login was recorded.
        """
        if not self.has_session_flag:
            logger.debug("session_restore_skipped")
            return None
        return await self.resolve_identity()

    async def refresh(self) -> Identity | None:
        """Look the identity up again, replacing the cached record."""
        return await self.store.resolve(force=True)

    # Orchestration

    async def login(self, email: str, password: str) -> dict[str, Any]:
        """Authenticate and publish the new identity.

        Args:
            email: Account email.
            password: Plain text password.

        Returns:
            Raw login response body.

        Raises:
            PortalAccessDeniedError: Account may not use the web portal.
            AuthError: Credentials rejected or login request failed.
        """
        try:
            await self._client.ensure_csrf_token()
            response = await self._client.post(
                endpoints.AUTH_LOGIN, json={"email": email, "password": password}
            )

            data = response.get("data") or {}
            if data.get("webPortalAccess") is False:
                raise PortalAccessDeniedError(PORTAL_ACCESS_DENIED_MESSAGE)

            user = data.get("user")
            if not isinstance(user, dict):
                raise AuthError("Login response did not include a user profile")

            try:
                identity = normalize_profile(
                    user,
                    permissions=data.get("permissions"),
                    subscription=data.get("subscription"),
                )
            except ValidationError as e:
                raise AuthError("Login response contained an invalid profile") from e
        except ApiError as e:
            self._sign_out_locally()
            logger.info("login_failed", status=e.status, code=e.code.value)
            raise AuthError(e.message) from e
        except Exception as e:
            self._sign_out_locally()
            logger.info("login_failed", error=str(e))
            raise

        self._flags.set(SESSION_FLAG_KEY, time.time())
        self.store.commit(identity)
        logger.info("login_succeeded", user_id=identity.id, role=identity.role.value)
        return response

    async def logout(self) -> None:
        """Sign out, notifying the server on a best-effort basis."""
        try:
            await self._client.post(endpoints.AUTH_LOGOUT, json={})
        except ApiError as e:
            logger.warning("logout_notification_failed", status=e.status, error=e.message)
        except Exception as e:
            logger.warning("logout_notification_failed", error=str(e))
        finally:
            self._sign_out_locally()
            self._navigator.redirect(self._login_path)
        logger.info("logout_completed")

    async def handle_session_expired(self) -> None:
        """Transition to signed out after the server rejected a session refresh."""
        logger.info("session_expired")
        self._sign_out_locally()
        if not is_public_path(self._navigator.current_path):
            self._navigator.redirect(self._login_path)

    async def forgot_password(self, email: str) -> dict[str, Any]:
        """Request a password reset email.

        Raises:
            ApiError: If the request fails.
        """
        return await self._client.post(endpoints.AUTH_FORGOT_PASSWORD, json={"email": email})

    async def reset_password(self, token: str, password: str) -> dict[str, Any]:
        """Set a new password with a token from the reset email.

        Raises:
            ApiError: If the token is invalid or expired.
        """
        return await self._client.put(
            endpoints.auth_reset_password(token), json={"password": password}
        )

    def _clear_session_flag(self) -> None:
        if self.has_session_flag:
            self._flags.remove(SESSION_FLAG_KEY)

    def _sign_out_locally(self) -> None:
        self._clear_session_flag()
        self.store.commit(None)

    async def _fetch_identity(self) -> Identity | None:
        try:
            return await self._fetch_profile()
        except ApiError as e:
            if e.is_unauthorized:
                logger.info("identity_unauthorized")
                self._clear_session_flag()
                return None
            logger.warning("identity_fetch_retrying", status=e.status, code=e.code.value)

        try:
            return await self._fetch_profile()
        except ApiError as e:
            logger.warning("identity_fetch_failed", status=e.status, code=e.code.value)
            if e.is_unauthorized:
                self._clear_session_flag()
            return None

    async def _fetch_profile(self) -> Identity:
        response = await self._client.get(endpoints.USERS_ME)
        data = response.get("data")
        if not isinstance(data, dict):
            raise ApiError("Profile response was empty", status=500)
        user = data.get("user", data)
        try:
            return normalize_profile(
                user,
                permissions=data.get("permissions"),
                subscription=data.get("subscription"),
            )
        except ValidationError as e:
            raise ApiError("Profile response was malformed", status=500) from e
