"""Backend endpoint paths, relative to the API base URL."""

CSRF_TOKEN = "/csrf-token"

AUTH_CHECK_STATUS = "/auth/check-status"
AUTH_LOGIN = "/auth/login"
AUTH_LOGOUT = "/auth/logout"
AUTH_REFRESH = "/auth/refresh"
AUTH_FORGOT_PASSWORD = "/auth/forgotpassword"

USERS_ME = "/users/me"
USERS_ME_PASSWORD = "/users/me/password"

ROLES = "/roles"


def auth_reset_password(token: str) -> str:
    """Password reset path for a token from the reset email."""
    return f"/auth/resetpassword/{token}"


def role_detail(role_id: str) -> str:
    """Path of a single role."""
    return f"/roles/{role_id}"


# A 401 from these must not trigger a session refresh.
SKIP_REFRESH_PATHS: tuple[str, ...] = (
    AUTH_LOGIN,
    AUTH_CHECK_STATUS,
    AUTH_REFRESH,
    USERS_ME_PASSWORD,
)
