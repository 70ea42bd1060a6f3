"""Access guard decorators for async handlers."""

from collections.abc import Callable
from functools import wraps
from typing import Any, TypeVar

import structlog

from salesdesk.core.auth.service import SessionService
from salesdesk.core.exceptions import AccessDeniedError
from salesdesk.core.rbac.resolver import has_access, is_feature_enabled

logger = structlog.get_logger()

F = TypeVar("F", bound=Callable[..., Any])

SessionProvider = Callable[[], SessionService]


def require_access(module: str, feature: str, session: SessionProvider) -> Callable[[F], F]:
    """Decorator to require module/feature access for the current actor.

    Usage:
        @require_access("orders", "delete", session=get_session_service)
        async def delete_order(order_id: str) -> None:
            ...

    Args:
        module: Module storage key.
        feature: Feature key within the module.
        session: Returns the SessionService whose identity is checked.

    Raises:
        AccessDeniedError: If the actor lacks access or is signed out.
    """

    def decorator(func: F) -> F:
        """Decorate function with access check."""

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            identity = await session().resolve_identity()
            if not has_access(identity, module, feature):
                logger.info(
                    "access_denied",
                    module=module,
                    feature=feature,
                    user_id=identity.id if identity else None,
                )
                raise AccessDeniedError(module, feature)
            return await func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator


def require_module(module: str, session: SessionProvider) -> Callable[[F], F]:
    """Decorator to require a module to be enabled for the actor's organization.

    Args:
        module: Module storage key.
        session: Returns the SessionService whose identity is checked.

    Raises:
        AccessDeniedError: If the module is not enabled for the actor.
    """

    def decorator(func: F) -> F:
        """Decorate function with module check."""

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Any:
            identity = await session().resolve_identity()
            if not is_feature_enabled(identity, module):
                raise AccessDeniedError(module, "*")
            return await func(*args, **kwargs)

        return wrapper  # type: ignore[return-value]

    return decorator
