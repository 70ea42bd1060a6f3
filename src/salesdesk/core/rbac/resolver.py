"""Permission evaluation.

Access is the intersection of three independent authorities:

1. System role: platform operators bypass organization checks
2. Organization role: org admins hold every permission in their org;
   other members need an explicit ``permissions[module][feature]`` grant
3. Subscription plan: the organization's plan must include the module
   (and, when asked, the feature)

Missing data never grants access. A None identity is denied everywhere.
"""

import warnings

from salesdesk.core.auth.types import Identity
from salesdesk.core.entitlements.modules import RESERVED_MODULES
from salesdesk.core.rbac.types import LegacyAction


def has_permission(identity: Identity | None, module: str, feature: str) -> bool:
    """Check the actor's role-level permission for a module feature."""
    if identity is None:
        return False
    if identity.role.is_system or identity.role.is_org_admin:
        return True
    return bool(identity.permissions.get(module, {}).get(feature, False))


def _plan_active(identity: Identity) -> bool:
    # Subscription flag first; legacy organizations without a subscription
    # record fall back to their own active flags.
    subscription = identity.subscription
    if subscription is not None and subscription.is_active:
        return True
    org = identity.organization
    return org is not None and org.is_active and org.is_subscription_active


def is_plan_feature_enabled(
    identity: Identity | None, module: str, feature: str | None = None
) -> bool:
    """Check whether the organization's plan includes a module (and feature).

    Org admins are never plan-gated on reserved infrastructure modules.
    A feature is checked against ``module_features`` whenever the plan
    carries a feature map; a plan without one gates by module only.
    """
    if identity is None:
        return False
    if identity.role.is_system:
        return True
    if identity.role.is_org_admin and module in RESERVED_MODULES:
        return True

    if not _plan_active(identity):
        return False

    subscription = identity.subscription
    if subscription is None or module not in subscription.enabled_modules:
        return False

    if feature is None:
        return True

    # Plans without any feature map gate at module level only.
    if subscription.module_features is None:
        return True
    return bool(subscription.module_features.get(module, {}).get(feature, False))


def has_access(identity: Identity | None, module: str, feature: str) -> bool:
    """Composite access check used to gate actions.

    Requires both a plan that includes the feature and a role permission
    for it. Neither one alone is enough.
    """
    if identity is None:
        return False
    if identity.role.is_system:
        return True
    return is_plan_feature_enabled(identity, module, feature) and has_permission(
        identity, module, feature
    )


def is_feature_enabled(identity: Identity | None, module: str) -> bool:
    """Module-level plan check for organization navigation.

    System roles get False: they navigate a separate system surface and
    never see organization module tabs.
    """
    if identity is None:
        return False
    if identity.role.is_system:
        return False
    if identity.role.is_org_admin and module in RESERVED_MODULES:
        return True

    subscription = identity.subscription
    if subscription is None or not subscription.is_active:
        return False
    return module in subscription.enabled_modules


def can(identity: Identity | None, action: str, module: str) -> bool:
    """Legacy CRUD permission check.

    Deprecated in favour of ``has_access``. Unlike every other check here,
    system roles get False: they must not reach tenant resources through
    this path. Only view/create/update/delete are recognised.
    """
    warnings.warn(
        "can() is deprecated; use has_access()",
        DeprecationWarning,
        stacklevel=2,
    )
    if identity is None:
        return False
    if action not in {a.value for a in LegacyAction}:
        return False
    if identity.role.is_system:
        return False
    if identity.role.is_org_admin:
        return True
    return bool(identity.permissions.get(module, {}).get(action, False))
