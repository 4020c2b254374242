"""Role gate: deny-by-default role checks on the current user."""

from collections.abc import Iterable
from typing import TypeVar

from volterra.models.enums import UserRole
from volterra.schemas.auth import AuthUser

T = TypeVar("T")
F = TypeVar("F")

ADMIN_ROLES: frozenset[UserRole] = frozenset({UserRole.SUPER_ADMIN, UserRole.ADMIN})


def normalize_roles(allowed_roles: Iterable[UserRole | str] | None) -> frozenset[UserRole]:
    """
    Coerce allowed roles to a set of UserRole.

    Accepts enum members or their string values; unknown values are dropped and
    a missing or non-iterable argument yields the empty set.
    """
    if allowed_roles is None or isinstance(allowed_roles, (str, bytes)):
        return frozenset()
    try:
        items = list(allowed_roles)
    except TypeError:
        return frozenset()
    roles: set[UserRole] = set()
    for item in items:
        if isinstance(item, UserRole):
            roles.add(item)
            continue
        try:
            roles.add(UserRole(item))
        except ValueError:
            continue
    return frozenset(roles)


def has_role(
    user: AuthUser | None,
    allowed_roles: Iterable[UserRole | str] | None,
) -> bool:
    """True iff a user is present and their role is in allowed_roles. An empty set admits nobody."""
    if user is None:
        return False
    return user.role in normalize_roles(allowed_roles)


def role_gate(
    user: AuthUser | None,
    allowed_roles: Iterable[UserRole | str] | None,
    content: T,
    fallback: F | None = None,
) -> T | F | None:
    """Return content when has_role holds, otherwise fallback (None by default)."""
    if has_role(user, allowed_roles):
        return content
    return fallback
