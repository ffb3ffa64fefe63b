# app/core/rbac.py

from typing import FrozenSet, Iterable

from app.core.permissions import PERMISSIONS, Permission
from app.models.user import UserRole


def has_permission(role: UserRole, permission: Permission) -> bool:
    return role in PERMISSIONS[permission]


def has_any_permission(role: UserRole, permissions: Iterable[Permission]) -> bool:
    """False for an empty collection."""
    return any(has_permission(role, p) for p in permissions)


def has_all_permissions(role: UserRole, permissions: Iterable[Permission]) -> bool:
    """True for an empty collection."""
    return all(has_permission(role, p) for p in permissions)


def permissions_for(role: UserRole) -> FrozenSet[Permission]:
    return frozenset(p for p, roles in PERMISSIONS.items() if role in roles)
