# app/core/permissions.py

from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Mapping

from app.models.user import UserRole

FACULTY_ADMIN = UserRole.FACULTY_ADMIN
DEPARTMENTAL_OFFICER = UserRole.DEPARTMENTAL_OFFICER
LECTURER = UserRole.LECTURER
COURSE_REP = UserRole.COURSE_REP


class Permission(str, Enum):
    # Asset Management
    REGISTER_ASSETS = "REGISTER_ASSETS"
    VIEW_ALL_ASSETS = "VIEW_ALL_ASSETS"
    VIEW_AVAILABLE_CONSUMABLES = "VIEW_AVAILABLE_CONSUMABLES"
    VIEW_AVAILABLE_TEACHING_AIDS = "VIEW_AVAILABLE_TEACHING_AIDS"
    APPROVE_ASSET_REGISTRATIONS = "APPROVE_ASSET_REGISTRATIONS"

    # Request Management
    CREATE_REQUEST = "CREATE_REQUEST"
    VIEW_PERSONAL_REQUESTS = "VIEW_PERSONAL_REQUESTS"
    VIEW_PERSONAL_ALLOCATIONS = "VIEW_PERSONAL_ALLOCATIONS"
    APPROVE_REQUESTS = "APPROVE_REQUESTS"

    # Transfer Management
    CREATE_TRANSFER = "CREATE_TRANSFER"
    INITIATE_TRANSFERS = "INITIATE_TRANSFERS"
    TRANSFER_OWN_ASSETS = "TRANSFER_OWN_ASSETS"
    APPROVE_IN_DEPARTMENT_TRANSFERS = "APPROVE_IN_DEPARTMENT_TRANSFERS"
    APPROVE_INTER_DEPARTMENTAL_TRANSFERS = "APPROVE_INTER_DEPARTMENTAL_TRANSFERS"
    APPROVE_TRANSFERS = "APPROVE_TRANSFERS"
    MANAGE_INTERNAL_TRANSFERS = "MANAGE_INTERNAL_TRANSFERS"

    # Reports
    GENERATE_REPORTS = "GENERATE_REPORTS"
    VIEW_REPORTS = "VIEW_REPORTS"

    # Activity history
    VIEW_OWN_ACTIVITY_HISTORY = "VIEW_OWN_ACTIVITY_HISTORY"
    VIEW_DEPARTMENTAL_LOGS = "VIEW_DEPARTMENTAL_LOGS"
    VIEW_ALL_SYSTEM_LOGS = "VIEW_ALL_SYSTEM_LOGS"

    # Administration
    CONFIGURE_GLOBAL_PARAMETERS = "CONFIGURE_GLOBAL_PARAMETERS"
    CONFIGURE_DEPARTMENTAL_DATA = "CONFIGURE_DEPARTMENTAL_DATA"
    MANAGE_USERS = "MANAGE_USERS"


# ==========================================================
# PERMISSION TABLE
# Roles missing from an entry are denied (default-deny).
# ==========================================================
PERMISSIONS: Mapping[Permission, FrozenSet[UserRole]] = MappingProxyType({
    # --- ASSETS ---
    Permission.REGISTER_ASSETS: frozenset({DEPARTMENTAL_OFFICER}),
    Permission.VIEW_ALL_ASSETS: frozenset({FACULTY_ADMIN, DEPARTMENTAL_OFFICER}),
    Permission.VIEW_AVAILABLE_CONSUMABLES: frozenset({COURSE_REP, LECTURER, DEPARTMENTAL_OFFICER, FACULTY_ADMIN}),
    Permission.VIEW_AVAILABLE_TEACHING_AIDS: frozenset({COURSE_REP, LECTURER, DEPARTMENTAL_OFFICER, FACULTY_ADMIN}),
    Permission.APPROVE_ASSET_REGISTRATIONS: frozenset({FACULTY_ADMIN}),

    # --- REQUESTS ---
    Permission.CREATE_REQUEST: frozenset({LECTURER}),
    Permission.VIEW_PERSONAL_REQUESTS: frozenset({LECTURER}),
    Permission.VIEW_PERSONAL_ALLOCATIONS: frozenset({LECTURER}),
    Permission.APPROVE_REQUESTS: frozenset({DEPARTMENTAL_OFFICER, FACULTY_ADMIN}),

    # --- TRANSFERS ---
    Permission.CREATE_TRANSFER: frozenset({DEPARTMENTAL_OFFICER, LECTURER}),
    Permission.INITIATE_TRANSFERS: frozenset({DEPARTMENTAL_OFFICER, FACULTY_ADMIN}),
    Permission.TRANSFER_OWN_ASSETS: frozenset({LECTURER}),
    Permission.APPROVE_IN_DEPARTMENT_TRANSFERS: frozenset({FACULTY_ADMIN}),
    Permission.APPROVE_INTER_DEPARTMENTAL_TRANSFERS: frozenset({FACULTY_ADMIN}),
    Permission.APPROVE_TRANSFERS: frozenset({DEPARTMENTAL_OFFICER, FACULTY_ADMIN}),
    Permission.MANAGE_INTERNAL_TRANSFERS: frozenset({DEPARTMENTAL_OFFICER}),

    # --- REPORTS ---
    Permission.GENERATE_REPORTS: frozenset({FACULTY_ADMIN}),
    Permission.VIEW_REPORTS: frozenset({FACULTY_ADMIN, DEPARTMENTAL_OFFICER}),

    # --- ACTIVITY HISTORY ---
    Permission.VIEW_OWN_ACTIVITY_HISTORY: frozenset({LECTURER}),
    Permission.VIEW_DEPARTMENTAL_LOGS: frozenset({DEPARTMENTAL_OFFICER}),
    Permission.VIEW_ALL_SYSTEM_LOGS: frozenset({FACULTY_ADMIN}),

    # --- ADMINISTRATION ---
    Permission.CONFIGURE_GLOBAL_PARAMETERS: frozenset({FACULTY_ADMIN}),
    Permission.CONFIGURE_DEPARTMENTAL_DATA: frozenset({DEPARTMENTAL_OFFICER}),
    Permission.MANAGE_USERS: frozenset({FACULTY_ADMIN}),
})


# ==========================================================
# ROLE HOME PAGES (target of GET /dashboard)
# ==========================================================
DASHBOARD_PATHS: Mapping[UserRole, str] = MappingProxyType({
    FACULTY_ADMIN: "/admin/dashboard",
    DEPARTMENTAL_OFFICER: "/officer/dashboard",
    LECTURER: "/lecturer/dashboard",
    COURSE_REP: "/course-rep/dashboard",
})


def _check_tables() -> None:
    missing = [p.value for p in Permission if p not in PERMISSIONS]
    if missing:
        raise RuntimeError(f"Permissions without a role entry: {missing}")

    empty = [p.value for p, roles in PERMISSIONS.items() if not roles]
    if empty:
        raise RuntimeError(f"Permissions granted to no role: {empty}")

    homeless = [r.value for r in UserRole if r not in DASHBOARD_PATHS]
    if homeless:
        raise RuntimeError(f"Roles without a dashboard: {homeless}")


_check_tables()
