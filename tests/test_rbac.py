import pytest

from app.core.permissions import DASHBOARD_PATHS, PERMISSIONS, Permission
from app.core.rbac import has_all_permissions, has_any_permission, has_permission, permissions_for
from app.models.user import UserRole

A = UserRole.FACULTY_ADMIN
O = UserRole.DEPARTMENTAL_OFFICER
L = UserRole.LECTURER
C = UserRole.COURSE_REP

EXPECTED = {
    Permission.REGISTER_ASSETS: {O},
    Permission.VIEW_ALL_ASSETS: {A, O},
    Permission.VIEW_AVAILABLE_CONSUMABLES: {C, L, O, A},
    Permission.VIEW_AVAILABLE_TEACHING_AIDS: {C, L, O, A},
    Permission.CREATE_REQUEST: {L},
    Permission.VIEW_PERSONAL_REQUESTS: {L},
    Permission.VIEW_PERSONAL_ALLOCATIONS: {L},
    Permission.APPROVE_REQUESTS: {O, A},
    Permission.CREATE_TRANSFER: {O, L},
    Permission.APPROVE_IN_DEPARTMENT_TRANSFERS: {A},
    Permission.APPROVE_TRANSFERS: {O, A},
    Permission.MANAGE_INTERNAL_TRANSFERS: {O},
    Permission.GENERATE_REPORTS: {A},
    Permission.VIEW_REPORTS: {A, O},
    Permission.INITIATE_TRANSFERS: {O, A},
    Permission.TRANSFER_OWN_ASSETS: {L},
    Permission.APPROVE_INTER_DEPARTMENTAL_TRANSFERS: {A},
    Permission.APPROVE_ASSET_REGISTRATIONS: {A},
    Permission.VIEW_OWN_ACTIVITY_HISTORY: {L},
    Permission.VIEW_DEPARTMENTAL_LOGS: {O},
    Permission.VIEW_ALL_SYSTEM_LOGS: {A},
    Permission.CONFIGURE_GLOBAL_PARAMETERS: {A},
    Permission.CONFIGURE_DEPARTMENTAL_DATA: {O},
    Permission.MANAGE_USERS: {A},
}


def test_every_permission_is_in_the_table():
    assert set(PERMISSIONS) == set(Permission)
    assert set(EXPECTED) == set(Permission)


@pytest.mark.parametrize("permission", list(Permission))
@pytest.mark.parametrize("role", list(UserRole))
def test_has_permission_matches_table(role, permission):
    assert has_permission(role, permission) is (role in EXPECTED[permission])


def test_admin_cannot_register_assets():
    assert not has_permission(A, Permission.REGISTER_ASSETS)
    assert has_permission(O, Permission.REGISTER_ASSETS)


def test_table_is_read_only():
    with pytest.raises(TypeError):
        PERMISSIONS[Permission.REGISTER_ASSETS] = frozenset(UserRole)  # type: ignore[index]


@pytest.mark.parametrize("role", list(UserRole))
def test_empty_collections(role):
    assert has_any_permission(role, []) is False
    assert has_all_permissions(role, []) is True


def test_any_and_all():
    pair = [Permission.REGISTER_ASSETS, Permission.MANAGE_USERS]
    assert has_any_permission(O, pair)
    assert has_any_permission(A, pair)
    assert not has_any_permission(L, pair)
    assert not has_all_permissions(O, pair)
    assert has_all_permissions(A, [Permission.APPROVE_TRANSFERS, Permission.APPROVE_IN_DEPARTMENT_TRANSFERS])
    assert not has_all_permissions(O, [Permission.APPROVE_TRANSFERS, Permission.APPROVE_IN_DEPARTMENT_TRANSFERS])


def test_permissions_for_role():
    assert permissions_for(C) == {Permission.VIEW_AVAILABLE_CONSUMABLES, Permission.VIEW_AVAILABLE_TEACHING_AIDS}
    assert Permission.MANAGE_USERS in permissions_for(A)


def test_unknown_permission_name_is_rejected():
    with pytest.raises(ValueError):
        Permission("DELETE_EVERYTHING")


def test_every_role_has_a_dashboard():
    assert DASHBOARD_PATHS == {
        A: "/admin/dashboard",
        O: "/officer/dashboard",
        L: "/lecturer/dashboard",
        C: "/course-rep/dashboard",
    }
