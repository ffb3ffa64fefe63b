import pytest

from app.core.route_guard import (
    ALLOW,
    GuardAction,
    TO_DASHBOARD,
    TO_SIGN_IN,
    evaluate_route,
    is_guarded,
    path_matches,
)
from app.core.session import SessionUser
from app.models.user import UserRole


def session(role: UserRole) -> SessionUser:
    return SessionUser(user_id="00000000-0000-0000-0000-000000000001", role=role)


# ------------------------------------------------------------------
# Pure decision function
# ------------------------------------------------------------------
@pytest.mark.parametrize("path", ["/dashboard", "/admin/users", "/officer", "/lecturer/x", "/course-rep/y", "/api/assets"])
def test_no_session_goes_to_sign_in(path):
    assert evaluate_route(None, path) == TO_SIGN_IN


@pytest.mark.parametrize("path", ["/api/auth/login", "/api/auth/session", "/api/auth"])
def test_auth_api_always_passes(path):
    assert evaluate_route(None, path) == ALLOW


@pytest.mark.parametrize("path", ["/admin/dashboard", "/officer/assets", "/lecturer/requests", "/course-rep/consumables", "/api/x", "/dashboard"])
def test_admin_passes_everywhere(path):
    assert evaluate_route(session(UserRole.FACULTY_ADMIN), path) == ALLOW


@pytest.mark.parametrize(
    "role, own, foreign",
    [
        (UserRole.DEPARTMENTAL_OFFICER, "/officer/dashboard", ["/admin/dashboard", "/lecturer/x", "/course-rep/x"]),
        (UserRole.LECTURER, "/lecturer/dashboard", ["/admin/users", "/officer/x", "/course-rep/x"]),
        (UserRole.COURSE_REP, "/course-rep/dashboard", ["/admin", "/officer/x", "/lecturer/x"]),
    ],
)
def test_roles_confined_to_their_area(role, own, foreign):
    assert evaluate_route(session(role), own) == ALLOW
    for path in foreign:
        assert evaluate_route(session(role), path) == TO_DASHBOARD


def test_officer_on_admin_redirects_to_dashboard():
    decision = evaluate_route(session(UserRole.DEPARTMENTAL_OFFICER), "/admin/users")
    assert decision.action is GuardAction.DASHBOARD
    assert decision.redirect_to == "/dashboard"


def test_neutral_paths_pass_for_everyone():
    for role in UserRole:
        assert evaluate_route(session(role), "/dashboard") == ALLOW
        assert evaluate_route(session(role), "/api/assets") == ALLOW


def test_prefix_matches_whole_segments():
    assert path_matches("/admin", "/admin")
    assert path_matches("/admin/users", "/admin")
    assert not path_matches("/administrator", "/admin")
    assert not is_guarded("/administrator")
    assert not is_guarded("/uploads/a.png")
    assert is_guarded("/api/assets")


def test_decisions_are_deterministic():
    s = session(UserRole.LECTURER)
    assert evaluate_route(s, "/officer/x") == evaluate_route(s, "/officer/x")


# ------------------------------------------------------------------
# Middleware
# ------------------------------------------------------------------
@pytest.mark.asyncio
async def test_unauthenticated_page_redirects_to_sign_in(client):
    res = await client.get("/admin/dashboard")
    assert res.status_code == 307
    assert res.headers["location"] == "http://testserver/auth/signin"


@pytest.mark.asyncio
async def test_unauthenticated_api_redirects_to_sign_in(client):
    res = await client.get("/api/assets?type=CONSUMABLE")
    assert res.status_code == 307
    assert res.headers["location"] == "http://testserver/auth/signin"


@pytest.mark.asyncio
async def test_invalid_token_is_treated_as_no_session(client):
    res = await client.get("/dashboard", headers={"Authorization": "Bearer not-a-token"})
    assert res.status_code == 307
    assert res.headers["location"].endswith("/auth/signin")


@pytest.mark.asyncio
async def test_wrong_area_redirects_to_dashboard(client, officer, headers_for):
    res = await client.get("/admin/users", headers=headers_for(officer))
    assert res.status_code == 307
    assert res.headers["location"] == "http://testserver/dashboard"


@pytest.mark.asyncio
async def test_dashboard_redirects_to_role_home(client, lecturer, headers_for):
    res = await client.get("/dashboard", headers=headers_for(lecturer))
    assert res.status_code == 307
    assert res.headers["location"].endswith("/lecturer/dashboard")


@pytest.mark.asyncio
async def test_redirect_chain_settles_on_own_dashboard(client, course_rep, headers_for):
    headers = headers_for(course_rep)
    first = await client.get("/officer/dashboard", headers=headers)
    assert first.headers["location"].endswith("/dashboard")

    second = await client.get("/dashboard", headers=headers)
    assert second.headers["location"].endswith("/course-rep/dashboard")

    final = await client.get("/course-rep/dashboard", headers=headers)
    assert final.status_code == 200


@pytest.mark.asyncio
async def test_sign_in_page_is_open(client):
    res = await client.get("/auth/signin")
    assert res.status_code == 200
    assert res.json()["page"] == "signin"


@pytest.mark.asyncio
async def test_session_cookie_is_accepted(client, admin, headers_for):
    token = headers_for(admin)["Authorization"].split(" ", 1)[1]
    client.cookies.set("session_token", token)
    res = await client.get("/admin/dashboard")
    assert res.status_code == 200


def test_lecturer_area():
    assert evaluate_route(session(UserRole.COURSE_REP), "/lecturer/x") == TO_DASHBOARD
    assert evaluate_route(session(UserRole.LECTURER), "/lecturer/x") == ALLOW
    assert evaluate_route(session(UserRole.FACULTY_ADMIN), "/lecturer/x") == ALLOW
