import pytest

from app.models.user import UserRole


async def seed_assets(client, officer_h, admin_h):
    ids = []
    for code in ("REP-1", "REP-2"):
        payload = {"name": code, "asset_code": code, "type": "EQUIPMENT"}
        asset = (await client.post("/api/assets", json=payload, headers=officer_h)).json()
        await client.post(f"/api/assets/{asset['id']}/approve", headers=admin_h)
        ids.append(asset["id"])
    await client.post(f"/api/assets/{ids[1]}/archive", headers=admin_h)
    return ids


@pytest.mark.asyncio
async def test_summary_counts_lifecycle_states(client, officer, admin, headers_for):
    admin_h = headers_for(admin)
    await seed_assets(client, headers_for(officer), admin_h)

    res = await client.get("/api/reports", headers=admin_h)
    assert res.status_code == 200
    assets = res.json()["assets"]
    assert assets["total"] == 2
    assert assets["available"] == 1
    assert assets["retired"] == 1
    assert assets["maintenance"] == 0
    assert res.json()["requests"]["fulfilled"] == 0


@pytest.mark.asyncio
async def test_officers_only_view_the_summary(client, officer, admin, headers_for):
    officer_h = headers_for(officer)
    await seed_assets(client, officer_h, headers_for(admin))

    summary = await client.get("/api/reports?type=summary", headers=officer_h)
    assert summary.status_code == 200

    listing = await client.get("/api/reports?type=assets", headers=officer_h)
    assert listing.status_code == 403


@pytest.mark.asyncio
async def test_admin_generates_listings(client, officer, admin, headers_for):
    admin_h = headers_for(admin)
    ids = await seed_assets(client, headers_for(officer), admin_h)

    assets = (await client.get("/api/reports?type=assets", headers=admin_h)).json()
    assert sorted(a["id"] for a in assets) == sorted(ids)

    transfers = await client.get("/api/reports?type=transfers", headers=admin_h)
    assert transfers.json() == []

    bad = await client.get("/api/reports?type=payroll", headers=admin_h)
    assert bad.status_code == 400
    assert bad.json() == {"error": "Invalid report type"}


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.LECTURER, UserRole.COURSE_REP])
async def test_reports_are_closed_to_others(client, make_user, headers_for, role):
    user = await make_user(role)
    res = await client.get("/api/reports", headers=headers_for(user))
    assert res.status_code == 403
