from datetime import datetime, timedelta, timezone

import pytest

from app.models.user import UserRole


def in_days(days: int) -> str:
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


async def shelf_asset(client, officer_h, admin_h, code="OSC-1"):
    payload = {"name": f"Oscilloscope {code}", "asset_code": code, "type": "EQUIPMENT"}
    asset = (await client.post("/api/assets", json=payload, headers=officer_h)).json()
    return (await client.post(f"/api/assets/{asset['id']}/approve", headers=admin_h)).json()


async def schedule(client, headers, asset, type="REPAIR", days=2, **extra):
    payload = {"asset_id": asset["id"], "type": type, "scheduled_date": in_days(days)}
    payload.update(extra)
    res = await client.post("/api/maintenance", json=payload, headers=headers)
    assert res.status_code == 201, res.text
    return res.json()


@pytest.mark.asyncio
async def test_scheduled_repair_takes_asset_out_of_service(client, officer, admin, headers_for):
    officer_h = headers_for(officer)
    asset = await shelf_asset(client, officer_h, headers_for(admin))

    record = await schedule(client, officer_h, asset, vendor="Acme Labs", cost=120.5)
    assert record["status"] == "SCHEDULED"
    assert record["created_by"] == str(officer.id)

    current = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert current["status"] == "MAINTENANCE"

    done = await client.patch(f"/api/maintenance/{record['id']}", json={"status": "COMPLETED"}, headers=officer_h)
    assert done.status_code == 200
    assert done.json()["completed_date"] is not None

    back = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert back["status"] == "AVAILABLE"


@pytest.mark.asyncio
async def test_inspection_leaves_asset_on_shelf_until_started(client, officer, admin, headers_for):
    officer_h = headers_for(officer)
    asset = await shelf_asset(client, officer_h, headers_for(admin))

    record = await schedule(client, officer_h, asset, type="INSPECTION")
    assert (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()["status"] == "AVAILABLE"

    await client.patch(f"/api/maintenance/{record['id']}", json={"status": "IN_PROGRESS"}, headers=officer_h)
    assert (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()["status"] == "MAINTENANCE"


@pytest.mark.asyncio
async def test_asset_stays_in_service_while_other_work_is_open(client, officer, admin, headers_for):
    officer_h = headers_for(officer)
    asset = await shelf_asset(client, officer_h, headers_for(admin))

    first = await schedule(client, officer_h, asset)
    await schedule(client, officer_h, asset, type="CALIBRATION", days=4)

    await client.patch(f"/api/maintenance/{first['id']}", json={"status": "COMPLETED"}, headers=officer_h)
    assert (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()["status"] == "MAINTENANCE"

    listed = (await client.get(
        f"/api/maintenance?asset_id={asset['id']}&status=SCHEDULED", headers=officer_h
    )).json()
    assert [r["type"] for r in listed] == ["CALIBRATION"]


@pytest.mark.asyncio
async def test_reminders_are_sent_once(client, officer, admin, headers_for):
    officer_h = headers_for(officer)
    asset = await shelf_asset(client, officer_h, headers_for(admin))
    soon = await schedule(client, officer_h, asset, type="INSPECTION", days=3)
    await schedule(client, officer_h, asset, type="PREVENTIVE", days=30)

    res = await client.get("/api/maintenance/reminders?days_ahead=7", headers=headers_for(admin))
    assert res.status_code == 200
    sweep = res.json()
    assert sweep["upcoming_maintenance"] == 1
    assert sweep["notified_users"] == 2
    assert [r["id"] for r in sweep["reminders"]] == [soon["id"]]

    notes = (await client.get("/api/notifications", headers=officer_h)).json()
    assert "MAINTENANCE_DUE" in [n["type"] for n in notes]

    again = (await client.get("/api/maintenance/reminders", headers=officer_h)).json()
    assert again["upcoming_maintenance"] == 0


@pytest.mark.asyncio
@pytest.mark.parametrize("role", [UserRole.LECTURER, UserRole.COURSE_REP])
async def test_only_custodians_manage_maintenance(client, officer, admin, make_user, headers_for, role):
    asset = await shelf_asset(client, headers_for(officer), headers_for(admin))
    user = await make_user(role)
    headers = headers_for(user)

    create = await client.post(
        "/api/maintenance", json={"asset_id": asset["id"], "type": "REPAIR"}, headers=headers
    )
    assert create.status_code == 403
    reminders = await client.get("/api/maintenance/reminders", headers=headers)
    assert reminders.status_code == 403

    listed = await client.get("/api/maintenance", headers=headers)
    assert listed.status_code == 200


@pytest.mark.asyncio
async def test_archived_asset_cannot_be_scheduled(client, officer, admin, headers_for):
    officer_h = headers_for(officer)
    asset = await shelf_asset(client, officer_h, headers_for(admin))
    await client.post(f"/api/assets/{asset['id']}/archive", headers=officer_h)

    res = await client.post("/api/maintenance", json={"asset_id": asset["id"], "type": "REPAIR"}, headers=officer_h)
    assert res.status_code == 400
    assert res.json() == {"error": "Archived assets cannot be scheduled for maintenance"}


@pytest.mark.asyncio
async def test_missing_record_is_404(client, officer, headers_for):
    res = await client.get("/api/maintenance/00000000-0000-0000-0000-000000000000", headers=headers_for(officer))
    assert res.status_code == 404
    assert res.json() == {"error": "Maintenance record not found"}
