import pytest

from app.models.user import UserRole


async def available_asset(client, officer_h, admin_h, code="PROJ-1", **extra):
    payload = {"name": f"Projector {code}", "asset_code": code, "type": "TEACHING_AID"}
    payload.update(extra)
    asset = (await client.post("/api/assets", json=payload, headers=officer_h)).json()
    res = await client.post(f"/api/assets/{asset['id']}/approve", headers=admin_h)
    assert res.json()["status"] == "AVAILABLE"
    return res.json()


@pytest.mark.asyncio
async def test_request_approval_allocates_and_notifies(client, officer, admin, lecturer, headers_for):
    officer_h, lecturer_h = headers_for(officer), headers_for(lecturer)
    asset = await available_asset(client, officer_h, headers_for(admin), quantity=3, min_stock_level=1)

    created = await client.post(
        "/api/requests",
        json={"asset_id": asset["id"], "requested_quantity": 2, "purpose": "Lab session"},
        headers=lecturer_h,
    )
    assert created.status_code == 201
    request = created.json()
    assert request["status"] == "PENDING"

    decided = await client.post(
        f"/api/requests/{request['id']}/approve",
        json={"status": "APPROVED", "issuance_condition": "Good"},
        headers=officer_h,
    )
    assert decided.status_code == 200
    assert decided.json()["status"] == "FULFILLED"
    assert decided.json()["fulfilled_at"] is not None
    assert decided.json()["issued_by"] == str(officer.id)

    updated = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert updated["allocated_quantity"] == 2
    assert updated["available_quantity"] == 1
    assert updated["allocated_to"] == str(lecturer.id)

    lecturer_notes = (await client.get("/api/notifications", headers=lecturer_h)).json()
    assert [n["type"] for n in lecturer_notes] == ["REQUEST_APPROVED"]

    officer_notes = (await client.get("/api/notifications", headers=officer_h)).json()
    assert "STOCK_LOW" in [n["type"] for n in officer_notes]

    again = await client.post(
        f"/api/requests/{request['id']}/approve", json={"status": "REJECTED"}, headers=officer_h
    )
    assert again.status_code == 400
    assert again.json() == {"error": "Request is not pending"}


@pytest.mark.asyncio
async def test_last_units_raise_stock_out(client, officer, admin, lecturer, headers_for):
    officer_h = headers_for(officer)
    asset = await available_asset(client, officer_h, headers_for(admin), quantity=1)

    request = (await client.post("/api/requests", json={"asset_id": asset["id"]}, headers=headers_for(lecturer))).json()
    await client.post(f"/api/requests/{request['id']}/approve", json={"status": "APPROVED"}, headers=officer_h)

    updated = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert updated["status"] == "ALLOCATED"

    admin_notes = (await client.get("/api/notifications", headers=headers_for(admin))).json()
    assert "STOCK_OUT" in [n["type"] for n in admin_notes]


@pytest.mark.asyncio
async def test_rejection_keeps_stock(client, officer, admin, lecturer, headers_for):
    officer_h = headers_for(officer)
    asset = await available_asset(client, officer_h, headers_for(admin))

    request = (await client.post("/api/requests", json={"asset_id": asset["id"]}, headers=headers_for(lecturer))).json()
    res = await client.post(
        f"/api/requests/{request['id']}/approve",
        json={"status": "REJECTED", "comments": "Under repair"},
        headers=officer_h,
    )
    assert res.json()["status"] == "REJECTED"

    updated = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert updated["allocated_quantity"] == 0

    notes = (await client.get("/api/notifications", headers=headers_for(lecturer))).json()
    assert notes[0]["type"] == "REQUEST_REJECTED"
    assert "Under repair" in notes[0]["message"]


@pytest.mark.asyncio
async def test_insufficient_quantity(client, officer, admin, lecturer, headers_for):
    officer_h = headers_for(officer)
    asset = await available_asset(client, officer_h, headers_for(admin), quantity=1)

    request = (await client.post(
        "/api/requests", json={"asset_id": asset["id"], "requested_quantity": 5}, headers=headers_for(lecturer)
    )).json()
    res = await client.post(f"/api/requests/{request['id']}/approve", json={"status": "APPROVED"}, headers=officer_h)
    assert res.status_code == 400
    assert res.json()["error"].startswith("Insufficient quantity")


@pytest.mark.asyncio
async def test_only_lecturers_create_requests(client, officer, admin, course_rep, headers_for):
    asset = await available_asset(client, headers_for(officer), headers_for(admin))
    for user in (officer, admin, course_rep):
        res = await client.post("/api/requests", json={"asset_id": asset["id"]}, headers=headers_for(user))
        assert res.status_code == 403


@pytest.mark.asyncio
async def test_pending_asset_cannot_be_requested(client, officer, lecturer, headers_for):
    payload = {"name": "Scope", "asset_code": "SCOPE-1", "type": "EQUIPMENT"}
    asset = (await client.post("/api/assets", json=payload, headers=headers_for(officer))).json()

    res = await client.post("/api/requests", json={"asset_id": asset["id"]}, headers=headers_for(lecturer))
    assert res.status_code == 400
    assert res.json() == {"error": "Asset is not available"}


@pytest.mark.asyncio
async def test_lecturers_only_list_their_own(client, officer, admin, make_user, headers_for):
    asset = await available_asset(client, headers_for(officer), headers_for(admin), quantity=5)
    first = await make_user(UserRole.LECTURER)
    second = await make_user(UserRole.LECTURER)
    for user in (first, second):
        await client.post("/api/requests", json={"asset_id": asset["id"]}, headers=headers_for(user))

    mine = (await client.get("/api/requests", headers=headers_for(first))).json()
    assert [r["requested_by"] for r in mine] == [str(first.id)]

    everything = (await client.get("/api/requests?status=PENDING", headers=headers_for(officer))).json()
    assert len(everything) == 2


@pytest.mark.asyncio
async def test_course_rep_cannot_approve(client, course_rep, headers_for):
    res = await client.post(
        "/api/requests/00000000-0000-0000-0000-000000000000/approve",
        json={"status": "APPROVED"},
        headers=headers_for(course_rep),
    )
    assert res.status_code == 403


async def fulfilled_request(client, asset, lecturer_h, officer_h, quantity=1):
    request = (await client.post(
        "/api/requests", json={"asset_id": asset["id"], "requested_quantity": quantity}, headers=lecturer_h
    )).json()
    res = await client.post(f"/api/requests/{request['id']}/approve", json={"status": "APPROVED"}, headers=officer_h)
    assert res.json()["status"] == "FULFILLED"
    return res.json()


@pytest.mark.asyncio
async def test_return_and_verification(client, officer, admin, lecturer, make_user, headers_for):
    officer_h, lecturer_h = headers_for(officer), headers_for(lecturer)
    asset = await available_asset(client, officer_h, headers_for(admin), quantity=1)
    request = await fulfilled_request(client, asset, lecturer_h, officer_h)

    stranger = await make_user(UserRole.LECTURER)
    res = await client.post(f"/api/requests/{request['id']}/return", headers=headers_for(stranger))
    assert res.status_code == 403

    early = await client.post(
        f"/api/requests/{request['id']}/verify-return", json={"verified_condition": "GOOD"}, headers=officer_h
    )
    assert early.status_code == 400
    assert early.json() == {"error": "Request is not in returned status"}

    returned = await client.post(f"/api/requests/{request['id']}/return", headers=lecturer_h)
    assert returned.status_code == 200
    assert returned.json()["status"] == "RETURNED"
    assert returned.json()["returned_at"] is not None

    shelved = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert shelved["status"] == "AVAILABLE"
    assert shelved["allocated_quantity"] == 0
    assert shelved["allocated_to"] is None

    verified = await client.post(
        f"/api/requests/{request['id']}/verify-return",
        json={"verified_condition": "DAMAGED", "verification_notes": "Cracked lens"},
        headers=officer_h,
    )
    assert verified.status_code == 200
    body = verified.json()
    assert body["verified_by"] == str(officer.id)
    assert body["return_condition"] == "DAMAGED"
    assert body["return_notes"] == "Cracked lens"

    repaired = (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()
    assert repaired["status"] == "MAINTENANCE"

    notes = (await client.get("/api/notifications", headers=lecturer_h)).json()
    assert notes[0]["type"] == "RETURN_VERIFIED"

    twice = await client.post(
        f"/api/requests/{request['id']}/verify-return", json={"verified_condition": "GOOD"}, headers=officer_h
    )
    assert twice.status_code == 400
    assert twice.json() == {"error": "Return already verified"}


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "condition, asset_status",
    [("GOOD", "AVAILABLE"), ("FUNCTIONAL", "AVAILABLE"), ("NEEDS_REPAIR", "MAINTENANCE"), ("LOST", "RETIRED")],
)
async def test_verified_condition_decides_asset_status(
    client, officer, admin, lecturer, headers_for, condition, asset_status
):
    officer_h, lecturer_h = headers_for(officer), headers_for(lecturer)
    asset = await available_asset(client, officer_h, headers_for(admin), quantity=1)
    request = await fulfilled_request(client, asset, lecturer_h, officer_h)
    await client.post(f"/api/requests/{request['id']}/return", headers=lecturer_h)

    res = await client.post(
        f"/api/requests/{request['id']}/verify-return",
        json={"verified_condition": condition},
        headers=headers_for(admin),
    )
    assert res.status_code == 200
    assert (await client.get(f"/api/assets/{asset['id']}", headers=officer_h)).json()["status"] == asset_status


@pytest.mark.asyncio
async def test_only_fulfilled_requests_can_be_returned(client, officer, admin, lecturer, course_rep, headers_for):
    asset = await available_asset(client, headers_for(officer), headers_for(admin))
    request = (await client.post(
        "/api/requests", json={"asset_id": asset["id"]}, headers=headers_for(lecturer)
    )).json()

    res = await client.post(f"/api/requests/{request['id']}/return", headers=headers_for(lecturer))
    assert res.status_code == 400
    assert res.json() == {"error": "Request is not fulfilled"}

    verify = await client.post(
        f"/api/requests/{request['id']}/verify-return",
        json={"verified_condition": "GOOD"},
        headers=headers_for(course_rep),
    )
    assert verify.status_code == 403


@pytest.mark.asyncio
async def test_pending_request_can_be_edited_and_withdrawn(client, officer, admin, lecturer, make_user, headers_for):
    lecturer_h = headers_for(lecturer)
    asset = await available_asset(client, headers_for(officer), headers_for(admin))
    request = (await client.post(
        "/api/requests", json={"asset_id": asset["id"], "purpose": "Lab"}, headers=lecturer_h
    )).json()

    stranger = await make_user(UserRole.LECTURER)
    hidden = await client.get(f"/api/requests/{request['id']}", headers=headers_for(stranger))
    assert hidden.status_code == 403
    visible = await client.get(f"/api/requests/{request['id']}", headers=headers_for(officer))
    assert visible.json()["purpose"] == "Lab"

    edited = await client.patch(
        f"/api/requests/{request['id']}", json={"purpose": "Open day demo"}, headers=lecturer_h
    )
    assert edited.status_code == 200
    assert edited.json()["purpose"] == "Open day demo"

    bad_field = await client.patch(f"/api/requests/{request['id']}", json={"status": "FULFILLED"}, headers=lecturer_h)
    assert bad_field.status_code == 400

    withdrawn = await client.delete(f"/api/requests/{request['id']}", headers=lecturer_h)
    assert withdrawn.json() == {"message": "Request deleted successfully"}
    gone = await client.get(f"/api/requests/{request['id']}", headers=lecturer_h)
    assert gone.status_code == 404


@pytest.mark.asyncio
async def test_decided_request_is_locked(client, officer, admin, lecturer, headers_for):
    officer_h, lecturer_h = headers_for(officer), headers_for(lecturer)
    asset = await available_asset(client, officer_h, headers_for(admin))
    request = await fulfilled_request(client, asset, lecturer_h, officer_h)

    edit = await client.patch(f"/api/requests/{request['id']}", json={"notes": "late"}, headers=lecturer_h)
    assert edit.status_code == 400
    assert edit.json() == {"error": "Can only update pending requests"}

    delete = await client.delete(f"/api/requests/{request['id']}", headers=officer_h)
    assert delete.status_code == 400
    assert delete.json() == {"error": "Can only delete pending requests"}
