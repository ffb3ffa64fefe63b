import pytest


@pytest.mark.asyncio
async def test_each_role_reaches_its_dashboard(client, admin, officer, lecturer, course_rep, headers_for):
    expected = {
        "/admin/dashboard": (admin, "admin-dashboard"),
        "/officer/dashboard": (officer, "officer-dashboard"),
        "/lecturer/dashboard": (lecturer, "lecturer-dashboard"),
        "/course-rep/dashboard": (course_rep, "course-rep-dashboard"),
    }
    for path, (user, page) in expected.items():
        res = await client.get(path, headers=headers_for(user))
        assert res.status_code == 200
        assert res.json()["page"] == page


@pytest.mark.asyncio
async def test_admin_summary_counts(client, admin, officer, headers_for):
    payload = {"name": "Microscope", "asset_code": "MIC-1", "type": "EQUIPMENT"}
    await client.post("/api/assets", json=payload, headers=headers_for(officer))

    stats = (await client.get("/admin/dashboard", headers=headers_for(admin))).json()["stats"]
    assert stats["assets"]["total"] == 1
    assert stats["assets"]["pending_approval"] == 1
    assert stats["requests"] == {"total": 0, "pending": 0}


@pytest.mark.asyncio
async def test_admin_may_open_other_dashboards(client, admin, headers_for):
    res = await client.get("/lecturer/dashboard", headers=headers_for(admin))
    assert res.status_code == 200
    assert res.json()["stats"]["my_requests"] == 0
