"""
MedRank Tracker - HTTP API Tests
"""
from io import BytesIO

import pytest
from httpx import AsyncClient
from openpyxl import load_workbook

from conftest import STORAGE_KEY


@pytest.mark.asyncio
async def test_health_check(client: AsyncClient):
    response = await client.get("/api/v1/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


@pytest.mark.asyncio
async def test_subject_catalog(client: AsyncClient):
    response = await client.get("/api/v1/subjects/")
    assert response.status_code == 200
    groups = response.json()["data"]
    assert [g["label"] for g in groups] == ["Rank Building", "Rank Maintaining", "Rank Deciding"]
    assert sum(len(g["subjects"]) for g in groups) == 19


@pytest.mark.asyncio
async def test_create_and_list_tests(client: AsyncClient, neet_draft):
    response = await client.post("/api/v1/tests/", json=neet_draft)
    assert response.status_code == 201
    test = response.json()["data"]
    assert test["name"] == "GT1"
    anat = test["scores"]["anat"]
    assert anat["subjectId"] == "anat"
    assert anat["obtainedMarks"] == 300
    assert anat["totalMarks"] == 400
    assert anat["percentage"] == 75

    response = await client.get("/api/v1/tests/")
    assert [t["id"] for t in response.json()["data"]] == [test["id"]]


@pytest.mark.asyncio
async def test_unknown_subject_in_draft(client: AsyncClient, neet_draft):
    neet_draft["subjects"]["dentistry"] = {"correct": 1}
    response = await client.post("/api/v1/tests/", json=neet_draft)
    assert response.status_code == 400

    # the rejected draft does not block the next one
    del neet_draft["subjects"]["dentistry"]
    response = await client.post("/api/v1/tests/", json=neet_draft)
    assert response.status_code == 201


@pytest.mark.asyncio
async def test_rejected_update_does_not_block_edits(client: AsyncClient, neet_draft):
    test_id = (await client.post("/api/v1/tests/", json=neet_draft)).json()["data"]["id"]

    response = await client.put(f"/api/v1/tests/{test_id}", json={"subjects": {"dentistry": {"correct": 1}}})
    assert response.status_code == 400
    assert (await client.get("/api/v1/form/")).json()["status"] == "CLOSED"

    response = await client.put(f"/api/v1/tests/{test_id}", json={"name": "GT1 retake"})
    assert response.status_code == 200


@pytest.mark.asyncio
async def test_negative_counts_are_rejected(client: AsyncClient, neet_draft):
    neet_draft["subjects"]["anat"]["wrong"] = -1
    response = await client.post("/api/v1/tests/", json=neet_draft)
    assert response.status_code == 422


@pytest.mark.asyncio
async def test_form_flow(client: AsyncClient):
    response = await client.post("/api/v1/form/")
    assert response.status_code == 200
    form = response.json()
    assert form["status"] == "CREATE"
    assert form["draft"]["name"] == "GT1"

    response = await client.patch("/api/v1/form/subjects/anat", json={"correct": 50, "wrong": 0})
    assert response.json()["draft"]["subjects"]["anat"]["obtained"] == 200

    response = await client.put("/api/v1/form/", json={"mode": "INI_CET", "name": "INI Mock 1"})
    row = response.json()["draft"]["subjects"]["anat"]
    assert (row["obtained"], row["total"]) == (50, 50)

    response = await client.post("/api/v1/form/save")
    assert response.status_code == 200
    saved = response.json()["data"]
    assert saved["mode"] == "INI_CET"
    assert saved["scores"]["anat"]["percentage"] == 100

    response = await client.get("/api/v1/form/")
    assert response.json()["status"] == "CLOSED"


@pytest.mark.asyncio
async def test_save_without_open_form(client: AsyncClient):
    response = await client.post("/api/v1/form/save")
    assert response.status_code == 409


@pytest.mark.asyncio
async def test_edit_direct_entry_record_opens_in_direct_mode(client: AsyncClient):
    response = await client.post("/api/v1/tests/", json={
        "name": "GT1",
        "date": "2024-01-07",
        "mode": "CUSTOM",
        "subjects": {"anat": {"correct": 10, "wrong": 2, "obtained": 45, "total": 60}},
    })
    test_id = response.json()["data"]["id"]

    response = await client.post("/api/v1/form/", json={"test_id": test_id})
    form = response.json()
    assert form["status"] == "EDIT"
    assert form["draft"]["mode"] == "CUSTOM"
    assert form["draft"]["subjects"]["anat"]["obtained"] == 45


@pytest.mark.asyncio
async def test_open_form_for_unknown_test(client: AsyncClient):
    response = await client.post("/api/v1/form/", json={"test_id": "missing"})
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_update_and_delete(client: AsyncClient, neet_draft, storage):
    test_id = (await client.post("/api/v1/tests/", json=neet_draft)).json()["data"]["id"]

    response = await client.put(f"/api/v1/tests/{test_id}", json={"subjects": {"anat": {"correct": 100, "wrong": 0}}})
    assert response.status_code == 200
    updated = response.json()["data"]
    assert updated["id"] == test_id
    assert updated["scores"]["anat"]["percentage"] == 100
    # untouched rows keep their counts
    assert updated["scores"]["physio"]["correct"] == 10

    response = await client.delete(f"/api/v1/tests/{test_id}")
    assert response.json()["data"] is True
    assert not storage.has_item(STORAGE_KEY)

    response = await client.get(f"/api/v1/tests/{test_id}")
    assert response.status_code == 404


@pytest.mark.asyncio
async def test_dashboard_endpoint(client: AsyncClient, neet_draft):
    await client.post("/api/v1/tests/", json=neet_draft)
    response = await client.get("/api/v1/dashboard", params={"category": "RANK_BUILDING"})
    assert response.status_code == 200
    board = response.json()
    assert board["empty"] is False
    assert len(board["sections"]) == 1
    anat = board["sections"][0]["rows"][0]
    assert anat["cells"][0]["percentage"] == 75
    assert anat["cells"][0]["band"] == "Average"


@pytest.mark.asyncio
async def test_dashboard_uses_ui_filters(client: AsyncClient, neet_draft):
    await client.post("/api/v1/tests/", json=neet_draft)
    response = await client.put("/api/v1/ui/filters", json={"category": "RANK_DECIDING"})
    assert response.json()["category_filter"] == "RANK_DECIDING"

    board = (await client.get("/api/v1/dashboard")).json()
    assert [s["category"] for s in board["sections"]] == ["RANK_DECIDING"]

    response = await client.put("/api/v1/ui/filters", json={"category": "NOPE"})
    assert response.status_code == 400


@pytest.mark.asyncio
async def test_export_endpoint(client: AsyncClient, neet_draft):
    response = await client.get("/api/v1/export/")
    assert response.status_code == 400

    await client.post("/api/v1/tests/", json=neet_draft)
    response = await client.get("/api/v1/export/")
    assert response.status_code == 200
    assert "attachment" in response.headers["content-disposition"]
    assert "MedRank_ALL_" in response.headers["content-disposition"]

    ws = load_workbook(BytesIO(response.content)).active
    assert ws.cell(row=1, column=2).value == "GT1"


@pytest.mark.asyncio
async def test_analysis_endpoint(client: AsyncClient, neet_draft, analyzer):
    await client.post("/api/v1/tests/", json=neet_draft)
    response = await client.post("/api/v1/analysis/")
    assert response.status_code == 200
    outcome = response.json()
    assert outcome["applied"] is True
    assert outcome["text"] == analyzer.text

    status = (await client.get("/api/v1/analysis/")).json()
    assert status["text"] == analyzer.text
    assert status["is_analyzing"] is False

    # any data change invalidates the report
    await client.post("/api/v1/tests/", json=neet_draft)
    status = (await client.get("/api/v1/analysis/")).json()
    assert status["text"] == ""


@pytest.mark.asyncio
async def test_tab_switch(client: AsyncClient):
    response = await client.put("/api/v1/ui/tab", json={"tab": "AI_INSIGHTS"})
    assert response.status_code == 200
    assert response.json()["active_tab"] == "AI_INSIGHTS"
