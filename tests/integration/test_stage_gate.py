"""Dependency gate on stage status changes."""

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from tests.factories import ProjectItemFactory, ProjectStageFactory
from tests.helpers import create_project_with_stages

pytestmark = pytest.mark.integration


async def _link(client: AsyncClient, headers: dict, stage_id, depends_on_id) -> dict:
    response = await client.post(
        f"/api/v1/stages/{stage_id}/dependencies",
        json={"depends_on_stage_id": str(depends_on_id)},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


async def test_start_blocked_until_prerequisite_completed(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    project, _, (cutting, assembly) = await create_project_with_stages(
        db_session, ["Cutting", "Assembly"]
    )
    await _link(client, admin_headers, assembly.id, cutting.id)

    response = await client.post(f"/api/v1/stages/{assembly.id}/start", headers=admin_headers)
    assert response.status_code == 400
    body = response.json()
    assert body["blocking_stages"] == ["Cutting"]
    assert body["detail"] == (
        "Cannot start this stage. Complete the required stages first: Cutting"
    )
    assert body["request_id"]

    # Nothing changed
    stage = (await client.get(f"/api/v1/stages/{assembly.id}", headers=admin_headers)).json()
    assert stage["status"] == "pending"
    assert stage["actual_start_date"] is None

    response = await client.post(f"/api/v1/stages/{cutting.id}/complete", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "completed"
    assert response.json()["actual_end_date"] is not None

    response = await client.post(f"/api/v1/stages/{assembly.id}/start", headers=admin_headers)
    assert response.status_code == 200
    assert response.json()["status"] == "in_progress"
    assert response.json()["actual_start_date"] is not None

    detail = (await client.get(f"/api/v1/projects/{project.id}", headers=admin_headers)).json()
    assert detail["progress"] == 50


async def test_put_status_goes_through_gate(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    _, _, (first, second, third) = await create_project_with_stages(
        db_session, ["Cutting", "Edging", "Assembly"]
    )
    await _link(client, admin_headers, third.id, first.id)
    await _link(client, admin_headers, third.id, second.id)

    response = await client.put(
        f"/api/v1/stages/{third.id}", json={"status": "completed"}, headers=admin_headers
    )
    assert response.status_code == 400
    assert response.json()["blocking_stages"] == ["Cutting", "Edging"]

    # Moving back to pending and editing other fields is never gated
    response = await client.put(
        f"/api/v1/stages/{third.id}",
        json={"status": "pending", "name": "Final assembly"},
        headers=admin_headers,
    )
    assert response.status_code == 200
    assert response.json()["name"] == "Final assembly"


async def test_blockers_preview(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    _, _, (cutting, assembly) = await create_project_with_stages(
        db_session, ["Cutting", "Assembly"]
    )
    await _link(client, admin_headers, assembly.id, cutting.id)

    response = await client.get(f"/api/v1/stages/{assembly.id}/blockers", headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["can_start"] is False
    assert [s["name"] for s in body["blocking_stages"]] == ["Cutting"]

    response = await client.get(f"/api/v1/stages/{cutting.id}/blockers", headers=admin_headers)
    assert response.json() == {"can_start": True, "blocking_stages": []}


async def test_edges_across_items_do_not_block(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    project, _, (cutting,) = await create_project_with_stages(db_session, ["Cutting"])
    other_item = ProjectItemFactory.build(project_id=project.id, order=1)
    db_session.add(other_item)
    await db_session.flush()
    painting = ProjectStageFactory.build(
        project_id=project.id, item_id=other_item.id, name="Painting"
    )
    db_session.add(painting)
    await db_session.commit()

    await _link(client, admin_headers, painting.id, cutting.id)

    response = await client.post(f"/api/v1/stages/{painting.id}/start", headers=admin_headers)
    assert response.status_code == 200

    # The edge is still stored and listed
    edges = (
        await client.get(f"/api/v1/projects/{project.id}/dependencies", headers=admin_headers)
    ).json()
    assert len(edges) == 1


async def test_dependency_validation(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    _, _, (cutting, assembly) = await create_project_with_stages(
        db_session, ["Cutting", "Assembly"]
    )

    response = await client.post(
        f"/api/v1/stages/{cutting.id}/dependencies",
        json={"depends_on_stage_id": str(cutting.id)},
        headers=admin_headers,
    )
    assert response.status_code == 400

    edge = await _link(client, admin_headers, assembly.id, cutting.id)
    response = await client.post(
        f"/api/v1/stages/{assembly.id}/dependencies",
        json={"depends_on_stage_id": str(cutting.id)},
        headers=admin_headers,
    )
    assert response.status_code == 409

    response = await client.delete(
        f"/api/v1/stages/dependencies/{edge['id']}", headers=admin_headers
    )
    assert response.status_code == 204

    response = await client.post(f"/api/v1/stages/{assembly.id}/start", headers=admin_headers)
    assert response.status_code == 200


async def test_delete_stage_removes_edges_both_ways(
    client: AsyncClient, db_session: AsyncSession, admin_headers: dict
):
    project, _, (cutting, edging, assembly) = await create_project_with_stages(
        db_session, ["Cutting", "Edging", "Assembly"]
    )
    await _link(client, admin_headers, edging.id, cutting.id)
    await _link(client, admin_headers, assembly.id, edging.id)

    response = await client.delete(f"/api/v1/stages/{edging.id}", headers=admin_headers)
    assert response.status_code == 204

    edges = (
        await client.get(f"/api/v1/projects/{project.id}/dependencies", headers=admin_headers)
    ).json()
    assert edges == []

    response = await client.get(f"/api/v1/stages/{edging.id}", headers=admin_headers)
    assert response.status_code == 404
