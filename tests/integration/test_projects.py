"""Project CRUD, visibility, deletion and schedule views."""

from datetime import timedelta
from uuid import uuid4

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.erp.models import PermissionModule, StageStatus
from src.erp.models.base import utc_now
from tests.factories import ProjectFactory, WarehouseItemFactory
from tests.helpers import auth_headers, create_project_with_stages, create_user_with_permissions

pytestmark = pytest.mark.integration


class TestProjectCrud:
    async def test_create_defaults_manager_to_caller(
        self, client: AsyncClient, admin_headers: dict, admin_user
    ):
        response = await client.post(
            "/api/v1/projects",
            json={"name": "  Kitchen  ", "client_name": "Petrova"},
            headers=admin_headers,
        )

        assert response.status_code == 201
        project = response.json()
        assert project["name"] == "Kitchen"
        assert project["manager_id"] == str(admin_user.id)
        assert project["status"] == "pending"
        assert project["progress"] == 0

    async def test_blank_name_rejected(self, client: AsyncClient, admin_headers: dict):
        response = await client.post(
            "/api/v1/projects", json={"name": "   ", "client_name": "Petrova"}, headers=admin_headers
        )
        assert response.status_code == 422

    async def test_update_and_get(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        project, item, _ = await create_project_with_stages(db_session, ["Cutting"])

        response = await client.put(
            f"/api/v1/projects/{project.id}",
            json={"status": "in_progress", "client_name": "Sidorov"},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["status"] == "in_progress"

        detail = (await client.get(f"/api/v1/projects/{project.id}", headers=admin_headers)).json()
        assert detail["client_name"] == "Sidorov"
        assert [i["id"] for i in detail["items"]] == [str(item.id)]
        assert [s["name"] for s in detail["stages"]] == ["Cutting"]

    async def test_unknown_project(self, client: AsyncClient, admin_headers: dict):
        project_id = uuid4()
        response = await client.get(f"/api/v1/projects/{project_id}", headers=admin_headers)

        assert response.status_code == 404
        assert response.json()["detail"] == f"Project {project_id} not found"

    async def test_items_crud(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        project, _, _ = await create_project_with_stages(db_session, [])

        response = await client.post(
            f"/api/v1/projects/{project.id}/items",
            json={"name": "Wardrobe", "article": "WR-2", "quantity": 2},
            headers=admin_headers,
        )
        assert response.status_code == 201
        item = response.json()
        assert item["order"] == 1

        response = await client.put(
            f"/api/v1/projects/{project.id}/items/{item['id']}",
            json={"quantity": 5},
            headers=admin_headers,
        )
        assert response.status_code == 200
        assert response.json()["quantity"] == 5

        response = await client.post(
            f"/api/v1/projects/{project.id}/items/{item['id']}/stages",
            json={"name": "Cutting"},
            headers=admin_headers,
        )
        assert response.status_code == 201
        assert response.json()["item_id"] == item["id"]
        assert response.json()["order"] == 0

        items = (
            await client.get(f"/api/v1/projects/{project.id}/items", headers=admin_headers)
        ).json()
        assert len(items) == 2

    async def test_item_of_another_project_is_not_found(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        project, _, _ = await create_project_with_stages(db_session, [])
        _, other_item, _ = await create_project_with_stages(db_session, [])

        response = await client.put(
            f"/api/v1/projects/{project.id}/items/{other_item.id}",
            json={"quantity": 5},
            headers=admin_headers,
        )
        assert response.status_code == 404


class TestProjectList:
    async def test_filters_by_status(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        db_session.add_all(
            [
                ProjectFactory.build(name="Pending one"),
                ProjectFactory.build(name="Running one", status=StageStatus.IN_PROGRESS.value),
            ]
        )
        await db_session.commit()

        response = await client.get(
            "/api/v1/projects", params={"status": "in_progress"}, headers=admin_headers
        )

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["items"]] == ["Running one"]

    async def test_without_view_all_only_own_projects(
        self, client: AsyncClient, db_session: AsyncSession, admin_user
    ):
        manager, _ = await create_user_with_permissions(
            db_session, {PermissionModule.PROJECTS: {"can_view": True}}
        )
        db_session.add_all(
            [
                ProjectFactory.build(name="Mine", manager_id=manager.id),
                ProjectFactory.build(name="Someone else's", manager_id=admin_user.id),
            ]
        )
        await db_session.commit()

        response = await client.get(
            "/api/v1/projects",
            params={"manager_id": str(admin_user.id)},
            headers=auth_headers(manager),
        )

        assert response.status_code == 200
        assert [p["name"] for p in response.json()["items"]] == ["Mine"]

    async def test_admin_sees_everything(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        db_session.add_all([ProjectFactory.build() for _ in range(3)])
        await db_session.commit()

        response = await client.get("/api/v1/projects", headers=admin_headers)

        assert len(response.json()["items"]) == 3


class TestProjectDeletion:
    async def test_delete_cascades_and_detaches_stock(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        project, item, stages = await create_project_with_stages(db_session, ["Cutting", "Edging"])
        reserved = WarehouseItemFactory.build(project_id=project.id)
        db_session.add(reserved)
        await db_session.commit()
        await client.post(
            f"/api/v1/stages/{stages[1].id}/dependencies",
            json={"depends_on_stage_id": str(stages[0].id)},
            headers=admin_headers,
        )

        response = await client.delete(f"/api/v1/projects/{project.id}", headers=admin_headers)
        assert response.status_code == 204

        response = await client.get(f"/api/v1/projects/{project.id}", headers=admin_headers)
        assert response.status_code == 404
        response = await client.get(f"/api/v1/stages/{stages[0].id}", headers=admin_headers)
        assert response.status_code == 404

        stock = (await client.get(f"/api/v1/warehouse/{reserved.id}", headers=admin_headers)).json()
        assert stock["project_id"] is None

        await db_session.refresh(reserved)
        assert reserved.project_id is None

    async def test_viewer_cannot_delete(
        self, client: AsyncClient, db_session: AsyncSession, viewer_headers: dict
    ):
        project, _, _ = await create_project_with_stages(db_session, [])

        response = await client.delete(f"/api/v1/projects/{project.id}", headers=viewer_headers)

        assert response.status_code == 403


class TestScheduleViews:
    async def test_timeline_delay_and_deadline(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        planned = utc_now().replace(microsecond=0) - timedelta(days=10)
        project, _, stages = await create_project_with_stages(db_session, ["Cutting", "Assembly"])
        stages[0].status = StageStatus.COMPLETED.value
        stages[0].planned_end_date = planned
        stages[0].actual_end_date = planned + timedelta(days=2, hours=1)
        stages[1].planned_end_date = planned + timedelta(days=20)
        await db_session.commit()

        response = await client.get(f"/api/v1/projects/{project.id}/timeline", headers=admin_headers)

        assert response.status_code == 200
        timeline = response.json()
        assert [s["delay_days"] for s in timeline["stages"]] == [3, None]
        assert timeline["stats"]["total"] == 2
        assert timeline["stats"]["completed"] == 1
        assert timeline["stats"]["pending"] == 1
        assert timeline["stats"]["final_deadline"].startswith(
            (planned + timedelta(days=20)).isoformat()[:10]
        )

    async def test_processes_flag_delayed_stage_and_dependents(
        self, client: AsyncClient, db_session: AsyncSession, admin_headers: dict
    ):
        project, _, stages = await create_project_with_stages(
            db_session, ["Cutting", "Edging", "Assembly"]
        )
        stages[0].status = StageStatus.IN_PROGRESS.value
        stages[0].planned_end_date = utc_now() - timedelta(days=2, hours=12)
        await db_session.commit()
        for prerequisite, stage in ((stages[0], stages[1]), (stages[1], stages[2])):
            response = await client.post(
                f"/api/v1/stages/{stage.id}/dependencies",
                json={"depends_on_stage_id": str(prerequisite.id)},
                headers=admin_headers,
            )
            assert response.status_code == 201

        response = await client.get(
            f"/api/v1/projects/{project.id}/processes", headers=admin_headers
        )

        assert response.status_code == 200
        overview = response.json()
        assert overview["critical_path"] == [str(stages[0].id), str(stages[1].id)]
        rows = {row["name"]: row for row in overview["stages"]}
        assert rows["Cutting"]["delay_days"] == 3
        assert rows["Cutting"]["dependents"] == [str(stages[1].id)]
        assert rows["Edging"]["prerequisites"] == [str(stages[0].id)]
        assert rows["Assembly"]["on_critical_path"] is False
        assert overview["stats"]["delayed"] == 1
        assert overview["stats"]["total_delay_days"] == 3
