"""Project endpoints: projects, their items, stages and schedule views.

Permission checks use the ``projects`` module. Users without ``view_all``
only see projects they manage.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.erp.api.dependencies import (
    PermissionServiceDep,
    ProjectCreator,
    ProjectDeleter,
    ProjectEditor,
    ProjectServiceDep,
    ProjectViewer,
    StageServiceDep,
)
from src.erp.models import PermissionModule, ProjectStatus
from src.erp.schemas.invoice import ProjectFromInvoiceRequest
from src.erp.schemas.pagination import PaginatedResponse
from src.erp.schemas.project import (
    ProjectCreate,
    ProjectDetailRead,
    ProjectItemCreate,
    ProjectItemRead,
    ProjectItemUpdate,
    ProjectRead,
    ProjectUpdate,
    StageCreate,
    StageDependencyRead,
    StageRead,
    StageReorderRequest,
)
from src.erp.schemas.schedule import ProcessOverviewRead, TimelineRead

router = APIRouter(prefix="/projects", tags=["projects"])


@router.get(
    "",
    response_model=PaginatedResponse[ProjectRead],
    summary="List projects",
    description="List projects newest first with cursor-based pagination.",
    responses={
        200: {"description": "Paginated list of projects"},
    },
)
async def list_projects(
    service: ProjectServiceDep,
    permissions: PermissionServiceDep,
    user: ProjectViewer,
    status_filter: Annotated[
        ProjectStatus | None, Query(alias="status", description="Filter by status")
    ] = None,
    manager_id: Annotated[UUID | None, Query(description="Filter by manager")] = None,
    cursor: Annotated[str | None, Query(description="Cursor for pagination")] = None,
    limit: Annotated[int, Query(ge=1, le=100, description="Max items to return")] = 50,
) -> PaginatedResponse[ProjectRead]:
    """List projects; restricted to the caller's own unless they can view all."""
    if not await permissions.can_view_all(user.id, PermissionModule.PROJECTS):
        manager_id = user.id
    projects, next_cursor, has_more = await service.list_projects(
        status=status_filter, manager_id=manager_id, cursor=cursor, limit=limit
    )
    return PaginatedResponse(
        items=[ProjectRead.model_validate(p) for p in projects],
        next_cursor=next_cursor,
        has_more=has_more,
    )


@router.post(
    "",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project",
    responses={
        201: {"description": "Project created"},
    },
)
async def create_project(
    request: ProjectCreate, service: ProjectServiceDep, user: ProjectCreator
) -> ProjectRead:
    if request.manager_id is None:
        request.manager_id = user.id
    project = await service.create_project(request)
    return ProjectRead.model_validate(project)


@router.post(
    "/from-invoice",
    response_model=ProjectRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project from invoice",
    description=(
        "Create a project from a deal's invoice: one item per selected position, "
        "optionally with per-position stages and dependencies."
    ),
    responses={
        201: {"description": "Project created"},
        400: {"description": "Document is not an invoice"},
        404: {"description": "Deal or invoice not found"},
        409: {"description": "A project already exists for this deal"},
    },
)
async def create_from_invoice(
    request: ProjectFromInvoiceRequest, service: ProjectServiceDep, _user: ProjectCreator
) -> ProjectRead:
    project = await service.create_from_invoice(request)
    return ProjectRead.model_validate(project)


@router.get(
    "/by-deal/{deal_id}",
    response_model=ProjectRead,
    summary="Get project by deal",
    responses={
        200: {"description": "Project linked to the deal"},
        404: {"description": "No project for this deal"},
    },
)
async def get_project_by_deal(
    deal_id: UUID, service: ProjectServiceDep, _user: ProjectViewer
) -> ProjectRead:
    project = await service.get_by_deal(deal_id)
    return ProjectRead.model_validate(project)


@router.get(
    "/{project_id}",
    response_model=ProjectDetailRead,
    summary="Get project",
    description="Get a project with its items and stages.",
    responses={
        200: {"description": "Project details"},
        404: {"description": "Project not found"},
    },
)
async def get_project(
    project_id: UUID, service: ProjectServiceDep, _user: ProjectViewer
) -> ProjectDetailRead:
    project, items, stages = await service.get_project_detail(project_id)
    return ProjectDetailRead(
        **ProjectRead.model_validate(project).model_dump(),
        items=[ProjectItemRead.model_validate(i) for i in items],
        stages=[StageRead.model_validate(s) for s in stages],
    )


@router.put(
    "/{project_id}",
    response_model=ProjectRead,
    summary="Update project",
    responses={
        200: {"description": "Project updated"},
        404: {"description": "Project not found"},
    },
)
async def update_project(
    project_id: UUID,
    request: ProjectUpdate,
    service: ProjectServiceDep,
    _user: ProjectEditor,
) -> ProjectRead:
    project = await service.update_project(project_id, request)
    return ProjectRead.model_validate(project)


@router.delete(
    "/{project_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project",
    description="Delete a project with its items, stages and dependencies.",
    responses={
        204: {"description": "Project deleted"},
        404: {"description": "Project not found"},
    },
)
async def delete_project(
    project_id: UUID, service: ProjectServiceDep, _user: ProjectDeleter
) -> None:
    await service.delete_project(project_id)


# --- stages and schedule ---


@router.get(
    "/{project_id}/stages",
    response_model=list[StageRead],
    summary="List project stages",
    responses={404: {"description": "Project not found"}},
)
async def list_project_stages(
    project_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> list[StageRead]:
    stages = await service.list_project_stages(project_id)
    return [StageRead.model_validate(s) for s in stages]


@router.post(
    "/{project_id}/stages",
    response_model=StageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create stage",
    description="Create a stage in the project and recompute its progress.",
    responses={
        201: {"description": "Stage created"},
        404: {"description": "Project or item not found"},
    },
)
async def create_project_stage(
    project_id: UUID,
    request: StageCreate,
    service: StageServiceDep,
    _user: ProjectEditor,
) -> StageRead:
    stage = await service.create_stage(project_id, request)
    return StageRead.model_validate(stage)


@router.get(
    "/{project_id}/dependencies",
    response_model=list[StageDependencyRead],
    summary="List project dependencies",
    description="All dependency edges whose dependent stage belongs to the project.",
)
async def list_project_dependencies(
    project_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> list[StageDependencyRead]:
    edges = await service.list_project_dependencies(project_id)
    return [StageDependencyRead.model_validate(e) for e in edges]


@router.get(
    "/{project_id}/timeline",
    response_model=TimelineRead,
    summary="Project timeline",
    responses={404: {"description": "Project not found"}},
)
async def get_timeline(
    project_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> TimelineRead:
    return await service.timeline(project_id)


@router.get(
    "/{project_id}/processes",
    response_model=ProcessOverviewRead,
    summary="Process overview",
    description="Stages with prerequisites, dependents, delays and the critical path.",
    responses={404: {"description": "Project not found"}},
)
async def get_process_overview(
    project_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> ProcessOverviewRead:
    return await service.process_overview(project_id)


# --- items ---


@router.get(
    "/{project_id}/items",
    response_model=list[ProjectItemRead],
    summary="List project items",
    responses={404: {"description": "Project not found"}},
)
async def list_items(
    project_id: UUID, service: ProjectServiceDep, _user: ProjectViewer
) -> list[ProjectItemRead]:
    items = await service.list_items(project_id)
    return [ProjectItemRead.model_validate(i) for i in items]


@router.post(
    "/{project_id}/items",
    response_model=ProjectItemRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create project item",
    responses={
        201: {"description": "Item created"},
        404: {"description": "Project not found"},
    },
)
async def create_item(
    project_id: UUID,
    request: ProjectItemCreate,
    service: ProjectServiceDep,
    _user: ProjectEditor,
) -> ProjectItemRead:
    item = await service.create_item(project_id, request)
    return ProjectItemRead.model_validate(item)


@router.put(
    "/{project_id}/items/{item_id}",
    response_model=ProjectItemRead,
    summary="Update project item",
    responses={404: {"description": "Project or item not found"}},
)
async def update_item(
    project_id: UUID,
    item_id: UUID,
    request: ProjectItemUpdate,
    service: ProjectServiceDep,
    _user: ProjectEditor,
) -> ProjectItemRead:
    item = await service.update_item(project_id, item_id, request)
    return ProjectItemRead.model_validate(item)


@router.delete(
    "/{project_id}/items/{item_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete project item",
    description="Delete an item with its stages and their dependencies.",
    responses={404: {"description": "Project or item not found"}},
)
async def delete_item(
    project_id: UUID,
    item_id: UUID,
    service: ProjectServiceDep,
    _user: ProjectDeleter,
) -> None:
    await service.delete_item(project_id, item_id)


@router.get(
    "/{project_id}/items/{item_id}/stages",
    response_model=list[StageRead],
    summary="List item stages",
    responses={404: {"description": "Project or item not found"}},
)
async def list_item_stages(
    project_id: UUID, item_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> list[StageRead]:
    stages = await service.list_item_stages(project_id, item_id)
    return [StageRead.model_validate(s) for s in stages]


@router.post(
    "/{project_id}/items/{item_id}/stages",
    response_model=StageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create item stage",
    responses={
        201: {"description": "Stage created"},
        404: {"description": "Project or item not found"},
    },
)
async def create_item_stage(
    project_id: UUID,
    item_id: UUID,
    request: StageCreate,
    service: StageServiceDep,
    _user: ProjectEditor,
) -> StageRead:
    stage = await service.create_stage(project_id, request, item_id=item_id)
    return StageRead.model_validate(stage)


@router.patch(
    "/{project_id}/items/{item_id}/stages/reorder",
    response_model=list[StageRead],
    summary="Reorder item stages",
    description="Set each stage's order to its position in ``stage_ids``.",
    responses={
        400: {"description": "stage_ids does not match the item's stages"},
        404: {"description": "Project or item not found"},
    },
)
async def reorder_item_stages(
    project_id: UUID,
    item_id: UUID,
    request: StageReorderRequest,
    service: StageServiceDep,
    _user: ProjectEditor,
) -> list[StageRead]:
    stages = await service.reorder_item_stages(project_id, item_id, request.stage_ids)
    return [StageRead.model_validate(s) for s in stages]
