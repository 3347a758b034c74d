"""Stage endpoints: gated status changes and dependency edges."""

from uuid import UUID

from fastapi import APIRouter, status

from src.erp.api.dependencies import (
    CurrentUser,
    ProjectDeleter,
    ProjectEditor,
    ProjectViewer,
    StageServiceDep,
)
from src.erp.schemas.project import (
    AssignedStageRead,
    StageBlockersRead,
    StageDependencyCreate,
    StageDependencyRead,
    StageRead,
    StageUpdate,
)

router = APIRouter(prefix="/stages", tags=["stages"])

_BLOCKED_RESPONSE = {
    "description": "Stage is blocked by incomplete prerequisites",
    "content": {
        "application/json": {
            "example": {
                "detail": "Cannot start this stage. Complete the required stages first: Cutting",
                "request_id": "3f2c1e0a-...",
                "blocking_stages": ["Cutting"],
            }
        }
    },
}


@router.get(
    "/mine",
    response_model=list[AssignedStageRead],
    summary="My stages",
    description="Stages assigned to the current user, with their project names.",
)
async def list_my_stages(user: CurrentUser, service: StageServiceDep) -> list[AssignedStageRead]:
    pairs = await service.list_assigned(user.id)
    return [
        AssignedStageRead(
            **StageRead.model_validate(stage).model_dump(), project_name=project.name
        )
        for stage, project in pairs
    ]


@router.delete(
    "/dependencies/{dependency_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete stage dependency",
    responses={404: {"description": "Dependency not found"}},
)
async def delete_dependency(
    dependency_id: UUID, service: StageServiceDep, _user: ProjectEditor
) -> None:
    await service.delete_dependency(dependency_id)


@router.get(
    "/{stage_id}",
    response_model=StageRead,
    summary="Get stage",
    responses={404: {"description": "Stage not found"}},
)
async def get_stage(stage_id: UUID, service: StageServiceDep, _user: ProjectViewer) -> StageRead:
    stage = await service.get_stage(stage_id)
    return StageRead.model_validate(stage)


@router.put(
    "/{stage_id}",
    response_model=StageRead,
    summary="Update stage",
    description=(
        "Update a stage. Moving it out of pending is refused while a required "
        "stage of the same item is incomplete."
    ),
    responses={
        400: _BLOCKED_RESPONSE,
        404: {"description": "Stage not found"},
    },
)
async def update_stage(
    stage_id: UUID,
    request: StageUpdate,
    service: StageServiceDep,
    _user: ProjectEditor,
) -> StageRead:
    stage = await service.update_stage(stage_id, request)
    return StageRead.model_validate(stage)


@router.delete(
    "/{stage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete stage",
    description="Delete a stage and every dependency edge touching it.",
    responses={404: {"description": "Stage not found"}},
)
async def delete_stage(stage_id: UUID, service: StageServiceDep, _user: ProjectDeleter) -> None:
    await service.delete_stage(stage_id)


@router.post(
    "/{stage_id}/start",
    response_model=StageRead,
    summary="Start stage",
    responses={400: _BLOCKED_RESPONSE, 404: {"description": "Stage not found"}},
)
async def start_stage(stage_id: UUID, service: StageServiceDep, _user: ProjectEditor) -> StageRead:
    stage = await service.start_stage(stage_id)
    return StageRead.model_validate(stage)


@router.post(
    "/{stage_id}/complete",
    response_model=StageRead,
    summary="Complete stage",
    responses={400: _BLOCKED_RESPONSE, 404: {"description": "Stage not found"}},
)
async def complete_stage(
    stage_id: UUID, service: StageServiceDep, _user: ProjectEditor
) -> StageRead:
    stage = await service.complete_stage(stage_id)
    return StageRead.model_validate(stage)


@router.get(
    "/{stage_id}/blockers",
    response_model=StageBlockersRead,
    summary="Stage blockers",
    description="Whether the stage may start, and which required stages are incomplete.",
    responses={404: {"description": "Stage not found"}},
)
async def get_blockers(
    stage_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> StageBlockersRead:
    blocking = await service.get_incomplete_required_stages(stage_id)
    return StageBlockersRead(
        can_start=not blocking,
        blocking_stages=[StageRead.model_validate(s) for s in blocking],
    )


@router.get(
    "/{stage_id}/dependencies",
    response_model=list[StageDependencyRead],
    summary="List stage dependencies",
    description="Edges where this stage is the dependent.",
)
async def list_stage_dependencies(
    stage_id: UUID, service: StageServiceDep, _user: ProjectViewer
) -> list[StageDependencyRead]:
    edges = await service.list_stage_dependencies(stage_id)
    return [StageDependencyRead.model_validate(e) for e in edges]


@router.post(
    "/{stage_id}/dependencies",
    response_model=StageDependencyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create stage dependency",
    description="Require ``depends_on_stage_id`` to complete before this stage starts.",
    responses={
        400: {"description": "A stage cannot depend on itself"},
        404: {"description": "Stage not found"},
        409: {"description": "Dependency already exists"},
    },
)
async def create_dependency(
    stage_id: UUID,
    request: StageDependencyCreate,
    service: StageServiceDep,
    _user: ProjectEditor,
) -> StageDependencyRead:
    edge = await service.create_dependency(stage_id, request.depends_on_stage_id)
    return StageDependencyRead.model_validate(edge)
