"""Process template endpoints.

A template is a reusable chain of stages with dependencies that can be
stamped onto a project item.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Query, status

from src.erp.api.dependencies import (
    ProjectCreator,
    ProjectDeleter,
    ProjectEditor,
    ProjectViewer,
    TemplateServiceDep,
)
from src.erp.schemas.template import (
    ApplyTemplateRequest,
    ApplyTemplateResult,
    ProcessTemplateCreate,
    ProcessTemplateDetailRead,
    ProcessTemplateRead,
    ProcessTemplateUpdate,
    TemplateDependencyCreate,
    TemplateDependencyRead,
    TemplateStageCreate,
    TemplateStageRead,
    TemplateStageUpdate,
)

router = APIRouter(prefix="/process-templates", tags=["process-templates"])


@router.get(
    "",
    response_model=list[ProcessTemplateRead],
    summary="List process templates",
)
async def list_templates(
    service: TemplateServiceDep,
    _user: ProjectViewer,
    include_inactive: Annotated[
        bool, Query(description="Include deactivated templates")
    ] = False,
) -> list[ProcessTemplateRead]:
    templates = await service.list_templates(include_inactive=include_inactive)
    return [ProcessTemplateRead.model_validate(t) for t in templates]


@router.post(
    "",
    response_model=ProcessTemplateRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create process template",
)
async def create_template(
    request: ProcessTemplateCreate, service: TemplateServiceDep, user: ProjectCreator
) -> ProcessTemplateRead:
    template = await service.create_template(request, created_by=user.id)
    return ProcessTemplateRead.model_validate(template)


@router.put(
    "/stages/{stage_id}",
    response_model=TemplateStageRead,
    summary="Update template stage",
    responses={404: {"description": "Template stage not found"}},
)
async def update_template_stage(
    stage_id: UUID,
    request: TemplateStageUpdate,
    service: TemplateServiceDep,
    _user: ProjectEditor,
) -> TemplateStageRead:
    stage = await service.update_template_stage(stage_id, request)
    return TemplateStageRead.model_validate(stage)


@router.delete(
    "/stages/{stage_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete template stage",
    responses={404: {"description": "Template stage not found"}},
)
async def delete_template_stage(
    stage_id: UUID, service: TemplateServiceDep, _user: ProjectEditor
) -> None:
    await service.delete_template_stage(stage_id)


@router.post(
    "/stages/{stage_id}/dependencies",
    response_model=TemplateDependencyRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create template dependency",
    responses={
        400: {"description": "Self-dependency or stages from different templates"},
        404: {"description": "Template stage not found"},
        409: {"description": "Dependency already exists"},
    },
)
async def create_template_dependency(
    stage_id: UUID,
    request: TemplateDependencyCreate,
    service: TemplateServiceDep,
    _user: ProjectEditor,
) -> TemplateDependencyRead:
    edge = await service.create_template_dependency(
        stage_id, request.depends_on_template_stage_id
    )
    return TemplateDependencyRead.model_validate(edge)


@router.delete(
    "/dependencies/{dependency_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete template dependency",
    responses={404: {"description": "Dependency not found"}},
)
async def delete_template_dependency(
    dependency_id: UUID, service: TemplateServiceDep, _user: ProjectEditor
) -> None:
    await service.delete_template_dependency(dependency_id)


@router.get(
    "/{template_id}",
    response_model=ProcessTemplateDetailRead,
    summary="Get process template",
    description="Get a template with its stages and dependencies.",
    responses={404: {"description": "Template not found"}},
)
async def get_template(
    template_id: UUID, service: TemplateServiceDep, _user: ProjectViewer
) -> ProcessTemplateDetailRead:
    template, stages, dependencies = await service.get_template_detail(template_id)
    return ProcessTemplateDetailRead(
        **ProcessTemplateRead.model_validate(template).model_dump(),
        stages=[TemplateStageRead.model_validate(s) for s in stages],
        dependencies=[TemplateDependencyRead.model_validate(d) for d in dependencies],
    )


@router.put(
    "/{template_id}",
    response_model=ProcessTemplateRead,
    summary="Update process template",
    responses={404: {"description": "Template not found"}},
)
async def update_template(
    template_id: UUID,
    request: ProcessTemplateUpdate,
    service: TemplateServiceDep,
    _user: ProjectEditor,
) -> ProcessTemplateRead:
    template = await service.update_template(template_id, request)
    return ProcessTemplateRead.model_validate(template)


@router.delete(
    "/{template_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete process template",
    responses={404: {"description": "Template not found"}},
)
async def delete_template(
    template_id: UUID, service: TemplateServiceDep, _user: ProjectDeleter
) -> None:
    await service.delete_template(template_id)


@router.post(
    "/{template_id}/apply",
    response_model=ApplyTemplateResult,
    summary="Apply template to item",
    description=(
        "Copy the template's stages onto a project item after its existing "
        "stages, with dependencies remapped to the new stages."
    ),
    responses={404: {"description": "Template or item not found"}},
)
async def apply_template(
    template_id: UUID,
    request: ApplyTemplateRequest,
    service: TemplateServiceDep,
    _user: ProjectEditor,
) -> ApplyTemplateResult:
    return await service.apply_to_item(template_id, request.item_id)


@router.get(
    "/{template_id}/stages",
    response_model=list[TemplateStageRead],
    summary="List template stages",
    responses={404: {"description": "Template not found"}},
)
async def list_template_stages(
    template_id: UUID, service: TemplateServiceDep, _user: ProjectViewer
) -> list[TemplateStageRead]:
    stages = await service.list_template_stages(template_id)
    return [TemplateStageRead.model_validate(s) for s in stages]


@router.post(
    "/{template_id}/stages",
    response_model=TemplateStageRead,
    status_code=status.HTTP_201_CREATED,
    summary="Create template stage",
    responses={404: {"description": "Template not found"}},
)
async def create_template_stage(
    template_id: UUID,
    request: TemplateStageCreate,
    service: TemplateServiceDep,
    _user: ProjectEditor,
) -> TemplateStageRead:
    stage = await service.create_template_stage(template_id, request)
    return TemplateStageRead.model_validate(stage)
