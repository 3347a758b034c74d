"""Service factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.erp.api.dependencies.db import DBSession
from src.erp.api.dependencies.repositories import (
    DealDocumentRepo,
    DealRepo,
    ProjectItemRepo,
    ProjectRepo,
    RolePermissionRepo,
    RoleRepo,
    StageDependencyRepo,
    StageRepo,
    TemplateDependencyRepo,
    TemplateRepo,
    TemplateStageRepo,
    UserRepo,
    WarehouseItemRepo,
    WarehouseTransactionRepo,
)
from src.erp.services import (
    AuthService,
    PermissionService,
    ProgressAggregator,
    ProjectService,
    StageService,
    TemplateService,
    WarehouseService,
)


def get_auth_service(user_repo: UserRepo, role_repo: RoleRepo) -> AuthService:
    return AuthService(user_repo, role_repo)


def get_permission_service(
    user_repo: UserRepo, role_repo: RoleRepo, role_permission_repo: RolePermissionRepo
) -> PermissionService:
    return PermissionService(user_repo, role_repo, role_permission_repo)


def get_progress_aggregator(
    project_repo: ProjectRepo, stage_repo: StageRepo, session: DBSession
) -> ProgressAggregator:
    return ProgressAggregator(project_repo, stage_repo, session)


ProgressDep = Annotated[ProgressAggregator, Depends(get_progress_aggregator)]


def get_project_service(
    project_repo: ProjectRepo,
    item_repo: ProjectItemRepo,
    stage_repo: StageRepo,
    dependency_repo: StageDependencyRepo,
    deal_repo: DealRepo,
    document_repo: DealDocumentRepo,
    progress: ProgressDep,
    session: DBSession,
) -> ProjectService:
    return ProjectService(
        project_repo,
        item_repo,
        stage_repo,
        dependency_repo,
        deal_repo,
        document_repo,
        progress,
        session,
    )


def get_stage_service(
    project_repo: ProjectRepo,
    item_repo: ProjectItemRepo,
    stage_repo: StageRepo,
    dependency_repo: StageDependencyRepo,
    progress: ProgressDep,
    session: DBSession,
) -> StageService:
    return StageService(project_repo, item_repo, stage_repo, dependency_repo, progress, session)


def get_template_service(
    template_repo: TemplateRepo,
    template_stage_repo: TemplateStageRepo,
    template_dependency_repo: TemplateDependencyRepo,
    item_repo: ProjectItemRepo,
    stage_repo: StageRepo,
    dependency_repo: StageDependencyRepo,
    progress: ProgressDep,
    session: DBSession,
) -> TemplateService:
    return TemplateService(
        template_repo,
        template_stage_repo,
        template_dependency_repo,
        item_repo,
        stage_repo,
        dependency_repo,
        progress,
        session,
    )


def get_warehouse_service(
    item_repo: WarehouseItemRepo,
    transaction_repo: WarehouseTransactionRepo,
    session: DBSession,
) -> WarehouseService:
    return WarehouseService(item_repo, transaction_repo, session)


AuthServiceDep = Annotated[AuthService, Depends(get_auth_service)]
PermissionServiceDep = Annotated[PermissionService, Depends(get_permission_service)]
ProjectServiceDep = Annotated[ProjectService, Depends(get_project_service)]
StageServiceDep = Annotated[StageService, Depends(get_stage_service)]
TemplateServiceDep = Annotated[TemplateService, Depends(get_template_service)]
WarehouseServiceDep = Annotated[WarehouseService, Depends(get_warehouse_service)]
