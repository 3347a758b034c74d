"""Repository factory dependencies."""

from typing import Annotated

from fastapi import Depends

from src.erp.api.dependencies.db import DBSession
from src.erp.repositories import (
    DealDocumentRepository,
    DealRepository,
    ProcessTemplateRepository,
    ProjectItemRepository,
    ProjectRepository,
    ProjectStageRepository,
    RolePermissionRepository,
    RoleRepository,
    StageDependencyRepository,
    TemplateDependencyRepository,
    TemplateStageRepository,
    UserRepository,
    WarehouseItemRepository,
    WarehouseTransactionRepository,
)


def get_user_repository(session: DBSession) -> UserRepository:
    return UserRepository(session)


def get_role_repository(session: DBSession) -> RoleRepository:
    return RoleRepository(session)


def get_role_permission_repository(session: DBSession) -> RolePermissionRepository:
    return RolePermissionRepository(session)


def get_project_repository(session: DBSession) -> ProjectRepository:
    return ProjectRepository(session)


def get_project_item_repository(session: DBSession) -> ProjectItemRepository:
    return ProjectItemRepository(session)


def get_stage_repository(session: DBSession) -> ProjectStageRepository:
    return ProjectStageRepository(session)


def get_stage_dependency_repository(session: DBSession) -> StageDependencyRepository:
    return StageDependencyRepository(session)


def get_deal_repository(session: DBSession) -> DealRepository:
    return DealRepository(session)


def get_deal_document_repository(session: DBSession) -> DealDocumentRepository:
    return DealDocumentRepository(session)


def get_warehouse_item_repository(session: DBSession) -> WarehouseItemRepository:
    return WarehouseItemRepository(session)


def get_warehouse_transaction_repository(session: DBSession) -> WarehouseTransactionRepository:
    return WarehouseTransactionRepository(session)


def get_template_repository(session: DBSession) -> ProcessTemplateRepository:
    return ProcessTemplateRepository(session)


def get_template_stage_repository(session: DBSession) -> TemplateStageRepository:
    return TemplateStageRepository(session)


def get_template_dependency_repository(session: DBSession) -> TemplateDependencyRepository:
    return TemplateDependencyRepository(session)


UserRepo = Annotated[UserRepository, Depends(get_user_repository)]
RoleRepo = Annotated[RoleRepository, Depends(get_role_repository)]
RolePermissionRepo = Annotated[RolePermissionRepository, Depends(get_role_permission_repository)]
ProjectRepo = Annotated[ProjectRepository, Depends(get_project_repository)]
ProjectItemRepo = Annotated[ProjectItemRepository, Depends(get_project_item_repository)]
StageRepo = Annotated[ProjectStageRepository, Depends(get_stage_repository)]
StageDependencyRepo = Annotated[StageDependencyRepository, Depends(get_stage_dependency_repository)]
DealRepo = Annotated[DealRepository, Depends(get_deal_repository)]
DealDocumentRepo = Annotated[DealDocumentRepository, Depends(get_deal_document_repository)]
WarehouseItemRepo = Annotated[WarehouseItemRepository, Depends(get_warehouse_item_repository)]
WarehouseTransactionRepo = Annotated[
    WarehouseTransactionRepository, Depends(get_warehouse_transaction_repository)
]
TemplateRepo = Annotated[ProcessTemplateRepository, Depends(get_template_repository)]
TemplateStageRepo = Annotated[TemplateStageRepository, Depends(get_template_stage_repository)]
TemplateDependencyRepo = Annotated[
    TemplateDependencyRepository, Depends(get_template_dependency_repository)
]
