"""Repository layer - data access abstraction."""

from src.erp.repositories.base import BaseRepository
from src.erp.repositories.project import (
    ProjectItemRepository,
    ProjectRepository,
    ProjectStageRepository,
    StageDependencyRepository,
)
from src.erp.repositories.sales import DealDocumentRepository, DealRepository
from src.erp.repositories.template import (
    ProcessTemplateRepository,
    TemplateDependencyRepository,
    TemplateStageRepository,
)
from src.erp.repositories.user import RolePermissionRepository, RoleRepository, UserRepository
from src.erp.repositories.warehouse import (
    WarehouseItemRepository,
    WarehouseTransactionRepository,
)

__all__ = [
    # Base
    "BaseRepository",
    # Projects
    "ProjectItemRepository",
    "ProjectRepository",
    "ProjectStageRepository",
    "StageDependencyRepository",
    # Sales
    "DealDocumentRepository",
    "DealRepository",
    # Templates
    "ProcessTemplateRepository",
    "TemplateDependencyRepository",
    "TemplateStageRepository",
    # Users
    "RolePermissionRepository",
    "RoleRepository",
    "UserRepository",
    # Warehouse
    "WarehouseItemRepository",
    "WarehouseTransactionRepository",
]
