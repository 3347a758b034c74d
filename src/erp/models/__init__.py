"""Model exports.

Import from here: `from src.erp.models import Project, ProjectStage`
"""

from src.erp.models.enums import (
    DocumentType,
    PermissionAction,
    PermissionModule,
    ProjectStatus,
    StageStatus,
    StockStatus,
    TransactionType,
)
from src.erp.models.project import Project, ProjectItem, ProjectStage, StageDependency
from src.erp.models.sales import Deal, DealDocument
from src.erp.models.template import ProcessTemplate, TemplateDependency, TemplateStage
from src.erp.models.user import Role, RolePermission, User
from src.erp.models.warehouse import WarehouseItem, WarehouseTransaction

__all__ = [
    # Enums
    "DocumentType",
    "PermissionAction",
    "PermissionModule",
    "ProjectStatus",
    "StageStatus",
    "StockStatus",
    "TransactionType",
    # Users
    "Role",
    "RolePermission",
    "User",
    # Sales
    "Deal",
    "DealDocument",
    # Projects
    "Project",
    "ProjectItem",
    "ProjectStage",
    "StageDependency",
    # Templates
    "ProcessTemplate",
    "TemplateDependency",
    "TemplateStage",
    # Warehouse
    "WarehouseItem",
    "WarehouseTransaction",
]
