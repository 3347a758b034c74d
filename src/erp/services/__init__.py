"""Service layer - business rules and transaction control."""

from src.erp.services.auth_service import AuthService
from src.erp.services.permission_service import PermissionService
from src.erp.services.progress import ProgressAggregator, compute_progress
from src.erp.services.project_service import ProjectService
from src.erp.services.stage_dependencies import DependencyIndex
from src.erp.services.stage_service import StageService
from src.erp.services.template_service import TemplateService
from src.erp.services.warehouse_service import WarehouseService, derive_stock_status

__all__ = [
    "AuthService",
    "DependencyIndex",
    "PermissionService",
    "ProgressAggregator",
    "ProjectService",
    "StageService",
    "TemplateService",
    "WarehouseService",
    "compute_progress",
    "derive_stock_status",
]
