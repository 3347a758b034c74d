"""FastAPI dependency injection definitions.

Re-exports the session, repository, service and auth dependencies.
"""

# Auth
from src.erp.api.dependencies.auth import (
    CurrentUser,
    ProjectCreator,
    ProjectDeleter,
    ProjectEditor,
    ProjectViewer,
    WarehouseCreator,
    WarehouseDeleter,
    WarehouseEditor,
    WarehouseViewer,
    get_current_user,
    require_permission,
)

# Database
from src.erp.api.dependencies.db import DBSession, get_db_session

# Repositories
from src.erp.api.dependencies.repositories import (
    ProjectRepo,
    RoleRepo,
    StageRepo,
    UserRepo,
    WarehouseItemRepo,
)

# Services
from src.erp.api.dependencies.services import (
    AuthServiceDep,
    PermissionServiceDep,
    ProgressDep,
    ProjectServiceDep,
    StageServiceDep,
    TemplateServiceDep,
    WarehouseServiceDep,
)

__all__ = [
    # Database
    "DBSession",
    "get_db_session",
    # Auth
    "CurrentUser",
    "ProjectCreator",
    "ProjectDeleter",
    "ProjectEditor",
    "ProjectViewer",
    "WarehouseCreator",
    "WarehouseDeleter",
    "WarehouseEditor",
    "WarehouseViewer",
    "get_current_user",
    "require_permission",
    # Repositories
    "ProjectRepo",
    "RoleRepo",
    "StageRepo",
    "UserRepo",
    "WarehouseItemRepo",
    # Services
    "AuthServiceDep",
    "PermissionServiceDep",
    "ProgressDep",
    "ProjectServiceDep",
    "StageServiceDep",
    "TemplateServiceDep",
    "WarehouseServiceDep",
]
