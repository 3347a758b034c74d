"""Shared enums for models."""

from enum import Enum


class StageStatus(str, Enum):
    """Production stage status. Also used for projects."""

    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


ProjectStatus = StageStatus


class StockStatus(str, Enum):
    """Stock level derived from quantity against min_stock."""

    NORMAL = "normal"
    LOW = "low"
    CRITICAL = "critical"


class TransactionType(str, Enum):
    IN = "in"
    OUT = "out"


class DocumentType(str, Enum):
    QUOTE = "quote"
    INVOICE = "invoice"
    CONTRACT = "contract"


class PermissionModule(str, Enum):
    """Permission scopes. Process templates fall under projects."""

    PROJECTS = "projects"
    WAREHOUSE = "warehouse"


class PermissionAction(str, Enum):
    VIEW = "view"
    CREATE = "create"
    EDIT = "edit"
    DELETE = "delete"
