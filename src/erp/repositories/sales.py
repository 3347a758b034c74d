"""Read access to deals and their documents."""

from src.erp.models import Deal, DealDocument
from src.erp.repositories.base import BaseRepository


class DealRepository(BaseRepository[Deal]):
    model = Deal


class DealDocumentRepository(BaseRepository[DealDocument]):
    model = DealDocument
