"""
Sale Repository Interface.
Sale items live inside their sale, so they are reached through this repository.
"""

from typing import List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.sale import Sale, SaleItem


class SaleRepository(BaseRepository[Sale]):
    """Interface for Sale-specific operations."""

    def get_by_invoice(self, invoice_number: str) -> Optional[Sale]:
        """Lookup by invoice number."""
        ...

    def exists(self, id: int) -> bool:
        """True when a sale with this ID exists."""
        ...

    def get_item(self, item_id: int) -> Optional[SaleItem]:
        """Get a single sale line."""
        ...

    def find_item(self, sale_id: int, product_id: int) -> Optional[SaleItem]:
        """Line of a given product inside a given sale."""
        ...

    def add_item(self, item: SaleItem) -> SaleItem:
        """Attach a new line."""
        ...

    def list_items(self, sale_id: Optional[int] = None, skip: int = 0, limit: int = 100) -> List[SaleItem]:
        """List sale lines, optionally for one sale."""
        ...
