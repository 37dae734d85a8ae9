"""
Product Repository Interface.
Defines specific data access operations for Products.
"""

from typing import Iterable, List, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.product import Product


class ProductRepository(BaseRepository[Product]):
    """Interface for Product-specific operations."""

    def get_by_name(self, name: str) -> Optional[Product]:
        """Case-insensitive lookup by the natural key."""
        ...

    def exists(self, id: int) -> bool:
        """True when a product with this ID exists."""
        ...

    def get_many_for_update(self, ids: Iterable[int]) -> List[Product]:
        """Fetch products and lock their rows for the current transaction."""
        ...

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        """Atomically remove units; False when stock would go negative."""
        ...

    def increment_stock(self, product_id: int, quantity: int) -> None:
        """Give units back, e.g. when a sale line shrinks."""
        ...
