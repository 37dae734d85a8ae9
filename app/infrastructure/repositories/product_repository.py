"""
SQLAlchemy Implementation of Product Repository.
"""

from typing import Iterable, List, Optional

from sqlalchemy import func, update

from app.domain.models.product import Product
from app.domain.repositories.product_repository import ProductRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyProductRepository(SQLAlchemyRepository[Product], ProductRepository):
    """Product repository implementation using SQLAlchemy."""

    def get_by_name(self, name: str) -> Optional[Product]:
        return (
            self.db.query(Product)
            .filter(func.lower(Product.name) == name.strip().lower())
            .order_by(Product.id)
            .first()
        )

    def get_many_for_update(self, ids: Iterable[int]) -> List[Product]:
        ids = sorted(set(ids))
        if not ids:
            return []
        # Sorted ids keep lock acquisition order stable across requests
        return (
            self.db.query(Product)
            .filter(Product.id.in_(ids))
            .order_by(Product.id)
            .with_for_update()
            .all()
        )

    def decrement_stock(self, product_id: int, quantity: int) -> bool:
        result = self.db.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        product = self.db.get(Product, product_id)
        if product is not None:
            self.db.expire(product, ["stock", "updated_at"])
        return result.rowcount == 1

    def increment_stock(self, product_id: int, quantity: int) -> None:
        self.db.execute(
            update(Product)
            .where(Product.id == product_id)
            .values(stock=Product.stock + quantity, updated_at=func.now())
            .execution_options(synchronize_session=False)
        )
        product = self.db.get(Product, product_id)
        if product is not None:
            self.db.expire(product, ["stock", "updated_at"])
