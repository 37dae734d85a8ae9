"""
SQLAlchemy Implementation of Sale Repository.
"""

from typing import List, Optional

from sqlalchemy.orm import selectinload

from app.domain.models.sale import Sale, SaleItem
from app.domain.repositories.sale_repository import SaleRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemySaleRepository(SQLAlchemyRepository[Sale], SaleRepository):
    """Sale repository implementation using SQLAlchemy."""

    def list(self, skip: int = 0, limit: int = 100) -> List[Sale]:
        return (
            self.db.query(Sale)
            .options(selectinload(Sale.items), selectinload(Sale.client))
            .order_by(Sale.id)
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_by_invoice(self, invoice_number: str) -> Optional[Sale]:
        return self.db.query(Sale).filter(Sale.invoice_number == invoice_number.strip()).first()

    def get_item(self, item_id: int) -> Optional[SaleItem]:
        return self.db.get(SaleItem, item_id)

    def find_item(self, sale_id: int, product_id: int) -> Optional[SaleItem]:
        return (
            self.db.query(SaleItem)
            .filter(SaleItem.sale_id == sale_id, SaleItem.product_id == product_id)
            .first()
        )

    def add_item(self, item: SaleItem) -> SaleItem:
        self.db.add(item)
        self.db.flush()
        return item

    def list_items(self, sale_id: Optional[int] = None, skip: int = 0, limit: int = 100) -> List[SaleItem]:
        query = self.db.query(SaleItem)
        if sale_id is not None:
            query = query.filter(SaleItem.sale_id == sale_id)
        return query.order_by(SaleItem.id).offset(skip).limit(limit).all()
