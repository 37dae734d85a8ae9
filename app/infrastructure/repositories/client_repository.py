"""
SQLAlchemy Implementation of Client Repository.
"""

from typing import Dict, Optional

from sqlalchemy import func

from app.domain.models.client import Client
from app.domain.models.sale import Sale
from app.domain.repositories.client_repository import ClientRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyClientRepository(SQLAlchemyRepository[Client], ClientRepository):
    """Client repository implementation using SQLAlchemy."""

    def get_by_email(self, email: str) -> Optional[Client]:
        return (
            self.db.query(Client)
            .filter(func.lower(Client.email) == email.strip().lower())
            .first()
        )

    def count_sales_by_client(self) -> Dict[int, int]:
        rows = (
            self.db.query(Sale.client_id, func.count(Sale.id))
            .group_by(Sale.client_id)
            .all()
        )
        return {client_id: count for client_id, count in rows}
