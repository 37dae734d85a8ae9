"""
SQLAlchemy Implementation of Category Repository.
"""

from typing import Optional

from sqlalchemy import func

from app.domain.models.category import Category
from app.domain.repositories.category_repository import CategoryRepository
from app.infrastructure.repositories.base_repository import SQLAlchemyRepository


class SQLAlchemyCategoryRepository(SQLAlchemyRepository[Category], CategoryRepository):
    """Category repository implementation using SQLAlchemy."""

    def get_by_name(self, name: str) -> Optional[Category]:
        return (
            self.db.query(Category)
            .filter(func.lower(Category.name) == name.strip().lower())
            .first()
        )
