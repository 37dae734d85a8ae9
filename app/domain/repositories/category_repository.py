"""
Category Repository Interface.
"""

from typing import Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.category import Category


class CategoryRepository(BaseRepository[Category]):
    """Interface for Category-specific operations."""

    def get_by_name(self, name: str) -> Optional[Category]:
        """Case-insensitive lookup; names are unique."""
        ...
