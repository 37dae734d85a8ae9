"""
Client Repository Interface.
Defines specific data access operations for Clients.
"""

from typing import Dict, Optional

from app.domain.repositories.base import BaseRepository
from app.domain.models.client import Client


class ClientRepository(BaseRepository[Client]):
    """Interface for Client-specific operations."""

    def get_by_email(self, email: str) -> Optional[Client]:
        """Case-insensitive lookup by the natural key."""
        ...

    def exists(self, id: int) -> bool:
        """True when a client with this ID exists."""
        ...

    def count_sales_by_client(self) -> Dict[int, int]:
        """Number of sales per client ID."""
        ...
