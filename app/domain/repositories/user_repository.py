"""
Identity store interface.
The auth flow depends on this instead of a global identity context.
"""

from typing import Optional, Protocol

from app.domain.models.user import User


class IdentityStore(Protocol):
    """Where users and their password hashes live."""

    def get_by_email(self, email: str) -> Optional[User]:
        ...

    def add(self, user: User) -> User:
        ...
