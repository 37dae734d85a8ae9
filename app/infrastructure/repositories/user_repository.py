"""
SQLAlchemy identity store.
"""

from typing import Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.domain.models.user import User
from app.domain.repositories.user_repository import IdentityStore


class SQLAlchemyIdentityStore(IdentityStore):
    """Users table backed identity store."""

    def __init__(self, db: Session):
        self.db = db

    def get_by_email(self, email: str) -> Optional[User]:
        return self.db.query(User).filter(func.lower(User.email) == email.strip().lower()).first()

    def add(self, user: User) -> User:
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
