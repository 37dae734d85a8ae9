"""
SQLAlchemy implementation of the Base Repository.
"""

from typing import Any, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Session

from app.domain.repositories.base import BaseRepository
from app.infrastructure.database import Base

ModelType = TypeVar("ModelType", bound=Base)


def _as_dict(obj_in: Any) -> dict:
    if isinstance(obj_in, BaseModel):
        return obj_in.model_dump(exclude_unset=True)
    return dict(obj_in)


class SQLAlchemyRepository(BaseRepository[ModelType], Generic[ModelType]):
    """Generic repository implementation for SQLAlchemy models."""

    def __init__(self, db: Session, model: Type[ModelType]):
        self.db = db
        self.model = model

    def get_by_id(self, id: int) -> Optional[ModelType]:
        return self.db.get(self.model, id)

    def exists(self, id: int) -> bool:
        return self.db.query(self.model.id).filter(self.model.id == id).first() is not None

    def list(self, skip: int = 0, limit: int = 100) -> List[ModelType]:
        return self.db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def create(self, obj_in: Any) -> ModelType:
        db_obj = obj_in if isinstance(obj_in, self.model) else self.model(**_as_dict(obj_in))
        self.db.add(db_obj)
        self.db.flush()
        return db_obj

    def update(self, db_obj: ModelType, obj_in: Any) -> ModelType:
        update_data = _as_dict(obj_in)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        self.db.add(db_obj)
        self.db.flush()
        return db_obj

    def delete(self, id: int) -> Optional[ModelType]:
        obj = self.db.get(self.model, id)
        if obj:
            self.db.delete(obj)
            self.db.flush()
        return obj

    def commit(self) -> None:
        self.db.commit()
