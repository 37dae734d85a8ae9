"""Product category — maps to the 'categories' table."""

from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship

from app.infrastructure.database import Base


class Category(Base):
    __tablename__ = "categories"

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)

    products = relationship("Product", back_populates="category")

    @property
    def product_count(self) -> int:
        return len(self.products)

    def __repr__(self):
        return f"<Category {self.name}>"
