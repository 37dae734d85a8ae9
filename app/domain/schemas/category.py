"""Pydantic schemas for product categories."""

from pydantic import BaseModel, Field


class CategoryCreate(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    model_config = {"str_strip_whitespace": True}


class CategoryUpdate(CategoryCreate):
    pass


class CategoryRead(BaseModel):
    id: int
    name: str
    product_count: int = 0

    model_config = {"from_attributes": True}
