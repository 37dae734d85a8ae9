"""Pydantic schemas for Product domain."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class ProductBase(BaseModel):
    name: str = Field(min_length=1, max_length=150)
    description: Optional[str] = Field(default=None, max_length=300)
    unit_price: Decimal = Field(ge=Decimal("0.01"), max_digits=10, decimal_places=2)
    stock: int = Field(ge=0, le=2_147_483_647)
    category_id: Optional[int] = Field(default=None, gt=0)


class ProductCreate(ProductBase):
    pass


class ProductUpdate(BaseModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=150)
    description: Optional[str] = Field(default=None, max_length=300)
    unit_price: Optional[Decimal] = Field(default=None, ge=Decimal("0.01"), max_digits=10, decimal_places=2)
    stock: Optional[int] = Field(default=None, ge=0, le=2_147_483_647)
    category_id: Optional[int] = Field(default=None, gt=0)


class ProductRead(ProductBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
