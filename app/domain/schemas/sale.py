"""Pydantic schemas for Sales and SaleItems."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class CartLine(BaseModel):
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=1)


class SaleCreate(BaseModel):
    client_id: int = Field(gt=0)
    items: list[CartLine] = Field(min_length=1)
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)
    payment_method: str = Field(default="", max_length=50)
    notes: str = Field(default="", max_length=300)


class SaleUpdate(BaseModel):
    """Header fields an admin may correct; lines go through the sale-item routes."""
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)
    payment_method: Optional[str] = Field(default=None, max_length=50)
    notes: Optional[str] = Field(default=None, max_length=300)
    is_paid: Optional[bool] = None


class SaleItemCreate(BaseModel):
    sale_id: int = Field(gt=0)
    product_id: int = Field(gt=0)
    quantity: int = Field(ge=1)


class SaleItemUpdate(BaseModel):
    quantity: int = Field(ge=1)


class RegisterSaleRequest(BaseModel):
    """Storefront checkout: the customer is identified by e-mail."""
    customer_name: str = Field(min_length=1, max_length=200)
    customer_email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    items: list[CartLine] = Field(min_length=1)
    tax_rate: Optional[Decimal] = Field(default=None, ge=0, le=1)
    payment_method: str = Field(default="", max_length=50)
    notes: str = Field(default="", max_length=300)


class RegisterSaleResponse(BaseModel):
    message: str
    pdf: str
    sale_id: int
    invoice_number: str


class SaleItemRead(BaseModel):
    id: int
    sale_id: int
    product_id: int
    quantity: int
    unit_price: Decimal
    subtotal: Decimal

    model_config = {"from_attributes": True}


class SaleRead(BaseModel):
    id: int
    invoice_number: str
    sale_date: Optional[datetime] = None
    client_id: int
    items: list[SaleItemRead] = []
    subtotal: Decimal
    tax_rate: Decimal
    total: Decimal
    payment_method: str
    is_paid: bool
    notes: str

    model_config = {"from_attributes": True}
