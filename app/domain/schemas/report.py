"""Render-ready DTOs for receipts and reports."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel


class ReceiptLine(BaseModel):
    name: str
    quantity: int
    unit_price: Decimal
    subtotal: Decimal


class SaleReceipt(BaseModel):
    sale_id: int
    invoice_number: str
    date: Optional[datetime] = None
    customer_name: str
    customer_email: str
    lines: list[ReceiptLine]
    subtotal: Decimal
    tax_rate: Decimal
    tax: Decimal
    total: Decimal
    payment_method: str = ""


class SaleReportRow(BaseModel):
    id: int
    invoice_number: str
    sale_date: Optional[datetime] = None
    client_name: str
    item_count: int
    subtotal: Decimal
    tax_rate: Decimal
    total: Decimal
    payment_method: str
    is_paid: bool


class SalesReport(BaseModel):
    generated_at: datetime
    rows: list[SaleReportRow]
    sale_count: int
    subtotal: Decimal
    total: Decimal


class ProductReportRow(BaseModel):
    id: int
    name: str
    description: str
    category_name: str
    unit_price: Decimal
    stock: int
    stock_value: Decimal


class ProductsReport(BaseModel):
    generated_at: datetime
    rows: list[ProductReportRow]
    product_count: int
    total_units: int
    total_stock_value: Decimal


class ClientReportRow(BaseModel):
    id: int
    full_name: str
    email: str
    phone_number: str
    address: str
    total_sales: int


class ClientsReport(BaseModel):
    generated_at: datetime
    rows: list[ClientReportRow]
    client_count: int
