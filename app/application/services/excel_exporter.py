"""Excel exporter — catalogue and sales as .xlsx.

Header rows use exactly the import headers, so an exported file can be fed
back into the import pipeline unchanged.
"""

import io
from typing import Dict, List

import pandas as pd
from sqlalchemy.orm import Session

from app.domain.models.client import Client
from app.domain.models.product import Product
from app.domain.models.sale import Sale
from app.domain.money import to_money

CLIENT_HEADERS = ["FirstName", "LastName", "Email", "PhoneNumber", "Address", "Role", "DateOfBirth"]
PRODUCT_HEADERS = ["Name", "Description", "UnitPrice", "Stock", "CategoryId"]
SALE_HEADERS = [
    "InvoiceNumber", "SaleDate", "ClientId", "Subtotal", "TaxRate", "Total",
    "PaymentMethod", "IsPaid", "Notes",
]

XLSX_MEDIA_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def _blank(value) -> str:
    return "" if value is None else str(value)


def _to_xlsx(records: List[Dict[str, str]], headers: List[str], sheet_name: str) -> bytes:
    df = pd.DataFrame(records, columns=headers)
    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        df.to_excel(writer, index=False, sheet_name=sheet_name)
    return buffer.getvalue()


def export_clients(db: Session) -> bytes:
    clients = db.query(Client).order_by(Client.id).all()
    records = [
        {
            "FirstName": c.first_name,
            "LastName": c.last_name,
            "Email": c.email,
            "PhoneNumber": _blank(c.phone_number),
            "Address": _blank(c.address),
            "Role": _blank(c.role),
            "DateOfBirth": c.date_of_birth.isoformat() if c.date_of_birth else "",
        }
        for c in clients
    ]
    return _to_xlsx(records, CLIENT_HEADERS, "Clients")


def export_products(db: Session) -> bytes:
    products = db.query(Product).order_by(Product.id).all()
    records = [
        {
            "Name": p.name,
            "Description": _blank(p.description),
            "UnitPrice": str(to_money(p.unit_price)),
            "Stock": str(p.stock),
            "CategoryId": _blank(p.category_id),
        }
        for p in products
    ]
    return _to_xlsx(records, PRODUCT_HEADERS, "Products")


def export_sales(db: Session) -> bytes:
    sales = db.query(Sale).order_by(Sale.id).all()
    records = [
        {
            "InvoiceNumber": s.invoice_number,
            "SaleDate": s.sale_date.strftime("%Y-%m-%d") if s.sale_date else "",
            "ClientId": str(s.client_id),
            "Subtotal": str(to_money(s.subtotal)),
            "TaxRate": str(s.tax_rate),
            "Total": str(to_money(s.total)),
            "PaymentMethod": _blank(s.payment_method),
            "IsPaid": "true" if s.is_paid else "false",
            "Notes": _blank(s.notes),
        }
        for s in sales
    ]
    return _to_xlsx(records, SALE_HEADERS, "Sales")
