"""Receipt and report formatting — ORM records in, render-ready DTOs out.

Pure functions: no queries, no files. Missing product names fall back to
"Product #<id>" so a receipt can always be produced.
"""

from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, Mapping, Optional

from app.domain.models.client import Client
from app.domain.models.product import Product
from app.domain.models.sale import Sale
from app.domain.money import line_subtotal, to_money
from app.domain.schemas.report import (
    ClientReportRow,
    ClientsReport,
    ProductReportRow,
    ProductsReport,
    ReceiptLine,
    SaleReceipt,
    SaleReportRow,
    SalesReport,
)


def _now() -> datetime:
    return datetime.now(timezone.utc)


def format_sale_receipt(sale: Sale, product_names: Mapping[int, str], client: Optional[Client]) -> SaleReceipt:
    lines = [
        ReceiptLine(
            name=product_names.get(item.product_id) or f"Product #{item.product_id}",
            quantity=item.quantity,
            unit_price=to_money(item.unit_price),
            subtotal=line_subtotal(item.quantity, item.unit_price),
        )
        for item in sale.items
    ]
    # The stored header is the amount the customer was charged
    subtotal = to_money(sale.subtotal)
    total = to_money(sale.total)
    tax = total - subtotal

    return SaleReceipt(
        sale_id=sale.id,
        invoice_number=sale.invoice_number,
        date=sale.sale_date,
        customer_name=client.full_name if client else "",
        customer_email=client.email if client else "",
        lines=lines,
        subtotal=subtotal,
        tax_rate=Decimal(sale.tax_rate),
        tax=tax,
        total=total,
        payment_method=sale.payment_method or "",
    )


def format_sales_report(sales: Iterable[Sale]) -> SalesReport:
    rows = [
        SaleReportRow(
            id=sale.id,
            invoice_number=sale.invoice_number,
            sale_date=sale.sale_date,
            client_name=sale.client.full_name if sale.client else "",
            item_count=sum(item.quantity for item in sale.items),
            subtotal=to_money(sale.subtotal),
            tax_rate=Decimal(sale.tax_rate),
            total=to_money(sale.total),
            payment_method=sale.payment_method or "",
            is_paid=bool(sale.is_paid),
        )
        for sale in sales
    ]
    return SalesReport(
        generated_at=_now(),
        rows=rows,
        sale_count=len(rows),
        subtotal=to_money(sum((r.subtotal for r in rows), Decimal("0"))),
        total=to_money(sum((r.total for r in rows), Decimal("0"))),
    )


def format_products_report(products: Iterable[Product]) -> ProductsReport:
    rows = [
        ProductReportRow(
            id=product.id,
            name=product.name,
            description=product.description or "",
            category_name=product.category.name if product.category else "",
            unit_price=to_money(product.unit_price),
            stock=product.stock,
            stock_value=line_subtotal(product.stock, product.unit_price),
        )
        for product in products
    ]
    return ProductsReport(
        generated_at=_now(),
        rows=rows,
        product_count=len(rows),
        total_units=sum(r.stock for r in rows),
        total_stock_value=to_money(sum((r.stock_value for r in rows), Decimal("0"))),
    )


def format_clients_report(clients: Iterable[Client], sales_by_client: Optional[Dict[int, int]] = None) -> ClientsReport:
    sales_by_client = sales_by_client or {}
    rows = [
        ClientReportRow(
            id=client.id,
            full_name=client.full_name,
            email=client.email,
            phone_number=client.phone_number or "",
            address=client.address or "",
            total_sales=sales_by_client.get(client.id, 0),
        )
        for client in clients
    ]
    return ClientsReport(generated_at=_now(), rows=rows, client_count=len(rows))
