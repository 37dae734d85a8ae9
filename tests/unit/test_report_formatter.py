"""Tests for report_formatter and the PDF/xlsx renderers built on it."""

import io
import re
from datetime import datetime, timezone
from decimal import Decimal
from types import SimpleNamespace

import openpyxl

from app.application.services.excel_exporter import (
    CLIENT_HEADERS,
    PRODUCT_HEADERS,
    SALE_HEADERS,
    export_clients,
    export_products,
    export_sales,
)
from app.application.services.import_pipeline import ImportKind, import_spreadsheet
from app.application.services.report_formatter import (
    format_clients_report,
    format_products_report,
    format_sale_receipt,
    format_sales_report,
)
from app.application.services.sale_service import create_sale
from app.infrastructure.pdf_renderer import (
    render_clients_report,
    render_products_report,
    render_receipt,
    render_sales_report,
)


def _sale(**overrides):
    items = [
        SimpleNamespace(product_id=1, quantity=2, unit_price=Decimal("10.00")),
        SimpleNamespace(product_id=2, quantity=1, unit_price=Decimal("5.00")),
    ]
    values = dict(
        id=7,
        invoice_number="INV-20240101-ABCDEF12",
        sale_date=datetime(2024, 1, 1, 12, 30, tzinfo=timezone.utc),
        items=items,
        tax_rate=Decimal("0.16"),
        subtotal=Decimal("25.00"),
        total=Decimal("29.00"),
        payment_method="Card",
        is_paid=False,
        client=SimpleNamespace(full_name="Ana Gomez"),
    )
    values.update(overrides)
    return SimpleNamespace(**values)


class TestSaleReceipt:

    def test_lines_and_totals(self):
        client = SimpleNamespace(full_name="Ana Gomez", email="ana@example.com")
        receipt = format_sale_receipt(_sale(), {1: "Hammer", 2: "Nails"}, client)

        assert [(l.name, l.quantity, l.subtotal) for l in receipt.lines] == [
            ("Hammer", 2, Decimal("20.00")),
            ("Nails", 1, Decimal("5.00")),
        ]
        assert (receipt.subtotal, receipt.tax, receipt.total) == (Decimal("25.00"), Decimal("4.00"), Decimal("29.00"))
        assert receipt.customer_email == "ana@example.com"

    def test_amounts_come_from_the_stored_header(self):
        # A header imported with its own amounts is what the customer was charged
        receipt = format_sale_receipt(_sale(subtotal=Decimal("30.00"), total=Decimal("34.80")), {}, None)
        assert (receipt.subtotal, receipt.tax, receipt.total) == (Decimal("30.00"), Decimal("4.80"), Decimal("34.80"))

    def test_missing_product_name_and_client(self):
        receipt = format_sale_receipt(_sale(), {1: "Hammer"}, None)
        assert receipt.lines[1].name == "Product #2"
        assert receipt.customer_name == ""

    def test_renders_pdf(self):
        receipt = format_sale_receipt(_sale(), {1: "Hammer", 2: "Nails"}, None)
        assert render_receipt(receipt).startswith(b"%PDF")


class TestReports:

    def test_sales_report(self):
        report = format_sales_report([_sale(), _sale(id=8, subtotal=Decimal("10.00"), total=Decimal("11.60"), is_paid=True)])
        assert report.sale_count == 2
        assert report.rows[0].item_count == 3
        assert report.subtotal == Decimal("35.00")
        assert report.total == Decimal("40.60")
        assert render_sales_report(report).startswith(b"%PDF")

    def test_products_report(self):
        products = [
            SimpleNamespace(id=1, name="Hammer", description=None, category=None, unit_price=Decimal("10.00"), stock=3),
            SimpleNamespace(
                id=2, name="Cement", description="50kg", category=SimpleNamespace(name="Building"),
                unit_price=Decimal("7.25"), stock=4,
            ),
        ]
        report = format_products_report(products)
        assert report.total_units == 7
        assert report.rows[1].stock_value == Decimal("29.00")
        assert report.total_stock_value == Decimal("59.00")
        assert report.rows[1].category_name == "Building"
        assert render_products_report(report).startswith(b"%PDF")

    def test_clients_report(self):
        clients = [
            SimpleNamespace(id=1, full_name="Ana Gomez", email="ana@example.com", phone_number=None, address=None),
            SimpleNamespace(id=2, full_name="Luis Perez", email="luis@example.com", phone_number="300", address="Calle 2"),
        ]
        report = format_clients_report(clients, {2: 5})
        assert [r.total_sales for r in report.rows] == [0, 5]
        assert report.client_count == 2
        assert render_clients_report(report).startswith(b"%PDF")

    def test_long_report_spans_pages(self):
        clients = [
            SimpleNamespace(id=i, full_name=f"Client {i}", email=f"c{i}@example.com", phone_number="", address="")
            for i in range(200)
        ]
        pdf = render_clients_report(format_clients_report(clients))
        page_counts = [int(n) for n in re.findall(rb"/Count (\d+)", pdf)]
        assert max(page_counts) > 1


class TestExport:

    def _headers(self, content: bytes):
        wb = openpyxl.load_workbook(io.BytesIO(content))
        headers = [c.value for c in wb.worksheets[0][1]]
        wb.close()
        return headers

    def test_headers_match_import_headers(self, db):
        assert self._headers(export_clients(db)) == CLIENT_HEADERS
        assert self._headers(export_products(db)) == PRODUCT_HEADERS
        assert self._headers(export_sales(db)) == SALE_HEADERS

    def test_export_reimports_as_updates(self, db, make_client, make_product):
        client = make_client()
        product = make_product(stock=5)
        create_sale(db, client.id, [{"product_id": product.id, "quantity": 1}])

        for exporter, kind in (
            (export_clients, ImportKind.CLIENTS),
            (export_products, ImportKind.PRODUCTS),
            (export_sales, ImportKind.SALES),
        ):
            result = import_spreadsheet(db, exporter(db), f"{kind.value}.xlsx", kind)
            assert (result.inserted, result.updated, result.errors) == (0, 1, 0), result.error_list
