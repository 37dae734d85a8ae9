"""PDF rendering of receipts and reports with reportlab."""

import io
import os
from decimal import Decimal
from typing import List, Sequence

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from app.domain.schemas.report import ClientsReport, ProductsReport, SaleReceipt, SalesReport

# ---------------------------------------------------------------------
# LAYOUT
# ---------------------------------------------------------------------
PAGE_WIDTH, PAGE_HEIGHT = A4
MARGIN = 18 * mm
TITLE_FONT = "Helvetica-Bold"
TEXT_FONT = "Helvetica"
TITLE_SIZE = 18
TEXT_SIZE = 10
ROW_HEIGHT = 6 * mm
BRAND = "FIRMEZA"


def _money(value: Decimal) -> str:
    return f"${value:,.2f}"


def _fit(c: canvas.Canvas, text: str, width: float, font: str = TEXT_FONT, size: float = TEXT_SIZE) -> str:
    """Truncate text with an ellipsis until it fits the column."""
    if c.stringWidth(text, font, size) <= width:
        return text
    while text and c.stringWidth(text + "…", font, size) > width:
        text = text[:-1]
    return text + "…"


class _Page:
    """Cursor over a canvas that starts a new page when the bottom is reached."""

    def __init__(self, c: canvas.Canvas, title: str, subtitle: str = ""):
        self.c = c
        self.title = title
        self.subtitle = subtitle
        self.y = 0.0
        self._header()

    def _header(self):
        c = self.c
        self.y = PAGE_HEIGHT - MARGIN
        c.setFont(TITLE_FONT, TITLE_SIZE)
        c.drawString(MARGIN, self.y, self.title)
        c.setFont(TITLE_FONT, 12)
        c.drawRightString(PAGE_WIDTH - MARGIN, self.y, BRAND)
        self.y -= 7 * mm
        if self.subtitle:
            c.setFont(TEXT_FONT, 9)
            c.drawString(MARGIN, self.y, self.subtitle)
            self.y -= 6 * mm
        c.line(MARGIN, self.y, PAGE_WIDTH - MARGIN, self.y)
        self.y -= ROW_HEIGHT

    def ensure(self, height: float):
        if self.y - height < MARGIN:
            self.c.showPage()
            self._header()

    def text(self, value: str, font: str = TEXT_FONT, size: float = TEXT_SIZE):
        self.ensure(ROW_HEIGHT)
        self.c.setFont(font, size)
        self.c.drawString(MARGIN, self.y, value)
        self.y -= ROW_HEIGHT

    def table(self, headers: Sequence[str], widths: Sequence[float], rows: List[Sequence[str]], numeric: Sequence[int] = ()):
        """Draw a simple grid; columns listed in `numeric` are right-aligned."""
        def draw_row(cells, font):
            self.ensure(ROW_HEIGHT)
            self.c.setFont(font, TEXT_SIZE)
            x = MARGIN
            for index, (cell, width) in enumerate(zip(cells, widths)):
                cell = _fit(self.c, str(cell), width - 2 * mm, font)
                if index in numeric:
                    self.c.drawRightString(x + width - 1 * mm, self.y, cell)
                else:
                    self.c.drawString(x + 1 * mm, self.y, cell)
                x += width
            self.y -= ROW_HEIGHT

        draw_row(headers, TITLE_FONT)
        for row in rows:
            draw_row(row, TEXT_FONT)
        self.y -= 2 * mm

    def totals(self, pairs: Sequence[tuple]):
        for label, value in pairs:
            self.ensure(ROW_HEIGHT)
            self.c.setFont(TITLE_FONT, TEXT_SIZE)
            self.c.drawRightString(PAGE_WIDTH - MARGIN - 35 * mm, self.y, label)
            self.c.setFont(TEXT_FONT, TEXT_SIZE)
            self.c.drawRightString(PAGE_WIDTH - MARGIN, self.y, value)
            self.y -= ROW_HEIGHT


def _document(build) -> bytes:
    buffer = io.BytesIO()
    c = canvas.Canvas(buffer, pagesize=A4)
    build(c)
    c.showPage()
    c.save()
    return buffer.getvalue()


# ---------------------------------------------------------------------
# RECEIPT
# ---------------------------------------------------------------------
def render_receipt(receipt: SaleReceipt) -> bytes:
    def build(c):
        date = receipt.date.strftime("%d/%m/%Y %H:%M:%S") if receipt.date else ""
        page = _Page(c, "SALES RECEIPT", f"Invoice: {receipt.invoice_number}   Sale #{receipt.sale_id}   {date}")
        page.text(f"Customer: {receipt.customer_name}")
        page.text(f"Email: {receipt.customer_email}")
        if receipt.payment_method:
            page.text(f"Payment method: {receipt.payment_method}")
        page.y -= 2 * mm
        page.table(
            headers=("Product", "Qty", "Unit price", "Subtotal"),
            widths=(90 * mm, 20 * mm, 32 * mm, 32 * mm),
            rows=[
                (line.name, line.quantity, _money(line.unit_price), _money(line.subtotal))
                for line in receipt.lines
            ],
            numeric=(1, 2, 3),
        )
        rate = (receipt.tax_rate * 100).normalize()
        page.totals((
            ("Subtotal:", _money(receipt.subtotal)),
            (f"IVA ({rate:f}%):", _money(receipt.tax)),
            ("Total:", _money(receipt.total)),
        ))
        page.y -= 4 * mm
        page.text("Thank you for your purchase!", font=TITLE_FONT)

    return _document(build)


def write_receipt(receipt: SaleReceipt, directory: str) -> str:
    """Render the receipt into `directory`; returns the file name."""
    os.makedirs(directory, exist_ok=True)
    filename = f"receipt_{receipt.invoice_number}.pdf"
    with open(os.path.join(directory, filename), "wb") as f:
        f.write(render_receipt(receipt))
    return filename


# ---------------------------------------------------------------------
# REPORTS
# ---------------------------------------------------------------------
def _generated(report) -> str:
    return f"Generated {report.generated_at.strftime('%d/%m/%Y %H:%M')}"


def render_sales_report(report: SalesReport) -> bytes:
    def build(c):
        page = _Page(c, "SALES REPORT", _generated(report))
        page.table(
            headers=("Invoice", "Date", "Client", "Units", "Subtotal", "Total", "Paid"),
            widths=(34 * mm, 22 * mm, 44 * mm, 14 * mm, 24 * mm, 24 * mm, 12 * mm),
            rows=[
                (
                    r.invoice_number,
                    r.sale_date.strftime("%d/%m/%Y") if r.sale_date else "",
                    r.client_name,
                    r.item_count,
                    _money(r.subtotal),
                    _money(r.total),
                    "Yes" if r.is_paid else "No",
                )
                for r in report.rows
            ],
            numeric=(3, 4, 5),
        )
        page.totals((
            ("Sales:", str(report.sale_count)),
            ("Subtotal:", _money(report.subtotal)),
            ("Total:", _money(report.total)),
        ))

    return _document(build)


def render_products_report(report: ProductsReport) -> bytes:
    def build(c):
        page = _Page(c, "PRODUCTS REPORT", _generated(report))
        page.table(
            headers=("Id", "Name", "Category", "Unit price", "Stock", "Stock value"),
            widths=(12 * mm, 58 * mm, 34 * mm, 24 * mm, 16 * mm, 30 * mm),
            rows=[
                (r.id, r.name, r.category_name, _money(r.unit_price), r.stock, _money(r.stock_value))
                for r in report.rows
            ],
            numeric=(0, 3, 4, 5),
        )
        page.totals((
            ("Products:", str(report.product_count)),
            ("Units:", str(report.total_units)),
            ("Stock value:", _money(report.total_stock_value)),
        ))

    return _document(build)


def render_clients_report(report: ClientsReport) -> bytes:
    def build(c):
        page = _Page(c, "CLIENTS REPORT", _generated(report))
        page.table(
            headers=("Id", "Name", "Email", "Phone", "Sales"),
            widths=(12 * mm, 48 * mm, 62 * mm, 34 * mm, 18 * mm),
            rows=[(r.id, r.full_name, r.email, r.phone_number, r.total_sales) for r in report.rows],
            numeric=(0, 4),
        )
        page.totals((("Clients:", str(report.client_count)),))

    return _document(build)
