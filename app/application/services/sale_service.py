"""Sale service — the cart-to-sale transaction, checkout and sale queries.

A sale either commits whole (header, lines, stock decrements) or leaves no
trace. Product rows are locked in id order for the duration of the
transaction and every decrement is conditional on the stock still covering
the quantity, so two concurrent carts can never oversell.
"""

import os
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Iterable, List, Optional

import structlog
from sqlalchemy.orm import Session

from app.application.services.report_formatter import format_sale_receipt
from app.config import get_settings
from app.core.exceptions import (
    BusinessRuleViolationException,
    EntityNotFoundException,
    InsufficientStockException,
)
from app.domain.mappers import guest_client
from app.domain.models.client import Client
from app.domain.models.product import Product
from app.domain.models.sale import Sale, SaleItem
from app.domain.money import sale_totals, to_money
from app.domain.schemas.report import SaleReceipt
from app.domain.schemas.sale import RegisterSaleRequest, SaleItemCreate, SaleItemUpdate, SaleUpdate
from app.infrastructure.database import request_isolation_level
from app.infrastructure.email_sender import EmailSender
from app.infrastructure.pdf_renderer import write_receipt
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from app.infrastructure.repositories.sale_repository import SQLAlchemySaleRepository

settings = get_settings()
logger = structlog.get_logger(__name__)


def generate_invoice_number(now: Optional[datetime] = None) -> str:
    now = now or datetime.now(timezone.utc)
    return f"INV-{now:%Y%m%d}-{uuid.uuid4().hex[:8].upper()}"


def _line_value(line, name: str):
    return line[name] if isinstance(line, dict) else getattr(line, name)


def _cart_quantities(items: Iterable) -> Dict[int, int]:
    """Requested quantity per product, duplicate lines summed, cart order kept."""
    quantities: Dict[int, int] = {}
    for line in items or ():
        product_id = _line_value(line, "product_id")
        quantity = _line_value(line, "quantity")
        if quantity is None or quantity < 1:
            raise BusinessRuleViolationException(
                "Quantity must be at least 1",
                {"product_id": product_id, "quantity": quantity},
            )
        quantities[product_id] = quantities.get(product_id, 0) + quantity
    if not quantities:
        raise BusinessRuleViolationException("A sale needs at least one item")
    return quantities


def _tax_rate(tax_rate) -> Decimal:
    rate = settings.DEFAULT_TAX_RATE if tax_rate is None else Decimal(str(tax_rate))
    if rate < 0 or rate > 1:
        raise BusinessRuleViolationException("Tax rate must be between 0 and 1", {"tax_rate": str(rate)})
    return rate


def _sell(
    db: Session,
    client_id: int,
    quantities: Dict[int, int],
    rate: Decimal,
    payment_method: str,
    notes: str,
) -> Sale:
    """Build the sale and move stock inside the caller's transaction (flushed, not committed)."""
    clients = SQLAlchemyClientRepository(db, Client)
    products = SQLAlchemyProductRepository(db, Product)
    sales = SQLAlchemySaleRepository(db, Sale)

    if not clients.exists(client_id):
        raise EntityNotFoundException(f"Client with Id {client_id} not found", {"client_id": client_id})

    locked = _lock_products(products, quantities)
    for product_id, quantity in quantities.items():
        available = locked[product_id].stock
        if available < quantity:
            raise InsufficientStockException(product_id, quantity, available)

    # Prices are snapshotted now; later catalogue changes don't touch the sale
    lines = [(pid, qty, to_money(locked[pid].unit_price)) for pid, qty in quantities.items()]
    subtotal, _, total = sale_totals(((qty, price) for _, qty, price in lines), rate)

    sale = Sale(
        invoice_number=generate_invoice_number(),
        client_id=client_id,
        subtotal=subtotal,
        tax_rate=rate,
        total=total,
        payment_method=payment_method or "",
        is_paid=False,
        notes=notes or "",
    )
    sale.items = [SaleItem(product_id=pid, quantity=qty, unit_price=price) for pid, qty, price in lines]
    sales.create(sale)

    for product_id, quantity in quantities.items():
        _take_stock(products, product_id, quantity)
    return sale


def _lock_products(products: SQLAlchemyProductRepository, quantities: Dict[int, int]) -> Dict[int, Product]:
    locked = {p.id: p for p in products.get_many_for_update(quantities)}
    missing = [pid for pid in quantities if pid not in locked]
    if missing:
        raise EntityNotFoundException(f"Product with Id {missing[0]} not found", {"product_ids": missing})
    return locked


def _take_stock(products: SQLAlchemyProductRepository, product_id: int, quantity: int) -> None:
    if not products.decrement_stock(product_id, quantity):
        available = products.get_by_id(product_id).stock
        raise InsufficientStockException(product_id, quantity, available)


def recompute_sale_totals(db: Session, sale: Sale) -> None:
    """Derive the header amounts from the current lines at the sale's tax rate."""
    db.flush()
    db.refresh(sale, ["items"])
    subtotal, _, total = sale_totals(((i.quantity, i.unit_price) for i in sale.items), sale.tax_rate)
    sale.subtotal = subtotal
    sale.total = total
    db.flush()


def _log_created(sale: Sale) -> None:
    logger.info(
        "Sale created",
        sale_id=sale.id,
        invoice_number=sale.invoice_number,
        client_id=sale.client_id,
        lines=len(sale.items),
        total=str(sale.total),
    )


def create_sale(
    db: Session,
    client_id: int,
    items: Iterable,
    tax_rate=None,
    payment_method: str = "",
    notes: str = "",
) -> Sale:
    """Turn a cart of {product_id, quantity} lines into a persisted sale."""
    quantities = _cart_quantities(items)
    rate = _tax_rate(tax_rate)

    try:
        request_isolation_level(db, settings.SALE_ISOLATION_LEVEL)
        sale = _sell(db, client_id, quantities, rate, payment_method, notes)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sale)
    _log_created(sale)
    return sale


# ---------------------------------------------------------------------------
# Storefront checkout
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class RegisteredSale:
    sale: Sale
    receipt: SaleReceipt
    pdf_filename: str

    @property
    def pdf_path(self) -> str:
        return os.path.join(settings.RECEIPTS_DIR, self.pdf_filename)

    @property
    def download_url(self) -> str:
        return f"/v1/sales/download?file={self.pdf_filename}"


def find_or_create_client(db: Session, full_name: str, email: str) -> Client:
    """Client for the e-mail, a new guest flushed into the open transaction otherwise."""
    clients = SQLAlchemyClientRepository(db, Client)
    client = clients.get_by_email(email)
    if client is None:
        client = clients.create(guest_client(full_name, email))
        logger.info("Guest client added", client_id=client.id, email=client.email)
    return client


def build_receipt(db: Session, sale: Sale) -> SaleReceipt:
    product_ids = [item.product_id for item in sale.items]
    names = {p.id: p.name for p in db.query(Product).filter(Product.id.in_(product_ids)).all()}
    return format_sale_receipt(sale, names, sale.client)


def register_sale(db: Session, request: RegisterSaleRequest) -> RegisteredSale:
    """Checkout by e-mail: resolve the customer, sell, and write the PDF receipt."""
    quantities = _cart_quantities(request.items)
    rate = _tax_rate(request.tax_rate)

    # A rejected sale must not leave the guest client behind: one transaction
    try:
        request_isolation_level(db, settings.SALE_ISOLATION_LEVEL)
        client = find_or_create_client(db, request.customer_name, request.customer_email)
        sale = _sell(db, client.id, quantities, rate, request.payment_method, request.notes)
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(sale)
    _log_created(sale)
    receipt = build_receipt(db, sale)
    filename = write_receipt(receipt, settings.RECEIPTS_DIR)
    logger.info("Receipt generated", sale_id=sale.id, file=filename)
    return RegisteredSale(sale=sale, receipt=receipt, pdf_filename=filename)


def confirmation_email_html(receipt: SaleReceipt) -> str:
    rows = "".join(
        f"<tr><td>{line.name}</td><td align='right'>{line.quantity}</td>"
        f"<td align='right'>${line.unit_price:.2f}</td></tr>"
        for line in receipt.lines
    )
    rate = (receipt.tax_rate * 100).normalize()
    return (
        "<html><body style='font-family: Arial, sans-serif;'>"
        "<h2>Thank you for your purchase!</h2>"
        f"<p>Hello <strong>{receipt.customer_name}</strong>,</p>"
        f"<p>Your order {receipt.invoice_number} has been processed.</p>"
        "<table border='1' cellpadding='6' style='border-collapse: collapse;'>"
        "<tr><th>Product</th><th>Quantity</th><th>Price</th></tr>"
        f"{rows}</table>"
        f"<p><strong>Subtotal:</strong> ${receipt.subtotal:.2f}<br/>"
        f"<strong>IVA ({rate:f}%):</strong> ${receipt.tax:.2f}<br/>"
        f"<strong>Total:</strong> ${receipt.total:.2f}</p>"
        "<p>The receipt is attached as a PDF.</p>"
        "</body></html>"
    )


def send_sale_confirmation(sender: EmailSender, receipt: SaleReceipt, pdf_path: str) -> bool:
    """Background task: mail the receipt; failures are logged, never raised."""
    try:
        with open(pdf_path, "rb") as f:
            pdf = f.read()
    except OSError as e:
        logger.error("Email failed: receipt unreadable", sale_id=receipt.sale_id, error=str(e))
        return False
    return sender.deliver(
        receipt.customer_email,
        "Purchase confirmation - Firmeza",
        confirmation_email_html(receipt),
        attachments=[(os.path.basename(pdf_path), pdf, "application/pdf")],
    )


def receipt_path(filename: str) -> str:
    """Absolute path of a stored receipt; plain file names only."""
    if not filename or os.path.basename(filename) != filename:
        raise EntityNotFoundException("File not found.")
    path = os.path.join(settings.RECEIPTS_DIR, filename)
    if not os.path.isfile(path):
        raise EntityNotFoundException("File not found.")
    return path


# ---------------------------------------------------------------------------
# Queries
# ---------------------------------------------------------------------------

def list_sales(db: Session, skip: int = 0, limit: int = 100) -> List[Sale]:
    return SQLAlchemySaleRepository(db, Sale).list(skip, limit)


def get_sale(db: Session, sale_id: int) -> Sale:
    sale = SQLAlchemySaleRepository(db, Sale).get_by_id(sale_id)
    if sale is None:
        raise EntityNotFoundException(f"Sale with ID {sale_id} not found.", {"sale_id": sale_id})
    return sale


def delete_sale(db: Session, sale_id: int) -> None:
    """Remove a sale and its lines. Stock is not restored."""
    repo = SQLAlchemySaleRepository(db, Sale)
    if repo.delete(sale_id) is None:
        raise EntityNotFoundException(f"Sale with ID {sale_id} not found.", {"sale_id": sale_id})
    repo.commit()
    logger.info("Sale deleted", sale_id=sale_id)


def list_sale_items(db: Session, sale_id: Optional[int] = None, skip: int = 0, limit: int = 100) -> List[SaleItem]:
    return SQLAlchemySaleRepository(db, Sale).list_items(sale_id, skip, limit)


def get_sale_item(db: Session, item_id: int) -> SaleItem:
    item = SQLAlchemySaleRepository(db, Sale).get_item(item_id)
    if item is None:
        raise EntityNotFoundException(f"Sale item with ID {item_id} not found.", {"item_id": item_id})
    return item


# ---------------------------------------------------------------------------
# Corrections: header edits and line changes keep totals and stock in step
# ---------------------------------------------------------------------------

def update_sale(db: Session, sale_id: int, body: SaleUpdate) -> Sale:
    sale = get_sale(db, sale_id)
    changes = {k: v for k, v in body.model_dump(exclude_unset=True).items() if v is not None}
    try:
        for field, value in changes.items():
            setattr(sale, field, value)
        if "tax_rate" in changes:
            recompute_sale_totals(db, sale)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(sale)
    logger.info("Sale updated", sale_id=sale.id, fields=sorted(changes))
    return sale


def add_sale_item(db: Session, body: SaleItemCreate) -> SaleItem:
    """Sell more of a product on an existing sale; a product keeps a single line."""
    repo = SQLAlchemySaleRepository(db, Sale)
    products = SQLAlchemyProductRepository(db, Product)
    try:
        request_isolation_level(db, settings.SALE_ISOLATION_LEVEL)
        sale = get_sale(db, body.sale_id)
        product = _lock_products(products, {body.product_id: body.quantity})[body.product_id]
        if product.stock < body.quantity:
            raise InsufficientStockException(product.id, body.quantity, product.stock)

        item = repo.find_item(sale.id, product.id)
        if item is None:
            item = repo.add_item(SaleItem(
                sale_id=sale.id,
                product_id=product.id,
                quantity=body.quantity,
                unit_price=to_money(product.unit_price),
            ))
        else:
            item.quantity += body.quantity
        _take_stock(products, product.id, body.quantity)
        recompute_sale_totals(db, sale)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(item)
    logger.info("Sale item added", sale_id=item.sale_id, item_id=item.id, product_id=item.product_id)
    return item


def update_sale_item(db: Session, item_id: int, body: SaleItemUpdate) -> SaleItem:
    """Change a line's quantity; the difference is taken from or returned to stock."""
    products = SQLAlchemyProductRepository(db, Product)
    try:
        request_isolation_level(db, settings.SALE_ISOLATION_LEVEL)
        item = get_sale_item(db, item_id)
        delta = body.quantity - item.quantity
        if delta:
            product = _lock_products(products, {item.product_id: abs(delta)})[item.product_id]
            if delta > 0:
                if product.stock < delta:
                    raise InsufficientStockException(product.id, delta, product.stock)
                _take_stock(products, product.id, delta)
            else:
                products.increment_stock(product.id, -delta)
            item.quantity = body.quantity
            recompute_sale_totals(db, item.sale)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(item)
    logger.info("Sale item updated", item_id=item.id, quantity=item.quantity)
    return item


def delete_sale_item(db: Session, item_id: int) -> None:
    """Remove a line and return its units to stock. The last line cannot go."""
    products = SQLAlchemyProductRepository(db, Product)
    try:
        request_isolation_level(db, settings.SALE_ISOLATION_LEVEL)
        item = get_sale_item(db, item_id)
        sale = item.sale
        if len(sale.items) == 1:
            raise BusinessRuleViolationException(
                "A sale needs at least one item; delete the sale instead",
                {"sale_id": sale.id, "item_id": item_id},
            )
        _lock_products(products, {item.product_id: item.quantity})
        products.increment_stock(item.product_id, item.quantity)
        db.delete(item)
        recompute_sale_totals(db, sale)
        db.commit()
    except Exception:
        db.rollback()
        raise
    logger.info("Sale item deleted", sale_id=sale.id, item_id=item_id)
