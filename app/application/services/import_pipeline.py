"""Import pipeline — bulk upsert of clients, products, sales and sale items.

Rows are processed in file order. A row that fails validation or cannot be
resolved is reported and skipped; the batch always continues. Each accepted
row is committed on its own, so rows already applied stay applied even if a
later row (or the request) fails.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Tuple

import structlog
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from app.application.services.field_validator import (
    ImportRowError,
    parse_bool,
    parse_date,
    parse_decimal,
    parse_int,
    validate_row,
)
from app.application.services.row_classifier import (
    ClassifiedRow,
    EntityType,
    classify_row,
    normalize_fields,
)
from app.application.services.sale_service import recompute_sale_totals
from app.application.services.spreadsheet_reader import RawRow, read_rows
from app.config import get_settings
from app.core.exceptions import SpreadsheetReadError
from app.domain.mappers import client_fields, product_fields
from app.domain.models.category import Category
from app.domain.models.client import Client
from app.domain.models.import_job import ImportJob
from app.domain.models.product import Product
from app.domain.models.sale import Sale, SaleItem
from app.domain.money import to_money
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from app.infrastructure.repositories.sale_repository import SQLAlchemySaleRepository

settings = get_settings()
logger = structlog.get_logger(__name__)

PERSISTENCE_FIELD = "__persistence__"
INSERTED = "inserted"
UPDATED = "updated"


class ImportKind(str, Enum):
    CLIENTS = "clients"
    PRODUCTS = "products"
    SALES = "sales"
    SALE_ITEMS = "sale_items"
    MIXED = "mixed"


KIND_ENTITY: Dict[ImportKind, EntityType] = {
    ImportKind.CLIENTS: EntityType.CLIENT,
    ImportKind.PRODUCTS: EntityType.PRODUCT,
    ImportKind.SALES: EntityType.SALE,
    ImportKind.SALE_ITEMS: EntityType.SALE_ITEM,
}


@dataclass(frozen=True)
class ImportResult:
    """Outcome of one import call. `errors` counts rejected rows."""
    total_rows: int = 0
    inserted: int = 0
    updated: int = 0
    errors: int = 0
    error_list: Tuple[ImportRowError, ...] = ()

    @property
    def success(self) -> bool:
        return self.errors == 0

    @property
    def message(self) -> str:
        if self.success:
            return f"Import completed: {self.inserted} inserted, {self.updated} updated"
        return (
            f"Import finished with errors: {self.inserted} inserted, {self.updated} updated, "
            f"{self.errors} rows rejected"
        )


@dataclass
class _Tally:
    total_rows: int = 0
    inserted: int = 0
    updated: int = 0
    errors: int = 0
    error_list: List[ImportRowError] = field(default_factory=list)

    def accept(self, outcome: str) -> None:
        if outcome == INSERTED:
            self.inserted += 1
        else:
            self.updated += 1

    def reject(self, errors: Iterable[ImportRowError]) -> None:
        self.errors += 1
        self.error_list.extend(errors)

    def freeze(self) -> ImportResult:
        return ImportResult(
            total_rows=self.total_rows,
            inserted=self.inserted,
            updated=self.updated,
            errors=self.errors,
            error_list=tuple(self.error_list),
        )


class RowRejected(Exception):
    """A valid row whose references could not be resolved."""

    def __init__(self, errors: List[ImportRowError]):
        self.errors = errors
        super().__init__("; ".join(e.message for e in errors))


class ImportPipeline:
    """Classify → validate → upsert, one row at a time."""

    def __init__(self, db: Session):
        self.db = db
        self.clients = SQLAlchemyClientRepository(db, Client)
        self.products = SQLAlchemyProductRepository(db, Product)
        self.sales = SQLAlchemySaleRepository(db, Sale)
        self._handlers: Dict[EntityType, Callable[[ClassifiedRow], str]] = {
            EntityType.CLIENT: self._upsert_client,
            EntityType.PRODUCT: self._upsert_product,
            EntityType.SALE: self._upsert_sale,
            EntityType.SALE_ITEM: self._upsert_sale_item,
        }

    def run(self, rows: Iterable[RawRow], kind: ImportKind) -> ImportResult:
        tally = _Tally()
        for row_number, raw in rows:
            tally.total_rows += 1
            row = self._classify(row_number, raw, kind)

            errors = validate_row(row)
            if errors:
                tally.reject(errors)
                continue

            try:
                outcome = self._handlers[row.entity_type](row)
                self.db.commit()
            except RowRejected as exc:
                self.db.rollback()
                tally.reject(exc.errors)
                continue
            except OperationalError:
                self.db.rollback()
                raise
            except (SQLAlchemyError, ArithmeticError, ValueError) as exc:
                # Store faults and values the database cannot hold reject this row only
                self.db.rollback()
                logger.warning(
                    "Import row failed to persist",
                    row_number=row.row_number,
                    entity_type=row.entity_type.value,
                    error=str(exc),
                )
                reason = str(getattr(exc, "orig", None) or exc)
                tally.reject([ImportRowError(row.row_number, PERSISTENCE_FIELD, reason[:300])])
                continue

            tally.accept(outcome)

        return tally.freeze()

    @staticmethod
    def _classify(row_number: int, raw: Dict[str, str], kind: ImportKind) -> ClassifiedRow:
        if kind == ImportKind.MIXED:
            return classify_row(row_number, raw)
        return ClassifiedRow(row_number, KIND_ENTITY[kind], normalize_fields(raw))

    # ------------------------------------------------------------------
    # Upserts
    # ------------------------------------------------------------------

    def _upsert_client(self, row: ClassifiedRow) -> str:
        values = client_fields(
            first_name=row.get("FirstName"),
            last_name=row.get("LastName"),
            email=row.get("Email"),
            phone=row.get("PhoneNumber"),
            address=row.get("Address"),
            role=row.get("Role"),
            date_of_birth=parse_date(row.get("DateOfBirth")),
        )
        existing = self.clients.get_by_email(values["email"])
        if existing:
            self.clients.update(existing, values)
            return UPDATED
        self.clients.create(values)
        return INSERTED

    def _upsert_product(self, row: ClassifiedRow) -> str:
        category_id = parse_int(row.get("CategoryId")) if row.has("CategoryId") else None
        if category_id is not None and self.db.get(Category, category_id) is None:
            raise RowRejected([
                ImportRowError(row.row_number, "CategoryId", f"Category with Id {category_id} not found"),
            ])

        values = product_fields(
            name=row.get("Name"),
            description=row.get("Description"),
            unit_price=to_money(parse_decimal(row.get("UnitPrice"))),
            stock=parse_int(row.get("Stock")),
            category_id=category_id,
        )
        existing = self.products.get_by_name(values["name"])
        if existing:
            self.products.update(existing, values)
            return UPDATED
        self.products.create(values)
        return INSERTED

    def _upsert_sale(self, row: ClassifiedRow) -> str:
        client_id = self._resolve_client(row)
        tax_rate = parse_decimal(row.get("TaxRate")) if row.has("TaxRate") else settings.IMPORT_DEFAULT_TAX_RATE
        sale_date = parse_date(row.get("SaleDate"))
        values = {
            "client_id": client_id,
            "sale_date": datetime.combine(sale_date, datetime.min.time(), tzinfo=timezone.utc)
            if sale_date else datetime.now(timezone.utc),
            "subtotal": to_money(parse_decimal(row.get("Subtotal"))),
            "tax_rate": tax_rate,
            "total": to_money(parse_decimal(row.get("Total"))),
            "payment_method": row.get("PaymentMethod"),
            "is_paid": bool(parse_bool(row.get("IsPaid"))),
            "notes": row.get("Notes"),
        }

        invoice = row.get("InvoiceNumber")
        existing = self.sales.get_by_invoice(invoice)
        if existing:
            self.sales.update(existing, values)
            if existing.items:
                # Lines already imported win over the header amounts
                recompute_sale_totals(self.db, existing)
            return UPDATED
        self.sales.create({"invoice_number": invoice, **values})
        return INSERTED

    def _upsert_sale_item(self, row: ClassifiedRow) -> str:
        problems: List[ImportRowError] = []
        sale = self._resolve_sale(row, problems)
        product_id = self._resolve_product(row, problems)
        if problems:
            raise RowRejected(problems)

        quantity = parse_int(row.get("Quantity"))
        unit_price = to_money(parse_decimal(row.get("UnitPrice")))

        existing = self.sales.find_item(sale.id, product_id)
        if existing:
            existing.quantity = quantity
            existing.unit_price = unit_price
            outcome = UPDATED
        else:
            self.sales.add_item(SaleItem(sale_id=sale.id, product_id=product_id, quantity=quantity, unit_price=unit_price))
            outcome = INSERTED

        recompute_sale_totals(self.db, sale)
        return outcome

    # ------------------------------------------------------------------
    # Reference resolution
    # ------------------------------------------------------------------

    def _resolve_client(self, row: ClassifiedRow) -> int:
        if row.has("ClientId"):
            client_id = parse_int(row.get("ClientId"))
            if self.clients.exists(client_id):
                return client_id
            raise RowRejected([ImportRowError(row.row_number, "ClientId", f"Client with Id {client_id} not found")])

        email = row.get("ClientEmail")
        client = self.clients.get_by_email(email)
        if client is None:
            raise RowRejected([ImportRowError(row.row_number, "ClientEmail", f"Client with email {email} not found")])
        return client.id

    def _resolve_sale(self, row: ClassifiedRow, problems: List[ImportRowError]) -> Optional[Sale]:
        if row.has("SalesId"):
            sales_id = parse_int(row.get("SalesId"))
            sale = self.sales.get_by_id(sales_id)
            if sale is None:
                problems.append(ImportRowError(row.row_number, "SalesId", f"Sale with Id {sales_id} not found"))
            return sale

        invoice = row.get("InvoiceNumber")
        sale = self.sales.get_by_invoice(invoice)
        if sale is None:
            problems.append(ImportRowError(row.row_number, "InvoiceNumber", f"Sale with invoice {invoice} not found"))
        return sale

    def _resolve_product(self, row: ClassifiedRow, problems: List[ImportRowError]) -> Optional[int]:
        if row.has("ProductId"):
            product_id = parse_int(row.get("ProductId"))
            if not self.products.exists(product_id):
                problems.append(ImportRowError(row.row_number, "ProductId", f"Product with Id {product_id} not found"))
                return None
            return product_id

        name = row.get("ProductName")
        product = self.products.get_by_name(name)
        if product is None:
            problems.append(ImportRowError(row.row_number, "ProductName", f"Product {name} not found"))
            return None
        return product.id


def _mark_failed(db: Session, job: ImportJob, reason: str) -> None:
    """Best effort: the connection that just failed may still be unusable."""
    try:
        job.status = "failed"
        job.error_message = reason[:1000]
        db.commit()
    except SQLAlchemyError:
        db.rollback()
        logger.error("Could not mark import job as failed", job_id=job.id)


def import_spreadsheet(
    db: Session,
    content: bytes,
    filename: str,
    kind: ImportKind = ImportKind.MIXED,
    uploaded_by: Optional[str] = None,
) -> ImportResult:
    """Import an uploaded spreadsheet and record the run in the import history."""
    job = ImportJob(original_name=filename, kind=kind.value, uploaded_by=uploaded_by, status="processing")
    db.add(job)
    db.commit()

    try:
        rows = read_rows(content, filename)
    except SpreadsheetReadError as exc:
        _mark_failed(db, job, exc.message)
        logger.warning("Import aborted: unreadable file", filename=filename, error=exc.message)
        raise

    try:
        result = ImportPipeline(db).run(rows, kind)
    except OperationalError as exc:
        logger.exception("Import aborted: database unavailable", filename=filename)
        db.rollback()
        _mark_failed(db, job, str(getattr(exc, "orig", None) or exc))
        raise

    job.total_rows = result.total_rows
    job.inserted = result.inserted
    job.updated = result.updated
    job.errors = result.errors
    job.status = "completed"
    db.commit()

    logger.info(
        "Import finished",
        filename=filename,
        kind=kind.value,
        total_rows=result.total_rows,
        inserted=result.inserted,
        updated=result.updated,
        errors=result.errors,
    )
    return result
