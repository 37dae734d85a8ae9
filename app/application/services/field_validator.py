"""Field validator — per-entity checks on a classified spreadsheet row.

Validation never raises and never stops at the first problem: every rule
runs and each violation becomes one ImportRowError.
"""

import re
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Dict, List, Optional

from app.application.services.row_classifier import ClassifiedRow, EntityType
from app.config import get_settings
from app.domain.money import to_money, total_for

settings = get_settings()

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$", re.IGNORECASE)
MIN_UNIT_PRICE = Decimal("0.01")
# Largest values the Numeric(10, 2) and Integer columns hold
MAX_AMOUNT = Decimal("99999999.99")
MAX_INTEGER = 2_147_483_647
_TRUE = {"true", "1", "yes", "y", "si", "sí"}
_FALSE = {"false", "0", "no", "n"}
_DATE_FORMATS = ("%Y-%m-%d", "%Y-%m-%d %H:%M:%S", "%d/%m/%Y", "%m/%d/%Y", "%d-%m-%Y", "%Y-%m-%dT%H:%M:%S")


@dataclass(frozen=True)
class ImportRowError:
    row_number: int
    field: str
    message: str


# ---------------------------------------------------------------------------
# Parsing helpers (shared with the import pipeline)
# ---------------------------------------------------------------------------

def parse_decimal(value: str) -> Optional[Decimal]:
    """Parse '1234.5', '1,234.50', '$ 10' or '10,5'; None when not a number."""
    s = re.sub(r"[$\s]", "", value or "")
    if not s:
        return None
    if "," in s and "." not in s:
        s = s.replace(",", ".")
    else:
        s = s.replace(",", "")
    try:
        number = Decimal(s)
    except InvalidOperation:
        return None
    return number if number.is_finite() else None


def parse_int(value: str) -> Optional[int]:
    """Whole numbers only; '5.0' (how Excel stores ints) is accepted."""
    number = parse_decimal(value)
    if number is None or number != number.to_integral_value():
        return None
    return int(number)


def parse_date(value: str) -> Optional[date]:
    s = (value or "").strip()
    if not s:
        return None
    for fmt in _DATE_FORMATS:
        try:
            return datetime.strptime(s, fmt).date()
        except ValueError:
            continue
    return None


def parse_bool(value: str) -> Optional[bool]:
    s = (value or "").strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return None


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.match(value or ""))


# ---------------------------------------------------------------------------
# Rule helpers
# ---------------------------------------------------------------------------

class _Checks:
    """Collects errors for one row."""

    def __init__(self, row: ClassifiedRow):
        self.row = row
        self.errors: List[ImportRowError] = []

    def fail(self, field: str, message: str) -> None:
        self.errors.append(ImportRowError(self.row.row_number, field, message))

    def required_text(self, field: str, max_length: int) -> None:
        if not self.row.has(field):
            self.fail(field, f"{field} is required")
        elif len(self.row.get(field)) > max_length:
            self.fail(field, f"{field} too long (max {max_length} chars)")

    def optional_text(self, field: str, max_length: int) -> None:
        if len(self.row.get(field)) > max_length:
            self.fail(field, f"{field} too long (max {max_length} chars)")

    def decimal(
        self, field: str, minimum: Decimal, required: bool = True, maximum: Decimal = MAX_AMOUNT
    ) -> Optional[Decimal]:
        if not self.row.has(field):
            if required:
                self.fail(field, f"{field} is required")
            return None
        number = parse_decimal(self.row.get(field))
        if number is None:
            self.fail(field, f"{field} is not a valid number")
            return None
        if number < minimum:
            self.fail(field, f"{field} must be at least {minimum}")
            return None
        if number > maximum:
            self.fail(field, f"{field} must be at most {maximum}")
            return None
        return number

    def integer(self, field: str, minimum: int, required: bool = True) -> Optional[int]:
        if not self.row.has(field):
            if required:
                self.fail(field, f"{field} is required")
            return None
        number = parse_int(self.row.get(field))
        if number is None:
            self.fail(field, f"{field} is not a valid whole number")
            return None
        if number < minimum:
            self.fail(field, f"{field} must be at least {minimum}")
            return None
        if number > MAX_INTEGER:
            self.fail(field, f"{field} must be at most {MAX_INTEGER}")
            return None
        return number

    def foreign_key(self, field: str) -> None:
        if self.row.has(field):
            self.integer(field, minimum=1)

    def email(self, field: str, required: bool = True) -> None:
        if not self.row.has(field):
            if required:
                self.fail(field, f"{field} is required")
        elif not is_valid_email(self.row.get(field)):
            self.fail(field, f"{field} is not a valid email address")

    def optional_date(self, field: str) -> None:
        if self.row.has(field) and parse_date(self.row.get(field)) is None:
            self.fail(field, f"{field} is not a valid date")

    def one_of(self, *fields: str) -> bool:
        if any(self.row.has(f) for f in fields):
            return True
        self.fail(fields[0], f"{' or '.join(fields)} is required")
        return False


# ---------------------------------------------------------------------------
# Per-entity rules
# ---------------------------------------------------------------------------

def _validate_client(c: _Checks) -> None:
    c.required_text("FirstName", 100)
    c.required_text("LastName", 100)
    c.email("Email")
    c.optional_text("PhoneNumber", 15)
    c.optional_text("Address", 200)
    c.optional_text("Role", 20)
    c.optional_date("DateOfBirth")


def _validate_product(c: _Checks) -> None:
    c.required_text("Name", 150)
    c.optional_text("Description", 300)
    c.decimal("UnitPrice", MIN_UNIT_PRICE)
    c.integer("Stock", 0)
    c.foreign_key("CategoryId")


def _validate_sale(c: _Checks) -> None:
    c.required_text("InvoiceNumber", 30)
    if c.one_of("ClientId", "ClientEmail"):
        c.foreign_key("ClientId")
        c.email("ClientEmail", required=False)
    c.optional_date("SaleDate")
    subtotal = c.decimal("Subtotal", Decimal("0"))
    total = c.decimal("Total", Decimal("0"))
    tax_rate = c.decimal("TaxRate", Decimal("0"), required=False)
    if tax_rate is not None and tax_rate > 1:
        c.fail("TaxRate", "TaxRate must be between 0 and 1")
        tax_rate = None
    elif tax_rate is None and not c.row.has("TaxRate"):
        tax_rate = settings.IMPORT_DEFAULT_TAX_RATE
    if c.row.has("IsPaid") and parse_bool(c.row.get("IsPaid")) is None:
        c.fail("IsPaid", "IsPaid must be true or false")
    c.optional_text("PaymentMethod", 50)
    c.optional_text("Notes", 300)
    if subtotal is not None and total is not None and tax_rate is not None:
        expected = total_for(subtotal, tax_rate)
        if to_money(total) != expected:
            c.fail("Total", f"Total does not match Subtotal and TaxRate (expected {expected})")


def _validate_sale_item(c: _Checks) -> None:
    if c.one_of("SalesId", "InvoiceNumber"):
        c.foreign_key("SalesId")
    if c.one_of("ProductId", "ProductName"):
        c.foreign_key("ProductId")
    c.integer("Quantity", 1)
    c.decimal("UnitPrice", Decimal("0"))


def _validate_unknown(c: _Checks) -> None:
    c.fail("Detection", "Could not determine entity type. Please ensure row has required fields.")


_RULES: Dict[EntityType, Callable[[_Checks], None]] = {
    EntityType.CLIENT: _validate_client,
    EntityType.PRODUCT: _validate_product,
    EntityType.SALE: _validate_sale,
    EntityType.SALE_ITEM: _validate_sale_item,
    EntityType.UNKNOWN: _validate_unknown,
}


def validate_row(row: ClassifiedRow) -> List[ImportRowError]:
    """All rule violations for the row, in rule order (empty = valid)."""
    checks = _Checks(row)
    _RULES[row.entity_type](checks)
    return checks.errors
