"""Row classifier — decides which entity a spreadsheet row describes.

A field counts as present when the row holds a non-blank value for it.
Signatures are tried in a fixed priority order (Client, Product, Sale,
SaleItem); the first full match wins.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Mapping, Tuple


class EntityType(str, Enum):
    UNKNOWN = "Unknown"
    CLIENT = "Client"
    PRODUCT = "Product"
    SALE = "Sale"
    SALE_ITEM = "SaleItem"


# Canonical header spellings; incoming headers are matched case-insensitively
KNOWN_HEADERS = (
    "FirstName", "LastName", "Email", "PhoneNumber", "Address", "Role", "DateOfBirth",
    "Name", "Description", "UnitPrice", "Stock", "CategoryId",
    "InvoiceNumber", "SaleDate", "ClientId", "ClientEmail", "Subtotal", "TaxRate",
    "Total", "PaymentMethod", "IsPaid", "Notes",
    "SalesId", "ProductId", "ProductName", "Quantity",
)
_CANONICAL = {h.upper(): h for h in KNOWN_HEADERS}


@dataclass
class ClassifiedRow:
    row_number: int
    entity_type: EntityType
    fields: Dict[str, str] = field(default_factory=dict)

    def get(self, name: str) -> str:
        return self.fields.get(name, "")

    def has(self, name: str) -> bool:
        return bool(self.fields.get(name, "").strip())


@dataclass(frozen=True)
class HeaderSignature:
    """all_of: every field present; any_of: each group needs one; none_of: all absent."""
    entity_type: EntityType
    all_of: Tuple[str, ...] = ()
    any_of: Tuple[Tuple[str, ...], ...] = ()
    none_of: Tuple[str, ...] = ()

    def matches(self, present: frozenset) -> bool:
        if any(f not in present for f in self.all_of):
            return False
        if any(not present.intersection(group) for group in self.any_of):
            return False
        return not present.intersection(self.none_of)


SIGNATURES: Tuple[HeaderSignature, ...] = (
    HeaderSignature(
        EntityType.CLIENT,
        all_of=("Email",),
        any_of=(("FirstName", "LastName"),),
        none_of=("InvoiceNumber", "UnitPrice", "SalesId"),
    ),
    HeaderSignature(
        EntityType.PRODUCT,
        all_of=("Name",),
        any_of=(("UnitPrice", "Stock"),),
        none_of=("Email", "InvoiceNumber", "SalesId"),
    ),
    HeaderSignature(
        EntityType.SALE,
        all_of=("InvoiceNumber",),
        any_of=(("ClientId", "ClientEmail"),),
        none_of=("SalesId", "ProductId"),
    ),
    HeaderSignature(
        EntityType.SALE_ITEM,
        all_of=("Quantity",),
        any_of=(("SalesId", "InvoiceNumber"), ("ProductId", "ProductName")),
    ),
)


def canonical_header(header) -> str:
    """Trimmed header in its canonical spelling (unknown headers kept as-is)."""
    cleaned = str(header).strip()
    return _CANONICAL.get(cleaned.upper(), cleaned)


def normalize_fields(raw: Mapping) -> Dict[str, str]:
    """Canonical header → trimmed string value; blank headers are dropped."""
    fields: Dict[str, str] = {}
    for header, value in raw.items():
        name = canonical_header(header)
        if not name:
            continue
        fields[name] = "" if value is None else str(value).strip()
    return fields


def detect_entity_type(fields: Mapping[str, str]) -> EntityType:
    present = frozenset(name for name, value in fields.items() if value and value.strip())
    for signature in SIGNATURES:
        if signature.matches(present):
            return signature.entity_type
    return EntityType.UNKNOWN


def classify_row(row_number: int, raw: Mapping) -> ClassifiedRow:
    """Classify one raw row (header → value)."""
    fields = normalize_fields(raw)
    return ClassifiedRow(row_number=row_number, entity_type=detect_entity_type(fields), fields=fields)
