"""Explicit mapping between request DTOs, spreadsheet rows and ORM records."""

from decimal import Decimal
from typing import Optional

from app.domain.models.client import Client
from app.domain.models.product import Product
from app.domain.schemas.client import ClientCreate, ClientUpdate
from app.domain.schemas.product import ProductCreate, ProductUpdate

DEFAULT_CLIENT_ROLE = "Client"


def client_from_create(dto: ClientCreate) -> Client:
    return Client(
        first_name=dto.first_name.strip(),
        last_name=dto.last_name.strip(),
        email=dto.email.strip().lower(),
        date_of_birth=dto.date_of_birth,
        phone_number=dto.phone_number,
        address=dto.address,
        role=dto.role or DEFAULT_CLIENT_ROLE,
    )


def client_changes(dto: ClientUpdate) -> dict:
    return dto.model_dump(exclude_unset=True)


def guest_client(full_name: str, email: str) -> Client:
    """Client created on the fly at checkout: first word is the first name."""
    parts = full_name.strip().split(" ", 1)
    return Client(
        first_name=parts[0],
        last_name=parts[1] if len(parts) > 1 else ".",
        email=email.strip().lower(),
        address="Online Customer",
        role=DEFAULT_CLIENT_ROLE,
    )


def product_from_create(dto: ProductCreate) -> Product:
    return Product(
        name=dto.name.strip(),
        description=dto.description,
        unit_price=dto.unit_price,
        stock=dto.stock,
        category_id=dto.category_id,
    )


def product_changes(dto: ProductUpdate) -> dict:
    return dto.model_dump(exclude_unset=True)


def client_fields(
    first_name: str,
    last_name: str,
    email: str,
    phone: str,
    address: str,
    role: str,
    date_of_birth=None,
) -> dict:
    """Column values for a client coming from an imported row."""
    return {
        "first_name": first_name,
        "last_name": last_name,
        "email": email.lower(),
        "phone_number": phone or None,
        "address": address or None,
        "role": role or DEFAULT_CLIENT_ROLE,
        "date_of_birth": date_of_birth,
    }


def product_fields(
    name: str,
    description: str,
    unit_price: Decimal,
    stock: int,
    category_id: Optional[int],
) -> dict:
    """Column values for a product coming from an imported row."""
    return {
        "name": name,
        "description": description or None,
        "unit_price": unit_price,
        "stock": stock,
        "category_id": category_id,
    }
