"""Report API routes — PDF reports over products, clients and sales."""

from datetime import datetime

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session, selectinload

from app.application.services.report_formatter import (
    format_clients_report,
    format_products_report,
    format_sales_report,
)
from app.domain.models.client import Client
from app.domain.models.product import Product
from app.domain.models.sale import Sale
from app.domain.models.user import User
from app.infrastructure.database import get_db
from app.infrastructure.pdf_renderer import (
    render_clients_report,
    render_products_report,
    render_sales_report,
)
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.interfaces.api.deps import require_admin

router = APIRouter(prefix="/v1/reports", tags=["Reports"])


def _pdf(content: bytes, name: str) -> Response:
    filename = f"{name}_report_{datetime.now():%Y%m%d_%H%M%S}.pdf"
    return Response(
        content=content,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/products")
def products_report(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    products = db.query(Product).options(selectinload(Product.category)).order_by(Product.id).all()
    return _pdf(render_products_report(format_products_report(products)), "products")


@router.get("/clients")
def clients_report(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    repo = SQLAlchemyClientRepository(db, Client)
    clients = db.query(Client).order_by(Client.id).all()
    report = format_clients_report(clients, repo.count_sales_by_client())
    return _pdf(render_clients_report(report), "clients")


@router.get("/sales")
def sales_report(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    sales = (
        db.query(Sale)
        .options(selectinload(Sale.items), selectinload(Sale.client))
        .order_by(Sale.id)
        .all()
    )
    return _pdf(render_sales_report(format_sales_report(sales)), "sales")
