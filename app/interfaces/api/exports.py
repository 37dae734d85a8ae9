"""Export API routes — download the catalogue and sales as .xlsx."""

from datetime import datetime

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from app.application.services.excel_exporter import (
    XLSX_MEDIA_TYPE,
    export_clients,
    export_products,
    export_sales,
)
from app.domain.models.user import User
from app.infrastructure.database import get_db
from app.interfaces.api.deps import require_admin

router = APIRouter(prefix="/v1/exports", tags=["Exports"])


def _xlsx(content: bytes, name: str) -> Response:
    filename = f"{name}_{datetime.now():%Y%m%d_%H%M%S}.xlsx"
    return Response(
        content=content,
        media_type=XLSX_MEDIA_TYPE,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


@router.get("/clients")
def download_clients(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    return _xlsx(export_clients(db), "clients")


@router.get("/products")
def download_products(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    return _xlsx(export_products(db), "products")


@router.get("/sales")
def download_sales(db: Session = Depends(get_db), user: User = Depends(require_admin)):
    return _xlsx(export_sales(db), "sales")
