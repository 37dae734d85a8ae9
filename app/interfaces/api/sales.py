"""Sales API routes — cart checkout, storefront register-sale, receipts."""

from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, Query, Response, status
from fastapi.responses import FileResponse
from sqlalchemy.orm import Session

from app.application.services.sale_service import (
    create_sale,
    delete_sale,
    get_sale,
    list_sales,
    receipt_path,
    register_sale,
    send_sale_confirmation,
    update_sale,
)
from app.domain.models.user import User
from app.domain.schemas.sale import RegisterSaleRequest, RegisterSaleResponse, SaleCreate, SaleRead, SaleUpdate
from app.infrastructure.database import get_db
from app.infrastructure.email_sender import EmailSender
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_email_sender

router = APIRouter(prefix="/v1/sales", tags=["Sales"])


@router.post("", response_model=SaleRead, status_code=status.HTTP_201_CREATED)
def add_sale(
    body: SaleCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return create_sale(
        db,
        client_id=body.client_id,
        items=body.items,
        tax_rate=body.tax_rate,
        payment_method=body.payment_method,
        notes=body.notes,
    )


@router.post("/register-sale", response_model=RegisterSaleResponse)
def checkout(
    body: RegisterSaleRequest,
    background_tasks: BackgroundTasks,
    db: Session = Depends(get_db),
    sender: EmailSender = Depends(get_email_sender),
    user: User = Depends(get_current_user),
):
    """Register a storefront sale, generate its PDF receipt and mail it."""
    registered = register_sale(db, body)
    background_tasks.add_task(send_sale_confirmation, sender, registered.receipt, registered.pdf_path)
    return RegisterSaleResponse(
        message="Sale registered successfully",
        pdf=registered.download_url,
        sale_id=registered.sale.id,
        invoice_number=registered.sale.invoice_number,
    )


@router.get("/download")
def download_receipt(
    file: str = Query(..., min_length=1),
    user: User = Depends(get_current_user),
):
    return FileResponse(receipt_path(file), media_type="application/pdf", filename=file)


@router.get("", response_model=List[SaleRead])
def read_sales(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return list_sales(db, skip, limit)


@router.get("/{sale_id}", response_model=SaleRead)
def read_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_sale(db, sale_id)


@router.put("/{sale_id}", response_model=SaleRead)
def edit_sale(
    sale_id: int,
    body: SaleUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return update_sale(db, sale_id, body)


@router.delete("/{sale_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_sale(
    sale_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    delete_sale(db, sale_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
