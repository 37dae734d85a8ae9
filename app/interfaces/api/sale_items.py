"""Sale items API routes — sale lines, with stock moved on every change."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.application.services.sale_service import (
    add_sale_item,
    delete_sale_item,
    get_sale_item,
    list_sale_items,
    update_sale_item,
)
from app.domain.models.user import User
from app.domain.schemas.sale import SaleItemCreate, SaleItemRead, SaleItemUpdate
from app.infrastructure.database import get_db
from app.interfaces.api.deps import get_current_user, require_admin

router = APIRouter(prefix="/v1/sale-items", tags=["Sale items"])


@router.get("", response_model=List[SaleItemRead])
def read_sale_items(
    sale_id: Optional[int] = None,
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return list_sale_items(db, sale_id, skip, limit)


@router.get("/{item_id}", response_model=SaleItemRead)
def read_sale_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
):
    return get_sale_item(db, item_id)


@router.post("", response_model=SaleItemRead, status_code=status.HTTP_201_CREATED)
def add_item(
    body: SaleItemCreate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return add_sale_item(db, body)


@router.put("/{item_id}", response_model=SaleItemRead)
def edit_item(
    item_id: int,
    body: SaleItemUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    return update_sale_item(db, item_id, body)


@router.delete("/{item_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_item(
    item_id: int,
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    delete_sale_item(db, item_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
