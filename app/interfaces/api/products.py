"""Products API routes — catalogue CRUD."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status
from sqlalchemy.orm import Session

from app.application.services.product_service import (
    create_product,
    delete_product,
    get_product,
    get_products,
    update_product,
)
from app.domain.models.user import User
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.product import ProductCreate, ProductRead, ProductUpdate
from app.infrastructure.database import get_db
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_product_repository

router = APIRouter(prefix="/v1/products", tags=["Products"])


@router.get("", response_model=List[ProductRead])
def list_products(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    return get_products(repo, skip, limit)


@router.get("/{product_id}", response_model=ProductRead)
def read_product(
    product_id: int,
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(get_current_user),
):
    return get_product(repo, product_id)


@router.post("", response_model=ProductRead, status_code=status.HTTP_201_CREATED)
def add_product(
    body: ProductCreate,
    db: Session = Depends(get_db),
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return create_product(db, repo, body)


@router.put("/{product_id}", response_model=ProductRead)
def edit_product(
    product_id: int,
    body: ProductUpdate,
    db: Session = Depends(get_db),
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    return update_product(db, repo, product_id, body)


@router.delete("/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_product(
    product_id: int,
    db: Session = Depends(get_db),
    repo: ProductRepository = Depends(get_product_repository),
    user: User = Depends(require_admin),
):
    delete_product(db, repo, product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
