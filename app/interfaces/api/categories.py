"""Categories API routes — product category CRUD."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from app.application.services.category_service import (
    create_category,
    delete_category,
    get_categories,
    get_category,
    update_category,
)
from app.domain.models.user import User
from app.domain.repositories.category_repository import CategoryRepository
from app.domain.schemas.category import CategoryCreate, CategoryRead, CategoryUpdate
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_category_repository

router = APIRouter(prefix="/v1/categories", tags=["Categories"])


@router.get("", response_model=List[CategoryRead])
def list_categories(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    repo: CategoryRepository = Depends(get_category_repository),
    user: User = Depends(get_current_user),
):
    return get_categories(repo, skip, limit)


@router.get("/{category_id}", response_model=CategoryRead)
def read_category(
    category_id: int,
    repo: CategoryRepository = Depends(get_category_repository),
    user: User = Depends(get_current_user),
):
    return get_category(repo, category_id)


@router.post("", response_model=CategoryRead, status_code=status.HTTP_201_CREATED)
def add_category(
    body: CategoryCreate,
    repo: CategoryRepository = Depends(get_category_repository),
    user: User = Depends(require_admin),
):
    return create_category(repo, body)


@router.put("/{category_id}", response_model=CategoryRead)
def edit_category(
    category_id: int,
    body: CategoryUpdate,
    repo: CategoryRepository = Depends(get_category_repository),
    user: User = Depends(require_admin),
):
    return update_category(repo, category_id, body)


@router.delete("/{category_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_category(
    category_id: int,
    repo: CategoryRepository = Depends(get_category_repository),
    user: User = Depends(require_admin),
):
    delete_category(repo, category_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
