"""Category service — product categories; names are unique, used ones stay."""

from typing import List, Optional

import structlog

from app.core.exceptions import ConflictException, EntityNotFoundException
from app.domain.models.category import Category
from app.domain.repositories.category_repository import CategoryRepository
from app.domain.schemas.category import CategoryCreate, CategoryUpdate

logger = structlog.get_logger(__name__)


def get_categories(repo: CategoryRepository, skip: int = 0, limit: int = 100) -> List[Category]:
    return repo.list(skip, limit)


def get_category(repo: CategoryRepository, category_id: int) -> Category:
    category = repo.get_by_id(category_id)
    if category is None:
        raise EntityNotFoundException(f"Category with ID {category_id} not found.", {"category_id": category_id})
    return category


def _check_unique(repo: CategoryRepository, name: str, category_id: Optional[int] = None) -> None:
    existing = repo.get_by_name(name)
    if existing is not None and existing.id != category_id:
        raise ConflictException("A category with this name already exists", {"name": name})


def create_category(repo: CategoryRepository, body: CategoryCreate) -> Category:
    name = body.name.strip()
    _check_unique(repo, name)
    category = repo.create({"name": name})
    repo.commit()
    logger.info("Category created", category_id=category.id, name=name)
    return category


def update_category(repo: CategoryRepository, category_id: int, body: CategoryUpdate) -> Category:
    category = get_category(repo, category_id)
    name = body.name.strip()
    _check_unique(repo, name, category_id)
    repo.update(category, {"name": name})
    repo.commit()
    return category


def delete_category(repo: CategoryRepository, category_id: int) -> None:
    category = get_category(repo, category_id)
    if category.products:
        raise ConflictException("Category has products and cannot be deleted", {"category_id": category_id})
    repo.delete(category_id)
    repo.commit()
    logger.info("Category deleted", category_id=category_id)
