"""Product service — business logic for catalogue CRUD."""

from typing import List

import structlog
from sqlalchemy.orm import Session

from app.core.exceptions import ConflictException, EntityNotFoundException
from app.domain.mappers import product_changes, product_from_create
from app.domain.models.category import Category
from app.domain.models.product import Product
from app.domain.models.sale import SaleItem
from app.domain.repositories.product_repository import ProductRepository
from app.domain.schemas.product import ProductCreate, ProductUpdate

logger = structlog.get_logger(__name__)


def _check_category(db: Session, category_id) -> None:
    if category_id is not None and db.get(Category, category_id) is None:
        raise EntityNotFoundException(f"Category with ID {category_id} not found.", {"category_id": category_id})


def get_products(repo: ProductRepository, skip: int = 0, limit: int = 100) -> List[Product]:
    return repo.list(skip, limit)


def get_product(repo: ProductRepository, product_id: int) -> Product:
    product = repo.get_by_id(product_id)
    if product is None:
        raise EntityNotFoundException(f"Product with ID {product_id} not found.", {"product_id": product_id})
    return product


def create_product(db: Session, repo: ProductRepository, body: ProductCreate) -> Product:
    _check_category(db, body.category_id)
    product = repo.create(product_from_create(body))
    repo.commit()
    logger.info("Product created", product_id=product.id, name=product.name)
    return product


def update_product(db: Session, repo: ProductRepository, product_id: int, body: ProductUpdate) -> Product:
    product = get_product(repo, product_id)
    changes = product_changes(body)
    if "category_id" in changes:
        _check_category(db, changes["category_id"])
    repo.update(product, changes)
    repo.commit()
    return product


def delete_product(db: Session, repo: ProductRepository, product_id: int) -> None:
    get_product(repo, product_id)
    # Sold products stay: sale lines reference them
    if db.query(SaleItem.id).filter(SaleItem.product_id == product_id).first() is not None:
        raise ConflictException("Product appears in sales and cannot be deleted", {"product_id": product_id})
    repo.delete(product_id)
    repo.commit()
    logger.info("Product deleted", product_id=product_id)
