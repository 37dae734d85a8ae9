"""
API Dependencies.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from app.domain.models.category import Category
from app.domain.models.client import Client
from app.domain.models.product import Product
from app.domain.repositories.category_repository import CategoryRepository
from app.domain.repositories.client_repository import ClientRepository
from app.domain.repositories.product_repository import ProductRepository
from app.domain.repositories.user_repository import IdentityStore
from app.infrastructure.database import get_db
from app.infrastructure.email_sender import EmailSender
from app.infrastructure.repositories.category_repository import SQLAlchemyCategoryRepository
from app.infrastructure.repositories.client_repository import SQLAlchemyClientRepository
from app.infrastructure.repositories.product_repository import SQLAlchemyProductRepository
from app.infrastructure.repositories.user_repository import SQLAlchemyIdentityStore


def get_product_repository(db: Session = Depends(get_db)) -> ProductRepository:
    """Get product repository instance."""
    return SQLAlchemyProductRepository(db, Product)


def get_client_repository(db: Session = Depends(get_db)) -> ClientRepository:
    """Get client repository instance."""
    return SQLAlchemyClientRepository(db, Client)


def get_category_repository(db: Session = Depends(get_db)) -> CategoryRepository:
    return SQLAlchemyCategoryRepository(db, Category)


def get_identity_store(db: Session = Depends(get_db)) -> IdentityStore:
    return SQLAlchemyIdentityStore(db)


def get_email_sender() -> EmailSender:
    return EmailSender()
