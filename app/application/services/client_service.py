"""Client service — business logic for client CRUD."""

from typing import List

import structlog

from app.core.exceptions import ConflictException, EntityNotFoundException
from app.domain.mappers import client_changes, client_from_create
from app.domain.models.client import Client
from app.domain.repositories.client_repository import ClientRepository
from app.domain.schemas.client import ClientCreate, ClientUpdate

logger = structlog.get_logger(__name__)


def get_clients(repo: ClientRepository, skip: int = 0, limit: int = 100) -> List[Client]:
    return repo.list(skip, limit)


def get_client(repo: ClientRepository, client_id: int) -> Client:
    client = repo.get_by_id(client_id)
    if client is None:
        raise EntityNotFoundException(f"Client with ID {client_id} not found.", {"client_id": client_id})
    return client


def create_client(repo: ClientRepository, body: ClientCreate) -> Client:
    """Create a client; e-mail must be unused (case-insensitive)."""
    if repo.get_by_email(body.email):
        raise ConflictException("A client with this email already exists", {"email": body.email})
    client = repo.create(client_from_create(body))
    repo.commit()
    logger.info("Client created", client_id=client.id)
    return client


def update_client(repo: ClientRepository, client_id: int, body: ClientUpdate) -> Client:
    client = get_client(repo, client_id)
    repo.update(client, client_changes(body))
    repo.commit()
    return client


def delete_client(repo: ClientRepository, client_id: int) -> None:
    client = get_client(repo, client_id)
    if client.sales:
        raise ConflictException("Client has sales and cannot be deleted", {"client_id": client_id})
    repo.delete(client_id)
    repo.commit()
    logger.info("Client deleted", client_id=client_id)
