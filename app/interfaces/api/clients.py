"""Clients API routes — client CRUD."""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from app.application.services.client_service import (
    create_client,
    delete_client,
    get_client,
    get_clients,
    update_client,
)
from app.domain.models.user import User
from app.domain.repositories.client_repository import ClientRepository
from app.domain.schemas.client import ClientCreate, ClientRead, ClientUpdate
from app.interfaces.api.deps import get_current_user, require_admin
from app.interfaces.deps import get_client_repository

router = APIRouter(prefix="/v1/clients", tags=["Clients"])


@router.get("", response_model=List[ClientRead])
def list_clients(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=500),
    repo: ClientRepository = Depends(get_client_repository),
    user: User = Depends(get_current_user),
):
    return get_clients(repo, skip, limit)


@router.get("/{client_id}", response_model=ClientRead)
def read_client(
    client_id: int,
    repo: ClientRepository = Depends(get_client_repository),
    user: User = Depends(get_current_user),
):
    return get_client(repo, client_id)


@router.post("", response_model=ClientRead, status_code=status.HTTP_201_CREATED)
def add_client(
    body: ClientCreate,
    repo: ClientRepository = Depends(get_client_repository),
    user: User = Depends(require_admin),
):
    return create_client(repo, body)


@router.put("/{client_id}", response_model=ClientRead)
def edit_client(
    client_id: int,
    body: ClientUpdate,
    repo: ClientRepository = Depends(get_client_repository),
    user: User = Depends(require_admin),
):
    return update_client(repo, client_id, body)


@router.delete("/{client_id}", status_code=status.HTTP_204_NO_CONTENT)
def remove_client(
    client_id: int,
    repo: ClientRepository = Depends(get_client_repository),
    user: User = Depends(require_admin),
):
    delete_client(repo, client_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
