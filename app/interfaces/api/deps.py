"""FastAPI dependency — JWT auth and role checks."""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from app.application.services.auth_service import decode_access_token
from app.core.exceptions import ForbiddenException, UnauthorizedException
from app.domain.models.user import ROLE_ADMIN, User
from app.domain.repositories.user_repository import IdentityStore
from app.interfaces.deps import get_identity_store

security = HTTPBearer(auto_error=False)


def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security),
    store: IdentityStore = Depends(get_identity_store),
) -> User:
    """Extract and validate the current user from JWT token."""
    if credentials is None:
        raise UnauthorizedException("Not authenticated")

    payload = decode_access_token(credentials.credentials)
    if payload is None:
        raise UnauthorizedException("Invalid or expired token")

    email = payload.get("sub")
    if email is None:
        raise UnauthorizedException("Invalid token")

    user = store.get_by_email(email)
    if user is None or not user.is_active:
        raise UnauthorizedException("User not found or inactive")

    return user


def require_admin(user: User = Depends(get_current_user)) -> User:
    """Require admin role."""
    if user.role != ROLE_ADMIN:
        raise ForbiddenException("Only administrators can access this resource")
    return user
