"""Auth API routes — login, register, me."""

from fastapi import APIRouter, BackgroundTasks, Depends, status

from app.application.services.auth_service import login as login_user
from app.application.services.auth_service import register_user, send_welcome_email
from app.core.exceptions import BusinessRuleViolationException, ConflictException, UnauthorizedException
from app.domain.models.user import User
from app.domain.repositories.user_repository import IdentityStore
from app.domain.schemas.auth import LoginRequest, RegisterRequest, TokenResponse, UserRead
from app.infrastructure.email_sender import EmailSender
from app.interfaces.api.deps import get_current_user
from app.interfaces.deps import get_email_sender, get_identity_store

router = APIRouter(prefix="/v1/auth", tags=["Auth"])


@router.post("/login", response_model=TokenResponse)
def login(body: LoginRequest, store: IdentityStore = Depends(get_identity_store)):
    token = login_user(store, body.email, body.password)
    if token is None:
        raise UnauthorizedException("Invalid email or password")
    return token


@router.post("/register", response_model=UserRead, status_code=status.HTTP_201_CREATED)
def register(
    body: RegisterRequest,
    background_tasks: BackgroundTasks,
    store: IdentityStore = Depends(get_identity_store),
    sender: EmailSender = Depends(get_email_sender),
):
    result = register_user(store, body)
    if result.duplicate:
        raise ConflictException(result.reason, {"email": body.email})
    if not result.succeeded:
        raise BusinessRuleViolationException(result.reason, {"role": body.role})

    background_tasks.add_task(send_welcome_email, sender, result.user.email, result.user.full_name)
    return UserRead.model_validate(result.user)


@router.get("/me", response_model=UserRead)
def get_me(user: User = Depends(get_current_user)):
    return UserRead.model_validate(user)
