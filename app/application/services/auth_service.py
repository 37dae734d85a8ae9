"""Auth service — JWT token management, password hashing and registration."""

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

import structlog
from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.domain.models.user import ALL_ROLES, ROLE_ADMIN, ROLE_CLIENT, User
from app.domain.repositories.user_repository import IdentityStore
from app.domain.schemas.auth import RegisterRequest, TokenResponse, UserRead
from app.infrastructure.email_sender import EmailSender

settings = get_settings()
logger = structlog.get_logger(__name__)
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES)
    )
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> Optional[dict]:
    try:
        payload = jwt.decode(
            token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM]
        )
        return payload
    except JWTError:
        return None


def authenticate_user(store: IdentityStore, email: str, password: str) -> Optional[User]:
    user = store.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        return None
    if not user.is_active:
        return None
    return user


def login(store: IdentityStore, email: str, password: str) -> Optional[TokenResponse]:
    """Token for valid credentials, None otherwise."""
    user = authenticate_user(store, email, password)
    if user is None:
        logger.info("Login rejected", email=email)
        return None
    token = create_access_token(data={"sub": user.email, "role": user.role})
    return TokenResponse(access_token=token, user=UserRead.model_validate(user))


@dataclass(frozen=True)
class RegistrationResult:
    user: Optional[User] = None
    reason: Optional[str] = None
    duplicate: bool = False

    @property
    def succeeded(self) -> bool:
        return self.user is not None


def register_user(store: IdentityStore, body: RegisterRequest) -> RegistrationResult:
    """Create an account. Duplicate e-mails, unknown roles and Admin yield a failure reason."""
    if store.get_by_email(body.email):
        return RegistrationResult(reason="A user with this email already exists", duplicate=True)

    role = body.role or ROLE_CLIENT
    if role not in ALL_ROLES:
        return RegistrationResult(reason=f"Unknown role '{role}'")
    if role == ROLE_ADMIN:
        return RegistrationResult(reason="Administrators cannot self-register")

    user = store.add(User(
        first_name=body.first_name.strip(),
        last_name=body.last_name.strip(),
        email=body.email.strip().lower(),
        date_of_birth=body.date_of_birth,
        password_hash=hash_password(body.password),
        role=role,
    ))
    logger.info("User registered", user_id=user.id, role=role)
    return RegistrationResult(user=user)


def send_welcome_email(sender: EmailSender, email: str, name: str) -> bool:
    return sender.deliver(
        email,
        "Welcome to Firmeza",
        f"<html><body><h2>Welcome, {name}!</h2>"
        "<p>Your account has been created.</p></body></html>",
    )


def seed_admin(store: IdentityStore) -> Optional[User]:
    """Create the configured admin account when it does not exist yet."""
    if store.get_by_email(settings.ADMIN_EMAIL):
        return None
    admin = store.add(User(
        first_name="Admin",
        last_name="",
        email=settings.ADMIN_EMAIL.lower(),
        password_hash=hash_password(settings.ADMIN_PASSWORD),
        role=ROLE_ADMIN,
    ))
    logger.info("Default admin user created", email=admin.email)
    return admin
