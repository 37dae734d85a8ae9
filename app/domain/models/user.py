"""User domain model — maps to the 'users' table."""

from sqlalchemy import Column, Integer, String, Boolean, Date, DateTime
from sqlalchemy.orm import composite
from sqlalchemy.sql import func

from app.infrastructure.database import Base
from app.domain.models.person import Person

ROLE_ADMIN = "Admin"
ROLE_CLIENT = "Client"
ROLE_SALER = "Saler"
ALL_ROLES = (ROLE_ADMIN, ROLE_CLIENT, ROLE_SALER)


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, autoincrement=True)

    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False, default="")
    email = Column(String(255), unique=True, nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    person = composite(Person, first_name, last_name, email, date_of_birth)

    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default=ROLE_CLIENT)
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return self.person.full_name

    def __repr__(self):
        return f"<User {self.email}>"
