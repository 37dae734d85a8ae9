"""Client domain model — maps to the 'clients' table."""

from sqlalchemy import Column, Integer, String, Date, DateTime
from sqlalchemy.orm import composite, relationship
from sqlalchemy.sql import func

from app.infrastructure.database import Base
from app.domain.models.person import Person


class Client(Base):
    __tablename__ = "clients"

    id = Column(Integer, primary_key=True, autoincrement=True)

    # Person fields
    first_name = Column(String(100), nullable=False)
    last_name = Column(String(100), nullable=False)
    email = Column(String(255), unique=True, nullable=False, index=True)
    date_of_birth = Column(Date, nullable=True)
    person = composite(Person, first_name, last_name, email, date_of_birth)

    phone_number = Column(String(15), nullable=True)
    address = Column(String(200), nullable=True)
    role = Column(String(20), nullable=False, default="Client")

    sales = relationship("Sale", back_populates="client")

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    @property
    def full_name(self) -> str:
        return self.person.full_name

    @property
    def age(self):
        return self.person.age()

    def __repr__(self):
        return f"<Client {self.email}>"
