"""Pydantic schemas for Client domain."""

from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field


class ClientBase(BaseModel):
    first_name: str = Field(min_length=1, max_length=100)
    last_name: str = Field(min_length=1, max_length=100)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = Field(default=None, max_length=15)
    address: Optional[str] = Field(default=None, max_length=200)
    role: str = "Client"


class ClientCreate(ClientBase):
    pass


class ClientUpdate(BaseModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    date_of_birth: Optional[date] = None
    phone_number: Optional[str] = Field(default=None, max_length=15)
    address: Optional[str] = Field(default=None, max_length=200)
    role: Optional[str] = None


class ClientRead(ClientBase):
    id: int
    full_name: str
    age: Optional[int] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
