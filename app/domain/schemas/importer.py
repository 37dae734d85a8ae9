"""Pydantic schemas for spreadsheet imports."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class ImportErrorRead(BaseModel):
    row_number: int
    field: str
    message: str

    model_config = {"from_attributes": True}


class ImportResultRead(BaseModel):
    total_rows: int
    inserted: int
    updated: int
    errors: int
    success: bool
    message: str
    error_list: list[ImportErrorRead]

    model_config = {"from_attributes": True}


class ImportJobRead(BaseModel):
    id: int
    original_name: str
    kind: str
    uploaded_by: Optional[str] = None
    total_rows: int
    inserted: int
    updated: int
    errors: int
    status: str
    error_message: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = {"from_attributes": True}
