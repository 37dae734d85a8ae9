"""Import API routes — upload XLSX/CSV spreadsheets for bulk upsert."""

import os
import uuid
from typing import List

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from app.application.services.import_pipeline import ImportKind, import_spreadsheet
from app.application.services.spreadsheet_reader import SUPPORTED_EXTENSIONS, file_extension
from app.config import get_settings
from app.core.exceptions import SpreadsheetReadError
from app.domain.models.import_job import ImportJob
from app.domain.models.user import User
from app.domain.schemas.importer import ImportJobRead, ImportResultRead
from app.infrastructure.database import get_db
from app.interfaces.api.deps import require_admin

settings = get_settings()
router = APIRouter(prefix="/v1/imports", tags=["Imports"])


@router.post("", response_model=ImportResultRead)
async def upload_spreadsheet(
    kind: ImportKind = Query(ImportKind.MIXED),
    file: UploadFile = File(...),
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    if not file.filename:
        raise SpreadsheetReadError("No file provided")

    if file_extension(file.filename) not in SUPPORTED_EXTENSIONS:
        raise SpreadsheetReadError("Only .xlsx and .csv files are accepted", {"filename": file.filename})

    content = await file.read()

    # Keep a copy of what was imported
    os.makedirs(settings.UPLOAD_DIR, exist_ok=True)
    safe_name = f"{uuid.uuid4().hex}_{os.path.basename(file.filename)}"
    with open(os.path.join(settings.UPLOAD_DIR, safe_name), "wb") as f:
        f.write(content)

    result = import_spreadsheet(db, content, file.filename, kind, uploaded_by=user.email)
    return ImportResultRead.model_validate(result)


@router.get("", response_model=List[ImportJobRead])
def list_imports(
    db: Session = Depends(get_db),
    user: User = Depends(require_admin),
):
    jobs = db.query(ImportJob).order_by(ImportJob.created_at.desc(), ImportJob.id.desc()).limit(50).all()
    return [ImportJobRead.model_validate(j) for j in jobs]
