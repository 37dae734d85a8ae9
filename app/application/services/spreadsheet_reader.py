"""Spreadsheet reader — turns uploaded .xlsx/.csv bytes into raw rows.

Every cell is read as text; typing happens later in the field validator.
Row numbers follow Excel: the header is row 1, the first data row is row 2.
"""

import io
from typing import Dict, Iterator, List, Tuple

import openpyxl
import pandas as pd

from app.core.exceptions import SpreadsheetReadError

HEADER_ROW = 1
SUPPORTED_EXTENSIONS = ("xlsx", "csv")

RawRow = Tuple[int, Dict[str, str]]


def _clean_column_name(col) -> str:
    """Strip whitespace from column names; pandas placeholders become blank."""
    name = str(col).strip()
    return "" if name.startswith("Unnamed:") else name


def file_extension(filename: str) -> str:
    return filename.rsplit(".", 1)[-1].lower() if filename and "." in filename else ""


def _cell_text(value) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def _read_xlsx(content: bytes) -> pd.DataFrame:
    """First sheet as text. Read row by row so blank rows keep their place."""
    workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
    try:
        rows = list(workbook.worksheets[0].iter_rows(values_only=True))
    finally:
        workbook.close()

    if not rows:
        return pd.DataFrame()
    header, body = rows[0], rows[1:]
    width = len(header)
    columns = [_cell_text(h) for h in header]
    data = [[_cell_text(v) for v in (tuple(r) + (None,) * width)[:width]] for r in body]
    return pd.DataFrame(data, columns=columns)


def _read_csv_with_encoding(content: bytes) -> pd.DataFrame:
    """Try several encodings and separators (Excel CSV exports vary)."""
    encodings = ["utf-8-sig", "latin-1", "cp1252"]
    separators = [",", ";"]

    for encoding in encodings:
        for sep in separators:
            try:
                df = pd.read_csv(
                    io.BytesIO(content),
                    encoding=encoding,
                    sep=sep,
                    dtype=str,
                    keep_default_na=False,
                    skip_blank_lines=False,
                )
            except (UnicodeDecodeError, pd.errors.ParserError):
                continue
            if len(df.columns) > 1:
                return df

    return pd.read_csv(io.BytesIO(content), encoding="latin-1", sep=";", dtype=str, keep_default_na=False,
                       skip_blank_lines=False)


def read_rows(content: bytes, filename: str) -> List[RawRow]:
    """All non-blank data rows of the first sheet, in file order."""
    ext = file_extension(filename)
    if ext not in SUPPORTED_EXTENSIONS:
        raise SpreadsheetReadError(
            "Only .xlsx and .csv files are supported",
            {"filename": filename},
        )
    if not content:
        raise SpreadsheetReadError("The uploaded file is empty", {"filename": filename})

    try:
        df = _read_xlsx(content) if ext == "xlsx" else _read_csv_with_encoding(content)
    except Exception as exc:
        raise SpreadsheetReadError(
            f"Could not read spreadsheet: {exc}",
            {"filename": filename},
        ) from exc

    df.columns = [_clean_column_name(c) for c in df.columns]
    df = df.fillna("")
    return list(_iter_rows(df))


def _iter_rows(df: pd.DataFrame) -> Iterator[RawRow]:
    columns = [c for c in df.columns if c]
    for position, record in enumerate(df[columns].itertuples(index=False, name=None)):
        values = {col: ("" if value is None else str(value).strip()) for col, value in zip(columns, record)}
        if not any(values.values()):
            continue
        yield position + HEADER_ROW + 1, values
