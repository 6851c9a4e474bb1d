"""
File Upload Utility - read bulk-import files.

Supported formats:
- Spreadsheet (.xlsx) -> spreadsheet import
- JSON (.json) -> JSON import

Routing between the two is by extension only.
"""

from typing import Tuple
from fastapi import UploadFile, HTTPException

from talentos.core.config import get_settings

SPREADSHEET_EXTENSIONS = {'.xlsx'}
JSON_EXTENSIONS = {'.json'}
ALLOWED_EXTENSIONS = SPREADSHEET_EXTENSIONS | JSON_EXTENSIONS


def get_file_extension(filename: str) -> str:
    """Get lowercase file extension."""
    if '.' not in filename:
        return ''
    return '.' + filename.rsplit('.', 1)[1].lower()


async def read_import_file(file: UploadFile) -> Tuple[bytes, str]:
    """
    Read an uploaded import file.

    Args:
        file: FastAPI UploadFile

    Returns:
        Tuple of (content, extension)

    Raises:
        HTTPException on validation errors
    """
    if not file.filename:
        raise HTTPException(status_code=400, detail="No filename provided")

    ext = get_file_extension(file.filename)
    if ext not in ALLOWED_EXTENSIONS:
        raise HTTPException(
            status_code=400,
            detail=f"Unsupported file type '{ext}'. Allowed: XLSX, JSON"
        )

    content = await file.read()

    max_mb = get_settings().max_upload_mb
    if len(content) > max_mb * 1024 * 1024:
        raise HTTPException(
            status_code=413,
            detail=f"File too large. Maximum size: {max_mb}MB"
        )

    if not content:
        raise HTTPException(status_code=400, detail="Uploaded file is empty")

    return content, ext


def is_spreadsheet(ext: str) -> bool:
    return ext in SPREADSHEET_EXTENSIONS


def get_supported_formats() -> dict:
    """Get info about supported import formats."""
    return {
        "supported_formats": [
            {"extension": ".xlsx", "name": "Excel Workbook"},
            {"extension": ".json", "name": "JSON array of employees"}
        ],
        "max_size_mb": get_settings().max_upload_mb
    }
