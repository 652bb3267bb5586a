"""
app/api/dependencies.py

Shared FastAPI dependencies for request gating.
"""

from __future__ import annotations

import hmac

from fastapi import Depends, File, HTTPException, Security, UploadFile, status
from fastapi.security import APIKeyHeader

from app.config import AuthSettings, get_auth_settings

API_KEY_HEADER_NAME = "X-API-Key"

_api_key_header = APIKeyHeader(name=API_KEY_HEADER_NAME, auto_error=False)


def require_api_key(
    api_key: str | None = Security(_api_key_header),
    settings: AuthSettings = Depends(get_auth_settings),
) -> str:
    """
    Reject the request unless it carries the configured API key.
    """

    expected = settings.api_key
    if not api_key or not expected or not hmac.compare_digest(api_key, expected):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or missing API key.",
        )
    return api_key


def get_book_upload(file: UploadFile | None = File(default=None)) -> UploadFile:
    """
    Require one multipart file field named ``file``.

    The extension is checked later by the import pipeline so that rejected
    uploads follow the same cleanup path as accepted ones.
    """

    if file is None or not (file.filename or "").strip():
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="No file uploaded",
        )
    return file
