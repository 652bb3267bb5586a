"""
app/api/routers/google_books.py

Public proxy to the Google Books volume search.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from app.connectors.base import ConnectorRequestError
from app.connectors.google_books_connector import GoogleBooksConnector, get_google_books_connector
from app.schemas.google_books import GoogleBooksSearchRequest

router = APIRouter(prefix="/api/google-books", tags=["google-books"])


@router.post("")
def search_google_books(
    body: GoogleBooksSearchRequest,
    connector: GoogleBooksConnector = Depends(get_google_books_connector),
) -> Any:
    """
    Forward a search and return the upstream JSON unchanged.
    """

    if not body.q or not body.q.strip():
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"message": "Missing 'q' (search) query parameter."},
        )

    try:
        return connector.search(q=body.q, category=body.category, max_results=body.max_results)
    except ConnectorRequestError as exc:
        return JSONResponse(
            status_code=status.HTTP_502_BAD_GATEWAY,
            content={"message": str(exc)},
        )
