"""
app/connectors/google_books_connector.py

Pass-through client for the Google Books volume search API.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any

import requests

from app.config import (
    ExternalHTTPSettings,
    GoogleBooksSettings,
    get_external_http_settings,
    get_google_books_settings,
)
from app.connectors.base import BaseConnector

ALL_CATEGORIES = "all"


def build_search_query(q: str, category: str | None = None) -> str:
    """
    Combine a free-text query with an optional subject filter.

    The space is sent as "+" once the query string is URL-encoded.
    """

    query = q.strip()
    if category and category.strip() and category.strip().lower() != ALL_CATEGORIES:
        query = f"{query} subject:{category.strip()}"
    return query


class GoogleBooksConnector(BaseConnector):
    """
    Connector for ``GET /books/v1/volumes``; results are returned verbatim.
    """

    def __init__(
        self,
        *,
        settings: GoogleBooksSettings,
        http_settings: ExternalHTTPSettings,
        session: requests.Session | None = None,
    ) -> None:
        super().__init__(source="google_books", http_settings=http_settings, session=session)
        self._settings = settings

    def search(
        self,
        *,
        q: str,
        category: str | None = None,
        max_results: int | None = None,
    ) -> Any:
        params: dict[str, Any] = {
            "q": build_search_query(q, category),
            "maxResults": max_results or self._settings.default_max_results,
        }
        if self._settings.api_key:
            params["key"] = self._settings.api_key
        return self._request_json(method="GET", url=self._settings.base_url, params=params)


@lru_cache(maxsize=1)
def get_google_books_connector() -> GoogleBooksConnector:
    return GoogleBooksConnector(
        settings=get_google_books_settings(),
        http_settings=get_external_http_settings(),
    )
