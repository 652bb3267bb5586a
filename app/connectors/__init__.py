"""
app/connectors package marker.
"""

from app.connectors.base import BaseConnector, ConnectorRequestError
from app.connectors.google_books_connector import GoogleBooksConnector, get_google_books_connector

__all__ = [
    "BaseConnector",
    "ConnectorRequestError",
    "GoogleBooksConnector",
    "get_google_books_connector",
]
