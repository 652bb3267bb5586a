"""
app/schemas/google_books.py

Body of the book search proxy.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class GoogleBooksSearchRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    q: str | None = None
    category: str | None = None
    max_results: int | None = Field(default=None, alias="maxResults", ge=1, le=40)
