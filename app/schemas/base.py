"""
app/schemas/base.py

Shared pydantic configuration for camelCase wire models.
"""

from __future__ import annotations

import uuid

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """
    Snake-case attributes in Python, camelCase keys on the wire.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class BulkDeleteRequest(BaseModel):
    """
    Body of the bulk-delete endpoints.
    """

    ids: list[uuid.UUID] = Field(default_factory=list)


class MessageResponse(BaseModel):
    message: str
