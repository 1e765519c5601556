"""Payloads delivered by platform triggers."""
from typing import Optional
from pydantic import BaseModel, Field, ConfigDict

from gastos.models.event import Event


class FinalizedFile(BaseModel):
    """Storage finalize notification: object name, size in bytes, MIME type."""
    path: str = Field(alias="name")
    size: int = 0
    content_type: str = Field("", alias="contentType")

    model_config = ConfigDict(populate_by_name=True)


class AttachmentValidationResponse(BaseModel):
    path: str
    outcome: str


class EventChange(BaseModel):
    """Document change on an event: snapshots before and after the write."""
    before: Optional[Event] = None
    after: Event


class EventChangeResponse(BaseModel):
    evento_id: str
    effects: list[str]
