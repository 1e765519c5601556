from datetime import datetime, timezone

from bson import ObjectId
from pydantic import BaseModel, Field, ConfigDict


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Mongo hands back naive UTC datetimes unless the client is tz_aware."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def new_document_id() -> str:
    return str(ObjectId())


class DocumentModel(BaseModel):
    """Top-level document whose _id is an opaque string."""
    id: str = Field(default_factory=new_document_id, alias="_id")

    model_config = ConfigDict(
        populate_by_name=True,
        use_enum_values=True,
        validate_default=True,
        from_attributes=True
    )

    def to_document(self) -> dict:
        return self.model_dump(by_alias=True, exclude_none=True)
