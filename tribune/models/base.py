"""Base model class for all stored documents."""

from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Optional

from pydantic import BaseModel, Field, PlainSerializer


def format_timestamp(value: datetime) -> str:
    """Format a datetime as a fixed-width UTC ISO string.

    Every stored timestamp goes through here so that string order equals
    time order in both stores.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return datetime.isoformat(value, timespec="microseconds")


Timestamp = Annotated[
    datetime,
    PlainSerializer(format_timestamp, return_type=str, when_used="json"),
]


class DBModel(BaseModel):
    """Base model for all stored documents."""

    id: Optional[str] = Field(None, description="Document ID")

    class Config:
        """Pydantic config."""

        from_attributes = True
        populate_by_name = True

    def to_document(self) -> Dict[str, Any]:
        """Serialize to a JSON-compatible document."""
        return self.model_dump(mode="json")

    @classmethod
    def from_document(cls, doc: Dict[str, Any]):
        """Build a model from a stored document."""
        return cls.model_validate(doc)
