"""ProfileRecord: the immutable hand-off produced when a flow completes.

The record is what the persistence collaborator receives and cannot be
changed afterwards: ``answers`` is a read-only mapping.  Answer values are
unwrapped from their tagged form: scalars stay scalars and multi-select
collections become frozensets.  ``model_dump(mode="json")`` turns the sets
into lists for storage.
"""

from datetime import datetime, timezone
from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator


class ProfileRecord(BaseModel):
    """Compiled intake answers for one flow instance."""

    model_config = ConfigDict(frozen=True)

    flow_id: str
    user_id: Optional[str] = None
    # Read-only view over a private copy; dumps back to a plain dict
    answers: Mapping[str, Any]
    compiled_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    @field_validator("answers", mode="after")
    @classmethod
    def _freeze_answers(cls, v: Mapping[str, Any]) -> Mapping[str, Any]:
        return MappingProxyType(dict(v))

    @field_serializer("answers")
    def _dump_answers(self, v: Mapping[str, Any]) -> dict[str, Any]:
        return dict(v)
