from typing import List, Optional, Tuple

import pydantic
from pydantic import BaseModel, ConfigDict, Field

from app.exceptions import ValidationError


class PushCommit(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    added: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    modified: List[str] = Field(default_factory=list)


class PushEvent(BaseModel):
    """The part of a GitHub push payload the sync cares about."""

    model_config = ConfigDict(extra="ignore")

    ref: str
    commits: List[PushCommit]


class ChangeSet(BaseModel):
    to_upsert: Tuple[str, ...] = ()
    to_remove: Tuple[str, ...] = ()


class SyncResult(BaseModel):
    upserted: List[str] = Field(default_factory=list)
    removed: List[str] = Field(default_factory=list)
    ignored: List[str] = Field(default_factory=list)
    ref: Optional[str] = None


def parse_push_event(raw_body: bytes) -> PushEvent:
    """Decode an already verified webhook body."""
    try:
        return PushEvent.model_validate_json(raw_body)
    except pydantic.ValidationError as e:
        raise ValidationError(f"Invalid push payload: {e.error_count()} errors") from e
