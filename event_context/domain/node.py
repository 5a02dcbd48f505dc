"""Node: a typed record in the host's content tree.

Fields are a tagged-variant map: every value carries its own ``type``
discriminator, so reading a field either yields a value of the expected
kind or raises a FieldAccessError.  Nothing is fetched by assertion.

Nodes are immutable snapshots owned by the storage collaborator.
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field, field_validator

from event_context.domain.enums import FieldId, FieldType
from event_context.foundation.clock import ensure_aware


class FieldAccessError(Exception):
    """Raised when a node field cannot be read as requested."""

    def __init__(self, path: str, field_id: str, reason: str) -> None:
        self.path = path
        self.field_id = field_id
        self.reason = reason
        super().__init__(f"Field '{field_id}' of node {path}: {reason}")


class MissingFieldError(FieldAccessError):
    """The node has no value for the field."""


class FieldTypeError(FieldAccessError):
    """The field holds a value of a different kind."""


# ── Field Variants ───────────────────────────────────────────────────────────

class TextField(BaseModel):
    type: Literal["Text"] = FieldType.TEXT.value
    value: str = ""

    model_config = {"frozen": True}


class HTMLField(BaseModel):
    type: Literal["HTMLArea"] = FieldType.HTML.value
    value: str = ""

    model_config = {"frozen": True}


class DateTimeField(BaseModel):
    type: Literal["DateTime"] = FieldType.DATETIME.value
    value: datetime

    model_config = {"frozen": True}

    @field_validator("value")
    @classmethod
    def value_must_be_aware(cls, v: datetime) -> datetime:
        return ensure_aware(v)


def _field_key(field_id: str | FieldId) -> str:
    return field_id.value if isinstance(field_id, FieldId) else field_id


FieldValue = Annotated[
    Union[TextField, HTMLField, DateTimeField],
    Field(discriminator="type"),
]


# ── Node ─────────────────────────────────────────────────────────────────────

class Node(BaseModel):
    """A record in the content tree, identified by its absolute path."""

    path: str = Field(..., min_length=1, description="Absolute node path, e.g. /aktionen/summer-fair")
    type: str = Field(..., min_length=1, description="Node type id, e.g. events.Event")
    fields: dict[str, FieldValue] = Field(default_factory=dict)

    model_config = {"frozen": True}

    @field_validator("path")
    @classmethod
    def path_must_be_absolute(cls, v: str) -> str:
        if not v.startswith("/"):
            raise ValueError(f"node path must be absolute: {v!r}")
        if len(v) > 1:
            v = v.rstrip("/")
        return v

    @property
    def name(self) -> str:
        return self.path.rsplit("/", 1)[-1]

    @property
    def parent_path(self) -> str | None:
        if self.path == "/":
            return None
        parent = self.path.rsplit("/", 1)[0]
        return parent or "/"

    # ── Typed accessors ──────────────────────────────────────────────────

    def get_field(self, field_id: str | FieldId) -> TextField | HTMLField | DateTimeField:
        key = _field_key(field_id)
        try:
            return self.fields[key]
        except KeyError:
            raise MissingFieldError(self.path, key, "field is not set") from None

    def get_text(self, field_id: str | FieldId) -> str:
        value = self.get_field(field_id)
        if not isinstance(value, (TextField, HTMLField)):
            raise FieldTypeError(self.path, _field_key(field_id), f"expected text, found {value.type}")
        return value.value

    def get_datetime(self, field_id: str | FieldId) -> datetime:
        value = self.get_field(field_id)
        if not isinstance(value, DateTimeField):
            raise FieldTypeError(self.path, _field_key(field_id), f"expected DateTime, found {value.type}")
        return value.value

    @property
    def start_time(self) -> datetime:
        """Start time of an events.Event node."""
        return self.get_datetime(FieldId.START_TIME)

    @property
    def title(self) -> str:
        """Title of the node, or its name if untitled."""
        try:
            return self.get_text(FieldId.TITLE)
        except MissingFieldError:
            return self.name
