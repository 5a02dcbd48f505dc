"""Controlled enumerations for the event-context domain.

Node type ids, field ids and field types are referenced through these
enums.  Free-form strings are only accepted at the host boundary.
"""

from __future__ import annotations

from enum import Enum


class NodeTypeId(str, Enum):
    """Node types understood by the events module."""

    EVENT = "events.Event"
    EVENTS = "events.Events"


class FieldId(str, Enum):
    """Field ids used by the event node types."""

    TITLE = "core.Title"
    BODY = "core.Body"
    PLACE = "events.Place"
    START_TIME = "events.StartTime"


class FieldType(str, Enum):
    """Value kinds a node field may carry."""

    TEXT = "Text"
    HTML = "HTMLArea"
    DATETIME = "DateTime"
