"""Event views, partition results and cache hints.

All of these are built fresh for one query and discarded once the
rendered output has been handed back to the host.
"""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from event_context.domain.node import Node

UNBOUNDED = -1


class QueryParameters(BaseModel):
    """Window selection for an event list.

    ``limit`` is either UNBOUNDED or a positive count; anything else below
    1 is clamped to 1.
    """

    past_only: bool = False
    upcoming_only: bool = False
    limit: int = UNBOUNDED

    model_config = {"frozen": True}

    @field_validator("limit")
    @classmethod
    def clamp_limit(cls, v: int) -> int:
        if v != UNBOUNDED and v < 1:
            return 1
        return v

    @property
    def bounded(self) -> bool:
        return self.limit != UNBOUNDED


class EventView(BaseModel):
    """One events.Event node plus its optional thumbnail."""

    node: Node
    thumbnail: Optional[Node] = None
    evaluated_at: datetime = Field(..., description="The query's single 'now'")

    model_config = {"frozen": True}

    @property
    def start_time(self) -> datetime:
        return self.node.start_time

    @property
    def is_upcoming(self) -> bool:
        return self.node.start_time > self.evaluated_at


class PartitionResult(BaseModel):
    """Upcoming events soonest first, past events most recent first."""

    upcoming: list[EventView] = Field(default_factory=list)
    past: list[EventView] = Field(default_factory=list)
    next_change_at: Optional[datetime] = Field(
        None, description="Start of the soonest upcoming event, whether or not it is shown"
    )

    model_config = {"frozen": True}


class CacheDependency(BaseModel):
    """Subtree whose changes invalidate a rendered context."""

    node_path: str
    descend: int = Field(..., ge=0, description="Levels below node_path to watch")

    model_config = {"frozen": True}


class CacheDescriptor(BaseModel):
    dependency: CacheDependency
    expire_at: Optional[datetime] = None

    model_config = {"frozen": True}


class NodeContext(BaseModel):
    """Rendered fragments for one node plus the cache hint describing them."""

    fragments: dict[str, str]
    cache: CacheDescriptor

    model_config = {"frozen": True}
