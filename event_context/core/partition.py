"""Ordering & partition engine for scheduled events.

Design principles:
    1. Pure functions over node snapshots: no store access, no clock reads.
    2. "now" is passed in once per query so every comparison agrees.
    3. Thumbnails are fetched through an injected lookup, only for the
       past events that can actually be shown.

Algorithm:
    - order all events by start time, latest first
    - the boundary b is the length of the leading run of events that
      start strictly after now; those are the upcoming events
    - events from b onwards are past candidates, most recent first
    - the upcoming run is reversed so the soonest event comes first
    - both windows are capped at ``limit`` independently and the flags
      empty the window that was not asked for

Events with equal start times keep no particular order relative to each
other.
"""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from event_context.domain.event import EventView, PartitionResult, QueryParameters
from event_context.domain.node import Node

logger = logging.getLogger(__name__)

ThumbnailLookup = Callable[[Node], Optional[Node]]


def order_descending(records: Iterable[Node]) -> list[Node]:
    """Sort events by start time, latest first."""
    return sorted(records, key=lambda node: node.start_time, reverse=True)


def find_partition_boundary(ordered: Sequence[Node], now: datetime) -> int:
    """Count the leading events of a latest-first sequence that start after *now*.

    Scanning stops at the first event that is not upcoming.
    """
    boundary = 0
    for node in ordered:
        if node.start_time <= now:
            break
        boundary += 1
    return boundary


def select_past_candidates(
    ordered: Sequence[Node],
    boundary: int,
    params: QueryParameters,
) -> list[Node]:
    """Past events that may end up in the past window, most recent first.

    Nothing is selected for an upcoming-only query; a bounded query never
    selects more than ``limit`` events.
    """
    if params.upcoming_only:
        return []
    candidates = list(ordered[boundary:])
    if params.bounded:
        candidates = candidates[: params.limit]
    return candidates


def apply_window_limits(
    upcoming: Sequence[EventView],
    past: Sequence[EventView],
    params: QueryParameters,
) -> tuple[list[EventView], list[EventView]]:
    """Cap both windows and drop the one the query excludes.

    *upcoming* must be soonest first and *past* most recent first, so
    truncation keeps the events closest to now.  ``upcoming_only`` wins
    when both flags are set.
    """
    upcoming_window = list(upcoming)
    past_window = list(past)
    if params.bounded:
        upcoming_window = upcoming_window[: params.limit]
        past_window = past_window[: params.limit]
    if params.upcoming_only:
        past_window = []
    elif params.past_only:
        upcoming_window = []
    return upcoming_window, past_window


def partition_events(
    records: Iterable[Node],
    params: QueryParameters,
    now: datetime,
    thumbnail_lookup: ThumbnailLookup,
) -> PartitionResult:
    """Split *records* into upcoming and past windows relative to *now*.

    Exceptions raised by *thumbnail_lookup* propagate unchanged; there is
    no partial result.
    """
    ordered = order_descending(records)
    boundary = find_partition_boundary(ordered, now)

    upcoming = [
        EventView(node=node, evaluated_at=now)
        for node in reversed(ordered[:boundary])
    ]
    past = [
        EventView(node=node, thumbnail=thumbnail_lookup(node), evaluated_at=now)
        for node in select_past_candidates(ordered, boundary, params)
    ]

    upcoming_window, past_window = apply_window_limits(upcoming, past, params)
    logger.debug(
        "Partitioned %d event(s) at %s: %d upcoming, %d past (shown %d/%d)",
        len(ordered),
        now.isoformat(),
        boundary,
        len(ordered) - boundary,
        len(upcoming_window),
        len(past_window),
    )
    return PartitionResult(
        upcoming=upcoming_window,
        past=past_window,
        next_change_at=upcoming[0].start_time if upcoming else None,
    )
