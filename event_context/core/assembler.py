"""ContextAssembler: builds rendered contexts for event nodes.

Two node types are handled:
    - events.Events: an event list split into upcoming and past windows,
      parameterised by the request query or the embed URI.
    - events.Event: the image gallery of a single event.

Every collaborator failure is wrapped into a ContextError naming the
failed operation.  A failed context produces no fragments at all.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Optional

from event_context.core.errors import (
    ContextError,
    EnumerationError,
    RenderError,
    RequestResolutionError,
)
from event_context.core.partition import partition_events
from event_context.core.query import parse_query_parameters, query_source_for
from event_context.domain.enums import NodeTypeId
from event_context.domain.event import CacheDependency, CacheDescriptor, NodeContext
from event_context.domain.node import FieldAccessError, Node
from event_context.domain.request import EmbedNode, ResolvedRequest
from event_context.foundation.clock import utc_now
from event_context.render.formatter import (
    EVENT_IMAGES_TEMPLATE,
    EVENT_LIST_TEMPLATE,
    Renderer,
)
from event_context.store.node_store import NodeStore

logger = logging.getLogger(__name__)

# Watch the list node, its events and their images
LIST_DESCEND = 2
# Watch the event node and its images
EVENT_DESCEND = 1


class ContextAssembler:
    """Stateless context builder over a NodeStore and a Renderer.

    Args:
        store: Storage collaborator for requests and children.
        renderer: Rendering collaborator.
        events_path: Collection holding every events.Event node.
        templates_path_for: Maps a site to its templates directory.
    """

    def __init__(
        self,
        store: NodeStore,
        renderer: Renderer,
        events_path: str,
        templates_path_for: Callable[[str], str],
    ) -> None:
        self._store = store
        self._renderer = renderer
        self._events_path = events_path
        self._templates_path_for = templates_path_for
        self._handlers: dict[str, Callable[[int, Optional[EmbedNode]], NodeContext]] = {
            NodeTypeId.EVENTS.value: self.events_context,
            NodeTypeId.EVENT.value: self.event_context,
        }

    @property
    def node_types(self) -> list[str]:
        return list(self._handlers)

    # ── Public API ───────────────────────────────────────────────────────

    def get_context(
        self,
        request_id: int,
        node_type: str,
        embed: Optional[EmbedNode] = None,
    ) -> NodeContext | None:
        """Dispatch on *node_type*; returns None for types not handled here."""
        handler = self._handlers.get(node_type)
        if handler is None:
            return None
        return handler(request_id, embed)

    def events_context(
        self,
        request_id: int,
        embed: Optional[EmbedNode] = None,
    ) -> NodeContext:
        """Render the event list for an events.Events node."""
        request = self._resolve(request_id)
        params = parse_query_parameters(query_source_for(request, embed))
        events = self._children(request.site, self._events_path, "fetch children")

        def thumbnail(node: Node) -> Node | None:
            images = self._children(request.site, node.path, "fetch children")
            return images[0] if images else None

        try:
            result = partition_events(events, params, utc_now(), thumbnail)
        except FieldAccessError as exc:
            raise ContextError(str(exc), operation="read event start time") from exc

        context: dict[str, Any] = {
            "UpcomingOnly": params.upcoming_only,
            "PastOnly": params.past_only,
            "UpcomingEvents": result.upcoming,
            "PastEvents": result.past,
            "Embedded": embed,
        }
        rendered = self._render(EVENT_LIST_TEMPLATE, context, request)
        return NodeContext(
            fragments={"EventList": rendered},
            cache=CacheDescriptor(
                dependency=CacheDependency(node_path=request.node_path, descend=LIST_DESCEND),
                expire_at=result.next_change_at,
            ),
        )

    def event_context(
        self,
        request_id: int,
        embed: Optional[EmbedNode] = None,
    ) -> NodeContext:
        """Render the image gallery of an events.Event node."""
        request = self._resolve(request_id)
        images = self._children(request.site, request.node_path, "fetch images")
        rendered = self._render(EVENT_IMAGES_TEMPLATE, {"Images": images}, request)
        return NodeContext(
            fragments={"EventImages": rendered},
            cache=CacheDescriptor(
                dependency=CacheDependency(node_path=request.node_path, descend=EVENT_DESCEND),
            ),
        )

    # ── Collaborator calls ───────────────────────────────────────────────

    def _resolve(self, request_id: int) -> ResolvedRequest:
        try:
            return self._store.get_request(request_id)
        except Exception as exc:
            raise RequestResolutionError(str(exc)) from exc

    def _children(self, site: str, path: str, operation: str) -> list[Node]:
        try:
            return self._store.fetch_children(site, path)
        except Exception as exc:
            raise EnumerationError(str(exc), operation=operation) from exc

    def _render(self, template: str, context: dict[str, Any], request: ResolvedRequest) -> str:
        try:
            return self._renderer.render(
                template,
                context,
                request.locale,
                self._templates_path_for(request.site),
            )
        except Exception as exc:
            raise RenderError(f"{template}: {exc}") from exc
