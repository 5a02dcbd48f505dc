from event_context.domain.event import (
    CacheDependency,
    CacheDescriptor,
    EventView,
    NodeContext,
    PartitionResult,
    QueryParameters,
)
from event_context.domain.node import Node
from event_context.domain.request import EmbedNode, ResolvedRequest

__all__ = [
    "CacheDependency",
    "CacheDescriptor",
    "EmbedNode",
    "EventView",
    "Node",
    "NodeContext",
    "PartitionResult",
    "QueryParameters",
    "ResolvedRequest",
]
