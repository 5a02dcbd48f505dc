"""Storage collaborator: the host's node tree, request table and schema.

Design notes:
    - Context handlers only ever read from the store; nodes are frozen
      snapshots, so concurrent readers need no coordination beyond the
      lock guarding the registries themselves.
    - fetch_children() returns children in insertion order, which is the
      order the host stores them in.
    - The store does NOT interpret events.  It only knows paths.
"""

from __future__ import annotations

import json
import logging
import threading
from itertools import count
from pathlib import Path
from typing import Protocol

from pydantic import BaseModel, Field

from event_context.domain.node import Node
from event_context.domain.node_type import NodeType
from event_context.domain.request import ResolvedRequest

logger = logging.getLogger(__name__)


class StoreError(Exception):
    """Base class for storage collaborator failures."""


class NodeNotFoundError(StoreError):
    def __init__(self, site: str, path: str) -> None:
        self.site = site
        self.path = path
        super().__init__(f"No node at {path!r} on site {site!r}")


class RequestNotFoundError(StoreError):
    def __init__(self, request_id: int) -> None:
        self.request_id = request_id
        super().__init__(f"Unknown request id {request_id}")


class NodeStore(Protocol):
    """Protocol for the storage collaborator used by context handlers."""

    def fetch_children(self, site: str, path: str) -> list[Node]:
        """Return the direct children of *path*, in stored order."""
        ...

    def get_request(self, request_id: int) -> ResolvedRequest:
        """Resolve an opaque request handle."""
        ...

    def register_node_type(self, node_type: NodeType) -> None:
        """Declare a node type to the host."""
        ...


class StoreSeed(BaseModel):
    """On-disk layout accepted by InMemoryNodeStore.from_json()."""

    sites: dict[str, list[Node]] = Field(default_factory=dict)
    # Request handles are assigned 1, 2, ... in list order
    requests: list[ResolvedRequest] = Field(default_factory=list)


class InMemoryNodeStore:
    """Thread-safe, in-memory NodeStore.

    Parent nodes are implicit: adding /a/b makes /a a known path even if
    no node was stored there, so empty collections can be listed.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._nodes: dict[str, dict[str, Node]] = {}
        self._children: dict[str, dict[str, list[str]]] = {}
        self._requests: dict[int, ResolvedRequest] = {}
        self._request_ids = count(1)
        self._node_types: dict[str, NodeType] = {}

    @classmethod
    def from_json(cls, path: str | Path) -> InMemoryNodeStore:
        """Build a store from a JSON seed file."""
        seed = StoreSeed.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))
        store = cls()
        for site, nodes in seed.sites.items():
            for node in nodes:
                store.add_node(site, node)
        for request in seed.requests:
            store.add_request(request)
        logger.info(
            "Seeded node store from %s (%d site(s), %d request(s))",
            path,
            len(seed.sites),
            len(seed.requests),
        )
        return store

    # ── Population ───────────────────────────────────────────────────────

    def add_node(self, site: str, node: Node) -> None:
        """Insert or replace *node*, creating implicit ancestors."""
        with self._lock:
            nodes = self._nodes.setdefault(site, {})
            children = self._children.setdefault(site, {"/": []})
            if node.path not in nodes:
                self._link(children, node.path)
            nodes[node.path] = node
            children.setdefault(node.path, [])

    def add_request(self, request: ResolvedRequest) -> int:
        """Store a resolved request and return its handle."""
        with self._lock:
            request_id = next(self._request_ids)
            self._requests[request_id] = request
            return request_id

    # ── NodeStore API ────────────────────────────────────────────────────

    def fetch_children(self, site: str, path: str) -> list[Node]:
        with self._lock:
            children = self._children.get(site, {}).get(_normalise(path))
            if children is None:
                raise NodeNotFoundError(site, path)
            nodes = self._nodes[site]
            return [nodes[child] for child in children if child in nodes]

    def get_request(self, request_id: int) -> ResolvedRequest:
        with self._lock:
            try:
                return self._requests[request_id]
            except KeyError:
                raise RequestNotFoundError(request_id) from None

    def register_node_type(self, node_type: NodeType) -> None:
        with self._lock:
            self._node_types[node_type.id] = node_type
        logger.info("Registered node type %s", node_type.id)

    @property
    def node_types(self) -> list[NodeType]:
        with self._lock:
            return list(self._node_types.values())

    # ── Internals ────────────────────────────────────────────────────────

    @staticmethod
    def _link(children: dict[str, list[str]], path: str) -> None:
        """Must be called while holding self._lock."""
        while path != "/":
            parent = path.rsplit("/", 1)[0] or "/"
            siblings = children.setdefault(parent, [])
            if path in siblings:
                return
            siblings.append(path)
            path = parent


def _normalise(path: str) -> str:
    if len(path) > 1:
        return path.rstrip("/")
    return path
