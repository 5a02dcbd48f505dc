"""Node type registration and listing."""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from event_context.domain.node_type import NodeType
from event_context.store.node_store import InMemoryNodeStore, NodeStore

logger = logging.getLogger(__name__)


class RegistrationError(Exception):
    """Raised when the host refuses a node type."""


def register_node_types(store: NodeStore, node_types: list[NodeType]) -> None:
    """Declare *node_types* to the host, stopping at the first failure."""
    for node_type in node_types:
        try:
            store.register_node_type(node_type)
        except Exception as exc:
            raise RegistrationError(
                f"Could not register {node_type.id!r} node type: {exc}"
            ) from exc
    logger.info("Registered %d node type(s)", len(node_types))


def create_node_types_router(store: InMemoryNodeStore) -> APIRouter:
    router = APIRouter(tags=["schema"])

    @router.get("/node-types")
    def list_node_types() -> dict[str, Any]:
        node_types = [nt.model_dump(mode="json") for nt in store.node_types]
        return {"node_types": node_types, "count": len(node_types)}

    return router
