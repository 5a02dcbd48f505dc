"""REST endpoint the host uses to hand over page requests.

Path: POST /requests

The host posts the resolved request (site, node path, locale, query) and
receives the opaque handle it later passes to POST /context.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter

from event_context.domain.request import ResolvedRequest
from event_context.store.node_store import InMemoryNodeStore

logger = logging.getLogger(__name__)


def create_requests_router(store: InMemoryNodeStore) -> APIRouter:
    """Factory that wires request registration to an InMemoryNodeStore."""

    router = APIRouter(tags=["requests"])

    @router.post("/requests", status_code=201)
    def register_request(request: ResolvedRequest) -> dict[str, Any]:
        request_id = store.add_request(request)
        logger.debug("Registered request %d for %s%s", request_id, request.site, request.node_path)
        return {"request_id": request_id}

    return router
