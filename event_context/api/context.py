"""REST endpoint the host calls to obtain node contexts.

Path: POST /context

The host posts a request handle, the node type being rendered and, for
embedded views, the embed URI.  The response carries the rendered
fragments and the cache hint for the host's page cache.

Failures are logged and mapped to HTTP errors; there is never a partial
response.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from event_context.core.assembler import ContextAssembler
from event_context.core.errors import (
    ContextError,
    MalformedEmbedURIError,
    RequestResolutionError,
)
from event_context.domain.request import EmbedNode

logger = logging.getLogger(__name__)


class ContextRequest(BaseModel):
    request_id: int = Field(..., ge=0, description="Opaque request handle issued by the host")
    node_type: str = Field(..., min_length=1)
    embed: Optional[EmbedNode] = None


def _status_for(exc: ContextError) -> int:
    if isinstance(exc, MalformedEmbedURIError):
        return 400
    if isinstance(exc, RequestResolutionError):
        return 404
    return 500


def create_context_router(assembler: ContextAssembler) -> APIRouter:
    """Factory that wires the context endpoint to a ContextAssembler."""

    router = APIRouter(tags=["context"])

    @router.post("/context")
    def node_context(body: ContextRequest) -> dict[str, Any]:
        try:
            context = assembler.get_context(body.request_id, body.node_type, body.embed)
        except ContextError as exc:
            logger.error("Could not get %s context: %s", body.node_type, exc)
            raise HTTPException(status_code=_status_for(exc), detail=str(exc)) from exc

        if context is None:
            raise HTTPException(
                status_code=404,
                detail=f"Node type {body.node_type!r} is not handled by this module",
            )
        return context.model_dump(mode="json")

    return router
