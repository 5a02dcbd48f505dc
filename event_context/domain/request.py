"""Host request handles resolved into typed values."""

from __future__ import annotations

from pydantic import BaseModel, Field


class ResolvedRequest(BaseModel):
    """Everything a context handler needs to know about one page request."""

    site: str = Field(..., min_length=1)
    node_path: str = Field(..., min_length=1)
    locale: str = "en"
    query: dict[str, list[str]] = Field(default_factory=dict)

    model_config = {"frozen": True}


class EmbedNode(BaseModel):
    """Marks a context call made for a view embedded into another page.

    The query string of *uri* replaces the request's own query.
    """

    uri: str

    model_config = {"frozen": True}
