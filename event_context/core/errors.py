"""Failures raised while assembling a node context.

Each error names the operation that failed.  The collaborator's own
exception is chained as ``__cause__``.  None of these are retried and a
failed context yields no fragments at all.
"""

from __future__ import annotations


class ContextError(Exception):
    """Base class for every context assembly failure."""

    operation = "assemble context"

    def __init__(self, reason: str, operation: str | None = None) -> None:
        if operation is not None:
            self.operation = operation
        self.reason = reason
        super().__init__(f"Could not {self.operation}: {reason}")


class RequestResolutionError(ContextError):
    operation = "get request"


class EnumerationError(ContextError):
    operation = "fetch children"


class MalformedEmbedURIError(ContextError):
    operation = "parse embed URI"


class RenderError(ContextError):
    operation = "render template"
