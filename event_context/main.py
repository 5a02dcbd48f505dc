"""event-context: event list and event image contexts for the host CMS.

This is the application entry point.  It wires the node store, the
renderer, the ContextAssembler and the HTTP endpoints together, and
registers the event node types with the host on startup.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from event_context.api.context import create_context_router
from event_context.api.node_types import create_node_types_router, register_node_types
from event_context.api.requests import create_requests_router
from event_context.config import settings
from event_context.core.assembler import ContextAssembler
from event_context.domain.node_type import catalog_translator, event_node_types, untranslated
from event_context.render.formatter import PlainRenderer
from event_context.store.node_store import InMemoryNodeStore

# ── Logging ──────────────────────────────────────────────────────────────────

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
)
logger = logging.getLogger(__name__)

# ── State ────────────────────────────────────────────────────────────────────

store = (
    InMemoryNodeStore.from_json(settings.seed_path)
    if settings.seed_path
    else InMemoryNodeStore()
)

translate = (
    catalog_translator(settings.gettext_domain, settings.locale_dir)
    if settings.locale_dir
    else untranslated
)

assembler = ContextAssembler(
    store=store,
    renderer=PlainRenderer(),
    events_path=settings.events_path,
    templates_path_for=settings.site_templates_path,
)

# ── Startup ──────────────────────────────────────────────────────────────────


@asynccontextmanager
async def lifespan(app: FastAPI):
    register_node_types(store, event_node_types(settings.available_locales, translate))
    logger.info("Module %s initialised", settings.module_name)
    yield


# ── App ──────────────────────────────────────────────────────────────────────

app = FastAPI(
    title=settings.app_name,
    description="Event list and event image contexts",
    version="0.1.0",
    lifespan=lifespan,
)

# ── Routes ───────────────────────────────────────────────────────────────────

app.include_router(create_context_router(assembler))
app.include_router(create_node_types_router(store))
app.include_router(create_requests_router(store))


# ── Health ───────────────────────────────────────────────────────────────────

@app.get("/health")
def health() -> dict:
    return {
        "status": "ok",
        "module": settings.module_name,
        "events_path": settings.events_path,
        "handled_node_types": assembler.node_types,
        "registered_node_types": [nt.id for nt in store.node_types],
    }
