"""Rendering collaborator for the two event templates.

The host normally owns template rendering.  PlainRenderer is the
built-in stand-in: deterministic HTML fragments with escaped content and
localized headings, good enough for standalone use and for tests.
"""

from __future__ import annotations

import logging
from datetime import datetime
from html import escape
from typing import Any, Callable, Optional, Protocol

from event_context.domain.enums import FieldId
from event_context.domain.event import EventView
from event_context.domain.node import MissingFieldError, Node

logger = logging.getLogger(__name__)

EVENT_LIST_TEMPLATE = "events/event-list"
EVENT_IMAGES_TEMPLATE = "events/event-images"

_LABELS: dict[str, dict[str, str]] = {
    "en": {
        "upcoming": "Upcoming events",
        "past": "Past events",
        "none": "No events.",
        "images": "Images",
    },
    "de": {
        "upcoming": "Kommende Aktionen",
        "past": "Vergangene Aktionen",
        "none": "Keine Aktionen.",
        "images": "Bilder",
    },
}


class TemplateNotFoundError(Exception):
    """Raised for a template name the renderer does not know."""


class Renderer(Protocol):
    """Protocol for the rendering collaborator."""

    def render(
        self,
        template: str,
        context: dict[str, Any],
        locale: str,
        templates_path: str,
    ) -> str:
        ...


class PlainRenderer:
    """Renders event lists and image galleries as small HTML fragments.

    *templates_path* is accepted for protocol compatibility; site
    template overrides are only honoured by the host's renderer.
    """

    def __init__(self) -> None:
        self._templates: dict[str, Callable[[dict[str, Any], dict[str, str]], str]] = {
            EVENT_LIST_TEMPLATE: self._event_list,
            EVENT_IMAGES_TEMPLATE: self._event_images,
        }

    def render(
        self,
        template: str,
        context: dict[str, Any],
        locale: str,
        templates_path: str,
    ) -> str:
        try:
            render = self._templates[template]
        except KeyError:
            raise TemplateNotFoundError(f"Unknown template {template!r}") from None
        labels = _LABELS.get(locale.split("_")[0].lower(), _LABELS["en"])
        logger.debug("Rendering %s (locale=%s)", template, locale)
        return render(context, labels)

    # ── Templates ────────────────────────────────────────────────────────

    @classmethod
    def _event_list(cls, context: dict[str, Any], labels: dict[str, str]) -> str:
        classes = "event-list embedded" if context.get("Embedded") else "event-list"
        lines = [f'<div class="{classes}">']
        if not context.get("PastOnly") or context.get("UpcomingOnly"):
            lines.extend(cls._section("upcoming", labels, context.get("UpcomingEvents") or []))
        if not context.get("UpcomingOnly"):
            lines.extend(cls._section("past", labels, context.get("PastEvents") or []))
        lines.append("</div>")
        return "\n".join(lines)

    @classmethod
    def _section(cls, kind: str, labels: dict[str, str], events: list[EventView]) -> list[str]:
        lines = [f'<section class="{kind}">', f"<h2>{escape(labels[kind])}</h2>"]
        if not events:
            lines.append(f"<p>{escape(labels['none'])}</p>")
        else:
            lines.append("<ul>")
            lines.extend(cls._event_item(event) for event in events)
            lines.append("</ul>")
        lines.append("</section>")
        return lines

    @staticmethod
    def _event_item(event: EventView) -> str:
        node = event.node
        parts = [
            f'<li><a href="{escape(node.path)}/">{escape(node.title)}</a>',
            f' <time datetime="{_iso(event.start_time)}">{_display(event.start_time)}</time>',
        ]
        place = _optional_text(node, FieldId.PLACE)
        if place:
            parts.append(f' <span class="place">{escape(place)}</span>')
        if event.thumbnail is not None:
            parts.append(
                f' <img src="{escape(event.thumbnail.path)}/" alt="{escape(event.thumbnail.title)}">'
            )
        parts.append("</li>")
        return "".join(parts)

    @staticmethod
    def _event_images(context: dict[str, Any], labels: dict[str, str]) -> str:
        images: list[Node] = context.get("Images") or []
        if not images:
            return ""
        lines = ['<div class="event-images">', f"<h2>{escape(labels['images'])}</h2>"]
        for image in images:
            lines.append(f'<img src="{escape(image.path)}/" alt="{escape(image.title)}">')
        lines.append("</div>")
        return "\n".join(lines)


def _optional_text(node: Node, field_id: FieldId) -> Optional[str]:
    try:
        return node.get_text(field_id)
    except MissingFieldError:
        return None


def _iso(value: datetime) -> str:
    return value.isoformat()


def _display(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")
