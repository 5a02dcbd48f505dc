"""Tests for the built-in PlainRenderer."""

from datetime import timedelta

import pytest

from event_context.domain.event import EventView
from event_context.domain.request import EmbedNode
from event_context.render.formatter import (
    EVENT_IMAGES_TEMPLATE,
    EVENT_LIST_TEMPLATE,
    PlainRenderer,
    TemplateNotFoundError,
)

from tests.test_node import _NOW, _event_node, _image_node


def _view(path: str, days: int, **kw) -> EventView:
    return EventView(node=_event_node(path, _NOW + timedelta(days=days), **kw), evaluated_at=_NOW)


def _list_context(**overrides) -> dict:
    context = {
        "UpcomingOnly": False,
        "PastOnly": False,
        "UpcomingEvents": [],
        "PastEvents": [],
        "Embedded": None,
    }
    context.update(overrides)
    return context


@pytest.fixture
def renderer() -> PlainRenderer:
    return PlainRenderer()


class TestEventList:
    def test_both_sections_rendered(self, renderer: PlainRenderer) -> None:
        html = renderer.render(
            EVENT_LIST_TEMPLATE,
            _list_context(
                UpcomingEvents=[_view("/aktionen/next", 2, title="Next")],
                PastEvents=[_view("/aktionen/last", -1, title="Last")],
            ),
            "en",
            "sites/example/templates",
        )
        assert "Upcoming events" in html
        assert "Past events" in html
        assert html.index("Next") < html.index("Last")

    def test_german_labels(self, renderer: PlainRenderer) -> None:
        html = renderer.render(EVENT_LIST_TEMPLATE, _list_context(), "de", "")
        assert "Kommende Aktionen" in html
        assert "Keine Aktionen." in html

    def test_unknown_locale_falls_back_to_english(self, renderer: PlainRenderer) -> None:
        html = renderer.render(EVENT_LIST_TEMPLATE, _list_context(), "fr", "")
        assert "Upcoming events" in html

    def test_past_only_hides_upcoming_section(self, renderer: PlainRenderer) -> None:
        html = renderer.render(EVENT_LIST_TEMPLATE, _list_context(PastOnly=True), "en", "")
        assert "Upcoming events" not in html
        assert "Past events" in html

    def test_upcoming_only_hides_past_section(self, renderer: PlainRenderer) -> None:
        html = renderer.render(EVENT_LIST_TEMPLATE, _list_context(UpcomingOnly=True), "en", "")
        assert "Upcoming events" in html
        assert "Past events" not in html

    def test_embedded_marker(self, renderer: PlainRenderer) -> None:
        html = renderer.render(
            EVENT_LIST_TEMPLATE, _list_context(Embedded=EmbedNode(uri="/termine/")), "en", ""
        )
        assert 'class="event-list embedded"' in html

    def test_content_is_escaped(self, renderer: PlainRenderer) -> None:
        html = renderer.render(
            EVENT_LIST_TEMPLATE,
            _list_context(UpcomingEvents=[_view(
                "/aktionen/x", 1, title="<script>",
                **{"events.Place": {"type": "Text", "value": "Hall & Yard"}},
            )]),
            "en",
            "",
        )
        assert "<script>" not in html
        assert "&lt;script&gt;" in html
        assert "Hall &amp; Yard" in html

    def test_thumbnail_rendered(self, renderer: PlainRenderer) -> None:
        view = EventView(
            node=_event_node("/aktionen/last", _NOW - timedelta(days=1)),
            thumbnail=_image_node("/aktionen/last/photo", title="Crowd"),
            evaluated_at=_NOW,
        )
        html = renderer.render(EVENT_LIST_TEMPLATE, _list_context(PastEvents=[view]), "en", "")
        assert '<img src="/aktionen/last/photo/" alt="Crowd">' in html


class TestEventImages:
    def test_images_rendered(self, renderer: PlainRenderer) -> None:
        images = [_image_node("/aktionen/a/one"), _image_node("/aktionen/a/two")]
        html = renderer.render(EVENT_IMAGES_TEMPLATE, {"Images": images}, "en", "")
        assert html.count("<img") == 2

    def test_no_images_renders_nothing(self, renderer: PlainRenderer) -> None:
        assert renderer.render(EVENT_IMAGES_TEMPLATE, {"Images": []}, "en", "") == ""


def test_unknown_template_raises(renderer: PlainRenderer) -> None:
    with pytest.raises(TemplateNotFoundError):
        renderer.render("events/nope", {}, "en", "")
