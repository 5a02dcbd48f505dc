"""Node type descriptors registered with the host at startup.

The host keeps the schema; this module only describes the two node types
the events module understands and the localized names shown in the
host's editing UI.  Names are looked up per locale through a Translator,
normally backed by the module's gettext catalogs.
"""

from __future__ import annotations

import gettext
from typing import Callable, Optional

from pydantic import BaseModel, Field

from event_context.domain.enums import FieldId, FieldType, NodeTypeId

LanguageMap = dict[str, str]

# (text, locale) -> translated text
Translator = Callable[[str, str], str]


def untranslated(text: str, locale: str) -> str:
    return text


def catalog_translator(domain: str, locale_dir: str) -> Translator:
    """Translator reading <locale_dir>/<locale>/LC_MESSAGES/<domain>.mo.

    Locales without a catalog, and messages missing from one, keep the
    original text.
    """
    catalogs: dict[str, gettext.NullTranslations] = {}

    def translate(text: str, locale: str) -> str:
        catalog = catalogs.get(locale)
        if catalog is None:
            catalog = gettext.translation(domain, locale_dir, languages=[locale], fallback=True)
            catalogs[locale] = catalog
        return catalog.gettext(text)

    return translate


def gen_language_map(
    text: str,
    locales: list[str],
    translate: Translator = untranslated,
) -> LanguageMap:
    """Map every locale to its translation of *text*."""
    return {locale: translate(text, locale) for locale in locales}


class NodeField(BaseModel):
    id: str = Field(..., min_length=1)
    name: Optional[LanguageMap] = None
    type: Optional[FieldType] = None
    required: bool = False

    model_config = {"frozen": True}


class NodeType(BaseModel):
    id: str = Field(..., min_length=1)
    name: LanguageMap = Field(default_factory=dict)
    addable_to: list[str] = Field(default_factory=list)
    hide: bool = False
    fields: list[NodeField] = Field(default_factory=list)

    model_config = {"frozen": True}


def event_node_types(
    locales: list[str],
    translate: Translator = untranslated,
) -> list[NodeType]:
    """Descriptors for events.Event and events.Events, in registration order."""
    def L(text: str) -> LanguageMap:
        return gen_language_map(text, locales, translate)

    event = NodeType(
        id=NodeTypeId.EVENT.value,
        addable_to=[NodeTypeId.EVENTS.value],
        name=L("Event"),
        hide=True,
        fields=[
            NodeField(id=FieldId.TITLE.value),
            NodeField(id=FieldId.BODY.value),
            NodeField(
                id=FieldId.PLACE.value,
                name=L("Place"),
                type=FieldType.TEXT,
            ),
            NodeField(
                id=FieldId.START_TIME.value,
                name=L("Start"),
                type=FieldType.DATETIME,
                required=True,
            ),
        ],
    )
    events = NodeType(
        id=NodeTypeId.EVENTS.value,
        name=L("Events"),
        fields=[NodeField(id=FieldId.TITLE.value)],
    )
    return [event, events]
