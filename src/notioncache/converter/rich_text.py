"""Rich text: Notion API objects to canonical spans, and spans to plain text."""

from __future__ import annotations

from typing import Any

from notioncache.models.common import Annotations, Color, RichText, RichTextItem, RichTextItemType
from notioncache.observability import get_logger

log = get_logger("notioncache.converter")


def map_color(raw: str | None) -> Color | None:
    """Map a Notion colour name; ``"default"`` and unknown names become ``None``."""
    if raw is None or raw == "default":
        return None
    try:
        return Color(raw)
    except ValueError:
        log.warning(
            "Unknown color",
            extra={"extra_fields": {"op": "map_color", "color": raw}},
        )
        return None


def _span_text(item: dict[str, Any]) -> str:
    kind = item.get("type")
    if kind == "text":
        return item.get("text", {}).get("content", "")
    if kind == "equation":
        return item.get("equation", {}).get("expression", "")
    return item.get("plain_text", "")


def map_rich_text_item(item: dict[str, Any]) -> RichTextItem:
    """Map one Notion rich text object.

    Text spans keep their literal content, equation spans their expression,
    and mentions the text Notion renders for them.
    """
    raw_annotations = item.get("annotations") or {}
    try:
        kind = RichTextItemType(item.get("type", "text"))
    except ValueError:
        kind = RichTextItemType.TEXT
    return RichTextItem(
        type=kind,
        text=_span_text(item),
        annotations=Annotations(
            bold=raw_annotations.get("bold", False),
            italic=raw_annotations.get("italic", False),
            strikethrough=raw_annotations.get("strikethrough", False),
            underline=raw_annotations.get("underline", False),
            code=raw_annotations.get("code", False),
            color=map_color(raw_annotations.get("color")),
        ),
        href=item.get("href"),
    )


def map_rich_text(items: list[dict[str, Any]] | None) -> RichText:
    """Map a list of Notion rich text objects, preserving order."""
    return [map_rich_text_item(item) for item in items or []]


def rich_text_to_plain_text(rich_text: RichText) -> str:
    """Concatenate span text, dropping annotations and links."""
    return "".join(item.text for item in rich_text)
