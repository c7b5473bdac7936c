"""Pure transforms over the canonical model.

* :mod:`.rich_text` -- Notion rich text to spans, spans to plain text.
* :mod:`.plain_text` -- block tree to plain text.
* :mod:`.projection` -- cached document to the public read shape.
"""

from __future__ import annotations

from .plain_text import PlainTextRenderer, get_plain_text
from .projection import project_document, project_properties, strip_block_ids
from .rich_text import map_color, map_rich_text, map_rich_text_item, rich_text_to_plain_text

__all__ = [
    "PlainTextRenderer",
    "get_plain_text",
    "map_color",
    "map_rich_text",
    "map_rich_text_item",
    "project_document",
    "project_properties",
    "rich_text_to_plain_text",
    "strip_block_ids",
]
