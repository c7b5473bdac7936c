"""Canonical block tree to plain text.

The plain text of a document is stored next to its block tree so that it
can be searched or indexed without walking the tree again.

Rules:

* every block contributes at most one entry; entries are joined with
  ``"\\n"`` and empty entries are skipped;
* a text block contributes its rich text, followed by ``"\\n"`` and the
  text of its children when it has any;
* layout wrappers (virtual lists, column lists, columns, synced blocks,
  tables) contribute only the text of their children;
* blocks without readable text (divider, breadcrumb, table of contents,
  child page or database, link to page) contribute nothing.

Usage::

    from notioncache.converter.plain_text import get_plain_text

    text = get_plain_text(document.blocks)
"""

from __future__ import annotations

from collections.abc import Callable as _Callable
from collections.abc import Sequence
from typing import Any

from notioncache.models.blocks import BlockType
from notioncache.observability import get_logger

from .rich_text import rich_text_to_plain_text

log = get_logger("notioncache.converter")

# Block types that render their rich text, then their children.
_TEXT_TYPES: frozenset[str] = frozenset({
    BlockType.PARAGRAPH,
    BlockType.HEADING_1,
    BlockType.HEADING_2,
    BlockType.HEADING_3,
    BlockType.BULLETED_LIST_ITEM,
    BlockType.NUMBERED_LIST_ITEM,
    BlockType.TO_DO_LIST_ITEM,
    BlockType.QUOTE,
    BlockType.TOGGLE,
    BlockType.TEMPLATE,
    BlockType.CALLOUT,
})

# Layout wrappers whose children are simply concatenated.
_PASSTHROUGH_TYPES: frozenset[str] = frozenset({
    BlockType.BULLETED_LIST,
    BlockType.NUMBERED_LIST,
    BlockType.TO_DO_LIST,
    BlockType.COLUMN_LIST,
    BlockType.COLUMN,
    BlockType.SYNCED_BLOCK,
    BlockType.TABLE,
})

# Block types with no readable text.
_OMITTED_TYPES: frozenset[str] = frozenset({
    BlockType.DIVIDER,
    BlockType.BREADCRUMB,
    BlockType.TABLE_OF_CONTENTS,
    BlockType.CHILD_PAGE,
    BlockType.CHILD_DATABASE,
    BlockType.LINK_TO_PAGE,
})

_MEDIA_TYPES: frozenset[str] = frozenset({
    BlockType.IMAGE,
    BlockType.VIDEO,
    BlockType.PDF,
    BlockType.FILE,
    BlockType.AUDIO,
})


class PlainTextRenderer:
    """Render canonical blocks to plain text."""

    def render_blocks(self, blocks: Sequence[Any]) -> str:
        """Render *blocks* in order, one entry per block."""
        parts = (self._dispatch(block) for block in blocks)
        return "\n".join(part for part in parts if part)

    def _dispatch(self, block: Any) -> str:
        block_type = block.type

        if block_type in _OMITTED_TYPES:
            return ""
        if block_type in _PASSTHROUGH_TYPES:
            return self.render_blocks(block.children)
        if block_type in _TEXT_TYPES:
            return self._render_text(block)
        if block_type in _MEDIA_TYPES:
            return rich_text_to_plain_text(block.content.caption)

        renderer = _BLOCK_RENDERERS.get(block_type)
        if renderer is not None:
            return renderer(self, block)

        log.warning(
            "No plain text rule for block type",
            extra={"extra_fields": {"op": "plain_text", "block_type": str(block_type)}},
        )
        return ""

    # ------------------------------------------------------------------
    # Block type renderers
    # ------------------------------------------------------------------

    def _render_text(self, block: Any) -> str:
        text = rich_text_to_plain_text(block.content.rich_text)
        if block.children:
            return f"{text}\n{self.render_blocks(block.children)}"
        return text

    def _render_equation(self, block: Any) -> str:
        return block.content.expression

    def _render_code(self, block: Any) -> str:
        return rich_text_to_plain_text(block.content.rich_text)

    def _render_url_caption(self, block: Any) -> str:
        caption = rich_text_to_plain_text(block.content.caption)
        return f"{block.content.url}\n{caption}" if caption else block.content.url

    def _render_link_preview(self, block: Any) -> str:
        return block.content.url

    def _render_table_row(self, block: Any) -> str:
        return " ".join(rich_text_to_plain_text(cell) for cell in block.content.cells)


# ------------------------------------------------------------------
# Block renderer dispatch table
# ------------------------------------------------------------------

_BlockRenderer = _Callable[["PlainTextRenderer", Any], str]

_BLOCK_RENDERERS: dict[str, _BlockRenderer] = {
    BlockType.EQUATION: PlainTextRenderer._render_equation,
    BlockType.CODE: PlainTextRenderer._render_code,
    BlockType.EMBED: PlainTextRenderer._render_url_caption,
    BlockType.BOOKMARK: PlainTextRenderer._render_url_caption,
    BlockType.LINK_PREVIEW: PlainTextRenderer._render_link_preview,
    BlockType.TABLE_ROW: PlainTextRenderer._render_table_row,
}


def get_plain_text(blocks: Sequence[Any]) -> str:
    """Plain text of a block list.

    >>> from notioncache.models import RichTextItem
    >>> from notioncache.models.blocks import ParagraphBlock, TextContent
    >>> child = ParagraphBlock(id="b", content=TextContent(rich_text=[RichTextItem(text="!")]))
    >>> parent = ParagraphBlock(
    ...     id="a",
    ...     content=TextContent(rich_text=[RichTextItem(text="Hello "), RichTextItem(text="world")]),
    ...     children=[child],
    ... )
    >>> get_plain_text([parent])
    'Hello world\\n!'
    """
    return PlainTextRenderer().render_blocks(blocks)
