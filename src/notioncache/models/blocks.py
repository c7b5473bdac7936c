"""Canonical block tree.

Every block kind is its own model with a ``type`` literal, so
:data:`TopLevelBlock` and :data:`AnyBlock` are discriminated unions that
pydantic validates by tag.  Per-kind rules live in the field types:

* container kinds declare ``children`` as a list (default ``[]``);
* every other kind declares ``children: None``, so a stray child list is a
  validation error;
* restricted containers narrow the element type: a column list holds
  columns, a table holds table rows, and each virtual list holds items of
  its own kind only.

The three virtual kinds (``bulletedList``, ``numberedList``, ``toDoList``)
do not exist in the Notion API.  The connector synthesises them from runs
of consecutive list items; their id is ``virtual-<first item id>``.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .common import Color, File, Icon, ObjectType, RichText


class BlockType(str, Enum):
    PARAGRAPH = "paragraph"
    HEADING_1 = "heading1"
    HEADING_2 = "heading2"
    HEADING_3 = "heading3"
    BULLETED_LIST_ITEM = "bulletedListItem"
    NUMBERED_LIST_ITEM = "numberedListItem"
    TO_DO_LIST_ITEM = "toDoListItem"
    QUOTE = "quote"
    TOGGLE = "toggle"
    TEMPLATE = "template"
    SYNCED_BLOCK = "syncedBlock"
    CHILD_PAGE = "childPage"
    CHILD_DATABASE = "childDatabase"
    EQUATION = "equation"
    CODE = "code"
    CALLOUT = "callout"
    DIVIDER = "divider"
    BREADCRUMB = "breadcrumb"
    TABLE_OF_CONTENTS = "tableOfContents"
    COLUMN_LIST = "columnList"
    COLUMN = "column"
    LINK_TO_PAGE = "linkToPage"
    TABLE = "table"
    TABLE_ROW = "tableRow"
    EMBED = "embed"
    BOOKMARK = "bookmark"
    IMAGE = "image"
    VIDEO = "video"
    PDF = "pdf"
    FILE = "file"
    AUDIO = "audio"
    LINK_PREVIEW = "linkPreview"
    # Virtual
    BULLETED_LIST = "bulletedList"
    NUMBERED_LIST = "numberedList"
    TO_DO_LIST = "toDoList"


# ---------------------------------------------------------------------------
# Content shapes
# ---------------------------------------------------------------------------

class TextContent(BaseModel):
    rich_text: RichText = Field(default_factory=list)
    color: Color | None = None


class HeadingContent(TextContent):
    is_toggleable: bool = False


class ToDoContent(TextContent):
    checked: bool = False


class TemplateContent(BaseModel):
    rich_text: RichText = Field(default_factory=list)


class SyncedBlockContent(BaseModel):
    """``block_id`` is the original block for a reference, ``None`` for an original."""

    block_id: str | None = None


class ChildTitleContent(BaseModel):
    title: str


class EquationContent(BaseModel):
    expression: str


class CodeContent(BaseModel):
    rich_text: RichText = Field(default_factory=list)
    caption: RichText = Field(default_factory=list)
    language: str


class CalloutContent(TextContent):
    icon: Icon | None = None


class TableOfContentsContent(BaseModel):
    color: Color | None = None


class LinkToPageContent(BaseModel):
    type: ObjectType
    id: str


class TableContent(BaseModel):
    has_column_header: bool = False
    has_row_header: bool = False
    table_width: int


class TableRowContent(BaseModel):
    cells: list[RichText] = Field(default_factory=list)


class UrlCaptionContent(BaseModel):
    url: str
    caption: RichText = Field(default_factory=list)


class MediaContent(BaseModel):
    file: File
    caption: RichText = Field(default_factory=list)


class LinkPreviewContent(BaseModel):
    url: str


# ---------------------------------------------------------------------------
# Block variants
# ---------------------------------------------------------------------------

class _Block(BaseModel):
    id: str


# ── Text containers ──────────────────────────────────────────────────

class ParagraphBlock(_Block):
    type: Literal["paragraph"] = "paragraph"
    content: TextContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class Heading1Block(_Block):
    type: Literal["heading1"] = "heading1"
    content: HeadingContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class Heading2Block(_Block):
    type: Literal["heading2"] = "heading2"
    content: HeadingContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class Heading3Block(_Block):
    type: Literal["heading3"] = "heading3"
    content: HeadingContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class BulletedListItemBlock(_Block):
    type: Literal["bulletedListItem"] = "bulletedListItem"
    content: TextContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class NumberedListItemBlock(_Block):
    type: Literal["numberedListItem"] = "numberedListItem"
    content: TextContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class ToDoListItemBlock(_Block):
    type: Literal["toDoListItem"] = "toDoListItem"
    content: ToDoContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class QuoteBlock(_Block):
    type: Literal["quote"] = "quote"
    content: TextContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class ToggleBlock(_Block):
    type: Literal["toggle"] = "toggle"
    content: TextContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class TemplateBlock(_Block):
    type: Literal["template"] = "template"
    content: TemplateContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class SyncedBlock(_Block):
    type: Literal["syncedBlock"] = "syncedBlock"
    content: SyncedBlockContent
    children: list[TopLevelBlock] = Field(default_factory=list)


class CalloutBlock(_Block):
    type: Literal["callout"] = "callout"
    content: CalloutContent
    children: list[TopLevelBlock] = Field(default_factory=list)


# ── Layout containers ────────────────────────────────────────────────

class ColumnBlock(_Block):
    type: Literal["column"] = "column"
    content: None = None
    children: list[TopLevelBlock] = Field(default_factory=list)


class ColumnListBlock(_Block):
    type: Literal["columnList"] = "columnList"
    content: None = None
    children: list[ColumnBlock] = Field(default_factory=list)


class TableRowBlock(_Block):
    type: Literal["tableRow"] = "tableRow"
    content: TableRowContent
    children: None = None


class TableBlock(_Block):
    type: Literal["table"] = "table"
    content: TableContent
    children: list[TableRowBlock] = Field(default_factory=list)


# ── Virtual lists ────────────────────────────────────────────────────

class BulletedListBlock(_Block):
    type: Literal["bulletedList"] = "bulletedList"
    content: None = None
    children: list[BulletedListItemBlock] = Field(default_factory=list)


class NumberedListBlock(_Block):
    type: Literal["numberedList"] = "numberedList"
    content: None = None
    children: list[NumberedListItemBlock] = Field(default_factory=list)


class ToDoListBlock(_Block):
    type: Literal["toDoList"] = "toDoList"
    content: None = None
    children: list[ToDoListItemBlock] = Field(default_factory=list)


# ── Leaves ───────────────────────────────────────────────────────────

class ChildPageBlock(_Block):
    type: Literal["childPage"] = "childPage"
    content: ChildTitleContent
    children: None = None


class ChildDatabaseBlock(_Block):
    type: Literal["childDatabase"] = "childDatabase"
    content: ChildTitleContent
    children: None = None


class EquationBlock(_Block):
    type: Literal["equation"] = "equation"
    content: EquationContent
    children: None = None


class CodeBlock(_Block):
    type: Literal["code"] = "code"
    content: CodeContent
    children: None = None


class DividerBlock(_Block):
    type: Literal["divider"] = "divider"
    content: None = None
    children: None = None


class BreadcrumbBlock(_Block):
    type: Literal["breadcrumb"] = "breadcrumb"
    content: None = None
    children: None = None


class TableOfContentsBlock(_Block):
    type: Literal["tableOfContents"] = "tableOfContents"
    content: TableOfContentsContent
    children: None = None


class LinkToPageBlock(_Block):
    type: Literal["linkToPage"] = "linkToPage"
    content: LinkToPageContent
    children: None = None


class EmbedBlock(_Block):
    type: Literal["embed"] = "embed"
    content: UrlCaptionContent
    children: None = None


class BookmarkBlock(_Block):
    type: Literal["bookmark"] = "bookmark"
    content: UrlCaptionContent
    children: None = None


class ImageBlock(_Block):
    type: Literal["image"] = "image"
    content: MediaContent
    children: None = None


class VideoBlock(_Block):
    type: Literal["video"] = "video"
    content: MediaContent
    children: None = None


class PdfBlock(_Block):
    type: Literal["pdf"] = "pdf"
    content: MediaContent
    children: None = None


class FileBlock(_Block):
    type: Literal["file"] = "file"
    content: MediaContent
    children: None = None


class AudioBlock(_Block):
    type: Literal["audio"] = "audio"
    content: MediaContent
    children: None = None


class LinkPreviewBlock(_Block):
    type: Literal["linkPreview"] = "linkPreview"
    content: LinkPreviewContent
    children: None = None


# ---------------------------------------------------------------------------
# Unions
# ---------------------------------------------------------------------------

_TOP_LEVEL_MODELS = (
    ParagraphBlock,
    Heading1Block,
    Heading2Block,
    Heading3Block,
    QuoteBlock,
    ToggleBlock,
    TemplateBlock,
    SyncedBlock,
    CalloutBlock,
    ColumnListBlock,
    TableBlock,
    BulletedListBlock,
    NumberedListBlock,
    ToDoListBlock,
    ChildPageBlock,
    ChildDatabaseBlock,
    EquationBlock,
    CodeBlock,
    DividerBlock,
    BreadcrumbBlock,
    TableOfContentsBlock,
    LinkToPageBlock,
    EmbedBlock,
    BookmarkBlock,
    ImageBlock,
    VideoBlock,
    PdfBlock,
    FileBlock,
    AudioBlock,
    LinkPreviewBlock,
)

_NESTED_ONLY_MODELS = (
    BulletedListItemBlock,
    NumberedListItemBlock,
    ToDoListItemBlock,
    ColumnBlock,
    TableRowBlock,
)

TopLevelBlock = Annotated[Union[_TOP_LEVEL_MODELS], Field(discriminator="type")]
"""Any block that may appear directly in a document or a generic container."""

AnyBlock = Annotated[
    Union[_TOP_LEVEL_MODELS + _NESTED_ONLY_MODELS], Field(discriminator="type"),
]
"""Any block at all, including kinds that only live under a restricted parent."""

BLOCK_MODELS: dict[BlockType, type[_Block]] = {
    BlockType.PARAGRAPH: ParagraphBlock,
    BlockType.HEADING_1: Heading1Block,
    BlockType.HEADING_2: Heading2Block,
    BlockType.HEADING_3: Heading3Block,
    BlockType.BULLETED_LIST_ITEM: BulletedListItemBlock,
    BlockType.NUMBERED_LIST_ITEM: NumberedListItemBlock,
    BlockType.TO_DO_LIST_ITEM: ToDoListItemBlock,
    BlockType.QUOTE: QuoteBlock,
    BlockType.TOGGLE: ToggleBlock,
    BlockType.TEMPLATE: TemplateBlock,
    BlockType.SYNCED_BLOCK: SyncedBlock,
    BlockType.CHILD_PAGE: ChildPageBlock,
    BlockType.CHILD_DATABASE: ChildDatabaseBlock,
    BlockType.EQUATION: EquationBlock,
    BlockType.CODE: CodeBlock,
    BlockType.CALLOUT: CalloutBlock,
    BlockType.DIVIDER: DividerBlock,
    BlockType.BREADCRUMB: BreadcrumbBlock,
    BlockType.TABLE_OF_CONTENTS: TableOfContentsBlock,
    BlockType.COLUMN_LIST: ColumnListBlock,
    BlockType.COLUMN: ColumnBlock,
    BlockType.LINK_TO_PAGE: LinkToPageBlock,
    BlockType.TABLE: TableBlock,
    BlockType.TABLE_ROW: TableRowBlock,
    BlockType.EMBED: EmbedBlock,
    BlockType.BOOKMARK: BookmarkBlock,
    BlockType.IMAGE: ImageBlock,
    BlockType.VIDEO: VideoBlock,
    BlockType.PDF: PdfBlock,
    BlockType.FILE: FileBlock,
    BlockType.AUDIO: AudioBlock,
    BlockType.LINK_PREVIEW: LinkPreviewBlock,
    BlockType.BULLETED_LIST: BulletedListBlock,
    BlockType.NUMBERED_LIST: NumberedListBlock,
    BlockType.TO_DO_LIST: ToDoListBlock,
}

CONTAINER_BLOCK_TYPES: frozenset[BlockType] = frozenset({
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
    BlockType.SYNCED_BLOCK,
    BlockType.CALLOUT,
    BlockType.COLUMN_LIST,
    BlockType.COLUMN,
    BlockType.TABLE,
    BlockType.BULLETED_LIST,
    BlockType.NUMBERED_LIST,
    BlockType.TO_DO_LIST,
})
"""Kinds whose ``children`` is a list."""

LIST_AGGREGATES: dict[BlockType, BlockType] = {
    BlockType.BULLETED_LIST_ITEM: BlockType.BULLETED_LIST,
    BlockType.NUMBERED_LIST_ITEM: BlockType.NUMBERED_LIST,
    BlockType.TO_DO_LIST_ITEM: BlockType.TO_DO_LIST,
}
"""List item kind -> the virtual list kind that groups it."""

AGGREGATE_BLOCK_TYPES: frozenset[BlockType] = frozenset(LIST_AGGREGATES.values())


def is_aggregate_block(block: BaseModel) -> bool:
    """True for the three virtual list kinds."""
    return getattr(block, "type", None) in AGGREGATE_BLOCK_TYPES


for _model in BLOCK_MODELS.values():
    _model.model_rebuild()
