"""Tests for rendering canonical block trees to plain text."""

from notioncache.converter.plain_text import get_plain_text
from notioncache.models.common import File, RichTextItem
from notioncache.models.blocks import (
    BookmarkBlock,
    BulletedListBlock,
    BulletedListItemBlock,
    ChildPageBlock,
    ChildTitleContent,
    CodeBlock,
    CodeContent,
    ColumnBlock,
    ColumnListBlock,
    DividerBlock,
    EquationBlock,
    EquationContent,
    ImageBlock,
    MediaContent,
    ParagraphBlock,
    TableBlock,
    TableContent,
    TableRowBlock,
    TableRowContent,
    TextContent,
    UrlCaptionContent,
)


def rt(text):
    return [RichTextItem(text=text)]


def para(block_id, text, children=()):
    return ParagraphBlock(id=block_id, content=TextContent(rich_text=rt(text)), children=list(children))


class TestTextBlocks:
    def test_single_paragraph(self):
        assert get_plain_text([para("a", "Hello")]) == "Hello"

    def test_children_follow_parent_text(self):
        tree = para("a", "Parent", [para("b", "Child"), para("c", "Sibling")])
        assert get_plain_text([tree]) == "Parent\nChild\nSibling"

    def test_empty_entries_skipped(self):
        blocks = [para("a", "one"), para("b", ""), DividerBlock(id="d"), para("c", "two")]
        assert get_plain_text(blocks) == "one\ntwo"

    def test_empty_document(self):
        assert get_plain_text([]) == ""


class TestLayoutWrappers:
    def test_virtual_list_contributes_its_items(self):
        items = [
            BulletedListItemBlock(id="i1", content=TextContent(rich_text=rt("first"))),
            BulletedListItemBlock(id="i2", content=TextContent(rich_text=rt("second"))),
        ]
        blocks = [BulletedListBlock(id="virtual-i1", children=items)]
        assert get_plain_text(blocks) == "first\nsecond"

    def test_columns_flatten(self):
        columns = ColumnListBlock(id="cl", children=[
            ColumnBlock(id="c1", children=[para("a", "left")]),
            ColumnBlock(id="c2", children=[para("b", "right")]),
        ])
        assert get_plain_text([columns]) == "left\nright"

    def test_table_rows_join_cells_with_spaces(self):
        table = TableBlock(
            id="t",
            content=TableContent(table_width=2),
            children=[
                TableRowBlock(id="r1", content=TableRowContent(cells=[rt("a"), rt("b")])),
                TableRowBlock(id="r2", content=TableRowContent(cells=[rt("c"), rt("d")])),
            ],
        )
        assert get_plain_text([table]) == "a b\nc d"


class TestLeafBlocks:
    def test_code_and_equation(self):
        blocks = [
            CodeBlock(id="c", content=CodeContent(rich_text=rt("print(1)"), language="python")),
            EquationBlock(id="e", content=EquationContent(expression="a^2 + b^2")),
        ]
        assert get_plain_text(blocks) == "print(1)\na^2 + b^2"

    def test_bookmark_with_and_without_caption(self):
        with_caption = BookmarkBlock(
            id="b1", content=UrlCaptionContent(url="https://example.com", caption=rt("Example")),
        )
        bare = BookmarkBlock(id="b2", content=UrlCaptionContent(url="https://example.org"))
        assert get_plain_text([with_caption, bare]) == "https://example.com\nExample\nhttps://example.org"

    def test_media_contributes_caption_only(self):
        image = ImageBlock(id="i", content=MediaContent(file=File(url="/files/x.png"), caption=rt("A cat")))
        assert get_plain_text([image]) == "A cat"

    def test_child_page_contributes_nothing(self):
        blocks = [ChildPageBlock(id="cp", content=ChildTitleContent(title="Sub page")), para("a", "text")]
        assert get_plain_text(blocks) == "text"
