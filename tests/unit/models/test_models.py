"""Tests for the canonical data model: block unions, refs and ids."""

from __future__ import annotations

import pytest
from pydantic import TypeAdapter, ValidationError

from notioncache.models import (
    AGGREGATE_BLOCK_TYPES,
    BLOCK_MODELS,
    CONTAINER_BLOCK_TYPES,
    AnyBlock,
    BlockType,
    ById,
    BySlug,
    TopLevelBlock,
    canonical_id,
    is_aggregate_block,
    ref,
)
from notioncache.models.blocks import (
    BulletedListBlock,
    BulletedListItemBlock,
    ColumnListBlock,
    DividerBlock,
    ParagraphBlock,
    TextContent,
)

ANY_BLOCK = TypeAdapter(AnyBlock)
TOP_LEVEL = TypeAdapter(TopLevelBlock)


def paragraph(block_id: str = "p", text: str = "hi") -> dict:
    return {
        "id": block_id,
        "type": "paragraph",
        "content": {"rich_text": [{"text": text}], "color": None},
        "children": [],
    }


class TestBlockUnion:
    def test_validates_by_type_tag(self):
        block = TOP_LEVEL.validate_python(paragraph())
        assert isinstance(block, ParagraphBlock)
        assert block.content.rich_text[0].text == "hi"

    def test_nested_children_are_typed(self):
        data = paragraph("outer")
        data["children"] = [paragraph("inner"), {"id": "d", "type": "divider"}]
        block = TOP_LEVEL.validate_python(data)
        assert [type(child) for child in block.children] == [ParagraphBlock, DividerBlock]

    def test_leaf_rejects_children(self):
        with pytest.raises(ValidationError):
            TOP_LEVEL.validate_python({"id": "d", "type": "divider", "children": [paragraph()]})

    def test_unknown_type_rejected(self):
        with pytest.raises(ValidationError):
            TOP_LEVEL.validate_python({"id": "x", "type": "unsupported"})

    def test_list_items_only_nest(self):
        item = {"id": "i", "type": "bulletedListItem", "content": {"rich_text": []}, "children": []}
        with pytest.raises(ValidationError):
            TOP_LEVEL.validate_python(item)
        assert isinstance(ANY_BLOCK.validate_python(item), BulletedListItemBlock)

    def test_virtual_list_holds_only_its_own_items(self):
        numbered = {"id": "n", "type": "numberedListItem", "content": {"rich_text": []}, "children": []}
        with pytest.raises(ValidationError):
            TOP_LEVEL.validate_python({"id": "virtual-n", "type": "bulletedList", "children": [numbered]})

    def test_column_list_holds_only_columns(self):
        with pytest.raises(ValidationError):
            ColumnListBlock(id="cl", children=[paragraph()])
        block = ColumnListBlock(id="cl", children=[{"id": "c", "type": "column", "children": [paragraph()]}])
        assert block.children[0].children[0].type == BlockType.PARAGRAPH

    def test_round_trips_through_json(self):
        data = paragraph("outer")
        data["children"] = [paragraph("inner")]
        block = TOP_LEVEL.validate_python(data)
        assert TOP_LEVEL.validate_json(TOP_LEVEL.dump_json(block)) == block


class TestBlockTables:
    def test_every_block_type_has_a_model(self):
        assert set(BLOCK_MODELS) == set(BlockType)

    def test_aggregates_are_containers(self):
        assert AGGREGATE_BLOCK_TYPES <= CONTAINER_BLOCK_TYPES

    def test_container_models_default_to_empty_children(self):
        for block_type in CONTAINER_BLOCK_TYPES:
            assert BLOCK_MODELS[block_type].model_fields["children"].is_required() is False

    def test_is_aggregate_block(self):
        assert is_aggregate_block(BulletedListBlock(id="virtual-1"))
        assert not is_aggregate_block(ParagraphBlock(id="p", content=TextContent()))


class TestRef:
    def test_dashless_id_becomes_by_id(self):
        assert ref("5c6a28216bb14a7eb6e1c50111515c3d") == ById(id="5c6a2821-6bb1-4a7e-b6e1-c50111515c3d")

    def test_dashed_upper_case_id_is_canonicalised(self):
        assert ref("5C6A2821-6BB1-4A7E-B6E1-C50111515C3D") == ById(id="5c6a2821-6bb1-4a7e-b6e1-c50111515c3d")

    def test_anything_else_is_a_slug(self):
        assert ref("getting-started") == BySlug(slug="getting-started")

    def test_refs_pass_through(self):
        by_slug = BySlug(slug="x")
        assert ref(by_slug) is by_slug

    def test_canonical_id_format(self):
        assert canonical_id("ABCDEF0123456789abcdef0123456789") == "abcdef01-2345-6789-abcd-ef0123456789"

    def test_canonical_id_leaves_non_ids_alone(self):
        assert canonical_id("not-an-id") == "not-an-id"
