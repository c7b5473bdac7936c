"""Project cached documents into the public read shape.

The public shape hides cache internals: block ids are removed at every
depth, and properties become a mapping from camel-cased display name to
value.  Both transforms are pure and return JSON-ready data.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel

from notioncache.models.objects import Document
from notioncache.utils.case import camel_case


def strip_block_ids(blocks: Sequence[BaseModel]) -> list[dict[str, Any]]:
    """Dump *blocks* to dicts without ``id``, recursing through children.

    Children order and count are preserved; a non-container block keeps
    ``children: None``.
    """
    stripped: list[dict[str, Any]] = []
    for block in blocks:
        data = block.model_dump(mode="json", exclude={"id", "children"})
        children = getattr(block, "children", None)
        data["children"] = None if children is None else strip_block_ids(children)
        stripped.append(data)
    return stripped


def project_properties(document: Document) -> dict[str, Any]:
    """Map each property's camel-cased name to its JSON value."""
    return {
        camel_case(prop.name): prop.model_dump(mode="json")["value"]
        for prop in document.properties
    }


def project_document(document: Document) -> dict[str, Any]:
    """Public shape of a cached document."""
    return {
        "id": document.id,
        "slug": document.slug,
        "name": document.name,
        "cover": document.cover.model_dump(mode="json") if document.cover else None,
        "icon": document.icon.model_dump(mode="json") if document.icon else None,
        "properties": project_properties(document),
        "blocks": strip_block_ids(document.blocks),
    }
