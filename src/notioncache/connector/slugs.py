"""Document slugs and the special ``$``-prefixed properties.

A database column whose name starts with ``$`` is a directive for this
system, not document data: it is never emitted as a property.  The only
directive read today is ``$slug``, a URL column whose value overrides the
derived slug.

A derived slug is the compressed page id, a hyphen, and the kebab-cased
title: ``kvb3a2mq-getting-started``.  The compressed id keeps slugs unique
when two pages share a title.
"""

from __future__ import annotations

from typing import Any

from notioncache.utils.case import kebab_case

DIRECTIVE_PREFIX = "$"
SLUG_PROPERTY = "$slug"

_BASE32_ALPHABET = "ABCDEFGHIJKLMNOPQRSTUVWXYZ234567"


def compress_object_id(notion_id: str) -> str:
    """Shorten a Notion id to eight lower-case base32 characters.

    Notion ids are UUIDs whose hex digits 4-8, 15-18 and 21-24 vary the
    most between pages created in one workspace.  Those ten digits (40
    bits) are re-encoded five bits per symbol.  The result is stable and
    practically unique, but cannot be turned back into the id.

    >>> compress_object_id("5c6a2821-6bb1-4a7e-b6e1-c50111515c3d")
    'faq6wzib'
    """
    hex_digits = notion_id.replace("-", "")
    selected = hex_digits[4:8] + hex_digits[15:18] + hex_digits[21:24]
    bits = "".join(format(int(digit, 16), "04b") for digit in selected)

    symbols = []
    for start in range(0, len(bits), 5):
        chunk = bits[start:start + 5].ljust(5, "0")
        symbols.append(_BASE32_ALPHABET[int(chunk, 2)])
    return "".join(symbols).lower()


def is_directive(property_name: str) -> bool:
    return property_name.startswith(DIRECTIVE_PREFIX)


def title_of(properties: dict[str, Any]) -> str:
    """Plain text of the ``title`` property, or ``""`` if there is none."""
    for prop in properties.values():
        if prop.get("type") == "title":
            return "".join(item.get("plain_text", "") for item in prop.get("title") or [])
    return ""


def slug_override(properties: dict[str, Any]) -> str | None:
    """Value of a URL-typed ``$slug`` property, if set."""
    prop = properties.get(SLUG_PROPERTY)
    if prop and prop.get("type") == "url":
        return prop.get("url") or None
    return None


def document_slug(notion_id: str, properties: dict[str, Any]) -> str:
    """Slug for a page: the ``$slug`` override, else compressed id plus title."""
    override = slug_override(properties)
    if override is not None:
        return override
    title = kebab_case(title_of(properties))
    compressed = compress_object_id(notion_id)
    return f"{compressed}-{title}" if title else compressed


def database_slug(title: str) -> str:
    return kebab_case(title)
