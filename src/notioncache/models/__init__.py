"""Canonical data model for notioncache.

* :mod:`.common` -- rich text, colours, files, icons, dates.
* :mod:`.blocks` -- the block tree and its discriminated unions.
* :mod:`.properties` -- typed document properties and schema entries.
* :mod:`.objects` -- databases, documents, users, mirrored files.
"""

from __future__ import annotations

from .blocks import (
    AGGREGATE_BLOCK_TYPES,
    BLOCK_MODELS,
    CONTAINER_BLOCK_TYPES,
    LIST_AGGREGATES,
    AnyBlock,
    BlockType,
    TopLevelBlock,
    is_aggregate_block,
)
from .common import (
    Annotations,
    Color,
    EmojiIcon,
    File,
    Icon,
    ImageIcon,
    NotionDate,
    ObjectType,
    RichText,
    RichTextItem,
    RichTextItemType,
    UniqueId,
    UserReference,
    VerificationStatus,
)
from .objects import (
    ById,
    BySlug,
    CachedFile,
    CachedFileData,
    Database,
    Document,
    ObjectRef,
    RawDatabase,
    RawDocument,
    RawDocumentContent,
    RawUser,
    User,
    canonical_id,
    ref,
)
from .properties import DocumentProperty, PropertySchemaEntry, PropertyType

__all__ = [
    "AGGREGATE_BLOCK_TYPES",
    "BLOCK_MODELS",
    "CONTAINER_BLOCK_TYPES",
    "LIST_AGGREGATES",
    "Annotations",
    "AnyBlock",
    "BlockType",
    "ById",
    "BySlug",
    "CachedFile",
    "CachedFileData",
    "Color",
    "Database",
    "Document",
    "DocumentProperty",
    "EmojiIcon",
    "File",
    "Icon",
    "ImageIcon",
    "NotionDate",
    "ObjectRef",
    "ObjectType",
    "PropertySchemaEntry",
    "PropertyType",
    "RawDatabase",
    "RawDocument",
    "RawDocumentContent",
    "RawUser",
    "RichText",
    "RichTextItem",
    "RichTextItemType",
    "TopLevelBlock",
    "UniqueId",
    "User",
    "UserReference",
    "VerificationStatus",
    "canonical_id",
    "is_aggregate_block",
    "ref",
]
