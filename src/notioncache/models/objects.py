"""Databases, documents, users and mirrored files.

Two families of models live here:

* ``Raw*`` models are what the connector produces from the Notion API.
  They carry no sync bookkeeping.
* :class:`Database`, :class:`Document`, :class:`User` and
  :class:`CachedFile` are what the cache stores and returns, with the
  timestamps that drive staleness.

:func:`ref` normalises a caller-supplied database or document identifier
into :class:`ById` or :class:`BySlug`.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Literal, Union

from pydantic import BaseModel, Field

from .blocks import TopLevelBlock
from .common import File, Icon
from .properties import DocumentProperty, PropertySchemaEntry

# ---------------------------------------------------------------------------
# Connector output
# ---------------------------------------------------------------------------

class RawDatabase(BaseModel):
    notion_id: str
    slug: str
    name: str
    url: str
    cover: File | None = None
    icon: Icon | None = None
    property_schema: list[PropertySchemaEntry] = Field(default_factory=list)
    created_time: str
    last_edited_time: str


class RawDocument(BaseModel):
    notion_id: str
    notion_database_id: str
    slug: str
    name: str
    url: str
    cover: File | None = None
    icon: Icon | None = None
    properties: list[DocumentProperty] = Field(default_factory=list)
    created_time: str
    last_edited_time: str


class RawDocumentContent(BaseModel):
    blocks: list[TopLevelBlock] = Field(default_factory=list)
    plain_text: str = ""


class RawUser(BaseModel):
    notion_id: str
    name: str | None = None
    avatar: File | None = None
    is_bot: bool = False


# ---------------------------------------------------------------------------
# Cached entities
# ---------------------------------------------------------------------------

class Database(BaseModel):
    id: str
    slug: str
    name: str
    notion_url: str
    cover: File | None = None
    icon: Icon | None = None
    property_schema: list[PropertySchemaEntry] = Field(default_factory=list)
    last_synced_at: datetime


class Document(BaseModel):
    """A cached document.

    ``properties_last_synced_at`` and ``blocks_last_synced_at`` move
    independently: the first on every property sync, the second only when
    the block tree is refetched.  ``blocks_last_synced_at`` is ``None``
    until the first content sync.
    """

    id: str
    slug: str
    name: str
    database_id: str
    notion_url: str
    cover: File | None = None
    icon: Icon | None = None
    properties: list[DocumentProperty] = Field(default_factory=list)
    properties_last_synced_at: datetime
    blocks: list[TopLevelBlock] = Field(default_factory=list)
    text: str = ""
    blocks_last_synced_at: datetime | None = None
    notion_created_at: datetime
    notion_updated_at: datetime


class User(BaseModel):
    id: str
    name: str | None = None
    avatar: File | None = None
    is_bot: bool = False
    last_synced_at: datetime


class CachedFileData(BaseModel):
    """What the file store reports after mirroring one remote file."""

    url_key: str
    url: str
    file_type: str
    name: str | None = None
    file_size_in_kb: float


class CachedFile(CachedFileData):
    last_synced_at: datetime


# ---------------------------------------------------------------------------
# Identifiers
# ---------------------------------------------------------------------------

class ById(BaseModel):
    kind: Literal["id"] = "id"
    id: str


class BySlug(BaseModel):
    kind: Literal["slug"] = "slug"
    slug: str


ObjectRef = Union[ById, BySlug]

_NOTION_ID_RE = re.compile(r"^[0-9a-fA-F]{32}$")


def ref(value: str | ById | BySlug) -> ObjectRef:
    """Interpret *value* as an id when it looks like a Notion id, else a slug.

    >>> ref("5c6a28216bb14a7eb6e1c50111515c3d")
    ById(kind='id', id='5c6a2821-6bb1-4a7e-b6e1-c50111515c3d')
    >>> ref("getting-started")
    BySlug(kind='slug', slug='getting-started')
    """
    if isinstance(value, (ById, BySlug)):
        return value
    compact = value.replace("-", "")
    if _NOTION_ID_RE.match(compact):
        return ById(id=canonical_id(compact))
    return BySlug(slug=value)


def canonical_id(notion_id: str) -> str:
    """Format a Notion id in the dashed 8-4-4-4-12 form the API returns.

    Anything that is not a 32-digit hex id is returned unchanged.
    """
    h = notion_id.replace("-", "").lower()
    if not _NOTION_ID_RE.match(h):
        return notion_id
    return f"{h[0:8]}-{h[8:12]}-{h[12:16]}-{h[16:20]}-{h[20:32]}"
