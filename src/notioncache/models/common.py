"""Value types shared by blocks, properties and entities.

Rich text, colours, files, icons and dates.  These carry no behaviour;
they exist so every layer above agrees on one validated shape.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

# ---------------------------------------------------------------------------
# Enums
# ---------------------------------------------------------------------------

class Color(str, Enum):
    """Text and background colours.  Notion's ``"default"`` maps to ``None``."""

    GRAY = "gray"
    BROWN = "brown"
    ORANGE = "orange"
    YELLOW = "yellow"
    GREEN = "green"
    BLUE = "blue"
    PURPLE = "purple"
    PINK = "pink"
    RED = "red"
    GRAY_BACKGROUND = "gray_background"
    BROWN_BACKGROUND = "brown_background"
    ORANGE_BACKGROUND = "orange_background"
    YELLOW_BACKGROUND = "yellow_background"
    GREEN_BACKGROUND = "green_background"
    BLUE_BACKGROUND = "blue_background"
    PURPLE_BACKGROUND = "purple_background"
    PINK_BACKGROUND = "pink_background"
    RED_BACKGROUND = "red_background"


class RichTextItemType(str, Enum):
    TEXT = "text"
    MENTION = "mention"
    EQUATION = "equation"


class ObjectType(str, Enum):
    """Kinds of Notion object that a block can point at."""

    BLOCK = "block"
    PAGE = "page"
    DATABASE = "database"
    WORKSPACE = "workspace"
    COMMENT = "comment"


class VerificationStatus(str, Enum):
    UNVERIFIED = "unverified"
    VERIFIED = "verified"
    EXPIRED = "expired"


# ---------------------------------------------------------------------------
# Rich text
# ---------------------------------------------------------------------------

class Annotations(BaseModel):
    bold: bool = False
    italic: bool = False
    strikethrough: bool = False
    underline: bool = False
    code: bool = False
    color: Color | None = None


class RichTextItem(BaseModel):
    """One span of rich text.

    ``text`` is the literal content of a text span, the expression of an
    equation span, and the rendered plain text of a mention.
    """

    type: RichTextItemType = RichTextItemType.TEXT
    text: str
    annotations: Annotations = Field(default_factory=Annotations)
    href: str | None = None


RichText = list[RichTextItem]


# ---------------------------------------------------------------------------
# Files & icons
# ---------------------------------------------------------------------------

class File(BaseModel):
    """A file reference.  ``url`` is always the mirrored, servable URL."""

    url: str
    name: str | None = None


class EmojiIcon(BaseModel):
    type: Literal["emoji"] = "emoji"
    emoji: str


class ImageIcon(BaseModel):
    type: Literal["image"] = "image"
    file: File


Icon = Annotated[Union[EmojiIcon, ImageIcon], Field(discriminator="type")]


# ---------------------------------------------------------------------------
# Scalars
# ---------------------------------------------------------------------------

class NotionDate(BaseModel):
    start: str
    end: str | None = None
    time_zone: str | None = None


class UniqueId(BaseModel):
    prefix: str | None = None
    number: int | None = None


class UserReference(BaseModel):
    """A person referenced from a ``people`` property.

    Freshly fetched references carry only ``notion_id``.  When the owning
    document is cached, the name, avatar and bot flag of the matching
    cached user are copied in; they are a snapshot and are not updated
    when the user changes later.
    """

    notion_id: str
    name: str | None = None
    avatar: File | None = None
    is_bot: bool | None = None
