"""Typed document properties and database schema entries.

Each property kind is a model whose ``value`` type is fixed by its
``type`` literal; :data:`DocumentProperty` is the discriminated union.
Formula properties take their kind from the formula's computed type, so a
formula that yields a date is a :class:`DateFormulaProperty`.
"""

from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from .common import File, NotionDate, RichText, UniqueId, UserReference, VerificationStatus


class PropertyType(str, Enum):
    NUMBER = "number"
    URL = "url"
    SELECT = "select"
    MULTI_SELECT = "multiSelect"
    STATUS = "status"
    DATE = "date"
    EMAIL = "email"
    PHONE_NUMBER = "phoneNumber"
    CHECKBOX = "checkbox"
    FILES = "files"
    CREATED_BY = "createdBy"
    CREATED_TIME = "createdTime"
    LAST_EDITED_BY = "lastEditedBy"
    LAST_EDITED_TIME = "lastEditedTime"
    STRING_FORMULA = "stringFormula"
    DATE_FORMULA = "dateFormula"
    NUMBER_FORMULA = "numberFormula"
    BOOLEAN_FORMULA = "booleanFormula"
    BUTTON = "button"
    UNIQUE_ID = "uniqueId"
    VERIFICATION = "verification"
    TITLE = "title"
    RICH_TEXT = "richText"
    PEOPLE = "people"
    RELATION = "relation"
    ROLLUP = "rollup"


class _Property(BaseModel):
    notion_id: str
    name: str


# ── Scalars ──────────────────────────────────────────────────────────

class NumberProperty(_Property):
    type: Literal["number"] = "number"
    value: float | None = None


class UrlProperty(_Property):
    type: Literal["url"] = "url"
    value: str | None = None


class SelectProperty(_Property):
    type: Literal["select"] = "select"
    value: str | None = None


class MultiSelectProperty(_Property):
    type: Literal["multiSelect"] = "multiSelect"
    value: list[str] = Field(default_factory=list)


class StatusProperty(_Property):
    type: Literal["status"] = "status"
    value: str | None = None


class DateProperty(_Property):
    type: Literal["date"] = "date"
    value: NotionDate | None = None


class EmailProperty(_Property):
    type: Literal["email"] = "email"
    value: str | None = None


class PhoneNumberProperty(_Property):
    type: Literal["phoneNumber"] = "phoneNumber"
    value: str | None = None


class CheckboxProperty(_Property):
    type: Literal["checkbox"] = "checkbox"
    value: bool = False


class FilesProperty(_Property):
    type: Literal["files"] = "files"
    value: list[File] = Field(default_factory=list)


# ── Audit ────────────────────────────────────────────────────────────

class CreatedByProperty(_Property):
    type: Literal["createdBy"] = "createdBy"
    value: str


class CreatedTimeProperty(_Property):
    type: Literal["createdTime"] = "createdTime"
    value: str


class LastEditedByProperty(_Property):
    type: Literal["lastEditedBy"] = "lastEditedBy"
    value: str


class LastEditedTimeProperty(_Property):
    type: Literal["lastEditedTime"] = "lastEditedTime"
    value: str


# ── Formulas ─────────────────────────────────────────────────────────

class StringFormulaProperty(_Property):
    type: Literal["stringFormula"] = "stringFormula"
    value: str | None = None


class DateFormulaProperty(_Property):
    type: Literal["dateFormula"] = "dateFormula"
    value: NotionDate | None = None


class NumberFormulaProperty(_Property):
    type: Literal["numberFormula"] = "numberFormula"
    value: float | None = None


class BooleanFormulaProperty(_Property):
    type: Literal["booleanFormula"] = "booleanFormula"
    value: bool | None = None


# ── Other ────────────────────────────────────────────────────────────

class ButtonProperty(_Property):
    type: Literal["button"] = "button"
    value: None = None


class UniqueIdProperty(_Property):
    type: Literal["uniqueId"] = "uniqueId"
    value: UniqueId = Field(default_factory=UniqueId)


class VerificationProperty(_Property):
    type: Literal["verification"] = "verification"
    value: VerificationStatus = VerificationStatus.UNVERIFIED


class TitleProperty(_Property):
    type: Literal["title"] = "title"
    value: RichText = Field(default_factory=list)


class RichTextProperty(_Property):
    type: Literal["richText"] = "richText"
    value: RichText = Field(default_factory=list)


class PeopleProperty(_Property):
    type: Literal["people"] = "people"
    value: list[UserReference] = Field(default_factory=list)


class RelationProperty(_Property):
    type: Literal["relation"] = "relation"
    value: list[str] = Field(default_factory=list)


class RollupProperty(_Property):
    type: Literal["rollup"] = "rollup"
    value: None = None


DocumentProperty = Annotated[
    Union[
        NumberProperty,
        UrlProperty,
        SelectProperty,
        MultiSelectProperty,
        StatusProperty,
        DateProperty,
        EmailProperty,
        PhoneNumberProperty,
        CheckboxProperty,
        FilesProperty,
        CreatedByProperty,
        CreatedTimeProperty,
        LastEditedByProperty,
        LastEditedTimeProperty,
        StringFormulaProperty,
        DateFormulaProperty,
        NumberFormulaProperty,
        BooleanFormulaProperty,
        ButtonProperty,
        UniqueIdProperty,
        VerificationProperty,
        TitleProperty,
        RichTextProperty,
        PeopleProperty,
        RelationProperty,
        RollupProperty,
    ],
    Field(discriminator="type"),
]


class PropertySchemaEntry(BaseModel):
    """One column of a database schema.

    ``generated_name`` is the camel-cased display name used as the key of
    the property in client projections.  ``allowed_values`` lists the
    option names of select, multi-select and status columns.  A formula
    column is reported as ``stringFormula``: the schema does not reveal
    what a formula computes.
    """

    notion_id: str
    display_name: str
    generated_name: str
    type: PropertyType
    allowed_values: list[str] | None = None
