"""Notion page properties and database schemas to the canonical model.

Each remote property kind has one mapper method returning the property
model for that kind.  ``$``-prefixed directive columns are skipped before
any mapping happens.  An unknown kind is dropped with a warning; the rest
of the page still maps.
"""

from __future__ import annotations

from collections.abc import Awaitable
from collections.abc import Callable as _Callable
from typing import Any

from pydantic import BaseModel

from notioncache.converter.rich_text import map_rich_text
from notioncache.models import properties as p
from notioncache.models.common import NotionDate, UniqueId, UserReference, VerificationStatus
from notioncache.models.properties import PropertySchemaEntry, PropertyType
from notioncache.observability import get_logger
from notioncache.utils.case import camel_case

from .files import FileResolver
from .slugs import is_directive

log = get_logger("notioncache.connector")

# Remote property kind -> canonical kind for database schemas.  A formula
# column is reported as a string formula: the schema does not say what a
# formula computes.
SCHEMA_PROPERTY_TYPES: dict[str, PropertyType] = {
    "number": PropertyType.NUMBER,
    "url": PropertyType.URL,
    "select": PropertyType.SELECT,
    "multi_select": PropertyType.MULTI_SELECT,
    "status": PropertyType.STATUS,
    "date": PropertyType.DATE,
    "email": PropertyType.EMAIL,
    "phone_number": PropertyType.PHONE_NUMBER,
    "checkbox": PropertyType.CHECKBOX,
    "files": PropertyType.FILES,
    "created_by": PropertyType.CREATED_BY,
    "created_time": PropertyType.CREATED_TIME,
    "last_edited_by": PropertyType.LAST_EDITED_BY,
    "last_edited_time": PropertyType.LAST_EDITED_TIME,
    "formula": PropertyType.STRING_FORMULA,
    "button": PropertyType.BUTTON,
    "unique_id": PropertyType.UNIQUE_ID,
    "verification": PropertyType.VERIFICATION,
    "title": PropertyType.TITLE,
    "rich_text": PropertyType.RICH_TEXT,
    "people": PropertyType.PEOPLE,
    "relation": PropertyType.RELATION,
    "rollup": PropertyType.ROLLUP,
}

_OPTION_KINDS: frozenset[str] = frozenset({"select", "multi_select", "status"})


def map_date(raw: dict[str, Any] | None) -> NotionDate | None:
    if not raw:
        return None
    return NotionDate(start=raw["start"], end=raw.get("end"), time_zone=raw.get("time_zone"))


def _option_name(raw: dict[str, Any] | None) -> str | None:
    return raw.get("name") if raw else None


def map_schema(raw_properties: dict[str, Any]) -> list[PropertySchemaEntry]:
    """Build a database schema from ``database["properties"]``."""
    schema: list[PropertySchemaEntry] = []
    for name, raw in raw_properties.items():
        if is_directive(name):
            continue
        kind = raw.get("type", "")
        prop_type = SCHEMA_PROPERTY_TYPES.get(kind)
        if prop_type is None:
            log.warning(
                "Dropping unsupported schema property",
                extra={"extra_fields": {"op": "map_schema", "property": name, "property_type": kind}},
            )
            continue
        allowed_values = None
        if kind in _OPTION_KINDS:
            allowed_values = [option["name"] for option in raw.get(kind, {}).get("options", [])]
        schema.append(PropertySchemaEntry(
            notion_id=raw["id"],
            display_name=name,
            generated_name=camel_case(name),
            type=prop_type,
            allowed_values=allowed_values,
        ))
    return schema


class PropertyMapper:
    """Map the ``properties`` of a Notion page.

    Parameters
    ----------
    files:
        Resolver for ``files`` property values.
    """

    def __init__(self, files: FileResolver) -> None:
        self._files = files

    async def map_properties(self, raw_properties: dict[str, Any]) -> list[BaseModel]:
        """Map every non-directive property, in remote order."""
        mapped: list[BaseModel] = []
        for name, raw in raw_properties.items():
            if is_directive(name):
                continue
            prop = await self.map_property(name, raw)
            if prop is not None:
                mapped.append(prop)
        return mapped

    async def map_property(self, name: str, raw: dict[str, Any]) -> BaseModel | None:
        kind = raw.get("type", "")
        mapper = _PROPERTY_MAPPERS.get(kind)
        if mapper is None:
            log.warning(
                "Dropping unsupported property",
                extra={"extra_fields": {"op": "map_property", "property": name, "property_type": kind}},
            )
            return None
        return await mapper(self, name, raw)

    # ------------------------------------------------------------------
    # Per-kind mappers
    # ------------------------------------------------------------------

    async def _number(self, name: str, raw: dict) -> BaseModel:
        return p.NumberProperty(notion_id=raw["id"], name=name, value=raw.get("number"))

    async def _url(self, name: str, raw: dict) -> BaseModel:
        return p.UrlProperty(notion_id=raw["id"], name=name, value=raw.get("url"))

    async def _select(self, name: str, raw: dict) -> BaseModel:
        return p.SelectProperty(notion_id=raw["id"], name=name, value=_option_name(raw.get("select")))

    async def _multi_select(self, name: str, raw: dict) -> BaseModel:
        return p.MultiSelectProperty(
            notion_id=raw["id"],
            name=name,
            value=[option["name"] for option in raw.get("multi_select") or []],
        )

    async def _status(self, name: str, raw: dict) -> BaseModel:
        return p.StatusProperty(notion_id=raw["id"], name=name, value=_option_name(raw.get("status")))

    async def _date(self, name: str, raw: dict) -> BaseModel:
        return p.DateProperty(notion_id=raw["id"], name=name, value=map_date(raw.get("date")))

    async def _email(self, name: str, raw: dict) -> BaseModel:
        return p.EmailProperty(notion_id=raw["id"], name=name, value=raw.get("email"))

    async def _phone_number(self, name: str, raw: dict) -> BaseModel:
        return p.PhoneNumberProperty(notion_id=raw["id"], name=name, value=raw.get("phone_number"))

    async def _checkbox(self, name: str, raw: dict) -> BaseModel:
        return p.CheckboxProperty(notion_id=raw["id"], name=name, value=bool(raw.get("checkbox")))

    async def _files(self, name: str, raw: dict) -> BaseModel:
        files = await self._files.notion_files(raw.get("files") or [])
        return p.FilesProperty(notion_id=raw["id"], name=name, value=files)

    async def _created_by(self, name: str, raw: dict) -> BaseModel:
        return p.CreatedByProperty(notion_id=raw["id"], name=name, value=raw["created_by"]["id"])

    async def _created_time(self, name: str, raw: dict) -> BaseModel:
        return p.CreatedTimeProperty(notion_id=raw["id"], name=name, value=raw["created_time"])

    async def _last_edited_by(self, name: str, raw: dict) -> BaseModel:
        return p.LastEditedByProperty(notion_id=raw["id"], name=name, value=raw["last_edited_by"]["id"])

    async def _last_edited_time(self, name: str, raw: dict) -> BaseModel:
        return p.LastEditedTimeProperty(notion_id=raw["id"], name=name, value=raw["last_edited_time"])

    async def _formula(self, name: str, raw: dict) -> BaseModel:
        formula = raw.get("formula") or {}
        kind = formula.get("type")
        if kind == "number":
            return p.NumberFormulaProperty(notion_id=raw["id"], name=name, value=formula.get("number"))
        if kind == "boolean":
            return p.BooleanFormulaProperty(notion_id=raw["id"], name=name, value=formula.get("boolean"))
        if kind == "date":
            return p.DateFormulaProperty(notion_id=raw["id"], name=name, value=map_date(formula.get("date")))
        return p.StringFormulaProperty(notion_id=raw["id"], name=name, value=formula.get("string"))

    async def _button(self, name: str, raw: dict) -> BaseModel:
        return p.ButtonProperty(notion_id=raw["id"], name=name)

    async def _unique_id(self, name: str, raw: dict) -> BaseModel:
        unique_id = raw.get("unique_id") or {}
        return p.UniqueIdProperty(
            notion_id=raw["id"],
            name=name,
            value=UniqueId(prefix=unique_id.get("prefix"), number=unique_id.get("number")),
        )

    async def _verification(self, name: str, raw: dict) -> BaseModel:
        state = (raw.get("verification") or {}).get("state")
        try:
            status = VerificationStatus(state)
        except ValueError:
            status = VerificationStatus.UNVERIFIED
        return p.VerificationProperty(notion_id=raw["id"], name=name, value=status)

    async def _title(self, name: str, raw: dict) -> BaseModel:
        return p.TitleProperty(notion_id=raw["id"], name=name, value=map_rich_text(raw.get("title")))

    async def _rich_text(self, name: str, raw: dict) -> BaseModel:
        return p.RichTextProperty(notion_id=raw["id"], name=name, value=map_rich_text(raw.get("rich_text")))

    async def _people(self, name: str, raw: dict) -> BaseModel:
        # Denormalised against cached users when the document is cached.
        return p.PeopleProperty(
            notion_id=raw["id"],
            name=name,
            value=[UserReference(notion_id=person["id"]) for person in raw.get("people") or []],
        )

    async def _relation(self, name: str, raw: dict) -> BaseModel:
        return p.RelationProperty(
            notion_id=raw["id"],
            name=name,
            value=[related["id"] for related in raw.get("relation") or []],
        )

    async def _rollup(self, name: str, raw: dict) -> BaseModel:
        return p.RollupProperty(notion_id=raw["id"], name=name)


# ------------------------------------------------------------------
# Property mapper dispatch table
# ------------------------------------------------------------------

_PropertyMapperFn = _Callable[["PropertyMapper", str, dict], Awaitable[BaseModel]]

_PROPERTY_MAPPERS: dict[str, _PropertyMapperFn] = {
    "number": PropertyMapper._number,
    "url": PropertyMapper._url,
    "select": PropertyMapper._select,
    "multi_select": PropertyMapper._multi_select,
    "status": PropertyMapper._status,
    "date": PropertyMapper._date,
    "email": PropertyMapper._email,
    "phone_number": PropertyMapper._phone_number,
    "checkbox": PropertyMapper._checkbox,
    "files": PropertyMapper._files,
    "created_by": PropertyMapper._created_by,
    "created_time": PropertyMapper._created_time,
    "last_edited_by": PropertyMapper._last_edited_by,
    "last_edited_time": PropertyMapper._last_edited_time,
    "formula": PropertyMapper._formula,
    "button": PropertyMapper._button,
    "unique_id": PropertyMapper._unique_id,
    "verification": PropertyMapper._verification,
    "title": PropertyMapper._title,
    "rich_text": PropertyMapper._rich_text,
    "people": PropertyMapper._people,
    "relation": PropertyMapper._relation,
    "rollup": PropertyMapper._rollup,
}
