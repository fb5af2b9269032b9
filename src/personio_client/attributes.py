"""Dynamic attribute model used by Personio v1 for configurable entity fields.

Personio returns employees as a bag of attributes, each tagged with a declared
type and carrying a raw JSON value:

    "fix_salary": {"label": "Fix salary", "value": 7042.42,
                   "type": "decimal", "universal_id": "fix_salary"}

Extraction is permissive. Asking for a shape the declared tag does not allow,
or finding a raw value of the wrong JSON shape, yields None instead of an
error. An absent key behaves exactly like a mismatched one.

Type gating:

  integer    requires "integer"               raw number
  float      requires "integer" or "decimal"  raw number
  string     requires "standard"/"multiline"  raw string
  list       requires "list"                  comma separated raw string
  time       requires "date"                  RFC 3339 string or datetime
  map        requires "standard"              object with an "attributes" object
"""

from __future__ import annotations

import math
import re
from datetime import datetime
from enum import StrEnum
from typing import Any

from pydantic import BaseModel, ConfigDict

_RFC3339 = re.compile(
    r"^\d{4}-\d{2}-\d{2}[Tt]\d{2}:\d{2}:\d{2}(\.\d+)?([Zz]|[+-]\d{2}:\d{2})$"
)


class AttributeType(StrEnum):
    """Declared type tags Personio puts on dynamic attributes."""

    INTEGER = "integer"
    DECIMAL = "decimal"
    STANDARD = "standard"
    MULTILINE = "multiline"
    LIST = "list"
    DATE = "date"
    OBJECT = "object"


def _is_number(value: Any) -> bool:
    # bool is an int subclass but never a JSON number
    return isinstance(value, int | float) and not isinstance(value, bool)


def parse_rfc3339(value: str) -> datetime | None:
    """Parse a strict RFC 3339 timestamp, or return None."""
    if not _RFC3339.match(value):
        return None
    normalized = value.upper()
    if normalized.endswith("Z"):
        normalized = normalized[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(normalized)
    except ValueError:
        return None


class Attribute(BaseModel):
    """One dynamically typed attribute. Attribute() is the zero attribute."""

    model_config = ConfigDict(frozen=True)

    label: str = ""
    value: Any = None
    type: str = ""
    universal_id: str | None = None

    def get_int_value(self) -> int | None:
        if (
            self.type == AttributeType.INTEGER
            and _is_number(self.value)
            and math.isfinite(self.value)
        ):
            return int(self.value)
        return None

    def get_float_value(self) -> float | None:
        if self.type in (AttributeType.INTEGER, AttributeType.DECIMAL) and _is_number(
            self.value
        ):
            return float(self.value)
        return None

    def get_string_value(self) -> str | None:
        if self.type in (AttributeType.STANDARD, AttributeType.MULTILINE) and isinstance(
            self.value, str
        ):
            return self.value
        return None

    def get_list_value(self) -> list[str] | None:
        """Split a "list" attribute on commas, dropping empty tokens."""
        if self.type == AttributeType.LIST and isinstance(self.value, str):
            tokens = (token.strip() for token in self.value.split(","))
            return [token for token in tokens if token]
        return None

    def get_time_value(self) -> datetime | None:
        if self.type != AttributeType.DATE:
            return None
        if isinstance(self.value, datetime):
            return self.value
        if isinstance(self.value, str):
            return parse_rfc3339(self.value)
        return None

    def get_map_value(self) -> dict[str, Any]:
        """Return the nested object's "attributes" mapping, or an empty dict."""
        if self.type == AttributeType.STANDARD and isinstance(self.value, dict):
            nested = self.value.get("attributes")
            if isinstance(nested, dict):
                return nested
        return {}


_ZERO_ATTRIBUTE = Attribute()


class AttributeContainer(BaseModel):
    """Any upstream entity whose fields arrive as dynamic attributes."""

    model_config = ConfigDict(frozen=True)

    attributes: dict[str, Attribute] = {}

    def get_attribute(self, key: str) -> Attribute:
        return self.attributes.get(key, _ZERO_ATTRIBUTE)

    def get_int_attribute(self, key: str) -> int | None:
        return self.get_attribute(key).get_int_value()

    def get_float_attribute(self, key: str) -> float | None:
        return self.get_attribute(key).get_float_value()

    def get_string_attribute(self, key: str) -> str | None:
        return self.get_attribute(key).get_string_value()

    def get_list_attribute(self, key: str) -> list[str] | None:
        return self.get_attribute(key).get_list_value()

    def get_time_attribute(self, key: str) -> datetime | None:
        return self.get_attribute(key).get_time_value()

    def get_map_attribute(self, key: str) -> dict[str, Any]:
        return self.get_attribute(key).get_map_value()


__all__ = [
    "Attribute",
    "AttributeContainer",
    "AttributeType",
    "parse_rfc3339",
]
