"""Typed models for Personio API v1 responses.

Employees are attribute containers (see attributes.py). Time-offs have a fixed
shape, except for the embedded employee, which again is an attribute
container decoded the same way as a top-level employee.

Every response is wrapped in the v1 envelope:

    {"success": true, "data": ...}
    {"success": false, "error": {"code": 0, "message": "..."}}
"""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict

from personio_client.attributes import AttributeContainer


def _personio_bool(value: Any) -> bool:
    """Accept true/false and 1/0, the two spellings Personio uses for flags."""
    if isinstance(value, bool):
        return value
    if isinstance(value, int) and value in (0, 1):
        return bool(value)
    raise ValueError(f"boolean unmarshal error: invalid input {value!r}")


PersonioBool = Annotated[bool, BeforeValidator(_personio_bool)]


class Employee(AttributeContainer):
    """A single employee record."""

    type: str = ""


class TimeOffTypeAttributes(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int = 0
    name: str = ""
    category: str = ""


class TimeOffType(BaseModel):
    """Descriptor of the absence kind (vacation, sick leave, ...)."""

    model_config = ConfigDict(frozen=True)

    type: str = ""
    attributes: TimeOffTypeAttributes = TimeOffTypeAttributes()


class Certificate(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: str = ""


class TimeOff(BaseModel):
    """A single time-off period.

    start_date <= end_date is expected but not checked; both are inclusive.
    """

    model_config = ConfigDict(frozen=True)

    id: int
    status: str = ""
    start_date: datetime
    end_date: datetime
    days_count: float = 0.0
    half_day_start: PersonioBool = False
    half_day_end: PersonioBool = False
    time_off_type: TimeOffType = TimeOffType()
    employee: Employee = Employee()
    created_by: str = ""
    certificate: Certificate = Certificate()
    created_at: datetime | None = None
    updated_at: datetime | None = None


class TimeOffPeriod(BaseModel):
    """Typed wrapper Personio puts around each time-off in a listing."""

    type: str = ""
    attributes: TimeOff


class ErrorBody(BaseModel):
    code: int = 0
    message: str = ""


class ResultEnvelope(BaseModel):
    """The JSON document every Personio v1 endpoint returns."""

    success: bool = False
    error: ErrorBody | None = None
    data: Any = None


class AuthData(BaseModel):
    token: str


__all__ = [
    "AuthData",
    "Certificate",
    "Employee",
    "ErrorBody",
    "PersonioBool",
    "ResultEnvelope",
    "TimeOff",
    "TimeOffPeriod",
    "TimeOffType",
    "TimeOffTypeAttributes",
]
