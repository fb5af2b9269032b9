"""Async client for the Personio HR API v1.

Provides employee lookup with typed accessors over Personio's dynamic
attributes, and time-off listings over arbitrary offset/limit windows.
"""

from personio_client.attributes import Attribute, AttributeContainer, AttributeType
from personio_client.client import PersonioClient
from personio_client.config import (
    ClientSettings,
    Credentials,
    load_credentials,
    load_settings,
)
from personio_client.dates import PERSONIO_DATE_MAX, time_intersection
from personio_client.errors import (
    DecodeError,
    EnvelopeError,
    NotFoundError,
    PersonioError,
    StatusError,
)
from personio_client.models import Employee, TimeOff
from personio_client.transport import PersonioTransport

__all__ = [
    "PERSONIO_DATE_MAX",
    "Attribute",
    "AttributeContainer",
    "AttributeType",
    "ClientSettings",
    "Credentials",
    "DecodeError",
    "Employee",
    "EnvelopeError",
    "NotFoundError",
    "PersonioClient",
    "PersonioError",
    "PersonioTransport",
    "StatusError",
    "TimeOff",
    "load_credentials",
    "load_settings",
    "time_intersection",
]
