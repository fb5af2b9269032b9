"""Personio API v1 client: employees and time-offs.

Listings are fetched with offset/limit pagination. The caller's window
(offset, limit) is not bound by the upstream page size: the client walks the
window in steps of at most settings.page_size records, and stops early as soon
as a page comes back shorter than requested, which is how Personio signals
the end of the data.

Pages are fetched one after another because each offset depends on how many
records the previous page returned. A failure on any page aborts the whole
listing; records from earlier pages are discarded.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Any, TypeVar

from pydantic import TypeAdapter, ValidationError

from personio_client.config import DEFAULT_PAGE_SIZE, ClientSettings, Credentials
from personio_client.dates import format_query_date
from personio_client.errors import DecodeError
from personio_client.models import Employee, TimeOff, TimeOffPeriod
from personio_client.transport import PersonioTransport

logger = logging.getLogger(__name__)

T = TypeVar("T")

_EMPLOYEE = TypeAdapter(Employee)
_EMPLOYEES = TypeAdapter(list[Employee])
_TIME_OFF_PERIODS = TypeAdapter(list[TimeOffPeriod])


def _decode(adapter: TypeAdapter[T], data: Any, what: str) -> T:
    try:
        return adapter.validate_python(data)
    except ValidationError as e:
        raise DecodeError(f"Malformed {what} payload: {e}") from e


class PersonioClient:
    """Read-only client for the Personio HR API.

    One instance holds one token slot (see transport.py). Close it when done:

        client = PersonioClient(load_credentials())
        try:
            time_offs = await client.get_time_offs(date(2024, 1, 1), None, 0, 500)
        finally:
            await client.close()
    """

    def __init__(
        self,
        credentials: Credentials,
        settings: ClientSettings | None = None,
    ) -> None:
        self.settings = settings or ClientSettings()
        self.transport = PersonioTransport(credentials, self.settings)

    async def close(self) -> None:
        await self.transport.close()

    async def authenticate(self, client_id: str, client_secret: str) -> str:
        """Fetch a new access token for the given client credentials."""
        return await self.transport.authenticate(client_id, client_secret)

    async def get_employee(self, employee_id: int) -> Employee:
        """Fetch one employee by ID.

        Raises:
            NotFoundError: no employee with this ID.
        """
        data = await self.transport.request_json("GET", f"company/employees/{employee_id}")
        return _decode(_EMPLOYEE, data, "employee")

    async def get_employees(self) -> list[Employee]:
        """Fetch every employee, following pages until the upstream runs out."""
        return await self._paginate("company/employees", _EMPLOYEES, {}, 0, None)

    async def get_time_offs(
        self,
        start: date | None = None,
        end: date | None = None,
        offset: int = 0,
        limit: int = DEFAULT_PAGE_SIZE,
    ) -> list[TimeOff]:
        """Fetch time-offs overlapping [start, end], both inclusive and optional.

        Returns at most `limit` records starting at position `offset` of the
        upstream ordering. Fewer records mean the upstream is exhausted.
        Date filtering is done by Personio; only the calendar date of start
        and end is sent.
        """
        params: dict[str, Any] = {}
        if start is not None:
            params["start_date"] = format_query_date(start)
        if end is not None:
            params["end_date"] = format_query_date(end)

        periods = await self._paginate(
            "company/time-offs", _TIME_OFF_PERIODS, params, offset, limit
        )
        return [period.attributes for period in periods]

    async def _paginate(
        self,
        path: str,
        adapter: TypeAdapter[list[T]],
        params: dict[str, Any],
        offset: int,
        limit: int | None,
    ) -> list[T]:
        """Collect the window [offset, offset + limit) page by page.

        limit=None walks until the first short page.
        """
        if offset < 0:
            raise ValueError(f"offset must be >= 0, got {offset}")
        if limit is not None and limit < 0:
            raise ValueError(f"limit must be >= 0, got {limit}")

        page_size = self.settings.page_size
        results: list[T] = []
        fetched = 0
        pages = 0

        while limit is None or fetched < limit:
            step = page_size if limit is None else min(limit - fetched, page_size)
            page_params = {**params, "limit": step, "offset": offset + fetched}

            data = await self.transport.request_json("GET", path, params=page_params)
            # a missing "data" is an empty page; never hand out more than was asked for
            page = [] if data is None else _decode(adapter, data, path)[:step]
            pages += 1

            results.extend(page)
            fetched += len(page)
            logger.debug(f"Personio {path}: page {pages} returned {len(page)}/{step} records")

            if len(page) < step:
                break

        logger.info(f"Fetched {len(results)} records from {path} in {pages} pages")
        return results


__all__ = ["PersonioClient"]
