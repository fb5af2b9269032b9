"""Shared test fixtures for the Personio client tests.

Provides:
  - JSON fixture loading helpers
  - MockTransport: replays a fixed list of responses (for error paths)
  - PersonioMock: a small in-memory emulation of the Personio v1 API with
    single-use tokens, optional token rotation, date-range filtering and
    offset/limit paging. Every request is recorded for call-count assertions.
  - A client factory that wires either mock into a PersonioClient
"""

from __future__ import annotations

import itertools
import json
from datetime import UTC, datetime, timedelta
from pathlib import Path
from typing import Any
from urllib.parse import parse_qs

import httpx
import pytest
from personio_client.client import PersonioClient
from personio_client.config import ClientSettings, Credentials
from personio_client.dates import (
    PERSONIO_DATE_MAX,
    PERSONIO_DATE_MIN,
    QUERY_DATE_FORMAT,
    time_intersection,
)

FIXTURES_DIR = Path(__file__).parent / "fixtures"

BASE_URL = "https://personio.test/v1"
CLIENT_ID = "abc"
CLIENT_SECRET = "def"


def load_fixture(name: str) -> dict[str, Any]:
    """Load a JSON fixture file by name."""
    return json.loads((FIXTURES_DIR / name).read_text())


def make_time_off(time_off_id: int, start: str, end: str) -> dict[str, Any]:
    """Build a minimal TimeOffPeriod payload."""
    return {
        "type": "TimeOffPeriod",
        "attributes": {
            "id": time_off_id,
            "status": "approved",
            "start_date": f"{start}T00:00:00+00:00",
            "end_date": f"{end}T00:00:00+00:00",
            "days_count": 1,
            "half_day_start": 0,
            "half_day_end": 0,
        },
    }


class MockTransport(httpx.AsyncBaseTransport):
    """Mock HTTP transport that returns preconfigured responses.

    Each call pops the next item from the list. An exception instance in the
    list is raised instead of returned. If the list is exhausted, returns 500.
    """

    def __init__(self, responses: list[httpx.Response | Exception] | None = None) -> None:
        self.responses = list(responses or [])
        self.requests: list[httpx.Request] = []

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.responses:
            response = self.responses.pop(0)
            if isinstance(response, Exception):
                raise response
            response.stream = httpx.ByteStream(response.content)
            return response
        return httpx.Response(500, json={"error": "No more mock responses"})


class PersonioMock(httpx.AsyncBaseTransport):
    """In-memory Personio v1 emulation.

    Tokens are single use. With rotate=True every authenticated response
    carries a fresh token in its Authorization header.
    """

    def __init__(
        self,
        time_offs: list[dict[str, Any]] | None = None,
        employees: dict[int, dict[str, Any]] | None = None,
        rotate: bool = True,
        page_cap: int = 200,
    ) -> None:
        self.time_offs = time_offs if time_offs is not None else load_fixture("time-offs.json")["data"]
        if employees is None:
            employees = {
                employee_id: load_fixture(f"employee-{employee_id}.json")["data"]
                for employee_id in (6205887, 7161253)
            }
        self.employees = employees
        self.rotate = rotate
        self.page_cap = page_cap
        self.requests: list[httpx.Request] = []
        self.auth_count = 0
        self._counter = itertools.count(1)
        self._valid_tokens: set[str] = set()

    def issue_token(self) -> str:
        token = f"token-{next(self._counter)}"
        self._valid_tokens.add(token)
        return token

    @property
    def data_requests(self) -> list[httpx.Request]:
        return [r for r in self.requests if not r.url.path.endswith("/auth")]

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path.removeprefix("/v1").rstrip("/")

        if request.method == "POST" and path == "/auth":
            return self._auth(request)

        token = request.headers.get("authorization", "").replace("Bearer ", "", 1)
        if token not in self._valid_tokens:
            return httpx.Response(401, json={"success": False, "error": {"code": 0, "message": "unauthorized"}})
        self._valid_tokens.discard(token)
        headers = {"authorization": f"Bearer {self.issue_token()}"} if self.rotate else {}

        if request.method == "GET" and path == "/company/time-offs":
            return self._time_offs(request, headers)
        if request.method == "GET" and path == "/company/employees":
            return self._list(list(self.employees.values()), request, headers)
        if request.method == "GET" and path.startswith("/company/employees/"):
            employee_id = path.rsplit("/", 1)[-1]
            if not employee_id.isdigit() or int(employee_id) not in self.employees:
                return httpx.Response(404, headers=headers)
            return httpx.Response(
                200, headers=headers, json={"success": True, "data": self.employees[int(employee_id)]}
            )
        return httpx.Response(404, headers=headers)

    def _auth(self, request: httpx.Request) -> httpx.Response:
        form = parse_qs(request.content.decode())
        if form.get("client_id") == [CLIENT_ID] and form.get("client_secret") == [CLIENT_SECRET]:
            self.auth_count += 1
            return httpx.Response(200, json={"success": True, "data": {"token": self.issue_token()}})
        return httpx.Response(401, json={"success": False, "error": {"code": 0, "message": "bad credentials"}})

    def _window(self, request: httpx.Request) -> tuple[int, int] | None:
        params = request.url.params
        try:
            limit = int(params.get("limit", self.page_cap))
            offset = int(params.get("offset", 0))
        except ValueError:
            return None
        if limit < 1 or limit > self.page_cap or offset < 0:
            return None
        return offset, limit

    def _list(
        self, items: list[dict[str, Any]], request: httpx.Request, headers: dict[str, str]
    ) -> httpx.Response:
        window = self._window(request)
        if window is None:
            return httpx.Response(400, headers=headers)
        offset, limit = window
        return httpx.Response(
            200, headers=headers, json={"success": True, "data": items[offset : offset + limit]}
        )

    def _time_offs(self, request: httpx.Request, headers: dict[str, str]) -> httpx.Response:
        params = request.url.params
        try:
            start = _parse_query_date(params.get("start_date")) or PERSONIO_DATE_MIN
            end = _parse_query_date(params.get("end_date")) or PERSONIO_DATE_MAX
        except ValueError:
            return httpx.Response(400, headers=headers)
        if end < start:
            return httpx.Response(400, headers=headers)

        matching = [
            item
            for item in self.time_offs
            if time_intersection(
                datetime.fromisoformat(item["attributes"]["start_date"]),
                datetime.fromisoformat(item["attributes"]["end_date"]),
                start,
                end,
            )
            >= timedelta(0)
        ]
        return self._list(matching, request, headers)


def _parse_query_date(value: str | None) -> datetime | None:
    if not value:
        return None
    return datetime.strptime(value, QUERY_DATE_FORMAT).replace(tzinfo=UTC)


def inject_transport(client: PersonioClient, transport: httpx.AsyncBaseTransport) -> None:
    """Inject a mock transport into a client's HTTP connection."""
    client.transport._client = httpx.AsyncClient(
        transport=transport, base_url=client.settings.base_url
    )


@pytest.fixture
def credentials() -> Credentials:
    return Credentials(client_id=CLIENT_ID, client_secret=CLIENT_SECRET)


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(base_url=BASE_URL)


@pytest.fixture
def personio_mock() -> PersonioMock:
    return PersonioMock()


@pytest.fixture
async def make_client(credentials, settings):
    """Factory: build a PersonioClient talking to the given mock transport."""
    clients: list[PersonioClient] = []

    def _make(
        transport: httpx.AsyncBaseTransport,
        page_size: int | None = None,
        creds: Credentials | None = None,
    ) -> PersonioClient:
        client_settings = settings
        if page_size is not None:
            client_settings = settings.model_copy(update={"page_size": page_size})
        client = PersonioClient(creds or credentials, client_settings)
        inject_transport(client, transport)
        clients.append(client)
        return client

    yield _make

    for client in clients:
        await client.close()


@pytest.fixture
async def client(make_client, personio_mock) -> PersonioClient:
    return make_client(personio_mock)
