"""Shared test fixtures for the Schedfy booking client tests."""

from typing import Any, Callable, Optional, Union

import httpx
import pytest
import pytest_asyncio

from schedfy.api_client import ApiClient
from schedfy.domain.bookings import BookingStore

API_BASE = "http://api.test"


def booking_payload(booking_id: str = "b1", **overrides: Any) -> dict:
    """Booking as the API sends it (Mongo style `_id`)."""
    payload = {
        "_id": booking_id,
        "entityId": "ent-1",
        "serviceId": "svc-1",
        "clientId": "cli-1",
        "professionalId": "pro-1",
        "startTime": "2026-03-02T09:00:00.000Z",
        "endTime": "2026-03-02T10:00:00.000Z",
        "status": "pending",
        "pricing": {"basePrice": 50, "totalPrice": 50, "currency": "EUR"},
    }
    payload.update(overrides)
    return payload


Responder = Union[tuple[int, Any], Callable[[httpx.Request], Any]]


class FakeApi:
    """Canned responses keyed by (method, path); every request is recorded."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.routes: dict[tuple[str, str], Responder] = {}

    def on(self, method: str, path: str, status: int = 200, json: Optional[Any] = None) -> None:
        self.routes[(method, path)] = (status, json)

    def on_call(self, method: str, path: str, responder: Callable[[httpx.Request], Any]) -> None:
        self.routes[(method, path)] = responder

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    def handler(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": "Not found"})
        if callable(route):
            return route(request)
        status, body = route
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)


@pytest.fixture
def fake_api() -> FakeApi:
    return FakeApi()


@pytest_asyncio.fixture
async def api(fake_api):
    http_client = httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))
    yield ApiClient(base_url=API_BASE, token="test-token", client=http_client)
    await http_client.aclose()


@pytest.fixture
def store(api) -> BookingStore:
    return BookingStore(api, serialize_mutations=False)


@pytest.fixture
def make_booking() -> Callable[..., dict]:
    return booking_payload
