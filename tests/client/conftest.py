"""Client fixtures: a scripted backend behind ``httpx.MockTransport``."""

import json

import httpx
import pytest

from mileage.client.app import MeetupApp
from mileage.client.config import ClientSettings
from mileage.client.storage import MemoryStorage

API_URL = "http://api.mileage.local"


class FakeBackend:
    """Answers requests by (method, path); records every request it sees."""

    def __init__(self):
        self.routes = {}
        self.requests = []

    def on(self, method, path, status=200, json=None, handler=None):
        self.routes[(method, path)] = handler or (lambda request: httpx.Response(status, json=json))

    def __call__(self, request: httpx.Request):
        self.requests.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"errors": ["Not found"]})
        return route(request)

    def last(self, method, path):
        for request in reversed(self.requests):
            if request.method == method and request.url.path == path:
                return request
        raise AssertionError(f"no {method} {path} request was sent")

    def body(self, method, path):
        return json.loads(self.last(method, path).content)


@pytest.fixture
def backend():
    return FakeBackend()


@pytest.fixture
def settings():
    return ClientSettings(api_url=API_URL, toast_timeout_seconds=4.0)


@pytest.fixture
async def app(backend, settings):
    app = MeetupApp(settings=settings, transport=httpx.MockTransport(backend), storage=MemoryStorage())
    yield app
    await app.aclose()


@pytest.fixture
def messages(app):
    def _messages():
        return [(t.type, t.message) for t in app.toasts.toasts()]

    return _messages


def meetup_record(meetup_id=101, **overrides):
    record = {
        "id": meetup_id,
        "title": "Saturday long run",
        "activity": "run",
        "start_date_time": "2030-05-04T14:00:00.000Z",
        "end_date_time": "2030-05-04T16:00:00.000Z",
        "guests": 3,
        "user": {"id": 7, "username": "rider1"},
        "location": {
            "address": "1 Trail Rd",
            "city": "Portland",
            "state": "OR",
            "zip_code": "97201",
            "country": "US",
        },
        "meetup_participants": [],
    }
    record.update(overrides)
    return record


@pytest.fixture
def make_meetup():
    return meetup_record
