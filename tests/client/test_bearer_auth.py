import httpx

from mileage.client.auth import SKIP_AUTH, BearerAuth
from mileage.client.http import send


class _Session:
    def __init__(self, token):
        self.token = token

    def get_token(self):
        return self.token


def _flow(auth, request):
    return next(auth.auth_flow(request))


def test_attaches_bearer_token():
    request = httpx.Request("GET", "http://api.mileage.local/meetups", headers={"X-Trace": "1"})

    sent = _flow(BearerAuth(_Session("t1")), request)

    assert sent.headers["Authorization"] == "Bearer t1"
    assert sent.headers["X-Trace"] == "1"


def test_leaves_request_alone_without_token():
    request = httpx.Request("GET", "http://api.mileage.local/meetups")

    sent = _flow(BearerAuth(_Session(None)), request)

    assert "Authorization" not in sent.headers


def test_skip_flag_keeps_token_off():
    request = httpx.Request("GET", "https://nominatim.openstreetmap.org/search", extensions={SKIP_AUTH: True})

    sent = _flow(BearerAuth(_Session("t1")), request)

    assert "Authorization" not in sent.headers


async def test_app_client_sends_token_to_backend_only(app, backend):
    backend.on("GET", "/meetups", json={"meetups": "[]", "total_pages": 1, "current_page": 1})
    backend.on("GET", "/search", json=[])
    app.session.set_token("t1")

    await send(app.http, "GET", "/meetups")
    await send(app.http, "GET", "https://nominatim.openstreetmap.org/search", skip_auth=True)

    assert backend.last("GET", "/meetups").headers["Authorization"] == "Bearer t1"
    assert "Authorization" not in backend.last("GET", "/search").headers
