from typing import Generator, Optional, Protocol

import httpx

# request extension that keeps the bearer token off a request
SKIP_AUTH = "skip_auth"


class TokenSource(Protocol):
    def get_token(self) -> Optional[str]: ...


class BearerAuth(httpx.Auth):
    """Adds ``Authorization: Bearer <token>`` unless the request opts out via ``SKIP_AUTH``."""

    def __init__(self, session: TokenSource):
        self.session = session

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        if not request.extensions.get(SKIP_AUTH):
            token = self.session.get_token()
            if token:
                request.headers["Authorization"] = f"Bearer {token}"
        yield request
