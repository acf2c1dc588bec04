from typing import Any, Dict, Optional

import httpx
import structlog

from mileage.client.http import send
from mileage.client.navigation import Router
from mileage.client.storage import MemoryStorage

logger = structlog.get_logger()

TOKEN_KEY = "token"
USER_ID_KEY = "user_id"
USERNAME_KEY = "username"


class AuthenticationService:
    """
    Holds the signed-in user's token, id and username in ``storage``.

    The storage is read lazily on every access, so a store that was populated
    by an earlier run restores the session. The token is never inspected;
    an expired one surfaces as a 401 on the next call.
    """

    def __init__(self, http: httpx.AsyncClient, storage: MemoryStorage, router: Router):
        self.http = http
        self.storage = storage
        self.router = router

    async def login(self, username: str, password: str) -> Dict[str, Any]:
        return await send(
            self.http, "POST", "/login", json={"username": username, "password": password}
        )

    async def signup(self, payload: Dict[str, Any]) -> Dict[str, Any]:
        return await send(self.http, "POST", "/signup", json={"user": payload})

    def set_token(self, token: str) -> None:
        self.storage.set_item(TOKEN_KEY, token)

    def get_token(self) -> Optional[str]:
        return self.storage.get_item(TOKEN_KEY)

    def set_user_id(self, user_id: int) -> None:
        self.storage.set_item(USER_ID_KEY, str(user_id))

    def get_user_id(self) -> Optional[int]:
        raw = self.storage.get_item(USER_ID_KEY)
        if raw is None:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def set_user(self, username: str) -> None:
        self.storage.set_item(USERNAME_KEY, username)

    def clear_user(self) -> None:
        self.storage.remove_item(USERNAME_KEY)

    def start_session(self, response: Dict[str, Any]) -> None:
        """Store the ``{token, user}`` answer of login or signup."""
        user = response.get("user") or {}
        self.set_token(response["token"])
        if user.get("id") is not None:
            self.set_user_id(user["id"])
        if user.get("username"):
            self.set_user(user["username"])
        logger.info("session_started", user_id=user.get("id"))

    def logout(self) -> None:
        self.storage.remove_item(TOKEN_KEY)
        self.storage.remove_item(USER_ID_KEY)
        self.clear_user()
        self.router.navigate("/login")

    def is_logged_in(self) -> bool:
        return bool(self.get_token())

    def current_user(self) -> Optional[Dict[str, str]]:
        username = self.storage.get_item(USERNAME_KEY)
        return {"username": username} if username else None
