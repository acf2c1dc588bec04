from typing import Optional

import httpx
import structlog

from mileage.client.auth import BearerAuth
from mileage.client.comments import CommentService
from mileage.client.config import ClientSettings, get_client_settings
from mileage.client.geocoding import GeocodingService, ReverseGeocodingService
from mileage.client.guards import no_auth_guard
from mileage.client.http import build_http_client
from mileage.client.meetups import MeetupService
from mileage.client.navigation import Router
from mileage.client.session import AuthenticationService
from mileage.client.storage import FileStorage, MemoryStorage
from mileage.client.toast import ToastService
from mileage.client.zip_lookup import ZipLookupService

logger = structlog.get_logger()

# pages only reachable while signed out
ANONYMOUS_ONLY = ("/login", "/signup")


class MeetupApp:
    """
    Wires the client services around one shared ``httpx.AsyncClient``.

    Every request goes through ``BearerAuth``; third-party lookups opt out per
    request.
    """

    def __init__(
        self,
        settings: Optional[ClientSettings] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        storage: Optional[MemoryStorage] = None,
    ):
        self.settings = settings or get_client_settings()
        if storage is None:
            path = self.settings.storage_path
            storage = FileStorage(path) if path else MemoryStorage()
        self.storage = storage

        self.router = Router()
        self.http = build_http_client(self.settings, transport=transport)
        self.session = AuthenticationService(self.http, self.storage, self.router)
        self.http.auth = BearerAuth(self.session)

        self.toasts = ToastService(timeout=self.settings.toast_timeout_seconds)
        self.meetups = MeetupService(self.http, self.toasts)
        self.comments = CommentService(self.http, self.toasts)
        self.geocoding = GeocodingService(self.http, self.toasts, self.settings.nominatim_url)
        self.reverse_geocoding = ReverseGeocodingService(
            self.http, self.toasts, self.settings.nominatim_url
        )
        self.zip_lookup = ZipLookupService(self.http, self.settings.zippopotam_url)

    def open(self, path: str) -> bool:
        """Navigate to ``path`` unless a guard redirects elsewhere."""
        if path in ANONYMOUS_ONLY and not no_auth_guard(self.session, self.router):
            logger.debug("navigation_redirected", requested=path)
            return False
        self.router.navigate(path)
        return True

    async def aclose(self) -> None:
        self.toasts.clear()
        await self.http.aclose()

    async def __aenter__(self) -> "MeetupApp":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()
