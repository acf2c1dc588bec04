import re
from typing import Dict, Optional

import httpx
import structlog

from mileage.client.errors import ApiError
from mileage.client.http import send

logger = structlog.get_logger()

DEFAULT_ZIPPOPOTAM_URL = "https://api.zippopotam.us"
ZIP_PATTERN = re.compile(r"^\d{5}(-\d{4})?$")


class ZipLookupService:
    """US ZIP code -> ``{"city", "state"}`` via zippopotam.us (state as its abbreviation)."""

    def __init__(self, http: httpx.AsyncClient, base_url: str = DEFAULT_ZIPPOPOTAM_URL):
        self.http = http
        self.base_url = base_url.rstrip("/")

    async def lookup(self, zip_code: str) -> Optional[Dict[str, str]]:
        zip_code = (zip_code or "").strip()
        if not ZIP_PATTERN.match(zip_code):
            return None
        try:
            data = await send(
                self.http, "GET", f"{self.base_url}/us/{zip_code[:5]}", skip_auth=True
            )
            place = data["places"][0]
            return {"city": place["place name"], "state": place["state abbreviation"]}
        except (ApiError, KeyError, IndexError, TypeError) as exc:
            logger.warning("zip_lookup_failed", zip_code=zip_code, error=str(exc))
            return None
