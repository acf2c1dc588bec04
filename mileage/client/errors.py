from typing import List

import httpx


class ApiError(Exception):
    """A backend or third-party call that did not produce a usable response.

    ``status_code`` is 0 when the request never got an HTTP answer.
    """

    def __init__(self, status_code: int, errors: List[str]):
        self.status_code = status_code
        self.errors = errors
        super().__init__(f"HTTP {status_code}: {'; '.join(errors)}")

    @classmethod
    def from_response(cls, response: httpx.Response) -> "ApiError":
        errors: List[str] = []
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            raw = body.get("errors") or body.get("detail")
            if isinstance(raw, list):
                errors = [str(e) for e in raw]
            elif raw:
                errors = [str(raw)]
        return cls(response.status_code, errors or [response.reason_phrase or "Request failed"])

    @property
    def is_validation_error(self) -> bool:
        return self.status_code == 422

    @property
    def is_not_found(self) -> bool:
        return self.status_code == 404


def error_message(exc: ApiError, fallback: str) -> str:
    """Validation messages are shown verbatim; everything else gets ``fallback``."""
    if exc.is_validation_error and exc.errors:
        return "; ".join(exc.errors)
    return fallback
