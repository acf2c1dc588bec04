import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import httpx
import structlog

from mileage.client.errors import ApiError, error_message
from mileage.client.http import send
from mileage.client.signals import Signal
from mileage.client.toast import ToastService

logger = structlog.get_logger()

Meetup = Dict[str, Any]

LOCATION_FIELDS = ("address", "city", "state", "zip_code", "country")


def to_iso_utc(value: Any) -> Any:
    """datetime or ISO string -> ``YYYY-MM-DDTHH:MM:SS.sssZ``; other values pass through."""
    if isinstance(value, str):
        try:
            value = datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    if not isinstance(value, datetime):
        return value
    if value.tzinfo is None:
        value = value.astimezone()
    value = value.astimezone(timezone.utc)
    return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


def meetup_payload(meetup: Meetup) -> Dict[str, Any]:
    location = meetup.get("location") or {}
    return {
        "meetup": {
            "title": meetup.get("title"),
            "activity": meetup.get("activity"),
            "start_date_time": to_iso_utc(meetup.get("start_date_time")),
            "end_date_time": to_iso_utc(meetup.get("end_date_time")),
            "guests": meetup.get("guests"),
            "location_attributes": {field: location.get(field) for field in LOCATION_FIELDS},
        }
    }


class MeetupService:
    def __init__(self, http: httpx.AsyncClient, toasts: ToastService):
        self.http = http
        self.toasts = toasts

        self._meetups: Signal[List[Meetup]] = Signal([])
        self._meetup_to_edit: Signal[Optional[Meetup]] = Signal(None)
        self._meetup_detail: Signal[Optional[Meetup]] = Signal(None)
        self._loading = Signal(False)
        self._tickets = {"list": 0, "detail": 0}
        self._pending = {"list": False, "detail": False}

        self.meetups = self._meetups.as_readonly()
        self.meetup_to_edit = self._meetup_to_edit.as_readonly()
        self.meetup_detail = self._meetup_detail.as_readonly()
        self.loading = self._loading.as_readonly()

    def set_meetup_to_edit(self, meetup: Meetup) -> None:
        self._meetup_to_edit.set(meetup)

    def clear_meetup_to_edit(self) -> None:
        self._meetup_to_edit.set(None)

    def clear_meetup_detail(self) -> None:
        self._meetup_detail.set(None)

    def _take_ticket(self, kind: str) -> int:
        self._tickets[kind] += 1
        self._pending[kind] = True
        self._loading.set(True)
        return self._tickets[kind]

    def _is_current(self, kind: str, ticket: int) -> bool:
        return ticket == self._tickets[kind]

    def _finish(self, kind: str) -> None:
        # loading stays on while the other kind of load is still outstanding
        self._pending[kind] = False
        self._loading.set(any(self._pending.values()))

    async def load_meetups(self, page: int = 1) -> None:
        ticket = self._take_ticket("list")
        try:
            data = await send(self.http, "GET", "/meetups", params={"page": page})
            meetups = json.loads(data["meetups"])
            if not isinstance(meetups, list):
                meetups = []
        except (ApiError, KeyError, TypeError, ValueError) as exc:
            logger.error("meetups_load_failed", error=str(exc))
            if self._is_current("list", ticket):
                self._meetups.set([])
                self._finish("list")
                self.toasts.error("Failed to load meetups.")
            return
        if self._is_current("list", ticket):
            self._meetups.set(meetups)
            self._finish("list")

    async def get_meetup(self, meetup_id: int) -> Optional[Meetup]:
        ticket = self._take_ticket("detail")
        try:
            meetup = await send(self.http, "GET", f"/meetups/{meetup_id}")
        except ApiError as exc:
            logger.error("meetup_load_failed", meetup_id=meetup_id, error=str(exc))
            if self._is_current("detail", ticket):
                self._meetup_detail.set(None)
                self._finish("detail")
                self.toasts.error("Meetup not found." if exc.is_not_found else "Failed to load meetup.")
            return None
        if self._is_current("detail", ticket):
            self._meetup_detail.set(meetup)
            self._finish("detail")
        return meetup

    async def add_meetup(self, draft: Meetup) -> Optional[Meetup]:
        try:
            created = await send(self.http, "POST", "/meetups", json=meetup_payload(draft))
        except ApiError as exc:
            logger.error("meetup_create_failed", error=str(exc))
            self.toasts.error(error_message(exc, "Failed to create meetup."))
            return None
        self._meetups.update(lambda ms: [*ms, created])
        self.toasts.success("Meetup created!")
        return created

    async def update_meetup(self, meetup: Meetup) -> Optional[Meetup]:
        try:
            saved = await send(
                self.http, "PUT", f"/meetups/{meetup['id']}", json=meetup_payload(meetup)
            )
        except ApiError as exc:
            logger.error("meetup_update_failed", meetup_id=meetup.get("id"), error=str(exc))
            self.toasts.error(error_message(exc, "Failed to update meetup."))
            return None
        self._meetups.update(lambda ms: [saved if m.get("id") == saved["id"] else m for m in ms])
        self.toasts.success("Meetup updated!")
        return saved

    async def delete_meetup(self, meetup_id: int) -> bool:
        try:
            await send(self.http, "DELETE", f"/meetups/{meetup_id}")
        except ApiError as exc:
            if not exc.is_not_found:
                logger.error("meetup_delete_failed", meetup_id=meetup_id, error=str(exc))
                self.toasts.error(error_message(exc, "Failed to delete meetup."))
                return False
            # already gone on the server
            self._drop(meetup_id)
            return True
        self._drop(meetup_id)
        self.toasts.success("Meetup deleted.")
        return True

    def _drop(self, meetup_id: int) -> None:
        self._meetups.update(lambda ms: [m for m in ms if m.get("id") != meetup_id])

    async def join_meetup(self, meetup_id: int) -> Optional[Dict[str, Any]]:
        try:
            participant = await send(self.http, "POST", f"/meetups/{meetup_id}/join")
        except ApiError as exc:
            logger.error("meetup_join_failed", meetup_id=meetup_id, error=str(exc))
            self.toasts.error(error_message(exc, "Failed to join meetup."))
            return None
        self._patch_participants(meetup_id, lambda ps: [*ps, participant])
        self.toasts.success("You joined the meetup!")
        return participant

    async def leave_meetup(self, meetup_id: int, user_id: int) -> bool:
        try:
            await send(self.http, "DELETE", f"/meetups/{meetup_id}/leave")
        except ApiError as exc:
            logger.error("meetup_leave_failed", meetup_id=meetup_id, error=str(exc))
            self.toasts.error(error_message(exc, "Failed to leave meetup."))
            return False
        self._patch_participants(
            meetup_id, lambda ps: [p for p in ps if p.get("user_id") != user_id]
        )
        self.toasts.success("You left the meetup.")
        return True

    def _patch_participants(
        self, meetup_id: int, change: Callable[[List[Dict[str, Any]]], List[Dict[str, Any]]]
    ) -> None:
        def patch(meetup: Meetup) -> Meetup:
            if meetup.get("id") != meetup_id:
                return meetup
            return {**meetup, "meetup_participants": change(meetup.get("meetup_participants") or [])}

        self._meetups.update(lambda ms: [patch(m) for m in ms])
        detail = self._meetup_detail()
        if detail is not None:
            self._meetup_detail.set(patch(detail))
