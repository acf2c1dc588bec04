from datetime import datetime, timezone
from typing import Any, Dict, Optional

from mileage.client.geocoding import ReverseGeocodingService
from mileage.client.meetups import MeetupService
from mileage.client.signals import Signal
from mileage.client.zip_lookup import ZipLookupService

ACTIVITIES = ("run", "bicycle")
LOCATION_KEYS = ("address", "zip_code", "city", "state", "country")


def blank_form() -> Dict[str, Any]:
    return {
        "title": "",
        "activity": "run",
        "start_date_time": "",
        "end_date_time": "",
        "guests": 1,
        "location": {"address": "", "zip_code": "", "city": "", "state": "", "country": "USA"},
    }


def _parse(value: Any) -> Optional[datetime]:
    """Form date value -> naive UTC datetime, or None when missing or unreadable."""
    if not value:
        return None
    if not isinstance(value, datetime):
        try:
            value = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
        except ValueError:
            return None
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


class MeetupFormComponent:
    """
    Create/edit form for a meetup.

    While mounted it follows ``MeetupService.meetup_to_edit``: whenever a meetup
    is selected for editing its values are patched into the form. Call
    ``destroy()`` when the form goes away.
    """

    def __init__(
        self,
        meetups: MeetupService,
        reverse_geocoding: ReverseGeocodingService,
        zip_lookup: ZipLookupService,
    ):
        self.meetups = meetups
        self.reverse_geocoding = reverse_geocoding
        self.zip_lookup = zip_lookup

        self.form = blank_form()
        self.show_form = Signal(True)
        self.submitting = Signal(False)
        self.is_reverse_geocoding = Signal(False)
        self.activities = ACTIVITIES

        self._unsubscribe = meetups.meetup_to_edit.subscribe(self._on_meetup_to_edit)
        self._on_meetup_to_edit(meetups.meetup_to_edit())

    def _on_meetup_to_edit(self, editing: Optional[Dict[str, Any]]) -> None:
        if editing:
            self.patch(editing)

    def patch(self, values: Dict[str, Any]) -> None:
        for key, value in values.items():
            if key == "location":
                for loc_key, loc_value in (value or {}).items():
                    if loc_key in LOCATION_KEYS:
                        self.form["location"][loc_key] = loc_value
            elif key in self.form:
                self.form[key] = value

    def reset(self) -> None:
        self.form = blank_form()

    def errors(self) -> Dict[str, str]:
        form = self.form
        errors: Dict[str, str] = {}
        if not str(form["title"] or "").strip():
            errors["title"] = "Title is required."
        if form["activity"] not in ACTIVITIES:
            errors["activity"] = "Choose an activity."

        start, end = _parse(form["start_date_time"]), _parse(form["end_date_time"])
        if start is None:
            errors["start_date_time"] = "Start date and time are required."
        if end is None:
            errors["end_date_time"] = "End date and time are required."
        elif start is not None and end <= start:
            errors["end_date_time"] = "End must be after the start."

        try:
            guests = int(form["guests"])
        except (TypeError, ValueError):
            guests = 0
        if guests < 1:
            errors["guests"] = "At least one guest is required."

        if not str(form["location"].get("zip_code") or "").strip():
            errors["zip_code"] = "ZIP code is required."
        return errors

    @property
    def is_valid(self) -> bool:
        return not self.errors()

    async def on_coordinates_selected(self, lat: float, lng: float) -> None:
        self.is_reverse_geocoding.set(True)
        try:
            result = await self.reverse_geocoding.reverse_geocode(lat, lng)
        finally:
            self.is_reverse_geocoding.set(False)
        if result is not None:
            self.patch({"location": result})

    async def lookup_zip(self) -> None:
        zip_code = self.form["location"].get("zip_code")
        if not zip_code:
            return
        place = await self.zip_lookup.lookup(zip_code)
        if place is not None:
            self.patch({"location": place})

    async def submit(self) -> bool:
        if not self.is_valid:
            return False

        self.submitting.set(True)
        data = {**self.form, "guests": int(self.form["guests"]), "location": dict(self.form["location"])}
        editing = self.meetups.meetup_to_edit()
        try:
            if editing:
                self.meetups.clear_meetup_to_edit()
                result = await self.meetups.update_meetup({**editing, **data})
            else:
                result = await self.meetups.add_meetup(data)
        finally:
            self.submitting.set(False)

        if result is None:
            return False
        self.reset()
        self.show_form.set(False)
        return True

    def destroy(self) -> None:
        self._unsubscribe()
