from typing import Any, Dict, List, Optional

from mileage.client.components.meetup_card import MeetupCardComponent
from mileage.client.meetups import MeetupService
from mileage.client.session import AuthenticationService
from mileage.client.signals import Signal


class DashboardComponent:
    """Meetup list page with the create/edit modal and the detail modal."""

    def __init__(self, meetups: MeetupService, session: AuthenticationService):
        self.service = meetups
        self.meetups = meetups.meetups
        self.meetup_to_edit = meetups.meetup_to_edit
        self.loading = meetups.loading

        self.current_user_id = session.get_user_id()
        self.show_modal = Signal(False)
        self.show_detail_modal = Signal(False)
        self.detail_meetup_id: Signal[Optional[int]] = Signal(None)

    async def init(self) -> None:
        await self.service.load_meetups()

    def cards(self) -> List[MeetupCardComponent]:
        return [MeetupCardComponent(m, self.current_user_id, self.service) for m in self.meetups()]

    def open_modal(self, meetup: Optional[Dict[str, Any]] = None) -> None:
        if meetup:
            self.service.set_meetup_to_edit(meetup)
        else:
            self.service.clear_meetup_to_edit()
        self.show_modal.set(True)

    def close_modal(self) -> None:
        self.show_modal.set(False)
        self.service.clear_meetup_to_edit()

    def open_detail_modal(self, meetup_id: int) -> None:
        self.detail_meetup_id.set(meetup_id)
        self.show_detail_modal.set(True)

    def close_detail_modal(self) -> None:
        self.show_detail_modal.set(False)
        self.detail_meetup_id.set(None)

    def on_escape_key(self) -> None:
        # detail modal sits on top of the form modal
        if self.show_detail_modal():
            self.close_detail_modal()
        elif self.show_modal():
            self.close_modal()

    async def delete_meetup(self, meetup_id: int) -> None:
        await self.service.delete_meetup(meetup_id)
