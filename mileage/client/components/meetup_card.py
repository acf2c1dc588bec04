from typing import Any, Dict, Optional

from mileage.client.meetups import MeetupService


class MeetupCardComponent:
    """One meetup in the dashboard grid, seen by ``current_user_id``."""

    def __init__(self, meetup: Dict[str, Any], current_user_id: Optional[int], service: MeetupService):
        self.meetup = meetup
        self.current_user_id = current_user_id
        self.service = service

    @property
    def is_owner(self) -> bool:
        user = self.meetup.get("user") or {}
        return self.current_user_id is not None and user.get("id") == self.current_user_id

    @property
    def is_participant(self) -> bool:
        if not self.current_user_id:
            return False
        participants = self.meetup.get("meetup_participants") or []
        return any(p.get("user_id") == self.current_user_id for p in participants)

    @property
    def participant_count(self) -> int:
        return len(self.meetup.get("meetup_participants") or [])

    async def join(self) -> None:
        await self.service.join_meetup(self.meetup["id"])

    async def leave(self) -> None:
        if self.current_user_id:
            await self.service.leave_meetup(self.meetup["id"], self.current_user_id)
