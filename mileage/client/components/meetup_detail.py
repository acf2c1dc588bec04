from mileage.client.comments import CommentService
from mileage.client.meetups import MeetupService


class MeetupDetailComponent:
    """Single meetup page; its inline comments seed the comment list."""

    def __init__(self, meetups: MeetupService, comments: CommentService, meetup_id: int, is_modal: bool = False):
        self.meetups = meetups
        self.comments = comments
        self.meetup_id = meetup_id
        self.is_modal = is_modal

        self.meetup = meetups.meetup_detail
        self.loading = meetups.loading
        self._unsubscribe = self.meetup.subscribe(self._seed_comments)

    def _seed_comments(self, meetup) -> None:
        if meetup:
            self.comments.seed_comments(meetup.get("comments") or [])

    async def init(self) -> None:
        await self.meetups.get_meetup(self.meetup_id)

    def destroy(self) -> None:
        self._unsubscribe()
        self.comments.clear_comments()
        self.meetups.clear_meetup_detail()
