from mileage.client.comments import CommentService
from mileage.client.signals import Computed, Signal

MAX_LENGTH = 2000


class CommentFormComponent:
    def __init__(self, comments: CommentService, meetup_id: int):
        self.service = comments
        self.meetup_id = meetup_id
        self.content = Signal("")
        self.char_count = Computed(lambda: len(self.content() or ""), self.content)

    def set_content(self, value: str) -> None:
        self.content.set(value)

    @property
    def is_valid(self) -> bool:
        content = self.content() or ""
        return bool(content.strip()) and len(content) <= MAX_LENGTH

    async def submit(self) -> bool:
        if not self.is_valid:
            return False
        await self.service.add_comment(self.meetup_id, self.content())
        self.content.set("")
        return True

    def destroy(self) -> None:
        self.char_count.dispose()
