import json
from typing import Any, Dict, List, Optional

import httpx
import structlog

from mileage.client.errors import ApiError, error_message
from mileage.client.http import send
from mileage.client.signals import Signal
from mileage.client.toast import ToastService

logger = structlog.get_logger()

Comment = Dict[str, Any]


class CommentService:
    def __init__(self, http: httpx.AsyncClient, toasts: ToastService):
        self.http = http
        self.toasts = toasts

        self._comments: Signal[List[Comment]] = Signal([])
        self._loading = Signal(False)
        self._total_pages = Signal(1)
        self._current_page = Signal(1)
        self._load_ticket = 0

        self.comments = self._comments.as_readonly()
        self.loading = self._loading.as_readonly()
        self.total_pages = self._total_pages.as_readonly()
        self.current_page = self._current_page.as_readonly()

    async def get_comments(self, meetup_id: int, page: int = 1) -> None:
        self._load_ticket += 1
        ticket = self._load_ticket
        self._loading.set(True)
        try:
            data = await send(
                self.http, "GET", f"/meetups/{meetup_id}/comments", params={"page": page}
            )
            comments = json.loads(data["comments"])
            total_pages, current_page = int(data["total_pages"]), int(data["current_page"])
        except (ApiError, KeyError, TypeError, ValueError) as exc:
            logger.error("comments_load_failed", meetup_id=meetup_id, error=str(exc))
            if ticket == self._load_ticket:
                self._comments.set([])
                self._loading.set(False)
            return
        if ticket != self._load_ticket:
            return
        self._comments.set(comments if isinstance(comments, list) else [])
        self._total_pages.set(total_pages)
        self._current_page.set(current_page)
        self._loading.set(False)

    async def add_comment(self, meetup_id: int, content: str) -> Optional[Comment]:
        try:
            created = await send(
                self.http,
                "POST",
                f"/meetups/{meetup_id}/comments",
                json={"comment": {"content": content}},
            )
        except ApiError as exc:
            logger.error("comment_create_failed", meetup_id=meetup_id, error=str(exc))
            self.toasts.error(error_message(exc, "Failed to add comment. Please try again."))
            return None
        self._comments.update(lambda cs: [*cs, created])
        self.toasts.success("Comment posted!")
        return created

    async def delete_comment(self, meetup_id: int, comment_id: int) -> bool:
        try:
            await send(self.http, "DELETE", f"/meetups/{meetup_id}/comments/{comment_id}")
        except ApiError as exc:
            logger.error("comment_delete_failed", comment_id=comment_id, error=str(exc))
            self.toasts.error(error_message(exc, "Failed to delete comment."))
            return False
        self._comments.update(lambda cs: [c for c in cs if c.get("id") != comment_id])
        return True

    def seed_comments(self, comments: List[Comment]) -> None:
        self._comments.set(list(comments))

    def clear_comments(self) -> None:
        self._comments.set([])
        self._total_pages.set(1)
        self._current_page.set(1)
