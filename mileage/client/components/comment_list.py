from mileage.client.comments import CommentService


class CommentListComponent:
    def __init__(self, comments: CommentService, meetup_id: int):
        self.service = comments
        self.meetup_id = meetup_id
        self.comments = comments.comments
        self.loading = comments.loading
        self.total_pages = comments.total_pages
        self.current_page = comments.current_page

    @property
    def has_previous(self) -> bool:
        return self.current_page() > 1

    @property
    def has_next(self) -> bool:
        return self.current_page() < self.total_pages()

    async def go_to(self, page: int) -> None:
        page = max(1, min(page, self.total_pages()))
        await self.service.get_comments(self.meetup_id, page)

    async def next_page(self) -> None:
        if self.has_next:
            await self.go_to(self.current_page() + 1)

    async def previous_page(self) -> None:
        if self.has_previous:
            await self.go_to(self.current_page() - 1)
