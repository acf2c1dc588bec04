from typing import List

from mileage.client.signals import Signal


class Router:
    """Tracks the current view path; pages navigate through it."""

    def __init__(self, initial: str = "/"):
        self._url = Signal(initial)
        self.url = self._url.as_readonly()
        self.history: List[str] = [initial]

    def navigate(self, path: str) -> None:
        self.history.append(path)
        self._url.set(path)
