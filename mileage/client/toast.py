import asyncio
from dataclasses import dataclass
from typing import Dict, List, Literal

import structlog

from mileage.client.signals import Signal

logger = structlog.get_logger()

ToastType = Literal["success", "error"]


@dataclass(frozen=True)
class Toast:
    id: int
    message: str
    type: ToastType


class ToastService:
    """Queue of short-lived notifications; each one removes itself after ``timeout`` seconds."""

    def __init__(self, timeout: float = 4.0):
        self.timeout = timeout
        self._next_id = 0
        self._toasts: Signal[List[Toast]] = Signal([])
        self._timers: Dict[int, asyncio.TimerHandle] = {}
        self.toasts = self._toasts.as_readonly()

    def success(self, message: str) -> None:
        self._add(message, "success")

    def error(self, message: str) -> None:
        self._add(message, "error")

    def dismiss(self, toast_id: int) -> None:
        timer = self._timers.pop(toast_id, None)
        if timer is not None:
            timer.cancel()
        self._toasts.update(lambda ts: [t for t in ts if t.id != toast_id])

    def clear(self) -> None:
        for timer in self._timers.values():
            timer.cancel()
        self._timers.clear()
        self._toasts.set([])

    def _add(self, message: str, type_: ToastType) -> None:
        toast_id = self._next_id
        self._next_id += 1
        self._toasts.update(lambda ts: [*ts, Toast(toast_id, message, type_)])

        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # outside an event loop the toast stays until dismissed
            logger.debug("toast_without_loop", toast_id=toast_id)
            return
        self._timers[toast_id] = loop.call_later(self.timeout, self._expire, toast_id)

    def _expire(self, toast_id: int) -> None:
        self._timers.pop(toast_id, None)
        self.dismiss(toast_id)
