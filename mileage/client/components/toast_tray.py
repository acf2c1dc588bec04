from typing import List

from mileage.client.toast import Toast, ToastService


class ToastTrayComponent:
    """Renders the notification queue, newest last."""

    def __init__(self, toasts: ToastService):
        self.service = toasts
        self.toasts = toasts.toasts

    def items(self) -> List[Toast]:
        return list(self.toasts())

    def dismiss(self, toast_id: int) -> None:
        self.service.dismiss(toast_id)
