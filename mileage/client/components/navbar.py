from typing import Optional

from mileage.client.navigation import Router
from mileage.client.session import AuthenticationService


class NavbarComponent:
    def __init__(self, session: AuthenticationService, router: Router):
        self.session = session
        self.router = router

    @property
    def is_logged_in(self) -> bool:
        return self.session.is_logged_in()

    @property
    def username(self) -> Optional[str]:
        user = self.session.current_user()
        return user["username"] if user else None

    def logout(self) -> None:
        self.session.logout()
