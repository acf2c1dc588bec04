import structlog

from mileage.client.errors import ApiError
from mileage.client.navigation import Router
from mileage.client.session import AuthenticationService
from mileage.client.signals import Signal

logger = structlog.get_logger()


class LoginComponent:
    def __init__(self, session: AuthenticationService, router: Router):
        self.session = session
        self.router = router
        self.username = ""
        self.password = ""
        self.is_error = False
        self.submitting = Signal(False)

    @property
    def is_valid(self) -> bool:
        return bool(self.username.strip()) and bool(self.password)

    async def submit(self) -> bool:
        if not self.is_valid:
            return False

        self.submitting.set(True)
        try:
            response = await self.session.login(self.username, self.password)
        except ApiError as exc:
            logger.info("login_rejected", status_code=exc.status_code)
            self.is_error = True
            return False
        finally:
            self.submitting.set(False)

        user = {**(response.get("user") or {}), "username": self.username}
        self.session.start_session({**response, "user": user})
        self.is_error = False
        self.router.navigate("/")
        return True
