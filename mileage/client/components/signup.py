from typing import Dict, List

from email_validator import EmailNotValidError, validate_email

from mileage.client.errors import ApiError
from mileage.client.navigation import Router
from mileage.client.session import AuthenticationService
from mileage.client.signals import Signal

FIELDS = ("first_name", "last_name", "username", "email", "password", "password_confirmation")

UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."


class SignupComponent:
    def __init__(self, session: AuthenticationService, router: Router):
        self.session = session
        self.router = router
        self.form: Dict[str, str] = {field: "" for field in FIELDS}
        self.errors: List[str] = []
        self.submitting = Signal(False)

    def set_values(self, **values: str) -> None:
        for key, value in values.items():
            if key not in self.form:
                raise KeyError(key)
            self.form[key] = value

    @property
    def is_valid(self) -> bool:
        if any(not (self.form[field] or "").strip() for field in FIELDS):
            return False
        try:
            validate_email(self.form["email"], check_deliverability=False)
        except EmailNotValidError:
            return False
        return True

    async def submit(self) -> bool:
        if not self.is_valid:
            return False

        self.submitting.set(True)
        try:
            response = await self.session.signup(dict(self.form))
        except ApiError as exc:
            # status 0 and 5xx carry no field messages worth showing
            if 400 <= exc.status_code < 500 and exc.errors:
                self.errors = list(exc.errors)
            else:
                self.errors = [UNEXPECTED_ERROR]
            return False
        finally:
            self.submitting.set(False)

        self.errors = []
        if response and response.get("token"):
            self.session.start_session(response)
            self.router.navigate("/")
        else:
            self.router.navigate("/login")
        return True
