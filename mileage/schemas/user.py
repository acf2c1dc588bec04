from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, field_validator

from mileage.schemas.common import BLANK, require_text

MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_BYTES = 72


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    first_name: str
    last_name: str
    username: str
    email: str


class SignupUser(BaseModel):
    model_config = ConfigDict(validate_default=True)

    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    email: str | None = None
    password: str | None = None
    password_confirmation: str | None = None

    @field_validator("first_name", "last_name", "username")
    @classmethod
    def not_blank(cls, v):
        return require_text(v)

    @field_validator("email")
    @classmethod
    def valid_email(cls, v):
        v = require_text(v)
        try:
            validate_email(v, check_deliverability=False)
        except EmailNotValidError:
            raise ValueError("is invalid")
        return v.lower()

    @field_validator("password")
    @classmethod
    def password_length(cls, v):
        if not v:
            raise ValueError(BLANK)
        if len(v) < MIN_PASSWORD_LENGTH:
            raise ValueError(f"is too short (minimum is {MIN_PASSWORD_LENGTH} characters)")
        # bcrypt only reads the first 72 bytes
        if len(v.encode("utf-8")) > MAX_PASSWORD_BYTES:
            raise ValueError(f"is too long (maximum is {MAX_PASSWORD_BYTES} bytes)")
        return v

    @field_validator("password_confirmation")
    @classmethod
    def confirmation_matches(cls, v, info):
        # only checked when the client sends it and the password itself is valid
        if v is not None and "password" in info.data and v != info.data["password"]:
            raise ValueError("doesn't match Password")
        return v


class SignupRequest(BaseModel):
    user: SignupUser


class LoginRequest(BaseModel):
    username: str = ""
    password: str = ""


class AuthResponse(BaseModel):
    token: str
    user: UserPublic
