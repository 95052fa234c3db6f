import re
from typing import Annotated

from pydantic import BaseModel, Field, StringConstraints, ValidationInfo, field_validator
from pydantic_core import PydanticCustomError

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
# letters (any script), whitespace, hyphens, dots and apostrophes
NAME_RE = re.compile(r"^(?:[^\W\d_]|[\s\-.'])+$")

Name = Annotated[str, StringConstraints(strip_whitespace=True, min_length=2, max_length=255)]
Email = Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=255)]
Password = Annotated[str, StringConstraints(min_length=8, max_length=72)]


def _check_email(value: str) -> str:
    if not EMAIL_RE.match(value):
        raise ValueError("The email field must be a valid email address.")
    return value


class RegisterRequest(BaseModel):
    name: Name
    email: Email
    password: Password
    password_confirmation: str = Field(default="", validate_default=True)

    @field_validator("name")
    @classmethod
    def validate_name(cls, value: str) -> str:
        if not NAME_RE.match(value):
            raise ValueError("The name field format is invalid.")
        return value

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password_confirmation")
    @classmethod
    def validate_password_confirmed(cls, value: str, info: ValidationInfo) -> str:
        # runs alongside the other field checks; skipped if password itself failed
        if "password" in info.data and info.data["password"] != value:
            raise PydanticCustomError(
                "password_confirmation",
                "The {field} field confirmation does not match.",
                {"field": "password"},
            )
        return value


class LoginRequest(BaseModel):
    email: Email
    password: Annotated[str, StringConstraints(min_length=1)]

    @field_validator("email")
    @classmethod
    def validate_email(cls, value: str) -> str:
        return _check_email(value)
