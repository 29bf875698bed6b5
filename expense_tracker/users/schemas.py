import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _check_name(value: str) -> str:
    value = (value or "").strip()
    if len(value) < 2:
        raise ValueError("Name must be at least 2 characters long")
    return value


def _check_email(value: str) -> str:
    value = (value or "").strip().lower()
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please provide a valid email address")
    return value


# -------- SIGNUP / LOGIN --------
class SignupSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, validate_default=True)

    name: str = ""
    email: str = ""
    password: str = ""
    confirm_password: str = Field("", alias="confirmPassword")

    @field_validator("name")
    @classmethod
    def name_length(cls, value: str) -> str:
        return _check_name(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: str) -> str:
        return _check_email(value)

    @field_validator("password")
    @classmethod
    def password_length(cls, value: str) -> str:
        if len(value or "") < 6:
            raise ValueError("Password must be at least 6 characters long")
        return value

    @field_validator("confirm_password")
    @classmethod
    def passwords_match(cls, value: str, info: ValidationInfo) -> str:
        if value != info.data.get("password"):
            raise ValueError("Passwords do not match")
        return value


class LoginSchema(BaseModel):
    email: Optional[str] = None
    password: Optional[str] = None


# -------- PROFILE --------
class ProfileUpdateSchema(BaseModel):
    name: Optional[str] = None
    email: Optional[str] = None

    @field_validator("name")
    @classmethod
    def name_length(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_name(value)

    @field_validator("email")
    @classmethod
    def email_format(cls, value: Optional[str]) -> Optional[str]:
        return None if value is None else _check_email(value)


class UserDisplaySchema(BaseModel):
    id: int
    name: str
    email: str

    class Config:
        from_attributes = True
