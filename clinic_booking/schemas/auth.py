"""Authentication schemas."""
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

from ..core.security import UserRole


class UserRegister(BaseModel):
    """User registration request.

    Accepts the camelCase names used by the web client as well as the
    snake_case field names.
    """
    model_config = ConfigDict(populate_by_name=True)

    role: UserRole = Field(alias="userType")
    username: str = Field(alias="userName", min_length=1, max_length=100)
    email: str = Field(alias="emailId", min_length=3, max_length=255)
    password: str = Field(min_length=1)

    first_name: Optional[str] = Field(default=None, alias="firstName", max_length=100)
    last_name: Optional[str] = Field(default=None, alias="lastName", max_length=100)
    gender: Optional[str] = Field(default=None, max_length=20)
    age: Optional[int] = Field(default=None, ge=0)
    contact: Optional[str] = Field(default=None, max_length=20)
    address: Optional[str] = Field(default=None, max_length=255)

    @field_validator("first_name", "last_name", "gender", "age", "contact", "address", mode="before")
    @classmethod
    def blank_to_none(cls, value):
        # HTML forms submit untouched inputs as ""
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @field_validator("contact", mode="before")
    @classmethod
    def contact_as_text(cls, value):
        if isinstance(value, int) and not isinstance(value, bool):
            return str(value)
        return value


class UserLogin(BaseModel):
    """User login request."""
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(alias="emailId")
    password: str


class AuthResponse(BaseModel):
    """Returned by register and login; the token is also set as a cookie."""
    message: str
    token: str


class MessageResponse(BaseModel):
    message: str
