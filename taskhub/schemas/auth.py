from pydantic import BaseModel, EmailStr, field_validator

from taskhub.auth.passwords import PASSWORD_RULE, is_strong_password
from taskhub.schemas.common import UserOut

def _check_name(v: str | None) -> str | None:
    if v is None:
        return None
    v = v.strip()
    if len(v) < 2:
        raise ValueError("name must be at least 2 characters")
    return v

class RegisterIn(BaseModel):
    email: EmailStr
    password: str
    name: str | None = None

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError(PASSWORD_RULE)
        return v

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return _check_name(v)

class LoginIn(BaseModel):
    email: EmailStr
    password: str

    @field_validator("password")
    @classmethod
    def _password(cls, v: str) -> str:
        if not v:
            raise ValueError("password is required")
        return v

class AuthOut(BaseModel):
    user: UserOut
    access_token: str
    token_type: str = "bearer"

class ProfileUpdateIn(BaseModel):
    name: str | None = None
    email: EmailStr | None = None

    @field_validator("name")
    @classmethod
    def _name(cls, v: str | None) -> str | None:
        return _check_name(v)

class PasswordUpdateIn(BaseModel):
    current_password: str
    new_password: str

    @field_validator("current_password")
    @classmethod
    def _current(cls, v: str) -> str:
        if not v:
            raise ValueError("current password is required")
        return v

    @field_validator("new_password")
    @classmethod
    def _new(cls, v: str) -> str:
        if not is_strong_password(v):
            raise ValueError(PASSWORD_RULE)
        return v
