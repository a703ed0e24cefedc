# taskboard/schemas/user_schema.py
from __future__ import annotations

import re
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, field_validator


class UserPublic(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    email: str
    name: Optional[str] = None
    image: Optional[str] = None


class TeamMember(BaseModel):
    id: int
    name: str
    email: Optional[str] = None
    image: Optional[str] = None


def _check_password(value: str) -> str:
    if len(value) < 8:
        raise ValueError("Password must be at least 8 chars")
    if not re.search(r"[A-Z]", value):
        raise ValueError("Must contain uppercase")
    if not re.search(r"\d", value):
        raise ValueError("Must contain number")
    if not re.search(r"[^A-Za-z0-9]", value):
        raise ValueError("Must contain symbol")
    return value


class RegisterRequest(BaseModel):
    email: EmailStr
    password: str
    confirm_password: str
    name: Optional[str] = None

    @field_validator("password")
    def validate_password(cls, value):
        return _check_password(value)

    @field_validator("confirm_password")
    def passwords_match(cls, v, info):
        if v != info.data.get("password"):
            raise ValueError("Passwords do not match.")
        return v


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class Token(BaseModel):
    access_token: str
    token_type: str = "bearer"
