"""
Session Models

The core never verifies credentials or token signatures; these models
only carry what the mock session store issues and persists.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class User(BaseModel):
    """The signed-in user as persisted in the session blob."""

    model_config = ConfigDict(str_strip_whitespace=True)

    id: str
    email: str
    name: str
    token: Optional[str] = None


class LoginRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    email: str = ""
    password: str = Field(default="", repr=False)


class RegisterRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    name: str = ""
    email: str = ""
    password: str = Field(default="", repr=False)


class AuthResponse(BaseModel):
    user: User
    token: str
