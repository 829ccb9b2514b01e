from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ── Auth ─────────────────────────────────────────────────────────────────────
# Fields are optional on purpose: missing values are reported as 400 by the
# auth service, not as framework validation errors.

class RegisterIn(BaseModel):
    username: Optional[str] = None
    email: Optional[str] = None
    password: Optional[str] = None


class LoginIn(BaseModel):
    username: Optional[str] = None
    password: Optional[str] = None


class RegisteredUser(BaseModel):
    user_id: int
    username: str


class RegisterOut(BaseModel):
    message: str
    user: RegisteredUser


class SessionUser(BaseModel):
    user_id: int = Field(alias="userId")
    username: str

    model_config = ConfigDict(populate_by_name=True)


class LoginOut(BaseModel):
    message: str
    user: SessionUser


class StatusOut(BaseModel):
    is_logged_in: bool = Field(alias="isLoggedIn")
    user: Optional[SessionUser] = None

    model_config = ConfigDict(populate_by_name=True)


class MessageOut(BaseModel):
    message: str


# ── Favorites ────────────────────────────────────────────────────────────────

class FavoriteIn(BaseModel):
    id: Optional[Union[int, str]] = None
    title: Optional[str] = None
    poster_path: Optional[str] = None


class FavoriteOut(BaseModel):
    id: int
    title: str
    poster_path: Optional[str] = None
