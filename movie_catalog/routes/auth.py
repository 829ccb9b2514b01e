# movie_catalog/routes/auth.py
from __future__ import annotations

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.core.settings import settings
from movie_catalog.database import get_async_db
from movie_catalog.schemas import LoginIn, LoginOut, MessageOut, RegisterIn, RegisterOut, StatusOut
from movie_catalog.security import SessionContext, get_session_context
from movie_catalog.services import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        key=settings.session_cookie_name,
        value=token,
        max_age=settings.session_max_age,
        httponly=True,
        secure=settings.session_cookie_secure,
        samesite="lax",
        path="/",
    )


@router.post("/register", response_model=RegisterOut, status_code=201, summary="Register")
async def register(payload: RegisterIn, db: AsyncSession = Depends(get_async_db)):
    return await auth_service.register(db, payload.username, payload.email, payload.password)


@router.post("/login", response_model=LoginOut, summary="Login")
async def login(
    payload: LoginIn,
    response: Response,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_async_db),
):
    body, token = await auth_service.login(db, payload.username, payload.password, previous_token=ctx.token)
    _set_session_cookie(response, token)
    return body


@router.post("/logout", response_model=MessageOut, summary="Logout")
async def logout(
    response: Response,
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_async_db),
):
    body = await auth_service.logout(db, ctx.token)
    response.delete_cookie(settings.session_cookie_name, path="/")
    return body


@router.get("/status", response_model=StatusOut, response_model_exclude_none=True, summary="Status")
async def auth_status(
    ctx: SessionContext = Depends(get_session_context),
    db: AsyncSession = Depends(get_async_db),
):
    return await auth_service.status(db, ctx.token)
