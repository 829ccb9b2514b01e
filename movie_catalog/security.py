# movie_catalog/security.py
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from fastapi import Depends, Request
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.core.settings import settings
from movie_catalog.database import get_async_db
from movie_catalog.db.crud.sessions import resolve_session
from movie_catalog.errors import AuthError, LoginRequired

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionContext:
    """Per-request view of the caller's session, passed explicitly to handlers."""
    token: Optional[str] = None
    user_id: Optional[int] = None

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def session_token(request: Request) -> Optional[str]:
    return request.cookies.get(settings.session_cookie_name) or None


async def get_session_context(
    request: Request,
    db: AsyncSession = Depends(get_async_db),
) -> SessionContext:
    token = session_token(request)
    if not token:
        return SessionContext()
    try:
        user_id = await resolve_session(db, token)
    except SQLAlchemyError:
        logger.exception("Session lookup failed; treating request as anonymous")
        user_id = None
    return SessionContext(token=token, user_id=user_id)


def require_user(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    """
    Auth-only dependency for JSON endpoints.
    Anonymous callers get 401 + message.
    """
    if not ctx.is_authenticated:
        raise AuthError("Authentication required. Please log in.")
    return ctx


def require_page_user(ctx: SessionContext = Depends(get_session_context)) -> SessionContext:
    """Guard for HTML pages; anonymous visitors are redirected to the login page."""
    if not ctx.is_authenticated:
        raise LoginRequired("Please log in to continue")
    return ctx
