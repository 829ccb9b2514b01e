# movie_catalog/services/auth_service.py
"""
Register / login / logout / status on top of the user and session stores.

A client is either anonymous or holds one live session; login moves it to
authenticated, logout or expiry moves it back.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Tuple

from email_validator import EmailNotValidError, validate_email
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from movie_catalog.db.crud import sessions as session_store
from movie_catalog.db.crud import users as user_store
from movie_catalog.errors import AuthError, InternalError, ValidationError
from movie_catalog.models_auth import User
from movie_catalog.services.passwords import hash_password, verify_password

logger = logging.getLogger(__name__)

# Same text for unknown user and wrong password
INVALID_CREDENTIALS = "Invalid username or password."

USERNAME_MAX = User.__table__.c.username.type.length
EMAIL_MAX = User.__table__.c.email.type.length


def _session_user(user_id: int, username: str) -> Dict[str, Any]:
    return {"userId": user_id, "username": username}


async def register(db: AsyncSession, username: Optional[str], email: Optional[str], password: Optional[str]) -> Dict[str, Any]:
    if not username or not email or not password:
        raise ValidationError("Username, email, and password required.")
    if len(username) > USERNAME_MAX or len(email) > EMAIL_MAX:
        raise ValidationError("Username or email is too long.")
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError("Email address is not valid.")

    password_hash = await hash_password(password)
    try:
        user = await user_store.create_user(db, username, email, password_hash)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Registration error for username=%s", username)
        raise InternalError("Registration failed due to server error.")

    logger.info("User registered: %s (ID: %s)", user.username, user.user_id)
    return {
        "message": "Registration successful! You can now log in.",
        "user": {"user_id": user.user_id, "username": user.username},
    }


async def login(
    db: AsyncSession,
    username: Optional[str],
    password: Optional[str],
    previous_token: Optional[str] = None,
) -> Tuple[Dict[str, Any], str]:
    """Check credentials and open a new session. Returns (body, session token)."""
    if not username or not password:
        raise ValidationError("Username and password required.")

    try:
        user = await user_store.find_user_by_username(db, username)
    except SQLAlchemyError:
        logger.exception("Login error for username=%s", username)
        raise InternalError("Login failed due to server error.")

    if user is None or not await verify_password(password, user.password_hash):
        raise AuthError(INVALID_CREDENTIALS)

    try:
        # never carry a pre-login token over into the authenticated state
        await session_store.destroy_session(db, previous_token)
        token = await session_store.create_session(db, user.user_id)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Login error creating session for user %s", user.user_id)
        raise InternalError("Login failed due to server error.")

    logger.info("User logged in: %s (ID: %s)", user.username, user.user_id)
    body = {"message": "Login successful!", "user": _session_user(user.user_id, user.username)}
    return body, token


async def logout(db: AsyncSession, token: Optional[str]) -> Dict[str, Any]:
    try:
        await session_store.destroy_session(db, token)
    except SQLAlchemyError:
        await db.rollback()
        logger.exception("Logout error")
        raise InternalError("Logout failed.")
    logger.info("User logged out")
    return {"message": "Logout successful."}


async def status(db: AsyncSession, token: Optional[str]) -> Dict[str, Any]:
    try:
        user_id = await session_store.resolve_session(db, token)
        user = await user_store.get_user(db, user_id) if user_id is not None else None
    except SQLAlchemyError:
        logger.exception("Status check failed; reporting anonymous")
        return {"isLoggedIn": False}

    if user is None:
        return {"isLoggedIn": False}
    return {"isLoggedIn": True, "user": _session_user(user.user_id, user.username)}
