from __future__ import annotations

import logging
from typing import Any, Optional

from pydantic import ValidationError

from client.envelope import Envelope, LoginResult
from client.errors import WebookClientError
from client.users import UsersApi

from .store import SessionStore


logger = logging.getLogger(__name__)


def _remember(store: SessionStore, envelope: Envelope) -> None:
    try:
        result = LoginResult.model_validate(envelope.data)
    except ValidationError as ve:
        raise WebookClientError(f"Malformed login payload: {ve}") from ve
    store.set_token(result.access_token)
    store.set_user_id(str(result.user_id))
    logger.info("Logged in as user %s", result.user_id)


def _handle_login_payload(store: SessionStore, payload: Any) -> Envelope:
    envelope = Envelope.parse(payload)
    if envelope.ok:
        _remember(store, envelope)
    else:
        # Leave any existing session untouched on failure
        logger.info("Login rejected: %s (code=%s)", envelope.msg, envelope.code)
    return envelope


def login(users: UsersApi, store: SessionStore, email: str, password: str) -> Envelope:
    """
    Log in and record the session.

    On a success envelope the access token and user id are written to
    `store`. On a business error the store is left as it was and the
    envelope is returned so the caller can show `msg`.
    """
    return _handle_login_payload(store, users.login(email, password))


async def alogin(users: UsersApi, store: SessionStore, email: str, password: str) -> Envelope:
    """`login` for a `UsersApi` bound to an `AsyncRequestClient`."""
    return _handle_login_payload(store, await users.login(email, password))


def logout(store: SessionStore, users: Optional[UsersApi] = None, refresh_token: Optional[str] = None) -> None:
    """
    Clear the session, revoking `refresh_token` server-side first when given.

    The store is cleared even if the revoke call fails; the failure is then
    re-raised.
    """
    try:
        if users is not None and refresh_token:
            users.logout(refresh_token)
    except Exception:
        logger.warning("Logout request failed; clearing local session anyway")
        raise
    finally:
        store.clear()
        logger.info("Session cleared")


async def alogout(store: SessionStore, users: Optional[UsersApi] = None, refresh_token: Optional[str] = None) -> None:
    try:
        if users is not None and refresh_token:
            await users.logout(refresh_token)
    except Exception:
        logger.warning("Logout request failed; clearing local session anyway")
        raise
    finally:
        store.clear()
        logger.info("Session cleared")
