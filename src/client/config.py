from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

import httpx

from session.store import SessionStore

from .http import DEFAULT_ORIGIN, AsyncRequestClient, CredentialsMode, RequestClient


# Environment configuration
ENV_ORIGIN = "WEBOOK_ORIGIN"
ENV_POSTS_BASE_URL = "WEBOOK_POSTS_BASE_URL"
ENV_POSTS_CREDENTIALS = "WEBOOK_POSTS_CREDENTIALS"
ENV_USERS_BASE_URL = "WEBOOK_USERS_BASE_URL"
ENV_USERS_CREDENTIALS = "WEBOOK_USERS_CREDENTIALS"

# The identity group talks to the backend directly; the content group goes
# through the application origin, which proxies API paths.
DEFAULT_USERS_BASE_URL = "http://localhost:8080"

POSTS = "posts"
USERS = "users"


def _getenv(environ: Mapping[str, str], name: str, default: Optional[str] = None) -> Optional[str]:
    v = environ.get(name)
    return v if v not in (None, "") else default


@dataclass(frozen=True)
class ResourceGroupConfig:
    """Transport settings shared by every binding in one resource group.

    `base_url` may be empty, meaning "same origin as the application".
    """

    base_url: str = ""
    credentials_mode: CredentialsMode = CredentialsMode.TOKEN_HEADER


@dataclass(frozen=True)
class ClientSettings:
    """
    Per-group transport configuration.

    Each group is configured independently; nothing couples the content
    group's base address or credentials mode to the identity group's.

    Environment variables (all optional)
    - `WEBOOK_ORIGIN`:            origin used when a group's base is empty
    - `WEBOOK_POSTS_BASE_URL`:    content group base address (default: same origin)
    - `WEBOOK_POSTS_CREDENTIALS`: `token` or `cookie` (default: token)
    - `WEBOOK_USERS_BASE_URL`:    identity group base address (default: http://localhost:8080)
    - `WEBOOK_USERS_CREDENTIALS`: `token` or `cookie` (default: token)
    """

    origin: str = DEFAULT_ORIGIN
    posts: ResourceGroupConfig = field(default_factory=ResourceGroupConfig)
    users: ResourceGroupConfig = field(
        default_factory=lambda: ResourceGroupConfig(base_url=DEFAULT_USERS_BASE_URL)
    )

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ClientSettings":
        env = os.environ if environ is None else environ
        return cls(
            origin=_getenv(env, ENV_ORIGIN, DEFAULT_ORIGIN),
            posts=ResourceGroupConfig(
                base_url=_getenv(env, ENV_POSTS_BASE_URL, ""),
                credentials_mode=CredentialsMode.parse(_getenv(env, ENV_POSTS_CREDENTIALS, "token")),
            ),
            users=ResourceGroupConfig(
                base_url=_getenv(env, ENV_USERS_BASE_URL, DEFAULT_USERS_BASE_URL),
                credentials_mode=CredentialsMode.parse(_getenv(env, ENV_USERS_CREDENTIALS, "token")),
            ),
        )

    def group(self, name: str) -> ResourceGroupConfig:
        if name == POSTS:
            return self.posts
        if name == USERS:
            return self.users
        raise KeyError(f"Unknown resource group: {name}")

    def request_client(
        self,
        name: str,
        session_store: SessionStore,
        *,
        client: Optional[httpx.Client] = None,
    ) -> RequestClient:
        cfg = self.group(name)
        return RequestClient(
            session_store,
            base_url=cfg.base_url,
            origin=self.origin,
            credentials_mode=cfg.credentials_mode,
            client=client,
        )

    def async_request_client(
        self,
        name: str,
        session_store: SessionStore,
        *,
        client: Optional[httpx.AsyncClient] = None,
    ) -> AsyncRequestClient:
        cfg = self.group(name)
        return AsyncRequestClient(
            session_store,
            base_url=cfg.base_url,
            origin=self.origin,
            credentials_mode=cfg.credentials_mode,
            client=client,
        )
