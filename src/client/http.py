from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional, Union

import httpx

from session.store import SessionStore

from .errors import ApiStatusError


logger = logging.getLogger(__name__)

DEFAULT_ORIGIN = "http://localhost:3000"


class CredentialsMode(str, Enum):
    """How a resource group proves who the caller is.

    - TOKEN_HEADER: `Authorization: Bearer <token>` from the session store;
      cookies are never sent.
    - COOKIE: the group's cookie jar is sent; no bearer header is added.
    """

    TOKEN_HEADER = "token"
    COOKIE = "cookie"

    @classmethod
    def parse(cls, raw: "str | CredentialsMode") -> "CredentialsMode":
        if isinstance(raw, CredentialsMode):
            return raw
        norm = str(raw).strip().lower()
        aliases = {"token": cls.TOKEN_HEADER, "bearer": cls.TOKEN_HEADER, "cookie": cls.COOKIE, "include": cls.COOKIE}
        if norm not in aliases:
            raise ValueError(f"Unknown credentials mode: {raw!r} (expected 'token' or 'cookie')")
        return aliases[norm]


@dataclass(frozen=True)
class RequestConfig:
    """One outbound call. Built per request and not retained."""

    method: str
    path: str
    body: Any = None
    params: Optional[Mapping[str, Any]] = None
    extra_headers: Optional[Mapping[str, str]] = None
    # None means "use the client's default"
    credentials_mode: Optional[Union[CredentialsMode, str]] = None


@dataclass(frozen=True)
class ApiResponse:
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    def raise_for_status(self) -> Any:
        """Return the body on 2xx; raise ApiStatusError otherwise."""
        if not self.ok:
            raise ApiStatusError(self.status_code, self.body)
        return self.body


def resolve_base_url(base_url: str, origin: str) -> str:
    """Pick the address requests are sent to.

    An empty `base_url` means "same origin", i.e. the configured application
    origin (the dev server that proxies API paths to the backend).
    """
    base = (base_url or "").strip() or (origin or "").strip()
    if not base:
        raise ValueError("Either base_url or origin must be set")
    return base.rstrip("/")


def _serialize_body(body: Any) -> bytes:
    return json.dumps(body, separators=(",", ":")).encode("utf-8")


class _RequestBuilder:
    """Header and request construction shared by the sync and async clients."""

    def __init__(
        self,
        session_store: SessionStore,
        *,
        base_url: str = "",
        origin: str = DEFAULT_ORIGIN,
        credentials_mode: CredentialsMode = CredentialsMode.TOKEN_HEADER,
    ) -> None:
        self._store = session_store
        self._base_url = resolve_base_url(base_url, origin)
        self._credentials_mode = CredentialsMode.parse(credentials_mode)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def credentials_mode(self) -> CredentialsMode:
        return self._credentials_mode

    def _build_headers(self, config: RequestConfig, mode: CredentialsMode) -> httpx.Headers:
        headers = httpx.Headers({"Content-Type": "application/json"})
        if config.extra_headers:
            # Caller headers win over the default, case-insensitively
            headers.update(config.extra_headers)
        if mode is CredentialsMode.TOKEN_HEADER:
            session = self._store.get()
            if session.has_token:
                headers["Authorization"] = f"Bearer {session.token}"
        return headers

    def _build_request(self, http_client: httpx.Client | httpx.AsyncClient, config: RequestConfig) -> httpx.Request:
        if config.credentials_mode is not None:
            mode = CredentialsMode.parse(config.credentials_mode)
        else:
            mode = self._credentials_mode
        headers = self._build_headers(config, mode)
        content = _serialize_body(config.body) if config.body is not None else None
        request = http_client.build_request(
            config.method.upper(),
            f"{self._base_url}{config.path}",
            params=dict(config.params) if config.params else None,
            headers=headers,
            content=content,
        )
        if mode is CredentialsMode.TOKEN_HEADER:
            # Cookies from the client's jar only travel in cookie mode
            request.headers.pop("Cookie", None)
        logger.debug(
            "%s %s (credentials=%s, bearer=%s)",
            request.method,
            request.url,
            mode.value,
            "Authorization" in request.headers,
        )
        return request

    @staticmethod
    def _to_api_response(resp: httpx.Response) -> ApiResponse:
        # No status branching: a JSON error body is still a body.
        # Malformed JSON raises json.JSONDecodeError to the caller unchanged.
        return ApiResponse(status_code=resp.status_code, body=resp.json())


class RequestClient(_RequestBuilder):
    """
    Blocking HTTP wrapper that every resource binding funnels through.

    Notes
    - One instance per resource group: it owns the group's base address,
      credentials mode and cookie jar.
    - `request()` returns the parsed JSON body whatever the HTTP status;
      `send()` also exposes the status code.
    - No retries and no timeout by default. Transport errors propagate as
      `httpx.TransportError`.
    - Never mutates the session store.
    """

    def __init__(
        self,
        session_store: SessionStore,
        *,
        base_url: str = "",
        origin: str = DEFAULT_ORIGIN,
        credentials_mode: CredentialsMode = CredentialsMode.TOKEN_HEADER,
        timeout: Optional[float] = None,
        client: Optional[httpx.Client] = None,
    ) -> None:
        super().__init__(session_store, base_url=base_url, origin=origin, credentials_mode=credentials_mode)
        self._owns_client = client is None
        self._client = client or httpx.Client(timeout=timeout)

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "RequestClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # --------------- Public API ---------------
    def send(self, config: RequestConfig) -> ApiResponse:
        request = self._build_request(self._client, config)
        resp = self._client.send(request)
        return self._to_api_response(resp)

    def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        credentials_mode: Optional[Union[CredentialsMode, str]] = None,
    ) -> Any:
        """Issue one call and return the parsed JSON body (status ignored)."""
        config = RequestConfig(
            method=method,
            path=path,
            body=body,
            params=params,
            extra_headers=headers,
            credentials_mode=credentials_mode,
        )
        return self.send(config).body


class AsyncRequestClient(_RequestBuilder):
    """Event-loop flavour of `RequestClient` over `httpx.AsyncClient`.

    Calls are independent coroutines: the client imposes no ordering,
    deduplication or cancellation across concurrent requests.
    """

    def __init__(
        self,
        session_store: SessionStore,
        *,
        base_url: str = "",
        origin: str = DEFAULT_ORIGIN,
        credentials_mode: CredentialsMode = CredentialsMode.TOKEN_HEADER,
        timeout: Optional[float] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        super().__init__(session_store, base_url=base_url, origin=origin, credentials_mode=credentials_mode)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout)

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "AsyncRequestClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def send(self, config: RequestConfig) -> ApiResponse:
        request = self._build_request(self._client, config)
        resp = await self._client.send(request)
        return self._to_api_response(resp)

    async def request(
        self,
        path: str,
        *,
        method: str = "GET",
        body: Any = None,
        params: Optional[Mapping[str, Any]] = None,
        headers: Optional[Mapping[str, str]] = None,
        credentials_mode: Optional[Union[CredentialsMode, str]] = None,
    ) -> Any:
        config = RequestConfig(
            method=method,
            path=path,
            body=body,
            params=params,
            extra_headers=headers,
            credentials_mode=credentials_mode,
        )
        return (await self.send(config)).body


__all__ = [
    "ApiResponse",
    "AsyncRequestClient",
    "CredentialsMode",
    "DEFAULT_ORIGIN",
    "RequestClient",
    "RequestConfig",
    "resolve_base_url",
]
