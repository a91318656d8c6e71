from __future__ import annotations

from typing import Any, Union

from .http import AsyncRequestClient, RequestClient


class UsersApi:
    """Identity resource bindings.

    Passwords only ever travel in request bodies; nothing here touches the
    session store. See `session.auth` for the flows that do.
    """

    def __init__(self, client: Union[RequestClient, AsyncRequestClient]) -> None:
        self._client = client

    def signup(self, email: str, password: str, confirm_password: str) -> Any:
        return self._client.request(
            "/users",
            method="POST",
            body={"email": email, "password": password, "confirmPassword": confirm_password},
        )

    def login(self, email: str, password: str) -> Any:
        return self._client.request("/users/login", method="POST", body={"email": email, "password": password})

    def get_profile(self, id: Union[int, str]) -> Any:
        return self._client.request(f"/users/{id}")

    def update_password(self, id: Union[int, str], old_password: str, new_password: str) -> Any:
        return self._client.request(
            f"/users/{id}/password",
            method="PUT",
            body={"oldPassword": old_password, "newPassword": new_password},
        )

    def logout(self, refresh_token: str) -> Any:
        """Revoke a refresh token server-side."""
        return self._client.request("/auth/logout", method="POST", body={"refreshToken": refresh_token})
