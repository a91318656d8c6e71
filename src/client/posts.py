from __future__ import annotations

from typing import Any, Union

from .http import AsyncRequestClient, RequestClient


DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 10


class PostsApi:
    """
    Content resource bindings.

    Each method is a fixed method/path/body mapping onto exactly one
    `client.request(...)` call and returns what the client returns: the parsed
    JSON body for `RequestClient`, an awaitable of it for `AsyncRequestClient`.
    Validation and draft -> published transitions belong to the backend.
    """

    def __init__(self, client: Union[RequestClient, AsyncRequestClient]) -> None:
        self._client = client

    # --------------- Drafts & publishing ---------------
    def save_post(self, id: int, title: str, content: str) -> Any:
        """Create or update a draft."""
        return self._client.request(
            "/posts", method="POST", body={"id": id, "title": title, "content": content}
        )

    def publish_post(self, id: int, title: str, content: str) -> Any:
        return self._client.request(
            "/posts/publish", method="POST", body={"id": id, "title": title, "content": content}
        )

    def get_draft(self, id: int) -> Any:
        """Author-only view of a post, whatever its status."""
        return self._client.request(f"/posts/draft/{id}")

    def get_published_post(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}")

    # --------------- Listing ---------------
    def list_mine(self, page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> Any:
        return self._client.request("/posts/author", params={"page": page, "pageSize": page_size})

    def list_public(self, page: int = DEFAULT_PAGE, page_size: int = DEFAULT_PAGE_SIZE) -> Any:
        return self._client.request("/posts", params={"page": page, "pageSize": page_size})

    def delete_post(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}", method="DELETE")

    # --------------- Interactions ---------------
    def like(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}/like", method="POST")

    def unlike(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}/unlike", method="POST")

    def collect(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}/collect", method="POST")

    def uncollect(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}/uncollect", method="POST")

    def mark_read(self, id: int) -> Any:
        return self._client.request(f"/posts/{id}/read", method="POST")
