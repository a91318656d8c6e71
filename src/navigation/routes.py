from __future__ import annotations

from typing import List

from .guard import Route


LOGIN = Route(name="login", path="/")
PROFILE = Route(name="profile", path="/profile", requires_auth=True)


def default_routes() -> List[Route]:
    """The application's route table: a public login page and a protected profile."""
    return [LOGIN, PROFILE]
