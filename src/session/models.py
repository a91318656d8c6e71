from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, Field


class Session(BaseModel):
    """
    Client-held authentication session.

    Fields
    - token: opaque bearer credential attached to outbound requests. Never
      validated client-side; presence is all that matters.
    - user_id: identifier of the logged-in user. Its presence is what makes the
      session "authenticated" for navigation purposes.

    Notes
    - Passwords never belong here; they only flow through request bodies.
    - The persisted form uses the wire names `token` and `userId`.
    """

    token: Optional[str] = Field(default=None, description="Bearer token, if any")
    user_id: Optional[str] = Field(
        default=None,
        alias="userId",
        description="Authenticated user identifier, if any",
    )

    model_config = {"populate_by_name": True}

    @property
    def is_authenticated(self) -> bool:
        return bool(self.user_id)

    @property
    def has_token(self) -> bool:
        return bool(self.token)

    @classmethod
    def empty(cls) -> "Session":
        """Convenience constructor for a logged-out session."""
        return cls()
