from __future__ import annotations

from enum import IntEnum
from typing import Any, List, Optional

from pydantic import BaseModel, Field, ValidationError

from .errors import ApiEnvelopeError, WebookClientError


# Business codes carried in the envelope's `code` field
CODE_SUCCESS = 0
CODE_INVALID_PARAMS = 400001
CODE_UNAUTHORIZED = 401001
CODE_FORBIDDEN = 403001
CODE_NOT_FOUND = 404001
CODE_DUPLICATE_EMAIL = 409001
CODE_INTERNAL_ERROR = 500001


class Envelope(BaseModel):
    """Uniform backend response wrapper: `{code, msg, data?}`.

    `code == 0` is success; anything else is a business error whose text is
    in `msg`. The HTTP status is usually 200 either way, which is why callers
    look here rather than at the status code.
    """

    code: int
    msg: str = ""
    data: Any = None

    @property
    def ok(self) -> bool:
        return self.code == CODE_SUCCESS

    def unwrap(self) -> Any:
        """Return `data` on success; raise ApiEnvelopeError otherwise."""
        if not self.ok:
            raise ApiEnvelopeError(self.code, self.msg or "webook API error")
        return self.data

    @classmethod
    def parse(cls, payload: Any) -> "Envelope":
        try:
            return cls.model_validate(payload)
        except ValidationError as ve:
            raise WebookClientError(f"Malformed response envelope: {ve}") from ve


class PostStatus(IntEnum):
    DRAFT = 0
    PUBLISHED = 1
    PRIVATE = 2


class Post(BaseModel):
    """A post as returned by detail and list endpoints.

    Interaction counters are only present on list responses.
    """

    id: int
    title: str = ""
    content: str = ""
    status: Optional[PostStatus] = None
    author_id: Optional[int] = Field(default=None, alias="authorId")
    ctime: Optional[int] = Field(default=None, description="Created at, epoch millis")
    utime: Optional[int] = Field(default=None, description="Updated at, epoch millis")
    like_cnt: int = Field(default=0, alias="likeCnt")
    collect_cnt: int = Field(default=0, alias="collectCnt")
    read_cnt: int = Field(default=0, alias="readCnt")
    liked: bool = False
    collected: bool = False

    model_config = {"populate_by_name": True}


class PostPage(BaseModel):
    posts: List[Post] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = Field(default=10, alias="pageSize")

    model_config = {"populate_by_name": True}


class UserProfile(BaseModel):
    id: int
    email: str


class LoginResult(BaseModel):
    user_id: int = Field(..., alias="userId")
    access_token: str = Field(..., alias="accessToken")
    refresh_token: Optional[str] = Field(default=None, alias="refreshToken")

    model_config = {"populate_by_name": True}


__all__ = [
    "CODE_SUCCESS",
    "CODE_INVALID_PARAMS",
    "CODE_UNAUTHORIZED",
    "CODE_FORBIDDEN",
    "CODE_NOT_FOUND",
    "CODE_DUPLICATE_EMAIL",
    "CODE_INTERNAL_ERROR",
    "Envelope",
    "LoginResult",
    "Post",
    "PostPage",
    "PostStatus",
    "UserProfile",
]
