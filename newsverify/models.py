"""
Pydantic models for News Verification API requests and responses.

Wire names are camelCase (``shortDetail``, ``voteCounts``); attributes
stay snake_case on the Python side.
"""

import re
from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, field_validator
from pydantic.alias_generators import to_camel


EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


# =============================================================================
# Enums
# =============================================================================


class UserRole(str, Enum):
    """What a user is allowed to do."""
    READER = "READER"      # Vote and comment
    MEMBER = "MEMBER"      # ...and submit news
    ADMIN = "ADMIN"        # ...and moderate


class NewsStatus(str, Enum):
    """Moderator-asserted classification of a news item."""
    UNKNOWN = "UNKNOWN"
    FAKE = "FAKE"
    NOT_FAKE = "NOT_FAKE"


class VoteValue(str, Enum):
    """A community member's verdict on a news item."""
    FAKE = "FAKE"
    NOT_FAKE = "NOT_FAKE"


class Visibility(str, Enum):
    """Soft-delete state of news items and comments."""
    ACTIVE = "ACTIVE"
    HIDDEN = "HIDDEN"

    @classmethod
    def from_deleted(cls, is_deleted: bool) -> "Visibility":
        return cls.HIDDEN if is_deleted else cls.ACTIVE


class APIModel(BaseModel):
    """Base model using camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def _require_text(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.strip():
        raise ValueError("must not be blank")
    return value


def _require_http_url(value: Optional[str]) -> Optional[str]:
    if value is not None and not value.startswith(("http://", "https://")):
        raise ValueError(f"Invalid URL: {value}")
    return value


# =============================================================================
# Request Models
# =============================================================================


class RegisterRequest(APIModel):
    """Request to create a new account."""

    email: str = Field(..., max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("email")
    @classmethod
    def validate_email(cls, v):
        """Normalise and check the address."""
        v = v.strip().lower()
        if not EMAIL_PATTERN.match(v):
            raise ValueError("Invalid email")
        return v

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v):
        return _require_text(v)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar(cls, v):
        return _require_http_url(v)


class LoginRequest(APIModel):
    """Request to sign in."""

    email: str
    password: str

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v):
        return v.strip().lower()


class UpdateRoleRequest(APIModel):
    """Admin request to change a user's role."""

    role: UserRole


class UpdateProfileRequest(APIModel):
    """
    Partial update of the caller's own profile.

    Unknown fields (``role`` in particular) are rejected.
    """

    model_config = ConfigDict(extra="forbid")

    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    avatar_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("first_name", "last_name")
    @classmethod
    def validate_names(cls, v):
        return _require_text(v)

    @field_validator("avatar_url")
    @classmethod
    def validate_avatar(cls, v):
        return _require_http_url(v)


class CreateNewsRequest(APIModel):
    """Request to submit a news item for verification."""

    topic: str = Field(..., min_length=1, max_length=255)
    short_detail: str = Field(..., min_length=1, max_length=1000)
    full_detail: str = Field(..., min_length=1, max_length=20000)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("topic", "short_detail", "full_detail")
    @classmethod
    def validate_text(cls, v):
        return _require_text(v)


class UpdateNewsStatusRequest(APIModel):
    """Admin request to classify a news item."""

    status: NewsStatus


class UpdateVisibilityRequest(APIModel):
    """Admin request to hide or restore a news item."""

    is_deleted: StrictBool


class CreateCommentRequest(APIModel):
    """
    Request to comment on a news item.

    ``content`` is always required. Clients posting an image as the only
    evidence substitute placeholder text themselves.
    """

    content: str = Field(..., min_length=1, max_length=5000)
    image_url: Optional[str] = Field(default=None, max_length=500)

    @field_validator("content")
    @classmethod
    def validate_content(cls, v):
        return _require_text(v)


class CastVoteRequest(APIModel):
    """Request to vote on a news item."""

    vote: VoteValue


# =============================================================================
# Response Models
# =============================================================================


class UserSummary(APIModel):
    """Public attribution of a user on news and comments."""

    id: str
    first_name: str
    last_name: str
    avatar_url: Optional[str] = None


class UserResponse(APIModel):
    """A user account, without credentials."""

    id: str
    email: str
    first_name: str
    last_name: str
    role: UserRole
    avatar_url: Optional[str] = None
    created_at: datetime


class AuthResponse(APIModel):
    """Token plus the signed-in user."""

    token: str
    user: UserResponse


class RoleResponse(APIModel):
    id: str
    role: UserRole


class VoteCounts(APIModel):
    """Community tally for one news item."""

    fake: int = 0
    not_fake: int = 0
    total: int = 0

    @classmethod
    def from_tally(cls, fake: int, not_fake: int) -> "VoteCounts":
        return cls(fake=fake, not_fake=not_fake, total=fake + not_fake)


class NewsResponse(APIModel):
    """A news record as stored."""

    id: str
    topic: str
    short_detail: str
    full_detail: str
    image_url: Optional[str] = None
    status: NewsStatus
    reporter_id: str
    is_deleted: bool
    created_at: datetime
    updated_at: datetime


class NewsSummaryResponse(NewsResponse):
    """A news record with its aggregates, as shown in lists."""

    reporter: Optional[UserSummary] = None
    vote_counts: VoteCounts = Field(default_factory=VoteCounts)
    comment_count: int = 0


class NewsDetailResponse(NewsSummaryResponse):
    """A single news record including the caller's own vote."""

    user_vote: Optional[VoteValue] = None


class PaginationInfo(APIModel):
    page: int
    page_size: int
    total: int
    total_pages: int


class NewsListResponse(APIModel):
    data: List[NewsSummaryResponse]
    pagination: PaginationInfo


class CommentResponse(APIModel):
    """A comment with its author."""

    id: str
    news_id: str
    user_id: str
    content: str
    image_url: Optional[str] = None
    is_deleted: bool
    created_at: datetime
    user: Optional[UserSummary] = None


class CommentListResponse(APIModel):
    data: List[CommentResponse]
    pagination: PaginationInfo


class VoteResponse(APIModel):
    id: str
    news_id: str
    user_id: str
    vote: VoteValue
    created_at: datetime


class UploadResponse(APIModel):
    url: str


class ValidationIssue(APIModel):
    field: str
    message: str
    type: str


class ErrorResponse(APIModel):
    """Body of every failed request."""

    error: Union[str, List[ValidationIssue]]
