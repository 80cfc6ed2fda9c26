"""Canonical data model for fetched GitHub activity.

All models are frozen: they are built once from wire data and handed to the
caller unchanged.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, computed_field

from gh_fetch.errors import InvalidRepository


class Repository(BaseModel):
    """An owner/name pair identifying a GitHub repository."""

    model_config = ConfigDict(frozen=True)

    owner: str
    name: str

    @computed_field  # type: ignore[prop-decorator]
    @property
    def full_name(self) -> str:
        """The "owner/name" form."""
        return f"{self.owner}/{self.name}"

    def __str__(self) -> str:
        return self.full_name

    @classmethod
    def new(cls, owner: str, name: str) -> "Repository":
        """Build a repository reference from explicit parts."""
        return cls(owner=owner, name=name)

    @classmethod
    def from_full_name(cls, full_name: str) -> "Repository":
        """Parse an "owner/name" string.

        Raises:
            InvalidRepository: Unless the string has exactly two non-empty segments.
        """
        parts = full_name.split("/")
        if len(parts) != 2 or not all(parts):
            raise InvalidRepository(
                f"Invalid repository full name format. Expected 'owner/name', got: {full_name}"
            )
        return cls(owner=parts[0], name=parts[1])

    @classmethod
    def from_url(cls, url: str) -> "Repository":
        """Parse a repository URL by taking its last two path segments.

        Raises:
            InvalidRepository: If fewer than two segments remain.
        """
        parts = url.removesuffix("/").split("/")
        if len(parts) < 2 or not parts[-2] or not parts[-1]:
            raise InvalidRepository(f"Invalid repository URL: {url}")
        return cls(owner=parts[-2], name=parts[-1])

    @classmethod
    def parse(cls, reference: str) -> "Repository":
        """Accept either a URL or the short "owner/name" form."""
        if "://" in reference:
            return cls.from_url(reference)
        return cls.from_full_name(reference)


class User(BaseModel):
    """A GitHub account as seen on issues, comments and reviews."""

    model_config = ConfigDict(frozen=True)

    id: int
    login: str
    avatar_url: str = ""


UNKNOWN_USER = User(id=0, login="unknown", avatar_url="")


class Label(BaseModel):
    """An issue label."""

    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    color: str = ""
    description: str | None = None


class Issue(BaseModel):
    """Normalized issue or pull request."""

    model_config = ConfigDict(frozen=True)

    id: int
    number: int
    title: str
    body: str | None = None
    state: str
    labels: list[Label] = Field(default_factory=list)
    user: User = UNKNOWN_USER
    assignees: list[User] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime
    closed_at: datetime | None = None
    merged_at: datetime | None = None
    html_url: str = ""
    is_pull_request: bool = False
    comments: int = 0

    @property
    def content(self) -> str:
        """Title and body joined, as used for keyword and error-code matching."""
        return f"{self.title} {self.body or ''}"


class Comment(BaseModel):
    """A conversation comment on an issue or pull request."""

    model_config = ConfigDict(frozen=True)

    id: int
    user: User
    body: str
    created_at: datetime
    updated_at: datetime
    html_url: str = ""


class Review(BaseModel):
    """A pull request review (approval, change request, comment)."""

    model_config = ConfigDict(frozen=True)

    id: int
    user: User
    body: str | None = None
    # APPROVED, CHANGES_REQUESTED, COMMENTED, DISMISSED, PENDING or UNKNOWN
    state: str
    submitted_at: datetime | None = None
    html_url: str = ""
    commit_id: str | None = None


class ReviewComment(BaseModel):
    """An inline comment attached to a line of a pull request diff."""

    model_config = ConfigDict(frozen=True)

    id: int
    review_id: int | None = None
    user: User
    body: str
    path: str
    line: int | None = None
    original_line: int | None = None
    diff_hunk: str = ""
    side: str | None = None
    commit_id: str | None = None
    created_at: datetime
    updated_at: datetime
    html_url: str
    position: int | None = None
    in_reply_to_id: int | None = None


class PullRequestFile(BaseModel):
    """A file changed by a pull request."""

    model_config = ConfigDict(frozen=True)

    filename: str
    status: str
    additions: int = 0
    deletions: int = 0
    changes: int = 0
    patch: str | None = None


class DiscussionComment(BaseModel):
    """A top-level comment on a discussion."""

    model_config = ConfigDict(frozen=True)

    id: str
    body: str
    author: User
    created_at: datetime
    updated_at: datetime


class Discussion(BaseModel):
    """A GitHub discussion with its first page of comments."""

    model_config = ConfigDict(frozen=True)

    number: int
    title: str
    body: str
    url: str
    author: User
    created_at: datetime
    updated_at: datetime
    comments: list[DiscussionComment] = Field(default_factory=list)


class CollectionResult(BaseModel):
    """Outcome of one paginated issue collection."""

    model_config = ConfigDict(frozen=True)

    repository: Repository
    issues: list[Issue] = Field(default_factory=list)
    collection_time: datetime
    filters_applied: list[str] = Field(default_factory=list)

    @computed_field  # type: ignore[prop-decorator]
    @property
    def total_collected(self) -> int:
        """Number of collected issues, always equal to len(issues)."""
        return len(self.issues)
