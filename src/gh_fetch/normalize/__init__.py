"""Normalizers converting raw GitHub JSON into gh_fetch models.

- issues: issues and pull requests (REST)
- comments: conversation comments and inline review comments (REST)
- reviews: pull request reviews and changed files (REST)
- discussions: discussions and their comments (GraphQL)
"""

from gh_fetch.normalize.comments import (
    normalize_comment,
    normalize_review_comment,
    normalize_review_comments,
)
from gh_fetch.normalize.discussions import normalize_discussion, normalize_discussion_comment
from gh_fetch.normalize.issues import normalize_issue, normalize_pull
from gh_fetch.normalize.reviews import normalize_pull_file, normalize_review
from gh_fetch.normalize.users import normalize_user

__all__ = [
    "normalize_comment",
    "normalize_discussion",
    "normalize_discussion_comment",
    "normalize_issue",
    "normalize_pull",
    "normalize_pull_file",
    "normalize_review",
    "normalize_review_comment",
    "normalize_review_comments",
    "normalize_user",
]
