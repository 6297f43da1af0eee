"""
In-memory post filtering.

filter_posts is a pure function over a list of posts: it applies every
present criterion (all must match) and then an optional sort. Without any
criteria the input comes back unchanged, in its original order.
"""

from datetime import datetime, timezone
from typing import Optional

from .models import Post, PostFilter, PostSortOrder

_EARLIEST = datetime.min.replace(tzinfo=timezone.utc)


def _present(value: Optional[str]) -> bool:
    return value is not None and value != ""


def _equals_ignore_case(actual: Optional[str], expected: str) -> bool:
    return actual is not None and actual.lower() == expected.lower()


def _matches(post: Post, criteria: PostFilter) -> bool:
    if _present(criteria.program) and not _equals_ignore_case(post.program, criteria.program):
        return False
    if _present(criteria.course) and not _equals_ignore_case(post.course, criteria.course):
        return False
    if _present(criteria.resource_type) and not _equals_ignore_case(
        post.resource_type, criteria.resource_type
    ):
        return False
    if _present(criteria.file_type) and criteria.file_type not in (post.file_type or ""):
        return False
    if _present(criteria.keyword):
        keyword = criteria.keyword.lower()
        in_title = keyword in (post.title or "").lower()
        in_description = keyword in (post.description or "").lower()
        if not (in_title or in_description):
            return False
    return True


def _created(post: Post) -> datetime:
    return post.created_at or _EARLIEST


def sort_posts(posts: list[Post], sort: Optional[str]) -> list[Post]:
    """Sort by newest, oldest or title (case-insensitive). Unknown orders leave the list as is."""
    if not _present(sort):
        return posts
    try:
        order = PostSortOrder(sort.lower())
    except ValueError:
        return posts

    if order == PostSortOrder.NEWEST:
        return sorted(posts, key=_created, reverse=True)
    if order == PostSortOrder.OLDEST:
        return sorted(posts, key=_created)
    return sorted(posts, key=lambda p: (p.title or "").lower())


def filter_posts(posts: list[Post], criteria: PostFilter) -> list[Post]:
    matched = [post for post in posts if _matches(post, criteria)]
    return sort_posts(matched, criteria.sort)
