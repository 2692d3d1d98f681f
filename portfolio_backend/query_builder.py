"""
Query builder pattern for blog post filtering and sorting
"""
from typing import Dict, List, Optional, Protocol
from dataclasses import dataclass
from enum import Enum

from .models import BlogPost, BlogCategory
from .functional_types import date_sort_key, slugify_category

# Category value meaning "no category filter" on the listing page
ALL_CATEGORIES = "all"


class SortOrder(Enum):
    """Sort order enumeration"""
    ASC = "asc"
    DESC = "desc"


class SortField(Enum):
    """Available sort fields"""
    DATE = "date"
    TITLE = "title"


@dataclass
class SortCriteria:
    field: SortField = SortField.DATE
    order: SortOrder = SortOrder.DESC


@dataclass
class PaginationCriteria:
    offset: int = 0
    limit: Optional[int] = None


class PostFilter(Protocol):
    """Protocol for post filter functions"""

    def __call__(self, posts: List[BlogPost]) -> List[BlogPost]:
        ...


def matches_search(post: BlogPost, query: str) -> bool:
    """Case-insensitive substring match on title, excerpt or any tag"""
    query_lower = query.lower()
    return (query_lower in post.title.lower() or
            query_lower in post.excerpt.lower() or
            any(query_lower in tag.lower() for tag in post.tags))


class PostQuery:
    """Fluent query builder for blog posts; filters combine with AND"""

    def __init__(self, posts: List[BlogPost]):
        self._posts = posts
        self._filters: List[PostFilter] = []
        self._sort_criteria: Optional[SortCriteria] = None
        self._pagination: Optional[PaginationCriteria] = None

    def filter_by_category(self, category: str) -> 'PostQuery':
        """Filter posts by category, case-insensitive exact match"""
        category_lower = category.lower()

        def category_filter(posts: List[BlogPost]) -> List[BlogPost]:
            return [post for post in posts if post.category.lower() == category_lower]

        self._filters.append(category_filter)
        return self

    def filter_by_tag(self, tag: str) -> 'PostQuery':
        """Filter posts by tag, case-insensitive exact match"""
        tag_lower = tag.lower()

        def tag_filter(posts: List[BlogPost]) -> List[BlogPost]:
            return [post for post in posts if tag_lower in [t.lower() for t in post.tags]]

        self._filters.append(tag_filter)
        return self

    def filter_by_search(self, query: str) -> 'PostQuery':
        """Filter posts by free text"""
        def search_filter(posts: List[BlogPost]) -> List[BlogPost]:
            return [post for post in posts if matches_search(post, query)]

        self._filters.append(search_filter)
        return self

    def sort_by(self, field: SortField, order: SortOrder = SortOrder.DESC) -> 'PostQuery':
        self._sort_criteria = SortCriteria(field, order)
        return self

    def paginate(self, offset: int = 0, limit: Optional[int] = None) -> 'PostQuery':
        self._pagination = PaginationCriteria(offset, limit)
        return self

    def execute(self) -> List[BlogPost]:
        """Execute the query and return filtered/sorted posts"""
        result = list(self._posts)

        for filter_func in self._filters:
            result = filter_func(result)

        if self._sort_criteria:
            result = self._apply_sorting(result, self._sort_criteria)

        if self._pagination:
            result = self._apply_pagination(result, self._pagination)

        return result

    def _apply_sorting(self, posts: List[BlogPost], criteria: SortCriteria) -> List[BlogPost]:
        reverse = criteria.order == SortOrder.DESC
        if criteria.field == SortField.TITLE:
            key_func = lambda p: p.title.lower()
        else:
            key_func = lambda p: date_sort_key(p.date)
        return sorted(posts, key=key_func, reverse=reverse)

    def _apply_pagination(self, posts: List[BlogPost], criteria: PaginationCriteria) -> List[BlogPost]:
        start = criteria.offset
        end = start + criteria.limit if criteria.limit else None
        return posts[start:end]


def create_post_query(posts: List[BlogPost]) -> PostQuery:
    """Factory function to create a new PostQuery"""
    return PostQuery(posts)


def collect_categories(posts: List[BlogPost]) -> List[BlogCategory]:
    """Group posts by category in first-seen order"""
    counts: Dict[str, int] = {}
    for post in posts:
        counts[post.category] = counts.get(post.category, 0) + 1

    return [
        BlogCategory(
            name=name,
            slug=slugify_category(name),
            description=f"{count} post" if count == 1 else f"{count} posts",
            post_count=count,
        )
        for name, count in counts.items()
    ]


def collect_tags(posts: List[BlogPost]) -> List[str]:
    """Union of all tags, sorted ascending"""
    return sorted({tag for post in posts for tag in post.tags})


class QueryBuilder:
    """High-level query builder for common use cases"""

    @staticmethod
    def for_listing(
        posts: List[BlogPost],
        category: Optional[str] = None,
        search_query: Optional[str] = None,
        tag: Optional[str] = None,
        offset: int = 0,
        limit: Optional[int] = None
    ) -> List[BlogPost]:
        """Blog listing page: optional category, text and tag filters, newest first"""
        query = create_post_query(posts)

        if category and category.lower() != ALL_CATEGORIES:
            query = query.filter_by_category(category)

        if search_query:
            query = query.filter_by_search(search_query)

        if tag:
            query = query.filter_by_tag(tag)

        return (query
                .sort_by(SortField.DATE, SortOrder.DESC)
                .paginate(offset, limit)
                .execute())
