"""
Service layer for blog reads, keeping disk access off the event loop
"""
import asyncio
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import BlogPost, BlogPostSummary, BlogCategory
from .content_store import ContentStore
from .query_builder import QueryBuilder, create_post_query, collect_categories, collect_tags
from .exceptions import PostNotFoundError, InvalidQueryError
from .config import get_security_settings
from .logging import logger


@dataclass
class PostListRequest:
    """Request parameters for listing posts"""
    category: Optional[str] = None
    query: Optional[str] = None
    tag: Optional[str] = None
    offset: int = 0
    limit: Optional[int] = None


class BlogService:
    """Queries over the markdown content store"""

    def __init__(self, store: ContentStore, max_query_length: Optional[int] = None):
        self.store = store
        if max_query_length is None:
            max_query_length = get_security_settings().max_query_length
        self.max_query_length = max_query_length

    async def list_all(self) -> List[BlogPost]:
        return await asyncio.to_thread(self.store.list_all)

    async def get_post(self, slug: str) -> BlogPost:
        """Get a single post by slug"""
        post = await asyncio.to_thread(self.store.get_by_slug, slug)
        if post is None:
            raise PostNotFoundError(slug)
        return post

    async def list_posts(self, request: PostListRequest) -> Tuple[List[BlogPostSummary], int]:
        """Listing page: category and free-text filters combined with AND.

        Returns the requested page and the number of posts matching the
        filters before pagination.
        """
        query = (request.query or "").strip()
        if len(query) > self.max_query_length:
            raise InvalidQueryError(query, "Query too long")

        posts = await self.list_all()
        filtered = QueryBuilder.for_listing(
            posts=posts,
            category=request.category,
            search_query=query or None,
            tag=request.tag
        )
        total = len(filtered)
        end = request.offset + request.limit if request.limit else None
        page = filtered[request.offset:end]

        logger.info("Posts listed",
                    category=request.category,
                    query=query or None,
                    tag=request.tag,
                    results_count=len(page),
                    total=total)

        return [BlogPostSummary.from_post(post) for post in page], total

    async def by_category(self, category: str) -> List[BlogPost]:
        posts = await self.list_all()
        return create_post_query(posts).filter_by_category(category).execute()

    async def by_tag(self, tag: str) -> List[BlogPost]:
        posts = await self.list_all()
        return create_post_query(posts).filter_by_tag(tag).execute()

    async def all_categories(self) -> List[BlogCategory]:
        return collect_categories(await self.list_all())

    async def all_tags(self) -> List[str]:
        return collect_tags(await self.list_all())
