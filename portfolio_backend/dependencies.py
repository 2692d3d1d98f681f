"""
Dependency injection container for better testability and maintainability
"""
from functools import lru_cache
from typing import Iterator

from fastapi import Depends, Request
from sqlalchemy.engine import Engine
from sqlmodel import Session

from .comments import CommentTree
from .config import get_settings, get_database_settings, get_security_settings
from .content_store import ContentStore
from .database import create_db_engine, open_session
from .exceptions import ActorRequiredError
from .repository import PostRepository
from .services import BlogService


class ServiceContainer:
    """Dependency injection container"""

    def __init__(self):
        self._instances = {}
        self._settings = get_settings()

    @property
    def settings(self):
        """Get application settings"""
        return self._settings

    @property
    def content_store(self) -> ContentStore:
        if 'content_store' not in self._instances:
            self._instances['content_store'] = ContentStore(
                directory=self._settings.content_directory,
                extensions=self._settings.content_extensions,
                site_owner=self._settings.site_owner,
                default_category=self._settings.default_category,
                words_per_minute=self._settings.words_per_minute,
                excerpt_length=self._settings.excerpt_length,
            )
        return self._instances['content_store']

    @property
    def blog_service(self) -> BlogService:
        if 'blog_service' not in self._instances:
            self._instances['blog_service'] = BlogService(
                store=self.content_store,
                max_query_length=get_security_settings().max_query_length,
            )
        return self._instances['blog_service']

    @property
    def comment_tree(self) -> CommentTree:
        if 'comment_tree' not in self._instances:
            self._instances['comment_tree'] = CommentTree()
        return self._instances['comment_tree']

    @property
    def engine(self) -> Engine:
        if 'engine' not in self._instances:
            self._instances['engine'] = create_db_engine(get_database_settings())
        return self._instances['engine']

    def override(self, name: str, instance) -> None:
        """Replace a component, e.g. an in-memory engine in tests"""
        self._instances[name] = instance

    def reset(self):
        """Reset all instances (useful for testing)"""
        self._instances.clear()
        self._settings = get_settings()


@lru_cache()
def get_container() -> ServiceContainer:
    """Get the global service container"""
    return ServiceContainer()


# FastAPI dependency functions
def get_blog_service() -> BlogService:
    return get_container().blog_service


def get_comment_tree() -> CommentTree:
    return get_container().comment_tree


def get_session() -> Iterator[Session]:
    with open_session(get_container().engine) as session:
        yield session


def get_post_repository(session: Session = Depends(get_session)) -> PostRepository:
    return PostRepository(session)


def get_current_user_id(request: Request) -> int:
    """Acting user id from the header set by the authentication proxy"""
    header = get_container().settings.user_id_header
    value = request.headers.get(header)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ActorRequiredError(header)
