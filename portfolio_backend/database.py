"""
Relational schema for authored posts
"""
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import JSON, Text
from sqlalchemy.engine import Engine
from sqlmodel import Column, Field, Relationship, Session, SQLModel, create_engine

from .config import DatabaseSettings


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Author(SQLModel, table=True):
    """Post owner, provisioned by the authentication layer"""

    __tablename__ = "authors"

    id: Optional[int] = Field(default=None, primary_key=True)
    name: str = Field(max_length=100)
    email: Optional[str] = Field(default=None, max_length=255, unique=True)

    posts: List["StoredPost"] = Relationship(back_populates="author")


class StoredPost(SQLModel, table=True):
    """
    Authored post persisted in the database.

    Attributes:
        id: Storage-assigned primary key
        author_id: Owner; the only user allowed to update or delete the post
        created_at: Creation time, listing order key
        updated_at: Last modification time
    """

    __tablename__ = "posts"

    id: Optional[int] = Field(default=None, primary_key=True)
    title: str = Field(max_length=200)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    content: str = Field(sa_column=Column(Text, nullable=False))
    category: str = Field(default="Development", max_length=50)
    tags: List[str] = Field(default_factory=list, sa_column=Column(JSON, nullable=False))
    image: Optional[str] = Field(default=None, max_length=500)
    author_id: int = Field(foreign_key="authors.id", index=True)
    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)

    author: Optional[Author] = Relationship(back_populates="posts")


class PostCreate(SQLModel):
    """Request body for a new post"""
    title: str = Field(min_length=1, max_length=200)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    content: str = Field(min_length=1)
    category: str = Field(default="Development", max_length=50)
    tags: List[str] = Field(default_factory=list)
    image: Optional[str] = Field(default=None, max_length=500)


class PostUpdate(SQLModel):
    """Partial update; only fields present in the request are applied"""
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    excerpt: Optional[str] = Field(default=None, max_length=500)
    content: Optional[str] = Field(default=None, min_length=1)
    category: Optional[str] = Field(default=None, max_length=50)
    tags: Optional[List[str]] = None
    image: Optional[str] = Field(default=None, max_length=500)


class AuthorRead(SQLModel):
    id: int
    name: str


class PostRead(SQLModel):
    id: int
    title: str
    excerpt: Optional[str] = None
    content: str
    category: str
    tags: List[str] = []
    image: Optional[str] = None
    author_id: int
    created_at: datetime
    updated_at: datetime
    author: Optional[AuthorRead] = None


def create_db_engine(settings: DatabaseSettings) -> Engine:
    connect_args = {}
    if settings.database_url.startswith("sqlite"):
        connect_args["check_same_thread"] = False
    return create_engine(settings.database_url, echo=settings.database_echo, connect_args=connect_args)


def init_db(engine: Engine) -> None:
    """Create missing tables"""
    SQLModel.metadata.create_all(engine)


def open_session(engine: Engine) -> Session:
    return Session(engine)
