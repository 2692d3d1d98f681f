"""
CRUD access to authored posts with ownership checks
"""
from typing import List

from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from .database import AuthorRead, PostCreate, PostRead, PostUpdate, StoredPost, utcnow
from .exceptions import ForbiddenError, StoredPostNotFoundError
from .logging import logger

# Columns that may be cleared through an update
NULLABLE_FIELDS = {"excerpt", "image"}


def to_read(post: StoredPost) -> PostRead:
    author = AuthorRead(id=post.author.id, name=post.author.name) if post.author else None
    return PostRead(**post.model_dump(), author=author)


class PostRepository:
    """Posts are read by anyone and mutated only by their author"""

    def __init__(self, session: Session):
        self.session = session

    def _base_query(self):
        return select(StoredPost).options(selectinload(StoredPost.author))

    def _get(self, post_id: int) -> StoredPost:
        post = self.session.exec(self._base_query().where(StoredPost.id == post_id)).first()
        if post is None:
            raise StoredPostNotFoundError(post_id)
        return post

    def _check_owner(self, post: StoredPost, user_id: int, action: str) -> None:
        if post.author_id != user_id:
            logger.warning("Ownership check failed",
                           action=action, post_id=post.id, user_id=user_id)
            raise ForbiddenError(action, post.id, user_id)

    def create(self, fields: PostCreate, author_id: int) -> PostRead:
        post = StoredPost(**fields.model_dump(), author_id=author_id)
        self.session.add(post)
        self.session.commit()
        logger.info("Post created", post_id=post.id, author_id=author_id)
        return self.find_one(post.id)

    def find_all(self) -> List[PostRead]:
        """All posts, newest first"""
        statement = self._base_query().order_by(StoredPost.created_at.desc(), StoredPost.id.desc())
        return [to_read(post) for post in self.session.exec(statement).all()]

    def find_one(self, post_id: int) -> PostRead:
        return to_read(self._get(post_id))

    def update(self, post_id: int, fields: PostUpdate, user_id: int) -> PostRead:
        post = self._get(post_id)
        self._check_owner(post, user_id, "update")

        changes = {
            key: value for key, value in fields.model_dump(exclude_unset=True).items()
            if value is not None or key in NULLABLE_FIELDS
        }
        for key, value in changes.items():
            setattr(post, key, value)
        post.updated_at = utcnow()

        self.session.add(post)
        self.session.commit()
        logger.info("Post updated", post_id=post_id, fields=sorted(changes))
        return self.find_one(post_id)

    def remove(self, post_id: int, user_id: int) -> None:
        post = self._get(post_id)
        self._check_owner(post, user_id, "delete")

        self.session.delete(post)
        self.session.commit()
        logger.info("Post deleted", post_id=post_id, user_id=user_id)

    def find_by_author(self, author_id: int) -> List[PostRead]:
        """Posts owned by ``author_id``, newest first"""
        statement = (self._base_query()
                     .where(StoredPost.author_id == author_id)
                     .order_by(StoredPost.created_at.desc(), StoredPost.id.desc()))
        return [to_read(post) for post in self.session.exec(statement).all()]
