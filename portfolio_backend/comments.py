"""
In-memory comment threads: top-level comments with one level of replies
"""
import threading
import time
from datetime import datetime, timezone
from typing import Dict, List

from .models import Comment, CommentReply
from .exceptions import CommentNotFoundError
from .logging import logger


class CommentTree:
    """Append-only comment store held in process memory.

    Top-level comments are kept newest first; replies are kept in the order
    they were written.
    """

    def __init__(self):
        self._threads: Dict[str, List[Comment]] = {}
        self._top_level: Dict[str, Comment] = {}
        self._last_id = 0
        self._lock = threading.Lock()

    def _next_id(self) -> str:
        # Millisecond timestamp, bumped when two comments share a millisecond
        candidate = time.time_ns() // 1_000_000
        self._last_id = max(candidate, self._last_id + 1)
        return str(self._last_id)

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()

    def add_top_level(self, post_slug: str, author: str, content: str) -> Comment:
        with self._lock:
            comment = Comment(
                id=self._next_id(),
                post_slug=post_slug,
                author=author,
                content=content,
                date=self._now(),
            )
            self._threads.setdefault(post_slug, []).insert(0, comment)
            self._top_level[comment.id] = comment

        logger.info("Comment added", post_slug=post_slug, comment_id=comment.id)
        return comment

    def add_reply(self, parent_id: str, author: str, content: str) -> CommentReply:
        with self._lock:
            parent = self._top_level.get(parent_id)
            if parent is None:
                raise CommentNotFoundError(parent_id)

            reply = CommentReply(
                id=self._next_id(),
                post_slug=parent.post_slug,
                author=author,
                content=content,
                date=self._now(),
            )
            parent.replies.append(reply)

        logger.info("Reply added", post_slug=parent.post_slug,
                    parent_id=parent_id, comment_id=reply.id)
        return reply

    def for_post(self, post_slug: str) -> List[Comment]:
        """Top-level comments for a post, newest first"""
        with self._lock:
            return [comment.model_copy(deep=True) for comment in self._threads.get(post_slug, [])]

    def count(self, post_slug: str) -> int:
        return len(self._threads.get(post_slug, []))
