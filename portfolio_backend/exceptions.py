"""
Typed failures surfaced by the repository, comment and query layers
"""
from typing import Optional, Dict, Any


class PortfolioBackendException(Exception):
    """Base exception for all portfolio backend errors"""

    def __init__(
        self,
        message: str,
        code: str = "PORTFOLIO_ERROR",
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


class NotFoundError(PortfolioBackendException):
    """Raised when a referenced entity does not exist"""

    def __init__(self, message: str, code: str = "NOT_FOUND", details: Optional[Dict[str, Any]] = None):
        super().__init__(message=message, code=code, status_code=404, details=details)


class PostNotFoundError(NotFoundError):
    """Raised when no markdown post matches a slug"""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Post with slug '{slug}' not found",
            code="POST_NOT_FOUND",
            details={"slug": slug}
        )


class StoredPostNotFoundError(NotFoundError):
    """Raised when a persisted post id does not exist"""

    def __init__(self, post_id: int):
        super().__init__(
            message="Post not found",
            code="POST_NOT_FOUND",
            details={"id": post_id}
        )


class CommentNotFoundError(NotFoundError):
    """Raised when a reply targets an unknown top-level comment"""

    def __init__(self, comment_id: str):
        super().__init__(
            message=f"Comment '{comment_id}' not found",
            code="COMMENT_NOT_FOUND",
            details={"comment_id": comment_id}
        )


class ForbiddenError(PortfolioBackendException):
    """Raised when the acting user does not own the post"""

    def __init__(self, action: str, post_id: int, user_id: int):
        super().__init__(
            message=f"You can only {action} your own posts",
            code="FORBIDDEN",
            status_code=403,
            details={"action": action, "id": post_id, "user_id": user_id}
        )


class ActorRequiredError(PortfolioBackendException):
    """Raised when a mutating request carries no user id"""

    def __init__(self, header: str):
        super().__init__(
            message=f"Missing or invalid '{header}' header",
            code="ACTOR_REQUIRED",
            status_code=401,
            details={"header": header}
        )


class InvalidQueryError(PortfolioBackendException):
    """Raised when a search query is invalid"""

    def __init__(self, query: str, reason: str):
        super().__init__(
            message=f"Invalid query '{query}': {reason}",
            code="INVALID_QUERY",
            status_code=400,
            details={"query": query, "reason": reason}
        )
