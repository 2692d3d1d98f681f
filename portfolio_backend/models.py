from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class BlogPost(BaseModel):
    """Markdown post with front-matter metadata and derived fields"""
    slug: str = Field(..., description="File name without extension")
    title: str = Field(..., description="Blog post title")
    excerpt: str = Field(..., description="Short summary of the post")
    content: str = Field(..., description="Markdown body of the post")
    date: str = Field(..., description="Publication date as an ISO 8601 string")
    author: str = Field(..., description="Post author name")
    category: str = Field(..., description="Category the post is filed under")
    tags: List[str] = Field(default_factory=list, description="Tags associated with the post")
    reading_time: str = Field(..., description="Estimated reading time, e.g. '5 min read'")
    image: Optional[str] = Field(None, description="Cover image reference")


class BlogPostSummary(BaseModel):
    """Blog post without its body, for listing pages"""
    slug: str
    title: str
    excerpt: str
    date: str
    author: str
    category: str
    tags: List[str] = Field(default_factory=list)
    reading_time: str
    image: Optional[str] = None

    @classmethod
    def from_post(cls, post: BlogPost) -> "BlogPostSummary":
        return cls(**post.model_dump(exclude={"content"}))


class BlogCategory(BaseModel):
    """Category aggregate derived from the current post set"""
    name: str = Field(..., description="Category name as written in front-matter")
    slug: str = Field(..., description="Lowercase, hyphenated category name")
    description: str = Field(..., description="Post count summary")
    post_count: int = Field(..., description="Number of posts in the category")


class CommentReply(BaseModel):
    """A reply to a top-level comment; replies cannot be replied to"""
    id: str
    post_slug: str
    author: str
    content: str
    date: str


class Comment(CommentReply):
    """Top-level comment carrying its replies in chronological order"""
    replies: List[CommentReply] = Field(default_factory=list)


class CommentCreate(BaseModel):
    """Payload for a new comment or reply"""
    author: str = Field(..., min_length=1, max_length=100)
    content: str = Field(..., min_length=1, max_length=5000)

    @field_validator("author", "content", mode="before")
    @classmethod
    def strip_text(cls, v):
        if isinstance(v, str):
            return v.strip()
        return v


class CommentThread(BaseModel):
    """Comments for one post"""
    post_slug: str
    count: int
    comments: List[Comment] = Field(default_factory=list)


class TagsResponse(BaseModel):
    """Sorted tag list"""
    tags: List[str] = Field(..., description="All tags, sorted ascending")
    total_tags: int = Field(..., description="Number of unique tags")
