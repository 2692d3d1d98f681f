"""
Markdown content store: one front-matter file per post in a flat directory
"""
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import frontmatter

from .models import BlogPost
from .functional_types import (
    Result, Success, Failure, ParseError,
    flat_map, unwrap_or,
    safe_parse_date, safe_parse_tags, date_sort_key,
    calculate_reading_time, create_excerpt
)
from .logging import logger

DEFAULT_EXTENSIONS = (".md", ".mdx")

# Front-matter fields that must hold plain strings when present
STRING_FIELDS = ("title", "excerpt", "author", "category", "image")


def read_file_safe(file_path: Path) -> Result[str, ParseError]:
    """Safely read file contents"""
    try:
        return Success(file_path.read_text(encoding='utf-8'))
    except (OSError, UnicodeDecodeError) as e:
        return Failure(ParseError(f"Failed to read file {file_path}", file_path, e))


def parse_frontmatter_safe(content: str) -> Result[frontmatter.Post, ParseError]:
    """Safely split front-matter from the markdown body"""
    try:
        return Success(frontmatter.loads(content))
    except Exception as e:
        return Failure(ParseError(f"Failed to parse frontmatter: {e}", exception=e))


def apply_defaults(metadata: Dict[str, Any], defaults: Dict[str, Any]) -> Dict[str, Any]:
    """Fill every empty field from the fallback mapping, leaving others as written"""
    filled = dict(metadata)
    for field, fallback in defaults.items():
        if filled.get(field) in (None, "", []):
            filled[field] = fallback
    return filled


class ContentStore:
    """Reads posts from ``directory`` on every call; there is no cache."""

    def __init__(
        self,
        directory: Path,
        extensions: Sequence[str] = DEFAULT_EXTENSIONS,
        site_owner: str = "김태회",
        default_category: str = "Development",
        words_per_minute: int = 200,
        excerpt_length: int = 200,
    ):
        self.directory = Path(directory)
        self.extensions = tuple(extensions)
        self.words_per_minute = words_per_minute
        self.excerpt_length = excerpt_length
        self.defaults: Dict[str, Any] = {
            "author": site_owner,
            "category": default_category,
            "tags": [],
            "image": None,
        }

    def _content_files(self) -> List[Path]:
        """Recognized files sorted by name, one per slug.

        Extensions match case-sensitively, the same way ``get_by_slug``
        builds file names. When the same stem exists with several
        extensions the one listed first in ``extensions`` wins.
        """
        by_slug: Dict[str, Path] = {}
        for path in self.directory.iterdir():
            ext = path.suffix
            if ext not in self.extensions or not path.is_file():
                continue
            current = by_slug.get(path.stem)
            if current is None or self.extensions.index(ext) < self.extensions.index(current.suffix):
                by_slug[path.stem] = path
        return sorted(by_slug.values(), key=lambda p: p.name)

    def _create_post(self, fm_post: frontmatter.Post, file_path: Path) -> Result[BlogPost, ParseError]:
        slug = file_path.stem
        metadata = apply_defaults(fm_post.metadata, self.defaults)

        for field in STRING_FIELDS:
            value = metadata.get(field)
            if value is not None and not isinstance(value, str):
                return Failure(ParseError(f"Field '{field}' must be a string", file_path))

        raw_date = metadata.get("date")
        if raw_date in (None, ""):
            raw_date = datetime.fromtimestamp(file_path.stat().st_mtime).isoformat(timespec="seconds")
        date_result = safe_parse_date(raw_date)
        if date_result.is_failure():
            return Failure(ParseError(date_result.error.message, file_path))

        tags_result = safe_parse_tags(metadata["tags"])
        if tags_result.is_failure():
            return Failure(ParseError(tags_result.error.message, file_path))

        content = fm_post.content
        return Success(BlogPost(
            slug=slug,
            title=metadata.get("title") or slug.replace('-', ' ').title(),
            excerpt=metadata.get("excerpt") or create_excerpt(content, self.excerpt_length),
            content=content,
            date=date_result.value,
            author=metadata["author"],
            category=metadata["category"],
            tags=tags_result.value,
            reading_time=calculate_reading_time(content, self.words_per_minute),
            image=metadata["image"],
        ))

    def load(self, file_path: Path) -> Result[BlogPost, ParseError]:
        """Parse one content file into a post"""
        text_result = read_file_safe(file_path)
        fm_result = flat_map(parse_frontmatter_safe)(text_result)
        post_result = flat_map(lambda fm_post: self._create_post(fm_post, file_path))(fm_result)

        match post_result:
            case Failure(error):
                logger.warning("Skipping malformed content file",
                               path=str(file_path), error=error.message)
        return post_result

    def list_all(self) -> List[BlogPost]:
        """All parseable posts, newest first.

        Equal dates keep reverse file-name order. A missing directory is an
        empty blog, not an error.
        """
        if not self.directory.is_dir():
            logger.debug("Content directory missing", directory=str(self.directory))
            return []

        posts = [
            post for post in (unwrap_or(self.load(path)) for path in self._content_files())
            if post is not None
        ]
        posts.reverse()
        return sorted(posts, key=lambda p: date_sort_key(p.date), reverse=True)

    def get_by_slug(self, slug: str) -> Optional[BlogPost]:
        """Post stored under ``slug``, or None when absent or unparseable"""
        for ext in self.extensions:
            if slug.endswith(ext):
                slug = slug[:-len(ext)]
                break

        if not slug or "/" in slug or "\\" in slug or ".." in slug:
            return None

        for ext in self.extensions:
            path = self.directory / f"{slug}{ext}"
            if path.is_file():
                return unwrap_or(self.load(path))
        return None
