"""
Result types and pure helpers for the markdown content pipeline
"""
from typing import Union, Generic, TypeVar, Callable, List, Optional, Any
from dataclasses import dataclass
from pathlib import Path
from datetime import date, datetime, timezone
import math
import re

import markdown

T = TypeVar('T')
U = TypeVar('U')
E = TypeVar('E')

# Result type for functional error handling
@dataclass
class Success(Generic[T]):
    """Represents a successful computation"""
    value: T

    def is_success(self) -> bool:
        return True

    def is_failure(self) -> bool:
        return False

@dataclass
class Failure(Generic[E]):
    """Represents a failed computation"""
    error: E

    def is_success(self) -> bool:
        return False

    def is_failure(self) -> bool:
        return True

Result = Union[Success[T], Failure[E]]


@dataclass
class ParseError:
    """A content file that could not be turned into a post"""
    message: str
    file_path: Optional[Path] = None
    exception: Optional[Exception] = None


def flat_map(f: Callable[[T], Result[U, E]]) -> Callable[[Result[T, E]], Result[U, E]]:
    """Monadic bind for results"""
    def binder(result: Result[T, E]) -> Result[U, E]:
        match result:
            case Success(value):
                try:
                    return f(value)
                except Exception as e:
                    return Failure(ParseError(f"Flat map function failed: {e}", exception=e))
            case Failure(error):
                return Failure(error)
    return binder


def unwrap_or(result: Result[T, E], default: Optional[T] = None) -> Optional[T]:
    """Value of a success, default otherwise"""
    match result:
        case Success(value):
            return value
        case _:
            return default


_DATE_FORMATS = ['%Y-%m-%d %H:%M:%S', '%Y/%m/%d', '%B %d, %Y', '%b %d, %Y']


def safe_parse_date(date_input: Any) -> Result[str, ParseError]:
    """Normalize a front-matter date into an ISO 8601 string.

    YAML loads bare dates as ``date``/``datetime`` objects; strings are kept
    verbatim when already ISO formatted so the author's precision survives.
    """
    if isinstance(date_input, datetime):
        return Success(date_input.isoformat())

    if isinstance(date_input, date):
        return Success(date_input.isoformat())

    if isinstance(date_input, str):
        text = date_input.strip()
        try:
            datetime.fromisoformat(text.replace('Z', '+00:00'))
            return Success(text)
        except ValueError:
            pass
        for fmt in _DATE_FORMATS:
            try:
                return Success(datetime.strptime(text, fmt).isoformat())
            except ValueError:
                continue

    return Failure(ParseError(f"Invalid date format: {date_input!r}"))


_UNKNOWN_DATE = datetime.min.replace(tzinfo=timezone.utc)


def date_sort_key(value: str) -> datetime:
    """Aware datetime for ordering ISO strings; naive values are read as UTC"""
    try:
        parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    except ValueError:
        return _UNKNOWN_DATE
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def safe_parse_tags(tags_input: Any) -> Result[List[str], ParseError]:
    """Tags from a YAML list of strings or a comma separated string, duplicates dropped"""
    if tags_input is None:
        return Success([])
    if isinstance(tags_input, str):
        raw = tags_input.split(',')
    elif isinstance(tags_input, (list, tuple)):
        if not all(isinstance(tag, str) for tag in tags_input):
            return Failure(ParseError(f"Tags must be strings: {tags_input!r}"))
        raw = list(tags_input)
    else:
        return Failure(ParseError(f"Invalid tags: {tags_input!r}"))

    tags: List[str] = []
    for tag in raw:
        tag = tag.strip()
        if tag and tag not in tags:
            tags.append(tag)
    return Success(tags)


def count_words(content: str) -> int:
    plain_text = re.sub(r'<[^>]+>', '', content)
    plain_text = re.sub(r'[#*`_\[\]()>]+', ' ', plain_text)
    return len(plain_text.split())


def calculate_reading_time(content: str, words_per_minute: int = 200) -> str:
    """Reading time rendered as 'N min read', never below one minute"""
    minutes = max(1, math.ceil(count_words(content) / words_per_minute))
    return f"{minutes} min read"


def create_excerpt(content: str, max_length: int = 200) -> str:
    """Plain-text excerpt of the rendered markdown body"""
    plain_text = re.sub(r'<[^>]+>', '', markdown.markdown(content))
    plain_text = re.sub(r'\s+', ' ', plain_text).strip()
    if len(plain_text) <= max_length:
        return plain_text
    return plain_text[:max_length].rsplit(' ', 1)[0] + '...'


def slugify_category(name: str) -> str:
    """'Machine Learning' -> 'machine-learning'"""
    return re.sub(r'\s+', '-', name.lower())
