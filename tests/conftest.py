"""
Shared fixtures: temporary content directories and in-memory databases
"""
from pathlib import Path
from typing import Callable, Iterable, Optional

import pytest
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from portfolio_backend.content_store import ContentStore
from portfolio_backend.database import Author


def render_post(
    title: Optional[str] = None,
    date: Optional[str] = None,
    category: Optional[str] = None,
    tags: Optional[Iterable[str]] = None,
    body: str = "Some body text.",
    **extra: str
) -> str:
    lines = []
    if title is not None:
        lines.append(f"title: {title}")
    if date is not None:
        lines.append(f"date: {date}")
    if category is not None:
        lines.append(f"category: {category}")
    if tags is not None:
        lines.append("tags: [" + ", ".join(tags) + "]")
    for key, value in extra.items():
        lines.append(f"{key}: {value}")
    return "---\n" + "\n".join(lines) + "\n---\n" + body + "\n"


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def content_dir(tmp_path) -> Path:
    directory = tmp_path / "blog"
    directory.mkdir()
    return directory


@pytest.fixture
def write_post(content_dir) -> Callable[..., Path]:
    """Write a markdown file into the content directory"""
    def _write(name: str, **fields) -> Path:
        path = content_dir / name
        path.write_text(render_post(**fields), encoding="utf-8")
        return path
    return _write


@pytest.fixture
def store(content_dir) -> ContentStore:
    return ContentStore(content_dir, site_owner="Site Owner")


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def authors(session):
    """Two authors, ids 1 and 2"""
    alice = Author(name="Alice", email="alice@example.com")
    bob = Author(name="Bob", email="bob@example.com")
    session.add(alice)
    session.add(bob)
    session.commit()
    session.refresh(alice)
    session.refresh(bob)
    return alice, bob
