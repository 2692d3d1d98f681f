"""
Tests for post CRUD and ownership checks against in-memory SQLite
"""
import pytest

from portfolio_backend.database import PostCreate, PostUpdate
from portfolio_backend.exceptions import ForbiddenError, StoredPostNotFoundError
from portfolio_backend.repository import PostRepository


@pytest.fixture
def repository(session) -> PostRepository:
    return PostRepository(session)


def new_post(title: str = "Hello", **fields) -> PostCreate:
    return PostCreate(title=title, content=fields.pop("content", "Body"), **fields)


def test_create_assigns_owner_and_resolves_author(repository, authors):
    alice, _ = authors

    post = repository.create(new_post(tags=["python"]), alice.id)

    assert post.id is not None
    assert post.author_id == alice.id
    assert post.author.name == "Alice"
    assert post.tags == ["python"]
    assert post.category == "Development"


def test_find_all_newest_first(repository, authors):
    alice, bob = authors
    first = repository.create(new_post("first"), alice.id)
    second = repository.create(new_post("second"), bob.id)
    third = repository.create(new_post("third"), alice.id)

    posts = repository.find_all()

    assert [p.id for p in posts] == [third.id, second.id, first.id]
    assert {p.author.name for p in posts} == {"Alice", "Bob"}


def test_find_one_missing(repository):
    with pytest.raises(StoredPostNotFoundError):
        repository.find_one(999)


def test_update_by_owner_is_partial(repository, authors):
    alice, _ = authors
    post = repository.create(new_post("Original", excerpt="Short", tags=["a"]), alice.id)

    updated = repository.update(post.id, PostUpdate(title="Renamed"), alice.id)

    assert updated.title == "Renamed"
    assert updated.excerpt == "Short"
    assert updated.tags == ["a"]
    assert updated.updated_at >= post.updated_at


def test_update_can_clear_optional_fields(repository, authors):
    alice, _ = authors
    post = repository.create(new_post(image="/cover.png"), alice.id)

    updated = repository.update(post.id, PostUpdate(image=None), alice.id)

    assert updated.image is None


def test_update_by_other_user_is_forbidden_and_unchanged(repository, authors):
    alice, bob = authors
    post = repository.create(new_post("Mine"), alice.id)

    with pytest.raises(ForbiddenError):
        repository.update(post.id, PostUpdate(title="Hijacked"), bob.id)

    assert repository.find_one(post.id).title == "Mine"


def test_update_missing_post(repository, authors):
    alice, _ = authors
    with pytest.raises(StoredPostNotFoundError):
        repository.update(42, PostUpdate(title="x"), alice.id)


def test_remove_by_owner_then_not_found(repository, authors):
    alice, _ = authors
    post = repository.create(new_post(), alice.id)

    repository.remove(post.id, alice.id)

    with pytest.raises(StoredPostNotFoundError):
        repository.find_one(post.id)
    with pytest.raises(StoredPostNotFoundError):
        repository.remove(post.id, alice.id)


def test_remove_by_other_user_is_forbidden(repository, authors):
    alice, bob = authors
    post = repository.create(new_post(), alice.id)

    with pytest.raises(ForbiddenError):
        repository.remove(post.id, bob.id)

    assert repository.find_one(post.id).id == post.id


def test_find_by_author(repository, authors):
    alice, bob = authors
    a1 = repository.create(new_post("a1"), alice.id)
    repository.create(new_post("b1"), bob.id)
    a2 = repository.create(new_post("a2"), alice.id)

    posts = repository.find_by_author(alice.id)

    assert [p.id for p in posts] == [a2.id, a1.id]
    assert repository.find_by_author(12345) == []


if __name__ == "__main__":
    pytest.main([__file__])
