"""
HTTP tests through the FastAPI application
"""
import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from portfolio_backend.content_store import ContentStore
from portfolio_backend.database import Author
from portfolio_backend.dependencies import get_container
from portfolio_backend.main import app


@pytest.fixture
def client(content_dir, write_post, engine):
    write_post("a.md", title="Docker basics", date="2024-01-10", category="DevOps", tags=["Docker"])
    write_post("b.md", title="Spring JWT", date="2024-01-15", category="Backend", tags=["JWT"])

    container = get_container()
    container.reset()
    container.override("engine", engine)
    container.override("content_store", ContentStore(content_dir, site_owner="Site Owner"))

    with Session(engine) as session:
        session.add(Author(id=1, name="Alice"))
        session.add(Author(id=2, name="Bob"))
        session.commit()

    with TestClient(app) as client:
        yield client

    container.reset()


def as_user(user_id: int) -> dict:
    return {"X-User-Id": str(user_id)}


def test_list_posts(client):
    response = client.get("/blog/posts")

    assert response.status_code == 200
    body = response.json()
    assert [item["slug"] for item in body["items"]] == ["b", "a"]
    assert "content" not in body["items"][0]
    assert response.headers["X-Request-ID"]


def test_list_posts_exactly_full_last_page(client):
    body = client.get("/blog/posts", params={"limit": 2}).json()

    assert len(body["items"]) == 2
    assert body["total"] == 2
    assert body["has_more"] is False

    assert client.get("/blog/posts", params={"limit": 1}).json()["has_more"] is True


def test_list_posts_filters(client):
    response = client.get("/blog/posts", params={"category": "devops", "q": "dock"})

    assert [item["slug"] for item in response.json()["items"]] == ["a"]


def test_get_post_and_not_found(client):
    assert client.get("/blog/posts/a").json()["author"] == "Site Owner"

    response = client.get("/blog/posts/missing")
    assert response.status_code == 404
    assert response.json()["error"] == "POST_NOT_FOUND"


def test_categories_and_tags(client):
    categories = client.get("/blog/categories").json()
    assert [c["slug"] for c in categories] == ["backend", "devops"]

    assert client.get("/blog/tags").json() == {"tags": ["Docker", "JWT"], "total_tags": 2}
    assert [p["slug"] for p in client.get("/blog/tags/jwt/posts").json()] == ["b"]
    assert [p["slug"] for p in client.get("/blog/categories/BACKEND/posts").json()] == ["b"]


def test_comment_flow(client):
    first = client.post("/blog/posts/a/comments", json={"author": "Reader", "content": "Nice"})
    second = client.post("/blog/posts/a/comments", json={"author": "Other", "content": "Thanks"})
    assert first.status_code == 201

    reply = client.post(f"/blog/comments/{first.json()['id']}/replies",
                        json={"author": "Site Owner", "content": "Glad it helped"})
    assert reply.status_code == 201

    thread = client.get("/blog/posts/a/comments").json()
    assert thread["count"] == 2
    assert [c["id"] for c in thread["comments"]] == [second.json()["id"], first.json()["id"]]
    assert thread["comments"][1]["replies"][0]["content"] == "Glad it helped"


def test_comment_validation(client):
    response = client.post("/blog/posts/a/comments", json={"author": "   ", "content": "Hi"})
    assert response.status_code == 422

    assert client.post("/blog/posts/missing/comments",
                       json={"author": "A", "content": "Hi"}).status_code == 404
    assert client.post("/blog/comments/nope/replies",
                       json={"author": "A", "content": "Hi"}).status_code == 404


def test_post_crud_ownership(client):
    created = client.post("/posts", json={"title": "Hello", "content": "Body"}, headers=as_user(1))
    assert created.status_code == 201
    post_id = created.json()["id"]
    assert created.json()["author"]["name"] == "Alice"

    forbidden = client.patch(f"/posts/{post_id}", json={"title": "Mine now"}, headers=as_user(2))
    assert forbidden.status_code == 403
    assert client.get(f"/posts/{post_id}").json()["title"] == "Hello"

    updated = client.patch(f"/posts/{post_id}", json={"title": "Hello again"}, headers=as_user(1))
    assert updated.json()["title"] == "Hello again"
    assert updated.json()["content"] == "Body"

    assert [p["id"] for p in client.get("/posts/author/1").json()] == [post_id]
    assert len(client.get("/posts").json()) == 1

    assert client.delete(f"/posts/{post_id}", headers=as_user(2)).status_code == 403
    assert client.delete(f"/posts/{post_id}", headers=as_user(1)).status_code == 204
    assert client.delete(f"/posts/{post_id}", headers=as_user(1)).status_code == 404
    assert client.get(f"/posts/{post_id}").status_code == 404


def test_mutation_requires_user_header(client):
    response = client.post("/posts", json={"title": "Hello", "content": "Body"})

    assert response.status_code == 401
    assert response.json()["error"] == "ACTOR_REQUIRED"


def test_health(client):
    body = client.get("/health").json()

    assert body["status"] == "healthy"
    assert body["checks"]["posts_loaded"] == 2
    assert body["checks"]["database"] is True


if __name__ == "__main__":
    pytest.main([__file__])
