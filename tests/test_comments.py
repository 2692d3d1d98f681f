"""
Tests for the in-memory comment tree
"""
import pytest

from portfolio_backend.comments import CommentTree
from portfolio_backend.exceptions import CommentNotFoundError


@pytest.fixture
def tree() -> CommentTree:
    return CommentTree()


def test_top_level_comments_are_prepended(tree):
    first = tree.add_top_level("guide", "A", "first")
    second = tree.add_top_level("guide", "B", "second")

    assert [c.id for c in tree.for_post("guide")] == [second.id, first.id]
    assert tree.count("guide") == 2


def test_replies_are_appended_in_call_order(tree):
    parent = tree.add_top_level("guide", "A", "question")
    r1 = tree.add_reply(parent.id, "Owner", "answer")
    r2 = tree.add_reply(parent.id, "A", "thanks")

    [thread] = tree.for_post("guide")

    assert [r.id for r in thread.replies] == [r1.id, r2.id]
    assert r1.post_slug == "guide"


def test_replies_do_not_change_top_level_order(tree):
    older = tree.add_top_level("guide", "A", "older")
    newer = tree.add_top_level("guide", "B", "newer")
    tree.add_reply(older.id, "C", "reply")

    assert [c.id for c in tree.for_post("guide")] == [newer.id, older.id]
    assert tree.count("guide") == 2


def test_reply_to_reply_is_rejected(tree):
    parent = tree.add_top_level("guide", "A", "question")
    reply = tree.add_reply(parent.id, "B", "answer")

    with pytest.raises(CommentNotFoundError):
        tree.add_reply(reply.id, "C", "nested")

    assert not hasattr(reply, "replies")


def test_reply_to_unknown_parent(tree):
    with pytest.raises(CommentNotFoundError):
        tree.add_reply("does-not-exist", "A", "hello")


def test_ids_unique_and_increasing(tree):
    ids = [tree.add_top_level("guide", "A", str(i)).id for i in range(50)]

    assert len(set(ids)) == 50
    assert [int(i) for i in ids] == sorted(int(i) for i in ids)


def test_threads_are_per_post(tree):
    tree.add_top_level("one", "A", "x")

    assert tree.for_post("two") == []
    assert tree.count("two") == 0


def test_for_post_returns_copies(tree):
    parent = tree.add_top_level("guide", "A", "question")
    tree.add_reply(parent.id, "B", "answer")

    tree.for_post("guide")[0].replies.clear()

    assert len(tree.for_post("guide")[0].replies) == 1


if __name__ == "__main__":
    pytest.main([__file__])
