"""Tests for the two-level comment thread and its counters."""

import pytest
from conftest import client, delete_json, make_comment, make_post, make_reply, post_id_of, url

from planeta.models import ForumComment, ForumPost


@pytest.fixture
def post_id():
    return post_id_of(make_post())


def thread(post_id):
    return client.get(url(f"/forum/{post_id}/comments")).json()["data"]


def comment_ids(response):
    return [c["id"] for c in response.json()["data"]["comments"]]


def root_id_by_content(data, content):
    return next(c["id"] for c in data["comments"] if c["content"] == content)


def reply_count(post_id):
    return client.get(url(f"/forum/{post_id}")).json()["data"]["post"]["replyCount"]


# --- Tree shape ---


def test_thread_roots_newest_first_replies_oldest_first(post_id):
    data = make_comment(post_id, content="Comentario raiz A").json()["data"]
    root_a = root_id_by_content(data, "Comentario raiz A")
    data = make_comment(post_id, content="Comentario raiz B").json()["data"]
    root_b = root_id_by_content(data, "Comentario raiz B")

    make_comment(post_id, content="Respuesta A uno", parentId=root_a)
    make_comment(post_id, content="Respuesta A dos", parentId=root_a)
    make_comment(post_id, content="Respuesta B uno", parentId=root_b)

    data = thread(post_id)
    assert data["total"] == 2
    assert [c["id"] for c in data["comments"]] == [root_b, root_a]

    replies_a = [r["content"] for r in data["comments"][1]["replies"]]
    assert replies_a == ["Respuesta A uno", "Respuesta A dos"]
    assert all(r["parentId"] == root_a for r in data["comments"][1]["replies"])
    assert [r["content"] for r in data["comments"][0]["replies"]] == ["Respuesta B uno"]


def test_thread_of_missing_post():
    r = client.get(url("/forum/forumPost_missing/comments"))
    assert r.status_code == 404


def test_pending_comment_not_in_thread(post_id, pending_by_default):
    r = make_comment(post_id)
    assert r.status_code == 200
    assert thread(post_id)["comments"] == []


# --- Create ---


@pytest.mark.parametrize("length,status", [(4, 400), (5, 200), (1000, 200), (1001, 400)])
def test_comment_length_boundaries(post_id, length, status):
    r = make_comment(post_id, content="c" * length)
    assert r.status_code == status
    if status == 400:
        assert r.json()["msg"] == "El comentario debe tener entre 5 y 1000 caracteres"


def test_comment_missing_author():
    pid = post_id_of(make_post())
    r = client.post(url(f"/forum/{pid}/comments"), json={"content": "Hola a todos"})
    assert r.status_code == 400
    assert r.json()["msg"] == "Faltan campos requeridos"


def test_comment_on_missing_post():
    r = make_comment("forumPost_missing")
    assert r.status_code == 404


def test_comment_on_locked_post(post_id, db):
    db.get(ForumPost, post_id).is_locked = True
    db.commit()
    r = make_comment(post_id)
    assert r.status_code == 403


def test_reply_to_reply_is_rejected(post_id):
    root = comment_ids(make_comment(post_id))[0]
    data = make_comment(post_id, parentId=root).json()["data"]
    nested = data["comments"][0]["replies"][0]["id"]

    r = make_comment(post_id, parentId=nested)
    assert r.status_code == 400
    assert r.json()["msg"] == "Solo se puede responder a comentarios principales"


def test_parent_from_another_post(post_id):
    other = post_id_of(make_post(title="Otra publicacion distinta"))
    foreign_root = comment_ids(make_comment(other))[0]
    r = make_comment(post_id, parentId=foreign_root)
    assert r.status_code == 404


def test_missing_parent(post_id):
    r = make_comment(post_id, parentId="forumComment_missing")
    assert r.status_code == 404


# --- Edit / delete ---


def test_edit_comment_by_owner(post_id):
    cid = comment_ids(make_comment(post_id))[0]
    r = client.put(url(f"/forum/comments/{cid}"), json={"content": "Texto corregido", "authorId": "user-luis"})
    assert r.status_code == 200
    node = r.json()["data"]["comments"][0]
    assert node["content"] == "Texto corregido"
    assert node["isEdited"] is True


def test_edit_comment_wrong_author(post_id, db):
    cid = comment_ids(make_comment(post_id))[0]
    r = client.put(url(f"/forum/comments/{cid}"), json={"content": "Texto corregido", "authorId": "intruso"})
    assert r.status_code == 403
    assert db.get(ForumComment, cid).content == "Muy buen aporte"


def test_delete_comment_wrong_author(post_id):
    cid = comment_ids(make_comment(post_id))[0]
    r = delete_json(f"/forum/comments/{cid}", {"authorId": "intruso"})
    assert r.status_code == 403


def test_soft_deleted_comment_leaves_thread(post_id, db):
    cid = comment_ids(make_comment(post_id))[0]
    r = delete_json(f"/forum/comments/{cid}", {"authorId": "user-luis"})
    assert r.status_code == 200
    assert r.json()["data"]["comments"] == []

    stored = db.get(ForumComment, cid)
    assert stored.is_deleted is True
    assert stored.content == "[Comentario eliminado por el usuario]"


def test_deleting_root_hides_its_replies(post_id):
    root = comment_ids(make_comment(post_id))[0]
    make_comment(post_id, parentId=root)
    delete_json(f"/forum/comments/{root}", {"authorId": "user-luis"})
    assert thread(post_id)["comments"] == []


def test_delete_already_deleted_comment(post_id):
    cid = comment_ids(make_comment(post_id))[0]
    delete_json(f"/forum/comments/{cid}", {"authorId": "user-luis"})
    r = delete_json(f"/forum/comments/{cid}", {"authorId": "user-luis"})
    assert r.status_code == 404


# --- replyCount ---


def test_reply_count_follows_live_children(post_id):
    ids = []
    for i in range(3):
        ids = comment_ids(make_comment(post_id, content=f"Comentario numero {i}"))
    assert reply_count(post_id) == 3

    delete_json(f"/forum/comments/{ids[0]}", {"authorId": "user-luis"})
    assert reply_count(post_id) == 2


def test_reply_count_includes_forum_replies(post_id):
    make_comment(post_id)
    make_reply(post_id)
    assert reply_count(post_id) == 2


def test_comment_touches_last_activity(post_id, db):
    before = db.get(ForumPost, post_id).last_activity_at
    make_comment(post_id)
    db.expire_all()
    assert db.get(ForumPost, post_id).last_activity_at >= before


# --- Likes ---


def test_like_and_unlike(post_id):
    cid = comment_ids(make_comment(post_id))[0]
    client.post(url(f"/forum/comments/{cid}/like"))
    r = client.post(url(f"/forum/comments/{cid}/like"))
    assert r.json()["msg"] == "Like agregado exitosamente"
    assert r.json()["data"]["comments"][0]["likes"] == 2

    r = client.delete(url(f"/forum/comments/{cid}/like"))
    assert r.json()["msg"] == "Like removido exitosamente"
    assert r.json()["data"]["comments"][0]["likes"] == 1


def test_unlike_never_goes_negative(post_id):
    cid = comment_ids(make_comment(post_id))[0]
    for _ in range(3):
        r = client.delete(url(f"/forum/comments/{cid}/like"))
        assert r.status_code == 200
    assert r.json()["data"]["comments"][0]["likes"] == 0


def test_like_missing_comment():
    r = client.post(url("/forum/comments/forumComment_missing/like"))
    assert r.status_code == 404
