"""Tests for flat forum replies."""

import pytest
from conftest import client, delete_json, make_post, make_reply, post_id_of, url

from planeta.models import ForumReply


@pytest.fixture
def post_id():
    return post_id_of(make_post())


def reply_id_of(response):
    return response.json()["data"]["reply"]["id"]


def reply_count(post_id):
    return client.get(url(f"/forum/{post_id}")).json()["data"]["post"]["replyCount"]


def test_create_reply(post_id):
    r = make_reply(post_id)
    assert r.status_code == 200
    assert r.json()["msg"] == "¡Respuesta creada exitosamente!"
    reply = r.json()["data"]["reply"]
    assert reply["id"].startswith("forumReply_")
    assert reply["postId"] == post_id
    assert "authorEmail" not in reply


@pytest.mark.parametrize("length,status", [(4, 400), (5, 200), (2000, 200), (2001, 400)])
def test_reply_length_boundaries(post_id, length, status):
    r = make_reply(post_id, content="r" * length)
    assert r.status_code == status
    if status == 400:
        assert r.json()["msg"] == "El contenido debe tener entre 5 y 2000 caracteres"


def test_reply_to_missing_post():
    r = make_reply("forumPost_missing")
    assert r.status_code == 404
    assert r.json()["msg"] == "El post no existe"


def test_list_replies_oldest_first(post_id):
    make_reply(post_id, content="Primera respuesta")
    make_reply(post_id, content="Segunda respuesta")
    r = client.get(url("/forum/replies"), params={"postId": post_id})
    assert [x["content"] for x in r.json()["data"]["replies"]] == ["Primera respuesta", "Segunda respuesta"]


def test_list_replies_requires_post_id():
    r = client.get(url("/forum/replies"))
    assert r.status_code == 400


def test_reply_updates_reply_count(post_id):
    make_reply(post_id)
    make_reply(post_id)
    assert reply_count(post_id) == 2


def test_update_reply(post_id):
    rid = reply_id_of(make_reply(post_id))
    r = client.put(url("/forum/replies"), json={"replyId": rid, "authorId": "user-eva", "content": "Respuesta corregida"})
    assert r.status_code == 200
    assert r.json()["data"]["reply"]["content"] == "Respuesta corregida"
    assert r.json()["data"]["reply"]["isEdited"] is True


def test_update_reply_wrong_author(post_id, db):
    rid = reply_id_of(make_reply(post_id))
    r = client.put(url("/forum/replies"), json={"replyId": rid, "authorId": "intruso", "content": "Respuesta corregida"})
    assert r.status_code == 403
    assert db.get(ForumReply, rid).content == "Gracias por compartir"


def test_delete_reply_resyncs_count(post_id, db):
    rid = reply_id_of(make_reply(post_id))
    make_reply(post_id)
    r = delete_json("/forum/replies", {"replyId": rid, "authorId": "user-eva", "postId": post_id})
    assert r.status_code == 200
    assert reply_count(post_id) == 1

    stored = db.get(ForumReply, rid)
    assert stored.is_deleted is True
    assert stored.content == "[Respuesta eliminada por el usuario]"


def test_delete_reply_uses_its_own_post(post_id):
    other = post_id_of(make_post(title="Otra publicacion distinta"))
    rid = reply_id_of(make_reply(post_id))
    make_reply(other)

    r = delete_json("/forum/replies", {"replyId": rid, "authorId": "user-eva", "postId": other})
    assert r.status_code == 200
    assert reply_count(post_id) == 0
    assert reply_count(other) == 1


def test_delete_reply_wrong_author(post_id):
    rid = reply_id_of(make_reply(post_id))
    r = delete_json("/forum/replies", {"replyId": rid, "authorId": "intruso"})
    assert r.status_code == 403
