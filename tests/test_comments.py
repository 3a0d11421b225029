# tests/test_comments.py
from newsverify.database import Comment


def test_create_and_list_comments(client, auth, member, reader, make_news):
    news_id = make_news(member)

    r = client.post(
        f"/news/{news_id}/comments",
        json={"content": "Source is a satire site", "imageUrl": "http://img/evidence.png"},
        headers=auth(reader),
    )
    assert r.status_code == 201
    body = r.json()
    assert body["content"] == "Source is a satire site"
    assert body["user"]["id"] == reader
    assert body["isDeleted"] is False

    r = client.get(f"/news/{news_id}/comments")
    assert r.status_code == 200
    assert [c["id"] for c in r.json()["data"]] == [body["id"]]
    assert r.json()["pagination"] == {"page": 1, "pageSize": 10, "total": 1, "totalPages": 1}


def test_comment_does_not_require_vote(client, auth, member, reader, make_news):
    news_id = make_news(member)
    r = client.post(f"/news/{news_id}/comments", json={"content": "No vote yet"}, headers=auth(reader))
    assert r.status_code == 201
    assert client.get(f"/news/{news_id}", headers=auth(reader)).json()["userVote"] is None


def test_comment_validation_and_auth(client, auth, member, reader, make_news):
    news_id = make_news(member)
    assert client.post(f"/news/{news_id}/comments", json={"content": "hi"}).status_code == 401

    r = client.post(f"/news/{news_id}/comments", json={"content": "", "imageUrl": "http://img/x.png"},
                    headers=auth(reader))
    assert r.status_code == 400

    r = client.post("/news/missing/comments", json={"content": "hi"}, headers=auth(reader))
    assert r.status_code == 404


def test_comment_on_hidden_news(client, auth, admin, member, reader, make_news):
    news_id = make_news(member, hidden=True)
    assert client.post(f"/news/{news_id}/comments", json={"content": "hi"}, headers=auth(reader)).status_code == 404
    assert client.post(f"/news/{news_id}/comments", json={"content": "hi"}, headers=auth(admin)).status_code == 201


def test_soft_deleted_comment_disappears_but_is_kept(
    client, auth, session_factory, admin, member, reader, make_news, make_comment, make_vote
):
    news_id = make_news(member)
    make_vote(news_id, reader, "FAKE")
    keep = make_comment(news_id, reader, "keep me")
    drop = make_comment(news_id, member, "drop me")

    assert client.get(f"/news/{news_id}").json()["commentCount"] == 2

    r = client.delete(f"/comments/{drop}", headers=auth(admin))
    assert r.status_code == 200
    assert r.json()["isDeleted"] is True

    for headers in ({}, auth(reader), auth(admin)):
        listed = client.get(f"/news/{news_id}/comments", headers=headers).json()
        assert [c["id"] for c in listed["data"]] == [keep]
        detail = client.get(f"/news/{news_id}", headers=headers).json()
        assert detail["commentCount"] == 1
        # Hiding a comment leaves the tally alone
        assert detail["voteCounts"]["total"] == 1

    with session_factory() as s:
        assert s.get(Comment, drop) is not None


def test_comment_count_after_k_deletions(client, auth, admin, member, reader, make_news, make_comment):
    news_id = make_news(member)
    ids = [make_comment(news_id, reader, f"c{i}") for i in range(6)]
    for comment_id in ids[:4]:
        assert client.delete(f"/comments/{comment_id}", headers=auth(admin)).status_code == 200

    for headers in ({}, auth(reader), auth(admin)):
        assert client.get(f"/news/{news_id}", headers=headers).json()["commentCount"] == 2
    assert client.get(f"/news/{news_id}/comments").json()["pagination"]["total"] == 2


def test_delete_comment_rules(client, auth, admin, member, reader, make_news, make_comment):
    news_id = make_news(member)
    comment_id = make_comment(news_id, reader)

    assert client.delete(f"/comments/{comment_id}", headers=auth(member)).status_code == 403
    assert client.delete(f"/comments/{comment_id}").status_code == 401
    r = client.delete("/comments/missing", headers=auth(admin))
    assert r.status_code == 404
    assert r.json() == {"error": "Comment not found"}


def test_top_level_listing_needs_news_id(client, member, reader, make_news, make_comment):
    news_id = make_news(member)
    make_comment(news_id, reader)

    r = client.get("/comments")
    assert r.status_code == 400
    assert r.json() == {"error": "News ID is required"}

    r = client.get("/comments", params={"newsId": news_id})
    assert r.status_code == 200
    assert r.json()["pagination"]["total"] == 1


def test_comment_pagination(client, member, reader, make_news, make_comment):
    news_id = make_news(member)
    for i in range(7):
        make_comment(news_id, reader, f"c{i}")

    r = client.get(f"/news/{news_id}/comments", params={"page": 2, "pageSize": 5})
    assert len(r.json()["data"]) == 2
    assert r.json()["pagination"]["totalPages"] == 2
    # Newest first
    first_page = client.get(f"/news/{news_id}/comments", params={"pageSize": 5}).json()["data"]
    assert first_page[0]["content"] == "c6"

    r = client.get(f"/news/{news_id}/comments", params={"page": 10**17, "pageSize": 5})
    assert r.status_code == 200
    assert r.json()["data"] == []
    assert r.json()["pagination"]["total"] == 7
