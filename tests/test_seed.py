# tests/test_seed.py
from newsverify.database import News, User
from newsverify.seed import DEMO_PASSWORD, seed
from newsverify.security import verify_password


def test_seed_creates_demo_content(db):
    counts = seed(db)
    assert counts == {"users": 3, "news": 25, "comments": 50, "votes": 25 + 9}

    admin = db.query(User).filter(User.email == "admin@example.com").one()
    assert admin.role == "ADMIN"
    assert verify_password(DEMO_PASSWORD, admin.password_hash)

    statuses = [n.status for n in db.query(News).all()]
    assert statuses.count("FAKE") == 9


def test_seed_reuses_accounts(db):
    seed(db, news_count=2)
    counts = seed(db, news_count=2)
    assert counts["users"] == 3
    assert counts["news"] == 4


def test_seeded_aggregates_through_api(client, session_factory):
    with session_factory() as s:
        seed(s, news_count=3)

    data = client.get("/news").json()["data"]
    by_topic = {n["topic"]: n for n in data}
    # News 1 is FAKE: reader NOT_FAKE + member FAKE
    assert by_topic["News Topic 1"]["voteCounts"] == {"fake": 1, "notFake": 1, "total": 2}
    assert by_topic["News Topic 2"]["voteCounts"] == {"fake": 0, "notFake": 1, "total": 1}
    assert all(n["commentCount"] == 2 for n in data)
