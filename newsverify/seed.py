"""
Demo data: three accounts, 25 news items, comments and votes.

Run with ``python -m newsverify.seed``. Accounts are looked up by email,
so re-running does not duplicate users (news is added again).
"""

import logging
from typing import Dict

from sqlalchemy.orm import Session

from newsverify.database import Comment, News, SessionLocal, User, Vote, init_db
from newsverify.models import NewsStatus, UserRole, VoteValue
from newsverify.security import hash_password


logger = logging.getLogger(__name__)

DEMO_PASSWORD = "password123"

DEMO_USERS = [
    ("admin@example.com", "Admin", "User", UserRole.ADMIN),
    ("member@example.com", "Member", "User", UserRole.MEMBER),
    ("reader@example.com", "Reader", "User", UserRole.READER),
]

STATUS_CYCLE = [NewsStatus.FAKE, NewsStatus.NOT_FAKE, NewsStatus.UNKNOWN]


def _upsert_users(db: Session) -> Dict[UserRole, User]:
    password_hash = hash_password(DEMO_PASSWORD)
    users = {}
    for email, first_name, last_name, role in DEMO_USERS:
        user = db.query(User).filter(User.email == email).first()
        if user is None:
            user = User(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                role=role.value,
            )
            db.add(user)
        users[role] = user
    db.flush()
    return users


def seed(db: Session, news_count: int = 25) -> Dict[str, int]:
    """Populate a database with demo content and return row counts."""
    users = _upsert_users(db)
    member, reader = users[UserRole.MEMBER], users[UserRole.READER]

    for i in range(news_count):
        status = STATUS_CYCLE[i % len(STATUS_CYCLE)]
        news = News(
            topic=f"News Topic {i + 1}",
            short_detail=f"This is a short detail for news {i + 1}.",
            full_detail=(
                f"This is the full detail for news {i + 1}. "
                "It contains more information about the topic."
            ),
            reporter_id=member.id,
            status=status.value,
            image_url=f"https://picsum.photos/seed/{i}/800/600",
        )
        db.add(news)
        db.flush()

        db.add(Comment(news_id=news.id, user_id=reader.id, content="This is a comment from a reader."))
        db.add(Comment(news_id=news.id, user_id=member.id, content="This is a comment from a member."))

        db.add(Vote(news_id=news.id, user_id=reader.id, vote=VoteValue.NOT_FAKE.value))
        if status == NewsStatus.FAKE:
            db.add(Vote(news_id=news.id, user_id=member.id, vote=VoteValue.FAKE.value))

    db.commit()

    return {
        "users": db.query(User).count(),
        "news": db.query(News).count(),
        "comments": db.query(Comment).count(),
        "votes": db.query(Vote).count(),
    }


def main():
    logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
    init_db()
    with SessionLocal() as db:
        counts = seed(db)
    logger.info(f"Seeded database: {counts}")


if __name__ == "__main__":
    main()
