"""
Seed a local database with a demo school, users, posts and comments.
"""
import random

from campusfeed.clock import MS_PER_HOUR, now_ms
from campusfeed.config import get_settings
from campusfeed.database import Base, make_engine, make_session_factory
from campusfeed.models import Comment, Post, School, User

engine = make_engine(get_settings().database_url)

# Create tables
Base.metadata.create_all(bind=engine)

db = make_session_factory(engine)()

# Clear existing data
db.query(Comment).delete()
db.query(Post).delete()
db.query(User).delete()
db.query(School).delete()
db.commit()

school = School(name="Demo University")
db.add(school)
db.commit()

users = [User(name=name, school_id=school.id) for name in ("Alex", "Sam", "Jordan", "Riley")]
db.add_all(users)
db.commit()

now = now_ms()
rng = random.Random(7)

post_texts = [
    "Library is packed again, anyone know a quiet study spot?",
    "Free pizza at the student union until 2pm",
    "Who else is taking the 8am stats lecture?",
    "Intramural soccer signups close Friday",
    "Lost a blue water bottle near the gym",
    "The new coffee place on campus is actually good",
]

posts = []
for i, text in enumerate(post_texts):
    # Spread posts over the past two days so both feeds have something to show
    posts.append(Post(
        user_id=users[i % len(users)].id,
        school_id=school.id,
        content=text,
        created_at=now - rng.randint(0, 48) * MS_PER_HOUR - i,
        upvotes=rng.randint(0, 200),
        downvotes=rng.randint(0, 60),
        comments_count=0,
    ))
db.add_all(posts)
db.commit()

comment_texts = ["Same here", "Thanks for sharing!", "lol", "On my way", "Good to know"]
comments = []
for post in posts:
    for j in range(rng.randint(0, 4)):
        comments.append(Comment(
            post_id=post.id,
            user_id=rng.choice(users).id,
            content=rng.choice(comment_texts),
            created_at=min(post.created_at + (j + 1) * 60_000, now),
        ))
        post.comments_count += 1
db.add_all(comments)
db.commit()

print("Database seeded successfully!")
print(f"  - 1 school")
print(f"  - {len(users)} users")
print(f"  - {len(posts)} posts")
print(f"  - {len(comments)} comments")

db.close()
