#!/usr/bin/env python3
"""
Seed the database with the starting accounts and a little demo content.

Registration only ever creates USER accounts, so this script is how a fresh
deployment gets its first ADMIN and MODERATOR. It is idempotent: anything
that already exists (matched case-insensitively) is skipped.

Passwords default to well-known demo values; set SEED_ADMIN_PASSWORD,
SEED_MODERATOR_PASSWORD and SEED_USER_PASSWORD to override them.

Usage:
    python seed_users.py            # accounts, categories and tags
    python seed_users.py --posts    # plus sample posts and comments
    python seed_users.py --yes      # skip the confirmation prompt
"""

import argparse
import os
import sys
from typing import Callable, Dict, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from zenith.core.security import get_password_hash
from zenith.db.session import SessionLocal
from zenith.models import Category, Comment, CommentStatus, Post, PostStatus, Role, Tag, User
from zenith.services.post import PostService, calculate_reading_time
from zenith.utils.logger import get_logger

seed_logger = get_logger("SEED")

SEED_CATEGORIES = ["Technology", "Lifestyle", "Travel"]
SEED_TAGS = ["Java", "Spring", "Travel", "Lifestyle"]

SEED_USERS = [
    {
        "username": "john_doe",
        "email": "john.doe@example.com",
        "password_env": "SEED_ADMIN_PASSWORD",
        "password": "SecurePass123!",
        "first_name": "John",
        "last_name": "Doe",
        "bio": "Experienced software engineer and tech enthusiast. Admin of this platform.",
        "role": Role.ADMIN,
    },
    {
        "username": "alice_smith",
        "email": "alice.smith@example.com",
        "password_env": "SEED_MODERATOR_PASSWORD",
        "password": "AlicePass456!",
        "first_name": "Alice",
        "last_name": "Smith",
        "bio": "Passionate about technology and lifestyle. Loves to share insights and experiences.",
        "role": Role.MODERATOR,
    },
    {
        "username": "bob_jones",
        "email": "bob.jones@example.com",
        "password_env": "SEED_USER_PASSWORD",
        "password": "BobPass789!",
        "first_name": "Bob",
        "last_name": "Jones",
        "bio": "Travel enthusiast and tech hobbyist. Enjoys writing about adventures and discoveries.",
        "role": Role.USER,
    },
]

# (author, title, content, status, category, tags)
SEED_POSTS = [
    ("john_doe", "Spring Boot Best Practices",
     "In this post, I'll share some of the best practices I've learned while working with Spring Boot...",
     PostStatus.DRAFT, "Technology", ["Java", "Spring"]),
    ("john_doe", "Mastering Java Streams",
     "Java Streams have revolutionized how we process collections in Java. Let's dive deep into their capabilities...",
     PostStatus.PUBLISHED, "Technology", ["Java"]),
    ("john_doe", "Legacy Java EE Patterns",
     "While still useful in some contexts, many Java EE patterns have been replaced by simpler approaches...",
     PostStatus.ARCHIVED, "Technology", ["Java"]),
    ("alice_smith", "My Morning Routine for Productivity",
     "I've been experimenting with different morning routines to boost my productivity. Here's what works for me...",
     PostStatus.DRAFT, "Lifestyle", ["Lifestyle"]),
    ("alice_smith", "10 Lifestyle Hacks for Better Work-Life Balance",
     "In today's fast-paced world, maintaining work-life balance is crucial. Here are my top 10 tips...",
     PostStatus.PUBLISHED, "Lifestyle", ["Lifestyle"]),
    ("bob_jones", "Hidden Gems in Southeast Asia",
     "During my recent trip, I discovered some amazing hidden gems in Southeast Asia. Here are my favorites...",
     PostStatus.DRAFT, "Travel", ["Travel"]),
    ("bob_jones", "The Ultimate Guide to Solo Travel",
     "Solo travel can be intimidating but incredibly rewarding. Here's my comprehensive guide...",
     PostStatus.PUBLISHED, "Travel", ["Travel"]),
]

# (post title, commenter, content, status)
SEED_COMMENTS = [
    ("Mastering Java Streams", "alice_smith",
     "This is exactly what I needed to understand Java Streams better! Thanks for the clear explanation.",
     CommentStatus.APPROVED),
    ("Mastering Java Streams", "bob_jones",
     "I've been struggling with Streams for a while. This post really helped clarify things for me.",
     CommentStatus.PENDING),
    ("10 Lifestyle Hacks for Better Work-Life Balance", "bob_jones",
     "Great tips! I've already started implementing some of them.",
     CommentStatus.APPROVED),
    ("The Ultimate Guide to Solo Travel", "alice_smith",
     "Buy cheap flights at my site!!!",
     CommentStatus.SPAM),
]


class UserSeeder:
    """Creates seed rows in one session; use as a context manager."""

    def __init__(self, session_factory: Optional[Callable[[], Session]] = None):
        self.session_factory = session_factory or SessionLocal
        self.db: Optional[Session] = None
        self.users: Dict[str, User] = {}
        self.categories: Dict[str, Category] = {}
        self.tags: Dict[str, Tag] = {}
        self.stats = {
            "users_created": 0,
            "users_skipped": 0,
            "categories_created": 0,
            "tags_created": 0,
            "posts_created": 0,
            "posts_skipped": 0,
            "comments_created": 0,
        }

    def __enter__(self):
        self.db = self.session_factory()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.db is None:
            return
        try:
            if exc_type is not None:
                self.db.rollback()
                seed_logger.error("Rolling back seed data", context="SESSION", error=str(exc_val))
        finally:
            self.db.close()

    def _find_user(self, username: str, email: str) -> Optional[User]:
        return self.db.query(User).filter(
            or_(func.lower(User.username) == username.lower(), func.lower(User.email) == email.lower())
        ).first()

    def _find_named(self, model, name: str):
        return self.db.query(model).filter(func.lower(model.name) == name.lower()).first()

    def seed_taxonomy(self):
        for name in SEED_CATEGORIES:
            category = self._find_named(Category, name)
            if category is None:
                category = Category(name=name)
                self.db.add(category)
                self.stats["categories_created"] += 1
            self.categories[name] = category

        for name in SEED_TAGS:
            tag = self._find_named(Tag, name)
            if tag is None:
                tag = Tag(name=name)
                self.db.add(tag)
                self.stats["tags_created"] += 1
            self.tags[name] = tag

        self.db.flush()

    def seed_users(self):
        for data in SEED_USERS:
            existing = self._find_user(data["username"], data["email"])
            if existing is not None:
                self.stats["users_skipped"] += 1
                seed_logger.info("User exists, skipping", context="USERS", username=existing.username)
                self.users[data["username"]] = existing
                continue

            password = os.getenv(data["password_env"]) or data["password"]
            user = User(
                username=data["username"],
                email=data["email"],
                password=get_password_hash(password),
                first_name=data["first_name"],
                last_name=data["last_name"],
                bio=data["bio"],
                role=data["role"],
            )
            self.db.add(user)
            self.db.flush()
            self.users[data["username"]] = user
            self.stats["users_created"] += 1
            seed_logger.success("User created", context="USERS", username=user.username, role=user.role.value)

    def seed_posts(self):
        posts: Dict[str, Post] = {}
        for username, title, content, status, category_name, tag_names in SEED_POSTS:
            author = self.users[username]
            existing = self.db.query(Post).filter(Post.title == title, Post.author_id == author.id).first()
            if existing is not None:
                self.stats["posts_skipped"] += 1
                posts[title] = existing
                continue

            post = Post(
                title=title,
                slug=PostService.generate_unique_slug(self.db, title),
                content=content,
                status=status,
                reading_time=calculate_reading_time(content),
                author_id=author.id,
                category_id=self.categories[category_name].id,
            )
            post.tags = [self.tags[name] for name in tag_names]
            self.db.add(post)
            self.db.flush()
            posts[title] = post
            self.stats["posts_created"] += 1

        for title, username, content, status in SEED_COMMENTS:
            post = posts[title]
            commenter = self.users[username]
            exists = self.db.query(Comment.id).filter(
                Comment.post_id == post.id, Comment.author_id == commenter.id, Comment.content == content
            ).first()
            if exists is not None:
                continue
            self.db.add(Comment(content=content, status=status, post_id=post.id, author_id=commenter.id))
            self.stats["comments_created"] += 1

        self.db.flush()

    def run(self, include_posts: bool = False) -> Dict[str, int]:
        seed_logger.section_start("Seeding")
        self.seed_taxonomy()
        self.seed_users()
        if include_posts:
            self.seed_posts()
        self.db.commit()
        seed_logger.section_end("Seeding")
        return self.stats

    def print_summary(self):
        seed_logger.banner("SEED SUMMARY")
        for key, value in self.stats.items():
            seed_logger.info(key.replace("_", " ").capitalize(), context="SUMMARY", count=value)


def main(argv: Optional[List[str]] = None) -> bool:
    parser = argparse.ArgumentParser(description="Seed the Zenith database with starting accounts.")
    parser.add_argument("--posts", action="store_true", help="also create sample posts and comments")
    parser.add_argument("--yes", action="store_true", help="do not ask for confirmation")
    args = parser.parse_args(argv)

    if not args.yes:
        confirmation = input("Seed the database configured in the environment? (yes/y to continue): ").strip().lower()
        if confirmation not in ("yes", "y"):
            seed_logger.warning("Seeding cancelled by user")
            return False

    try:
        with UserSeeder() as seeder:
            seeder.run(include_posts=args.posts)
            seeder.print_summary()
    except SQLAlchemyError as e:
        seed_logger.error("Seeding failed", error=str(e))
        return False
    return True


if __name__ == "__main__":
    sys.exit(0 if main() else 1)
