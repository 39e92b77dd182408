#!/usr/bin/env python3
"""
Repair drifted post comment counts
==================================
Recomputes Post.comments_count from the live comments table. Counts only
drift when a background update failed; this sweep is the out-of-band fix.

Usage:
    python scripts/reconcile_counts.py [--post-id 42] [--dry-run]
"""

import argparse

from campusfeed.config import get_settings
from campusfeed.database import Base, make_engine, make_session_factory
from campusfeed.services.counters import CommentCounter


def reconcile(database_url: str, post_id=None, dry_run: bool = False) -> int:
    """Run the sweep; returns the number of posts that drifted."""
    engine = make_engine(database_url)
    Base.metadata.create_all(bind=engine)
    counter = CommentCounter(make_session_factory(engine))

    print(f"Reconciling comment counts in: {database_url}")
    print("-" * 50)

    try:
        if post_id is not None:
            drift = counter.reconcile(post_id, dry_run=dry_run)
            if drift is None:
                print(f"Post {post_id} not found")
                return 0
            drifted = {post_id: drift} if drift else {}
        else:
            drifted = counter.reconcile_all(dry_run=dry_run)
    finally:
        engine.dispose()

    for pid, drift in sorted(drifted.items()):
        prefix = "[DRY RUN] Would fix" if dry_run else "Fixed"
        print(f"{prefix} post {pid}: off by {drift:+d}")

    print("-" * 50)
    print(f"{len(drifted)} post(s) drifted")
    return len(drifted)


def main():
    parser = argparse.ArgumentParser(description="Recompute denormalized comment counts")
    parser.add_argument(
        "--database-url",
        default=get_settings().database_url,
        help="Database URL (default: DATABASE_URL / settings)"
    )
    parser.add_argument(
        "--post-id",
        type=int,
        default=None,
        help="Only reconcile this post"
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Report drift without writing"
    )
    args = parser.parse_args()

    reconcile(args.database_url, args.post_id, args.dry_run)


if __name__ == "__main__":
    main()
