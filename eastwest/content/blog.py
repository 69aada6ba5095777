from __future__ import annotations

from datetime import datetime, timedelta, timezone
from typing import Any

from ..seo.schema import SITE_URL, BlogPostInfo


def _days_ago(days: int) -> str:
    return (datetime.now(timezone.utc) - timedelta(days=days)).isoformat(timespec="seconds")


def _post(
    slug: str,
    title: str,
    excerpt: str,
    author: str,
    cover: str,
    tags: list[str],
    reading_time: int,
    age_days: int,
    featured: bool = False,
) -> dict[str, Any]:
    published = _days_ago(age_days)
    return {
        "slug": slug,
        "title": title,
        "excerpt": excerpt,
        "author_name": author,
        "cover_image_url": cover,
        "tags": tags,
        "published": True,
        "featured": featured,
        "reading_time": reading_time,
        "published_at": published,
        "updated_at": published,
    }


SAMPLE_POSTS: list[dict[str, Any]] = [
    _post(
        "mezze-vegetarian-guide",
        "Discover Vegetarian Lebanese Mezze",
        "A quick guide to our favorite vegetarian mezze.",
        "East @ West Team",
        "/images/gallery/falafel.webp",
        ["vegetarian", "mezze"],
        reading_time=4,
        age_days=1,
        featured=True,
    ),
    _post(
        "mezze-vegetarien-bruxelles",
        "Guide des Mezze Végétariens",
        "Découvrez nos mezze végétariens préférés.",
        "Equipe East @ West",
        "/images/gallery/mezze-selection.webp",
        ["vegetarien", "mezze"],
        reading_time=3,
        age_days=3,
    ),
    _post(
        "mezze-vegetarisch-brussel",
        "Vegetarische Mezze Gids",
        "Ontdek onze favoriete vegetarische mezze.",
        "East @ West Team",
        "/images/gallery/mezze-libanais.webp",
        ["vegetarisch", "mezze"],
        reading_time=5,
        age_days=5,
    ),
]


def list_posts() -> list[dict[str, Any]]:
    """Published posts, newest first."""
    posts = [post for post in SAMPLE_POSTS if post["published"]]
    return sorted(posts, key=lambda post: post["published_at"], reverse=True)


def get_post(slug: str) -> dict[str, Any] | None:
    for post in SAMPLE_POSTS:
        if post["slug"] == slug and post["published"]:
            return post
    return None


def post_schema_info(post: dict[str, Any]) -> BlogPostInfo:
    return BlogPostInfo(
        title=post["title"],
        description=post["excerpt"],
        author=post["author_name"],
        date_published=post["published_at"],
        date_modified=post["updated_at"],
        url=f"{SITE_URL}/blog/{post['slug']}",
        image=f"{SITE_URL}{post['cover_image_url']}",
        tags=tuple(post["tags"]),
    )
