"""schema.org JSON-LD generators for the restaurant, its dishes and blog posts."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

SITE_URL = "https://eastatwest.com"


@dataclass(frozen=True)
class PostalAddress:
    street: str
    city: str
    region: str
    postal_code: str
    country: str


@dataclass(frozen=True)
class OpeningHours:
    days: tuple[str, ...]
    opens: str
    closes: str


@dataclass(frozen=True)
class Rating:
    value: float
    count: int


@dataclass(frozen=True)
class RestaurantInfo:
    name: str = "East @ West"
    description: str = "Authentic Lebanese restaurant in Brussels"
    url: str = SITE_URL
    images: tuple[str, ...] = (f"{SITE_URL}/images/banner.webp",)
    cuisines: tuple[str, ...] = ("Lebanese", "Mediterranean", "Middle Eastern")
    price_range: str = "€€"
    address: PostalAddress | None = None
    phone: str | None = None
    email: str | None = None
    opening_hours: tuple[OpeningHours, ...] = ()
    rating: Rating | None = None
    awards: tuple[str, ...] = ()


@dataclass(frozen=True)
class MenuItemInfo:
    name: str
    description: str
    price: str
    currency: str
    category: str
    image: str | None = None
    calories: int | None = None
    allergens: tuple[str, ...] = ()
    dietary: tuple[str, ...] = ()  # "Vegan", "Vegetarian", ...


@dataclass(frozen=True)
class BlogPostInfo:
    title: str
    description: str
    author: str
    date_published: str
    url: str
    date_modified: str | None = None
    image: str | None = None
    category: str | None = None
    tags: tuple[str, ...] = ()


def _compact(value: Any) -> Any:
    """Drop ``None`` and empty containers, the way JSON.stringify drops undefined."""
    if isinstance(value, dict):
        cleaned = {k: _compact(v) for k, v in value.items()}
        return {k: v for k, v in cleaned.items() if v is not None and v != [] and v != {}}
    if isinstance(value, (list, tuple)):
        return [_compact(v) for v in value]
    return value


def generate_restaurant_schema(info: RestaurantInfo = RestaurantInfo()) -> dict[str, Any]:
    address = None
    if info.address:
        address = {
            "@type": "PostalAddress",
            "streetAddress": info.address.street,
            "addressLocality": info.address.city,
            "addressRegion": info.address.region,
            "postalCode": info.address.postal_code,
            "addressCountry": info.address.country,
        }
    rating = None
    if info.rating:
        rating = {
            "@type": "AggregateRating",
            "ratingValue": info.rating.value,
            "reviewCount": info.rating.count,
            "bestRating": 5,
            "worstRating": 1,
        }

    return _compact({
        "@context": "https://schema.org",
        "@type": "Restaurant",
        "@id": f"{info.url}/#restaurant",
        "name": info.name,
        "description": info.description,
        "url": info.url,
        "image": list(info.images),
        "servesCuisine": list(info.cuisines),
        "priceRange": info.price_range,
        "currenciesAccepted": "EUR",
        "paymentAccepted": ["Cash", "Credit Card", "Debit Card", "Bancontact"],
        "address": address,
        "telephone": info.phone,
        "email": info.email,
        "openingHoursSpecification": [
            {
                "@type": "OpeningHoursSpecification",
                "dayOfWeek": list(hours.days),
                "opens": hours.opens,
                "closes": hours.closes,
            }
            for hours in info.opening_hours
        ],
        "aggregateRating": rating,
        "award": list(info.awards),
        "hasMenu": {
            "@type": "Menu",
            "url": f"{info.url}/menu",
            "inLanguage": ["en", "fr", "nl"],
        },
        "acceptsReservations": True,
        "amenityFeature": [
            {"@type": "LocationFeatureSpecification", "name": name, "value": True}
            for name in ("Takeaway Available", "Catering Services", "Vegetarian Options")
        ],
    })


def generate_menu_item_schema(item: MenuItemInfo) -> dict[str, Any]:
    nutrition = None
    if item.calories is not None:
        nutrition = {"@type": "NutritionInformation", "calories": item.calories}

    return _compact({
        "@context": "https://schema.org",
        "@type": "MenuItem",
        "name": item.name,
        "description": item.description,
        "image": item.image,
        "offers": {
            "@type": "Offer",
            "price": item.price,
            "priceCurrency": item.currency,
            "availability": "https://schema.org/InStock",
        },
        "menuAddOn": item.category,
        "nutrition": nutrition,
        "suitableForDiet": [f"https://schema.org/{diet}Diet" for diet in item.dietary],
        "allergens": list(item.allergens),
    })


def generate_blog_post_schema(post: BlogPostInfo) -> dict[str, Any]:
    return _compact({
        "@context": "https://schema.org",
        "@type": "BlogPosting",
        "headline": post.title,
        "description": post.description,
        "author": {"@type": "Person", "name": post.author},
        "publisher": {
            "@type": "Organization",
            "name": "East @ West",
            "logo": {"@type": "ImageObject", "url": f"{SITE_URL}/images/logo.webp"},
        },
        "datePublished": post.date_published,
        "dateModified": post.date_modified or post.date_published,
        "image": post.image,
        "url": post.url,
        "mainEntityOfPage": post.url,
        "articleSection": post.category,
        "keywords": ", ".join(post.tags) if post.tags else None,
        "inLanguage": "en",
        "isPartOf": {"@type": "Blog", "name": "East @ West Blog", "url": f"{SITE_URL}/blog"},
    })


def generate_breadcrumb_schema(
    items: list[tuple[str, str]], base_url: str = SITE_URL
) -> dict[str, Any]:
    """``items`` is an ordered list of ``(label, href)`` pairs."""
    return {
        "@context": "https://schema.org",
        "@type": "BreadcrumbList",
        "itemListElement": [
            {
                "@type": "ListItem",
                "position": position,
                "name": label,
                "item": f"{base_url}{href}",
            }
            for position, (label, href) in enumerate(items, start=1)
        ],
    }


def render_json_ld(schema: dict[str, Any]) -> str:
    """Serialise *schema* for an inline ``<script type="application/ld+json">``."""
    return json.dumps(schema, ensure_ascii=False).replace("</", "<\\/")
