from __future__ import annotations

from dataclasses import dataclass

from ..seo.sitemap import ImagePage, SitemapImage


@dataclass(frozen=True)
class Page:
    path: str
    title: str
    description: str
    change_frequency: str = "monthly"
    priority: float = 0.5
    in_sitemap: bool = True


PAGES: tuple[Page, ...] = (
    Page(
        "/",
        "East @ West | Authentic Lebanese Restaurant in Brussels",
        "Discover authentic Lebanese cuisine at East @ West in Brussels. "
        "Fresh Mediterranean dishes, traditional mezze and warm hospitality.",
        "daily",
        1.0,
    ),
    Page("/menu", "Menu", "Mezze, grills and desserts from our Lebanese kitchen.", "weekly", 0.9),
    Page("/gallery", "Gallery", "Photos of our dishes and dining room.", "weekly", 0.8),
    Page("/about", "About Us", "The story behind East @ West.", "monthly", 0.7),
    Page("/contact", "Contact", "Find us in Brussels and get in touch.", "monthly", 0.7),
    Page("/reservations", "Reservations", "Book a table at East @ West.", "daily", 0.8),
    Page("/takeaway", "Takeaway", "Order Lebanese food to take away.", "daily", 0.8),
    Page(
        "/events-catering",
        "Events & Catering",
        "Lebanese catering for private and corporate events.",
        "weekly",
        0.6,
    ),
    Page("/blog", "Blog", "Stories and recipes from our kitchen.", "daily", 0.6),
    Page("/login", "Staff Login", "Sign in to the staff dashboard.", in_sitemap=False),
)

DASHBOARD_PAGE = Page(
    "/dashboard", "Staff Dashboard", "Reservations and site status for staff.", in_sitemap=False
)

PAGES_BY_PATH: dict[str, Page] = {page.path: page for page in PAGES}

IMAGE_PAGES: tuple[ImagePage, ...] = (
    ImagePage(
        "/",
        (
            SitemapImage(
                "/images/banner.webp",
                "East @ West Lebanese Restaurant interior in Brussels",
                "East @ West Restaurant",
                geo_location="Brussels, Belgium",
            ),
            SitemapImage(
                "/images/gallery/falafel.webp",
                "Golden-fried chickpea fritters served with tahini sauce and fresh herbs",
                "Traditional Lebanese Falafel",
            ),
            SitemapImage(
                "/images/gallery/kebbe.webp",
                "Traditional bulgur croquettes stuffed with seasoned minced beef and walnuts",
                "Lebanese Kebbe",
            ),
        ),
    ),
    ImagePage(
        "/menu",
        (
            SitemapImage(
                "/images/gallery/mezze-selection.webp",
                "Traditional Lebanese mezze selection at East @ West",
                "Lebanese Mezze Platter",
            ),
        ),
    ),
    ImagePage(
        "/gallery",
        (
            SitemapImage(
                "/images/gallery/aish-el-saraya.webp",
                "Layered dessert with sweetened biscuits, vegan pudding, and orange blossom water",
                "Aish el Saraya Dessert",
            ),
            SitemapImage(
                "/images/gallery/houmos.webp",
                "Traditional Lebanese hummus with olive oil and spices",
                "Lebanese Hummus",
            ),
        ),
    ),
    ImagePage(
        "/about",
        (
            SitemapImage(
                "/images/about-us.webp",
                "East @ West Lebanese Restaurant team and story",
                "About East @ West Restaurant",
            ),
        ),
    ),
)


def sitemap_pages() -> list[Page]:
    return [page for page in PAGES if page.in_sitemap]
