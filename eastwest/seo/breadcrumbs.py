from __future__ import annotations

from dataclasses import dataclass

LABELS: dict[str, str] = {
    "menu": "Menu",
    "gallery": "Gallery",
    "about": "About Us",
    "contact": "Contact",
    "reservations": "Reservations",
    "takeaway": "Takeaway",
    "events-catering": "Events & Catering",
    "blog": "Blog",
    "admin": "Admin",
    "checkout": "Checkout",
    "payment": "Payment",
    "success": "Success",
    "comments": "Comments",
    "dashboard": "Dashboard",
}


@dataclass(frozen=True)
class Breadcrumb:
    label: str
    href: str


def _label_for(segment: str) -> str:
    if segment in LABELS:
        return LABELS[segment]
    return segment[:1].upper() + segment[1:].replace("-", " ")


def build_breadcrumbs(path: str) -> list[Breadcrumb]:
    """Return the trail for *path*, starting at Home. Empty on the home page."""
    segments = [segment for segment in path.split("/") if segment]
    if not segments:
        return []

    crumbs = [Breadcrumb("Home", "/")]
    current = ""
    for segment in segments:
        current += f"/{segment}"
        # Unresolved route placeholders such as ``[slug]``.
        if segment.startswith("[") and segment.endswith("]"):
            continue
        crumbs.append(Breadcrumb(_label_for(segment), current))
    return crumbs
