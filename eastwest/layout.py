from __future__ import annotations

from typing import Any, Iterable

from .config import DEFAULT_SITE_CONFIG, SiteConfig
from .content.pages import Page
from .css.bootstrap import (
    DEFAULT_BOOTSTRAP_CONFIG,
    BootstrapConfig,
    critical_image_hints,
    render_bootstrap_script,
)
from .css.bundle import load_bundle
from .seo.breadcrumbs import build_breadcrumbs
from .seo.schema import generate_breadcrumb_schema, generate_restaurant_schema, render_json_ld
from .templating import render_template


def render_page(
    page: Page,
    path: str | None = None,
    user: dict[str, Any] | None = None,
    schemas: Iterable[dict[str, Any]] = (),
    config: SiteConfig = DEFAULT_SITE_CONFIG,
    bootstrap: BootstrapConfig = DEFAULT_BOOTSTRAP_CONFIG,
) -> str:
    """Render the document shell: critical CSS inline, full CSS deferred."""
    path = path or page.path
    base_url = config.base_url.rstrip("/")
    canonical_path = "" if path == "/" else path
    bundle = load_bundle()

    breadcrumbs = build_breadcrumbs(path)
    json_ld = [generate_restaurant_schema(), *schemas]
    if breadcrumbs:
        json_ld.append(generate_breadcrumb_schema(
            [(crumb.label, crumb.href) for crumb in breadcrumbs], base_url
        ))

    title = page.title if path == "/" else f"{page.title} | East @ West"
    return render_template(
        "layout.html",
        title=title,
        heading=page.title,
        description=page.description,
        canonical_url=f"{base_url}{canonical_path}",
        alternates=[
            ("en", f"{base_url}{canonical_path}"),
            ("fr", f"{base_url}/fr{canonical_path}"),
            ("nl", f"{base_url}/nl{canonical_path}"),
            ("x-default", f"{base_url}{canonical_path}"),
        ],
        image_hints=critical_image_hints(bootstrap),
        critical_css=bundle.critical,
        bootstrap_script=render_bootstrap_script(bootstrap, bundle),
        json_ld=[render_json_ld(schema) for schema in json_ld],
        breadcrumbs=breadcrumbs,
        page_id=path.strip("/").replace("/", "-") or "home",
        user=user,
    )
