from __future__ import annotations

import logging
from pathlib import Path

from fastapi import Depends, FastAPI, HTTPException, Request, Response
from fastapi.responses import HTMLResponse
from fastapi.staticfiles import StaticFiles

from .auth.dependencies import get_current_user, require_manager, require_staff
from .auth.identity import SignedCookieIdentity, apply_cookie_mutations
from .auth.users import authenticate
from .config import DEFAULT_SITE_CONFIG, check_session_config
from .content.blog import get_post, list_posts, post_schema_info
from .content.menu import MENU_HIGHLIGHTS
from .content.pages import DASHBOARD_PAGE, IMAGE_PAGES, PAGES, Page, sitemap_pages
from .layout import render_page
from .middleware import SiteMiddleware
from .notifications.email import EmailError, send_email
from .reservations.models import LoginRequest, ReservationRequest, ReservationResponse
from .reservations.notify import reservation_email
from .reservations.store import get_reservations, record_reservation
from .seo.schema import generate_blog_post_schema, generate_menu_item_schema
from .seo.sitemap import SITEMAP_CACHE_CONTROL, generate_image_sitemap, generate_sitemap

logger = logging.getLogger(__name__)

config = DEFAULT_SITE_CONFIG
identity = SignedCookieIdentity(config)

if not check_session_config(config):
    logger.warning("Staff sessions are signed with an insecure SESSION_SECRET")

app = FastAPI(title="East @ West Site", version="1.0.0")
app.add_middleware(SiteMiddleware, identity=identity, config=config)

_STATIC_DIR = Path(__file__).resolve().parent / "static"


# ── Public endpoints ─────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, str]:
    return {"status": "ok"}


def _page_schemas(page: Page) -> list[dict]:
    if page.path == "/menu":
        return [generate_menu_item_schema(item) for item in MENU_HIGHLIGHTS]
    return []


def _page_endpoint(page: Page):
    def endpoint(request: Request) -> HTMLResponse:
        return HTMLResponse(render_page(
            page,
            user=get_current_user(request),
            schemas=_page_schemas(page),
            config=config,
        ))

    endpoint.__name__ = f"page_{page.path.strip('/').replace('-', '_') or 'home'}"
    return endpoint


for _page in PAGES:
    app.add_api_route(
        _page.path, _page_endpoint(_page), methods=["GET"], response_class=HTMLResponse
    )


@app.get("/sitemap.xml")
def sitemap() -> Response:
    return Response(
        generate_sitemap(config.base_url, sitemap_pages()),
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


@app.get("/sitemap-images.xml")
def sitemap_images() -> Response:
    return Response(
        generate_image_sitemap(config.base_url, IMAGE_PAGES),
        media_type="application/xml",
        headers={"Cache-Control": SITEMAP_CACHE_CONTROL},
    )


# ── API endpoints ────────────────────────────────────────────────────────


@app.get("/api/blog")
def blog_posts() -> dict:
    posts = list_posts()
    return {"posts": posts, "total": len(posts)}


@app.get("/api/blog/{slug}")
def blog_post(slug: str) -> dict:
    post = get_post(slug)
    if post is None:
        raise HTTPException(status_code=404, detail="Post not found")
    return {"post": post, "json_ld": generate_blog_post_schema(post_schema_info(post))}


@app.post("/api/reservations", response_model=ReservationResponse)
def create_reservation(body: ReservationRequest) -> ReservationResponse:
    reservation = record_reservation(body.model_dump(mode="json"))

    email_sent = True
    try:
        send_email(reservation_email(reservation, config.reservations_inbox))
    except EmailError:
        # The booking stands even when the inbox could not be notified.
        logger.warning(
            "Reservation %s recorded but notification failed",
            reservation["id"],
            exc_info=True,
        )
        email_sent = False

    return ReservationResponse(id=reservation["id"], status="received", email_sent=email_sent)


# ── Auth endpoints ───────────────────────────────────────────────────────


@app.post("/auth/login")
def login(body: LoginRequest, response: Response) -> dict:
    user = authenticate(body.username, body.password)
    if not user:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    apply_cookie_mutations(response, [identity.issue(user)])
    return {"status": "ok", "user": user}


@app.post("/auth/logout")
def logout(response: Response) -> dict:
    apply_cookie_mutations(response, [identity.clear()])
    return {"status": "logged_out"}


@app.get("/auth/me")
def auth_me(user: dict = Depends(require_staff)) -> dict:
    return user


# ── Staff endpoints ──────────────────────────────────────────────────────


@app.get("/dashboard", response_class=HTMLResponse)
def dashboard(user: dict = Depends(require_staff)) -> HTMLResponse:
    return HTMLResponse(render_page(DASHBOARD_PAGE, user=user, config=config))


@app.get("/protected/dashboard")
def protected_dashboard(user: dict = Depends(require_staff)) -> dict:
    return {"user": user, "reservations": len(get_reservations())}


@app.get("/protected/reservations")
def protected_reservations(user: dict = Depends(require_manager)) -> dict:
    reservations = get_reservations()
    return {"reservations": reservations, "total": len(reservations)}


# ── Static ───────────────────────────────────────────────────────────────


app.mount("/assets", StaticFiles(directory=str(_STATIC_DIR / "assets")), name="assets")
app.mount("/css", StaticFiles(directory=str(_STATIC_DIR / "css")), name="css")
app.mount("/images", StaticFiles(directory=str(_STATIC_DIR / "images")), name="images")
