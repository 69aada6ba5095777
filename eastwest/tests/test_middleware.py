from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse, Response
from fastapi.testclient import TestClient

from eastwest.auth.identity import CookieMutation, IdentityLookupError, IdentityResult
from eastwest.caching.compression import Encoding, compress_bytes
from eastwest.caching.policies import CachePolicy
from eastwest.config import SiteConfig
from eastwest.middleware import (
    SiteMiddleware,
    is_api_path,
    is_content_path,
    plan_response_headers,
    redirect_target,
)

CONFIG = SiteConfig()
STAFF = {"username": "manager", "role": "manager"}
SVG = '<svg xmlns="http://www.w3.org/2000/svg"><circle r="4"/></svg>'
ROTATED = CookieMutation(name="eastwest_session", value="fresh-token", max_age=60)
DELETED = CookieMutation(name="eastwest_session", delete=True)


class FakeIdentity:
    def __init__(self, user=None, mutations=(), error: Exception | None = None):
        self.user = user
        self.mutations = tuple(mutations)
        self.error = error
        self.calls = 0

    async def get_current_user(self, cookies):
        self.calls += 1
        if self.error:
            raise self.error
        return IdentityResult(user=self.user, cookie_mutations=self.mutations)


def _make_client(identity: FakeIdentity, config: SiteConfig = CONFIG) -> TestClient:
    app = FastAPI()
    app.add_middleware(SiteMiddleware, identity=identity, config=config)

    @app.get("/protected/area")
    def protected_area(request: Request):
        return {"user": request.state.user}

    @app.get("/login")
    def login_page():
        return PlainTextResponse("login")

    @app.get("/dashboard")
    def dashboard():
        return PlainTextResponse("dashboard")

    @app.get("/gallery")
    def gallery():
        return PlainTextResponse("gallery " * 300)

    @app.get("/about")
    def about(request: Request):
        return {"user": request.state.user}

    @app.get("/api/ping")
    def ping():
        return {"ok": True}

    @app.get("/api/ranged")
    def ranged():
        return PlainTextResponse("ranged " * 100, headers={"Accept-Ranges": "bytes"})

    @app.get("/api/empty")
    def empty():
        return Response(content=b"", status_code=200)

    @app.get("/api/pre-encoded")
    def pre_encoded():
        return Response(
            content=compress_bytes(b"already gzipped", Encoding.GZIP),
            headers={"Content-Encoding": "gzip"},
            media_type="text/plain",
        )

    @app.api_route("/assets/restaurant-guru/star_red.svg", methods=["GET", "HEAD"])
    def star():
        return Response(content=SVG, media_type="image/svg+xml")

    @app.get("/assets/restaurant-guru/partial.svg")
    def partial():
        return Response(
            content=SVG[:10],
            status_code=206,
            headers={"Content-Range": f"bytes 0-9/{len(SVG)}", "Accept-Ranges": "bytes"},
            media_type="image/svg+xml",
        )

    return TestClient(app)


# ── Pure helpers ─────────────────────────────────────────────────────────


class TestRedirectTarget:
    def test_anonymous_on_protected_goes_to_login(self):
        assert redirect_target("/protected/x", None) == "/login"
        assert redirect_target("/protected", None) == "/login"

    def test_prefix_must_be_a_whole_segment(self):
        assert redirect_target("/protectedness", None) is None

    def test_signed_in_on_login_goes_to_dashboard(self):
        assert redirect_target("/login", STAFF) == "/dashboard"

    def test_no_redirect_otherwise(self):
        assert redirect_target("/login", None) is None
        assert redirect_target("/protected/x", STAFF) is None
        assert redirect_target("/menu", None) is None


def test_content_and_api_paths():
    assert is_content_path("/menu")
    assert is_content_path("/gallery/2024")
    assert not is_content_path("/api/reservations")
    assert not is_content_path("/menus")
    assert is_api_path("/api/blog")
    assert not is_api_path("/apiary")


class TestPlanResponseHeaders:
    def test_vary_is_always_set(self):
        assert plan_response_headers("/about", {}, None) == {"Vary": "Accept-Encoding"}

    def test_data_fetch_is_never_cached(self):
        headers = plan_response_headers("/menu", {"_rsc": "1"}, "gzip")
        assert headers["Cache-Control"] == CachePolicy.NO_CACHE.value
        assert headers["Content-Encoding"] == "gzip"

    def test_data_fetch_skips_static_rules(self):
        headers = plan_response_headers("/images/a.webp", {"_rsc": "1"}, None)
        assert headers == {
            "Vary": "Accept-Encoding",
            "Cache-Control": CachePolicy.NO_CACHE.value,
        }

    def test_static_rule_with_encoding(self):
        headers = plan_response_headers("/assets/restaurant-guru/star_red.svg", {}, "br")
        assert headers["Cache-Control"] == CachePolicy.IMMUTABLE.value
        assert headers["Content-Encoding"] == "br"
        assert headers["X-Cache-Tag"] == "restaurant-guru-immutable"

    def test_static_rule_without_encoding(self):
        headers = plan_response_headers("/images/a.webp", {}, None)
        assert headers["Cache-Control"] == CachePolicy.LONG_TERM.value
        assert "Content-Encoding" not in headers

    def test_content_path_is_short_term(self):
        headers = plan_response_headers("/gallery", {}, "gzip")
        assert headers["Cache-Control"] == "public, max-age=300"
        assert headers["Content-Encoding"] == "gzip"

    def test_content_path_overrides_static_rule(self):
        headers = plan_response_headers("/menu/card.pdf", {}, None)
        assert headers["Cache-Control"] == CachePolicy.SHORT_TERM.value

    def test_api_path_gets_encoding_only(self):
        headers = plan_response_headers("/api/reservations", {}, "gzip, br")
        assert headers == {"Vary": "Accept-Encoding", "Content-Encoding": "br"}

    def test_returns_fresh_dict(self):
        first = plan_response_headers("/about", {}, None)
        first["X"] = "y"
        assert "X" not in plan_response_headers("/about", {}, None)

    def test_error_status_gets_no_cache_headers(self):
        headers = plan_response_headers(
            "/assets/restaurant-guru/missing.svg", {}, "br", status_code=404
        )
        assert headers == {"Vary": "Accept-Encoding"}

    def test_error_status_on_content_path(self):
        headers = plan_response_headers("/gallery", {}, "gzip", status_code=500)
        assert headers == {"Vary": "Accept-Encoding"}

    def test_error_status_on_api_path_keeps_encoding(self):
        headers = plan_response_headers("/api/missing", {}, "gzip", status_code=404)
        assert headers == {"Vary": "Accept-Encoding", "Content-Encoding": "gzip"}

    def test_not_modified_keeps_cache_headers(self):
        headers = plan_response_headers("/images/a.webp", {}, None, status_code=304)
        assert headers["Cache-Control"] == CachePolicy.LONG_TERM.value


# ── Redirects & identity ─────────────────────────────────────────────────


class TestRouting:
    def test_anonymous_protected_redirects_to_login(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/protected/area?tab=1", follow_redirects=False)
        assert resp.status_code == 307
        assert resp.headers["location"] == "http://testserver/login?tab=1"

    def test_staff_on_login_redirects_to_dashboard(self):
        client = _make_client(FakeIdentity(user=STAFF))
        resp = client.get("/login", follow_redirects=False)
        assert resp.status_code == 307
        assert resp.headers["location"].endswith("/dashboard")

    def test_staff_reaches_protected_route(self):
        client = _make_client(FakeIdentity(user=STAFF))
        resp = client.get("/protected/area")
        assert resp.status_code == 200
        assert resp.json()["user"] == STAFF

    def test_identity_consulted_once_per_request(self):
        identity = FakeIdentity()
        client = _make_client(identity)
        client.get("/about")
        assert identity.calls == 1
        client.get("/protected/area", follow_redirects=False)
        assert identity.calls == 2

    def test_cookie_mutations_survive_redirect(self):
        client = _make_client(FakeIdentity(mutations=[DELETED]))
        resp = client.get("/protected/area", follow_redirects=False)
        assert resp.status_code == 307
        set_cookie = resp.headers["set-cookie"]
        assert set_cookie.startswith("eastwest_session=")
        assert "Max-Age=0" in set_cookie

    def test_cookie_mutations_on_normal_response(self):
        client = _make_client(FakeIdentity(user=STAFF, mutations=[ROTATED]))
        resp = client.get("/about")
        assert resp.status_code == 200
        assert "eastwest_session=fresh-token" in resp.headers["set-cookie"]

    def test_identity_failure_answers_503(self):
        client = _make_client(FakeIdentity(error=IdentityLookupError("down")))
        resp = client.get("/about")
        assert resp.status_code == 503
        assert resp.json()["detail"] == "Identity service unavailable"

    def test_identity_failure_anonymous_mode(self):
        config = SiteConfig(identity_failure_mode="anonymous")
        client = _make_client(FakeIdentity(error=IdentityLookupError("down")), config)
        resp = client.get("/about")
        assert resp.status_code == 200
        assert resp.json()["user"] is None

        resp = client.get("/protected/area", follow_redirects=False)
        assert resp.status_code == 307


# ── Headers & encoding ───────────────────────────────────────────────────


class TestResponseHeaders:
    def test_restaurant_guru_svg_with_brotli(self):
        client = _make_client(FakeIdentity())
        resp = client.get(
            "/assets/restaurant-guru/star_red.svg", headers={"Accept-Encoding": "br, gzip"}
        )
        assert resp.status_code == 200
        assert resp.headers["cache-control"] == "public, max-age=31536000, immutable"
        assert resp.headers["content-encoding"] == "br"
        assert resp.headers["content-type"] == "image/svg+xml"
        assert resp.headers["x-cache-tag"] == "restaurant-guru-immutable"
        assert resp.headers["x-performance-optimized"] == "true"
        assert resp.headers["vary"] == "Accept-Encoding"
        assert resp.headers["etag"].startswith('"')
        assert resp.text == SVG

    def test_gallery_with_gzip(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/gallery", headers={"Accept-Encoding": "gzip"})
        assert resp.headers["cache-control"] == "public, max-age=300"
        assert resp.headers["content-encoding"] == "gzip"
        assert resp.text == "gallery " * 300

    def test_data_fetch_request_is_no_store(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/gallery?_rsc=abc", headers={"Accept-Encoding": "identity"})
        assert resp.headers["cache-control"] == CachePolicy.NO_CACHE.value
        assert "content-encoding" not in resp.headers

    def test_api_response_is_encoded_without_cache_control(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/api/ping", headers={"Accept-Encoding": "gzip"})
        assert resp.headers["content-encoding"] == "gzip"
        assert "cache-control" not in resp.headers
        assert resp.json() == {"ok": True}

    def test_plain_page_only_gets_vary(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/about", headers={"Accept-Encoding": "gzip"})
        assert resp.headers["vary"] == "Accept-Encoding"
        assert "content-encoding" not in resp.headers
        assert "cache-control" not in resp.headers

    def test_empty_body_has_no_content_encoding(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/api/empty", headers={"Accept-Encoding": "gzip"})
        assert resp.status_code == 200
        assert "content-encoding" not in resp.headers

    def test_pre_encoded_response_left_alone(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/api/pre-encoded", headers={"Accept-Encoding": "br, gzip"})
        assert resp.headers["content-encoding"] == "gzip"
        assert resp.text == "already gzipped"

    def test_head_request_is_not_encoded(self):
        client = _make_client(FakeIdentity())
        resp = client.head(
            "/assets/restaurant-guru/star_red.svg", headers={"Accept-Encoding": "br, gzip"}
        )
        assert resp.status_code == 200
        assert "content-encoding" not in resp.headers
        assert resp.headers["content-length"] == str(len(SVG.encode()))
        assert resp.headers["cache-control"] == CachePolicy.IMMUTABLE.value

    def test_partial_content_is_not_encoded(self):
        client = _make_client(FakeIdentity())
        resp = client.get(
            "/assets/restaurant-guru/partial.svg",
            headers={"Accept-Encoding": "br, gzip", "Range": "bytes=0-9"},
        )
        assert resp.status_code == 206
        assert "content-encoding" not in resp.headers
        assert resp.headers["content-range"] == f"bytes 0-9/{len(SVG)}"
        assert resp.headers["accept-ranges"] == "bytes"
        assert resp.content == SVG[:10].encode()

    def test_encoded_response_drops_accept_ranges(self):
        client = _make_client(FakeIdentity())
        resp = client.get("/api/ranged", headers={"Accept-Encoding": "gzip"})
        assert resp.headers["content-encoding"] == "gzip"
        assert "accept-ranges" not in resp.headers
        assert resp.text == "ranged " * 100

    def test_missing_asset_is_not_cached(self):
        client = _make_client(FakeIdentity())
        resp = client.get(
            "/assets/restaurant-guru/missing.svg", headers={"Accept-Encoding": "br"}
        )
        assert resp.status_code == 404
        assert resp.headers["vary"] == "Accept-Encoding"
        assert resp.headers["content-type"] == "application/json"
        assert "cache-control" not in resp.headers
        assert "x-cache-tag" not in resp.headers
        assert "etag" not in resp.headers
        assert "content-encoding" not in resp.headers


# ── Revalidation ─────────────────────────────────────────────────────────


class TestRevalidation:
    PATH = "/assets/restaurant-guru/star_red.svg"

    def test_matching_etag_answers_not_modified(self):
        client = _make_client(FakeIdentity())
        etag = client.get(self.PATH).headers["etag"]

        resp = client.get(
            self.PATH, headers={"If-None-Match": etag, "Accept-Encoding": "br"}
        )
        assert resp.status_code == 304
        assert resp.content == b""
        assert resp.headers["etag"] == etag
        assert resp.headers["cache-control"] == CachePolicy.IMMUTABLE.value
        assert "content-encoding" not in resp.headers

    def test_weak_and_listed_etags_match(self):
        client = _make_client(FakeIdentity())
        etag = client.get(self.PATH).headers["etag"]
        resp = client.get(self.PATH, headers={"If-None-Match": f'"other", W/{etag}'})
        assert resp.status_code == 304

    def test_stale_etag_gets_full_body(self):
        client = _make_client(FakeIdentity())
        resp = client.get(self.PATH, headers={"If-None-Match": '"stale"'})
        assert resp.status_code == 200
        assert resp.text == SVG

    def test_not_modified_keeps_cookie_mutations(self):
        client = _make_client(FakeIdentity(mutations=[ROTATED]))
        etag = client.get(self.PATH).headers["etag"]
        resp = client.get(self.PATH, headers={"If-None-Match": etag})
        assert resp.status_code == 304
        assert "fresh-token" in resp.headers["set-cookie"]
