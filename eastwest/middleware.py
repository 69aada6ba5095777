"""
Per-request site middleware
===========================

Every request walks the same four steps, strictly in order:

1. **Identity refresh** - ask the identity provider for the current user
   and collect any cookie changes it wants (session rotation).  Those
   cookies go onto *every* response this request produces, redirects
   included, before any other header is touched.
2. **Route check** - anonymous visitors under the protected prefix are
   sent to the login page; signed-in staff opening the login page are sent
   to the dashboard.  Both conditions cannot hold at once, so there is no
   redirect loop.
3. **Headers** - compression is negotiated from ``Accept-Encoding`` and the
   cache headers for the path are merged onto the response (see
   :func:`plan_response_headers`).  Cache headers only go on successful
   responses.  HEAD requests, partial content and 304s keep their body as
   the route produced it, and a matching ``If-None-Match`` is answered with
   a 304.
4. Done - the response is returned untouched from here on.

A failing identity lookup is not silently treated as "anonymous": with
``identity_failure_mode="fail"`` (the default) the request is answered
with a 503, with ``"anonymous"`` it continues without a user.
"""

from __future__ import annotations

import logging
from typing import Mapping

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import JSONResponse, RedirectResponse, Response
from starlette.types import ASGIApp

from .auth.identity import (
    IdentityLookupError,
    IdentityProvider,
    IdentityResult,
    apply_cookie_mutations,
)
from .caching.compression import Encoding, compress_bytes, detect_encoding
from .caching.policies import DEFAULT_POLICY_TABLE, CachePolicy, CachePolicyTable
from .config import DEFAULT_SITE_CONFIG, SiteConfig

logger = logging.getLogger(__name__)


def _first_segment(path: str) -> str:
    return path.lstrip("/").split("/", 1)[0]


def is_content_path(path: str, config: SiteConfig = DEFAULT_SITE_CONFIG) -> bool:
    return _first_segment(path) in config.content_paths


def is_api_path(path: str, config: SiteConfig = DEFAULT_SITE_CONFIG) -> bool:
    prefix = config.api_prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def is_protected_path(path: str, config: SiteConfig = DEFAULT_SITE_CONFIG) -> bool:
    prefix = config.protected_prefix.rstrip("/")
    return path == prefix or path.startswith(prefix + "/")


def redirect_target(
    path: str, user: dict | None, config: SiteConfig = DEFAULT_SITE_CONFIG
) -> str | None:
    """Return the path to redirect to, or ``None`` to let the request through."""
    if user is None and is_protected_path(path, config):
        return config.login_path
    if user is not None and path == config.login_path:
        return config.dashboard_path
    return None


def _is_cacheable_status(status_code: int) -> bool:
    return 200 <= status_code < 300 or status_code == 304


def plan_response_headers(
    path: str,
    query_params: Mapping[str, str],
    accept_encoding: str | None,
    config: SiteConfig = DEFAULT_SITE_CONFIG,
    table: CachePolicyTable = DEFAULT_POLICY_TABLE,
    status_code: int = 200,
) -> dict[str, str]:
    """Compute the headers the middleware merges onto a response.

    Path cache policies apply to 2xx and 304 responses only; an error page
    under an asset path must not be cached as that asset.

    Returns a new dict on every call.
    """
    encoding = detect_encoding(accept_encoding)
    headers = {"Vary": "Accept-Encoding"}

    # Framework data fetches are per-user payloads: never cache them.
    if config.data_fetch_param in query_params:
        headers["Cache-Control"] = CachePolicy.NO_CACHE.value
        if encoding:
            headers["Content-Encoding"] = encoding.value
        return headers

    if not _is_cacheable_status(status_code):
        if is_api_path(path, config) and encoding:
            headers["Content-Encoding"] = encoding.value
        return headers

    cache_headers = table.generate_headers(path)
    headers.update(cache_headers)
    if cache_headers and encoding:
        headers["Content-Encoding"] = encoding.value

    if is_content_path(path, config):
        headers["Cache-Control"] = CachePolicy.SHORT_TERM.value
        if encoding:
            headers["Content-Encoding"] = encoding.value

    if is_api_path(path, config) and encoding:
        headers["Content-Encoding"] = encoding.value

    return headers


def _can_encode(request: Request, response: Response) -> bool:
    if request.method == "HEAD" or response.status_code in (204, 206, 304):
        return False
    # Routes that serve pre-encoded bodies keep their own encoding.
    return (
        "content-range" not in response.headers
        and "content-encoding" not in response.headers
    )


def _etag_matches(if_none_match: str | None, etag: str) -> bool:
    if not if_none_match:
        return False
    for candidate in if_none_match.split(","):
        candidate = candidate.strip()
        if candidate.startswith("W/"):
            candidate = candidate[2:]
        if candidate in ("*", etag):
            return True
    return False


def _not_modified(response: Response, planned: Mapping[str, str]) -> Response:
    not_modified = Response(status_code=304, background=response.background)
    not_modified.raw_headers = [
        (name, value)
        for name, value in response.raw_headers
        if name not in (b"content-length", b"content-type", b"content-encoding")
    ]
    for name, value in planned.items():
        if name != "Content-Encoding":
            not_modified.headers[name] = value
    return not_modified


async def _encode_body(response: Response, encoding: Encoding) -> Response:
    body = b""
    async for chunk in response.body_iterator:
        body += chunk if isinstance(chunk, bytes) else chunk.encode(response.charset)

    encoded = compress_bytes(body, encoding) if body else body
    encoded_response = Response(
        content=encoded,
        status_code=response.status_code,
        background=response.background,
    )
    # Byte ranges of the encoded body are not offered.
    encoded_response.raw_headers = [
        (name, value)
        for name, value in response.raw_headers
        if name not in (b"content-length", b"accept-ranges")
    ]
    encoded_response.headers["Content-Length"] = str(len(encoded))
    if not body:
        del encoded_response.headers["Content-Encoding"]
    return encoded_response


class SiteMiddleware(BaseHTTPMiddleware):
    def __init__(
        self,
        app: ASGIApp,
        identity: IdentityProvider,
        config: SiteConfig = DEFAULT_SITE_CONFIG,
        policy_table: CachePolicyTable = DEFAULT_POLICY_TABLE,
    ) -> None:
        super().__init__(app)
        self.identity = identity
        self.config = config
        self.policy_table = policy_table

    async def _refresh_identity(self, request: Request) -> IdentityResult | None:
        try:
            return await self.identity.get_current_user(request.cookies)
        except IdentityLookupError:
            if self.config.identity_failure_mode == "anonymous":
                logger.warning(
                    "Identity lookup failed, continuing as anonymous", exc_info=True
                )
                return IdentityResult()
            logger.error("Identity lookup failed for %s", request.url.path, exc_info=True)
            return None

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        path = request.url.path

        identity = await self._refresh_identity(request)
        if identity is None:
            return JSONResponse(
                {"detail": "Identity service unavailable"}, status_code=503
            )
        request.state.user = identity.user

        target = redirect_target(path, identity.user, self.config)
        if target is not None:
            logger.debug("Redirecting %s -> %s", path, target)
            redirect = RedirectResponse(url=str(request.url.replace(path=target)))
            apply_cookie_mutations(redirect, identity.cookie_mutations)
            return redirect

        response = await call_next(request)
        apply_cookie_mutations(response, identity.cookie_mutations)

        planned = plan_response_headers(
            path,
            request.query_params,
            request.headers.get("accept-encoding"),
            self.config,
            self.policy_table,
            response.status_code,
        )
        if not _can_encode(request, response):
            planned.pop("Content-Encoding", None)

        etag = planned.get("ETag")
        if (
            etag
            and request.method in ("GET", "HEAD")
            and response.status_code == 200
            and _etag_matches(request.headers.get("if-none-match"), etag)
        ):
            return _not_modified(response, planned)

        for name, value in planned.items():
            response.headers[name] = value

        if "Content-Encoding" in planned:
            response = await _encode_body(response, Encoding(planned["Content-Encoding"]))
        return response
