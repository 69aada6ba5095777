"""
Staff identity collaborator.

The request middleware asks an :class:`IdentityProvider` who the current
user is, once per request.  The provider may also ask for cookies to be
changed on the way out (a rotated session token, a deleted stale one);
those :class:`CookieMutation` objects must be forwarded onto whatever
response the request ends up producing, redirects included.

:class:`SignedCookieIdentity` keeps the session in a cookie signed with
``itsdangerous``.  Tokens older than ``session_refresh_after`` seconds are
re-issued so active staff never hit the hard expiry.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Protocol

from itsdangerous import BadSignature, SignatureExpired, URLSafeTimedSerializer
from starlette.responses import Response

from ..config import DEFAULT_SITE_CONFIG, SiteConfig
from .users import get_user

logger = logging.getLogger(__name__)

_SALT = "eastwest-session"


class IdentityLookupError(Exception):
    """The identity collaborator could not answer (network, config, ...)."""


@dataclass(frozen=True)
class CookieMutation:
    name: str
    value: str = ""
    max_age: int | None = None
    path: str = "/"
    httponly: bool = True
    secure: bool = False
    samesite: str = "lax"
    delete: bool = False


@dataclass(frozen=True)
class IdentityResult:
    user: dict[str, Any] | None = None
    cookie_mutations: tuple[CookieMutation, ...] = ()


class IdentityProvider(Protocol):
    async def get_current_user(self, cookies: Mapping[str, str]) -> IdentityResult: ...


def apply_cookie_mutations(
    response: Response, mutations: tuple[CookieMutation, ...] | list[CookieMutation]
) -> None:
    """Copy the collaborator's cookie changes onto *response* verbatim."""
    for mutation in mutations:
        if mutation.delete:
            response.delete_cookie(
                mutation.name,
                path=mutation.path,
                secure=mutation.secure,
                httponly=mutation.httponly,
                samesite=mutation.samesite,
            )
        else:
            response.set_cookie(
                mutation.name,
                mutation.value,
                max_age=mutation.max_age,
                path=mutation.path,
                secure=mutation.secure,
                httponly=mutation.httponly,
                samesite=mutation.samesite,
            )


class SignedCookieIdentity:
    def __init__(
        self,
        config: SiteConfig = DEFAULT_SITE_CONFIG,
        user_lookup: Callable[[str], dict[str, Any] | None] = get_user,
    ) -> None:
        self.config = config
        self._lookup = user_lookup
        self._serializer = URLSafeTimedSerializer(config.session_secret, salt=_SALT)

    def _cookie(self, value: str) -> CookieMutation:
        return CookieMutation(
            name=self.config.session_cookie,
            value=value,
            max_age=self.config.session_max_age,
            secure=self.config.secure_cookies,
        )

    def issue(self, user: dict[str, Any]) -> CookieMutation:
        """Return the cookie that starts a session for *user*."""
        token = self._serializer.dumps({"sub": user["username"], "role": user["role"]})
        return self._cookie(token)

    def clear(self) -> CookieMutation:
        return CookieMutation(
            name=self.config.session_cookie,
            secure=self.config.secure_cookies,
            delete=True,
        )

    async def get_current_user(self, cookies: Mapping[str, str]) -> IdentityResult:
        token = cookies.get(self.config.session_cookie)
        if not token:
            return IdentityResult()

        try:
            payload, signed_at = self._serializer.loads(
                token, max_age=self.config.session_max_age, return_timestamp=True
            )
        except SignatureExpired:
            logger.debug("Session cookie expired")
            return IdentityResult(cookie_mutations=(self.clear(),))
        except BadSignature:
            logger.warning("Rejected session cookie with a bad signature")
            return IdentityResult(cookie_mutations=(self.clear(),))

        user = self._lookup(payload.get("sub", ""))
        if user is None:
            return IdentityResult(cookie_mutations=(self.clear(),))

        age = time.time() - signed_at.timestamp()
        if age >= self.config.session_refresh_after:
            return IdentityResult(user=user, cookie_mutations=(self.issue(user),))
        return IdentityResult(user=user)
