from __future__ import annotations

from typing import Any

from fastapi import HTTPException, Request

from .users import is_manager


def get_current_user(request: Request) -> dict[str, Any] | None:
    """Return the user the middleware resolved for this request, or ``None``."""
    return getattr(request.state, "user", None)


def require_staff(request: Request) -> dict[str, Any]:
    """Raise 401 if no staff member is logged in."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return user


def require_manager(request: Request) -> dict[str, Any]:
    """Raise 401 if not logged in, 403 if not a manager."""
    user = get_current_user(request)
    if not user:
        raise HTTPException(status_code=401, detail="Not authenticated")
    if not is_manager(user):
        raise HTTPException(status_code=403, detail="Manager access required")
    return user
