from __future__ import annotations

from typing import Any

import bcrypt

MANAGER = "manager"
HOST = "host"
# Hosts take bookings at the door; managers also see every reservation.
STAFF_ROLES = frozenset({MANAGER, HOST})

# (username, password, role) for the demo floor team.
DEMO_STAFF: tuple[tuple[str, str, str], ...] = (
    ("manager", "manager123", MANAGER),
    ("host", "host123", HOST),
)

_staff: dict[str, dict[str, Any]] = {}


def _hash_password(plain: str) -> str:
    return bcrypt.hashpw(plain.encode(), bcrypt.gensalt()).decode()


def _verify_password(plain: str, hashed: str) -> bool:
    return bcrypt.checkpw(plain.encode(), hashed.encode())


def add_staff(username: str, password: str, role: str) -> dict[str, Any]:
    """Register a staff account. Raises ``ValueError`` for unknown roles."""
    if role not in STAFF_ROLES:
        raise ValueError(f"Unknown staff role: {role!r}")
    _staff[username] = {"password_hash": _hash_password(password), "role": role}
    return _public(username)


def _public(username: str) -> dict[str, Any] | None:
    record = _staff.get(username)
    if record is None or record["role"] not in STAFF_ROLES:
        return None
    return {"username": username, "role": record["role"]}


def is_manager(user: dict[str, Any] | None) -> bool:
    return bool(user) and user.get("role") == MANAGER


def authenticate(username: str, password: str) -> dict[str, Any] | None:
    """Verify staff credentials. Returns ``{username, role}`` or ``None``."""
    record = _staff.get(username)
    if record and _verify_password(password, record["password_hash"]):
        return _public(username)
    return None


def get_user(username: str) -> dict[str, Any] | None:
    """Look up an active staff member by name, as the session cookie names them."""
    return _public(username)


for _username, _password, _role in DEMO_STAFF:
    add_staff(_username, _password, _role)
