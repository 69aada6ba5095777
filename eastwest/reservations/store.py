from __future__ import annotations

import time
import uuid
from typing import Any

_reservations: list[dict[str, Any]] = []


def record_reservation(data: dict[str, Any]) -> dict[str, Any]:
    reservation = {
        "id": uuid.uuid4().hex[:12],
        "created_at": time.time(),
        **data,
    }
    _reservations.append(reservation)
    return reservation


def get_reservations() -> list[dict[str, Any]]:
    return _reservations


def clear_reservations() -> None:
    _reservations.clear()
