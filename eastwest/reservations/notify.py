from __future__ import annotations

from html import escape
from typing import Any

from ..notifications.email import EmailPayload


def reservation_email(reservation: dict[str, Any], inbox: str) -> EmailPayload:
    """Notification for the reservations inbox; replies go to the guest."""
    rows = [
        ("Name", reservation["name"]),
        ("Email", reservation["email"]),
        ("Phone", reservation.get("phone") or "-"),
        ("Guests", reservation["party_size"]),
        ("Date", reservation["date"]),
        ("Time", reservation["time"]),
        ("Notes", reservation.get("notes") or "-"),
    ]
    html = "<h2>New reservation request</h2><table>" + "".join(
        f"<tr><th align=\"left\">{label}</th><td>{escape(str(value))}</td></tr>"
        for label, value in rows
    ) + "</table>"
    text = "\n".join(f"{label}: {value}" for label, value in rows)
    return EmailPayload(
        to=inbox,
        subject=(
            f"Reservation: {reservation['name']}, {reservation['party_size']} guests "
            f"on {reservation['date']} at {reservation['time']}"
        ),
        html=html,
        text=text,
        headers={"Reply-To": reservation["email"]},
    )
