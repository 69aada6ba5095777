from __future__ import annotations

import datetime as dt

from pydantic import BaseModel, Field

_EMAIL_PATTERN = r"^[^@\s]+@[^@\s]+\.[^@\s]+$"


class ReservationRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    email: str = Field(..., pattern=_EMAIL_PATTERN)
    phone: str | None = Field(default=None, max_length=40)
    party_size: int = Field(..., ge=1, le=20)
    date: dt.date
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="HH:MM")
    notes: str | None = Field(default=None, max_length=1000)


class ReservationResponse(BaseModel):
    id: str
    status: str
    email_sent: bool


class LoginRequest(BaseModel):
    username: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)
