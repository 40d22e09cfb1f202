"""Record types persisted by fitstore."""

from __future__ import annotations

import re
from datetime import date, datetime, timezone
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator

PROFILE_SLOT_ID = 1

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _iso_text(value: Any) -> Any:
    if isinstance(value, (datetime, date)):
        return value.isoformat()
    return value


class WorkoutSession(BaseModel):
    """A single completed workout session. Immutable once stored."""

    model_config = ConfigDict(frozen=True)

    id: int | None = Field(default=None, ge=1)
    timestamp_iso: str = Field(default_factory=utc_now_iso)
    exercise: str
    reps: int = Field(default=0, ge=0)
    duration_seconds: float = Field(default=0.0, ge=0)
    total_xp: int = Field(default=0, ge=0)

    @field_validator("timestamp_iso", mode="before")
    @classmethod
    def _coerce_timestamp(cls, value: Any) -> Any:
        return _iso_text(value)


class DailyProgress(BaseModel):
    """Aggregated progress for one calendar date."""

    model_config = ConfigDict(frozen=True)

    date: str
    pushups: int = Field(default=0, ge=0)
    squats: int = Field(default=0, ge=0)
    plank_seconds: int = Field(default=0, ge=0)
    bicep_left: int = Field(default=0, ge=0)
    bicep_right: int = Field(default=0, ge=0)
    goals_met: bool = False
    last_updated_iso: str = Field(default_factory=utc_now_iso)

    @field_validator("date", mode="before")
    @classmethod
    def _check_date(cls, value: Any) -> Any:
        if isinstance(value, datetime):
            value = value.date()
        value = _iso_text(value)
        if not isinstance(value, str) or not _DATE_RE.match(value):
            raise ValueError(f"date must be an ISO calendar date (YYYY-MM-DD), got {value!r}")
        date.fromisoformat(value)
        return value

    @field_validator("last_updated_iso", mode="before")
    @classmethod
    def _coerce_last_updated(cls, value: Any) -> Any:
        return _iso_text(value)


class UserProfile(BaseModel):
    """The single user profile. Lives in a fixed slot; ``id`` cannot vary."""

    model_config = ConfigDict(frozen=True)

    id: Literal[1] = PROFILE_SLOT_ID
    total_xp: int = Field(default=0, ge=0)
    name: str = ""
