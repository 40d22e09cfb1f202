"""Tests for record validation."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest
from pydantic import ValidationError

from fitstore.types import DailyProgress, UserProfile, WorkoutSession


class TestWorkoutSession:
    def test_defaults(self):
        s = WorkoutSession(exercise="pushups")
        assert s.id is None
        assert s.reps == 0
        assert s.duration_seconds == 0.0
        assert s.total_xp == 0
        assert s.timestamp_iso

    def test_datetime_timestamp_is_stored_as_iso_text(self):
        ts = datetime(2024, 5, 1, 7, 30, tzinfo=timezone.utc)
        s = WorkoutSession(exercise="squats", timestamp_iso=ts)
        assert s.timestamp_iso == "2024-05-01T07:30:00+00:00"

    @pytest.mark.parametrize("field", ["reps", "total_xp", "duration_seconds"])
    def test_negative_values_rejected(self, field):
        with pytest.raises(ValidationError):
            WorkoutSession(exercise="pushups", **{field: -1})

    def test_id_must_be_positive(self):
        with pytest.raises(ValidationError):
            WorkoutSession(id=0, exercise="pushups")

    def test_frozen(self):
        s = WorkoutSession(exercise="pushups", reps=3)
        with pytest.raises(ValidationError):
            s.reps = 4  # type: ignore[misc]


class TestDailyProgress:
    def test_accepts_date_object(self):
        dp = DailyProgress(date=date(2024, 2, 29))
        assert dp.date == "2024-02-29"
        assert dp.goals_met is False

    @pytest.mark.parametrize("bad", ["2024-2-1", "yesterday", "2024-02-30", "2024-02-01T00:00"])
    def test_rejects_non_calendar_dates(self, bad):
        with pytest.raises(ValidationError):
            DailyProgress(date=bad)

    def test_negative_counts_rejected(self):
        with pytest.raises(ValidationError):
            DailyProgress(date="2024-01-01", bicep_left=-2)


class TestUserProfile:
    def test_slot_id_is_fixed(self):
        assert UserProfile().id == 1
        assert UserProfile(id=1, total_xp=100, name="Alex").total_xp == 100

    def test_other_slot_ids_rejected(self):
        with pytest.raises(ValidationError):
            UserProfile(id=2)  # type: ignore[arg-type]

    def test_negative_xp_rejected(self):
        with pytest.raises(ValidationError):
            UserProfile(total_xp=-5)
