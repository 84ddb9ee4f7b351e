"""Tests for the deadline status entry points."""

import pytest

from deadlinesun.clock import MS_PER_DAY, MS_PER_HOUR, parse_instant
from deadlinesun.compute import DeadlineError, compute_status, run
from deadlinesun.deadline import resolve
from deadlinesun.models import DeadlineInput, ErrorKind, Landmark, LocationPoint

DEADLINE = DeadlineInput(date="2026-03-15", time="22:00", zone="Europe/Prague")
DEADLINE_MS = parse_instant("2026-03-15T21:00:00Z")
DAY_BEFORE = DEADLINE_MS - MS_PER_DAY

MID_ATLANTIC = Landmark(id="mid-atlantic", name="Mid Atlantic", lat=0.0, lon=-30.0)
PRAGUE = LocationPoint(lat=50.0755, lon=14.4378, label="Prague", zone="Europe/Prague")


class TestRun:

    def test_countdown(self):
        status = run(DEADLINE, DAY_BEFORE)
        assert status.result.deadline_utc_ms == DEADLINE_MS
        assert status.now_ms == DAY_BEFORE
        assert status.remaining_ms == MS_PER_DAY
        assert status.cycles_remaining == pytest.approx(1.0)
        assert status.deadline_meridian_longitude == pytest.approx(15.0)
        assert status.meridian_longitude == pytest.approx(15.0)
        assert 14.95 < status.line_speed_deg_per_hour < 15.05
        assert status.apparent_solar is False
        assert status.crossings == ()
        assert status.location is None and status.distance is None

    def test_crossings_between_now_and_deadline(self):
        status = run(DEADLINE, DAY_BEFORE, [MID_ATLANTIC])
        assert len(status.crossings) == 1
        (crossing,) = status.crossings
        assert DAY_BEFORE < crossing.crossing_ms < DEADLINE_MS
        assert abs(crossing.crossing_ms - parse_instant("2026-03-15T00:00:00Z")) <= 1000

    def test_distance_to_location(self):
        status = run(DEADLINE, DAY_BEFORE, location=PRAGUE)
        assert status.location == PRAGUE
        assert status.distance is not None
        assert status.distance.delta_longitude == pytest.approx(14.4378 - 15.0, abs=1e-6)
        assert status.distance.delta_minutes < 0

    def test_apparent_mode(self):
        status = run(DEADLINE, DAY_BEFORE, apparent=True)
        assert status.apparent_solar is True
        # Equation of time is about -9 minutes in mid March
        assert 15.0 < status.meridian_longitude < 18.0

    def test_passed_deadline(self):
        status = run(DEADLINE, DEADLINE_MS + MS_PER_HOUR, [MID_ATLANTIC])
        assert status.remaining_ms == -MS_PER_HOUR
        assert status.cycles_remaining == 0.0
        assert status.crossings == ()

    def test_invalid_input_raises(self):
        with pytest.raises(DeadlineError) as excinfo:
            run(DeadlineInput(date="15/03/2026", time="22:00", zone="Europe/Prague"), DAY_BEFORE)
        assert excinfo.value.result.error_kind is ErrorKind.INVALID_FORMAT


class TestComputeStatus:

    def test_nonexistent_wall_time_raises(self):
        result = resolve("2026-03-29", "02:30", "Europe/Prague")
        with pytest.raises(DeadlineError) as excinfo:
            compute_status(result, DAY_BEFORE)
        assert excinfo.value.result is result
        assert excinfo.value.result.is_nonexistent_wall_time

    def test_ambiguous_later(self):
        result = resolve("2026-10-25", "02:30", "Europe/Prague", "later")
        status = compute_status(result, parse_instant("2026-10-24T00:00:00Z"))
        assert status.result.selected_offset_minutes == 60
        assert status.remaining_ms == parse_instant("2026-10-25T01:30:00Z") - parse_instant(
            "2026-10-24T00:00:00Z"
        )
