"""Landmark crossing solver: when does the deadline meridian pass each landmark?"""

import math
from collections.abc import Iterable

from deadlinesun.clock import round_half_up
from deadlinesun.models import Landmark, LandmarkCrossing
from deadlinesun.solar import phase_degrees

BISECTION_ITERATIONS = 40


def _crossing_id(landmark: Landmark, crossing_ms: float) -> str:
    return f"{landmark.id}-{round_half_up(crossing_ms / 1000)}"


def _bisect(
    target_phase: float,
    target_minutes_of_day: float,
    apparent: bool,
    low_ms: float,
    high_ms: float,
) -> int:
    """Narrow [low, high] around the instant where the phase equals ``target_phase``.

    Phase decreases with time, so a midpoint still above the target means the
    crossing lies later.
    """
    low, high = low_ms, high_ms
    for _ in range(BISECTION_ITERATIONS):
        mid = (low + high) / 2
        if phase_degrees(mid, target_minutes_of_day, apparent) > target_phase:
            low = mid
        else:
            high = mid
    return round_half_up((low + high) / 2)


def find_crossings(
    landmarks: Iterable[Landmark],
    range_start_ms: int,
    range_end_ms: int,
    target_minutes_of_day: float,
    apparent: bool = False,
) -> tuple[LandmarkCrossing, ...]:
    """Every instant in [range_start_ms, range_end_ms] at which the deadline meridian
    sits on a landmark's longitude.

    A range longer than a day yields one crossing per rotation for each landmark.

    Args:
        landmarks: Fixed points to test. Processed independently; duplicates are kept.
        range_start_ms: Range start, UTC ms.
        range_end_ms: Range end, UTC ms. An empty or inverted range has no crossings.
        target_minutes_of_day: Civil minute-of-day the meridian tracks.
        apparent: Apply the equation of time.

    Returns:
        Crossings sorted by instant ascending.
    """
    if range_end_ms <= range_start_ms:
        return ()

    start_phase = phase_degrees(range_start_ms, target_minutes_of_day, apparent)
    end_phase = phase_degrees(range_end_ms, target_minutes_of_day, apparent)
    high_phase = max(start_phase, end_phase)
    low_phase = min(start_phase, end_phase)

    crossings: list[LandmarkCrossing] = []
    for landmark in landmarks:
        n_min = math.ceil((low_phase - landmark.lon) / 360)
        n_max = math.floor((high_phase - landmark.lon) / 360)

        for n in range(n_min, n_max + 1):
            target_phase = landmark.lon + n * 360
            at_start = start_phase - target_phase
            at_end = end_phase - target_phase

            if at_start == 0:
                crossing_ms = range_start_ms
            elif at_end == 0:
                crossing_ms = range_end_ms
            elif (at_start > 0) == (at_end > 0):
                continue
            else:
                crossing_ms = _bisect(
                    target_phase,
                    target_minutes_of_day,
                    apparent,
                    range_start_ms,
                    range_end_ms,
                )
                if not range_start_ms <= crossing_ms <= range_end_ms:
                    continue

            crossings.append(
                LandmarkCrossing(
                    id=_crossing_id(landmark, crossing_ms),
                    landmark=landmark,
                    crossing_ms=int(crossing_ms),
                )
            )

    crossings.sort(key=lambda c: c.crossing_ms)
    return tuple(crossings)
