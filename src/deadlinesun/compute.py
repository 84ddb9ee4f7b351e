"""Status computation layer: resolve a deadline and derive its solar/civil state at an instant."""

import json
import logging
from collections.abc import Iterable

from deadlinesun.clock import MS_PER_DAY
from deadlinesun.crossings import find_crossings
from deadlinesun.deadline import parse_deadline_input
from deadlinesun.models import (
    DeadlineInput,
    DeadlineParseResult,
    DeadlineStatus,
    Landmark,
    LocationPoint,
)
from deadlinesun.solar import (
    distance_to_meridian,
    line_speed_degrees_per_hour,
    meridian_longitude_for_target,
    subsolar_point,
)

LOGGER = logging.getLogger(__name__)


class DeadlineError(Exception):
    """Deadline could not be resolved to an instant."""

    def __init__(self, result: DeadlineParseResult) -> None:
        super().__init__(result.error or "invalid deadline")
        self.result = result


def compute_status(
    result: DeadlineParseResult,
    now_ms: int,
    landmarks: Iterable[Landmark] = (),
    location: LocationPoint | None = None,
    apparent: bool = False,
) -> DeadlineStatus:
    """Compute the deadline meridian, countdown and landmark crossings at ``now_ms``.

    Args:
        result: A resolved deadline.
        now_ms: Current instant, UTC ms.
        landmarks: Points whose crossings between now and the deadline are wanted.
        location: Observer position to measure against the meridian.
        apparent: Use apparent rather than mean solar time.

    Returns:
        DeadlineStatus. Once the deadline has passed there are no crossings and
        ``cycles_remaining`` is 0.

    Raises:
        DeadlineError: If ``result`` is not valid.
    """
    if not result.valid:
        raise DeadlineError(result)

    deadline_ms = result.deadline_utc_ms
    target = result.target_minutes_of_day
    assert deadline_ms is not None and target is not None

    remaining_ms = deadline_ms - now_ms
    meridian = meridian_longitude_for_target(now_ms, target, apparent)
    crossings = find_crossings(landmarks, now_ms, deadline_ms, target, apparent)
    distance = (
        distance_to_meridian(location.lat, location.lon, meridian) if location is not None else None
    )

    LOGGER.info(
        json.dumps(
            {
                "event": "status_computed",
                "deadline_utc_ms": deadline_ms,
                "remaining_ms": remaining_ms,
                "crossings": len(crossings),
                "apparent": apparent,
            }
        )
    )

    return DeadlineStatus(
        result=result,
        now_ms=now_ms,
        remaining_ms=remaining_ms,
        cycles_remaining=max(0.0, remaining_ms / MS_PER_DAY),
        apparent_solar=apparent,
        meridian_longitude=meridian,
        deadline_meridian_longitude=meridian_longitude_for_target(deadline_ms, target, apparent),
        line_speed_deg_per_hour=line_speed_degrees_per_hour(now_ms, target, apparent),
        subsolar_point=subsolar_point(now_ms, apparent),
        crossings=crossings,
        location=location,
        distance=distance,
    )


def run(
    query: DeadlineInput,
    now_ms: int,
    landmarks: Iterable[Landmark] = (),
    location: LocationPoint | None = None,
    apparent: bool = False,
) -> DeadlineStatus:
    """Top-level entry point: takes a DeadlineInput and returns a DeadlineStatus.

    Raises:
        DeadlineError: If the deadline does not resolve. The failed
            DeadlineParseResult is attached as ``.result``.
    """
    result = parse_deadline_input(query)
    return compute_status(result, now_ms, landmarks, location, apparent)
