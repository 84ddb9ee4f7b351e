"""Deadline resolution: civil wall-clock reading in a named zone to an absolute UTC instant.

Zone rules come from the IANA database shipped with pytz. Daylight-saving gaps
and overlaps are detected structurally rather than from a list of transition
dates: a gap shows up as a wall clock that does not survive
localize/normalize, an overlap as more than one UTC offset that maps back to
the same wall clock.
"""

import json
import logging
from datetime import datetime, timedelta

import pytz
from pytz import utc

from deadlinesun.clock import to_utc_ms
from deadlinesun.models import (
    DeadlineInput,
    DeadlineParseResult,
    ErrorKind,
    TieBreak,
    TimezoneOption,
)

LOGGER = logging.getLogger(__name__)

AOE_IANA_ZONE = "Etc/GMT+12"
AOE_LABEL = "Anywhere on Earth (AoE, UTC-12)"

_AOE_ALIASES = frozenset(
    {
        "aoe",
        "anywhere on earth",
        "anywhere on earth (aoe)",
        "anywhere on earth (aoe, utc-12)",
        "utc-12",
    }
)

# Hours around the requested wall clock at which the zone's offset is sampled
# when enumerating candidates. Wide enough to see both sides of any transition.
_OFFSET_PROBE_HOURS = (-24, -12, -6, 0, 6, 12, 24)


def _parse_date(date: str) -> tuple[int, int, int] | None:
    parts = date.strip().split("-")
    if len(parts) != 3 or not all(p.isdecimal() for p in parts):
        return None
    year, month, day = (int(p) for p in parts)
    if not year or not month or not day:
        return None
    return year, month, day


def _parse_time(time: str) -> tuple[int, int] | None:
    parts = time.strip().split(":")
    if len(parts) != 2 or not all(p.isdecimal() for p in parts):
        return None
    hour, minute = int(parts[0]), int(parts[1])
    if not 0 <= hour <= 23 or not 0 <= minute <= 59:
        return None
    return hour, minute


def normalize_deadline_zone(zone: str) -> str:
    """Trim the zone id and map "Anywhere on Earth" aliases to ``Etc/GMT+12``."""
    trimmed = zone.strip()
    if trimmed.lower() in _AOE_ALIASES:
        return AOE_IANA_ZONE
    return trimmed


def describe_timezone(zone: str) -> str:
    return AOE_LABEL if zone == AOE_IANA_ZONE else zone


def _failure(kind: ErrorKind, message: str, **context: object) -> DeadlineParseResult:
    LOGGER.debug(
        json.dumps({"event": "deadline_rejected", "kind": kind.value, "error": message, **context})
    )
    return DeadlineParseResult(valid=False, error_kind=kind, error=message)


def _candidate_instants(tz: pytz.BaseTzInfo, naive: datetime, seed: timedelta) -> list[datetime]:
    """Every UTC instant at which ``tz`` shows exactly the wall clock ``naive``.

    Args:
        tz: pytz zone.
        naive: Requested wall clock (no tzinfo).
        seed: An offset already known to be valid for ``naive``.

    Returns:
        Aware UTC datetimes sorted ascending. Usually one; two inside a
        fall-back overlap; the list length is not otherwise assumed.
    """
    offsets = {seed}
    for hours in _OFFSET_PROBE_HOURS:
        probe = utc.localize(naive + timedelta(hours=hours))
        offsets.add(probe.astimezone(tz).utcoffset())

    instants = []
    for offset in offsets:
        candidate = utc.localize(naive - offset)
        if candidate.astimezone(tz).replace(tzinfo=None) == naive:
            instants.append(candidate)
    return sorted(instants)


def resolve(
    date: str,
    time: str,
    zone_id: str,
    tie_break: TieBreak | str = TieBreak.earlier,
) -> DeadlineParseResult:
    """Resolve a civil deadline to an absolute instant.

    Args:
        date: Calendar date, "YYYY-MM-DD".
        time: Wall time, "HH:MM" (24-hour).
        zone_id: IANA zone id, or an AoE alias.
        tie_break: Which instant to pick when the wall clock occurs twice.

    Returns:
        DeadlineParseResult. Never raises for bad input; failures are reported
        through ``error_kind``.
    """
    tie_break = TieBreak(tie_break)
    date_parts = _parse_date(date)
    time_parts = _parse_time(time)
    if date_parts is None or time_parts is None:
        return _failure(ErrorKind.INVALID_FORMAT, "invalid date/time format", date=date, time=time)

    year, month, day = date_parts
    hour, minute = time_parts
    zone = normalize_deadline_zone(zone_id)

    try:
        tz = pytz.timezone(zone)
    except pytz.UnknownTimeZoneError:
        return _failure(ErrorKind.INVALID_ZONE, f"unknown timezone: {zone!r}", zone=zone)

    try:
        naive = datetime(year, month, day, hour, minute)
        local = tz.normalize(tz.localize(naive, is_dst=False))
    except (ValueError, OverflowError) as exc:
        return _failure(ErrorKind.INVALID_ZONE, f"invalid timezone date: {exc}", zone=zone)

    if (local.year, local.month, local.day, local.hour, local.minute) != (
        year,
        month,
        day,
        hour,
        minute,
    ):
        return _failure(
            ErrorKind.NONEXISTENT_WALL_TIME,
            "selected wall time does not exist in this timezone (dst jump)",
            zone=zone,
            date=date,
            time=time,
        )

    try:
        instants = _candidate_instants(tz, naive, local.utcoffset())
    except OverflowError as exc:
        return _failure(ErrorKind.INVALID_ZONE, f"invalid timezone date: {exc}", zone=zone)

    selected = instants[-1] if tie_break is TieBreak.later else instants[0]
    offsets = tuple(int((naive - i.replace(tzinfo=None)).total_seconds() // 60) for i in instants)

    return DeadlineParseResult(
        valid=True,
        ambiguous=len(instants) > 1,
        deadline_utc_ms=to_utc_ms(selected),
        target_minutes_of_day=hour * 60 + minute,
        selected_offset_minutes=offsets[instants.index(selected)],
        candidate_offsets_minutes=offsets,
    )


def parse_deadline_input(query: DeadlineInput) -> DeadlineParseResult:
    """Resolve a DeadlineInput. See :func:`resolve`."""
    return resolve(query.date, query.time, query.zone, query.tie_break)


def list_deadline_timezone_options() -> tuple[TimezoneOption, ...]:
    """All zones known to the zone database plus AoE, AoE first and the rest sorted."""
    zones = sorted(set(pytz.all_timezones) - {AOE_IANA_ZONE})
    options = [
        TimezoneOption(
            value=AOE_IANA_ZONE,
            label=AOE_LABEL,
            search_terms=(
                AOE_IANA_ZONE.lower(),
                "aoe",
                "anywhere on earth",
                "utc-12",
                "utc -12",
            ),
        )
    ]
    for zone in zones:
        lower = zone.lower()
        options.append(
            TimezoneOption(
                value=zone,
                label=zone,
                search_terms=(lower, lower.replace("/", " "), lower.replace("_", " ")),
            )
        )
    return tuple(options)


def search_timezone_options(
    options: tuple[TimezoneOption, ...], query: str, limit: int = 20
) -> tuple[TimezoneOption, ...]:
    """Options whose search terms contain ``query`` (case-insensitive), in order."""
    needle = query.strip().lower()
    if not needle:
        return options[:limit]
    matches = [o for o in options if any(needle in term for term in o.search_terms)]
    return tuple(matches[:limit])
