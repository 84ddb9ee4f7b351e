"""Command-line entry point: print the solar/civil state of a deadline.

Usage:
    deadlinesun 2026-03-15 22:00 Europe/Prague
    deadlinesun 2026-03-15 23:59 AoE --apparent --lat 50.08 --lon 14.42
    deadlinesun 2025-10-26 02:30 Europe/Prague --tie-break later --now 2025-10-25T12:00Z
    deadlinesun 2026-03-15 22:00 Asia/Seoul --landmarks landmarks.json --lang ko

Defaults for paths, glow window, solar mode, tie-break and language come from
``DEADLINESUN_*`` environment variables (see ``deadlinesun.config``).
"""

import argparse
import logging
import sys
from datetime import datetime

from pytz import utc

from deadlinesun.civil import build_civil_bands, polygon_intensities
from deadlinesun.clock import (
    format_duration,
    format_signed_minutes,
    format_target_clock,
    from_utc_ms,
    parse_instant,
    to_utc_ms,
)
from deadlinesun.compute import compute_status
from deadlinesun.config import Settings
from deadlinesun.datasets import DatasetError, load_landmarks, load_timezone_polygons
from deadlinesun.deadline import describe_timezone, normalize_deadline_zone, resolve
from deadlinesun.i18n import t
from deadlinesun.locations import local_clock, locate
from deadlinesun.models import DeadlineParseResult, DeadlineStatus, TieBreak

EXIT_INVALID_DEADLINE = 2


def _build_parser(settings: Settings) -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="deadlinesun",
        description="Track a civil deadline as a solar meridian sweeping the globe",
    )
    parser.add_argument("date", help="Deadline date, YYYY-MM-DD")
    parser.add_argument("time", help="Deadline wall time, HH:MM (24h)")
    parser.add_argument("zone", help="IANA timezone id, or AoE")
    parser.add_argument(
        "--tie-break",
        choices=[c.value for c in TieBreak],
        default=settings.tie_break.value,
        help=f"Instant to use when the wall time occurs twice (default: {settings.tie_break.value})",
    )
    parser.add_argument(
        "--apparent",
        action=argparse.BooleanOptionalAction,
        default=settings.apparent_solar,
        help="Apply the equation of time (apparent solar time)",
    )
    parser.add_argument("--now", help="Evaluate at this ISO-8601 instant instead of the clock")
    parser.add_argument("--lat", type=float, help="Your latitude, for distance to the line")
    parser.add_argument("--lon", type=float, help="Your longitude, for distance to the line")
    parser.add_argument("--label", help="Label for your location")
    parser.add_argument(
        "--landmarks",
        default=settings.landmarks_path,
        help="JSON array of landmarks {id, name, lat, lon, tags}",
    )
    parser.add_argument(
        "--tz-polygons",
        default=settings.tz_polygons_path,
        help="GeoJSON FeatureCollection of timezone polygons",
    )
    parser.add_argument(
        "--glow",
        type=int,
        default=settings.glow_minutes,
        help=f"Civil glow window in minutes (default: {settings.glow_minutes})",
    )
    parser.add_argument("--lang", default=settings.lang, help="Output language: en or ko")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    return parser


def _error_message(result: DeadlineParseResult, zone: str, lang: str) -> str:
    assert result.error_kind is not None
    return t(f"error_{result.error_kind.value}", lang).format(zone=zone)


def _format_utc(ms: int) -> str:
    return from_utc_ms(ms).strftime("%Y-%m-%d %H:%M:%S UTC")


def format_status(status: DeadlineStatus, zone: str, tie_break: TieBreak, lang: str) -> list[str]:
    """Render a DeadlineStatus as plain text lines."""
    result = status.result
    assert result.deadline_utc_ms is not None and result.target_minutes_of_day is not None

    lines = [
        f"{t('label_deadline', lang)}: {format_target_clock(result.target_minutes_of_day)} "
        f"{describe_timezone(zone)} = {_format_utc(result.deadline_utc_ms)}",
    ]
    if result.ambiguous:
        offsets = ", ".join(format_signed_minutes(o) for o in result.candidate_offsets_minutes)
        lines.append(t("ambiguous_notice", lang).format(choice=tie_break.value, offsets=offsets))

    if status.remaining_ms < 0:
        lines.append(t("deadline_passed", lang))
    else:
        lines.append(f"{t('label_remaining', lang)}: T-{format_duration(status.remaining_ms)}")
    mode = t("solar_mode_apparent" if status.apparent_solar else "solar_mode_mean", lang)
    lines += [
        f"{t('label_cycles', lang)}: {status.cycles_remaining:.2f}",
        f"{t('label_solar_line', lang)}: {status.meridian_longitude:.1f}°",
        f"{t('label_line_speed', lang)}: {status.line_speed_deg_per_hour:.2f}°/h "
        f"({status.line_speed_deg_per_hour / 15:.3f}x)",
        f"{t('label_subsolar', lang)}: {status.subsolar_point.lat:.2f}°, {status.subsolar_point.lon:.2f}°",
        f"{t('label_solar_mode', lang)}: {mode}",
    ]

    if status.location is not None and status.distance is not None:
        direction = t("location_ahead" if status.distance.delta_minutes > 0 else "location_behind", lang)
        clock = local_clock(status.location, status.now_ms)
        lines.append(
            f"{t('label_location', lang)}: {status.location.label} {direction} "
            f"{format_signed_minutes(status.distance.delta_minutes)} "
            f"· ~{status.distance.distance_km:.0f} km" + (f" · {clock}" if clock else "")
        )

    lines.append(f"{t('label_crossings', lang)}:")
    if not status.crossings:
        lines.append(f"  - {t('no_crossings', lang)}")
    for crossing in status.crossings:
        lines.append(f"  - {_format_utc(crossing.crossing_ms)}  {crossing.landmark.name}")
    return lines


def main(argv: list[str] | None = None) -> int:
    settings = Settings.from_env()
    parser = _build_parser(settings)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING, format="%(message)s"
    )

    if (args.lat is None) != (args.lon is None):
        parser.error("--lat and --lon must be given together")

    tie_break = TieBreak(args.tie_break)
    zone = normalize_deadline_zone(args.zone)
    result = resolve(args.date, args.time, zone, tie_break)
    if not result.valid:
        print(_error_message(result, zone, args.lang), file=sys.stderr)
        return EXIT_INVALID_DEADLINE

    try:
        now_ms = parse_instant(args.now) if args.now else to_utc_ms(datetime.now(utc))
    except ValueError as exc:
        parser.error(f"--now: {exc}")

    try:
        landmarks = load_landmarks(args.landmarks) if args.landmarks else ()
        polygons = load_timezone_polygons(args.tz_polygons) if args.tz_polygons else ()
        location = (
            locate(args.lat, args.lon, args.label) if args.lat is not None else None
        )
    except (DatasetError, ValueError) as exc:
        print(str(exc), file=sys.stderr)
        return 1

    status = compute_status(result, now_ms, landmarks, location, args.apparent)
    for line in format_status(status, zone, tie_break, args.lang):
        print(line)

    target = result.target_minutes_of_day
    assert target is not None
    print(f"{t('label_bands', args.lang)}:")
    for band in build_civil_bands(now_ms, target, args.glow):
        print(
            f"  UTC{band.offset_hours:+d}  {band.start_longitude:.1f}°..{band.end_longitude:.1f}°  "
            f"{format_signed_minutes(band.minute_difference)}  {band.intensity:.2f}"
        )

    if polygons:
        print(f"{t('label_zones', args.lang)}:")
        seen: set[str] = set()
        for glow in polygon_intensities(polygons, now_ms, target, args.glow):
            if glow.feature.zone_id in seen:
                continue
            seen.add(glow.feature.zone_id)
            print(f"  {glow.feature.zone_id}  {glow.intensity:.2f}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
