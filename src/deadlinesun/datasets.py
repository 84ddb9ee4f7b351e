"""Local dataset readers: landmark records and timezone polygon collections.

These are the thin file edge in front of the pure computation modules. Nothing
is cached here; callers that poll should hold on to what they load.
"""

import json
import logging
import math
from collections.abc import Iterable, Mapping
from pathlib import Path
from typing import Any

from deadlinesun.civil import normalize_timezone_features
from deadlinesun.models import Landmark, TimezonePolygonFeature

LOGGER = logging.getLogger(__name__)


class DatasetError(Exception):
    """Dataset file is unreadable or a record is malformed."""


def _coordinate(entry: Mapping[str, Any], key: str, limit: float) -> float:
    value = entry.get(key)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DatasetError(f"invalid landmark entry: {json.dumps(entry, default=str)}")
    value = float(value)
    if not math.isfinite(value) or abs(value) > limit:
        raise DatasetError(f"invalid landmark entry: {json.dumps(entry, default=str)}")
    return value


def parse_landmarks(records: Iterable[Mapping[str, Any]]) -> tuple[Landmark, ...]:
    """Validate landmark records ``{id, name, lat, lon, tags}`` into Landmark values.

    Raises:
        DatasetError: On the first record with an empty id or a bad coordinate.
    """
    landmarks: list[Landmark] = []
    for entry in records:
        if not isinstance(entry, Mapping) or not entry.get("id"):
            raise DatasetError(f"invalid landmark entry: {entry!r}")
        tags = entry.get("tags") or ()
        landmarks.append(
            Landmark(
                id=str(entry["id"]),
                name=str(entry.get("name") or entry["id"]),
                lat=_coordinate(entry, "lat", 90.0),
                lon=_coordinate(entry, "lon", 180.0),
                tags=tuple(str(tag) for tag in tags),
            )
        )
    return tuple(landmarks)


def load_landmarks(path: Path | str) -> tuple[Landmark, ...]:
    """Read a JSON array of landmark records from ``path``."""
    path = Path(path)
    try:
        with path.open(encoding="utf-8") as f:
            records = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetError(f"cannot read landmarks from {path}: {exc}") from exc

    if not isinstance(records, list):
        raise DatasetError(f"landmark file must hold a JSON array: {path}")

    landmarks = parse_landmarks(records)
    LOGGER.debug(json.dumps({"event": "landmarks_loaded", "path": str(path), "count": len(landmarks)}))
    return landmarks


def load_timezone_polygons(path: Path | str) -> tuple[TimezonePolygonFeature, ...]:
    """Read a GeoJSON FeatureCollection of zone polygons and normalize it.

    A missing file yields an empty tuple: polygon glow is optional and the
    coarse hourly bands remain available without it.
    """
    path = Path(path)
    if not path.exists():
        LOGGER.info(json.dumps({"event": "timezone_polygons_missing", "path": str(path)}))
        return ()

    try:
        with path.open(encoding="utf-8") as f:
            collection = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise DatasetError(f"cannot read timezone polygons from {path}: {exc}") from exc

    if not isinstance(collection, Mapping):
        raise DatasetError(f"timezone polygon file must hold a FeatureCollection: {path}")

    features = normalize_timezone_features(collection)
    LOGGER.debug(
        json.dumps({"event": "timezone_polygons_loaded", "path": str(path), "count": len(features)})
    )
    return features
