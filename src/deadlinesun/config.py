"""Runtime settings read from the environment (and a local .env file, if present)."""

import os
from dataclasses import dataclass
from pathlib import Path

from dotenv import load_dotenv

from deadlinesun.models import TieBreak

_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off", ""})


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    value = raw.strip().lower()
    if value in _TRUE:
        return True
    if value in _FALSE:
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _path(name: str) -> Path | None:
    raw = os.environ.get(name, "").strip()
    return Path(raw).expanduser() if raw else None


@dataclass(frozen=True)
class Settings:
    """Defaults for the command-line front end. Every field can be overridden per call."""

    landmarks_path: Path | None = None
    tz_polygons_path: Path | None = None
    glow_minutes: int = 30
    apparent_solar: bool = False
    tie_break: TieBreak = TieBreak.earlier
    lang: str = "en"

    @classmethod
    def from_env(cls, dotenv: bool = True) -> "Settings":
        """Build Settings from ``DEADLINESUN_*`` variables.

        Raises:
            ValueError: If a variable holds a value of the wrong shape.
        """
        if dotenv:
            load_dotenv()

        raw_glow = os.environ.get("DEADLINESUN_GLOW_MINUTES", "30").strip()
        try:
            glow_minutes = int(raw_glow)
        except ValueError:
            raise ValueError(f"DEADLINESUN_GLOW_MINUTES must be an integer, got {raw_glow!r}") from None

        raw_tie_break = os.environ.get("DEADLINESUN_TIE_BREAK", "earlier").strip().lower()
        try:
            tie_break = TieBreak(raw_tie_break)
        except ValueError:
            raise ValueError(
                f"DEADLINESUN_TIE_BREAK must be 'earlier' or 'later', got {raw_tie_break!r}"
            ) from None

        return cls(
            landmarks_path=_path("DEADLINESUN_LANDMARKS"),
            tz_polygons_path=_path("DEADLINESUN_TZ_POLYGONS"),
            glow_minutes=glow_minutes,
            apparent_solar=_flag("DEADLINESUN_APPARENT_SOLAR", False),
            tie_break=tie_break,
            lang=os.environ.get("DEADLINESUN_LANG", "en").strip() or "en",
        )
