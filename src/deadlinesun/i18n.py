"""Simple two-language (ko/en) translation helper."""

_STRINGS: dict[str, dict[str, str]] = {
    "error_invalid_format": {
        "ko": "날짜 또는 시각 형식이 올바르지 않아요 (YYYY-MM-DD, HH:MM).",
        "en": "Invalid date/time format (expected YYYY-MM-DD and HH:MM).",
    },
    "error_invalid_zone": {
        "ko": "시간대를 찾을 수 없어요: {zone}",
        "en": "Unknown timezone or calendar date: {zone}",
    },
    "error_nonexistent_wall_time": {
        "ko": "서머타임 전환으로 이 시각은 존재하지 않아요. 시각을 옮겨 주세요.",
        "en": "This wall time does not exist in the timezone (DST jump). Shift the time.",
    },
    "ambiguous_notice": {
        "ko": "이 시각은 두 번 있어요. {choice} 시각을 사용합니다 (오프셋: {offsets}).",
        "en": "This wall time occurs twice. Using the {choice} one (offsets: {offsets}).",
    },
    "label_deadline": {
        "ko": "마감",
        "en": "Deadline",
    },
    "label_remaining": {
        "ko": "남은 시간",
        "en": "Remaining",
    },
    "label_cycles": {
        "ko": "남은 회전",
        "en": "Rotations left",
    },
    "label_solar_line": {
        "ko": "태양선 경도",
        "en": "Solar line lon",
    },
    "label_line_speed": {
        "ko": "선 속도",
        "en": "Line speed",
    },
    "label_subsolar": {
        "ko": "태양 직하점",
        "en": "Subsolar point",
    },
    "label_solar_mode": {
        "ko": "태양시 모드",
        "en": "Solar mode",
    },
    "solar_mode_apparent": {
        "ko": "시태양시",
        "en": "apparent",
    },
    "solar_mode_mean": {
        "ko": "평균태양시",
        "en": "mean",
    },
    "label_location": {
        "ko": "내 위치",
        "en": "Your location",
    },
    "location_ahead": {
        "ko": "앞섬",
        "en": "ahead",
    },
    "location_behind": {
        "ko": "뒤처짐",
        "en": "behind",
    },
    "label_bands": {
        "ko": "지금 목표 시각에 가까운 시간대",
        "en": "Offsets near the target clock",
    },
    "label_zones": {
        "ko": "목표 시각에 가까운 실제 시간대",
        "en": "Zones near the target clock",
    },
    "label_crossings": {
        "ko": "랜드마크 통과",
        "en": "Landmark crossings",
    },
    "no_crossings": {
        "ko": "마감 전까지 통과하는 랜드마크가 없어요",
        "en": "no crossings in horizon",
    },
    "deadline_passed": {
        "ko": "마감이 지났어요",
        "en": "Deadline has passed",
    },
}


def t(key: str, lang: str) -> str:
    """Return the translated string for key in lang.

    Falls back to 'en', then to the key itself if not found.
    """
    entry = _STRINGS.get(key)
    if entry is None:
        return key
    return entry.get(lang) or entry.get("en") or key
