"""
(2) Mood Mapper

- 입력: PersonaTraits + (선택) 최근 무드 엔트리
- 출력: PersonaMoodContext (traits, mood)

무드가 없으면 mood=None 그대로 둔다. 추론하거나 기본값을 채우지 않는다.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from typing import Any, Final, Mapping

from gamepilot.persona.types import MoodState, PersonaMoodContext, PersonaTraits

MIN_INTENSITY: Final[int] = 1
MAX_INTENSITY: Final[int] = 10
DEFAULT_RECENT_HOURS: Final[float] = 24.0


def clamp_intensity(intensity: Any) -> int:
    try:
        value = int(round(float(intensity)))
    except (TypeError, ValueError):
        value = MIN_INTENSITY
    return max(MIN_INTENSITY, min(MAX_INTENSITY, value))


def create_mood_state(
    mood_id: str,
    intensity: int,
    timestamp: datetime | None = None,
) -> MoodState:
    return MoodState(
        mood_id=str(mood_id),
        intensity=clamp_intensity(intensity),
        timestamp=timestamp if timestamp is not None else datetime.now(),
    )


def coerce_mood_state(entry: Any) -> MoodState | None:
    """
    MoodEntry / MoodState / MoodEvent 또는 동일 키를 가진 mapping을 MoodState로 정규화.
    timestamp가 ISO 문자열이면 datetime으로 파싱한다.
    """
    if entry is None:
        return None
    if isinstance(entry, Mapping):
        mood_id = entry.get("mood_id")
        intensity = entry.get("intensity")
        timestamp = entry.get("timestamp")
    else:
        mood_id = getattr(entry, "mood_id", None)
        intensity = getattr(entry, "intensity", None)
        timestamp = getattr(entry, "timestamp", None)

    if not mood_id:
        raise ValueError("mood entry requires a mood_id")
    if isinstance(timestamp, str):
        timestamp = datetime.fromisoformat(timestamp)
    if timestamp is not None and not isinstance(timestamp, datetime):
        raise ValueError(f"mood entry timestamp must be a datetime, got {type(timestamp).__name__}")
    return create_mood_state(mood_id, intensity, timestamp)


def map_mood_to_persona_context(
    traits: PersonaTraits,
    mood_entry: Any = None,
) -> PersonaMoodContext:
    return PersonaMoodContext(traits=traits, mood=coerce_mood_state(mood_entry))


def is_mood_recent(
    mood_state: MoodState,
    max_age_hours: float = DEFAULT_RECENT_HOURS,
    *,
    now: datetime | None = None,
) -> bool:
    """경계값(정확히 max_age_hours 경과)은 recent로 본다."""
    now = now or datetime.now(mood_state.timestamp.tzinfo)
    return now - mood_state.timestamp <= timedelta(hours=max_age_hours)


def get_mood_intensity_category(intensity: int) -> str:
    if intensity <= 3:
        return "Low"
    if intensity <= 7:
        return "Medium"
    return "High"
