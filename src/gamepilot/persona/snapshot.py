"""
(4) Persona Snapshot 조립기

목표:
- 입력 시그널 검증 → trait 추출 → 무드 매핑 → 내러티브 순서로 하나의 스냅샷을 만든다.

주의:
- 검증 오류(SignalValidationError)는 감싸지 않고 그대로 올린다.
- 검증 이후 단계의 오류는 SnapshotBuildError로 감싸서 다시 올린다(삼키지 않음).
"""

from __future__ import annotations

import math
from typing import Any, Final, Mapping

from gamepilot.core.errors import SignalValidationError, SnapshotBuildError
from gamepilot.persona.mood_mapping import map_mood_to_persona_context
from gamepilot.persona.narrative import build_persona_narrative
from gamepilot.persona.trait_extractor import derive_persona_traits
from gamepilot.persona.types import DIFFICULTY_LEVELS, PersonaSnapshot, RawPlayerSignals

HIGH_CONFIDENCE_THRESHOLD: Final[float] = 0.7

REQUIRED_SIGNAL_FIELDS: Final[tuple[str, ...]] = (
    "playtime_by_genre",
    "average_session_length_minutes",
    "sessions_per_week",
    "difficulty_preference",
    "multiplayer_ratio",
    "completion_rate",
)

MINIMAL_SIGNAL_DEFAULTS: Final[dict[str, Any]] = {
    "playtime_by_genre": {},
    "average_session_length_minutes": 60,
    "sessions_per_week": 3,
    "difficulty_preference": "Normal",
    "multiplayer_ratio": 0.3,
    "late_night_ratio": 0.2,
    "completion_rate": 0.5,
}


def _is_number(x: Any) -> bool:
    if isinstance(x, bool) or not isinstance(x, (int, float)):
        return False
    return math.isfinite(x)


def _signals_as_mapping(signals: Any) -> Mapping[str, Any]:
    if isinstance(signals, RawPlayerSignals):
        return {
            "playtime_by_genre": signals.playtime_by_genre,
            "average_session_length_minutes": signals.average_session_length_minutes,
            "sessions_per_week": signals.sessions_per_week,
            "difficulty_preference": signals.difficulty_preference,
            "multiplayer_ratio": signals.multiplayer_ratio,
            "late_night_ratio": signals.late_night_ratio,
            "completion_rate": signals.completion_rate,
        }
    if isinstance(signals, Mapping):
        return signals
    raise SignalValidationError(
        f"signals must be a mapping or RawPlayerSignals, got {type(signals).__name__}",
        field="signals",
    )


def _check_ratio(src: Mapping[str, Any], name: str) -> None:
    v = src[name]
    if not _is_number(v) or v < 0 or v > 1:
        raise SignalValidationError(f"{name} must be a number between 0 and 1", field=name)


def validate_raw_player_signals(signals: Any) -> RawPlayerSignals:
    """
    필드 존재 → 타입/범위 순서로 검사하고, 통과하면 RawPlayerSignals를 돌려준다.
    메시지에는 문제 필드명이 항상 들어간다.
    """
    if signals is None:
        raise SignalValidationError("PersonaSnapshotInput.signals is required", field="signals")

    src = _signals_as_mapping(signals)

    for name in REQUIRED_SIGNAL_FIELDS:
        if name not in src:
            raise SignalValidationError(f"Missing required field: {name}", field=name)

    if not isinstance(src["playtime_by_genre"], Mapping):
        raise SignalValidationError(
            "playtime_by_genre must be a valid mapping", field="playtime_by_genre"
        )
    for genre, minutes in src["playtime_by_genre"].items():
        if not _is_number(minutes) or minutes < 0:
            raise SignalValidationError(
                f"playtime_by_genre[{genre!r}] must be a non-negative number",
                field="playtime_by_genre",
            )

    for name in ("average_session_length_minutes", "sessions_per_week"):
        v = src[name]
        if not _is_number(v) or v < 0:
            raise SignalValidationError(f"{name} must be a non-negative number", field=name)

    if src["difficulty_preference"] not in DIFFICULTY_LEVELS:
        raise SignalValidationError(
            f"difficulty_preference must be one of: {', '.join(DIFFICULTY_LEVELS)}",
            field="difficulty_preference",
        )

    _check_ratio(src, "multiplayer_ratio")
    _check_ratio(src, "completion_rate")
    if src.get("late_night_ratio") is not None:
        _check_ratio(src, "late_night_ratio")

    return RawPlayerSignals(
        playtime_by_genre=src["playtime_by_genre"],
        average_session_length_minutes=float(src["average_session_length_minutes"]),
        sessions_per_week=float(src["sessions_per_week"]),
        difficulty_preference=src["difficulty_preference"],
        multiplayer_ratio=float(src["multiplayer_ratio"]),
        completion_rate=float(src["completion_rate"]),
        late_night_ratio=float(src.get("late_night_ratio") or 0.0),
    )


def build_persona_snapshot(signals: Any, mood_entry: Any = None) -> PersonaSnapshot:
    """
    signals: RawPlayerSignals 또는 snake_case 키의 mapping
    mood_entry: MoodEntry/MoodState/MoodEvent/mapping 또는 None
    """
    validated = validate_raw_player_signals(signals)

    try:
        traits = derive_persona_traits(validated)
        context = map_mood_to_persona_context(traits, mood_entry)
        narrative = build_persona_narrative(context)
    except Exception as e:
        raise SnapshotBuildError(f"Failed to build persona snapshot: {e}") from e

    return PersonaSnapshot(
        traits=traits,
        mood=context.mood,
        narrative=narrative,
        confidence=traits.confidence,
        signals=validated,
    )


def create_minimal_persona_snapshot(partial_signals: Mapping[str, Any] | None = None) -> PersonaSnapshot:
    merged = {**MINIMAL_SIGNAL_DEFAULTS, **dict(partial_signals or {})}
    return build_persona_snapshot(merged, mood_entry=None)


def is_high_confidence_snapshot(snapshot: PersonaSnapshot) -> bool:
    return snapshot.confidence >= HIGH_CONFIDENCE_THRESHOLD


def get_snapshot_summary(snapshot: PersonaSnapshot) -> str:
    traits = snapshot.traits
    mood_label = snapshot.mood.mood_id if snapshot.mood else "no mood"
    confidence = round(snapshot.confidence * 100)
    return f"{traits.archetype_id} ({traits.pacing}, {traits.risk_profile}) - {mood_label} - {confidence}% confidence"
