"""
(5) 무드/세션/피드백 이벤트

- record_mood_event: 무드 기록 + 시간 컨텍스트(시각/요일/주차) 부여
- record_session_start / record_session_end: 세션 수명주기 (Open → Completed)
- record_recommendation_feedback: 추천 피드백 로그 엔트리

모든 엔트리는 frozen dataclass. 세션 종료는 기존 값을 고치지 않고 새 값을 만든다.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any, Final, Iterable, Literal, Sequence

from gamepilot.core.errors import InvalidSessionStateError
from gamepilot.persona.mood_mapping import clamp_intensity
from gamepilot.persona.types import MoodEntry

MAX_MOOD_TAGS: Final[int] = 2

FeedbackKind = Literal["matched", "partial", "missed", "skip"]
FEEDBACK_KINDS: Final[tuple[str, ...]] = ("matched", "partial", "missed", "skip")

DAY_NAMES: Final[tuple[str, ...]] = (
    "Sunday",
    "Monday",
    "Tuesday",
    "Wednesday",
    "Thursday",
    "Friday",
    "Saturday",
)


@dataclass(frozen=True)
class TemporalContext:
    hour_of_day: int  # 0-23
    day_of_week: int  # 0-6, Sunday = 0
    week_of_year: int  # ISO week

    @classmethod
    def from_datetime(cls, ts: datetime) -> "TemporalContext":
        return cls(
            hour_of_day=ts.hour,
            day_of_week=(ts.weekday() + 1) % 7,
            week_of_year=ts.isocalendar()[1],
        )

    @property
    def day_name(self) -> str:
        return DAY_NAMES[self.day_of_week]


@dataclass(frozen=True)
class SessionContext:
    session_id: str | None = None
    is_pre_session: bool = False
    is_post_session: bool = False


@dataclass(frozen=True)
class MoodEvent:
    mood_id: str
    intensity: int
    timestamp: datetime
    temporal_context: TemporalContext
    context: str | None = None
    game_id: str | None = None
    mood_tags: tuple[str, ...] = ()
    session_context: SessionContext | None = None


@dataclass(frozen=True)
class SessionEvent:
    session_id: str
    start_time: datetime
    end_time: datetime | None = None
    game_id: str | None = None
    pre_mood: MoodEvent | None = None
    post_mood: MoodEvent | None = None
    session_duration: int | None = None  # minutes
    mood_delta: int | None = None

    @property
    def is_open(self) -> bool:
        return self.end_time is None


@dataclass(frozen=True)
class RecommendationFeedback:
    recommendation_id: str
    mood_at_time: MoodEvent
    feedback: str
    timestamp: datetime
    confidence: float
    game_id: str | None = None
    extra: dict[str, Any] = field(default_factory=dict, compare=False)


def record_mood_event(
    mood_id: str,
    intensity: int,
    mood_tags: Sequence[str] = (),
    context: str | None = None,
    game_id: str | None = None,
    session_context: SessionContext | None = None,
    *,
    timestamp: datetime | None = None,
) -> MoodEvent:
    """
    intensity는 1~10으로 클램프, 태그는 앞에서부터 최대 2개만 유지.
    timestamp를 주지 않으면 현재 시각 기준으로 시간 컨텍스트를 만든다.
    """
    ts = timestamp if timestamp is not None else datetime.now()
    return MoodEvent(
        mood_id=str(mood_id),
        intensity=clamp_intensity(intensity),
        timestamp=ts,
        temporal_context=TemporalContext.from_datetime(ts),
        context=context,
        game_id=game_id,
        mood_tags=tuple(str(t) for t in mood_tags)[:MAX_MOOD_TAGS],
        session_context=session_context,
    )


def record_session_start(
    session_id: str,
    game_id: str | None = None,
    pre_mood: MoodEvent | None = None,
    *,
    start_time: datetime | None = None,
) -> SessionEvent:
    return SessionEvent(
        session_id=session_id,
        start_time=start_time if start_time is not None else datetime.now(),
        game_id=game_id,
        pre_mood=pre_mood,
    )


def record_session_end(
    session: SessionEvent,
    post_mood: MoodEvent | None = None,
    *,
    end_time: datetime | None = None,
) -> SessionEvent:
    """
    Open 세션을 Completed로 전이한 새 SessionEvent를 돌려준다.
    - session_duration: 분 단위 반올림
    - mood_delta: pre/post 무드가 모두 있을 때만 post - pre
    이미 끝난 세션을 다시 끝내면 InvalidSessionStateError.
    """
    if not session.is_open:
        raise InvalidSessionStateError(f"Session {session.session_id} has already ended")

    end = end_time if end_time is not None else datetime.now()
    duration = int(round((end - session.start_time).total_seconds() / 60.0))
    delta = None
    if session.pre_mood is not None and post_mood is not None:
        delta = post_mood.intensity - session.pre_mood.intensity

    return replace(
        session,
        end_time=end,
        post_mood=post_mood,
        session_duration=duration,
        mood_delta=delta,
    )


def record_recommendation_feedback(
    recommendation_id: str,
    mood_at_time: MoodEvent,
    feedback: str,
    game_id: str | None = None,
    confidence: float = 0.5,
    *,
    timestamp: datetime | None = None,
) -> RecommendationFeedback:
    if feedback not in FEEDBACK_KINDS:
        raise ValueError(f"feedback must be one of: {', '.join(FEEDBACK_KINDS)} (got {feedback!r})")
    try:
        conf = float(confidence)
    except (TypeError, ValueError):
        conf = 0.5
    if math.isnan(conf):
        conf = 0.5
    return RecommendationFeedback(
        recommendation_id=recommendation_id,
        mood_at_time=mood_at_time,
        feedback=feedback,
        timestamp=timestamp if timestamp is not None else datetime.now(),
        confidence=max(0.0, min(1.0, conf)),
        game_id=game_id,
    )


# ---- legacy MoodEntry <-> MoodEvent ----


def mood_event_to_entry(event: MoodEvent) -> MoodEntry:
    return MoodEntry(
        mood_id=event.mood_id,
        intensity=event.intensity,
        timestamp=event.timestamp,
        context=event.context,
        game_id=event.game_id,
    )


def entry_to_mood_event(entry: MoodEntry) -> MoodEvent:
    # 기존 기록의 시각을 그대로 유지 (변환 시점이 아니라)
    return record_mood_event(
        entry.mood_id,
        entry.intensity,
        (),
        entry.context,
        entry.game_id,
        timestamp=entry.timestamp,
    )


def migrate_mood_history(entries: Iterable[MoodEntry]) -> list[MoodEvent]:
    return [entry_to_mood_event(e) for e in entries]


def demigrate_mood_history(events: Iterable[MoodEvent]) -> list[MoodEntry]:
    return [mood_event_to_entry(e) for e in events]


def validate_mood_event(event: Any) -> bool:
    if not isinstance(event, MoodEvent):
        return False
    if not isinstance(event.mood_id, str) or not event.mood_id:
        return False
    if isinstance(event.intensity, bool) or not isinstance(event.intensity, int):
        return False
    if not 1 <= event.intensity <= 10:
        return False
    if not isinstance(event.timestamp, datetime):
        return False
    if len(event.mood_tags) > MAX_MOOD_TAGS:
        return False
    tc = event.temporal_context
    return isinstance(tc, TemporalContext) and 0 <= tc.hour_of_day <= 23 and 0 <= tc.day_of_week <= 6
