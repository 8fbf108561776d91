"""
(7) PersonaEngine: 무드/세션/피드백 히스토리를 가진 엔진 인스턴스

- 전역 싱글턴이 아니라 호출부가 EngineConfig를 주입해 직접 만든다.
- 히스토리는 deque(maxlen)로 상한을 둔다. 넘치면 가장 오래된 것부터(FIFO) 빠지고,
  append와 eviction이 한 번에 일어나므로 상한을 넘는 상태가 관측되지 않는다.
- 스레드 안전하지 않음: 여러 스레드에서 쓰려면 호출부에서 직렬화해야 한다.
"""

from __future__ import annotations

import logging
import secrets
import string
import time
from collections import Counter, deque
from dataclasses import dataclass, fields, replace
from typing import Any, Sequence

from gamepilot.analytics.events import (
    FEEDBACK_KINDS,
    MoodEvent,
    RecommendationFeedback,
    SessionContext,
    SessionEvent,
    record_mood_event,
    record_recommendation_feedback,
    record_session_end,
    record_session_start,
)
from gamepilot.analytics.patterns import (
    CompoundMood,
    SessionMoodDelta,
    TemporalMoodPatterns,
    get_compound_mood_suggestions,
    get_session_mood_delta,
    get_temporal_mood_patterns,
)
from gamepilot.core.config import Settings
from gamepilot.persona.snapshot import build_persona_snapshot
from gamepilot.persona.types import PersonaSnapshot

logger = logging.getLogger(__name__)

_SESSION_ID_ALPHABET = string.ascii_lowercase + string.digits


@dataclass(frozen=True)
class EngineConfig:
    enable_temporal_patterns: bool = True
    enable_session_tracking: bool = True
    enable_compound_moods: bool = True
    enable_feedback_loop: bool = True
    max_history_size: int = 1000

    def __post_init__(self) -> None:
        if self.max_history_size < 1:
            raise ValueError("max_history_size must be >= 1")

    @classmethod
    def from_settings(cls, s: Settings) -> "EngineConfig":
        return cls(
            enable_temporal_patterns=s.ENABLE_TEMPORAL_PATTERNS,
            enable_session_tracking=s.ENABLE_SESSION_TRACKING,
            enable_compound_moods=s.ENABLE_COMPOUND_MOODS,
            enable_feedback_loop=s.ENABLE_FEEDBACK_LOOP,
            max_history_size=s.MAX_HISTORY_SIZE,
        )


@dataclass(frozen=True)
class EnhancedPersonaSnapshot:
    snapshot: PersonaSnapshot
    temporal_insights: TemporalMoodPatterns | None = None
    session_insights: SessionMoodDelta | None = None
    compound_moods: tuple[CompoundMood, ...] | None = None


@dataclass(frozen=True)
class FeedbackSummary:
    total: int
    counts: dict[str, int]
    match_rate: float  # (matched + 0.5 * partial) / (matched + partial + missed)
    average_confidence: float


def _new_session_id() -> str:
    suffix = "".join(secrets.choice(_SESSION_ID_ALPHABET) for _ in range(9))
    return f"session_{int(time.time() * 1000)}_{suffix}"


class PersonaEngine:
    def __init__(self, config: EngineConfig | None = None):
        self._config = config or EngineConfig()
        self._mood_history: deque[MoodEvent] = deque(maxlen=self._config.max_history_size)
        self._session_history: deque[SessionEvent] = deque(maxlen=self._config.max_history_size)
        self._feedback_history: deque[RecommendationFeedback] = deque(
            maxlen=self._config.max_history_size
        )
        self._open_sessions: dict[str, SessionEvent] = {}

    # ---- recording ----

    def record_mood(
        self,
        mood_id: str,
        intensity: int,
        mood_tags: Sequence[str] = (),
        context: str | None = None,
        game_id: str | None = None,
        session_context: SessionContext | None = None,
        **kwargs: Any,
    ) -> MoodEvent:
        event = record_mood_event(mood_id, intensity, mood_tags, context, game_id, session_context, **kwargs)
        self._mood_history.append(event)
        return event

    def start_session(
        self,
        game_id: str | None = None,
        pre_mood: MoodEvent | None = None,
        **kwargs: Any,
    ) -> str:
        session_id = _new_session_id()
        while session_id in self._open_sessions:
            session_id = _new_session_id()
        self._open_sessions[session_id] = record_session_start(session_id, game_id, pre_mood, **kwargs)
        logger.debug("session %s started (game=%s)", session_id, game_id)
        return session_id

    def end_session(
        self,
        session_id: str,
        post_mood: MoodEvent | None = None,
        **kwargs: Any,
    ) -> SessionEvent | None:
        """열린 적 없는(또는 이미 끝난) 세션 id면 경고만 남기고 None."""
        session = self._open_sessions.pop(session_id, None)
        if session is None:
            logger.warning("end_session: unknown or already ended session %s", session_id)
            return None
        completed = record_session_end(session, post_mood, **kwargs)
        self._session_history.append(completed)
        return completed

    def record_feedback(
        self,
        recommendation_id: str,
        mood_at_time: MoodEvent,
        feedback: str,
        game_id: str | None = None,
        confidence: float = 0.5,
        **kwargs: Any,
    ) -> RecommendationFeedback:
        entry = record_recommendation_feedback(
            recommendation_id, mood_at_time, feedback, game_id, confidence, **kwargs
        )
        if self._config.enable_feedback_loop:
            self._feedback_history.append(entry)
        else:
            logger.info("feedback loop disabled; feedback %s not stored", recommendation_id)
        return entry

    # ---- reading ----

    def get_mood_history(self) -> list[MoodEvent]:
        return list(self._mood_history)

    def get_session_history(self) -> list[SessionEvent]:
        return list(self._session_history)

    def get_feedback_history(self) -> list[RecommendationFeedback]:
        return list(self._feedback_history)

    def get_open_sessions(self) -> list[SessionEvent]:
        return list(self._open_sessions.values())

    def get_config(self) -> EngineConfig:
        return self._config

    def update_config(self, **changes: Any) -> EngineConfig:
        known = {f.name for f in fields(EngineConfig)}
        unknown = set(changes) - known
        if unknown:
            raise ValueError(f"Unknown config field(s): {', '.join(sorted(unknown))}")

        new_config = replace(self._config, **changes)
        if new_config.max_history_size != self._config.max_history_size:
            # 새 상한으로 다시 만들면 오래된 항목부터 잘린다
            size = new_config.max_history_size
            self._mood_history = deque(self._mood_history, maxlen=size)
            self._session_history = deque(self._session_history, maxlen=size)
            self._feedback_history = deque(self._feedback_history, maxlen=size)
        self._config = new_config
        return new_config

    def clear_history(self) -> None:
        self._mood_history.clear()
        self._session_history.clear()
        self._feedback_history.clear()
        self._open_sessions.clear()

    # ---- insights ----

    def build_enhanced_snapshot(
        self,
        signals: Any,
        mood_entry: Any = None,
        *,
        mood_events: Sequence[MoodEvent] | None = None,
        session_events: Sequence[SessionEvent] | None = None,
    ) -> EnhancedPersonaSnapshot:
        """
        기본 스냅샷 + 설정 플래그가 켜진 인사이트만 붙인다.
        mood_events/session_events를 주지 않으면 엔진 히스토리를 사용한다.
        """
        snapshot = build_persona_snapshot(signals, mood_entry)
        moods = list(mood_events) if mood_events is not None else self.get_mood_history()
        sessions = list(session_events) if session_events is not None else self.get_session_history()

        cfg = self._config
        return EnhancedPersonaSnapshot(
            snapshot=snapshot,
            temporal_insights=get_temporal_mood_patterns(moods) if cfg.enable_temporal_patterns else None,
            session_insights=get_session_mood_delta(sessions) if cfg.enable_session_tracking else None,
            compound_moods=(
                tuple(get_compound_mood_suggestions(moods)) if cfg.enable_compound_moods else None
            ),
        )

    def get_feedback_summary(self) -> FeedbackSummary:
        history = self.get_feedback_history()
        counter = Counter(f.feedback for f in history)
        counts = {kind: counter.get(kind, 0) for kind in FEEDBACK_KINDS}

        judged = counts["matched"] + counts["partial"] + counts["missed"]
        match_rate = (counts["matched"] + 0.5 * counts["partial"]) / judged if judged else 0.0
        avg_conf = sum(f.confidence for f in history) / len(history) if history else 0.0

        return FeedbackSummary(
            total=len(history),
            counts=counts,
            match_rate=round(match_rate, 3),
            average_confidence=round(avg_conf, 3),
        )
