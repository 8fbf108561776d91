from datetime import datetime
from typing import Dict, List, Optional

from gamepilot.analytics.events import (
    MoodEvent,
    SessionEvent,
    record_mood_event,
    record_session_end,
    record_session_start,
)
from gamepilot.analytics.patterns import CompoundMood, SessionMoodDelta, TemporalMoodPatterns
from gamepilot.schemas.base import CamelModel


class MoodEventIn(CamelModel):
    mood_id: str
    intensity: int
    timestamp: datetime
    mood_tags: List[str] = []
    context: Optional[str] = None
    game_id: Optional[str] = None

    def to_event(self) -> MoodEvent:
        return record_mood_event(
            self.mood_id,
            self.intensity,
            self.mood_tags,
            self.context,
            self.game_id,
            timestamp=self.timestamp,
        )


class SessionIn(CamelModel):
    session_id: str
    start_time: datetime
    end_time: Optional[datetime] = None
    game_id: Optional[str] = None
    pre_mood: Optional[MoodEventIn] = None
    post_mood: Optional[MoodEventIn] = None

    def to_session(self) -> SessionEvent:
        session = record_session_start(
            self.session_id,
            self.game_id,
            self.pre_mood.to_event() if self.pre_mood else None,
            start_time=self.start_time,
        )
        if self.end_time is None:
            return session
        return record_session_end(
            session,
            self.post_mood.to_event() if self.post_mood else None,
            end_time=self.end_time,
        )


class InsightsRequest(CamelModel):
    mood_events: List[MoodEventIn] = []
    sessions: List[SessionIn] = []


class TemporalOut(CamelModel):
    best_hours: List[int]
    worst_hours: List[int]
    day_trends: Dict[str, float]

    @classmethod
    def from_domain(cls, p: TemporalMoodPatterns) -> "TemporalOut":
        return cls(best_hours=list(p.best_hours), worst_hours=list(p.worst_hours), day_trends=dict(p.day_trends))


class SessionDeltaOut(CamelModel):
    average_mood_delta: float
    positive_session_ratio: float
    session_duration_impact: float

    @classmethod
    def from_domain(cls, d: SessionMoodDelta) -> "SessionDeltaOut":
        return cls(
            average_mood_delta=d.average_mood_delta,
            positive_session_ratio=d.positive_session_ratio,
            session_duration_impact=d.session_duration_impact,
        )


class CompoundMoodOut(CamelModel):
    primary: str
    secondary: str
    frequency: float
    average_intensity: float

    @classmethod
    def from_domain(cls, c: CompoundMood) -> "CompoundMoodOut":
        return cls(
            primary=c.primary,
            secondary=c.secondary,
            frequency=c.frequency,
            average_intensity=c.average_intensity,
        )


class InsightsResponse(CamelModel):
    temporal: Optional[TemporalOut] = None
    session: Optional[SessionDeltaOut] = None
    compound_moods: Optional[List[CompoundMoodOut]] = None
