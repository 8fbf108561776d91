from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from gamepilot.persona.snapshot import get_snapshot_summary, is_high_confidence_snapshot
from gamepilot.persona.types import MoodEntry, MoodState, PersonaSnapshot
from gamepilot.schemas.base import CamelModel


class PlayerSignalsIn(CamelModel):
    # 모두 Optional: 누락/범위 검사는 snapshot 검증기가 필드명을 담아 처리한다
    playtime_by_genre: Optional[Dict[str, Any]] = None
    average_session_length_minutes: Optional[Any] = None
    sessions_per_week: Optional[Any] = None
    difficulty_preference: Optional[str] = None
    multiplayer_ratio: Optional[Any] = None
    late_night_ratio: Optional[Any] = None
    completion_rate: Optional[Any] = None

    def to_signal_mapping(self) -> Dict[str, Any]:
        return {k: v for k, v in self.model_dump().items() if v is not None}


class MoodEntryIn(CamelModel):
    mood_id: str = Field(min_length=1)
    intensity: int
    timestamp: Optional[datetime] = None
    context: Optional[str] = None
    game_id: Optional[str] = None

    def to_entry(self) -> MoodEntry:
        return MoodEntry(
            mood_id=self.mood_id,
            intensity=self.intensity,
            timestamp=self.timestamp or datetime.now(),
            context=self.context,
            game_id=self.game_id,
        )


class PersonaSnapshotRequest(CamelModel):
    signals: Optional[PlayerSignalsIn] = None
    mood_entry: Optional[MoodEntryIn] = None


class TraitsOut(CamelModel):
    archetype_id: str
    pacing: str
    risk_profile: str
    confidence: float


class MoodStateOut(CamelModel):
    mood_id: str
    intensity: int
    timestamp: datetime

    @classmethod
    def from_domain(cls, mood: Optional[MoodState]) -> Optional["MoodStateOut"]:
        if mood is None:
            return None
        return cls(mood_id=mood.mood_id, intensity=mood.intensity, timestamp=mood.timestamp)


class NarrativeOut(CamelModel):
    summary: str
    tone: str


class PersonaSnapshotOut(CamelModel):
    traits: TraitsOut
    mood: Optional[MoodStateOut] = None
    narrative: NarrativeOut
    confidence: float
    high_confidence: bool
    summary: str

    @classmethod
    def from_domain(cls, snapshot: PersonaSnapshot) -> "PersonaSnapshotOut":
        t = snapshot.traits
        return cls(
            traits=TraitsOut(
                archetype_id=t.archetype_id,
                pacing=t.pacing,
                risk_profile=t.risk_profile,
                confidence=t.confidence,
            ),
            mood=MoodStateOut.from_domain(snapshot.mood),
            narrative=NarrativeOut(summary=snapshot.narrative.summary, tone=snapshot.narrative.tone),
            confidence=snapshot.confidence,
            high_confidence=is_high_confidence_snapshot(snapshot),
            summary=get_snapshot_summary(snapshot),
        )
