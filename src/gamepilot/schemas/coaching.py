from datetime import datetime
from typing import List, Optional

from pydantic import Field

from gamepilot.recommendation.coach import (
    CoachingRecommendation,
    EmotionalProfile,
    PlayHistoryEntry,
    RecentSession,
)
from gamepilot.schemas.base import CamelModel


class EmotionalProfileIn(CamelModel):
    energy_level: int = Field(ge=1, le=10)
    cognitive_load: int = Field(ge=1, le=10)
    tolerance_level: int = Field(ge=1, le=10)
    emotional_needs: List[str] = Field(min_length=1)
    available_time: int = Field(default=60, ge=0)
    session_type: str = "focused"
    social_appetite: str = "solo"

    def to_profile(self) -> EmotionalProfile:
        return EmotionalProfile(
            energy_level=self.energy_level,
            cognitive_load=self.cognitive_load,
            tolerance_level=self.tolerance_level,
            emotional_needs=tuple(self.emotional_needs),
            available_time=self.available_time,
            session_type=self.session_type,
            social_appetite=self.social_appetite,
        )


class PlayHistoryIn(CamelModel):
    game_id: str
    sessions: int = Field(default=0, ge=0)
    last_played: Optional[datetime] = None


class RecentSessionIn(CamelModel):
    difficulty: str
    duration: int = Field(ge=0)
    frustration: int = Field(ge=0, le=10)


class CoachingRequest(CamelModel):
    profile: EmotionalProfileIn
    owned_games: List[str] = []
    recent_games: List[str] = []
    play_history: List[PlayHistoryIn] = []
    recent_sessions: List[RecentSessionIn] = []

    def history(self) -> List[PlayHistoryEntry]:
        return [PlayHistoryEntry(h.game_id, h.sessions, h.last_played) for h in self.play_history]

    def sessions(self) -> List[RecentSession]:
        return [RecentSession(s.difficulty, s.duration, s.frustration) for s in self.recent_sessions]


class AlternativeGameOut(CamelModel):
    game_id: str
    game_name: str
    brief_reason: str


class CoachingRecommendationOut(CamelModel):
    game_id: str
    game_name: str
    reasoning: str
    emotional_match: str
    time_fit: str
    confidence: int
    estimated_duration: str
    difficulty_level: str
    mood_alignment: str
    alternative_games: List[AlternativeGameOut] = []
    coaching_insights: List[str] = []

    @classmethod
    def from_domain(cls, rec: CoachingRecommendation) -> "CoachingRecommendationOut":
        return cls(
            game_id=rec.game_id,
            game_name=rec.game_name,
            reasoning=rec.reasoning,
            emotional_match=rec.emotional_match,
            time_fit=rec.time_fit,
            confidence=rec.confidence,
            estimated_duration=rec.estimated_duration,
            difficulty_level=rec.difficulty_level,
            mood_alignment=rec.mood_alignment,
            alternative_games=[
                AlternativeGameOut(game_id=a.game_id, game_name=a.game_name, brief_reason=a.brief_reason)
                for a in rec.alternative_games
            ],
            coaching_insights=list(rec.coaching_insights),
        )
