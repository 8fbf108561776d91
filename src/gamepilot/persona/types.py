"""
Persona 엔진 공용 타입.

- 입력: RawPlayerSignals (텔레메트리 집계), MoodEntry (UI/무드 로깅)
- 파생: PersonaTraits, MoodState, PersonaNarrative
- 출력: PersonaSnapshot

모든 값은 frozen dataclass이며 생성 후 변경하지 않는다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, Mapping

DIFFICULTY_LEVELS: Final[tuple[str, ...]] = ("Relaxed", "Normal", "Hard", "Brutal")

ARCHETYPES: Final[tuple[str, ...]] = (
    "Achiever",
    "Explorer",
    "Socializer",
    "Competitor",
    "Strategist",
    "Creative",
    "Casual",
    "Specialist",
    "Socialite",
)
PACING_LEVELS: Final[tuple[str, ...]] = ("Burst", "Flow", "Marathon")
RISK_PROFILES: Final[tuple[str, ...]] = ("Comfort", "Balanced", "Experimental")

MOOD_IDS: Final[tuple[str, ...]] = (
    "chill",
    "relaxed",
    "story",
    "creative",
    "energetic",
    "social",
    "exploratory",
    "competitive",
    "focused",
    "nostalgic",
)

NARRATIVE_TONES: Final[tuple[str, ...]] = ("Reflective", "Calm", "Hyped", "Competitive", "Comfort")


@dataclass(frozen=True)
class RawPlayerSignals:
    playtime_by_genre: Mapping[str, float]
    average_session_length_minutes: float
    sessions_per_week: float
    difficulty_preference: str
    multiplayer_ratio: float
    completion_rate: float
    late_night_ratio: float = 0.0

    def __post_init__(self) -> None:
        # 호출부의 dict가 나중에 바뀌어도 스냅샷은 그대로 유지되도록 복사본을 고정
        object.__setattr__(
            self, "playtime_by_genre", dict(self.playtime_by_genre)
        )


@dataclass(frozen=True)
class PersonaTraits:
    archetype_id: str
    pacing: str
    risk_profile: str
    confidence: float


@dataclass(frozen=True)
class MoodEntry:
    mood_id: str
    intensity: int
    timestamp: datetime
    context: str | None = None
    game_id: str | None = None


@dataclass(frozen=True)
class MoodState:
    mood_id: str
    intensity: int
    timestamp: datetime


@dataclass(frozen=True)
class PersonaMoodContext:
    traits: PersonaTraits
    mood: MoodState | None


@dataclass(frozen=True)
class PersonaNarrative:
    summary: str
    tone: str


@dataclass(frozen=True)
class PersonaSnapshot:
    traits: PersonaTraits
    mood: MoodState | None
    narrative: PersonaNarrative
    confidence: float
    signals: RawPlayerSignals | None = field(default=None, compare=False)
