from typing import List, Optional

from pydantic import Field

from gamepilot.recommendation.catalog import CandidateGame
from gamepilot.recommendation.scorer import RecommendationResult
from gamepilot.schemas.base import CamelModel
from gamepilot.schemas.persona import MoodEntryIn, PersonaSnapshotOut, PlayerSignalsIn


class GameIn(CamelModel):
    id: str
    name: str
    genres: List[str] = []
    mood_tags: List[str] = []
    playstyle_tags: List[str] = []
    difficulty: Optional[str] = None
    session_suitability: Optional[str] = None
    popularity: Optional[float] = None

    def to_candidate(self) -> CandidateGame:
        return CandidateGame(
            id=self.id,
            name=self.name,
            genres=tuple(self.genres),
            mood_tags=tuple(self.mood_tags),
            playstyle_tags=tuple(self.playstyle_tags),
            difficulty=self.difficulty,
            session_suitability=self.session_suitability,
            popularity=self.popularity,
        )


class GameOut(CamelModel):
    id: str
    name: str
    genres: List[str]
    mood_tags: List[str]
    playstyle_tags: List[str]
    difficulty: Optional[str] = None
    session_suitability: Optional[str] = None

    @classmethod
    def from_domain(cls, game: CandidateGame) -> "GameOut":
        return cls(
            id=game.id,
            name=game.name,
            genres=list(game.genres),
            mood_tags=list(game.mood_tags),
            playstyle_tags=list(game.playstyle_tags),
            difficulty=game.difficulty,
            session_suitability=game.session_suitability,
        )


class RecommendationOut(CamelModel):
    game: GameOut
    explanation: str
    score: int

    @classmethod
    def from_domain(cls, result: RecommendationResult) -> "RecommendationOut":
        return cls(game=GameOut.from_domain(result.game), explanation=result.explanation, score=result.score)


class PersonalisedRecommendationRequest(CamelModel):
    signals: Optional[PlayerSignalsIn] = None
    mood_entry: Optional[MoodEntryIn] = None
    games: List[GameIn] = []
    refresh_index: int = Field(default=0, ge=0)
    limit: int = Field(default=5, ge=1, le=50)


class PersonalisedRecommendationResponse(CamelModel):
    recommendation: RecommendationOut
    top_picks: List[RecommendationOut] = []
    persona: Optional[PersonaSnapshotOut] = None
