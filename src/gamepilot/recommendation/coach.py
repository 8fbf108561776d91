"""
감정 프로필 기반 코치 추천

persona를 거치지 않고 사용자가 직접 입력한 감정 프로필(에너지/인지 부하/도전 허용치/
사회적 욕구/감정 니즈/가용 시간)로 디자인 패턴 카탈로그를 점수화한다.

total = emotional * w_e + time_fit * 0.25 + availability * w_a + novelty * 0.03 + burnout * 0.02
- 보유 게임이 있으면 w_e = 0.35, w_a = 0.35 / 없으면 w_e = 0.40, w_a = 0.15
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Final, Sequence

from gamepilot.recommendation.design_patterns import (
    GAME_DESIGN_PATTERNS,
    NEED_ALIGNMENT_FIELDS,
    GameDesignPattern,
)

logger = logging.getLogger(__name__)

EMOTIONAL_NEEDS: Final[tuple[str, ...]] = tuple(NEED_ALIGNMENT_FIELDS)
SESSION_TYPES: Final[tuple[str, ...]] = ("quick", "focused", "immersive", "marathon")

ALTERNATIVE_MIN_SCORE: Final[float] = 0.6
MAX_ALTERNATIVES: Final[int] = 3
MAX_INSIGHTS: Final[int] = 3
BRIEF_REASON_CHARS: Final[int] = 100

# 감정 점수 구성 가중치 (니즈 1개당 1.0)
_NEED_WEIGHT = 1.0
_LEVEL_WEIGHT = 2.0
# 목표값과 1 차이날 때의 감점
_ENERGY_PENALTY = 0.1
_COGNITIVE_PENALTY = 0.15
_TOLERANCE_PENALTY = 0.125


@dataclass(frozen=True)
class _LevelBand:
    descriptor: str
    target: int
    label: str


def _band(level: int, low: _LevelBand, mid: _LevelBand, high: _LevelBand) -> _LevelBand:
    if level <= 3:
        return low
    if level <= 7:
        return mid
    return high


def energy_band(level: int) -> _LevelBand:
    return _band(
        level,
        _LevelBand("low energy", 3, "gentle"),
        _LevelBand("moderate energy", 6, "balanced"),
        _LevelBand("high energy", 8, "fast-paced"),
    )


def cognitive_band(level: int) -> _LevelBand:
    return _band(
        level,
        _LevelBand("overwhelmed", 3, "simple"),
        _LevelBand("focused", 6, "moderate"),
        _LevelBand("sharp", 8, "complex"),
    )


def tolerance_band(level: int) -> _LevelBand:
    return _band(
        level,
        _LevelBand("gentle", 3, "easy"),
        _LevelBand("balanced", 6, "moderate"),
        _LevelBand("challenging", 8, "hard"),
    )


@dataclass(frozen=True)
class EmotionalProfile:
    energy_level: int
    cognitive_load: int
    tolerance_level: int
    emotional_needs: tuple[str, ...]
    available_time: int = 60  # minutes
    session_type: str = "focused"
    social_appetite: str = "solo"

    def __post_init__(self) -> None:
        for name in ("energy_level", "cognitive_load", "tolerance_level"):
            v = getattr(self, name)
            if isinstance(v, bool) or not isinstance(v, int) or not 1 <= v <= 10:
                raise ValueError(f"{name} must be an integer between 1 and 10")
        needs = tuple(self.emotional_needs)
        if not needs:
            raise ValueError("emotional_needs must contain at least one need")
        unknown = [n for n in needs if n not in NEED_ALIGNMENT_FIELDS]
        if unknown:
            raise ValueError(f"unknown emotional need(s): {', '.join(unknown)}")
        if self.available_time < 0:
            raise ValueError("available_time must be non-negative")
        object.__setattr__(self, "emotional_needs", needs)

    @property
    def primary_need(self) -> str:
        return self.emotional_needs[0]


@dataclass(frozen=True)
class PlayHistoryEntry:
    game_id: str
    sessions: int
    last_played: datetime | None = None


@dataclass(frozen=True)
class RecentSession:
    difficulty: str
    duration: int  # minutes
    frustration: int  # 0-10


@dataclass(frozen=True)
class MatchScore:
    emotional_score: float
    time_fit_score: float
    availability_score: float
    novelty_score: float
    burnout_risk_score: float
    total_score: float


@dataclass(frozen=True)
class ScoredPattern:
    pattern: GameDesignPattern
    match_score: MatchScore
    reasoning: str


@dataclass(frozen=True)
class AlternativeGame:
    game_id: str
    game_name: str
    brief_reason: str


@dataclass(frozen=True)
class CoachingRecommendation:
    game_id: str
    game_name: str
    reasoning: str
    emotional_match: str
    time_fit: str
    confidence: int  # 0-100
    estimated_duration: str
    difficulty_level: str
    mood_alignment: str
    alternative_games: tuple[AlternativeGame, ...] = ()
    coaching_insights: tuple[str, ...] = ()
    match_score: MatchScore | None = field(default=None, compare=False)


# ---- factor scores (모두 0~1) ----


def emotional_match(profile: EmotionalProfile, pattern: GameDesignPattern) -> float:
    """
    니즈 alignment(0~10 → 0~1)와 에너지/인지/도전 목표치와의 근접도를 가중 평균.
    """
    total = 0.0
    weight = 0.0
    for need in profile.emotional_needs:
        total += _NEED_WEIGHT * pattern.alignment(need) / 10.0
        weight += _NEED_WEIGHT

    checks = (
        (pattern.pacing, energy_band(profile.energy_level).target, _ENERGY_PENALTY),
        (pattern.mechanical_complexity, cognitive_band(profile.cognitive_load).target, _COGNITIVE_PENALTY),
        (pattern.friction_level, tolerance_band(profile.tolerance_level).target, _TOLERANCE_PENALTY),
    )
    for actual, target, penalty in checks:
        total += _LEVEL_WEIGHT * max(0.0, 1.0 - abs(actual - target) * penalty)
        weight += _LEVEL_WEIGHT

    return round(total / weight, 2)


def time_fit(available_time: int, pattern: GameDesignPattern, session_type: str) -> float:
    ttf = pattern.time_to_fun

    if session_type == "quick" and available_time <= 45:
        if ttf <= 15:
            return 1.0
        if ttf <= 30:
            return 0.7
        return 0.3

    if session_type == "focused" and available_time <= 120:
        if ttf <= available_time / 3:
            return 1.0
        if ttf <= available_time / 2:
            return 0.8
        return 0.5

    if session_type == "immersive":
        if ttf <= 45:
            return 1.0
        if ttf <= 90:
            return 0.8
        return 0.6

    if session_type == "marathon":
        return 0.9

    if ttf <= available_time * 0.3:
        return 1.0
    if ttf <= available_time * 0.5:
        return 0.8
    if ttf <= available_time:
        return 0.6
    return 0.3


def availability(game_id: str, owned_games: Sequence[str] = ()) -> float:
    return 1.0 if game_id in owned_games else 0.6


def novelty(
    game_id: str,
    recent_games: Sequence[str] = (),
    play_history: Sequence[PlayHistoryEntry] = (),
) -> float:
    entry = next((h for h in play_history if h.game_id == game_id), None)
    if entry is None:
        return 0.8
    if game_id in recent_games:
        return 0.3
    if entry.sessions > 10:
        return 0.4
    if entry.sessions > 5:
        return 0.6
    return 0.7


def burnout_risk(pattern: GameDesignPattern, recent_sessions: Sequence[RecentSession] = ()) -> float:
    """높을수록 안전 (0.3 = 번아웃 위험 큼)."""
    high_friction = sum(1 for s in recent_sessions if s.difficulty == "hard" and s.frustration > 7)
    if high_friction > 2 and pattern.friction_level > 7:
        return 0.3
    if high_friction > 0 and pattern.friction_level > 5:
        return 0.6

    low_stim = sum(1 for s in recent_sessions if s.frustration < 3 and s.duration > 120)
    if low_stim > 3 and pattern.sensory_intensity < 5:
        return 0.4
    return 0.9


# ---- scoring ----


def generate_reasoning(profile: EmotionalProfile, pattern: GameDesignPattern, score: MatchScore) -> str:
    energy = energy_band(profile.energy_level)
    tolerance = tolerance_band(profile.tolerance_level)
    need = profile.primary_need

    parts = [f"I see you're feeling {energy.descriptor} and craving {need}."]
    if score.emotional_score > 0.8:
        parts.append(
            f"{pattern.game_name} is perfect for this - it delivers the {need} you need "
            f"with {energy.label} pacing that matches your current energy level."
        )
    elif score.emotional_score > 0.6:
        parts.append(
            f"{pattern.game_name} should work well - it provides good {need} "
            f"with {tolerance.label} challenge that won't overwhelm you."
        )
    else:
        parts.append(
            f"{pattern.game_name} might be a good fit despite some mismatches - "
            f"the {need} elements are strong even if the pacing isn't perfect."
        )

    if profile.energy_level <= 3 and need == "comfort":
        parts.append("Perfect for winding down - this game respects your current energy level.")
    if need == "mastery" and profile.energy_level >= 8:
        parts.append("Great for channeling your motivation into meaningful progress.")
    if profile.social_appetite == "solo" and energy.target < 6:
        parts.append("Ideal solo experience with gentle, contemplative pacing.")
    return " ".join(parts)


def score_pattern(
    profile: EmotionalProfile,
    pattern: GameDesignPattern,
    owned_games: Sequence[str] = (),
    recent_games: Sequence[str] = (),
    play_history: Sequence[PlayHistoryEntry] = (),
    recent_sessions: Sequence[RecentSession] = (),
) -> ScoredPattern:
    has_library = len(owned_games) > 0
    emotional_weight = 0.35 if has_library else 0.4
    library_weight = 0.35 if has_library else 0.15

    e = emotional_match(profile, pattern)
    t = time_fit(profile.available_time, pattern, profile.session_type)
    a = availability(pattern.game_id, owned_games)
    n = novelty(pattern.game_id, recent_games, play_history)
    b = burnout_risk(pattern, recent_sessions)
    total = e * emotional_weight + t * 0.25 + a * library_weight + n * 0.03 + b * 0.02

    score = MatchScore(
        emotional_score=e,
        time_fit_score=t,
        availability_score=a,
        novelty_score=n,
        burnout_risk_score=b,
        total_score=round(total, 4),
    )
    return ScoredPattern(pattern=pattern, match_score=score, reasoning=generate_reasoning(profile, pattern, score))


def candidate_patterns(
    owned_games: Sequence[str] = (),
    patterns: Sequence[GameDesignPattern] = GAME_DESIGN_PATTERNS,
) -> list[GameDesignPattern]:
    """보유 게임 중 카탈로그에 있는 것이 있으면 그것만, 없으면 전체."""
    owned = [p for p in patterns if p.game_id in owned_games]
    return owned if owned else list(patterns)


def get_coaching_pick(
    profile: EmotionalProfile,
    owned_games: Sequence[str] = (),
    recent_games: Sequence[str] = (),
    play_history: Sequence[PlayHistoryEntry] = (),
    recent_sessions: Sequence[RecentSession] = (),
) -> ScoredPattern | None:
    best: ScoredPattern | None = None
    for pattern in candidate_patterns(owned_games):
        scored = score_pattern(profile, pattern, owned_games, recent_games, play_history, recent_sessions)
        # 동점이면 먼저 나온 패턴 유지
        if best is None or scored.match_score.total_score > best.match_score.total_score:
            best = scored
    return best


def get_alternative_picks(
    profile: EmotionalProfile,
    primary: ScoredPattern,
    count: int = MAX_ALTERNATIVES,
    owned_games: Sequence[str] = (),
    recent_games: Sequence[str] = (),
    play_history: Sequence[PlayHistoryEntry] = (),
    recent_sessions: Sequence[RecentSession] = (),
) -> list[ScoredPattern]:
    others = [p for p in GAME_DESIGN_PATTERNS if p.game_id != primary.pattern.game_id]
    pool = candidate_patterns(owned_games, others)
    scored = [
        score_pattern(profile, p, owned_games, recent_games, play_history, recent_sessions) for p in pool
    ]
    good = [s for s in scored if s.match_score.total_score > ALTERNATIVE_MIN_SCORE]
    good.sort(key=lambda s: s.match_score.total_score, reverse=True)
    return good[: max(0, count)]


# ---- descriptions ----


def describe_emotional_match(profile: EmotionalProfile, pattern: GameDesignPattern) -> str:
    need = profile.primary_need
    value = pattern.alignment(need)
    if value >= 8:
        return f"Excellent {need} alignment ({value}/10)"
    if value >= 6:
        return f"Good {need} alignment ({value}/10)"
    return f"Moderate {need} alignment ({value}/10)"


def describe_time_fit(profile: EmotionalProfile, pattern: GameDesignPattern) -> str:
    ttf = pattern.time_to_fun
    available = profile.available_time
    if ttf <= available * 0.25:
        return "Quick to engage - perfect for your time frame"
    if ttf <= available * 0.5:
        return "Gets fun quickly within your available time"
    if ttf <= available:
        return "Builds to fun within your session length"
    return "May take time to get engaging, but worth it"


def estimate_duration(profile: EmotionalProfile, pattern: GameDesignPattern) -> str:
    caps = {"quick": 45, "focused": 120, "immersive": 300}
    cap = caps.get(profile.session_type)
    if cap is None:
        return f"{pattern.avg_playtime}+ minutes"
    return f"{min(cap, pattern.avg_playtime)} minutes"


def describe_mood_alignment(profile: EmotionalProfile, pattern: GameDesignPattern) -> str:
    energy_ok = abs(pattern.pacing - profile.energy_level) <= 2
    cognitive_ok = abs(pattern.mechanical_complexity - profile.cognitive_load) <= 2
    if energy_ok and cognitive_ok:
        return "Excellent mood alignment"
    if energy_ok or cognitive_ok:
        return "Good mood alignment"
    return "Moderate mood alignment"


def coaching_insights(
    profile: EmotionalProfile,
    pattern: GameDesignPattern,
    play_history: Sequence[PlayHistoryEntry] = (),
) -> list[str]:
    insights: list[str] = []
    if profile.energy_level <= 3 and profile.primary_need == "comfort":
        insights.append("Perfect for winding down - this game respects your current energy level")
    if profile.primary_need == "mastery" and profile.energy_level >= 8:
        insights.append("Great for channeling your motivation into meaningful progress")
    if profile.social_appetite == "solo" and pattern.pacing < 5:
        insights.append("Ideal solo experience with gentle, contemplative pacing")
    insights.append(f"Based on {len(play_history)} games in your history")
    insights.append("Recommendation adapts to your recent gaming patterns")
    return insights[:MAX_INSIGHTS]


def _brief(reason: str) -> str:
    if len(reason) <= BRIEF_REASON_CHARS:
        return reason
    return reason[:BRIEF_REASON_CHARS] + "..."


def get_coaching_recommendation(
    profile: EmotionalProfile,
    owned_games: Sequence[str] = (),
    recent_games: Sequence[str] = (),
    play_history: Sequence[PlayHistoryEntry] = (),
    recent_sessions: Sequence[RecentSession] = (),
) -> CoachingRecommendation | None:
    best = get_coaching_pick(profile, owned_games, recent_games, play_history, recent_sessions)
    if best is None:
        logger.warning("no design pattern could be scored for profile %s", profile)
        return None

    alternatives = get_alternative_picks(
        profile, best, MAX_ALTERNATIVES, owned_games, recent_games, play_history, recent_sessions
    )
    pattern = best.pattern
    return CoachingRecommendation(
        game_id=pattern.game_id,
        game_name=pattern.game_name,
        reasoning=best.reasoning,
        emotional_match=describe_emotional_match(profile, pattern),
        time_fit=describe_time_fit(profile, pattern),
        confidence=round(best.match_score.total_score * 100),
        estimated_duration=estimate_duration(profile, pattern),
        difficulty_level=pattern.difficulty,
        mood_alignment=describe_mood_alignment(profile, pattern),
        alternative_games=tuple(
            AlternativeGame(a.pattern.game_id, a.pattern.game_name, _brief(a.reasoning)) for a in alternatives
        ),
        coaching_insights=tuple(coaching_insights(profile, pattern, play_history)),
        match_score=best.match_score,
    )
