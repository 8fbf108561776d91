"""
(1) Trait Extractor

- 입력: RawPlayerSignals
- 출력: PersonaTraits (archetype / pacing / risk_profile / confidence)

임계값 규칙 기반의 결정적(deterministic) 순수 함수. 입력 계약은 snapshot 단계에서
검증하고, 여기서는 계약을 만족하는 모든 입력에 대해 예외 없이 값을 돌려준다.
"""

from __future__ import annotations

from typing import Final, Mapping

from gamepilot.persona.types import PersonaTraits, RawPlayerSignals

# pacing: 평균 세션 길이(분) 경계
BURST_MAX_MINUTES: Final[float] = 45.0
FLOW_MAX_MINUTES: Final[float] = 120.0

# confidence 구성 요소별 포화 지점
CONFIDENCE_GENRE_SATURATION: Final[int] = 5
CONFIDENCE_SESSIONS_SATURATION: Final[float] = 7.0
CONFIDENCE_WEEKLY_MINUTES_SATURATION: Final[float] = 600.0

COMPETITIVE_GENRES: Final[frozenset[str]] = frozenset(
    {"shooter", "fighting", "sports", "racing", "moba", "battle royale"}
)
STRATEGY_GENRES: Final[frozenset[str]] = frozenset(
    {"strategy", "puzzle", "tactics", "card game", "turn-based", "4x"}
)
CREATIVE_GENRES: Final[frozenset[str]] = frozenset(
    {"sandbox", "simulation", "building", "crafting", "creative", "farming"}
)
EXPLORER_GENRES: Final[frozenset[str]] = frozenset(
    {"adventure", "open world", "exploration", "metroidvania", "rpg"}
)

_DIFFICULTY_RISK_LEVEL: Final[dict[str, int]] = {
    "Relaxed": 0,
    "Normal": 1,
    "Hard": 2,
    "Brutal": 2,
}
_RISK_BY_LEVEL: Final[tuple[str, ...]] = ("Comfort", "Balanced", "Experimental")


def _clamp01(x: float) -> float:
    if x < 0.0:
        return 0.0
    if x > 1.0:
        return 1.0
    return x


def _played_genres(playtime_by_genre: Mapping[str, float]) -> dict[str, float]:
    """플레이 시간이 0보다 큰 장르만 (소문자 키로) 남긴다."""
    out: dict[str, float] = {}
    for genre, minutes in playtime_by_genre.items():
        try:
            m = float(minutes)
        except (TypeError, ValueError):
            continue
        if m > 0.0 and genre:
            key = str(genre).strip().lower()
            out[key] = out.get(key, 0.0) + m
    return out


def derive_pacing(average_session_length_minutes: float) -> str:
    if average_session_length_minutes < BURST_MAX_MINUTES:
        return "Burst"
    if average_session_length_minutes <= FLOW_MAX_MINUTES:
        return "Flow"
    return "Marathon"


def derive_risk_profile(difficulty_preference: str, completion_rate: float) -> str:
    """
    난이도 선호를 기본값으로 두고 완주율로 한 단계 보정한다.
    - 완주율 < 0.3: 여러 게임을 맛만 보는 패턴 → 한 단계 실험적으로
    - 완주율 > 0.8: 끝까지 파는 패턴 → 한 단계 안정적으로
    """
    level = _DIFFICULTY_RISK_LEVEL.get(difficulty_preference, 1)
    if completion_rate < 0.3:
        level += 1
    elif completion_rate > 0.8:
        level -= 1
    level = max(0, min(len(_RISK_BY_LEVEL) - 1, level))
    return _RISK_BY_LEVEL[level]


def derive_archetype(signals: RawPlayerSignals) -> str:
    """
    우선순위 규칙(위에서부터 첫 매칭):
    1. 플레이 기록이 거의 없음 → Casual
    2. 멀티플레이 비중 ≥ 0.6 → Competitor / Socialite / Socializer
    3. 한 장르가 전체의 60% 이상 → Specialist
    4. 하드 이상 + 완주율 ≥ 0.7 → Achiever
    5. 최다 장르 계열 → Strategist / Creative / Explorer / Competitor
    6. 완주율 ≥ 0.6 → Achiever, 장르 4개 이상 → Explorer, 그 외 Casual
    """
    genres = _played_genres(signals.playtime_by_genre)
    total_minutes = sum(genres.values())

    if total_minutes <= 0.0 or (
        signals.sessions_per_week < 2 and signals.average_session_length_minutes < BURST_MAX_MINUTES
    ):
        return "Casual"

    # 동률이면 먼저 입력된 장르가 우선
    dominant_genre, dominant_minutes = max(genres.items(), key=lambda kv: kv[1])
    dominant_share = dominant_minutes / total_minutes

    if signals.multiplayer_ratio >= 0.6:
        if dominant_genre in COMPETITIVE_GENRES:
            return "Competitor"
        if signals.multiplayer_ratio >= 0.75:
            return "Socialite"
        return "Socializer"

    if len(genres) > 1 and dominant_share >= 0.6:
        return "Specialist"

    if signals.difficulty_preference in ("Hard", "Brutal") and signals.completion_rate >= 0.7:
        return "Achiever"

    if dominant_genre in STRATEGY_GENRES:
        return "Strategist"
    if dominant_genre in CREATIVE_GENRES:
        return "Creative"
    if dominant_genre in EXPLORER_GENRES:
        return "Explorer"
    if dominant_genre in COMPETITIVE_GENRES:
        return "Competitor"

    if signals.completion_rate >= 0.6:
        return "Achiever"
    if len(genres) >= 4:
        return "Explorer"
    return "Casual"


def compute_confidence(signals: RawPlayerSignals) -> float:
    """
    신호의 양/일관성이 늘어날수록 커지는 신뢰도 (0~1).

    confidence = 0.2
               + 0.35 * min(1, 장르 수 / 5)
               + 0.30 * min(1, 주간 세션 / 7)
               + 0.15 * min(1, 주간 플레이 분 / 600)

    장르 항은 0이 아닌 장르 개수에만 의존하므로 장르가 하나 늘어도 값이 줄지 않는다.
    """
    genre_count = len(_played_genres(signals.playtime_by_genre))
    genre_term = min(1.0, genre_count / CONFIDENCE_GENRE_SATURATION)
    volume_term = min(1.0, max(0.0, signals.sessions_per_week) / CONFIDENCE_SESSIONS_SATURATION)
    weekly_minutes = max(0.0, signals.average_session_length_minutes) * max(0.0, signals.sessions_per_week)
    consistency_term = min(1.0, weekly_minutes / CONFIDENCE_WEEKLY_MINUTES_SATURATION)

    base = 0.2 + 0.35 * genre_term + 0.30 * volume_term + 0.15 * consistency_term
    return round(_clamp01(base), 3)


def derive_persona_traits(signals: RawPlayerSignals) -> PersonaTraits:
    return PersonaTraits(
        archetype_id=derive_archetype(signals),
        pacing=derive_pacing(signals.average_session_length_minutes),
        risk_profile=derive_risk_profile(signals.difficulty_preference, signals.completion_rate),
        confidence=compute_confidence(signals),
    )
