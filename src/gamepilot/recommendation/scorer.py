"""
개인화 추천 스코어러

persona snapshot(+ 플레이 시그널)과 후보 풀을 받아 게임별로 5개 팩터 점수를 더하고,
정렬 후 refresh_index 위치의 게임 + 설명문을 돌려준다.

팩터 (기준 배점):
- genre affinity   30  (장르마다 누적, 상한 없음)
- mood match       25  (규칙 4개 독립 적용)
- archetype match  20
- challenge match  15
- session fit      10

동점은 풀의 원래 순서를 유지한다(안정 정렬). 아무 팩터도 맞지 않으면 인기 기반 fallback.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass, field
from typing import Any, Final, Iterable, Mapping, Sequence

from gamepilot.persona.snapshot import validate_raw_player_signals
from gamepilot.persona.types import DIFFICULTY_LEVELS, PersonaSnapshot, RawPlayerSignals
from gamepilot.recommendation.catalog import DEFAULT_GAME_POOL, CandidateGame, coerce_candidates

logger = logging.getLogger(__name__)

FALLBACK_SCORE: Final[int] = 50
FALLBACK_EXPLANATION: Final[str] = "Based on general trends and popularity"
DEFAULT_EXPLANATION: Final[str] = "This game matches your gaming preferences"
EXPLANATION_SEPARATOR: Final[str] = " • "
MAX_EXPLANATION_REASONS: Final[int] = 3
POPULAR_FALLBACK_TOP_N: Final[int] = 3

PLAY_HISTORY_SCORE: Final[int] = 85
PLAY_HISTORY_TOP_GENRES: Final[int] = 3

# 스냅샷에도 시그널이 없을 때 쓰는 중립값
DEFAULT_SCORING_SIGNALS: Final[RawPlayerSignals] = RawPlayerSignals(
    playtime_by_genre={},
    average_session_length_minutes=60,
    sessions_per_week=3,
    difficulty_preference="Normal",
    multiplayer_ratio=0.4,
    completion_rate=0.5,
    late_night_ratio=0.2,
)

# (archetype, playstyle tag, points, reason)
ARCHETYPE_PAIRINGS: Final[tuple[tuple[str, str, int, str], ...]] = (
    ("Specialist", "achiever", 20, "Perfect for your achievement-oriented playstyle"),
    ("Socialite", "social", 20, "Great for your social gaming preferences"),
    ("Casual", "casual", 15, "Matches your casual gaming style"),
    ("Achiever", "achiever", 20, "Built for your drive to see things through"),
    ("Competitor", "competitive", 20, "Feeds your competitive streak"),
    ("Strategist", "strategic", 20, "Rewards your strategic thinking"),
    ("Explorer", "explorer", 15, "Made for your love of exploration"),
    ("Creative", "creative", 15, "Gives your creativity room to play"),
    ("Socializer", "social", 15, "Great for playing with friends"),
)


@dataclass(frozen=True)
class FactorScore:
    points: int = 0
    reason: str = ""


@dataclass(frozen=True)
class ScoredGame:
    game: CandidateGame
    score: int
    factors: dict[str, int] = field(default_factory=dict)
    reasons: tuple[str, ...] = ()


@dataclass(frozen=True)
class RecommendationResult:
    game: CandidateGame
    explanation: str
    score: int


def _lower_set(values: Iterable[str]) -> set[str]:
    return {v.lower() for v in values if v}


def _genre_playtime(playtime_by_genre: Mapping[str, float]) -> dict[str, float]:
    out: dict[str, float] = {}
    for genre, minutes in playtime_by_genre.items():
        key = str(genre).strip().lower()
        out[key] = out.get(key, 0.0) + float(minutes or 0)
    return out


# ---- factors ----


def genre_affinity(genres: Sequence[str], playtime_by_genre: Mapping[str, float]) -> FactorScore:
    """장르마다 점수를 더한다. reason은 처음 맞은 장르 이름."""
    playtime = _genre_playtime(playtime_by_genre)
    points = 0
    first_match = ""
    for genre in genres:
        if not genre:
            continue
        minutes = playtime.get(genre.lower(), 0.0)
        if minutes > 50:
            gained = 30
        elif minutes > 20:
            gained = 20
        elif minutes > 5:
            gained = 10
        else:
            continue
        points += gained
        first_match = first_match or genre
    return FactorScore(points, f"You love {first_match} games" if points else "")


def mood_match(mood_tags: Sequence[str], signals: RawPlayerSignals) -> FactorScore:
    tags = _lower_set(mood_tags)
    points = 0
    reasons: list[str] = []
    if "energetic" in tags and signals.sessions_per_week > 5:
        points += 15
        reasons.append("Matches your energetic gaming style")
    if "relaxed" in tags and signals.sessions_per_week <= 3:
        points += 15
        reasons.append("Perfect for your relaxed gaming pace")
    if "focused" in tags and signals.average_session_length_minutes > 90:
        points += 10
        reasons.append("Great for your focused gaming sessions")
    if "social" in tags and signals.multiplayer_ratio > 0.5:
        points += 10
        reasons.append("Matches your social gaming preferences")
    return FactorScore(points, reasons[0] if reasons else "")


def archetype_match(playstyle_tags: Sequence[str], archetype_id: str) -> FactorScore:
    tags = _lower_set(playstyle_tags)
    for archetype, tag, points, reason in ARCHETYPE_PAIRINGS:
        if archetype == archetype_id and tag in tags:
            return FactorScore(points, reason)
    return FactorScore()


def challenge_match(game_difficulty: str | None, preferred_difficulty: str) -> FactorScore:
    # 모르는 난이도는 비교하지 않는다(0점)
    if game_difficulty not in DIFFICULTY_LEVELS or preferred_difficulty not in DIFFICULTY_LEVELS:
        return FactorScore()
    diff = abs(DIFFICULTY_LEVELS.index(game_difficulty) - DIFFICULTY_LEVELS.index(preferred_difficulty))
    if diff == 0:
        return FactorScore(15, "Perfect difficulty match for your skill level")
    if diff == 1:
        return FactorScore(8, "Good difficulty match for you")
    return FactorScore()


def session_fit(session_suitability: str | None, average_minutes: float) -> FactorScore:
    if session_suitability == "short" and average_minutes <= 60:
        return FactorScore(10, "Perfect for your quick gaming sessions")
    if session_suitability == "medium" and 60 < average_minutes <= 120:
        return FactorScore(10, "Great for your medium gaming sessions")
    if session_suitability == "long" and average_minutes > 120:
        return FactorScore(10, "Perfect for your long gaming sessions")
    if session_suitability == "flexible":
        return FactorScore(5, "Flexible gaming that fits your schedule")
    return FactorScore()


def score_game(game: CandidateGame, archetype_id: str, signals: RawPlayerSignals) -> ScoredGame:
    factors = {
        "genre": genre_affinity(game.genres, signals.playtime_by_genre),
        "mood": mood_match(game.mood_tags, signals),
        "archetype": archetype_match(game.playstyle_tags, archetype_id),
        "challenge": challenge_match(game.difficulty, signals.difficulty_preference),
        "session": session_fit(game.session_suitability, signals.average_session_length_minutes),
    }
    return ScoredGame(
        game=game,
        score=sum(f.points for f in factors.values()),
        factors={name: f.points for name, f in factors.items()},
        reasons=tuple(f.reason for f in factors.values() if f.points > 0 and f.reason),
    )


# ---- selection ----


def resolve_signals(snapshot: PersonaSnapshot, raw_signals: Any = None) -> RawPlayerSignals:
    """raw_signals > snapshot.signals > 기본값 순서."""
    if raw_signals is not None:
        if isinstance(raw_signals, RawPlayerSignals):
            return raw_signals
        return validate_raw_player_signals(raw_signals)
    if snapshot.signals is not None:
        return snapshot.signals
    return DEFAULT_SCORING_SIGNALS


def _candidate_pool(library_games: Iterable[Any] | None) -> list[CandidateGame]:
    pool = coerce_candidates(library_games)
    if not pool:
        logger.info("empty candidate pool; using built-in catalog (%d games)", len(DEFAULT_GAME_POOL))
        return list(DEFAULT_GAME_POOL)
    return pool


def build_explanation(reasons: Sequence[str]) -> str:
    picked = [r for r in reasons if r][:MAX_EXPLANATION_REASONS]
    return EXPLANATION_SEPARATOR.join(picked) if picked else DEFAULT_EXPLANATION


def rank_candidates(
    snapshot: PersonaSnapshot,
    library_games: Iterable[Any] | None = None,
    raw_signals: Any = None,
) -> list[ScoredGame]:
    signals = resolve_signals(snapshot, raw_signals)
    archetype_id = snapshot.traits.archetype_id
    scored = [score_game(g, archetype_id, signals) for g in _candidate_pool(library_games)]
    # sorted()는 reverse=True여도 동점의 원래 순서를 유지한다
    return sorted(scored, key=lambda s: s.score, reverse=True)


def popular_fallback(
    pool: Sequence[CandidateGame],
    *,
    rng: random.Random | None = None,
) -> RecommendationResult:
    by_popularity = sorted(
        pool,
        key=lambda g: g.popularity if g.popularity is not None else float("-inf"),
        reverse=True,
    )
    pick = (rng or random).choice(by_popularity[:POPULAR_FALLBACK_TOP_N])
    return RecommendationResult(game=pick, explanation=FALLBACK_EXPLANATION, score=FALLBACK_SCORE)


def get_personalised_recommendation(
    snapshot: PersonaSnapshot | None,
    library_games: Iterable[Any] | None = None,
    raw_signals: Any = None,
    refresh_index: int = 0,
    *,
    rng: random.Random | None = None,
) -> RecommendationResult:
    """
    snapshot이 없으면 인기 상위 3개 중 하나(score 50).
    있으면 정렬된 목록에서 min(refresh_index, n-1) 번째를 고른다.
    고른 게임이 0점이면 pool[refresh_index % n]을 fallback으로 돌려준다.
    """
    pool = _candidate_pool(library_games)

    if snapshot is None:
        logger.info("no persona snapshot; using popularity fallback")
        return popular_fallback(pool, rng=rng)

    ranked = rank_candidates(snapshot, pool, raw_signals)
    index = max(0, min(int(refresh_index), len(ranked) - 1))
    selected = ranked[index]

    if selected.score == 0:
        fallback = pool[int(refresh_index) % len(pool)]
        logger.info("no candidate matched any factor; falling back to %s", fallback.id)
        return RecommendationResult(game=fallback, explanation=FALLBACK_EXPLANATION, score=FALLBACK_SCORE)

    return RecommendationResult(
        game=selected.game,
        explanation=build_explanation(selected.reasons),
        score=selected.score,
    )


def get_recommendations(
    snapshot: PersonaSnapshot | None,
    library_games: Iterable[Any] | None = None,
    limit: int = 5,
    raw_signals: Any = None,
    *,
    rng: random.Random | None = None,
) -> list[RecommendationResult]:
    """점수가 0보다 큰 상위 limit개. 하나도 없으면 fallback 1개."""
    if snapshot is None:
        return [get_personalised_recommendation(None, library_games, rng=rng)]

    ranked = rank_candidates(snapshot, library_games, raw_signals)
    results = [
        RecommendationResult(game=s.game, explanation=build_explanation(s.reasons), score=s.score)
        for s in ranked[: max(0, int(limit))]
        if s.score > 0
    ]
    if not results:
        return [get_personalised_recommendation(snapshot, library_games, raw_signals, rng=rng)]
    return results


def get_play_history_recommendations(
    snapshot: PersonaSnapshot | None,
    library_games: Iterable[Any] | None,
    raw_signals: Any = None,
    limit: int = 5,
) -> list[RecommendationResult]:
    """가장 많이 플레이한 장르 3개 중 하나라도 가진 라이브러리 게임 (score 85)."""
    pool = coerce_candidates(library_games)
    if snapshot is None or not pool:
        return []

    signals = resolve_signals(snapshot, raw_signals)
    played = [(g, float(m)) for g, m in signals.playtime_by_genre.items() if float(m) > 0]
    top_genres = [g for g, _ in sorted(played, key=lambda kv: kv[1], reverse=True)[:PLAY_HISTORY_TOP_GENRES]]
    if not top_genres:
        return []

    wanted = _lower_set(top_genres)
    explanation = f"Based on your love for {' & '.join(top_genres)} games"
    matches = [g for g in pool if _lower_set(g.genres) & wanted][: max(0, int(limit))]
    return [RecommendationResult(game=g, explanation=explanation, score=PLAY_HISTORY_SCORE) for g in matches]
