import random
from dataclasses import replace

import pytest

from gamepilot.core.errors import SignalValidationError
from gamepilot.persona.snapshot import build_persona_snapshot
from gamepilot.persona.types import RawPlayerSignals
from gamepilot.recommendation.catalog import DEFAULT_GAME_POOL, CandidateGame
from gamepilot.recommendation.scorer import (
    DEFAULT_EXPLANATION,
    DEFAULT_SCORING_SIGNALS,
    FALLBACK_EXPLANATION,
    archetype_match,
    build_explanation,
    challenge_match,
    genre_affinity,
    get_personalised_recommendation,
    get_play_history_recommendations,
    get_recommendations,
    mood_match,
    rank_candidates,
    resolve_signals,
    score_game,
    session_fit,
)


def _signals(**overrides):
    base = dict(
        playtime_by_genre={"RPG": 80},
        average_session_length_minutes=60,
        sessions_per_week=3,
        difficulty_preference="Normal",
        multiplayer_ratio=0.2,
        completion_rate=0.5,
    )
    base.update(overrides)
    return RawPlayerSignals(**base)


@pytest.fixture
def snapshot_a(scenario_a_signals):
    return build_persona_snapshot(scenario_a_signals)


class TestScenarioA:
    def test_rpg_hard_long_game(self, snapshot_a):
        game = CandidateGame(
            id="rpg",
            name="Deep RPG",
            genres=("RPG",),
            playstyle_tags=("explorer",),
            difficulty="Hard",
            session_suitability="long",
        )
        result = get_personalised_recommendation(snapshot_a, [game])
        assert result.game is game
        assert result.score >= 55
        assert result.score == 60
        assert "love RPG" in result.explanation
        assert "difficulty match" in result.explanation
        assert result.explanation == (
            "You love RPG games • Made for your love of exploration • "
            "Perfect difficulty match for your skill level"
        )


class TestGenreAffinity:
    @pytest.mark.parametrize("minutes,points", [(80, 30), (51, 30), (50, 20), (21, 20), (20, 10), (6, 10), (5, 0)])
    def test_bands(self, minutes, points):
        assert genre_affinity(("RPG",), {"RPG": minutes}).points == points

    def test_points_stack_across_genres(self):
        factor = genre_affinity(("RPG", "Strategy", "Puzzle"), {"RPG": 80, "Strategy": 30})
        assert factor.points == 50
        assert factor.reason == "You love RPG games"

    def test_case_insensitive(self):
        factor = genre_affinity(("rpg",), {"RPG": 80})
        assert factor.points == 30
        assert factor.reason == "You love rpg games"

    def test_no_match(self):
        assert genre_affinity(("Racing",), {"RPG": 80}).points == 0


class TestMoodMatch:
    def test_each_rule(self):
        assert mood_match(("energetic",), _signals(sessions_per_week=6)).points == 15
        assert mood_match(("energetic",), _signals(sessions_per_week=5)).points == 0
        assert mood_match(("relaxed",), _signals(sessions_per_week=3)).points == 15
        assert mood_match(("focused",), _signals(average_session_length_minutes=91)).points == 10
        assert mood_match(("social",), _signals(multiplayer_ratio=0.6)).points == 10

    def test_rules_add_up_and_first_reason_wins(self):
        factor = mood_match(
            ("relaxed", "focused", "social"),
            _signals(sessions_per_week=2, average_session_length_minutes=100, multiplayer_ratio=0.9),
        )
        assert factor.points == 35
        assert factor.reason == "Perfect for your relaxed gaming pace"


class TestOtherFactors:
    def test_archetype_pairings(self):
        assert archetype_match(("achiever",), "Specialist").points == 20
        assert archetype_match(("social",), "Socialite").points == 20
        assert archetype_match(("casual",), "Casual").points == 15
        assert archetype_match(("explorer",), "Explorer").points == 15
        assert archetype_match(("social",), "Explorer").points == 0

    @pytest.mark.parametrize(
        "game,preferred,points",
        [
            ("Hard", "Hard", 15),
            ("Normal", "Hard", 8),
            ("Brutal", "Hard", 8),
            ("Relaxed", "Hard", 0),
            (None, "Hard", 0),
            ("Impossible", "Hard", 0),
        ],
    )
    def test_challenge(self, game, preferred, points):
        assert challenge_match(game, preferred).points == points

    @pytest.mark.parametrize(
        "suitability,minutes,points",
        [
            ("short", 60, 10),
            ("short", 61, 0),
            ("medium", 61, 10),
            ("medium", 120, 10),
            ("long", 121, 10),
            ("long", 100, 0),
            ("flexible", 500, 5),
            (None, 60, 0),
        ],
    )
    def test_session_fit(self, suitability, minutes, points):
        assert session_fit(suitability, minutes).points == points

    def test_score_is_sum_of_factors(self, blank_game):
        game = blank_game("g", genres=("RPG",), mood_tags=("relaxed",), difficulty="Normal", session_suitability="short")
        scored = score_game(game, "Casual", _signals())
        assert scored.factors == {"genre": 30, "mood": 15, "archetype": 0, "challenge": 15, "session": 10}
        assert scored.score == 70

    def test_explanation_keeps_three_reasons(self):
        assert build_explanation(["a", "", "b", "c", "d"]) == "a • b • c"
        assert build_explanation([]) == DEFAULT_EXPLANATION


class TestSelection:
    def test_ties_keep_pool_order(self, snapshot_a, blank_game):
        games = [blank_game(str(i), genres=("RPG",)) for i in range(3)]
        ranked = rank_candidates(snapshot_a, games)
        assert [s.game.id for s in ranked] == ["0", "1", "2"]

    def test_refresh_index_walks_and_clamps(self, snapshot_a, blank_game):
        games = [blank_game("low", genres=("RPG",)), blank_game("high", genres=("RPG",), difficulty="Hard")]
        assert get_personalised_recommendation(snapshot_a, games, refresh_index=0).game.id == "high"
        assert get_personalised_recommendation(snapshot_a, games, refresh_index=1).game.id == "low"
        assert get_personalised_recommendation(snapshot_a, games, refresh_index=99).game.id == "low"

    def test_zero_scores_fall_back_to_pool_position(self, snapshot_a, blank_game):
        games = [blank_game("a"), blank_game("b")]
        first = get_personalised_recommendation(snapshot_a, games)
        assert first.game.id == "a"
        assert first.score == 50
        assert first.explanation == FALLBACK_EXPLANATION
        assert get_personalised_recommendation(snapshot_a, games, refresh_index=3).game.id == "b"

    def test_bare_library_records_fall_back(self, snapshot_a):
        records = [{"id": "a", "name": "A"}, {"id": "b", "name": "B"}]
        result = get_personalised_recommendation(snapshot_a, records)
        assert result.game.id == "a"
        assert result.score == 50
        assert result.explanation == FALLBACK_EXPLANATION

    @pytest.mark.parametrize("refresh_index", [0, 1, 4])
    def test_same_inputs_same_pick(self, snapshot_a, blank_game, refresh_index):
        pool = [
            blank_game("plain"),
            blank_game("rpg", genres=("RPG",), difficulty="Hard"),
            *DEFAULT_GAME_POOL,
            blank_game("tagged", genres=("RPG",), playstyle_tags=("explorer",)),
        ]
        first = get_personalised_recommendation(snapshot_a, pool, refresh_index=refresh_index)
        second = get_personalised_recommendation(snapshot_a, list(pool), refresh_index=refresh_index)
        assert (first.game.id, first.score) == (second.game.id, second.score)
        assert first.explanation == second.explanation

    def test_no_snapshot_picks_among_top_three_popular(self, blank_game):
        games = [
            blank_game("p10", popularity=10),
            blank_game("p40", popularity=40),
            blank_game("p30", popularity=30),
            blank_game("p20", popularity=20),
        ]
        rng = random.Random(7)
        picks = {get_personalised_recommendation(None, games, rng=rng).game.id for _ in range(30)}
        assert picks <= {"p40", "p30", "p20"}
        result = get_personalised_recommendation(None, games, rng=random.Random(1))
        assert result.score == 50
        assert result.explanation == FALLBACK_EXPLANATION

    def test_empty_pool_uses_default_catalog(self):
        result = get_personalised_recommendation(None, [], rng=random.Random(3))
        assert result.game.id in {"bg3", "cyberpunk", "stardew"}

    def test_default_catalog_with_snapshot(self, snapshot_a):
        result = get_personalised_recommendation(snapshot_a, None)
        assert result.game in DEFAULT_GAME_POOL
        assert result.score > 0


class TestSignalResolution:
    def test_raw_signals_take_priority(self, snapshot_a, blank_game):
        game = blank_game("g", genres=("Puzzle",))
        raw = {
            "playtime_by_genre": {"Puzzle": 90},
            "average_session_length_minutes": 30,
            "sessions_per_week": 2,
            "difficulty_preference": "Relaxed",
            "multiplayer_ratio": 0.0,
            "completion_rate": 0.5,
        }
        result = get_personalised_recommendation(snapshot_a, [game], raw_signals=raw)
        assert result.explanation.startswith("You love Puzzle games")

    def test_invalid_raw_signals_raise(self, snapshot_a):
        with pytest.raises(SignalValidationError):
            get_personalised_recommendation(snapshot_a, None, raw_signals={"sessions_per_week": 3})

    def test_snapshot_without_signals_uses_defaults(self, snapshot_a):
        bare = replace(snapshot_a, signals=None)
        assert resolve_signals(bare) is DEFAULT_SCORING_SIGNALS
        assert resolve_signals(snapshot_a) is snapshot_a.signals


class TestGetRecommendations:
    def test_only_positive_scores(self, snapshot_a, blank_game):
        games = [blank_game("a"), blank_game("b", genres=("RPG",)), blank_game("c", difficulty="Hard")]
        results = get_recommendations(snapshot_a, games, limit=5)
        assert [r.game.id for r in results] == ["b", "c"]

    def test_limit(self, snapshot_a, blank_game):
        games = [blank_game(str(i), genres=("RPG",)) for i in range(6)]
        assert len(get_recommendations(snapshot_a, games, limit=2)) == 2

    def test_all_zero_gives_single_fallback(self, snapshot_a, blank_game):
        results = get_recommendations(snapshot_a, [blank_game("a"), blank_game("b")])
        assert len(results) == 1
        assert results[0].score == 50


class TestPlayHistory:
    def test_matches_top_genres(self, blank_game):
        snap = build_persona_snapshot(
            {
                "playtime_by_genre": {"RPG": 80, "Strategy": 30},
                "average_session_length_minutes": 60,
                "sessions_per_week": 3,
                "difficulty_preference": "Normal",
                "multiplayer_ratio": 0.2,
                "completion_rate": 0.5,
            }
        )
        games = [
            blank_game("g1", genres=("RPG",)),
            blank_game("g2", genres=("Racing",)),
            blank_game("g3", genres=("strategy",)),
        ]
        results = get_play_history_recommendations(snap, games)
        assert [r.game.id for r in results] == ["g1", "g3"]
        assert all(r.score == 85 for r in results)
        assert results[0].explanation == "Based on your love for RPG & Strategy games"

    def test_empty_inputs(self, snapshot_a, blank_game):
        assert get_play_history_recommendations(None, [blank_game("g", genres=("RPG",))]) == []
        assert get_play_history_recommendations(snapshot_a, []) == []
