"""
공용 fixture: 시그널 샘플, 고정 시각, 후보 게임.
"""

from datetime import datetime

import pytest

from gamepilot.persona.types import RawPlayerSignals
from gamepilot.recommendation.catalog import CandidateGame


@pytest.fixture
def scenario_a_signals():
    return RawPlayerSignals(
        playtime_by_genre={"RPG": 80},
        average_session_length_minutes=100,
        sessions_per_week=4,
        difficulty_preference="Hard",
        multiplayer_ratio=0.2,
        late_night_ratio=0.1,
        completion_rate=0.6,
    )


@pytest.fixture
def signal_mapping():
    return {
        "playtime_by_genre": {"RPG": 80, "Strategy": 30},
        "average_session_length_minutes": 100,
        "sessions_per_week": 4,
        "difficulty_preference": "Hard",
        "multiplayer_ratio": 0.2,
        "late_night_ratio": 0.1,
        "completion_rate": 0.6,
    }


@pytest.fixture
def monday():
    # 2026-03-02 is a Monday
    return datetime(2026, 3, 2)


@pytest.fixture
def blank_game():
    def make(game_id, **kwargs):
        return CandidateGame(id=game_id, name=f"Game {game_id}", **kwargs)

    return make
