"""
메인 진입점 (데모).

- 페르소나: gamepilot.persona.snapshot
- 추천: gamepilot.recommendation.scorer / coach

실행: 프로젝트 루트에서
  python main.py [--refresh N] [--mood chill --intensity 6]
"""
import argparse
from pathlib import Path

from dotenv import load_dotenv

from gamepilot.analytics.engine import EngineConfig, PersonaEngine
from gamepilot.core.config import Settings
from gamepilot.core.logging_config import configure_logging
from gamepilot.persona.snapshot import get_snapshot_summary
from gamepilot.recommendation.catalog import DEFAULT_GAME_POOL
from gamepilot.recommendation.coach import EmotionalProfile, get_coaching_recommendation
from gamepilot.recommendation.scorer import get_personalised_recommendation, get_play_history_recommendations

# -----------------------------
# .env 로드 (프로젝트 루트 또는 config/.env)
# -----------------------------
_root = Path(__file__).resolve().parent
load_dotenv(_root / ".env")
load_dotenv(_root / "config" / ".env")

DEMO_SIGNALS = {
    "playtime_by_genre": {"RPG": 80, "Strategy": 30, "Roguelike": 12},
    "average_session_length_minutes": 100,
    "sessions_per_week": 4,
    "difficulty_preference": "Hard",
    "multiplayer_ratio": 0.2,
    "late_night_ratio": 0.1,
    "completion_rate": 0.6,
}


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="GamePilot persona + recommendation demo")
    parser.add_argument("--refresh", type=int, default=0, help="refresh index into the ranked list")
    parser.add_argument("--mood", default=None, help="current mood id (e.g. chill, focused)")
    parser.add_argument("--intensity", type=int, default=6)
    args = parser.parse_args()

    settings = Settings()
    configure_logging(settings.LOG_LEVEL)
    engine = PersonaEngine(EngineConfig.from_settings(settings))

    mood = engine.record_mood(args.mood, args.intensity) if args.mood else None
    enhanced = engine.build_enhanced_snapshot(DEMO_SIGNALS, mood)
    snapshot = enhanced.snapshot

    print("페르소나:", get_snapshot_summary(snapshot))
    print("내러티브:", snapshot.narrative.summary, f"[{snapshot.narrative.tone}]")

    rec = get_personalised_recommendation(snapshot, list(DEFAULT_GAME_POOL), refresh_index=args.refresh)
    print(f"\n추천: {rec.game.name} (score={rec.score})\n  {rec.explanation}")

    for r in get_play_history_recommendations(snapshot, list(DEFAULT_GAME_POOL), limit=3):
        print(f"  - {r.game.name}: {r.explanation}")

    profile = EmotionalProfile(
        energy_level=4,
        cognitive_load=5,
        tolerance_level=6,
        emotional_needs=("escape", "story_flow"),
        available_time=90,
        session_type="focused",
    )
    coaching = get_coaching_recommendation(profile)
    if coaching is not None:
        print(f"\n코치 추천: {coaching.game_name} ({coaching.confidence}%)")
        print(" ", coaching.reasoning)
