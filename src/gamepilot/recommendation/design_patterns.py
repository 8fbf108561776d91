"""
게임 디자인 패턴 카탈로그 (코치 스코어러 입력)

수치는 모두 0~10 척도, time_to_fun / avg_playtime만 분 단위.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final, Iterable

# 감정 니즈 → 패턴 alignment 필드
NEED_ALIGNMENT_FIELDS: Final[dict[str, str]] = {
    "comfort": "comfort_alignment",
    "escape": "escape_alignment",
    "mastery": "mastery_alignment",
    "chaos": "chaos_alignment",
    "novelty": "novelty_alignment",
    "story_flow": "story_flow_alignment",
}


@dataclass(frozen=True)
class GameDesignPattern:
    game_id: str
    game_name: str

    pacing: int
    friction_level: int
    narrative_density: int
    mechanical_complexity: int
    reward_cadence: int
    agency_level: int
    sensory_intensity: int
    time_to_fun: int  # minutes

    comfort_alignment: int
    escape_alignment: int
    mastery_alignment: int
    chaos_alignment: int
    novelty_alignment: int
    story_flow_alignment: int

    genres: tuple[str, ...]
    platforms: tuple[str, ...]
    avg_playtime: int  # minutes
    difficulty: str

    def alignment(self, need: str) -> int | None:
        field_name = NEED_ALIGNMENT_FIELDS.get(need)
        return getattr(self, field_name) if field_name else None


_ALL_CONSOLES = ("PC", "PS4", "PS5", "Switch", "Xbox")

GAME_DESIGN_PATTERNS: Final[tuple[GameDesignPattern, ...]] = (
    GameDesignPattern(
        "hades", "Hades",
        pacing=8, friction_level=7, narrative_density=6, mechanical_complexity=8,
        reward_cadence=9, agency_level=9, sensory_intensity=8, time_to_fun=15,
        comfort_alignment=4, escape_alignment=7, mastery_alignment=9,
        chaos_alignment=6, novelty_alignment=5, story_flow_alignment=6,
        genres=("Action", "Roguelike", "Indie"), platforms=_ALL_CONSOLES,
        avg_playtime=120, difficulty="moderate",
    ),
    GameDesignPattern(
        "stardew_valley", "Stardew Valley",
        pacing=3, friction_level=2, narrative_density=4, mechanical_complexity=6,
        reward_cadence=7, agency_level=8, sensory_intensity=4, time_to_fun=30,
        comfort_alignment=10, escape_alignment=8, mastery_alignment=5,
        chaos_alignment=1, novelty_alignment=5, story_flow_alignment=6,
        genres=("Farming", "RPG", "Indie"), platforms=_ALL_CONSOLES + ("Mobile",),
        avg_playtime=240, difficulty="easy",
    ),
    GameDesignPattern(
        "celeste", "Celeste",
        pacing=7, friction_level=8, narrative_density=8, mechanical_complexity=7,
        reward_cadence=8, agency_level=7, sensory_intensity=6, time_to_fun=20,
        comfort_alignment=3, escape_alignment=6, mastery_alignment=8,
        chaos_alignment=4, novelty_alignment=7, story_flow_alignment=9,
        genres=("Platformer", "Indie", "Adventure"), platforms=_ALL_CONSOLES,
        avg_playtime=180, difficulty="moderate",
    ),
    GameDesignPattern(
        "hades_2", "Hades II",
        pacing=8, friction_level=7, narrative_density=7, mechanical_complexity=9,
        reward_cadence=9, agency_level=9, sensory_intensity=8, time_to_fun=15,
        comfort_alignment=4, escape_alignment=7, mastery_alignment=9,
        chaos_alignment=6, novelty_alignment=6, story_flow_alignment=7,
        genres=("Action", "Roguelike", "Indie"), platforms=("PC",),
        avg_playtime=120, difficulty="moderate",
    ),
    GameDesignPattern(
        "journey", "Journey",
        pacing=4, friction_level=3, narrative_density=7, mechanical_complexity=3,
        reward_cadence=5, agency_level=6, sensory_intensity=8, time_to_fun=10,
        comfort_alignment=8, escape_alignment=9, mastery_alignment=3,
        chaos_alignment=2, novelty_alignment=8, story_flow_alignment=10,
        genres=("Adventure", "Indie", "Art"), platforms=("PC", "PS3", "PS4", "PS5"),
        avg_playtime=60, difficulty="easy",
    ),
    GameDesignPattern(
        "risk_of_rain_2", "Risk of Rain 2",
        pacing=9, friction_level=9, narrative_density=3, mechanical_complexity=8,
        reward_cadence=10, agency_level=8, sensory_intensity=7, time_to_fun=5,
        comfort_alignment=1, escape_alignment=8, mastery_alignment=10,
        chaos_alignment=9, novelty_alignment=7, story_flow_alignment=2,
        genres=("Action", "Third-Person Shooter", "Roguelike"), platforms=_ALL_CONSOLES,
        avg_playtime=90, difficulty="hard",
    ),
    GameDesignPattern(
        "animal_crossing_new_horizons", "Animal Crossing: New Horizons",
        pacing=2, friction_level=1, narrative_density=5, mechanical_complexity=7,
        reward_cadence=6, agency_level=9, sensory_intensity=5, time_to_fun=45,
        comfort_alignment=10, escape_alignment=9, mastery_alignment=4,
        chaos_alignment=1, novelty_alignment=6, story_flow_alignment=7,
        genres=("Simulation", "Life Sim", "Social"), platforms=("Switch",),
        avg_playtime=300, difficulty="easy",
    ),
    GameDesignPattern(
        "dead_cells", "Dead Cells",
        pacing=8, friction_level=8, narrative_density=4, mechanical_complexity=8,
        reward_cadence=9, agency_level=8, sensory_intensity=6, time_to_fun=10,
        comfort_alignment=3, escape_alignment=7, mastery_alignment=9,
        chaos_alignment=7, novelty_alignment=8, story_flow_alignment=4,
        genres=("Action", "Roguelike", "Indie"), platforms=_ALL_CONSOLES,
        avg_playtime=60, difficulty="moderate",
    ),
    GameDesignPattern(
        "tetris_effect", "Tetris Effect",
        pacing=6, friction_level=6, narrative_density=2, mechanical_complexity=5,
        reward_cadence=8, agency_level=7, sensory_intensity=9, time_to_fun=2,
        comfort_alignment=7, escape_alignment=8, mastery_alignment=6,
        chaos_alignment=5, novelty_alignment=9, story_flow_alignment=3,
        genres=("Puzzle", "Music", "VR"), platforms=("PC", "PS4", "PS5", "Xbox", "Meta Quest"),
        avg_playtime=45, difficulty="easy",
    ),
    GameDesignPattern(
        "spiritfarer", "Spiritfarer",
        pacing=4, friction_level=4, narrative_density=9, mechanical_complexity=7,
        reward_cadence=6, agency_level=7, sensory_intensity=7, time_to_fun=25,
        comfort_alignment=8, escape_alignment=6, mastery_alignment=5,
        chaos_alignment=3, novelty_alignment=6, story_flow_alignment=10,
        genres=("Management", "Adventure", "Indie"), platforms=_ALL_CONSOLES,
        avg_playtime=180, difficulty="easy",
    ),
)


def get_pattern_by_id(game_id: str) -> GameDesignPattern | None:
    for p in GAME_DESIGN_PATTERNS:
        if p.game_id == game_id:
            return p
    return None


def search_patterns(
    *,
    genres: Iterable[str] | None = None,
    platforms: Iterable[str] | None = None,
    difficulty: str | None = None,
    max_time_to_fun: int | None = None,
) -> list[GameDesignPattern]:
    genres = set(genres) if genres else None
    platforms = set(platforms) if platforms else None
    out: list[GameDesignPattern] = []
    for p in GAME_DESIGN_PATTERNS:
        if genres and not genres & set(p.genres):
            continue
        if platforms and not platforms & set(p.platforms):
            continue
        if difficulty and p.difficulty != difficulty:
            continue
        if max_time_to_fun is not None and p.time_to_fun > max_time_to_fun:
            continue
        out.append(p)
    return out
