"""
(3) Narrative Builder

- 입력: PersonaMoodContext (traits + mood | None)
- 출력: PersonaNarrative (summary, tone)

템플릿 + 고정 lookup 테이블만 사용한다. 모르는 키는 일반 서술로 대체(예외 없음).
"""

from __future__ import annotations

from typing import Final

from gamepilot.persona.types import MoodState, PersonaMoodContext, PersonaNarrative

ARCHETYPE_DESCRIPTIONS: Final[dict[str, str]] = {
    "Achiever": "a goal-driven achiever who loves seeing things through",
    "Explorer": "a curious explorer drawn to new worlds and hidden corners",
    "Socializer": "a social player who enjoys sharing games with others",
    "Competitor": "a competitor who thrives on head-to-head challenge",
    "Strategist": "a strategist who enjoys planning and outthinking problems",
    "Creative": "a creative builder who likes to make things their own",
    "Casual": "a relaxed player who games on their own terms",
    "Specialist": "a specialist with deep mastery of a favourite genre",
    "Socialite": "a socialite for whom games are a place to hang out",
}
PACING_DESCRIPTIONS: Final[dict[str, str]] = {
    "Burst": "short, punchy sessions",
    "Flow": "steady sessions that settle into a groove",
    "Marathon": "long, immersive marathons",
}
RISK_DESCRIPTIONS: Final[dict[str, str]] = {
    "Comfort": "sticks with familiar comforts",
    "Balanced": "balances favourites with the occasional new pick",
    "Experimental": "is always up for something new and challenging",
}
MOOD_DESCRIPTIONS: Final[dict[str, str]] = {
    "chill": "winding down",
    "relaxed": "taking it easy",
    "story": "in the mood for a good story",
    "creative": "feeling creative",
    "energetic": "full of energy",
    "social": "looking for company",
    "exploratory": "eager to explore",
    "competitive": "ready to compete",
    "focused": "locked in and focused",
    "nostalgic": "feeling nostalgic",
}

GENERIC_ARCHETYPE: Final[str] = "a player with a style all their own"
GENERIC_PACING: Final[str] = "sessions at their own rhythm"
GENERIC_RISK: Final[str] = "plays the way that feels right"
GENERIC_MOOD: Final[str] = "in a mood of their own"

_TONE_GROUPS: Final[tuple[tuple[frozenset[str], str], ...]] = (
    (frozenset({"chill", "story", "creative"}), "Calm"),
    (frozenset({"energetic", "social", "exploratory"}), "Hyped"),
    (frozenset({"competitive", "focused"}), "Competitive"),
)


def derive_tone(mood: MoodState | None) -> str:
    if mood is None:
        return "Reflective"
    for members, tone in _TONE_GROUPS:
        if mood.mood_id in members:
            return tone
    return "Comfort"


def build_persona_narrative(context: PersonaMoodContext) -> PersonaNarrative:
    traits = context.traits
    archetype = ARCHETYPE_DESCRIPTIONS.get(traits.archetype_id, GENERIC_ARCHETYPE)
    pacing = PACING_DESCRIPTIONS.get(traits.pacing, GENERIC_PACING)
    risk = RISK_DESCRIPTIONS.get(traits.risk_profile, GENERIC_RISK)

    if context.mood is None:
        summary = (
            f"You are {archetype}. You favour {pacing} and {risk}."
        )
    else:
        mood = MOOD_DESCRIPTIONS.get(context.mood.mood_id, GENERIC_MOOD)
        summary = (
            f"You are {archetype}, currently {mood}. "
            f"You favour {pacing} and {risk}."
        )

    return PersonaNarrative(summary=summary, tone=derive_tone(context.mood))
