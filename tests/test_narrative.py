from datetime import datetime

import pytest

from gamepilot.persona.narrative import (
    GENERIC_ARCHETYPE,
    GENERIC_MOOD,
    build_persona_narrative,
    derive_tone,
)
from gamepilot.persona.types import MoodState, PersonaMoodContext, PersonaTraits

TRAITS = PersonaTraits(archetype_id="Strategist", pacing="Marathon", risk_profile="Comfort", confidence=0.6)


def _mood(mood_id):
    return MoodState(mood_id=mood_id, intensity=5, timestamp=datetime(2026, 3, 2, 21, 0))


class TestTone:
    @pytest.mark.parametrize(
        "mood_id,tone",
        [
            ("chill", "Calm"),
            ("story", "Calm"),
            ("creative", "Calm"),
            ("energetic", "Hyped"),
            ("social", "Hyped"),
            ("exploratory", "Hyped"),
            ("competitive", "Competitive"),
            ("focused", "Competitive"),
            ("nostalgic", "Comfort"),
            ("relaxed", "Comfort"),
            ("grumpy", "Comfort"),
        ],
    )
    def test_lookup(self, mood_id, tone):
        assert derive_tone(_mood(mood_id)) == tone

    def test_no_mood_is_reflective(self):
        assert derive_tone(None) == "Reflective"


class TestSummary:
    def test_without_mood(self):
        narrative = build_persona_narrative(PersonaMoodContext(TRAITS, None))
        assert narrative.summary.startswith("You are a strategist")
        assert "currently" not in narrative.summary
        assert narrative.tone == "Reflective"

    def test_with_mood(self):
        narrative = build_persona_narrative(PersonaMoodContext(TRAITS, _mood("focused")))
        assert "currently locked in and focused" in narrative.summary
        assert narrative.tone == "Competitive"

    def test_unknown_values_degrade_to_generic_text(self):
        traits = PersonaTraits(archetype_id="Wizard", pacing="Sprint", risk_profile="Reckless", confidence=0.1)
        narrative = build_persona_narrative(PersonaMoodContext(traits, _mood("grumpy")))
        assert GENERIC_ARCHETYPE in narrative.summary
        assert GENERIC_MOOD in narrative.summary
        assert narrative.tone == "Comfort"

    def test_is_deterministic(self):
        ctx = PersonaMoodContext(TRAITS, _mood("chill"))
        assert build_persona_narrative(ctx) == build_persona_narrative(ctx)
