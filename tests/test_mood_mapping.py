from datetime import datetime, timedelta

import pytest

from gamepilot.persona.mood_mapping import (
    coerce_mood_state,
    create_mood_state,
    get_mood_intensity_category,
    is_mood_recent,
    map_mood_to_persona_context,
)
from gamepilot.persona.types import MoodEntry, PersonaTraits

TRAITS = PersonaTraits(archetype_id="Explorer", pacing="Flow", risk_profile="Balanced", confidence=0.5)


class TestCreateMoodState:
    @pytest.mark.parametrize("n", [-100, -1, 0, 1, 5, 10, 11, 1000])
    def test_intensity_is_clamped(self, n):
        state = create_mood_state("chill", n)
        assert state.intensity == max(1, min(10, n))

    def test_timestamp_defaults_to_now(self):
        before = datetime.now()
        state = create_mood_state("focused", 5)
        assert before <= state.timestamp <= datetime.now()


class TestMoodRecency:
    def test_exact_boundary_is_recent(self):
        now = datetime(2026, 3, 2, 12, 0)
        state = create_mood_state("chill", 5, now - timedelta(hours=24))
        assert is_mood_recent(state, 24, now=now)

    def test_one_millisecond_past_boundary_is_stale(self):
        now = datetime(2026, 3, 2, 12, 0)
        state = create_mood_state("chill", 5, now - timedelta(hours=24, milliseconds=1))
        assert not is_mood_recent(state, 24, now=now)

    def test_custom_window(self):
        now = datetime(2026, 3, 2, 12, 0)
        state = create_mood_state("chill", 5, now - timedelta(hours=3))
        assert not is_mood_recent(state, 2, now=now)
        assert is_mood_recent(state, 4, now=now)


class TestIntensityCategory:
    @pytest.mark.parametrize(
        "intensity,expected",
        [(1, "Low"), (3, "Low"), (4, "Medium"), (7, "Medium"), (8, "High"), (10, "High")],
    )
    def test_bands(self, intensity, expected):
        assert get_mood_intensity_category(intensity) == expected


class TestMapMoodToPersonaContext:
    def test_no_entry_leaves_mood_empty(self):
        ctx = map_mood_to_persona_context(TRAITS, None)
        assert ctx.traits is TRAITS
        assert ctx.mood is None

    def test_entry_becomes_mood_state(self):
        ts = datetime(2026, 3, 2, 20, 0)
        ctx = map_mood_to_persona_context(TRAITS, MoodEntry("energetic", 14, ts, context="after work"))
        assert ctx.mood.mood_id == "energetic"
        assert ctx.mood.intensity == 10
        assert ctx.mood.timestamp == ts

    def test_mapping_with_iso_timestamp(self):
        state = coerce_mood_state({"mood_id": "story", "intensity": 6, "timestamp": "2026-03-02T08:30:00"})
        assert state.timestamp == datetime(2026, 3, 2, 8, 30)

    def test_missing_mood_id_is_rejected(self):
        with pytest.raises(ValueError):
            coerce_mood_state({"intensity": 4})
