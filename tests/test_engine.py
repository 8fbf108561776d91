import pytest

from gamepilot.analytics.engine import EngineConfig, PersonaEngine
from gamepilot.core.config import Settings


class TestEngineConfig:
    def test_rejects_zero_history(self):
        with pytest.raises(ValueError):
            EngineConfig(max_history_size=0)

    def test_from_settings(self):
        s = Settings(MAX_HISTORY_SIZE=7, ENABLE_COMPOUND_MOODS=False)
        cfg = EngineConfig.from_settings(s)
        assert cfg.max_history_size == 7
        assert cfg.enable_compound_moods is False
        assert cfg.enable_temporal_patterns is True


class TestMoodHistory:
    def test_fifo_eviction(self):
        engine = PersonaEngine(EngineConfig(max_history_size=3))
        for mood in ("chill", "story", "focused", "social"):
            engine.record_mood(mood, 5)
        assert [e.mood_id for e in engine.get_mood_history()] == ["story", "focused", "social"]

    def test_history_is_a_copy(self):
        engine = PersonaEngine()
        engine.record_mood("chill", 5)
        engine.get_mood_history().clear()
        assert len(engine.get_mood_history()) == 1

    def test_shrinking_history_keeps_newest(self):
        engine = PersonaEngine(EngineConfig(max_history_size=5))
        for i in range(5):
            engine.record_mood("chill", i + 1)
        engine.update_config(max_history_size=2)
        assert [e.intensity for e in engine.get_mood_history()] == [4, 5]
        engine.record_mood("chill", 9)
        assert [e.intensity for e in engine.get_mood_history()] == [5, 9]

    def test_unknown_config_field(self):
        with pytest.raises(ValueError, match="bogus"):
            PersonaEngine().update_config(bogus=True)

    def test_invalid_config_value_leaves_engine_unchanged(self):
        engine = PersonaEngine(EngineConfig(max_history_size=4))
        with pytest.raises(ValueError):
            engine.update_config(max_history_size=0)
        assert engine.get_config().max_history_size == 4

    def test_clear_history(self):
        engine = PersonaEngine()
        mood = engine.record_mood("chill", 5)
        engine.start_session("g1", mood)
        engine.record_feedback("rec-1", mood, "matched")
        engine.clear_history()
        assert engine.get_mood_history() == []
        assert engine.get_open_sessions() == []
        assert engine.get_feedback_history() == []


class TestSessions:
    def test_open_then_completed(self):
        engine = PersonaEngine()
        pre = engine.record_mood("chill", 3)
        session_id = engine.start_session("g1", pre)
        assert session_id.startswith("session_")
        assert engine.get_session_history() == []
        assert len(engine.get_open_sessions()) == 1

        done = engine.end_session(session_id, engine.record_mood("energetic", 8))
        assert done.mood_delta == 5
        assert engine.get_open_sessions() == []
        assert engine.get_session_history() == [done]

    def test_session_ids_are_unique(self):
        engine = PersonaEngine()
        ids = {engine.start_session() for _ in range(20)}
        assert len(ids) == 20

    def test_ending_unknown_session_is_a_noop(self, caplog):
        engine = PersonaEngine()
        assert engine.end_session("session_0_missing") is None
        assert engine.get_session_history() == []
        assert "session_0_missing" in caplog.text

    def test_ending_twice_returns_none(self):
        engine = PersonaEngine()
        session_id = engine.start_session("g1")
        assert engine.end_session(session_id) is not None
        assert engine.end_session(session_id) is None
        assert len(engine.get_session_history()) == 1


class TestFeedback:
    def test_disabled_loop_does_not_store(self):
        engine = PersonaEngine(EngineConfig(enable_feedback_loop=False))
        mood = engine.record_mood("chill", 5)
        entry = engine.record_feedback("rec-1", mood, "matched")
        assert entry.feedback == "matched"
        assert engine.get_feedback_history() == []

    def test_summary(self):
        engine = PersonaEngine()
        mood = engine.record_mood("chill", 5)
        for kind in ("matched", "partial", "missed", "skip"):
            engine.record_feedback(f"rec-{kind}", mood, kind, confidence=0.8)
        summary = engine.get_feedback_summary()
        assert summary.total == 4
        assert summary.counts == {"matched": 1, "partial": 1, "missed": 1, "skip": 1}
        assert summary.match_rate == pytest.approx(0.5)
        assert summary.average_confidence == pytest.approx(0.8)

    def test_empty_summary(self):
        summary = PersonaEngine().get_feedback_summary()
        assert summary.total == 0
        assert summary.match_rate == 0.0


class TestEnhancedSnapshot:
    def test_all_insights(self, signal_mapping):
        engine = PersonaEngine()
        engine.record_mood("chill", 6, ["creative"])
        enhanced = engine.build_enhanced_snapshot(signal_mapping)
        assert enhanced.snapshot.traits.archetype_id
        assert enhanced.temporal_insights is not None
        assert enhanced.session_insights is not None
        assert enhanced.compound_moods[0].secondary == "creative"

    def test_flags_turn_insights_off(self, signal_mapping):
        engine = PersonaEngine(
            EngineConfig(
                enable_temporal_patterns=False,
                enable_session_tracking=False,
                enable_compound_moods=False,
            )
        )
        enhanced = engine.build_enhanced_snapshot(signal_mapping)
        assert enhanced.temporal_insights is None
        assert enhanced.session_insights is None
        assert enhanced.compound_moods is None

    def test_explicit_events_override_history(self, signal_mapping):
        engine = PersonaEngine()
        engine.record_mood("chill", 6, ["creative"])
        enhanced = engine.build_enhanced_snapshot(signal_mapping, mood_events=[])
        assert enhanced.compound_moods == ()
