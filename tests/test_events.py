from datetime import datetime, timedelta

import pytest

from gamepilot.analytics.events import (
    MoodEvent,
    SessionContext,
    TemporalContext,
    entry_to_mood_event,
    migrate_mood_history,
    mood_event_to_entry,
    record_mood_event,
    record_recommendation_feedback,
    record_session_end,
    record_session_start,
    validate_mood_event,
)
from gamepilot.core.errors import InvalidSessionStateError
from gamepilot.persona.types import MoodEntry


class TestRecordMoodEvent:
    def test_clamps_and_limits_tags(self):
        event = record_mood_event("energetic", 15, ["creative", "social", "focused"])
        assert event.intensity == 10
        assert event.mood_tags == ("creative", "social")

    def test_temporal_context(self):
        # 2026-03-01 is a Sunday in ISO week 9
        event = record_mood_event("chill", 5, timestamp=datetime(2026, 3, 1, 21, 30))
        assert event.temporal_context == TemporalContext(hour_of_day=21, day_of_week=0, week_of_year=9)
        assert event.temporal_context.day_name == "Sunday"

    def test_session_context_is_kept(self):
        ctx = SessionContext(session_id="s1", is_pre_session=True)
        event = record_mood_event("focused", 6, session_context=ctx)
        assert event.session_context.is_pre_session
        assert not event.session_context.is_post_session


class TestSessionLifecycle:
    def test_end_computes_delta_and_duration(self):
        start = datetime(2026, 3, 2, 10, 0)
        pre = record_mood_event("chill", 4, timestamp=start)
        post = record_mood_event("energetic", 7, timestamp=start + timedelta(minutes=45))

        session = record_session_start("s1", "g1", pre, start_time=start)
        assert session.is_open
        assert session.post_mood is None

        done = record_session_end(session, post, end_time=start + timedelta(minutes=45))
        assert done.mood_delta == post.intensity - pre.intensity
        assert done.end_time is not None
        assert done.session_duration == 45
        assert not done.is_open
        # 원래 세션 값은 그대로
        assert session.end_time is None

    def test_end_with_default_clock(self):
        pre = record_mood_event("chill", 4)
        done = record_session_end(record_session_start("s1", "g1", pre), record_mood_event("chill", 6))
        assert done.mood_delta == 2
        assert done.end_time is not None

    def test_delta_requires_both_moods(self):
        done = record_session_end(record_session_start("s2"), record_mood_event("chill", 6))
        assert done.mood_delta is None

    def test_ending_twice_is_an_error(self):
        done = record_session_end(record_session_start("s3"))
        with pytest.raises(InvalidSessionStateError):
            record_session_end(done)


class TestFeedback:
    @pytest.mark.parametrize("given,expected", [(1.7, 1.0), (-0.3, 0.0), (0.42, 0.42)])
    def test_confidence_is_clamped(self, given, expected):
        mood = record_mood_event("chill", 5)
        fb = record_recommendation_feedback("rec-1", mood, "matched", "g1", given)
        assert fb.confidence == pytest.approx(expected)

    def test_default_confidence(self):
        fb = record_recommendation_feedback("rec-1", record_mood_event("chill", 5), "skip")
        assert fb.confidence == 0.5

    def test_unknown_kind_is_rejected(self):
        with pytest.raises(ValueError):
            record_recommendation_feedback("rec-1", record_mood_event("chill", 5), "loved")


class TestConversions:
    def test_entry_to_event_keeps_timestamp(self):
        ts = datetime(2026, 3, 2, 8, 15)
        event = entry_to_mood_event(MoodEntry("story", 7, ts, context="commute", game_id="g9"))
        assert event.timestamp == ts
        assert event.temporal_context.hour_of_day == 8
        assert event.mood_tags == ()
        assert event.game_id == "g9"

    def test_event_to_entry(self):
        event = record_mood_event("social", 8, ["competitive"], "raid night", "g2")
        entry = mood_event_to_entry(event)
        assert entry == MoodEntry("social", 8, event.timestamp, "raid night", "g2")

    def test_migrate_history(self, monday):
        entries = [MoodEntry("chill", 3, monday), MoodEntry("focused", 6, monday + timedelta(hours=2))]
        events = migrate_mood_history(entries)
        assert [e.mood_id for e in events] == ["chill", "focused"]
        assert all(validate_mood_event(e) for e in events)


class TestValidateMoodEvent:
    def test_recorded_event_is_valid(self):
        assert validate_mood_event(record_mood_event("chill", 5))

    def test_non_event_is_invalid(self):
        assert not validate_mood_event({"mood_id": "chill"})

    def test_out_of_range_intensity_is_invalid(self, monday):
        event = MoodEvent(
            mood_id="chill",
            intensity=11,
            timestamp=monday,
            temporal_context=TemporalContext.from_datetime(monday),
        )
        assert not validate_mood_event(event)
