from fastapi import APIRouter

from gamepilot.analytics.engine import EngineConfig
from gamepilot.analytics.patterns import (
    get_compound_mood_suggestions,
    get_session_mood_delta,
    get_temporal_mood_patterns,
)
from gamepilot.core.config import settings
from gamepilot.schemas.analytics import (
    CompoundMoodOut,
    InsightsRequest,
    InsightsResponse,
    SessionDeltaOut,
    TemporalOut,
)

router = APIRouter()


@router.post("/analytics/insights", response_model=InsightsResponse)
def analytics_insights(request: InsightsRequest):
    cfg = EngineConfig.from_settings(settings)
    events = [e.to_event() for e in request.mood_events]
    sessions = [s.to_session() for s in request.sessions]

    response = InsightsResponse()
    if cfg.enable_temporal_patterns:
        response.temporal = TemporalOut.from_domain(get_temporal_mood_patterns(events))
    if cfg.enable_session_tracking:
        response.session = SessionDeltaOut.from_domain(get_session_mood_delta(sessions))
    if cfg.enable_compound_moods:
        response.compound_moods = [CompoundMoodOut.from_domain(c) for c in get_compound_mood_suggestions(events)]
    return response
