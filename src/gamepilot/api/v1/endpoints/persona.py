import logging
from typing import Any, Optional

from fastapi import APIRouter, HTTPException

from gamepilot.core.config import settings
from gamepilot.core.errors import SignalValidationError, SnapshotBuildError
from gamepilot.persona.mood_mapping import coerce_mood_state, is_mood_recent
from gamepilot.persona.snapshot import build_persona_snapshot
from gamepilot.persona.types import MoodEntry, PersonaSnapshot
from gamepilot.schemas.persona import MoodEntryIn, PersonaSnapshotOut, PersonaSnapshotRequest, PlayerSignalsIn

logger = logging.getLogger(__name__)

router = APIRouter()


def recent_mood_entry(mood_entry: Optional[MoodEntryIn]) -> Optional[MoodEntry]:
    """오래된 무드 기록은 버린다(mood=None)."""
    if mood_entry is None:
        return None
    entry = mood_entry.to_entry()
    if not is_mood_recent(coerce_mood_state(entry), settings.MOOD_RECENT_HOURS):
        logger.info("ignoring stale mood entry from %s", entry.timestamp.isoformat())
        return None
    return entry


def snapshot_or_http_error(signals: Optional[PlayerSignalsIn], mood_entry: Optional[MoodEntryIn]) -> PersonaSnapshot:
    raw: Any = signals.to_signal_mapping() if signals is not None else None
    try:
        return build_persona_snapshot(raw, recent_mood_entry(mood_entry))
    except SignalValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "field": e.field})
    except SnapshotBuildError as e:
        logger.exception("persona snapshot build failed")
        raise HTTPException(status_code=500, detail=str(e))


@router.post("/persona/snapshot", response_model=PersonaSnapshotOut)
def persona_snapshot(request: PersonaSnapshotRequest):
    snapshot = snapshot_or_http_error(request.signals, request.mood_entry)
    return PersonaSnapshotOut.from_domain(snapshot)
