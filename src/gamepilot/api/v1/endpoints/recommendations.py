from fastapi import APIRouter

from gamepilot.api.v1.endpoints.persona import snapshot_or_http_error
from gamepilot.recommendation.scorer import get_personalised_recommendation, get_recommendations
from gamepilot.schemas.persona import PersonaSnapshotOut
from gamepilot.schemas.recommendation import (
    PersonalisedRecommendationRequest,
    PersonalisedRecommendationResponse,
    RecommendationOut,
)

router = APIRouter()


@router.post("/recommendations/personalised", response_model=PersonalisedRecommendationResponse)
def personalised_recommendation(request: PersonalisedRecommendationRequest):
    snapshot = None
    if request.signals is not None:
        snapshot = snapshot_or_http_error(request.signals, request.mood_entry)

    games = [g.to_candidate() for g in request.games]
    result = get_personalised_recommendation(snapshot, games, refresh_index=request.refresh_index)
    top = get_recommendations(snapshot, games, limit=request.limit) if snapshot is not None else []

    return PersonalisedRecommendationResponse(
        recommendation=RecommendationOut.from_domain(result),
        top_picks=[RecommendationOut.from_domain(r) for r in top],
        persona=PersonaSnapshotOut.from_domain(snapshot) if snapshot is not None else None,
    )
