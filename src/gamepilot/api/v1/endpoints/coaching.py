from fastapi import APIRouter, HTTPException

from gamepilot.recommendation.coach import get_coaching_recommendation
from gamepilot.schemas.coaching import CoachingRecommendationOut, CoachingRequest

router = APIRouter()


@router.post("/coaching/recommend", response_model=CoachingRecommendationOut)
def coaching_recommend(request: CoachingRequest):
    try:
        profile = request.profile.to_profile()
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    rec = get_coaching_recommendation(
        profile,
        owned_games=request.owned_games,
        recent_games=request.recent_games,
        play_history=request.history(),
        recent_sessions=request.sessions(),
    )
    if rec is None:
        raise HTTPException(status_code=404, detail="No coaching recommendation available")
    return CoachingRecommendationOut.from_domain(rec)
