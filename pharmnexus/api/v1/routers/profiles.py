from typing import Annotated

from fastapi import APIRouter, HTTPException, Depends, status

from ....core.supabase_client import get_supabase
from ....repositories.profile_repository import ProfileRepository
from ....schemas.quiz_schemas import LevelOut
from ....services.rewards import level_for

router = APIRouter(prefix="/profiles", tags=["profiles"])

def get_profiles() -> ProfileRepository:
    return ProfileRepository(get_supabase())

ProfilesDep = Annotated[ProfileRepository, Depends(get_profiles)]

@router.get("/{user_id}/level", response_model=LevelOut)
async def get_level(user_id: str, profiles: ProfilesDep):
    points = profiles.get_points(user_id)
    if points is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Profile not found")
    info = level_for(points)
    return {"userId": user_id, "points": info.points, "level": info.level, "progress": info.progress}
