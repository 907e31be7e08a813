from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession
from task_tracker.dependencies import get_db, get_current_user
from task_tracker.schemas.user import TokenData, UserResponse
from task_tracker.services import auth as auth_service

router = APIRouter(prefix="/users", tags=["users"])

@router.get("/me", response_model=UserResponse)
async def get_me(
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    return await auth_service.get_user_by_id(db, current_user.owner_id)
