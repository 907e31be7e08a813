from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession
from task_tracker.dependencies import get_db, get_token_service
from task_tracker.models.user import User as UserModel
from task_tracker.schemas.user import Token, UserCreate, UserLogin, UserResponse
from task_tracker.services import auth as auth_service
from task_tracker.utils.security import TokenService

router = APIRouter(prefix="/auth", tags=["auth"])


def _bad_credentials() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Incorrect email or password",
        headers={"WWW-Authenticate": "Bearer"},
    )


def _token_for(user: UserModel, tokens: TokenService) -> dict:
    return {"access_token": tokens.issue(user.id, user.email), "token_type": "bearer"}


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(user: UserCreate, db: AsyncSession = Depends(get_db)):
    return await auth_service.register_user(db, user)


@router.post("/login", response_model=Token)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
):
    user = await auth_service.authenticate_user(db, credentials.email, credentials.password)
    if not user:
        raise _bad_credentials()
    return _token_for(user, tokens)


@router.post("/token", response_model=Token)
async def login_for_access_token(
    db: AsyncSession = Depends(get_db),
    tokens: TokenService = Depends(get_token_service),
    form_data: OAuth2PasswordRequestForm = Depends(),
):
    # The interactive docs send the email in the "username" field
    user = await auth_service.authenticate_user(db, form_data.username, form_data.password)
    if not user:
        raise _bad_credentials()
    return _token_for(user, tokens)
