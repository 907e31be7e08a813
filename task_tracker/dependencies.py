import logging

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlalchemy.ext.asyncio import AsyncSession
from task_tracker.database import get_db as db_session
from task_tracker.config import settings
from task_tracker.schemas.user import TokenData
from task_tracker.utils.security import InvalidTokenError, TokenService

logger = logging.getLogger(__name__)

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)

def get_db(db: AsyncSession = Depends(db_session)):
    return db

def get_token_service() -> TokenService:
    return TokenService(
        secret=settings.SECRET_KEY,
        algorithm=settings.ALGORITHM,
        expire_minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES,
    )

async def get_current_user(
    token: str | None = Depends(oauth2_scheme),
    tokens: TokenService = Depends(get_token_service),
) -> TokenData:
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Unauthorized Access",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if not token:
        raise credentials_exception
    try:
        return tokens.verify(token)
    except InvalidTokenError as e:
        logger.warning("Rejected bearer token: %s", e)
        raise credentials_exception
