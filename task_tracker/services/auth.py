import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from fastapi import HTTPException, status

from task_tracker.models.user import User
from task_tracker.schemas.user import UserCreate
from task_tracker.utils.security import get_password_hash, verify_password

logger = logging.getLogger(__name__)


async def get_user_by_email(db: AsyncSession, email: str) -> User | None:
    result = await db.execute(
        select(User).filter(User.email == email.lower(), User.is_deleted == False)
    )
    return result.scalars().first()


async def get_user_by_id(db: AsyncSession, user_id: str) -> User:
    result = await db.execute(
        select(User).filter(User.id == user_id, User.is_deleted == False)
    )
    user = result.scalars().first()
    if not user:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")
    return user


async def register_user(db: AsyncSession, user: UserCreate) -> User:
    email = user.email.lower()
    result = await db.execute(select(User.id).filter(User.email == email))
    if result.scalars().first():
        raise HTTPException(status_code=400, detail="Email already registered")

    new_user = User(
        name=user.name,
        email=email,
        hashed_password=get_password_hash(user.password),
    )
    db.add(new_user)
    try:
        await db.commit()
    except IntegrityError:
        # Lost a race with a concurrent registration
        await db.rollback()
        raise HTTPException(status_code=400, detail="Email already registered")
    await db.refresh(new_user)
    logger.info("Registered user %s", new_user.id)
    return new_user


async def authenticate_user(db: AsyncSession, email: str, password: str) -> User | None:
    user = await get_user_by_email(db, email)
    if not user or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", email)
        return None
    return user
