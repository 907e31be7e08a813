from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from task_tracker.dependencies import get_db, get_current_user
from task_tracker.schemas.task import (
    Task as TaskSchema,
    TaskCreate,
    TaskUpdate,
    Subtask as SubtaskSchema,
    SubtaskCreate,
    SubtaskReplace,
)
from task_tracker.schemas.user import TokenData
from task_tracker.services import tasks as task_service
from task_tracker.models.tasks import Task as TaskModel

# Every route here sits behind the bearer-token gate
router = APIRouter(prefix="/tasks", tags=["tasks"], dependencies=[Depends(get_current_user)])


async def get_owned_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
) -> TaskModel:
    # Solved before the request body is validated
    return await task_service.get_task_for_owner(db, task_id, current_user.owner_id)


@router.get("", response_model=list[TaskSchema])
async def list_tasks(
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    return await task_service.list_tasks(db, current_user.owner_id)


@router.post("", response_model=TaskSchema, status_code=status.HTTP_201_CREATED)
async def create_task(
    task_data: TaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    task = await task_service.create_task(db, task_data, current_user.owner_id)
    await db.commit()
    return await task_service.get_task_for_owner(db, task.id, current_user.owner_id)


@router.put("/{task_id}", response_model=TaskSchema)
async def update_task(
    task_id: str,
    update_data: TaskUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    await task_service.update_task(db, task_id, update_data, current_user.owner_id)
    await db.commit()
    return await task_service.get_task_for_owner(db, task_id, current_user.owner_id)


@router.delete("/{task_id}")
async def delete_task(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    await task_service.delete_task(db, task_id, current_user.owner_id)
    await db.commit()
    return {"message": "Task deleted successfully"}


@router.get("/{task_id}/subtasks", response_model=list[SubtaskSchema])
async def list_subtasks(
    task_id: str,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    return await task_service.list_subtasks(db, task_id, current_user.owner_id)


@router.post("/{task_id}/subtasks", response_model=SubtaskSchema, status_code=status.HTTP_201_CREATED)
async def create_subtask(
    task_id: str,
    subtask_data: SubtaskCreate,
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    subtask = await task_service.create_subtask(db, task_id, subtask_data, current_user.owner_id)
    await db.commit()
    return subtask


@router.put("/{task_id}/subtasks", response_model=list[SubtaskSchema])
async def replace_subtasks(
    task_id: str,
    payload: SubtaskReplace,
    task: TaskModel = Depends(get_owned_task),
    db: AsyncSession = Depends(get_db),
    current_user: TokenData = Depends(get_current_user),
):
    subtasks = await task_service.replace_subtasks(db, task.id, payload.subtasks, current_user.owner_id)
    await db.commit()
    return subtasks
