import logging

from sqlalchemy import update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
from sqlalchemy.orm import selectinload
from fastapi import HTTPException, status

from task_tracker.models.tasks import Task, Subtask
from task_tracker.models.user import utcnow
from task_tracker.schemas.task import TaskCreate, TaskUpdate, SubtaskCreate

logger = logging.getLogger(__name__)


def _task_not_found() -> HTTPException:
    # Also covers tasks owned by someone else so existence is not leaked
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Task not found")


def _active_tasks(owner_id: str):
    return (
        select(Task)
        .options(selectinload(Task.subtasks))
        .filter(Task.created_by == owner_id, Task.is_deleted == False)
        .execution_options(populate_existing=True)
    )


async def get_task_for_owner(db: AsyncSession, task_id: str, owner_id: str) -> Task:
    result = await db.execute(_active_tasks(owner_id).filter(Task.id == task_id))
    task = result.scalars().unique().first()
    if not task:
        raise _task_not_found()
    return task


async def list_tasks(db: AsyncSession, owner_id: str) -> list[Task]:
    result = await db.execute(_active_tasks(owner_id).order_by(Task.created_at))
    return list(result.scalars().unique().all())


async def create_task(db: AsyncSession, task_data: TaskCreate, owner_id: str) -> Task:
    new_task = Task(
        subject=task_data.subject,
        deadline=task_data.deadline,
        status=task_data.status,
        created_by=owner_id,
        subtask_ids=[],
    )
    db.add(new_task)
    await db.flush()
    logger.info("Task %s created by %s", new_task.id, owner_id)
    return new_task


async def update_task(db: AsyncSession, task_id: str, update_data: TaskUpdate, owner_id: str) -> Task:
    task = await get_task_for_owner(db, task_id, owner_id)

    changes = update_data.changes()
    for key, value in changes.items():
        setattr(task, key, value)
    task.updated_at = utcnow()

    await db.flush()
    logger.info("Task %s updated fields=%s", task_id, sorted(changes))
    return task


async def delete_task(db: AsyncSession, task_id: str, owner_id: str) -> int:
    """
    Soft-delete a task and every live subtask under it.

    Both writes go out in the caller's transaction. Returns the number of
    subtasks marked deleted.
    """
    task = await get_task_for_owner(db, task_id, owner_id)
    now = utcnow()

    task.is_deleted = True
    task.updated_at = now
    await db.flush()

    result = await db.execute(
        update(Subtask)
        .where(Subtask.task_id == task.id, Subtask.is_deleted == False)
        .values(is_deleted=True, updated_at=now)
    )
    logger.info("Task %s deleted, cascaded to %d subtasks", task_id, result.rowcount)
    return result.rowcount


async def list_subtasks(db: AsyncSession, task_id: str, owner_id: str) -> list[Subtask]:
    task = await get_task_for_owner(db, task_id, owner_id)
    result = await db.execute(
        select(Subtask)
        .filter(Subtask.task_id == task.id, Subtask.is_deleted == False)
        .order_by(Subtask.created_at)
    )
    return list(result.scalars().all())


async def create_subtask(db: AsyncSession, task_id: str, subtask_data: SubtaskCreate, owner_id: str) -> Subtask:
    task = await get_task_for_owner(db, task_id, owner_id)

    subtask = Subtask(
        subject=subtask_data.subject,
        deadline=subtask_data.deadline,
        status=subtask_data.status,
        task_id=task.id,
    )
    db.add(subtask)
    await db.flush()

    # Reassign rather than append so the JSON column is flagged dirty
    task.subtask_ids = [*(task.subtask_ids or []), subtask.id]
    await db.flush()

    logger.info("Subtask %s added to task %s", subtask.id, task_id)
    return subtask


async def replace_subtasks(
    db: AsyncSession, task_id: str, specs: list[SubtaskCreate], owner_id: str
) -> list[Subtask]:
    """
    Swap the whole active subtask set of a task for ``specs``.

    ``specs`` are already validated. Old subtasks are soft-deleted and every
    spec becomes a new subtask with a new id, even when it matches an old one.
    """
    task = await get_task_for_owner(db, task_id, owner_id)
    now = utcnow()

    result = await db.execute(
        update(Subtask)
        .where(Subtask.task_id == task.id, Subtask.is_deleted == False)
        .values(is_deleted=True, updated_at=now)
    )
    replaced = result.rowcount

    new_subtasks = [
        Subtask(
            subject=spec.subject,
            deadline=spec.deadline,
            status=spec.status,
            task_id=task.id,
        )
        for spec in specs
    ]
    db.add_all(new_subtasks)
    await db.flush()

    task.subtask_ids = [s.id for s in new_subtasks]
    task.updated_at = now
    await db.flush()

    logger.info(
        "Task %s subtasks replaced: %d retired, %d created", task_id, replaced, len(new_subtasks)
    )
    return new_subtasks
