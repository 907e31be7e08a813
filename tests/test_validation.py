from datetime import datetime, timedelta, timezone

import pytest
from pydantic import ValidationError

from task_tracker.models.tasks import TaskStatus
from task_tracker.schemas.task import SubtaskCreate, SubtaskReplace, TaskCreate, TaskUpdate
from task_tracker.utils.validation import (
    describe_validation_error,
    ensure_utc,
    is_future,
    parse_date,
    reject_blank,
)


def errors_for(model, data) -> dict:
    with pytest.raises(ValidationError) as exc_info:
        model.model_validate(data)
    return describe_validation_error(exc_info.value.errors())


def tomorrow() -> datetime:
    return datetime.now(timezone.utc) + timedelta(days=1)


def test_is_future_treats_naive_values_as_utc():
    now = datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)

    assert is_future(datetime(2030, 1, 1, 12, 0, 1), now=now)
    assert not is_future(datetime(2030, 1, 1, 12, 0), now=now)


def test_ensure_utc_converts_offsets():
    plus_two = timezone(timedelta(hours=2))

    converted = ensure_utc(datetime(2030, 1, 1, 14, 0, tzinfo=plus_two))

    assert converted == datetime(2030, 1, 1, 12, 0, tzinfo=timezone.utc)
    assert converted.tzinfo == timezone.utc


def test_task_create_parses_status_into_enum():
    task = TaskCreate.model_validate(
        {"subject": "A", "deadline": tomorrow().isoformat(), "status": "in-progress"}
    )

    assert task.status is TaskStatus.IN_PROGRESS
    assert task.deadline.tzinfo is not None


def test_subtask_status_defaults_to_pending_even_when_null():
    subtask = SubtaskCreate.model_validate(
        {"subject": "A", "deadline": tomorrow().isoformat(), "status": None}
    )

    assert subtask.status is TaskStatus.PENDING


def test_update_changes_drop_absent_and_null_fields():
    update = TaskUpdate.model_validate({"subject": "New", "status": None})

    assert update.changes() == {"subject": "New"}


def test_unparseable_deadline_message():
    assert errors_for(TaskCreate, {"subject": "A", "deadline": "someday", "status": "pending"}) == {
        "detail": "deadline must be a valid date"
    }


def test_status_message_lists_valid_statuses():
    assert errors_for(TaskUpdate, {"status": "archived"}) == {
        "detail": "status must be one of pending, in-progress, completed",
        "valid_statuses": ["pending", "in-progress", "completed"],
    }


def test_nested_subtask_error_names_the_inner_field():
    body = errors_for(
        SubtaskReplace,
        {"subtasks": [{"subject": "ok", "deadline": tomorrow().isoformat()}, {"subject": "no deadline"}]},
    )

    assert body == {"detail": "deadline is a required field"}


def test_describe_falls_back_to_pydantic_message():
    body = describe_validation_error(
        [{"type": "int_parsing", "loc": ("body", "count"), "msg": "Input should be a valid integer"}]
    )

    assert body == {"detail": "count: Input should be a valid integer"}


def test_describe_with_no_errors():
    assert describe_validation_error([]) == {"detail": "Invalid request"}


def test_parse_date_understands_common_formats():
    assert parse_date("2999/01/15") == datetime(2999, 1, 15)
    assert parse_date("Jan 15, 2999") == datetime(2999, 1, 15)
    assert parse_date("2999-01-15T10:00:00Z") == datetime(2999, 1, 15, 10, tzinfo=timezone.utc)


def test_parse_date_leaves_non_strings_to_pydantic():
    assert parse_date(1700000000) == 1700000000


def test_parse_date_rejects_garbage():
    with pytest.raises(ValueError, match="deadline must be a valid date"):
        parse_date("not a date at all")
    with pytest.raises(ValueError, match="deadline must be a valid date"):
        parse_date("   ")


def test_ensure_utc_overflow_is_a_value_error():
    near_max = datetime(9999, 12, 31, 23, 0, tzinfo=timezone(timedelta(hours=-5)))

    with pytest.raises(ValueError, match="deadline must be a valid date"):
        ensure_utc(near_max)


def test_reject_blank_keeps_text_verbatim():
    assert reject_blank("  a<b> ") == "  a<b> "
    with pytest.raises(ValueError, match="subject must not be empty"):
        reject_blank(" \t")


def test_task_create_keeps_subject_verbatim():
    task = TaskCreate.model_validate(
        {"subject": "a<b and c>d", "deadline": tomorrow().isoformat(), "status": "pending"}
    )

    assert task.subject == "a<b and c>d"
