from datetime import datetime, timezone

import pytest
from pydantic import ValidationError

from taskboard.db.models import TaskPriority, TaskStatus
from taskboard.schemas.task import TaskCreate, TaskUpdate
from taskboard.schemas.team import TeamCreate
from taskboard.schemas.user import UserCreate, UserUpdate


def test_task_create_defaults_and_camel_case():
    payload = TaskCreate.model_validate({"title": "Fix bug", "createdById": 1, "teamId": 2})
    assert payload.status is TaskStatus.PENDING
    assert payload.priority is TaskPriority.MEDIUM
    assert payload.created_by_id == 1
    assert payload.team_id == 2
    assert payload.assignee_ids is None


def test_task_create_accepts_snake_case_names():
    payload = TaskCreate.model_validate({"title": "t", "created_by_id": 1, "team_id": 1})
    assert payload.created_by_id == 1


def test_task_create_rejects_empty_title():
    with pytest.raises(ValidationError):
        TaskCreate.model_validate({"title": "", "createdById": 1, "teamId": 1})


def test_task_create_rejects_unknown_status():
    with pytest.raises(ValidationError):
        TaskCreate.model_validate({"title": "t", "createdById": 1, "teamId": 1, "status": "DONE"})


def test_relation_ids_are_deduplicated_in_order():
    payload = TaskCreate.model_validate(
        {"title": "t", "createdById": 1, "teamId": 1, "assigneeIds": [3, 1, 3, 2, 1], "tagIds": [5, 5]}
    )
    assert payload.assignee_ids == [3, 1, 2]
    assert payload.tag_ids == [5]

    team = TeamCreate.model_validate({"name": "Core", "leadId": 1, "memberIds": [2, 2, 1]})
    assert team.member_ids == [2, 1]


def test_task_update_tracks_supplied_fields_only():
    payload = TaskUpdate.model_validate({"id": 1, "priority": "HIGH", "tagIds": []})
    assert payload.model_fields_set == {"id", "priority", "tag_ids"}
    assert payload.tag_ids == []


def test_task_update_rejects_null_for_required_column():
    with pytest.raises(ValidationError):
        TaskUpdate.model_validate({"id": 1, "title": None})
    with pytest.raises(ValidationError):
        TaskUpdate.model_validate({"id": 1, "teamId": None})


def test_task_update_allows_clearing_nullable_column():
    payload = TaskUpdate.model_validate({"id": 1, "description": None, "deadline": None})
    assert payload.description is None
    assert {"description", "deadline"} <= payload.model_fields_set


@pytest.mark.parametrize(
    "data",
    [
        {"email": "not-an-email", "name": "Ann", "role": "eng"},
        {"email": "a@x.com", "name": "A", "role": "eng"},
        {"email": "a@x.com", "name": "Ann", "role": "eng", "avatar": "not a url"},
        {"email": "a@x.com", "name": "Ann", "role": "eng", "preferences": {"nested": {"a": 1}}},
        {"email": "a@x.com", "name": "Ann"},
    ],
)
def test_user_create_rejects_invalid_input(data):
    with pytest.raises(ValidationError):
        UserCreate.model_validate(data)


def test_user_create_keeps_avatar_string_verbatim():
    payload = UserCreate.model_validate(
        {
            "email": "a@x.com",
            "name": "Ann",
            "role": "eng",
            "avatar": "https://cdn.example.com/a.png",
            "preferences": {"theme": "dark", "compact": True, "zoom": 1.5, "unset": None},
        }
    )
    assert payload.avatar == "https://cdn.example.com/a.png"
    assert payload.preferences == {"theme": "dark", "compact": True, "zoom": 1.5, "unset": None}


def test_user_update_rejects_null_email_but_allows_null_department():
    with pytest.raises(ValidationError):
        UserUpdate.model_validate({"id": 1, "email": None})
    payload = UserUpdate.model_validate({"id": 1, "department": None})
    assert payload.model_dump(exclude_unset=True, exclude={"id"}) == {"department": None}


def test_task_deadline_is_normalised_to_utc():
    base = {"title": "t", "createdById": 1, "teamId": 1}
    naive = TaskCreate.model_validate({**base, "deadline": "2030-01-01T12:00:00"})
    assert naive.deadline == datetime(2030, 1, 1, 12, tzinfo=timezone.utc)
    offset = TaskUpdate.model_validate({"id": 1, "deadline": "2030-01-01T12:00:00+02:00"})
    assert offset.deadline.tzinfo == timezone.utc
    assert offset.deadline.hour == 10


@pytest.mark.parametrize("bad_id", [True, "2", 2.0])
def test_team_member_ids_are_strict_integers(bad_id):
    with pytest.raises(ValidationError):
        TeamCreate.model_validate({"name": "Core", "leadId": 1, "memberIds": [bad_id]})
