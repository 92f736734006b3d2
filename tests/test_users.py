import pytest

from taskboard.core.errors import ConflictError, EntityReferenceError, NotFoundError, ValidationError


async def test_add_user_returns_include_set(call):
    user = await call(
        "addUser",
        {"email": "a@x.com", "name": "Ann", "role": "eng", "preferences": {"theme": "dark"}},
    )
    assert user["id"] == 1
    assert user["email"] == "a@x.com"
    assert user["department"] is None
    assert user["preferences"] == {"theme": "dark"}
    for key in ("assignedTasks", "createdTasks", "teamsLed", "teams"):
        assert user[key] == []
    assert "createdAt" in user and "updatedAt" in user


async def test_add_user_invalid_email_creates_nothing(call):
    with pytest.raises(ValidationError) as exc_info:
        await call("addUser", {"email": "nope", "name": "Ann", "role": "eng"})
    assert "email" in exc_info.value.fields
    assert await call("getUsers") == []


async def test_add_user_short_name_creates_nothing(call):
    with pytest.raises(ValidationError) as exc_info:
        await call("addUser", {"email": "a@x.com", "name": "A", "role": "eng"})
    assert exc_info.value.fields == ["name"]
    assert await call("getUsers") == []


async def test_duplicate_email_conflicts(call):
    await call("addUser", {"email": "a@x.com", "name": "Ann", "role": "eng"})
    with pytest.raises(ConflictError):
        await call("addUser", {"email": "a@x.com", "name": "Another", "role": "eng"})
    other = await call("addUser", {"email": "b@x.com", "name": "Bob", "role": "eng"})
    with pytest.raises(ConflictError):
        await call("updateUser", {"id": other["id"], "email": "a@x.com"})


async def test_get_user_by_id_not_found(call):
    with pytest.raises(NotFoundError) as exc_info:
        await call("getUserById", {"id": 42})
    assert exc_info.value.entity == "User"


async def test_update_user_changes_only_supplied_fields(call):
    user = await call("addUser", {"email": "a@x.com", "name": "Ann", "role": "eng", "department": "R&D"})
    updated = await call("updateUser", {"id": user["id"], "role": "manager"})
    assert updated["role"] == "manager"
    assert updated["name"] == "Ann"
    assert updated["department"] == "R&D"

    cleared = await call("updateUser", {"id": user["id"], "department": None})
    assert cleared["department"] is None


async def test_update_missing_user_not_found(call):
    with pytest.raises(NotFoundError):
        await call("updateUser", {"id": 9, "name": "Nobody"})


async def test_user_navigation(call, board):
    b = await board()
    lead, dev, team, task = b["lead"], b["dev"], b["team"], b["task"]

    assigned = await call("getUserTasks", {"id": dev["id"]})
    assert [t["id"] for t in assigned] == [task["id"]]
    assert await call("getUserTasks", {"id": lead["id"]}) == []

    led = await call("getUserTeamsLed", {"id": lead["id"]})
    assert [t["id"] for t in led] == [team["id"]]
    assert await call("getUserTeamsLed", {"id": dev["id"]}) == []

    member_of = await call("getUserTeams", {"id": lead["id"]})
    assert [t["id"] for t in member_of] == [team["id"]]

    detail = await call("getUserById", {"id": lead["id"]})
    assert [t["id"] for t in detail["createdTasks"]] == [task["id"]]
    assert [t["id"] for t in detail["teamsLed"]] == [team["id"]]


async def test_navigation_on_unknown_user_is_empty(call):
    assert await call("getUserTasks", {"id": 99}) == []
    assert await call("getUserTeams", {"id": 99}) == []
    assert await call("getUserTeamsLed", {"id": 99}) == []


async def test_delete_user_removes_assignments_and_memberships(call, board):
    b = await board()
    dev = b["dev"]
    await call("addTeamMember", {"teamId": b["team"]["id"], "userId": dev["id"]})

    deleted = await call("deleteUser", {"id": dev["id"]})
    assert deleted["id"] == dev["id"]
    assert "assignedTasks" not in deleted

    task = await call("getTaskById", {"id": b["task"]["id"]})
    assert task["assignees"] == []
    team = await call("getTeamById", {"id": b["team"]["id"]})
    assert [m["id"] for m in team["members"]] == [b["lead"]["id"]]
    with pytest.raises(NotFoundError):
        await call("getUserById", {"id": dev["id"]})


async def test_delete_user_blocked_while_referenced(call, board):
    b = await board()
    with pytest.raises(EntityReferenceError):
        await call("deleteUser", {"id": b["lead"]["id"]})
    assert (await call("getUserById", {"id": b["lead"]["id"]}))["id"] == b["lead"]["id"]


async def test_delete_comment_author_blocked(call, board):
    b = await board()
    await call("addComment", {"taskId": b["task"]["id"], "userId": b["dev"]["id"], "content": "on it"})
    with pytest.raises(EntityReferenceError):
        await call("deleteUser", {"id": b["dev"]["id"]})


async def test_delete_missing_user_not_found(call):
    with pytest.raises(NotFoundError):
        await call("deleteUser", {"id": 1})
