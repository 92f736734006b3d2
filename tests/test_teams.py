import pytest

from taskboard.core.errors import EntityReferenceError, NotFoundError, ValidationError


async def test_create_team_include_set(call, board):
    b = await board()
    team = await call("getTeamById", {"id": b["team"]["id"]})
    assert team["name"] == "Core"
    assert team["leadId"] == b["lead"]["id"]
    assert team["lead"]["email"] == "lead@example.com"
    assert [m["id"] for m in team["members"]] == [b["lead"]["id"]]
    assert [t["id"] for t in team["tasks"]] == [b["task"]["id"]]
    assert [a["id"] for a in team["tasks"][0]["assignees"]] == [b["dev"]["id"]]
    assert team["tasks"][0]["tags"] == []


async def test_create_team_validation_and_references(call):
    lead = await call("addUser", {"email": "a@x.com", "name": "Ann", "role": "eng"})
    with pytest.raises(ValidationError):
        await call("createTeam", {"name": "", "leadId": lead["id"]})
    with pytest.raises(ValidationError):
        await call("createTeam", {"name": "No lead"})
    with pytest.raises(EntityReferenceError) as exc_info:
        await call("createTeam", {"name": "Ghost", "leadId": 404})
    assert exc_info.value.field == "leadId"
    with pytest.raises(EntityReferenceError) as exc_info:
        await call("createTeam", {"name": "Ghosts", "leadId": lead["id"], "memberIds": [lead["id"], 8, 9]})
    assert exc_info.value.ids == [8, 9]
    assert await call("getTeams") == []


async def test_get_team_by_id_not_found(call):
    with pytest.raises(NotFoundError) as exc_info:
        await call("getTeamById", {"id": 1})
    assert exc_info.value.entity == "Team"


async def test_update_team_replaces_members_and_lead(call, board):
    b = await board()
    team_id = b["team"]["id"]
    updated = await call(
        "updateTeam", {"id": team_id, "name": "Core Platform", "leadId": b["dev"]["id"], "memberIds": [b["dev"]["id"]]}
    )
    assert updated["name"] == "Core Platform"
    assert updated["lead"]["id"] == b["dev"]["id"]
    assert [m["id"] for m in updated["members"]] == [b["dev"]["id"]]

    emptied = await call("updateTeam", {"id": team_id, "memberIds": []})
    assert emptied["members"] == []
    assert emptied["name"] == "Core Platform"


async def test_update_team_null_lead_rejected(call, board):
    b = await board()
    with pytest.raises(ValidationError):
        await call("updateTeam", {"id": b["team"]["id"], "leadId": None})


async def test_membership_add_and_remove(call, board):
    b = await board()
    team_id, dev_id = b["team"]["id"], b["dev"]["id"]
    assert await call("getUserTeams", {"id": dev_id}) == []

    team = await call("addTeamMember", {"teamId": team_id, "userId": dev_id})
    assert [m["id"] for m in team["members"]] == [b["lead"]["id"], dev_id]
    assert [t["id"] for t in await call("getUserTeams", {"id": dev_id})] == [team_id]

    again = await call("addTeamMember", {"teamId": team_id, "userId": dev_id})
    assert [m["id"] for m in again["members"]] == [b["lead"]["id"], dev_id]

    team = await call("removeTeamMember", {"teamId": team_id, "userId": dev_id})
    assert [m["id"] for m in team["members"]] == [b["lead"]["id"]]
    assert await call("getUserTeams", {"id": dev_id}) == []

    # removing a non-member is a no-op
    team = await call("removeTeamMember", {"teamId": team_id, "userId": dev_id})
    assert [m["id"] for m in team["members"]] == [b["lead"]["id"]]


async def test_membership_unknown_ids(call, board):
    b = await board()
    with pytest.raises(EntityReferenceError) as exc_info:
        await call("addTeamMember", {"teamId": 77, "userId": b["dev"]["id"]})
    assert exc_info.value.field == "teamId"
    with pytest.raises(EntityReferenceError) as exc_info:
        await call("addTeamMember", {"teamId": b["team"]["id"], "userId": 77})
    assert exc_info.value.field == "userId"
    with pytest.raises(EntityReferenceError):
        await call("removeTeamMember", {"teamId": b["team"]["id"], "userId": 77})


async def test_delete_team_blocked_while_it_owns_tasks(call, board):
    b = await board()
    with pytest.raises(EntityReferenceError):
        await call("deleteTeam", {"id": b["team"]["id"]})

    await call("deleteTask", {"id": b["task"]["id"]})
    deleted = await call("deleteTeam", {"id": b["team"]["id"]})
    assert deleted["id"] == b["team"]["id"]
    assert "members" not in deleted
    assert await call("getUserTeams", {"id": b["lead"]["id"]}) == []
    with pytest.raises(NotFoundError):
        await call("getTeamById", {"id": b["team"]["id"]})


async def test_delete_missing_team_not_found(call):
    with pytest.raises(NotFoundError):
        await call("deleteTeam", {"id": 3})
