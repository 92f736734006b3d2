from typing import List

import pytest
from sqlalchemy import text

from taskboard.api.procedures import ProcedureKind, ProcedureRouter
from taskboard.api.routes import app_router
from taskboard.core.errors import ProcedureNotFoundError, StoreError, ValidationError
from taskboard.schemas.common import IdInput

QUERIES = {
    "getUsers", "getUserById", "getUserTasks", "getUserTeamsLed", "getUserTeams",
    "getTasks", "getTaskById", "getTaskComments", "getTasksByStatus", "getTasksByPriority", "getTasksByTeam",
    "getTeams", "getTeamById",
    "getTags", "getTagById", "getTasksByTag",
}
MUTATIONS = {
    "addUser", "updateUser", "deleteUser",
    "createTask", "updateTask", "deleteTask", "updateTaskStatus", "addComment",
    "createTeam", "updateTeam", "deleteTeam", "addTeamMember", "removeTeamMember",
    "createTag", "updateTag", "deleteTag",
}


def test_namespace_lists_every_procedure_with_its_kind():
    described = {item["name"]: item["kind"] for item in app_router.describe()}
    assert described == {**{n: "query" for n in QUERIES}, **{n: "mutation" for n in MUTATIONS}}
    assert [item["name"] for item in app_router.describe()] == sorted(described)


def test_include_router_rejects_duplicate_names():
    first, second = ProcedureRouter("first"), ProcedureRouter("second")

    @first.query("ping", output=str)
    async def ping_one(session, _):
        return "one"

    @second.query("ping", output=str)
    async def ping_two(session, _):
        return "two"

    combined = ProcedureRouter()
    combined.include_router(first)
    with pytest.raises(ValueError):
        combined.include_router(second)
    assert "ping" in combined
    assert combined.get("ping").kind is ProcedureKind.QUERY


def test_registering_the_same_name_twice_fails():
    router = ProcedureRouter("dup")

    @router.mutation("touch", output=int)
    async def touch(session, _):
        return 1

    with pytest.raises(ValueError):
        router.mutation("touch", output=int)(touch)


async def test_unknown_procedure(database):
    with pytest.raises(ProcedureNotFoundError) as exc_info:
        await app_router.call(database, "getEverything")
    assert exc_info.value.name == "getEverything"


@pytest.mark.parametrize("raw", [None, {}])
async def test_list_procedures_accept_absent_input(call, raw):
    assert await call("getTeams", raw) == []


async def test_list_procedure_rejects_unexpected_input(call):
    with pytest.raises(ValidationError):
        await call("getTags", {"id": 1})


async def test_missing_input_reports_field_paths(call):
    with pytest.raises(ValidationError) as exc_info:
        await call("getTaskById", None)
    assert exc_info.value.fields == ["id"]
    assert exc_info.value.details["errors"][0]["type"] == "missing"


async def test_non_object_input_is_a_validation_error(call):
    with pytest.raises(ValidationError):
        await call("getTaskById", [1])


async def test_store_failure_maps_to_store_error(database):
    router = ProcedureRouter("broken")

    @router.query("readMissingTable", input=IdInput, output=List[int])
    async def read_missing_table(session, payload):
        res = await session.execute(text("SELECT id FROM no_such_table WHERE id = :id"), {"id": payload.id})
        return list(res.scalars())

    with pytest.raises(StoreError):
        await router.call(database, "readMissingTable", {"id": 1})
