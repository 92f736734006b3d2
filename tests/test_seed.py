from taskboard.db.seed import seed_demo


async def test_seed_populates_empty_store_once(database, call):
    assert await seed_demo(database) is True

    users = await call("getUsers")
    assert [u["email"] for u in users] == ["ada@example.com", "grace@example.com"]

    tasks = await call("getTasks")
    assert len(tasks) == 1
    task = tasks[0]
    assert [a["email"] for a in task["assignees"]] == ["grace@example.com"]
    assert [t["name"] for t in task["tags"]] == ["feature"]
    assert [c["content"] for c in task["comments"]] == ["Welcome aboard!"]

    assert await seed_demo(database) is False
    assert len(await call("getUsers")) == 2
