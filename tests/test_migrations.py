from alembic import command
from sqlalchemy import create_engine, inspect

from taskboard.db.base import Base
from taskboard.db.run_migrations import build_config


def test_upgrade_creates_mapped_tables_and_downgrade_removes_them(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    cfg = build_config(url)

    command.upgrade(cfg, "head")
    engine = create_engine(url)
    try:
        tables = set(inspect(engine).get_table_names())
        assert set(Base.metadata.tables) <= tables
        user_columns = {c["name"] for c in inspect(engine).get_columns("users")}
        assert {"email", "name", "role", "department", "avatar", "preferences"} <= user_columns
    finally:
        engine.dispose()

    command.downgrade(cfg, "base")
    engine = create_engine(url)
    try:
        assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    finally:
        engine.dispose()
