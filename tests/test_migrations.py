from pathlib import Path

from alembic import command
from alembic.config import Config
from sqlalchemy import create_engine, inspect, text

ROOT = Path(__file__).resolve().parent.parent


def alembic_config(url: str) -> Config:
    config = Config(str(ROOT / "alembic.ini"))
    config.set_main_option("sqlalchemy.url", url)
    config.attributes["configure_logger"] = False
    return config


def test_upgrade_creates_schema_and_permissions(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"

    command.upgrade(alembic_config(url), "head")

    engine = create_engine(url)
    tables = set(inspect(engine).get_table_names())
    assert {
        "users",
        "tokens",
        "permissions",
        "users_permissions",
        "movies",
        "module_info",
        "department_info",
    } <= tables

    with engine.connect() as conn:
        codes = {row[0] for row in conn.execute(text("SELECT code FROM permissions"))}
    assert codes == {
        "movies:read",
        "movies:write",
        "modules:read",
        "modules:write",
        "departments:read",
        "departments:write",
    }
    engine.dispose()


def test_downgrade_drops_everything(tmp_path):
    url = f"sqlite:///{tmp_path / 'migrated.db'}"
    config = alembic_config(url)

    command.upgrade(config, "head")
    command.downgrade(config, "base")

    engine = create_engine(url)
    assert set(inspect(engine).get_table_names()) <= {"alembic_version"}
    engine.dispose()
