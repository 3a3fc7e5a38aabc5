from pathlib import Path

import pytest

import config
from db import database
from db.database import transaction
from utils.users import register

TEST_SECRET = "test-secret"
TEST_OWNER = "SP-OPERATOR"


def _write_test_config(config_path: Path) -> None:
    config_path.write_text(
        "\n".join(
            [
                "[ledger]",
                f"owner = \"{TEST_OWNER}\"",
                "",
                "[auth]",
                f"secret = \"{TEST_SECRET}\"",
                "token_minutes = 5",
                "",
                "[logging]",
                "level = \"DEBUG\"",
            ]
        ),
        encoding="utf-8",
    )


@pytest.fixture
def ledger_dir(tmp_path, monkeypatch):
    for name in ("LEDGER_OWNER", "LEDGER_AUTH_SECRET", "LEDGER_TOKEN_MINUTES", "LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)
    config_dir = tmp_path / ".milestoneledger"
    config_dir.mkdir()
    config_path = config_dir / "config.toml"
    _write_test_config(config_path)

    monkeypatch.setattr(config, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(config, "CONFIG_PATH", config_path)
    monkeypatch.setattr(database, "CONFIG_DIR", config_dir)
    monkeypatch.setattr(database, "DB_PATH", config_dir / "ledger.db")
    database.init_db()
    return config_dir


@pytest.fixture
def conn(ledger_dir):
    with database.get_conn() as connection:
        yield connection


class Ledger:
    """Runs core operations the way the HTTP layer does: one transaction each."""

    def __init__(self, conn):
        self.conn = conn
        self.height = 0

    def __call__(self, operation, *args, **kwargs):
        self.height += 1
        with transaction(self.conn):
            return operation(self.conn, *args, height=self.height, **kwargs)


@pytest.fixture
def ledger(conn):
    return Ledger(conn)


@pytest.fixture
def family(ledger):
    """Alice (parent), Bob (child), Erin (educator), Ada (admin)."""
    ledger(register, "alice", "Alice", 2)
    ledger(register, "bob", "Bob", 4)
    ledger(register, "erin", "Erin", 3)
    ledger(register, "ada", "Ada", 1)
    return ledger


@pytest.fixture
def owner():
    return TEST_OWNER
