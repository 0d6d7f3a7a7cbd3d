"""Schema management against the SQLite overlay of domain.toml.

`manage.py` runs in a child interpreter so the overlay is selected through
``PROTEAN_ENV`` before the domain is configured, leaving this session's
in-memory domain untouched.
"""

import os
import subprocess
import sys
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect

SRC = Path(__file__).resolve().parents[3] / "src"


def _manage(command: str, db_path: Path) -> subprocess.CompletedProcess:
    env = {
        **os.environ,
        "PROTEAN_ENV": "sqlite",
        "SHIPPING_SQLITE_PATH": str(db_path),
        "PYTHONPATH": str(SRC),
    }
    return subprocess.run(
        [sys.executable, str(SRC / "manage.py"), command],
        cwd=db_path.parent,
        env=env,
        capture_output=True,
        text=True,
        timeout=120,
    )


def _tables(db_path: Path) -> set[str]:
    engine = create_engine(f"sqlite:///{db_path}")
    try:
        return set(inspect(engine).get_table_names())
    finally:
        engine.dispose()


@pytest.fixture()
def db_path(tmp_path):
    return tmp_path / "shipping.db"


class TestSetupDb:
    def test_creates_tables_for_every_aggregate(self, db_path):
        result = _manage("setup-db", db_path)

        assert result.returncode == 0, result.stderr
        assert {"shipment", "driver", "user_profile"} <= _tables(db_path)

    def test_drop_db_removes_the_tables(self, db_path):
        assert _manage("setup-db", db_path).returncode == 0

        result = _manage("drop-db", db_path)

        assert result.returncode == 0, result.stderr
        assert not {"shipment", "driver", "user_profile"} & _tables(db_path)
