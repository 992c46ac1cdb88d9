# Shared pytest fixtures
from __future__ import annotations

import tempfile
from datetime import datetime
from pathlib import Path

import pytest

from csv2insert.logging.init import reset_logging

FIXED_NOW = datetime(2026, 1, 15, 9, 30, 0)


@pytest.fixture(autouse=True)
def _fresh_logging():
    # the stdout handler binds to sys.stdout at setup time; rebuild it per test so capsys sees it
    reset_logging()
    yield
    reset_logging()


@pytest.fixture()
def temp_workdir(monkeypatch) -> Path:
    with tempfile.TemporaryDirectory() as d:
        p = Path(d)
        (p / "config").mkdir()
        (p / "data").mkdir()
        (p / "logs").mkdir()
        monkeypatch.chdir(p)
        yield p


@pytest.fixture()
def sample_config_yaml() -> str:
    return """source_directory: ./data
output_directory: ./out
max_errors: 100
encoding: utf-8
timezone: UTC
"""


@pytest.fixture()
def write_config(temp_workdir: Path, sample_config_yaml: str) -> Path:
    cfg = temp_workdir / "config" / "convert.yml"
    cfg.write_text(sample_config_yaml, encoding="utf-8")
    return cfg


@pytest.fixture()
def fixed_clock():
    return lambda: FIXED_NOW


@pytest.fixture()
def users_csv() -> str:
    return (
        "#table=users\n"
        "#types=int,text,bool\n"
        "id,name,active\n"
        "1,Alice,true\n"
        "2,Bob,FALSE\n"
    )


@pytest.fixture()
def broken_csv() -> str:
    return (
        "#table=users\n"
        "#types=int,text\n"
        "id,name\n"
        "x,Alice\n"
    )


@pytest.fixture()
def csv_files(temp_workdir: Path, users_csv: str, broken_csv: str) -> list[Path]:
    good = temp_workdir / "data" / "users.csv"
    bad = temp_workdir / "data" / "users_broken.csv"
    good.write_text(users_csv, encoding="utf-8")
    bad.write_text(broken_csv, encoding="utf-8")
    return [good, bad]
