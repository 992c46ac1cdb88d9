from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path

import pytest

from csv2insert.config.loader import ConvertConfig
from csv2insert.logging.error_log import ErrorLogBuffer
from csv2insert.models.convert_result import ConvertFailure, ConvertSuccess
from csv2insert.models.processing_result import FileStatus
from csv2insert.services.batch import BatchError, convert_all, convert_file, scan_csv_files

FIXED_NOW = datetime(2026, 1, 15, 9, 30, 0)


def _config(root: Path, **kwargs) -> ConvertConfig:
    return ConvertConfig(
        source_directory=str(root / "data"),
        output_directory=str(root / "out"),
        **kwargs,
    )


def test_scan_csv_files_sorted_and_filtered(temp_workdir: Path):
    data = temp_workdir / "data"
    for name in ["b.csv", "a.csv", "notes.txt"]:
        (data / name).write_text("x", encoding="utf-8")
    (data / "sub.csv").mkdir()
    assert [p.name for p in scan_csv_files(data)] == ["a.csv", "b.csv"]
    assert [p.name for p in scan_csv_files(data, "*.txt")] == ["notes.txt"]


def test_scan_csv_files_errors(temp_workdir: Path):
    with pytest.raises(BatchError, match="directory not found"):
        scan_csv_files(temp_workdir / "missing")
    f = temp_workdir / "file.csv"
    f.write_text("x", encoding="utf-8")
    with pytest.raises(BatchError, match="not a directory"):
        scan_csv_files(f)


def test_convert_file_success(temp_workdir: Path, csv_files: list[Path]):
    result = convert_file(csv_files[0], _config(temp_workdir), lambda: FIXED_NOW)
    assert isinstance(result, ConvertSuccess)
    assert "-- input: users.csv" in result.sql_text


def test_convert_file_blank_file(temp_workdir: Path):
    f = temp_workdir / "data" / "blank.csv"
    f.write_text("\n\n", encoding="utf-8")
    result = convert_file(f, _config(temp_workdir))
    assert isinstance(result, ConvertFailure)
    assert result.errors[0].column_name == "#file"
    assert "CSV is empty" in result.errors[0].reason


def test_convert_file_undecodable(temp_workdir: Path):
    f = temp_workdir / "data" / "latin.csv"
    f.write_bytes("#table=t\n#types=text\nname\ncafé\n".encode("latin-1"))
    result = convert_file(f, _config(temp_workdir))
    assert isinstance(result, ConvertFailure)
    assert result.errors[0].column_name == "#file"
    assert "cannot read file (utf-8)" in result.errors[0].reason

    ok = convert_file(f, _config(temp_workdir, encoding="latin-1"), lambda: FIXED_NOW)
    assert isinstance(ok, ConvertSuccess)
    assert "'café'" in ok.sql_text


def test_convert_all_mixed(temp_workdir: Path, csv_files: list[Path]):
    buf = ErrorLogBuffer(logs_dir=temp_workdir / "logs")
    result = convert_all(_config(temp_workdir), clock=lambda: FIXED_NOW, error_log=buf)

    assert result.total_files == 2
    assert result.success_files == 1
    assert result.failed_files == 1
    assert result.total_rows == 2
    assert result.total_errors == 1

    by_name = {s.file_name: s for s in result.file_stats}
    assert by_name["users.csv"].status is FileStatus.SUCCESS
    assert by_name["users_broken.csv"].status is FileStatus.FAILED
    assert by_name["users_broken.csv"].output_file is None

    written = temp_workdir / "out" / "insert_users_20260115_093000.sql"
    assert Path(by_name["users.csv"].output_file) == written
    assert written.read_text(encoding="utf-8").count("INSERT INTO users") == 2

    [log] = list((temp_workdir / "logs").glob("errors-*.log"))
    records = [json.loads(line) for line in log.read_text(encoding="utf-8").splitlines()]
    assert [(r["file"], r["line"], r["column"], r["input"]) for r in records] == [
        ("users_broken.csv", 4, "id", "x"),
    ]


def test_convert_all_name_collision_gets_suffix(temp_workdir: Path, users_csv: str):
    data = temp_workdir / "data"
    (data / "a.csv").write_text(users_csv, encoding="utf-8")
    (data / "b.csv").write_text(users_csv, encoding="utf-8")
    result = convert_all(_config(temp_workdir), clock=lambda: FIXED_NOW)
    assert result.success_files == 2
    names = sorted(p.name for p in (temp_workdir / "out").iterdir())
    assert names == ["insert_users_20260115_093000.sql", "insert_users_20260115_093000_2.sql"]


def test_convert_all_explicit_files(temp_workdir: Path, csv_files: list[Path]):
    result = convert_all(_config(temp_workdir), files=[csv_files[0]], clock=lambda: FIXED_NOW)
    assert result.total_files == 1
    assert result.failed_files == 0
    assert not list((temp_workdir / "logs").glob("errors-*.log"))


def test_convert_all_missing_source_directory(temp_workdir: Path):
    cfg = ConvertConfig(source_directory=str(temp_workdir / "missing"), output_directory="out")
    with pytest.raises(BatchError):
        convert_all(cfg)


def test_convert_all_truncated_file_logs_marker(temp_workdir: Path):
    rows = "\n".join("x" for _ in range(5))
    (temp_workdir / "data" / "many.csv").write_text(f"#table=t\n#types=int\nid\n{rows}\n", encoding="utf-8")
    result = convert_all(_config(temp_workdir, max_errors=2), error_log=ErrorLogBuffer(temp_workdir / "logs"))
    assert result.total_errors == 2
    assert result.file_stats[0].truncated is True
    [log] = list((temp_workdir / "logs").glob("errors-*.log"))
    last = json.loads(log.read_text(encoding="utf-8").splitlines()[-1])
    assert last["type"] == "truncated"
