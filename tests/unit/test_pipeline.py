from __future__ import annotations

from datetime import datetime

import pytest

from csv2insert import ConvertFailure, ConvertRequest, ConvertSuccess, convert
from csv2insert.services.pipeline import build_output_file_name

FIXED_NOW = datetime(2026, 1, 15, 9, 30, 0)


def _convert(text: str, **kwargs):
    return convert(ConvertRequest(csv_text=text, input_file_name="input.csv"), clock=lambda: FIXED_NOW, **kwargs)


def test_all_types_end_to_end():
    text = (
        "#table=users\n"
        "#types=int,text,bool,date,timestamp,uuid\n"
        "id,name,is_active,birthday,created_at,user_uuid\n"
        "1,Alice,true,1990-01-02,2026-01-05 10:00:00,550e8400-e29b-41d4-a716-446655440000\n"
    )
    result = _convert(text)
    assert isinstance(result, ConvertSuccess)
    assert result.ok
    assert "BEGIN;" in result.sql_text
    assert "COMMIT;" in result.sql_text
    assert (
        "INSERT INTO users (id, name, is_active, birthday, created_at, user_uuid) VALUES "
        "(1, 'Alice', TRUE, '1990-01-02', '2026-01-05 10:00:00', '550e8400-e29b-41d4-a716-446655440000');"
    ) in result.sql_text
    assert result.output_file_name == "insert_users_20260115_093000.sql"
    assert result.generated_at == FIXED_NOW
    assert result.row_count == 1


def test_type_error_reports_cell():
    result = _convert("#table=users\n#types=int\nid\nabc\n")
    assert isinstance(result, ConvertFailure)
    assert not result.ok
    assert any(e.type_id == "int" and e.input_text == "abc" for e in result.errors)


def test_misspelled_table_prefix_produces_no_sql():
    result = _convert("#tables=users\n#types=int\nid\n1\n")
    assert isinstance(result, ConvertFailure)
    assert result.errors[0].column_name == "#table"
    assert not hasattr(result, "sql_text")


def test_bom_is_tolerated():
    result = _convert("\ufeff#table=users\n#types=int\nid\n1\n")
    assert isinstance(result, ConvertSuccess)


def test_keywords_and_empty_string_end_to_end():
    text = '#table=t\n#types=int,text,text\nid,a,b\nDEFAULT,NULL,""""""\n,O\'Reilly,\n'
    result = _convert(text)
    assert isinstance(result, ConvertSuccess)
    assert "VALUES (DEFAULT, NULL, '');" in result.sql_text
    assert "VALUES (NULL, 'O''Reilly', NULL);" in result.sql_text


def test_empty_string_token_in_int_column_fails():
    result = _convert('#table=t\n#types=int\nid\n""""""\n')
    assert isinstance(result, ConvertFailure)
    assert result.errors[0].type_id == "int"
    assert result.errors[0].input_text == '""'


def test_first_failing_stage_ends_the_run():
    # parse errors only: the bad int value on line 4 is never type-checked
    result = _convert("#table=t\n#types=int\nid\nabc\n1,2\n")
    assert isinstance(result, ConvertFailure)
    assert [e.column_name for e in result.errors] == ["#data"]

    # tokenize errors only: 'x' in the second column is never type-checked
    result = _convert('#table=t\n#types=int,int\na,b\n"""""",x\n')
    assert isinstance(result, ConvertFailure)
    assert [(e.column_name, e.input_text) for e in result.errors] == [("a", '""')]


def test_max_errors_caps_the_run():
    rows = "\n".join("x" for _ in range(10))
    result = _convert(f"#table=t\n#types=int\nid\n{rows}\n", max_errors=3)
    assert isinstance(result, ConvertFailure)
    assert len(result.errors) == 3
    assert result.truncated is True


def test_same_input_same_clock_is_byte_identical(users_csv: str):
    first = _convert(users_csv)
    second = _convert(users_csv)
    assert isinstance(first, ConvertSuccess)
    assert first.sql_text == second.sql_text
    assert first.output_file_name == second.output_file_name


def test_unexpected_exception_becomes_system_error(monkeypatch, users_csv: str):
    def boom(*args, **kwargs):
        raise RuntimeError("boom")

    monkeypatch.setattr("csv2insert.services.pipeline.generate_insert_sql", boom)
    result = _convert(users_csv)
    assert isinstance(result, ConvertFailure)
    [err] = result.errors
    assert err.file_line == 0
    assert err.column_name == "(system)"
    assert err.type_id == "(system)"
    assert err.input_text == ""
    assert err.reason == "unexpected error: RuntimeError - boom"
    assert result.truncated is False


def test_to_dict_views(users_csv: str):
    ok = _convert(users_csv).to_dict()
    assert ok["ok"] is True
    assert ok["generated_at"] == "2026-01-15 09:30:00"
    assert ok["rows"] == 2
    assert ok["sql"].startswith("-- csv-to-insert-generator\n")

    failed = _convert("#table=t\n#types=int\nid\nabc\n").to_dict()
    assert failed == {
        "ok": False,
        "errors": [{
            "line": 4,
            "column": "id",
            "type": "int",
            "input": "abc",
            "reason": "cannot be read as int (e.g. 0, 123, -10; 32-bit range)",
        }],
        "truncated": False,
    }


@pytest.mark.parametrize("text", ["", "   \n"])
def test_blank_request_is_rejected(text: str):
    with pytest.raises(ValueError):
        ConvertRequest(csv_text=text, input_file_name="x.csv")


@pytest.mark.parametrize("name,expected", [
    ("users", "insert_users_20260115_093000.sql"),
    ("  users  ", "insert_users_20260115_093000.sql"),
    ("my table/1", "insert_my_table_1_20260115_093000.sql"),
    ("a-b", "insert_a-b_20260115_093000.sql"),
    ("", "insert_table_20260115_093000.sql"),
    (None, "insert_table_20260115_093000.sql"),
])
def test_build_output_file_name(name, expected: str):
    assert build_output_file_name(name, FIXED_NOW) == expected


def test_large_text_cell_end_to_end():
    body = "x" * 200_000
    result = _convert(f"#table=docs\n#types=int,text\nid,body\n1,{body}\n")
    assert isinstance(result, ConvertSuccess)
    assert f"VALUES (1, '{body}');" in result.sql_text
