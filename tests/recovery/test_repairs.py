"""Tests for the targeted envelope repairs."""

from __future__ import annotations

import json

from genpreview.recovery.repairs import (
    apply_substitutions,
    close_at_last_separator,
    close_truncated,
    repair_document,
    repair_escapes,
    scan_structure,
)


def test_repair_escapes_drops_backslash_before_apostrophe() -> None:
    assert repair_escapes(r'{"content": "it\'s"}') == """{"content": "it's"}"""


def test_repair_escapes_doubles_unknown_escape() -> None:
    repaired = repair_escapes(r'{"pattern": "\d+\.\w"}')

    assert json.loads(repaired) == {"pattern": r"\d+\.\w"}


def test_repair_escapes_keeps_valid_escapes() -> None:
    text = r'{"a": "line\nnext \"quoted\" \\ \u00e9 \/"}'

    assert repair_escapes(text) == text


def test_repair_escapes_rejects_short_unicode_escape() -> None:
    repaired = repair_escapes(r'{"path": "C:\users"}')

    assert json.loads(repaired) == {"path": r"C:\users"}


def test_repair_escapes_escapes_raw_control_characters() -> None:
    repaired = repair_escapes('{"a": "x\ny\tz"}')

    assert repaired == '{"a": "x\\ny\\tz"}'
    assert json.loads(repaired) == {"a": "x\ny\tz"}


def test_repair_escapes_ignores_text_outside_strings() -> None:
    text = '{\n  "a": 1\n}'

    assert repair_escapes(text) == text


def test_close_truncated_cuts_after_last_complete_file() -> None:
    text = '{"projectName": "x", "files": [{"path": "a", "content": "x"}, {"path": "b", "cont'

    closed = close_truncated(text)

    assert closed == '{"projectName": "x", "files": [{"path": "a", "content": "x"},]}'
    assert json.loads(apply_substitutions(closed))["files"] == [{"path": "a", "content": "x"}]


def test_close_truncated_empties_files_when_no_record_completed() -> None:
    text = '{"projectName": "x", "files": [{"path": "a", "con'

    assert close_truncated(text) == '{"projectName": "x", "files": []}'


def test_close_truncated_closes_open_string_and_containers() -> None:
    assert close_truncated('{"projectName": "x", "description": "abc') == (
        '{"projectName": "x", "description": "abc"}'
    )
    assert close_truncated('{"a": [1, 2, {"b": 3') == '{"a": [1, 2, {"b": 3}]}'


def test_close_truncated_is_noop_on_balanced_text() -> None:
    text = '{"files": [{"path": "a", "content": "{["}]}'

    assert close_truncated(text) == text


def test_scan_structure_tracks_files_array() -> None:
    report = scan_structure('{"name": "x", "files": [{"path": "a"}, {"pa')

    assert report.truncated is True
    assert report.files_open is True
    assert report.files_array_start == len('{"name": "x", "files": [')


def test_close_at_last_separator_drops_partial_member() -> None:
    text = '{"projectName": "x", "description": "abc", "dependencies": {"react": "18'

    closed = close_at_last_separator(text)

    assert json.loads(closed) == {"projectName": "x", "description": "abc"}


def test_apply_substitutions_removes_trailing_commas() -> None:
    assert json.loads(apply_substitutions('{"a": [1, 2,], }')) == {"a": [1, 2]}


def test_apply_substitutions_inserts_missing_commas() -> None:
    assert json.loads(apply_substitutions('[{"a": 1} {"b": 2}]')) == [{"a": 1}, {"b": 2}]
    assert json.loads(apply_substitutions('{"a": "x"\n"b": "y"}')) == {"a": "x", "b": "y"}


def test_apply_substitutions_keeps_inner_pair_of_double_colon() -> None:
    assert apply_substitutions('{"file": "path": "a.txt"}') == '{"path": "a.txt"}'


def test_apply_substitutions_never_touches_string_contents() -> None:
    repaired = apply_substitutions('{"a": "x,}", "b": [1,]}')

    assert json.loads(repaired) == {"a": "x,}", "b": [1]}


def test_repairs_are_noop_on_valid_documents() -> None:
    text = json.dumps(
        {
            "projectName": "Shop",
            "files": [{"path": "app/page.tsx", "content": 'const a = "\\d";\n'}],
        },
        indent=2,
    )

    assert repair_document(text) == text
