"""CLI parser and command behaviour tests."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from genpreview.cli import _build_parser, main
from tests._fixtures.envelope_builder import EnvelopeBuilder

HOME = "export default function Home() { return <main><h1>Welcome to Acme</h1></main> }\n"


def test_cli_accepts_verbose_before_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["--verbose", "recover", "out.txt"])
    assert args.verbose is True
    assert args.command == "recover"


def test_cli_accepts_verbose_after_command() -> None:
    parser = _build_parser()
    args = parser.parse_args(["recover", "out.txt", "--verbose"])
    assert args.verbose is True
    assert args.file == "out.txt"


def test_cli_pages_requires_out_dir() -> None:
    parser = _build_parser()
    with pytest.raises(SystemExit):
        parser.parse_args(["pages", "out.txt"])

    args = parser.parse_args(["pages", "out.txt", "--out-dir", "site", "--workers", "3"])
    assert args.out_dir == "site"
    assert args.workers == 3


def test_cli_serve_defaults() -> None:
    args = _build_parser().parse_args(["serve"])
    assert args.host == "127.0.0.1"
    assert args.port == 8000


def test_recover_command_prints_summary(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
    envelope_builder: EnvelopeBuilder,
) -> None:
    monkeypatch.chdir(tmp_path)
    envelope_builder.write({"app/page.tsx": HOME, "app/globals.css": "body {}\n"})
    source = tmp_path / "output.txt"
    source.write_text(envelope_builder.text(fenced=True), encoding="utf-8")

    main(["recover", str(source)])

    out = capsys.readouterr().out
    assert "Test Project (website, 2 files)" in out
    assert "app/page.tsx [markup]" in out


def test_recover_command_prints_json(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    capsys: pytest.CaptureFixture[str],
) -> None:
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "output.txt"
    source.write_text(
        '{"projectName": "Demo", "files": [{"path": "a.md", "content": "x"},{"path": "b', encoding="utf-8"
    )

    main(["recover", str(source), "--json"])

    data = json.loads(capsys.readouterr().out)
    assert data["projectName"] == "Demo"
    assert data["files"] == [{"path": "a.md", "content": "x"}]


def test_recover_command_exits_on_unrecoverable_input(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.chdir(tmp_path)
    source = tmp_path / "output.txt"
    source.write_text("", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["recover", str(source)])

    assert excinfo.value.code == 1


def test_pages_command_writes_documents_and_index(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    envelope_builder: EnvelopeBuilder,
) -> None:
    monkeypatch.chdir(tmp_path)
    envelope_builder.write(
        {
            "app/page.tsx": HOME,
            "app/about/page.tsx": "export default function About() { return <div><h1>About Us</h1></div> }",
        }
    )
    source = tmp_path / "output.txt"
    source.write_text(envelope_builder.text(), encoding="utf-8")

    main(["pages", str(source), "--out-dir", "site"])

    site = tmp_path / "site"
    assert (site / "home.html").read_text(encoding="utf-8").startswith("<!DOCTYPE html>")
    assert "About Us" in (site / "about.html").read_text(encoding="utf-8")
    index = json.loads((site / "pages.json").read_text(encoding="utf-8"))
    assert index["project"] == "Test Project"
    assert [page["slug"] for page in index["pages"]] == ["home", "about"]


def test_pages_command_writes_overview_without_routes(
    tmp_path: Path,
    monkeypatch: pytest.MonkeyPatch,
    envelope_builder: EnvelopeBuilder,
) -> None:
    monkeypatch.chdir(tmp_path)
    envelope_builder.write({"main.py": "print('hi')\n"})
    source = tmp_path / "output.txt"
    source.write_text(envelope_builder.text(), encoding="utf-8")

    main(["pages", str(source), "--out-dir", "site"])

    assert "main.py" in (tmp_path / "site" / "overview.html").read_text(encoding="utf-8")
    index = json.loads((tmp_path / "site" / "pages.json").read_text(encoding="utf-8"))
    assert index["pages"] == []


def test_invalid_config_exits(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".genpreview.yml").write_text("- nope\n", encoding="utf-8")

    with pytest.raises(SystemExit) as excinfo:
        main(["recover", "missing.txt"])

    assert excinfo.value.code == 1
