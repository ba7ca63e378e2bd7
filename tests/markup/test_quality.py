"""Tests for the converted-body quality gate."""

from __future__ import annotations

from genpreview.config import ExtractionConfig
from genpreview.markup.quality import assess_body, visible_text


def test_accepts_small_but_meaningful_body() -> None:
    report = assess_body('<div class="a"><h1>Hi</h1></div>')

    assert report.accepted is True
    assert report.reason is None
    assert report.visible_chars == 2


def test_rejects_short_body() -> None:
    report = assess_body("<div>Test</div>")

    assert report.accepted is False
    assert report.reason == "too_short"


def test_rejects_json_fragments() -> None:
    report = assess_body('<div>"projectName": "Shop", "files": [</div>')

    assert report.reason == "json_fragment"


def test_rejects_literal_escape_sequences() -> None:
    report = assess_body("<div><p>line one\\nline two</p></div>")

    assert report.reason == "escape_sequences"


def test_rejects_placeholder_heavy_body() -> None:
    report = assess_body("<div><!-- dynamic content --><p>Hi</p></div>")

    assert report.reason == "placeholder_heavy"
    assert report.placeholder_ratio > 0.5


def test_rejects_body_without_visible_text() -> None:
    assert assess_body('<div class="grid"><img src="/a.png"></div>').reason == "no_visible_text"


def test_reports_placeholder_only_bodies() -> None:
    body = '<section class="container mx-auto px-4"><!-- dynamic content --></section>'

    assert assess_body(body).reason == "only_placeholders"


def test_thresholds_are_configurable() -> None:
    settings = ExtractionConfig(min_body_chars=5)

    assert assess_body("<div>Test</div>", settings).accepted is True


def test_visible_text_strips_tags_comments_and_entities() -> None:
    assert visible_text("<p>Fish &amp; chips</p><!-- dynamic content --> <b>now</b>") == (
        "Fish & chips now"
    )
