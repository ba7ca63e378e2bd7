"""Tests for genpreview.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from genpreview import constants
from genpreview.config import ConfigError, PreviewConfig, load_config


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, PreviewConfig)
    assert config.root == tmp_path.resolve()
    assert config.workers is None
    assert config.extraction.min_body_chars == constants.MIN_BODY_CHARS
    assert config.extraction.max_placeholder_ratio == constants.MAX_PLACEHOLDER_RATIO
    assert config.extraction.stylesheet_url == constants.UTILITY_STYLESHEET_URL
    assert config.routing.roots == ["app", "src/app"]
    assert config.routing.entry_filenames == ["page.tsx", "page.jsx", "page.js"]


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    config_file = tmp_path / ".genpreview.yml"
    config_file.write_text(
        """
extraction:
  min_body_chars: 40
  max_placeholder_ratio: 0.25
  min_visible_text_chars: "5"
  max_fallback_copy: 8
  stylesheet_url: "https://cdn.example/tw.js"
routing:
  roots: ["/app/"]
  entry_filenames: page.tsx
  shared_stylesheets:
    - "main.css"
workers: 4
""",
        encoding="utf-8",
    )

    config = load_config(config_file)

    assert config.extraction.min_body_chars == 40
    assert config.extraction.max_placeholder_ratio == 0.25
    assert config.extraction.min_visible_text_chars == 5
    assert config.extraction.max_fallback_copy == 8
    assert config.extraction.stylesheet_url == "https://cdn.example/tw.js"
    assert config.routing.roots == ["app"]
    assert config.routing.entry_filenames == ["page.tsx"]
    assert config.routing.shared_stylesheets == ["main.css"]
    assert config.workers == 4


def test_load_config_ignores_out_of_range_values(tmp_path: Path) -> None:
    (tmp_path / ".genpreview.yml").write_text(
        """
extraction:
  min_body_chars: -1
  max_placeholder_ratio: 3
  max_fallback_copy: true
workers: 0
""",
        encoding="utf-8",
    )

    config = load_config(tmp_path)

    assert config.extraction.min_body_chars == constants.MIN_BODY_CHARS
    assert config.extraction.max_placeholder_ratio == constants.MAX_PLACEHOLDER_RATIO
    assert config.extraction.max_fallback_copy == constants.MAX_FALLBACK_COPY
    assert config.workers is None


def test_load_config_accepts_empty_file(tmp_path: Path) -> None:
    (tmp_path / ".genpreview.yml").write_text("\n", encoding="utf-8")

    assert load_config(tmp_path).workers is None


def test_load_config_rejects_invalid_yaml(tmp_path: Path) -> None:
    (tmp_path / ".genpreview.yml").write_text("extraction: [unclosed\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)


def test_load_config_rejects_non_mapping_root(tmp_path: Path) -> None:
    (tmp_path / ".genpreview.yml").write_text("- just\n- a list\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_config(tmp_path)
