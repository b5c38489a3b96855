"""Unit tests for shared utilities (osjs_cli.utils).

Tests cover:
- load_structured (JSON, YAML, error cases)
- save_json (async write, parent creation)
- Rich output helpers (smoke tests, markup escaping)
"""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from osjs_cli.utils import (
    console,
    load_structured,
    print_error,
    print_info,
    print_success,
    print_summary_table,
    print_task_header,
    print_warning,
    save_json,
)


class TestLoadStructured:
    @pytest.mark.unit
    def test_json(self, tmp_path: Path):
        path = tmp_path / "overrides.json"
        path.write_text('{"sourceMap": false}', encoding="utf-8")
        assert load_structured(path) == {"sourceMap": False}

    @pytest.mark.unit
    @pytest.mark.parametrize("suffix", [".yml", ".yaml", ".YML"])
    def test_yaml(self, tmp_path: Path, suffix: str):
        path = tmp_path / f"overrides{suffix}"
        path.write_text("minimize: true\nincludePaths:\n  - shared\n", encoding="utf-8")
        assert load_structured(path) == {"minimize": True, "includePaths": ["shared"]}

    @pytest.mark.unit
    def test_empty_yaml(self, tmp_path: Path):
        path = tmp_path / "empty.yml"
        path.write_text("", encoding="utf-8")
        assert load_structured(path) == {}

    @pytest.mark.unit
    def test_yaml_list_rejected(self, tmp_path: Path):
        path = tmp_path / "list.yaml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ValueError, match="must contain a mapping"):
            load_structured(path)

    @pytest.mark.unit
    def test_json_scalar_rejected(self, tmp_path: Path):
        path = tmp_path / "scalar.json"
        path.write_text("42", encoding="utf-8")
        with pytest.raises(ValueError):
            load_structured(path)

    @pytest.mark.unit
    def test_invalid_json(self, tmp_path: Path):
        path = tmp_path / "broken.json"
        path.write_text("{", encoding="utf-8")
        with pytest.raises(json.JSONDecodeError):
            load_structured(path)


class TestSaveJson:
    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_writes_pretty_json(self, tmp_path: Path):
        path = tmp_path / "out" / "webpack.json"
        await save_json({"b": 1, "a": [True]}, path)
        text = path.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert json.loads(text) == {"b": 1, "a": [True]}
        assert '  "b": 1' in text

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_non_json_values_stringified(self, tmp_path: Path):
        path = tmp_path / "paths.json"
        await save_json({"path": tmp_path}, path)
        assert json.loads(path.read_text(encoding="utf-8")) == {"path": str(tmp_path)}


class TestOutputHelpers:
    @pytest.mark.unit
    def test_messages_printed_verbatim(self):
        with console.capture() as capture:
            print_success("Wrote [bold]index.js")
            print_error("Error: value [type=missing]")
            print_warning("careful")
            print_info("working")
        output = capture.get()
        assert "Wrote [bold]index.js" in output
        assert "[type=missing]" in output
        assert "careful" in output
        assert "working" in output

    @pytest.mark.unit
    def test_task_header(self):
        with console.capture() as capture:
            print_task_header("config")
        assert "config" in capture.get()

    @pytest.mark.unit
    def test_summary_table(self):
        with console.capture() as capture:
            print_summary_table({"Rules": "5"}, title="Bundler configuration")
        output = capture.get()
        assert "Rules" in output
        assert "5" in output
