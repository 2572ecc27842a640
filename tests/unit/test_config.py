"""Tests for softcheck.config module."""

import pytest

from softcheck.config import SoftcheckConfig, find_pyproject, load_config


def write_pyproject(directory, body: str):
    path = directory / "pyproject.toml"
    path.write_text(body, encoding="utf-8")
    return path


def test_defaults_without_pyproject(tmp_path, monkeypatch):
    monkeypatch.setattr("softcheck.config.find_pyproject", lambda start=None: None)

    config = load_config(tmp_path)

    assert config == SoftcheckConfig()
    assert config.clear_known_failures_on_flush is True
    assert config.report_indent == 2


def test_defaults_without_table(tmp_path):
    write_pyproject(tmp_path, '[project]\nname = "demo"\n')
    assert load_config(tmp_path) == SoftcheckConfig()


def test_reads_tool_table(tmp_path):
    write_pyproject(
        tmp_path,
        "[tool.softcheck]\n"
        "clear_known_failures_on_flush = false\n"
        "report_indent = 4\n"
        'known_failures = ["legacyBug", "flakyCheck"]\n'
        'report_path = "reports/soft.json"\n',
    )

    config = load_config(tmp_path)

    assert config.clear_known_failures_on_flush is False
    assert config.report_indent == 4
    assert config.known_failures == ["legacyBug", "flakyCheck"]
    assert config.report_path == "reports/soft.json"


def test_searches_parent_directories(tmp_path):
    path = write_pyproject(tmp_path, "[tool.softcheck]\nlog_pass_messages = false\n")
    nested = tmp_path / "a" / "b"
    nested.mkdir(parents=True)

    assert find_pyproject(nested) == path
    assert load_config(nested).log_pass_messages is False


def test_unknown_keys_rejected(tmp_path):
    write_pyproject(tmp_path, "[tool.softcheck]\nclear_on_flush = true\n")

    with pytest.raises(ValueError, match="Invalid \\[tool.softcheck\\]"):
        load_config(tmp_path)


def test_negative_indent_rejected(tmp_path):
    write_pyproject(tmp_path, "[tool.softcheck]\nreport_indent = -1\n")

    with pytest.raises(ValueError):
        load_config(tmp_path)
