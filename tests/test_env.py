"""Tests for the ``.env`` loader."""

import os
from pathlib import Path

import pytest

from segmento.common.env import load_env


def test_load_env_applies_missing_keys(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    env_file = tmp_path / ".env"
    env_file.write_text(
        "# comment\n"
        "SEGMENTO_TEST_A=1\n"
        "export SEGMENTO_TEST_B='quoted value'\n"
        "SEGMENTO_TEST_C=from-file\n"
        "not a pair\n",
        encoding="utf-8",
    )
    for key in ("SEGMENTO_TEST_A", "SEGMENTO_TEST_B"):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("SEGMENTO_TEST_C", "from-env")

    applied = load_env(env_file)

    assert applied == {"SEGMENTO_TEST_A": "1", "SEGMENTO_TEST_B": "quoted value"}
    assert os.environ["SEGMENTO_TEST_C"] == "from-env"
    for key in applied:
        monkeypatch.delenv(key)


def test_load_env_missing_file(tmp_path: Path) -> None:
    assert load_env(tmp_path / "absent.env") == {}
