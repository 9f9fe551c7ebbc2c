"""Tests for wiki root discovery in kbwiki.config."""

import logging
from pathlib import Path

import pytest

from kbwiki.config import (
    ConfigurationError,
    _discover_project_config,
    get_templates_root,
    get_wiki_root,
)
from kbwiki.errors import ErrorCode


@pytest.fixture
def clean_env(monkeypatch):
    monkeypatch.delenv("KBWIKI_ROOT", raising=False)
    monkeypatch.delenv("KBWIKI_TEMPLATES_ROOT", raising=False)
    return monkeypatch


class TestGetWikiRoot:
    def test_env_var_wins(self, clean_env, tmp_path: Path):
        clean_env.setenv("KBWIKI_ROOT", str(tmp_path / "wiki"))
        assert get_wiki_root() == tmp_path / "wiki"

    def test_kbconfig_walk_up(self, clean_env, tmp_path: Path):
        (tmp_path / "docs").mkdir()
        (tmp_path / ".kbconfig").write_text("wiki_path: docs\ntemplates_path: tpl\n")
        nested = tmp_path / "a" / "b"
        nested.mkdir(parents=True)
        clean_env.chdir(nested)

        assert get_wiki_root() == (tmp_path / "docs").resolve()
        assert get_templates_root() == (tmp_path / "tpl").resolve()

    def test_kbconfig_pointing_at_missing_dir_is_ignored(self, tmp_path: Path):
        (tmp_path / ".kbconfig").write_text("wiki_path: nowhere\n")
        assert _discover_project_config(tmp_path, max_depth=1) is None

    def test_unreadable_kbconfig_logs_warning(self, tmp_path: Path, caplog):
        (tmp_path / ".kbconfig").write_text("wiki_path: [unclosed\n")

        with caplog.at_level(logging.WARNING, logger="kbwiki.config"):
            assert _discover_project_config(tmp_path, max_depth=1) is None

        assert "Ignoring unreadable" in caplog.text

    def test_nothing_found(self, clean_env, tmp_path: Path):
        clean_env.chdir(tmp_path)

        with pytest.raises(ConfigurationError) as exc_info:
            get_wiki_root()

        assert exc_info.value.code == ErrorCode.CONFIGURATION_ERROR
        assert "KBWIKI_ROOT" in exc_info.value.message


class TestGetTemplatesRoot:
    def test_env_var(self, clean_env, tmp_path: Path):
        clean_env.setenv("KBWIKI_TEMPLATES_ROOT", str(tmp_path))
        assert get_templates_root() == tmp_path

    def test_unset(self, clean_env, tmp_path: Path):
        clean_env.chdir(tmp_path)
        assert get_templates_root() is None
