"""Shared test fixtures for the kbwiki test suite.

Design:
- tmp_wiki: isolated wiki root in a temp directory, exported as KBWIKI_ROOT
- write_page: helper that writes a page file with frontmatter
- runner / cli_invoke: CliRunner helpers for the wk command group
"""

from collections.abc import Callable
from pathlib import Path

import pytest
from click.testing import CliRunner

from kbwiki.cli import cli
from kbwiki.frontmatter import save_page
from kbwiki.models import Page


# ─────────────────────────────────────────────────────────────────────────────
# Core Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def runner() -> CliRunner:
    """CLI runner with isolated environment."""
    return CliRunner()


@pytest.fixture
def tmp_wiki(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Create an empty wiki root and point KBWIKI_ROOT at it.

    Usage:
        def test_something(tmp_wiki):
            (tmp_wiki / "home.md").write_text("---\\ntitle: Home\\n---\\n")
    """
    root = tmp_path / "wiki"
    root.mkdir()
    monkeypatch.setenv("KBWIKI_ROOT", str(root))
    monkeypatch.delenv("KBWIKI_TEMPLATES_ROOT", raising=False)
    monkeypatch.delenv("KBWIKI_QUIET", raising=False)
    return root


@pytest.fixture
def write_page() -> Callable[..., Path]:
    """Write a page file under a root, using the slug for its location.

    Usage:
        def test_x(tmp_wiki, write_page):
            write_page(tmp_wiki, "guide/intro", title="Intro", section="Guide")
    """

    def _write(root: Path, slug: str, **fields) -> Path:
        fields.setdefault("title", slug.rsplit("/", 1)[-1].replace("-", " ").title())
        page = Page(slug=slug, **fields)
        path = root / f"{slug}.md"
        save_page(path, page)
        return path

    return _write


@pytest.fixture
def sample_wiki(tmp_wiki: Path, write_page) -> Path:
    """Wiki with a root page, a guide section (one draft) and an api section.

    Creates:
    - home.md (published, root section)
    - guide/intro.md (order 1), guide/draft.md (order 2, draft)
    - api/auth.md, api/users.md (tags: api)
    """
    write_page(tmp_wiki, "home", title="Home", content="Welcome home.")
    write_page(
        tmp_wiki, "guide/intro", title="Intro", section="Guide", order=1,
        tags=["basics"], content="Start here.",
    )
    write_page(
        tmp_wiki, "guide/draft", title="Draft", section="Guide", order=2,
        status="draft", content="Not ready.",
    )
    write_page(tmp_wiki, "api/auth", title="Auth", tags=["api", "security"], content="Tokens.")
    write_page(tmp_wiki, "api/users", title="Users", tags=["api"], content="User endpoints.")
    return tmp_wiki


@pytest.fixture
def cli_invoke(runner: CliRunner, tmp_wiki: Path):
    """Helper for invoking the CLI against tmp_wiki.

    Usage:
        def test_list(cli_invoke):
            result = cli_invoke(["list"])
            assert result.exit_code == 0
    """

    def _invoke(args: list[str], input: str | None = None, catch_exceptions: bool = False):
        return runner.invoke(cli, args, input=input, catch_exceptions=catch_exceptions)

    return _invoke
