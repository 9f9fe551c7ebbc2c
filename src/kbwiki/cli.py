#!/usr/bin/env python3
"""
wk: CLI for the kbwiki index and manifest engine

Usage:
    wk index                       # Generate _index.yaml from pages
    wk manifest                    # Ordered, publishable pages
    wk sections --tags=api         # List index sections
    wk nav                         # Section tree with pages
    wk list --query="deploy"       # List pages with filters
    wk view guide/intro            # Print a page body
    wk create "Intro" --section=guide
    wk delete guide/intro --update-index
    wk export --section=guide      # Compile pages into one Markdown file
"""

from __future__ import annotations

import difflib
import json
import signal
import sys
import threading
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path
from typing import Any, NoReturn

import click
from click.exceptions import ClickException, UsageError

from . import __version__ as KBWIKI_VERSION
from .cancel import CancelToken, OperationCanceled
from .errors import ErrorCode, WikiError, format_error_json


def format_table(rows: list[dict], columns: list[str], max_widths: dict | None = None) -> str:
    """Format rows as a simple table."""
    if not rows:
        return ""

    max_widths = max_widths or {}

    def _cell(row: dict, col: str) -> str:
        val = str(row.get(col, ""))
        limit = max_widths.get(col, 50)
        if len(val) > limit:
            val = val[: limit - 3] + "..."
        return val

    widths = {col: len(col) for col in columns}
    for row in rows:
        for col in columns:
            widths[col] = max(widths[col], len(_cell(row, col)))

    header = "  ".join(col.upper().ljust(widths[col]) for col in columns)
    separator = "  ".join("-" * widths[col] for col in columns)
    lines = [header, separator]
    for row in rows:
        lines.append("  ".join(_cell(row, col).ljust(widths[col]) for col in columns).rstrip())
    return "\n".join(lines)


def output(data: Any, as_json: bool = False) -> None:
    """Output data as JSON or formatted text."""
    if as_json:
        click.echo(json.dumps(data, indent=2, default=str))
    else:
        click.echo(data)


def _handle_error(ctx: click.Context, error: Exception, exit_code: int = 1) -> NoReturn:
    """Report an error as text or, with --json-errors, as JSON, then exit."""
    json_errors = ctx.obj.get("json_errors", False) if ctx.obj else False

    if isinstance(error, WikiError):
        if json_errors:
            click.echo(error.to_json(), err=True)
        else:
            click.echo(f"Error: {error.message}", err=True)
            suggestion = error.details.get("suggestion")
            if suggestion:
                click.echo(f"Hint: {suggestion}", err=True)
    elif isinstance(error, OperationCanceled):
        if json_errors:
            click.echo(format_error_json("CANCELED", str(error)), err=True)
        else:
            click.echo(f"Canceled: {error}", err=True)
        exit_code = 130
    else:
        if json_errors:
            click.echo(format_error_json(ErrorCode.INTERNAL_ERROR, str(error)), err=True)
        else:
            click.echo(f"Error: {error}", err=True)

    sys.exit(exit_code)


def get_error_code_for_exception(exc: Exception) -> str:
    """Map Click exceptions to error codes."""
    if isinstance(exc, click.BadParameter):
        return "INVALID_ARGUMENT"
    elif isinstance(exc, click.MissingParameter):
        return "MISSING_ARGUMENT"
    elif isinstance(exc, click.NoSuchOption):
        return "UNKNOWN_OPTION"
    elif isinstance(exc, UsageError):
        return ErrorCode.INVALID_OPTION.value
    elif isinstance(exc, ClickException):
        return "CLI_ERROR"
    return "UNKNOWN_ERROR"


# ─────────────────────────────────────────────────────────────────────────────
# JSON Error Handling
# ─────────────────────────────────────────────────────────────────────────────


class JsonErrorGroup(click.Group):
    """Click group that formats usage errors as JSON when --json-errors is set.

    Also suggests the closest command name for typos.
    """

    def resolve_command(self, ctx, args):
        try:
            return super().resolve_command(ctx, args)
        except UsageError as e:
            cmd_name = args[0] if args else ""
            if cmd_name and "No such command" in str(e):
                matches = difflib.get_close_matches(
                    cmd_name, self.list_commands(ctx), n=1, cutoff=0.6
                )
                if matches:
                    raise UsageError(f"No such command '{cmd_name}'. Did you mean '{matches[0]}'?")
            raise

    def invoke(self, ctx):
        try:
            return super().invoke(ctx)
        except ClickException as e:
            if ctx.params.get("json_errors"):
                code = get_error_code_for_exception(e)
                click.echo(format_error_json(code, e.format_message()), err=True)
                raise SystemExit(1)
            raise

    def main(
        self,
        args: Sequence[str] | None = None,
        prog_name: str | None = None,
        complete_var: str | None = None,
        standalone_mode: bool = True,
        **extra: Any,
    ) -> Any:
        """Catch parse errors too, moving a misplaced --json-errors to the front."""
        argv = list(args) if args is not None else list(sys.argv[1:])
        if "--json-errors" not in argv:
            return super().main(args, prog_name, complete_var, standalone_mode, **extra)

        argv = ["--json-errors"] + [a for a in argv if a != "--json-errors"]
        try:
            return super().main(argv, prog_name, complete_var, standalone_mode=False, **extra)
        except ClickException as e:
            code = get_error_code_for_exception(e)
            click.echo(format_error_json(code, e.format_message()), err=True)
            raise SystemExit(1)
        except SystemExit:
            raise
        except Exception as e:
            click.echo(format_error_json(ErrorCode.INTERNAL_ERROR, str(e)), err=True)
            raise SystemExit(1)


# ─────────────────────────────────────────────────────────────────────────────
# Helpers
# ─────────────────────────────────────────────────────────────────────────────


def _wiki_root(ctx: click.Context) -> Path:
    from .config import get_wiki_root

    try:
        return get_wiki_root()
    except WikiError as e:
        _handle_error(ctx, e)


def _split_csv(value: str | None) -> list[str]:
    """Split a comma-separated option into trimmed, non-empty values."""
    if not value:
        return []
    return [part.strip() for part in value.split(",") if part.strip()]


def _split_multi(values: Sequence[str]) -> list[str]:
    """Flatten repeated and comma-separated option values."""
    result: list[str] = []
    for value in values:
        result.extend(_split_csv(value))
    return result


def _parse_root_spec(spec: str, base: Path) -> tuple[Path, str] | None:
    """Parse ``path[:prefix]``; relative paths resolve against ``base``."""
    path_part, _, prefix = spec.partition(":")
    path_part = path_part.strip()
    if not path_part:
        return None
    path = Path(path_part)
    if not path.is_absolute():
        path = base / path
    return path, prefix.strip()


@contextmanager
def _cancel_on_interrupt() -> Iterator[CancelToken]:
    """Yield a token that SIGINT cancels, restoring the previous handler after."""
    token = CancelToken()
    if threading.current_thread() is not threading.main_thread():
        yield token
        return

    def _on_interrupt(signum, frame):
        token.cancel()

    previous = signal.signal(signal.SIGINT, _on_interrupt)
    try:
        yield token
    finally:
        signal.signal(signal.SIGINT, previous)


# ─────────────────────────────────────────────────────────────────────────────
# Main CLI Group
# ─────────────────────────────────────────────────────────────────────────────


@click.group(cls=JsonErrorGroup)
@click.version_option(version=KBWIKI_VERSION, prog_name="wk")
@click.option(
    "--json-errors",
    "json_errors",
    is_flag=True,
    help="Output errors as JSON (for programmatic use)",
)
@click.option(
    "--quiet",
    "-q",
    is_flag=True,
    envvar="KBWIKI_QUIET",
    help="Suppress warnings, show only errors and essential output",
)
@click.pass_context
def cli(ctx: click.Context, json_errors: bool, quiet: bool):
    """wk: index, manifest and export tools for a Markdown wiki.

    The wiki root comes from KBWIKI_ROOT, or from a .kbconfig file with a
    wiki_path entry in the current directory or one of its parents.

    \b
    Structure:
      wk index                      # Write _index.yaml from page frontmatter
      wk sections                   # Sections with tags and links
      wk nav --json                 # Navigation tree

    \b
    Pages:
      wk list --tags=api --tag-mode=all
      wk view guide/intro
      wk create "Getting Started" --section=guide --order=1

    \b
    Export:
      wk manifest
      wk export --section=guide --include-linked
      wk export --root=../other-wiki:ext
    """
    from ._logging import set_quiet_mode

    ctx.ensure_object(dict)
    ctx.obj["json_errors"] = json_errors
    ctx.obj["quiet"] = quiet

    if quiet:
        set_quiet_mode(True)


# ─────────────────────────────────────────────────────────────────────────────
# Index Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("index")
@click.option("--include-templates", is_flag=True, help="Include template pages")
@click.option(
    "--write/--no-write",
    default=True,
    help="Write _index.yaml (--no-write prints the index as JSON)",
)
@click.option("--output", "-o", type=click.Path(), help="Output path (default: <root>/_index.yaml)")
@click.pass_context
def index_cmd(ctx: click.Context, include_templates: bool, write: bool, output: str | None):
    """Generate the wiki index from page frontmatter.

    \b
    Examples:
      wk index
      wk index --no-write
      wk index --include-templates --output=/tmp/_index.yaml
    """
    from .config import get_templates_root
    from .generator import generate_index
    from .index import index_path, save_index
    from .store import list_pages

    root = _wiki_root(ctx)
    target = Path(output) if output else index_path(root)
    try:
        pages = list_pages(
            root, include_templates=include_templates, templates_root=get_templates_root()
        )
        index = generate_index(pages)
        if write:
            save_index(target, index)
    except (WikiError, OperationCanceled) as e:
        _handle_error(ctx, e)

    if not write:
        output_data = index.model_dump(mode="json")
        click.echo(json.dumps(output_data, indent=2))
        return
    click.echo(f"Generated index at {target}")


# ─────────────────────────────────────────────────────────────────────────────
# Manifest Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("manifest")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def manifest_cmd(ctx: click.Context, as_json: bool):
    """Show the ordered list of exportable pages.

    Uses _index.yaml when present; otherwise every published page, by title.
    Drafts and archived pages are left out.

    \b
    Examples:
      wk manifest
      wk manifest --json
    """
    from .manifest import sort_manifest
    from .store import load_wiki

    root = _wiki_root(ctx)
    try:
        wiki = load_wiki(root)
        entries = sort_manifest(wiki.manifest())
    except (WikiError, OperationCanceled) as e:
        _handle_error(ctx, e)

    if as_json:
        output([entry.model_dump(mode="json") for entry in entries], as_json=True)
        return
    if not entries:
        click.echo("No pages to export.")
        return
    rows = [entry.model_dump() for entry in entries]
    click.echo(format_table(rows, ["order", "slug", "title"], {"slug": 45, "title": 50}))


# ─────────────────────────────────────────────────────────────────────────────
# Sections Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("sections")
@click.option("--tag", "--tags", "tags", help="Filter by section tags (comma-separated)")
@click.option("--tag-mode", type=click.Choice(["any", "all"]), default="any", help="Tag match mode")
@click.option("--link-type", default="", help="Filter by link type (depends_on|related_to)")
@click.option("--link-target", default="", help="Filter by link target")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def sections_cmd(
    ctx: click.Context,
    tags: str | None,
    tag_mode: str,
    link_type: str,
    link_target: str,
    as_json: bool,
):
    """List index sections with their tags and links.

    \b
    Examples:
      wk sections
      wk sections --tags=api
      wk sections --link-type=depends_on --link-target=core
    """
    from .models import SectionFilterOptions
    from .sections import filter_sections
    from .store import load_wiki

    root = _wiki_root(ctx)
    try:
        wiki = load_wiki(root)
    except (WikiError, OperationCanceled) as e:
        _handle_error(ctx, e)

    sections = filter_sections(
        wiki.index.sections,
        SectionFilterOptions(
            tags=_split_csv(tags),
            tag_mode=tag_mode,
            link_type=link_type,
            link_target=link_target,
        ),
    )

    if as_json:
        output([section.model_dump(mode="json") for section in sections], as_json=True)
        return
    if not sections:
        click.echo("No wiki sections found.")
        return
    for section in sections:
        parts = [section.slug.strip() or "(root)", section.title]
        if section.tags:
            parts.append("tags:" + ", ".join(section.tags))
        if section.links.depends_on:
            parts.append("depends_on:" + ", ".join(section.links.depends_on))
        if section.links.related_to:
            parts.append("related_to:" + ", ".join(section.links.related_to))
        click.echo("\t".join(parts))


# ─────────────────────────────────────────────────────────────────────────────
# Nav Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("nav")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def nav_cmd(ctx: click.Context, as_json: bool):
    """Show the navigation tree (sections and their pages).

    \b
    Examples:
      wk nav
      wk nav --json
    """
    from .nav import build_nav_tree
    from .store import load_wiki

    root = _wiki_root(ctx)
    try:
        wiki = load_wiki(root)
        nodes = build_nav_tree(wiki.index, wiki.pages)
    except (WikiError, OperationCanceled) as e:
        _handle_error(ctx, e)

    if as_json:
        output([node.model_dump(mode="json") for node in nodes], as_json=True)
        return
    if not nodes:
        click.echo("No wiki sections found.")
        return
    for node in nodes:
        click.echo(f"{node.title} ({node.slug or 'root'})")
        for ref in node.pages:
            click.echo(f"  {ref.slug}\t{ref.title}")


# ─────────────────────────────────────────────────────────────────────────────
# List Command
# ─────────────────────────────────────────────────────────────────────────────


def _pages_for_listing(root: Path, include_templates: bool) -> list:
    """Pages in index order when indexed (unindexed extras after, by title)."""
    from .config import get_templates_root
    from .store import IndexedWiki, list_pages, load_wiki

    templates_root = get_templates_root()
    wiki = load_wiki(root, include_templates=include_templates, templates_root=templates_root)
    if not isinstance(wiki, IndexedWiki):
        return sorted(wiki.pages, key=lambda page: page.title.lower())
    if not include_templates:
        return wiki.pages

    listed = {page.slug for page in wiki.pages}
    extras = [
        page
        for page in list_pages(root, include_templates=True, templates_root=templates_root)
        if page.slug not in listed
    ]
    extras.sort(key=lambda page: page.title.lower())
    return wiki.pages + extras


@cli.command("list")
@click.option(
    "--status",
    type=click.Choice(["draft", "published", "archived"]),
    help="Filter by status",
)
@click.option("--include-templates", is_flag=True, help="Include template pages")
@click.option("--title", default="", help="Filter by title substring")
@click.option("--tag", "--tags", "tags", help="Filter by tags (comma-separated)")
@click.option("--tag-mode", type=click.Choice(["any", "all"]), default="any", help="Tag match mode")
@click.option("--section", default="", help="Filter by section label or slug")
@click.option("--query", default="", help="Free-text query (all terms must match)")
@click.option("--full-titles", is_flag=True, help="Show full titles without truncation")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_context
def list_cmd(
    ctx: click.Context,
    status: str | None,
    include_templates: bool,
    title: str,
    tags: str | None,
    tag_mode: str,
    section: str,
    query: str,
    full_titles: bool,
    as_json: bool,
):
    """List wiki pages.

    \b
    Examples:
      wk list
      wk list --status=draft
      wk list --tags=api,auth --tag-mode=all
      wk list --section=guide --query="install linux"
    """
    from .filters import filter_pages, filter_pages_by_status
    from .models import FilterOptions
    from .slugs import slug_from_path

    root = _wiki_root(ctx)
    try:
        pages = _pages_for_listing(root, include_templates)
    except (WikiError, OperationCanceled) as e:
        _handle_error(ctx, e)

    pages = filter_pages_by_status(pages, status or "")
    pages = filter_pages(
        pages,
        FilterOptions(
            title=title,
            tags=_split_csv(tags),
            tag_mode=tag_mode,
            section=section,
            query=query,
            case_insensitive=True,
        ),
    )

    rows = []
    for page in pages:
        slug = page.slug.strip()
        if not slug and page.file_path is not None:
            slug = slug_from_path(root, page.file_path)
        rows.append(
            {
                "slug": slug or "(missing slug)",
                "title": page.title,
                "status": page.status,
                "tags": ", ".join(page.tags),
            }
        )

    if as_json:
        output(rows, as_json=True)
        return
    if not rows:
        click.echo("No wiki pages found.")
        return
    title_width = 10000 if full_titles else 40
    click.echo(
        format_table(rows, ["slug", "title", "status"], {"slug": 45, "title": title_width})
    )


# ─────────────────────────────────────────────────────────────────────────────
# Page Commands
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("view")
@click.argument("slug")
@click.pass_context
def view_cmd(ctx: click.Context, slug: str):
    """Print the body of a page.

    \b
    Examples:
      wk view home
      wk view guide/intro
    """
    from .errors import PageNotFoundError
    from .frontmatter import load_page
    from .slugs import normalize_slug
    from .store import page_path

    root = _wiki_root(ctx)
    try:
        path = page_path(root, slug)
        if not path.is_file():
            raise PageNotFoundError(normalize_slug(slug))
        page = load_page(path)
    except WikiError as e:
        _handle_error(ctx, e)

    if page.content:
        click.echo(page.content)


@cli.command("create")
@click.argument("title")
@click.option("--slug", default="", help="Explicit slug (defaults to slugified title)")
@click.option("--section", default="", help="Section label; also prefixes the slug")
@click.option("--order", default=0, type=int, help="Order within the section (0 = by title)")
@click.option("--tag", "--tags", "tags", help="Comma-separated tags")
@click.option(
    "--status",
    type=click.Choice(["draft", "published", "archived"]),
    default="published",
    help="Page status",
)
@click.option("--content", default="", help="Markdown body")
@click.pass_context
def create_cmd(
    ctx: click.Context,
    title: str,
    slug: str,
    section: str,
    order: int,
    tags: str | None,
    status: str,
    content: str,
):
    """Create a wiki page.

    \b
    Examples:
      wk create "Home"
      wk create "Intro" --section=Guide --order=1 --tags=basics
      wk create "Draft notes" --slug=notes/wip --status=draft
    """
    from .errors import PageExistsError
    from .frontmatter import save_page
    from .models import Page
    from .slugs import normalize_slug, slugify
    from .store import page_path

    root = _wiki_root(ctx)
    section = section.strip()
    raw = slug.strip() or slugify(title)
    if section and "/" not in raw:
        raw = f"{slugify(section)}/{raw}"

    try:
        clean = normalize_slug(raw)
        path = page_path(root, clean)
        if path.exists():
            raise PageExistsError(clean)
        page = Page(
            title=title,
            slug=clean,
            section=section,
            order=order,
            tags=_split_csv(tags),
            status=status,
            content=content,
        )
        save_page(path, page)
    except WikiError as e:
        _handle_error(ctx, e)

    click.echo(f"Created wiki page {clean}")


@cli.command("delete")
@click.argument("slug")
@click.option("--update-index", is_flag=True, help="Also remove the page from _index.yaml")
@click.pass_context
def delete_cmd(ctx: click.Context, slug: str, update_index: bool):
    """Delete a wiki page.

    \b
    Examples:
      wk delete notes/wip
      wk delete guide/old --update-index
    """
    from .errors import IndexNotFoundError, PageNotFoundError, PageWriteError
    from .index import index_path, load_index, save_index
    from .slugs import normalize_slug
    from .store import page_path

    root = _wiki_root(ctx)
    try:
        clean = normalize_slug(slug)
        path = page_path(root, clean)
        try:
            path.unlink()
        except FileNotFoundError as e:
            raise PageNotFoundError(clean) from e
        except OSError as e:
            raise PageWriteError(f"failed to delete page {path}: {e}", path=str(path)) from e

        if update_index:
            try:
                index = load_index(index_path(root))
            except IndexNotFoundError:
                index = None
            if index is not None and index.remove_slug(clean):
                save_index(index_path(root), index)
    except WikiError as e:
        _handle_error(ctx, e)

    click.echo(f"Deleted wiki page {clean}")


# ─────────────────────────────────────────────────────────────────────────────
# Export Command
# ─────────────────────────────────────────────────────────────────────────────


@cli.command("export")
@click.option(
    "--format",
    "fmt",
    type=click.Choice(["md"]),
    default="md",
    help="Export format",
)
@click.option("--output", "-o", type=click.Path(), help="Output path (default: <root>/export.md)")
@click.option("--page", default="", help="Export a single page by slug")
@click.option("--section", default="", help="Export a section by slug or title")
@click.option("--filter-title", default="", help="Filter export by title substring")
@click.option("--filter-tags", default="", help="Filter export by tags (comma-separated)")
@click.option(
    "--filter-tag-mode", type=click.Choice(["any", "all"]), default="any", help="Tag match mode"
)
@click.option("--filter-section", default="", help="Filter export by section")
@click.option("--filter-query", default="", help="Filter export by query")
@click.option("--include-linked", is_flag=True, help="With --section, add linked sections")
@click.option(
    "--link-type",
    "link_types",
    multiple=True,
    help="Link types to follow (depends_on, related_to); repeatable",
)
@click.option("--root", "extra_roots", multiple=True, help="Additional wiki root (path[:prefix])")
@click.option("--prefix", default="", help="Slug prefix for the main root when combining roots")
@click.pass_context
def export_cmd(
    ctx: click.Context,
    fmt: str,
    output: str | None,
    page: str,
    section: str,
    filter_title: str,
    filter_tags: str,
    filter_tag_mode: str,
    filter_section: str,
    filter_query: str,
    include_linked: bool,
    link_types: tuple[str, ...],
    extra_roots: tuple[str, ...],
    prefix: str,
):
    """Compile wiki pages into a single Markdown document.

    \b
    Examples:
      wk export
      wk export --page=guide/intro
      wk export --section=guide --include-linked --link-type=depends_on
      wk export --filter-tags=api --output=api.md
      wk export --prefix=core --root=../plugins:ext
    """
    from .export import default_export_path, export_markdown, export_markdown_multi, write_export
    from .filters import filter_manifest
    from .manifest import (
        build_manifest_for_sections,
        build_page_manifest,
        build_section_manifest,
    )
    from .models import ExportSelection, FilterOptions, RootManifest
    from .roots import build_root_manifest, flatten_manifests, validate_manifests
    from .sections import find_section, resolve_linked_sections
    from .slugs import slug_from_path
    from .store import load_wiki

    page = page.strip()
    section = section.strip()
    if page and section:
        raise UsageError("choose either --page or --section")
    if (page or section) and extra_roots:
        raise UsageError("--root cannot be used with --page or --section")

    filters = FilterOptions(
        title=filter_title,
        tags=_split_csv(filter_tags),
        tag_mode=filter_tag_mode,
        section=filter_section,
        query=filter_query,
        case_insensitive=True,
    )
    if filters.is_active() and extra_roots:
        raise UsageError("--filter-* flags cannot be used with --root")

    root = _wiki_root(ctx)
    selection = ExportSelection(page=page, section=section)
    target = Path(output) if output else default_export_path(root, fmt, selection)

    with _cancel_on_interrupt() as cancel:
        try:
            wiki = load_wiki(root, cancel=cancel)
            if page:
                entries = build_page_manifest(root, wiki.pages, page)
            elif section and include_linked:
                base, _ = find_section(wiki.index, section)
                linked = resolve_linked_sections(wiki.index, base, _split_multi(link_types))
                entries = build_manifest_for_sections(wiki.index, wiki.pages, [base, *linked])
            elif section:
                entries = build_section_manifest(wiki.index, wiki.pages, section)
            else:
                entries = wiki.manifest()

            if filters.is_active():
                by_slug = {}
                for each in wiki.pages:
                    slug = each.slug.strip()
                    if not slug and each.file_path is not None:
                        slug = slug_from_path(root, each.file_path)
                    if slug:
                        by_slug[slug] = each.model_copy(update={"slug": slug})
                entries = filter_manifest(entries, by_slug, filters)

            roots = [RootManifest(root=str(root), prefix=prefix, pages=entries)]
            if not page and not section:
                for spec in extra_roots:
                    parsed = _parse_root_spec(spec, Path.cwd())
                    if parsed is None:
                        continue
                    extra_path, extra_prefix = parsed
                    roots.append(build_root_manifest(extra_path, extra_prefix, cancel=cancel))
                validate_manifests(roots)

            if len(roots) > 1:
                if not flatten_manifests(roots):
                    click.echo("No pages to export.")
                    return
                data = export_markdown_multi(roots, cancel=cancel)
            else:
                if not entries:
                    click.echo("No pages to export.")
                    return
                data = export_markdown(root, entries, cancel=cancel)

            write_export(target, data, cancel=cancel)
        except (WikiError, OperationCanceled) as e:
            _handle_error(ctx, e)

    click.echo(f"Exported wiki to {target}")


def main():
    """Entry point for wk CLI."""
    from ._logging import configure_logging

    configure_logging()
    cli()


if __name__ == "__main__":
    main()
