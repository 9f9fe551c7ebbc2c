"""Compile manifests into a single Markdown document.

Each page becomes ``# <title>`` followed by its trimmed body. Pages are
separated by a horizontal rule. The output is the intermediate stream that
a renderer (pandoc, a static site, ...) would consume.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterable
from pathlib import Path

from .cancel import CancelToken, check_canceled
from .errors import ExportWriteError, PageNotFoundError
from .frontmatter import load_page
from .models import ExportSelection, ManifestEntry, Page, RootManifest
from .roots import iter_root_entries
from .slugs import normalize_slug, slugify
from .store import page_path

log = logging.getLogger(__name__)

PAGE_SEPARATOR = "\n---\n\n"


def _render_section(title: str, content: str) -> str:
    parts = []
    if title:
        parts.append(f"# {title}\n\n")
    body = content.strip()
    if body:
        parts.append(body + "\n")
    return "".join(parts)


def _load_for_export(root: Path, slug: str) -> Page:
    if not slug.strip():
        raise PageNotFoundError(slug)
    path = page_path(root, slug)
    if not path.is_file():
        raise PageNotFoundError(normalize_slug(slug))
    return load_page(path)


def _compile(items: Iterable[tuple[Path, str, str]], cancel: CancelToken | None) -> bytes:
    chunks = []
    for root, slug, title in items:
        check_canceled(cancel, "export")
        page = _load_for_export(root, slug)
        chunks.append(_render_section(title.strip() or page.title.strip(), page.content))
    return PAGE_SEPARATOR.join(chunks).encode("utf-8")


def export_markdown(
    root: str | Path,
    manifest: Iterable[ManifestEntry],
    *,
    cancel: CancelToken | None = None,
) -> bytes:
    """Render a manifest from one root to Markdown bytes.

    Raises:
        PageNotFoundError: An entry has no slug or its page file is missing.
        OperationCanceled: The token fired between pages.
    """
    root = Path(root)
    return _compile(((root, entry.slug, entry.title) for entry in manifest), cancel)


def export_markdown_multi(
    roots: Iterable[RootManifest], *, cancel: CancelToken | None = None
) -> bytes:
    """Render manifests from several roots to one Markdown document.

    Pages are read from their own root using the unprefixed slug. Entries are
    not de-duplicated; run :func:`~kbwiki.roots.validate_manifests` first.
    """
    items = (
        (Path(root.root), entry.slug, entry.title)
        for root, entry, _ in iter_root_entries(roots)
    )
    return _compile(items, cancel)


def default_export_path(root: str | Path, fmt: str, selection: ExportSelection) -> Path:
    """Default output location for an export, named after the selection."""
    ext = "pdf" if fmt.strip().lower() == "pdf" else "md"
    page = selection.page.strip()
    section = selection.section.strip()
    if page:
        name = f"export-page-{_export_name(page)}.{ext}"
    elif section:
        name = f"export-section-{_export_name(section)}.{ext}"
    else:
        name = f"export.{ext}"
    return Path(root) / name


def _export_name(value: str) -> str:
    return slugify(value.strip()) or "selection"


def write_export(path: str | Path, data: bytes, *, cancel: CancelToken | None = None) -> None:
    """Write export bytes, creating the parent directory first."""
    path = Path(path)
    check_canceled(cancel, "export write")
    try:
        os.makedirs(path.parent, exist_ok=True)
    except OSError as e:
        raise ExportWriteError(
            f"failed to create export dir {path.parent}: {e}", path=str(path.parent)
        ) from e
    check_canceled(cancel, "export write")
    try:
        path.write_bytes(data)
    except OSError as e:
        raise ExportWriteError(f"failed to write export {path}: {e}", path=str(path)) from e
    log.debug("Exported %d bytes to %s", len(data), path)
