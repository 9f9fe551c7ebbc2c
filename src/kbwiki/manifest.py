"""Flatten an index (or a bare page list) into ordered manifest entries.

Every builder either returns the complete manifest or raises. Draft and
archived pages are dropped from whole-index and section manifests, but a
single-page request for one fails loudly.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from .config import SKIPPED_STATUSES
from .errors import PageNotFoundError, PageStatusError
from .filters import pages_by_slug
from .models import Index, IndexSection, ManifestEntry, Page
from .sections import find_section
from .slugs import normalize_slug, slug_from_path

log = logging.getLogger(__name__)


def is_skipped_status(status: str) -> bool:
    return status.strip().lower() in SKIPPED_STATUSES


def _entry(page: Page, slug: str, *, title_fallback: bool) -> ManifestEntry:
    title = page.title.strip() if title_fallback else page.title
    if title_fallback and not title:
        title = slug
    return ManifestEntry(title=title, slug=slug, order=page.order)


def _flatten(
    sections: Iterable[IndexSection],
    pages: Iterable[Page],
    *,
    dedupe: bool = False,
    title_fallback: bool = False,
) -> list[ManifestEntry]:
    lookup = pages_by_slug(pages)
    manifest: list[ManifestEntry] = []
    seen: set[str] = set()
    for section in sections:
        for slug in section.list_pages():
            if dedupe and slug in seen:
                continue
            page = lookup.get(slug)
            if page is None:
                raise PageNotFoundError(slug, section=section.slug or section.title)
            if is_skipped_status(page.status):
                log.debug("Skipping %s page %s", page.status, slug)
                continue
            manifest.append(_entry(page, slug, title_fallback=title_fallback))
            seen.add(slug)
    return manifest


def build_manifest(index: Index, pages: Iterable[Page]) -> list[ManifestEntry]:
    """Flatten every section of ``index`` in order.

    Raises:
        PageNotFoundError: The index lists a slug with no matching page.
    """
    return _flatten(index.sections, pages)


def build_manifest_from_pages(pages: Iterable[Page]) -> list[ManifestEntry]:
    """Manifest for a root without an index: publishable pages sorted by title."""
    manifest = [
        ManifestEntry(title=page.title, slug=page.slug, order=page.order)
        for page in pages
        if page.slug.strip() and not is_skipped_status(page.status)
    ]
    manifest.sort(key=lambda entry: entry.title.lower())
    return manifest


def build_page_manifest(root: str | Path, pages: Iterable[Page], slug: str) -> list[ManifestEntry]:
    """Manifest holding one page, matched by slug or by its file location.

    Raises:
        InvalidSlugError: ``slug`` is not a valid slug.
        PageStatusError: The page is a draft or archived.
        PageNotFoundError: No page matches.
    """
    normalized = normalize_slug(slug)
    for page in pages:
        page_slug = page.slug.strip()
        if not page_slug and page.file_path is not None:
            page_slug = slug_from_path(root, page.file_path)
        if page_slug != normalized:
            continue
        if is_skipped_status(page.status):
            raise PageStatusError(normalized, page.status)
        return [_entry(page, normalized, title_fallback=True)]
    raise PageNotFoundError(normalized)


def build_section_manifest(index: Index, pages: Iterable[Page], key: str) -> list[ManifestEntry]:
    """Manifest of a single section, resolved with :func:`find_section`."""
    section, _ = find_section(index, key)
    return _flatten([section], pages, title_fallback=True)


def build_manifest_for_sections(
    index: Index, pages: Iterable[Page], sections: Iterable[IndexSection]
) -> list[ManifestEntry]:
    """Manifest of several sections in the given order.

    A slug listed by more than one section appears once, at its first
    position.
    """
    return _flatten(sections, pages, dedupe=True)


def sort_manifest(entries: Iterable[ManifestEntry]) -> list[ManifestEntry]:
    """Sort entries by order, then case-insensitive title (stable)."""
    return sorted(entries, key=lambda entry: (entry.order, entry.title.lower()))
