"""Derive an index from an unordered page collection.

Used when a root has no ``_index.yaml``. The ordering is total and explicit
so two runs over the same pages dump byte-identical YAML.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .cancel import CancelToken, check_canceled
from .config import DEFAULT_INDEX_VERSION, ROOT_SECTION_TITLE
from .filters import validate_unique_slugs
from .models import Index, IndexSection, Page
from .slugs import split_slug, title_from_slug

log = logging.getLogger(__name__)


def _page_sort_key(item: tuple[str, Page]) -> tuple:
    relative, page = item
    # Explicitly ordered pages first (ascending), then unordered ones by title
    return (page.order == 0, page.order, page.title.lower(), relative)


def _section_sort_key(section: IndexSection) -> tuple:
    if not section.slug:
        return (0, "", "")
    return (1, section.title.lower(), section.slug)


def _section_title(key: str, label: str) -> str:
    if label:
        return label
    if not key:
        return ROOT_SECTION_TITLE
    return title_from_slug(key)


def generate_index(pages: Iterable[Page], *, cancel: CancelToken | None = None) -> Index:
    """Group pages by the first slug segment into an ordered index.

    Args:
        pages: Pages to index; empty slugs are ignored.
        cancel: Optional cancellation token, checked between pages.

    Returns:
        A new index with ``index_version`` 1.

    Raises:
        DuplicateSlugError: Two pages share a slug.
        OperationCanceled: The token fired during generation.
    """
    pages = list(pages)
    validate_unique_slugs(pages)

    grouped: dict[str, list[tuple[str, Page]]] = {}
    for page in pages:
        check_canceled(cancel, "index generation")
        slug = page.slug.strip()
        if not slug:
            continue
        key, relative = split_slug(slug)
        grouped.setdefault(key, []).append((relative, page))

    sections = []
    for key, members in grouped.items():
        check_canceled(cancel, "index generation")
        members.sort(key=_page_sort_key)
        # First non-blank label in page order, so the title ignores input order
        label = next((p.section.strip() for _, p in members if p.section.strip()), "")
        sections.append(
            IndexSection(
                title=_section_title(key, label),
                slug=key,
                pages=[relative for relative, _ in members],
            )
        )
    sections.sort(key=_section_sort_key)

    log.debug("Generated index with %d sections from %d pages", len(sections), len(pages))
    return Index(index_version=DEFAULT_INDEX_VERSION, sections=sections)
