"""Filter predicates over pages and manifest entries.

All filters combine with AND. When no filter is set the input list is
returned as-is, so disabled filtering can never reorder or copy a manifest.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping

from .config import TAG_MODE_ALL
from .errors import DuplicateSlugError
from .models import FilterOptions, ManifestEntry, Page
from .slugs import section_slug_of


def validate_unique_slugs(pages: Iterable[Page]) -> None:
    """Raise DuplicateSlugError for the first non-empty slug seen twice."""
    seen: set[str] = set()
    for page in pages:
        slug = page.slug.strip()
        if not slug:
            continue
        if slug in seen:
            raise DuplicateSlugError(slug)
        seen.add(slug)


def split_query_terms(query: str) -> list[str]:
    """Split a free-text query into lowercase whitespace-separated terms."""
    return [term.lower() for term in query.split()]


def normalize_filter_tags(tags: Iterable[str]) -> list[str]:
    return [clean for clean in (tag.strip().lower() for tag in tags) if clean]


def match_tags(page_tags: Iterable[str], wanted: Iterable[str], mode: str = "any") -> bool:
    """Check page tags against wanted tags.

    Mode ``all`` requires every wanted tag; any other mode requires one.
    An empty wanted list always matches.
    """
    want = normalize_filter_tags(wanted)
    if not want:
        return True
    have = set(normalize_filter_tags(page_tags))
    if mode.strip().lower() == TAG_MODE_ALL:
        return all(tag in have for tag in want)
    return any(tag in have for tag in want)


def page_title(page: Page) -> str:
    """Display title of a page, falling back to its slug."""
    return page.title.strip() or page.slug


def _contains(haystack: str, needle: str, case_insensitive: bool) -> bool:
    if case_insensitive:
        return needle.lower() in haystack.lower()
    return needle in haystack


def _match_section(page: Page, wanted: str, case_insensitive: bool) -> bool:
    label = page.section.strip()
    if label and label.lower() == wanted.lower():
        return True
    if case_insensitive and label and wanted.lower() in label.lower():
        return True
    return section_slug_of(page.slug).lower() == wanted.lower()


def _match_query(page: Page, terms: list[str], case_insensitive: bool) -> bool:
    haystack = " ".join(
        [page.title, page.section, " ".join(page.tags), page.content, page.slug]
    )
    if case_insensitive:
        haystack = haystack.lower()
    return all(term in haystack for term in terms)


def match_page(page: Page, opts: FilterOptions) -> bool:
    """Evaluate every active filter in ``opts`` against one page."""
    title = opts.title.strip()
    if title and not _contains(page_title(page), title, opts.case_insensitive):
        return False

    section = opts.section.strip()
    if section and not _match_section(page, section, opts.case_insensitive):
        return False

    if opts.tags and not match_tags(page.tags, opts.tags, opts.tag_mode):
        return False

    terms = split_query_terms(opts.query)
    if terms and not _match_query(page, terms, opts.case_insensitive):
        return False

    return True


def filter_pages(pages: list[Page], opts: FilterOptions) -> list[Page]:
    """Return the pages matching ``opts`` (the same list when no filter is set)."""
    if not opts.is_active():
        return pages
    return [page for page in pages if match_page(page, opts)]


def filter_manifest(
    entries: list[ManifestEntry],
    pages_by_slug: Mapping[str, Page],
    opts: FilterOptions,
) -> list[ManifestEntry]:
    """Filter manifest entries by looking up their pages.

    Entries with no page in ``pages_by_slug`` are dropped once any filter is
    active.
    """
    if not opts.is_active():
        return entries
    result = []
    for entry in entries:
        page = pages_by_slug.get(entry.slug)
        if page is None:
            continue
        if match_page(page, opts):
            result.append(entry)
    return result


def filter_pages_by_status(pages: list[Page], status: str) -> list[Page]:
    """Keep pages whose status equals ``status``; blank keeps everything."""
    wanted = status.strip().lower()
    if not wanted:
        return pages
    return [page for page in pages if page.status == wanted]


def pages_by_slug(pages: Iterable[Page]) -> dict[str, Page]:
    """Map non-empty slugs to pages (built per call, never cached)."""
    return {page.slug: page for page in pages if page.slug.strip()}
