"""Page store: read every page under a root, or the pages an index lists.

:func:`load_wiki` is the single place that decides whether a root is served
from its persisted ``_index.yaml`` or from an index generated on the fly.
Commands call it once and dispatch on the returned variant.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

from .cancel import CancelToken, check_canceled
from .config import INDEX_FILENAME, PAGE_SUFFIX, TEMPLATES_DIRNAME
from .errors import IndexNotFoundError, PageNotFoundError, PageReadError
from .filters import validate_unique_slugs
from .frontmatter import load_page
from .generator import generate_index
from .index import index_path, load_index
from .manifest import build_manifest, build_manifest_from_pages
from .models import Index, ManifestEntry, Page
from .slugs import normalize_slug

log = logging.getLogger(__name__)


def _is_subpath(parent: Path, child: Path) -> bool:
    try:
        child.resolve().relative_to(parent.resolve())
    except ValueError:
        return False
    return True


def page_path(root: Path, slug: str) -> Path:
    """File location of a page; the slug is validated first."""
    return root / (normalize_slug(slug) + PAGE_SUFFIX)


def _walk_pages(root: Path, include_templates: bool, cancel: CancelToken | None) -> list[Page]:
    check_canceled(cancel, "page listing")
    if not root.exists():
        return []
    if not root.is_dir():
        raise PageReadError(f"wiki root is not a directory: {root}", path=str(root))

    pages: list[Page] = []

    def _raise(error: OSError) -> None:
        raise PageReadError(f"failed to list pages: {error}", path=error.filename) from error

    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        if not include_templates and TEMPLATES_DIRNAME in dirnames:
            log.debug("Skipping templates directory under %s", dirpath)
            dirnames.remove(TEMPLATES_DIRNAME)
        for filename in sorted(filenames):
            if not filename.endswith(PAGE_SUFFIX) or filename == INDEX_FILENAME:
                continue
            check_canceled(cancel, "page listing")
            pages.append(load_page(Path(dirpath) / filename))
    return pages


def list_pages(
    root: Path,
    *,
    include_templates: bool = False,
    templates_root: Path | None = None,
    cancel: CancelToken | None = None,
) -> list[Page]:
    """Load every page file under ``root`` in sorted path order.

    Directories named ``templates`` are skipped unless ``include_templates``
    is set, in which case an out-of-tree ``templates_root`` is read as well.
    A missing root yields an empty list.

    Raises:
        DuplicateSlugError: Two pages share a slug.
        InvalidFrontmatterError, InvalidYAMLError: A page failed to parse.
        OperationCanceled: The token fired during the walk.
    """
    pages = _walk_pages(root, include_templates, cancel)
    if include_templates and templates_root is not None and not _is_subpath(root, templates_root):
        pages.extend(_walk_pages(templates_root, True, cancel))
    validate_unique_slugs(pages)
    log.debug("Listed %d pages under %s", len(pages), root)
    return pages


def list_pages_from_index(
    root: Path, index: Index, *, cancel: CancelToken | None = None
) -> list[Page]:
    """Load the pages an index lists, in index order.

    Pages whose frontmatter has no slug take the slug the index gives them.

    Raises:
        PageNotFoundError: The index lists a slug with no page file.
    """
    pages: list[Page] = []
    for section in index.sections:
        for full_slug in section.list_pages():
            check_canceled(cancel, "page loading")
            slug = normalize_slug(full_slug)
            path = page_path(root, slug)
            if not path.is_file():
                raise PageNotFoundError(slug, section=section.slug or section.title)
            page = load_page(path)
            if not page.slug.strip():
                page.slug = slug
            pages.append(page)
    validate_unique_slugs(pages)
    return pages


@dataclass
class IndexedWiki:
    """A root served from its persisted index."""

    root: Path
    index: Index
    pages: list[Page] = field(default_factory=list)
    indexed: bool = field(default=True, init=False)

    def manifest(self) -> list[ManifestEntry]:
        return build_manifest(self.index, self.pages)


@dataclass
class GeneratedWiki:
    """A root without ``_index.yaml``; the index was generated from the pages."""

    root: Path
    index: Index
    pages: list[Page] = field(default_factory=list)
    indexed: bool = field(default=False, init=False)

    def manifest(self) -> list[ManifestEntry]:
        # Without a persisted index the manifest is ordered by title
        return build_manifest_from_pages(self.pages)


Wiki = IndexedWiki | GeneratedWiki


def load_wiki(
    root: Path,
    *,
    include_templates: bool = False,
    templates_root: Path | None = None,
    cancel: CancelToken | None = None,
) -> Wiki:
    """Load a wiki root once, choosing the indexed or generated variant.

    Raises:
        IndexParseError: ``_index.yaml`` exists but is malformed.
        PageNotFoundError, DuplicateSlugError, ...: Propagated from loading.
    """
    try:
        index = load_index(index_path(root), cancel=cancel)
    except IndexNotFoundError:
        log.debug("No %s under %s, generating index from pages", INDEX_FILENAME, root)
        pages = list_pages(
            root,
            include_templates=include_templates,
            templates_root=templates_root,
            cancel=cancel,
        )
        return GeneratedWiki(root=root, index=generate_index(pages, cancel=cancel), pages=pages)

    pages = list_pages_from_index(root, index, cancel=cancel)
    return IndexedWiki(root=root, index=index, pages=pages)
