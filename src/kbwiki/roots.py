"""Merge manifests from several wiki roots under optional slug prefixes."""

from __future__ import annotations

import logging
from collections.abc import Iterable, Iterator
from pathlib import Path

from .cancel import CancelToken
from .errors import SlugConflictError
from .models import ManifestEntry, RootManifest
from .store import load_wiki

log = logging.getLogger(__name__)


def prefixed_slug(prefix: str, slug: str) -> str:
    """Apply a root prefix to a slug; a blank prefix leaves it unchanged."""
    slug = slug.strip()
    clean = prefix.strip()
    if not clean:
        return slug
    return clean.rstrip("/") + "/" + slug


def iter_root_entries(roots: Iterable[RootManifest]) -> Iterator[tuple[RootManifest, ManifestEntry, str]]:
    """Yield (root, entry, prefixed slug) for every entry, in root order."""
    for root in roots:
        for entry in root.pages:
            yield root, entry, prefixed_slug(root.prefix, entry.slug)


def flatten_manifests(roots: Iterable[RootManifest]) -> list[ManifestEntry]:
    """Concatenate root manifests, prefixing slugs.

    A repeated final slug is dropped silently (first root wins). Call
    :func:`validate_manifests` first to report conflicts instead.
    """
    entries: list[ManifestEntry] = []
    seen: set[str] = set()
    for _, entry, slug in iter_root_entries(roots):
        if slug in seen:
            continue
        seen.add(slug)
        entries.append(ManifestEntry(title=entry.title, slug=slug, order=entry.order))
    return entries


def validate_manifests(roots: Iterable[RootManifest]) -> None:
    """Raise SlugConflictError if two entries end up with the same slug."""
    owners: dict[str, str] = {}
    for root, _, slug in iter_root_entries(roots):
        previous = owners.get(slug)
        if previous is not None:
            raise SlugConflictError(slug, previous, root.root)
        owners[slug] = root.root


def build_root_manifest(
    root: str | Path, prefix: str = "", *, cancel: CancelToken | None = None
) -> RootManifest:
    """Build the manifest for one root, from its index when it has one."""
    wiki = load_wiki(Path(root), cancel=cancel)
    pages = wiki.manifest()
    log.debug(
        "Root %s: %d entries (%s)", root, len(pages), "indexed" if wiki.indexed else "generated"
    )
    return RootManifest(root=str(root), prefix=prefix, pages=pages)
