"""Slug helpers: lossy slugify, strict normalization, and path derivation.

:func:`normalize_slug` is the only guard against a page reference escaping
its root through ``..`` segments. Every file path or section lookup built
from user input must pass through it first.
"""

import os
import posixpath
import re
from pathlib import Path

from .config import PAGE_SUFFIX
from .errors import InvalidSlugError

_NON_ALNUM_RUN = re.compile(r"[^a-z0-9]+")
_TITLE_SEPARATORS = re.compile(r"[-_/]+")


def slugify(text: str) -> str:
    """Convert text to a URL-safe slug (lowercase alphanumerics joined by hyphens)."""
    return _NON_ALNUM_RUN.sub("-", text.lower()).strip("-")


def normalize_slug(raw: str) -> str:
    """Validate and canonicalize a slug into a safe root-relative path.

    Backslashes become forward slashes and the result is lexically cleaned
    (``a/./b/`` -> ``a/b``, ``a/x/../b`` -> ``a/b``).

    Args:
        raw: Slug as typed by a user or read from a file.

    Returns:
        The cleaned slug.

    Raises:
        InvalidSlugError: If the slug is blank, ``.``, ``..``, climbs above
            the root, or is absolute.
    """
    slug = raw.strip()
    if not slug:
        raise InvalidSlugError(raw, "slug is required")

    clean = posixpath.normpath(slug.replace("\\", "/"))
    if clean in (".", "..") or clean.startswith("../") or posixpath.isabs(clean):
        raise InvalidSlugError(slug)
    return clean


def slug_from_path(root: str | Path, page_path: str | Path) -> str:
    """Derive a slug from a page file path relative to the wiki root.

    Returns an empty string when the page does not live under ``root``.
    """
    try:
        rel = os.path.relpath(page_path, root)
    except ValueError:
        # Different drives on Windows
        return ""
    if rel in (os.curdir, os.pardir) or rel.startswith(os.pardir + os.sep):
        return ""
    if rel.endswith(PAGE_SUFFIX):
        rel = rel[: -len(PAGE_SUFFIX)]
    return rel.replace(os.sep, "/")


def split_slug(slug: str) -> tuple[str, str]:
    """Split a fully qualified slug into (section key, relative slug).

    A slug without ``/`` belongs to the root section (empty key).
    """
    section, sep, rest = slug.partition("/")
    if not sep:
        return "", slug
    return section, rest


def section_slug_of(slug: str) -> str:
    """Return the structural section segment of a slug, or "" for root pages."""
    return split_slug(slug.strip())[0]


def title_from_slug(slug: str) -> str:
    """Derive a display title from a section key.

    ``getting-started`` -> ``Getting Started``; ``api_v2`` -> ``Api V2``.
    """
    words = [part for part in _TITLE_SEPARATORS.split(slug) if part]
    return " ".join(word[:1].upper() + word[1:] for word in words)
