"""kbwiki: index and manifest engine for a Markdown knowledge base."""

from importlib.metadata import PackageNotFoundError, version

from .errors import (
    AmbiguousSectionError,
    DuplicateSlugError,
    ErrorCode,
    IndexNotFoundError,
    InvalidFrontmatterError,
    InvalidSlugError,
    InvalidYAMLError,
    PageNotFoundError,
    PageStatusError,
    SectionNotFoundError,
    SlugConflictError,
    WikiError,
)
from .models import Index, IndexSection, ManifestEntry, Page, RootManifest, SectionLinks

try:
    __version__ = version("kbwiki")
except PackageNotFoundError:
    __version__ = "0.0.0"

__all__ = [
    "__version__",
    "AmbiguousSectionError",
    "DuplicateSlugError",
    "ErrorCode",
    "Index",
    "IndexNotFoundError",
    "IndexSection",
    "InvalidFrontmatterError",
    "InvalidSlugError",
    "InvalidYAMLError",
    "ManifestEntry",
    "Page",
    "PageNotFoundError",
    "PageStatusError",
    "RootManifest",
    "SectionLinks",
    "SectionNotFoundError",
    "SlugConflictError",
    "WikiError",
]
