"""Pydantic models for the wiki engine."""

from pathlib import Path
from typing import Any, Literal

from pydantic import BaseModel, Field, field_validator

from .config import DEFAULT_INDEX_VERSION, LINK_TYPES

PageStatus = Literal["draft", "published", "archived"]


def _as_text(value: Any) -> Any:
    """Coerce YAML scalars (numbers, dates, booleans) to str; None to ""."""
    if value is None:
        return ""
    if isinstance(value, (int, float, bool)) or hasattr(value, "isoformat"):
        return str(value)
    return value


def _as_list(value: Any) -> Any:
    if value is None:
        return []
    if isinstance(value, str):
        return [part for part in value.split(",")]
    return value


def normalize_tags(tags: list[str]) -> list[str]:
    """Lowercase and trim tags, dropping blanks and repeats (first wins)."""
    result: list[str] = []
    seen: set[str] = set()
    for tag in tags:
        clean = str(tag).strip().lower()
        if not clean or clean in seen:
            continue
        seen.add(clean)
        result.append(clean)
    return result


class Page(BaseModel):
    """A wiki page: frontmatter fields plus the Markdown body."""

    title: str = ""
    slug: str = ""  # Root-relative, "/"-separated; "" means unindexed
    section: str = ""  # Free-text label, not the index section
    order: int = 0  # 0 sorts after every explicitly ordered page
    tags: list[str] = Field(default_factory=list)
    status: PageStatus = "published"
    content: str = ""
    file_path: Path | None = Field(default=None, exclude=True)  # Never persisted

    @field_validator("title", "slug", "section", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("order", mode="before")
    @classmethod
    def _coerce_order(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("tags", mode="before")
    @classmethod
    def _coerce_tags(cls, value: Any) -> Any:
        tags = _as_list(value)
        if isinstance(tags, list):
            return [_as_text(tag) for tag in tags]
        return tags

    @field_validator("tags")
    @classmethod
    def _normalize_tags(cls, value: list[str]) -> list[str]:
        return normalize_tags(value)

    @field_validator("status", mode="before")
    @classmethod
    def _normalize_status(cls, value: Any) -> Any:
        if value is None:
            return "published"
        if isinstance(value, str):
            return value.strip().lower() or "published"
        return value


class SectionLinks(BaseModel):
    """Declared relationships from one index section to others."""

    depends_on: list[str] = Field(default_factory=list)
    related_to: list[str] = Field(default_factory=list)

    @field_validator("depends_on", "related_to", mode="before")
    @classmethod
    def _coerce_targets(cls, value: Any) -> Any:
        targets = _as_list(value)
        if isinstance(targets, list):
            return [_as_text(target) for target in targets]
        return targets

    def targets(self, link_type: str) -> list[str]:
        """Return the targets declared for a link type (empty for unknown types)."""
        if link_type not in LINK_TYPES:
            return []
        return list(getattr(self, link_type))

    def is_empty(self) -> bool:
        return not self.depends_on and not self.related_to


class IndexSection(BaseModel):
    """A named group of pages in the index."""

    title: str = ""
    slug: str = ""  # "" is the implicit root section
    order: int = 0
    tags: list[str] = Field(default_factory=list)
    links: SectionLinks = Field(default_factory=SectionLinks)
    pages: list[str] = Field(default_factory=list)  # Relative to slug

    @field_validator("title", "slug", mode="before")
    @classmethod
    def _coerce_text(cls, value: Any) -> Any:
        return _as_text(value)

    @field_validator("order", mode="before")
    @classmethod
    def _coerce_order(cls, value: Any) -> Any:
        return 0 if value is None else value

    @field_validator("tags", "pages", mode="before")
    @classmethod
    def _coerce_list(cls, value: Any) -> Any:
        items = _as_list(value)
        if isinstance(items, list):
            return [_as_text(item) for item in items]
        return items

    @field_validator("links", mode="before")
    @classmethod
    def _coerce_links(cls, value: Any) -> Any:
        return {} if value is None else value

    def list_pages(self) -> list[str]:
        """Expand the section's relative page slugs into fully qualified slugs."""
        if not self.slug.strip():
            return list(self.pages)
        prefix = self.slug.rstrip("/")
        return [f"{prefix}/{page}" for page in self.pages]

    @property
    def key(self) -> str:
        """Identity used to de-duplicate resolved sections (slug, else title)."""
        return (self.slug.strip() or self.title.strip()).lower()


class Index(BaseModel):
    """Persisted navigation structure for one wiki root.

    Section order is authoritative and never re-sorted after loading.
    """

    index_version: int = DEFAULT_INDEX_VERSION
    sections: list[IndexSection] = Field(default_factory=list)

    @field_validator("index_version", mode="before")
    @classmethod
    def _coerce_version(cls, value: Any) -> Any:
        return DEFAULT_INDEX_VERSION if value is None else value

    @field_validator("index_version")
    @classmethod
    def _normalize_version(cls, value: int) -> int:
        return value if value > 0 else DEFAULT_INDEX_VERSION

    @field_validator("sections", mode="before")
    @classmethod
    def _coerce_sections(cls, value: Any) -> Any:
        return [] if value is None else value

    def remove_slug(self, slug: str) -> bool:
        """Delete a fully qualified page slug from whichever section lists it.

        Returns:
            True if at least one entry was removed.
        """
        if not slug.strip():
            return False
        removed = False
        for section in self.sections:
            section_slug = section.slug.strip()
            if not section_slug:
                relative = slug
            else:
                prefix = section.slug.rstrip("/") + "/"
                if not slug.startswith(prefix):
                    continue
                relative = slug[len(prefix):]
            kept = [page for page in section.pages if page != relative]
            if len(kept) != len(section.pages):
                removed = True
                section.pages = kept
        return removed


class ManifestEntry(BaseModel):
    """A flattened, render-ready page reference."""

    title: str
    slug: str  # Fully qualified
    order: int = 0


class RootManifest(BaseModel):
    """Manifest entries originating from one wiki root."""

    root: str
    prefix: str = ""  # Only applied when merging several roots
    pages: list[ManifestEntry] = Field(default_factory=list)


class FilterOptions(BaseModel):
    """Page/manifest filters. All blank means "no filtering"."""

    title: str = ""
    tags: list[str] = Field(default_factory=list)
    tag_mode: str = "any"
    section: str = ""
    query: str = ""
    case_insensitive: bool = False

    def is_active(self) -> bool:
        return bool(
            self.title.strip() or self.section.strip() or self.query.strip() or self.tags
        )


class SectionFilterOptions(BaseModel):
    """Filters over index sections by their own tags and links."""

    tags: list[str] = Field(default_factory=list)
    tag_mode: str = "any"
    link_type: str = ""
    link_target: str = ""

    def is_active(self) -> bool:
        return bool(self.tags or self.link_type.strip() or self.link_target.strip())


class PageRef(BaseModel):
    """A page reference inside a navigation node."""

    title: str
    slug: str
    order: int = 0


class NavNode(BaseModel):
    """A section in the navigation tree, with its pages resolved."""

    title: str
    slug: str
    order: int = 0
    tags: list[str] = Field(default_factory=list)
    links: SectionLinks = Field(default_factory=SectionLinks)
    pages: list[PageRef] = Field(default_factory=list)


class ExportSelection(BaseModel):
    """Scopes an export to a single page or a single section."""

    page: str = ""
    section: str = ""
