"""Section lookup and one-level link traversal over an index."""

from __future__ import annotations

import logging
from collections.abc import Iterable

from .config import LINK_TYPES
from .errors import AmbiguousSectionError, InvalidSlugError, SectionNotFoundError, WikiError
from .filters import match_tags
from .models import Index, IndexSection, SectionFilterOptions
from .slugs import normalize_slug

log = logging.getLogger(__name__)


def find_section(index: Index, key: str) -> tuple[IndexSection, int]:
    """Resolve a section by slug or title.

    Matching order for a non-empty key:

    1. case-insensitive slug match
    2. slug match after :func:`normalize_slug` (so ``guide/`` finds ``guide``)
    3. case-insensitive title match, which must be unique

    An empty key selects the root section (the one with an empty slug).

    Returns:
        The section and its position in ``index.sections``.

    Raises:
        SectionNotFoundError: Nothing matched.
        AmbiguousSectionError: Several root sections, or several title matches.
    """
    needle = key.strip()
    if not needle:
        roots = [i for i, section in enumerate(index.sections) if not section.slug.strip()]
        if len(roots) == 1:
            return index.sections[roots[0]], roots[0]
        if len(roots) > 1:
            raise AmbiguousSectionError("")
        raise SectionNotFoundError("")

    lowered = needle.lower()
    for i, section in enumerate(index.sections):
        if section.slug.strip().lower() == lowered:
            return section, i

    try:
        normalized = normalize_slug(needle).lower()
    except InvalidSlugError:
        normalized = None
    if normalized is not None:
        for i, section in enumerate(index.sections):
            if section.slug.strip().lower() == normalized:
                return section, i

    matches = [
        i for i, section in enumerate(index.sections) if section.title.strip().lower() == lowered
    ]
    if len(matches) > 1:
        candidates = [index.sections[i].slug or index.sections[i].title for i in matches]
        raise AmbiguousSectionError(needle, candidates)
    if matches:
        return index.sections[matches[0]], matches[0]
    raise SectionNotFoundError(needle)


def normalize_link_types(link_types: Iterable[str] | None) -> list[str]:
    """Lowercase, trim, de-duplicate and sort requested link types.

    None or an empty list means every known type.
    """
    requested = list(link_types or [])
    if not requested:
        return list(LINK_TYPES)
    clean = {value for value in (t.strip().lower() for t in requested) if value}
    return sorted(clean)


def resolve_linked_sections(
    index: Index,
    section: IndexSection,
    link_types: Iterable[str] | None = None,
) -> list[IndexSection]:
    """Collect the sections that ``section`` links to.

    Only the section's own links are followed; links declared on the linked
    sections are not. Unknown link types are ignored.

    Raises:
        SectionNotFoundError, AmbiguousSectionError: A link target does not
            resolve to exactly one section. The error names the link type.
    """
    resolved: list[IndexSection] = []
    seen: set[str] = set()
    for link_type in normalize_link_types(link_types):
        for target in section.links.targets(link_type):
            if not target.strip():
                continue
            try:
                linked, _ = find_section(index, target)
            except SectionNotFoundError as e:
                raise SectionNotFoundError(target.strip(), link_type=link_type) from e
            except WikiError as e:
                e.details.setdefault("link_type", link_type)
                raise
            if linked.key in seen:
                continue
            seen.add(linked.key)
            resolved.append(linked)
    log.debug(
        "Resolved %d linked sections for %s", len(resolved), section.slug or section.title
    )
    return resolved


def _match_section_links(section: IndexSection, link_type: str, link_target: str) -> bool:
    link_type = link_type.strip().lower()
    link_target = link_target.strip().lower()
    if not link_type and not link_target:
        return True

    if link_type:
        targets = section.links.targets(link_type)
        if not targets:
            return False
        if not link_target:
            return True
        return any(target.strip().lower() == link_target for target in targets)

    return any(
        target.strip().lower() == link_target
        for each_type in LINK_TYPES
        for target in section.links.targets(each_type)
    )


def filter_sections(
    sections: list[IndexSection], opts: SectionFilterOptions
) -> list[IndexSection]:
    """Filter sections by their tags and declared links.

    Returns the input list itself when no filter is set.
    """
    if not opts.is_active():
        return sections
    return [
        section
        for section in sections
        if match_tags(section.tags, opts.tags, opts.tag_mode)
        and _match_section_links(section, opts.link_type, opts.link_target)
    ]
