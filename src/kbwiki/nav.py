"""Navigation tree: index sections with their pages resolved."""

from __future__ import annotations

from collections.abc import Iterable

from .cancel import CancelToken, check_canceled
from .errors import DuplicateSlugError, PageNotFoundError
from .models import Index, NavNode, Page, PageRef


def build_nav_tree(
    index: Index, pages: Iterable[Page], *, cancel: CancelToken | None = None
) -> list[NavNode]:
    """Build one node per index section, in index order.

    Unlike manifests, the tree keeps draft and archived pages so editors can
    see everything the index references.

    Raises:
        DuplicateSlugError: Two pages share a slug.
        PageNotFoundError: The index references a missing page.
    """
    check_canceled(cancel, "navigation build")
    lookup: dict[str, Page] = {}
    for page in pages:
        check_canceled(cancel, "navigation build")
        if not page.slug.strip():
            continue
        if page.slug in lookup:
            raise DuplicateSlugError(page.slug)
        lookup[page.slug] = page

    nodes = []
    for section in index.sections:
        check_canceled(cancel, "navigation build")
        refs = []
        for slug in section.list_pages():
            page = lookup.get(slug)
            if page is None:
                raise PageNotFoundError(slug, section=section.slug or section.title)
            refs.append(PageRef(title=page.title, slug=slug, order=page.order))
        nodes.append(
            NavNode(
                title=section.title,
                slug=section.slug,
                order=section.order,
                tags=list(section.tags),
                links=section.links.model_copy(deep=True),
                pages=refs,
            )
        )
    return nodes
