"""Load and save the persisted wiki index (``_index.yaml``).

The index file is plain YAML::

    index_version: 1
    sections:
    - title: General
      slug: ''
      order: 0
      pages:
      - home
    - title: Guide
      slug: guide
      order: 0
      links:
        depends_on:
        - general
      pages:
      - intro

Empty ``tags`` and ``links`` are omitted when saving. Sections keep the order
they have in the file.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .cancel import CancelToken, check_canceled
from .config import DEFAULT_INDEX_VERSION, INDEX_FILENAME
from .errors import IndexNotFoundError, IndexParseError, IndexWriteError
from .models import Index, IndexSection

log = logging.getLogger(__name__)


def index_path(root: Path) -> Path:
    """Return the conventional index location for a wiki root."""
    return root / INDEX_FILENAME


def _section_payload(section: IndexSection) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "title": section.title,
        "slug": section.slug,
        "order": section.order,
    }
    if section.tags:
        payload["tags"] = list(section.tags)
    if not section.links.is_empty():
        links: dict[str, list[str]] = {}
        if section.links.depends_on:
            links["depends_on"] = list(section.links.depends_on)
        if section.links.related_to:
            links["related_to"] = list(section.links.related_to)
        payload["links"] = links
    payload["pages"] = list(section.pages)
    return payload


def dump_index(index: Index) -> str:
    """Serialize an index to deterministic YAML text."""
    payload = {
        "index_version": max(index.index_version, DEFAULT_INDEX_VERSION),
        "sections": [_section_payload(section) for section in index.sections],
    }
    return yaml.safe_dump(payload, sort_keys=False, allow_unicode=True, default_flow_style=False)


def parse_index(text: str, *, source: str = "<string>") -> Index:
    """Parse index YAML text.

    Raises:
        IndexParseError: The text is not YAML or does not describe an index.
    """
    try:
        raw = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise IndexParseError(f"failed to parse index {source}: {e}", path=source) from e
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise IndexParseError(f"failed to parse index {source}: expected a mapping", path=source)
    try:
        return Index.model_validate(raw)
    except ValidationError as e:
        raise IndexParseError(f"invalid index {source}: {e}", path=source) from e


def load_index(path: Path, *, cancel: CancelToken | None = None) -> Index:
    """Read and parse an index file.

    Raises:
        IndexNotFoundError: The file does not exist (callers typically fall
            back to generating an index from the pages).
        IndexParseError: The file exists but is malformed.
        OperationCanceled: ``cancel`` fired before or after the read.
    """
    check_canceled(cancel, "index load")
    try:
        text = path.read_text(encoding="utf-8")
    except FileNotFoundError as e:
        raise IndexNotFoundError(str(path)) from e
    except OSError as e:
        raise IndexParseError(f"failed to read index {path}: {e}", path=str(path)) from e
    index = parse_index(text, source=str(path))
    check_canceled(cancel, "index load")
    log.debug("Loaded index %s with %d sections", path, len(index.sections))
    return index


def save_index(path: Path, index: Index, *, cancel: CancelToken | None = None) -> None:
    """Write an index file, creating parent directories as needed."""
    text = dump_index(index)
    check_canceled(cancel, "index save")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        check_canceled(cancel, "index save")
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        raise IndexWriteError(f"failed to write index {path}: {e}", path=str(path)) from e
    log.debug("Wrote index %s", path)
