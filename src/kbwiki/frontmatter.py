"""Page codec: Markdown with YAML frontmatter to and from :class:`Page`.

A page file looks like::

    ---
    title: Intro
    slug: guide/intro
    section: Guide
    order: 1
    tags:
    - basics
    status: published
    ---
    # Intro
    ...

The delimiters must be the very first line and a later line consisting of
``---`` alone. Only the six frontmatter fields are read; anything else in the
block is ignored.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from .errors import InvalidFrontmatterError, InvalidYAMLError, PageReadError, PageWriteError
from .models import Page

log = logging.getLogger(__name__)

FRONTMATTER_DELIMITER = "---"
FRONTMATTER_FIELDS = ("title", "slug", "section", "order", "tags", "status")
# pydantic error types that reject a decoded value rather than its type
FIELD_RULE_ERRORS = frozenset({"literal_error"})


def _split_lines(text: str) -> list[str]:
    """Split text into lines, dropping the final terminator and any CRs."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return [line[:-1] if line.endswith("\r") else line for line in lines]


def _is_delimiter(line: str) -> bool:
    return line.rstrip() == FRONTMATTER_DELIMITER


def split_frontmatter(text: str) -> tuple[str, str]:
    """Split page source into (frontmatter block, body).

    Raises:
        InvalidFrontmatterError: If the opening or closing delimiter is missing.
    """
    lines = _split_lines(text)
    if not lines or not _is_delimiter(lines[0]):
        raise InvalidFrontmatterError("missing frontmatter")

    for position in range(1, len(lines)):
        if _is_delimiter(lines[position]):
            block = "\n".join(lines[1:position])
            body = "\n".join(lines[position + 1:])
            return block, body

    raise InvalidFrontmatterError("missing frontmatter end")


def parse_page(data: bytes | str) -> Page:
    """Parse page source into a Page.

    Args:
        data: Raw file contents (UTF-8 bytes or already decoded text).

    Returns:
        The parsed page; ``file_path`` is left unset.

    Raises:
        InvalidFrontmatterError: Missing delimiters or an unknown status.
        InvalidYAMLError: The frontmatter block is not a valid YAML mapping,
            or a field has the wrong type.
    """
    if isinstance(data, bytes):
        try:
            text = data.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidFrontmatterError(f"page is not valid UTF-8: {e}") from e
    else:
        text = data

    block, body = split_frontmatter(text)

    try:
        raw = yaml.safe_load(block) if block.strip() else None
    except yaml.YAMLError as e:
        raise InvalidYAMLError(f"invalid yaml: {e}") from e
    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise InvalidYAMLError(
            f"invalid yaml: frontmatter must be a mapping, got {type(raw).__name__}"
        )

    fields: dict[str, Any] = {key: raw[key] for key in FRONTMATTER_FIELDS if key in raw}
    try:
        return Page.model_validate({**fields, "content": body})
    except ValidationError as e:
        errors = []
        for error in e.errors():
            loc = ".".join(str(x) for x in error["loc"])
            errors.append(f"  - {loc}: {error['msg']}")
        # A value of the wrong type never decoded; only the status vocabulary is a field rule
        if all(error["type"] in FIELD_RULE_ERRORS for error in e.errors()):
            raise InvalidFrontmatterError("invalid frontmatter:\n" + "\n".join(errors)) from e
        raise InvalidYAMLError("invalid yaml:\n" + "\n".join(errors)) from e


def build_frontmatter(page: Page) -> str:
    """Serialize the six frontmatter fields, delimiters included."""
    fields = {
        "title": page.title,
        "slug": page.slug,
        "section": page.section,
        "order": page.order,
        "tags": list(page.tags),
        "status": page.status,
    }
    dumped = yaml.safe_dump(fields, sort_keys=False, allow_unicode=True, default_flow_style=False)
    if not dumped.endswith("\n"):
        dumped += "\n"
    return f"{FRONTMATTER_DELIMITER}\n{dumped}{FRONTMATTER_DELIMITER}\n"


def render_page(page: Page) -> bytes:
    """Render a Page to file contents.

    A non-empty body without a trailing newline gets one appended, so
    ``parse_page(render_page(p))`` reproduces ``p`` up to that newline.
    """
    parts = [build_frontmatter(page)]
    if page.content:
        parts.append(page.content)
        if not page.content.endswith("\n"):
            parts.append("\n")
    return "".join(parts).encode("utf-8")


def load_page(path: Path) -> Page:
    """Read and parse a page file, recording where it came from.

    Raises:
        PageReadError: The file could not be read.
        InvalidFrontmatterError, InvalidYAMLError: The file could not be parsed.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise PageReadError(f"failed to read page {path}: {e}", path=str(path)) from e

    try:
        page = parse_page(data)
    except (InvalidFrontmatterError, InvalidYAMLError) as e:
        raise type(e)(f"{path}: {e.message}", path=str(path)) from e

    page.file_path = path
    return page


def save_page(path: Path, page: Page) -> None:
    """Render a page and write it, creating parent directories as needed."""
    data = render_page(page)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(data)
    except OSError as e:
        raise PageWriteError(f"failed to write page {path}: {e}", path=str(path)) from e
    log.debug("Wrote page %s (%d bytes)", path, len(data))
