"""Structured errors for the wiki engine.

Every data error raised by the engine is a :class:`WikiError` carrying a
machine-readable :class:`ErrorCode`, a human message, and a ``details`` dict
naming the offending slug, root, section key or link type. The CLI renders
these either as ``Error: ...`` lines or, with ``--json-errors``, as JSON.

Cancellation is deliberately not a ``WikiError``; see :mod:`kbwiki.cancel`.
"""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorCode(str, Enum):
    """Stable error codes for programmatic handling."""

    INVALID_SLUG = "INVALID_SLUG"
    INVALID_FRONTMATTER = "INVALID_FRONTMATTER"
    INVALID_YAML = "INVALID_YAML"
    INDEX_NOT_FOUND = "INDEX_NOT_FOUND"
    INVALID_INDEX = "INVALID_INDEX"
    DUPLICATE_SLUG = "DUPLICATE_SLUG"
    SLUG_CONFLICT = "SLUG_CONFLICT"
    PAGE_NOT_FOUND = "PAGE_NOT_FOUND"
    PAGE_EXISTS = "PAGE_EXISTS"
    PAGE_NOT_EXPORTABLE = "PAGE_NOT_EXPORTABLE"
    SECTION_NOT_FOUND = "SECTION_NOT_FOUND"
    AMBIGUOUS_SECTION = "AMBIGUOUS_SECTION"
    FILE_READ_ERROR = "FILE_READ_ERROR"
    FILE_WRITE_ERROR = "FILE_WRITE_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_OPTION = "INVALID_OPTION"
    INTERNAL_ERROR = "INTERNAL_ERROR"


class WikiError(Exception):
    """Base class for engine errors.

    Attributes:
        code: Machine-readable error code.
        message: Human-readable message, already including the offending key.
        details: Extra context (slug, root, link_type, suggestion, ...).
    """

    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, **details: Any) -> None:
        self.message = message
        self.details = {key: value for key, value in details.items() if value is not None}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"code": self.code.value, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def to_json(self) -> str:
        return json.dumps({"error": self.to_dict()}, default=str)


class InvalidSlugError(WikiError, ValueError):
    code = ErrorCode.INVALID_SLUG

    def __init__(self, raw: str, reason: str | None = None) -> None:
        message = reason or f"invalid slug: {raw}"
        super().__init__(message, slug=raw)


class InvalidFrontmatterError(WikiError):
    code = ErrorCode.INVALID_FRONTMATTER


class InvalidYAMLError(WikiError):
    code = ErrorCode.INVALID_YAML


class IndexNotFoundError(WikiError):
    """Raised when a root has no persisted index; callers fall back to generation."""

    code = ErrorCode.INDEX_NOT_FOUND

    def __init__(self, path: str) -> None:
        super().__init__(f"index not found: {path}", path=path)


class IndexParseError(WikiError):
    code = ErrorCode.INVALID_INDEX


class DuplicateSlugError(WikiError):
    code = ErrorCode.DUPLICATE_SLUG

    def __init__(self, slug: str) -> None:
        super().__init__(f"duplicate slug: {slug}", slug=slug)


class SlugConflictError(WikiError):
    code = ErrorCode.SLUG_CONFLICT

    def __init__(self, slug: str, first_root: str, second_root: str) -> None:
        super().__init__(
            f"slug conflict {slug} between {first_root} and {second_root}",
            slug=slug,
            roots=[first_root, second_root],
        )


class PageNotFoundError(WikiError):
    code = ErrorCode.PAGE_NOT_FOUND

    def __init__(self, slug: str, *, section: str | None = None) -> None:
        message = f"page not found: {slug}"
        if section:
            message = f"{message} (listed in section '{section}')"
        super().__init__(message, slug=slug, section=section)


class PageExistsError(WikiError):
    code = ErrorCode.PAGE_EXISTS

    def __init__(self, slug: str) -> None:
        super().__init__(f"page already exists: {slug}", slug=slug)


class PageStatusError(WikiError):
    """Raised when a single page is requested for export but is not published."""

    code = ErrorCode.PAGE_NOT_EXPORTABLE

    def __init__(self, slug: str, status: str) -> None:
        super().__init__(f"page {slug} is {status}", slug=slug, status=status)


class SectionNotFoundError(WikiError):
    code = ErrorCode.SECTION_NOT_FOUND

    def __init__(self, key: str, *, link_type: str | None = None) -> None:
        label = key if key else "(root)"
        message = f"section not found: {label}"
        if link_type:
            message = f"{message} (via {link_type})"
        super().__init__(message, section=key, link_type=link_type)


class AmbiguousSectionError(WikiError):
    code = ErrorCode.AMBIGUOUS_SECTION

    def __init__(self, key: str, candidates: list[str] | None = None) -> None:
        if key:
            message = f"multiple sections match {key}"
        else:
            message = "multiple sections with empty slug"
        super().__init__(message, section=key, candidates=candidates or None)


class PageReadError(WikiError):
    code = ErrorCode.FILE_READ_ERROR


class PageWriteError(WikiError):
    code = ErrorCode.FILE_WRITE_ERROR


class IndexWriteError(WikiError):
    code = ErrorCode.FILE_WRITE_ERROR


class ExportWriteError(WikiError):
    code = ErrorCode.FILE_WRITE_ERROR


def format_error_json(code: ErrorCode | str, message: str, details: dict | None = None) -> str:
    """Format an arbitrary error as the same JSON envelope WikiError uses."""
    value = code.value if isinstance(code, ErrorCode) else code
    payload: dict[str, Any] = {"code": value, "message": message}
    if details:
        payload["details"] = details
    return json.dumps({"error": payload}, default=str)
