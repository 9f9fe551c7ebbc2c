"""Configuration management for kbwiki.

This module contains root discovery and the configurable constants of the
engine. File names and link vocabularies are documented here rather than
scattered throughout the codebase.
"""

import logging
import os
from pathlib import Path

from .errors import ErrorCode, WikiError

log = logging.getLogger(__name__)


class ConfigurationError(WikiError):
    """Raised when required configuration is missing."""

    code = ErrorCode.CONFIGURATION_ERROR


# =============================================================================
# File Layout
# =============================================================================

# Persisted navigation index, one per wiki root
INDEX_FILENAME = "_index.yaml"

# Every page lives at <root>/<slug><PAGE_SUFFIX>
PAGE_SUFFIX = ".md"

# Directories with this name are skipped by the page walk unless templates
# are explicitly requested
TEMPLATES_DIRNAME = "templates"

# Project marker file discovered by walking up from the working directory
PROJECT_CONFIG_FILENAME = ".kbconfig"

# Maximum directory levels walked when looking for PROJECT_CONFIG_FILENAME.
# Prevents runaway traversal on unusual filesystems.
MAX_CONFIG_SEARCH_DEPTH = 10


# =============================================================================
# Index Semantics
# =============================================================================

# Version written to index files; missing or non-positive values normalize to it
DEFAULT_INDEX_VERSION = 1

# Title given to the implicit root section when pages carry no section label
ROOT_SECTION_TITLE = "General"

# Section link types, in resolution order
LINK_TYPES: tuple[str, ...] = ("depends_on", "related_to")

# Page statuses excluded from manifests
SKIPPED_STATUSES = frozenset({"draft", "archived"})

# Tag filter mode requiring every tag (any other mode means "at least one")
TAG_MODE_ALL = "all"


def get_wiki_root() -> Path:
    """Get the wiki root directory.

    Discovery order:
    1. KBWIKI_ROOT environment variable (explicit override)
    2. Walk up from cwd looking for .kbconfig with a wiki_path field
    3. Error with helpful message

    Raises:
        ConfigurationError: If no wiki root can be found.
    """
    root = os.environ.get("KBWIKI_ROOT")
    if root:
        return Path(root)

    project_config = _discover_project_config()
    if project_config:
        return project_config["wiki_path"]

    raise ConfigurationError(
        "No wiki root found. Options:\n"
        "  1. Set KBWIKI_ROOT to an existing wiki directory\n"
        "  2. Add a .kbconfig with 'wiki_path: <dir>' at your project root"
    )


def get_templates_root() -> Path | None:
    """Get an out-of-tree templates directory, if one is configured.

    Discovery order:
    1. KBWIKI_TEMPLATES_ROOT environment variable
    2. templates_path field of the discovered .kbconfig

    Returns:
        Path to the templates directory, or None when not configured.
    """
    root = os.environ.get("KBWIKI_TEMPLATES_ROOT")
    if root:
        return Path(root)

    project_config = _discover_project_config()
    if project_config:
        return project_config.get("templates_path")
    return None


def _discover_project_config(
    start_dir: Path | None = None, max_depth: int = MAX_CONFIG_SEARCH_DEPTH
) -> dict[str, Path] | None:
    """Walk up from start_dir looking for .kbconfig with wiki_path.

    Args:
        start_dir: Directory to start from (defaults to cwd)
        max_depth: Maximum directories to traverse up

    Returns:
        Dict with "config", "wiki_path" and optionally "templates_path"
        (all resolved Paths), or None if no usable config was found.
    """
    import yaml

    current = Path(start_dir or os.getcwd()).resolve()

    for _ in range(max_depth):
        config_file = current / PROJECT_CONFIG_FILENAME
        if config_file.exists():
            try:
                data = yaml.safe_load(config_file.read_text(encoding="utf-8")) or {}
            except (OSError, yaml.YAMLError) as e:
                log.warning("Ignoring unreadable %s: %s", config_file, e)
                data = {}
            if isinstance(data, dict) and data.get("wiki_path"):
                wiki_path = (current / str(data["wiki_path"])).resolve()
                if wiki_path.is_dir():
                    found = {"config": config_file, "wiki_path": wiki_path}
                    if data.get("templates_path"):
                        found["templates_path"] = (current / str(data["templates_path"])).resolve()
                    return found

        parent = current.parent
        if parent == current:  # Reached filesystem root
            break
        current = parent

    return None
