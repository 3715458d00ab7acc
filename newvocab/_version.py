# -*- coding: utf-8 -*-

from __future__ import annotations

from importlib import metadata
from pathlib import Path

_DIST = "newvocab"
_UNKNOWN = "0.0.0"


def _source_tree_version() -> str:
    """Version declared in pyproject.toml when running from a checkout."""

    try:
        import tomllib  # py>=3.11
    except ImportError:
        return _UNKNOWN
    pyproject = Path(__file__).resolve().parent.parent / "pyproject.toml"
    try:
        with open(pyproject, "rb") as f:
            project = tomllib.load(f).get("project", {})
    except (OSError, ValueError):
        return _UNKNOWN
    return str(project.get("version", "") or "").strip() or _UNKNOWN


def detect_version() -> str:
    try:
        return str(metadata.version(_DIST) or "").strip() or _source_tree_version()
    except metadata.PackageNotFoundError:
        return _source_tree_version()


VERSION = detect_version()
__version__ = VERSION

__all__ = ["VERSION", "__version__", "detect_version"]
