"""Version detection for installed and source-tree builds."""

from __future__ import annotations

import os
import re
from importlib import metadata
from pathlib import Path

_FALLBACK_VERSION = "unknown"
_DISTRIBUTION_NAME = "regexparse"

# Pattern to match version lines like: ## [1.0.0] - 2026-10-18
_VERSION_PATTERN = re.compile(r"^## \[(\d+\.\d+\.\d+)\]")


def _find_changelog() -> Path | None:
    """Find CHANGELOG.md at the repo root when running from a source checkout."""
    candidate = Path(__file__).resolve().parent.parent.parent / "CHANGELOG.md"
    return candidate if candidate.exists() else None


def _get_version_from_changelog() -> str | None:
    changelog_path = _find_changelog()
    if not changelog_path:
        return None

    try:
        with open(changelog_path, encoding="utf-8") as f:
            for line in f:
                match = _VERSION_PATTERN.match(line)
                if match:
                    return match.group(1)
    except OSError:
        pass

    return None


def get_version() -> str:
    """Get the current version string.

    Priority:
    1. BUILD_VERSION environment variable (set during CI/CD)
    2. Installed distribution metadata
    3. Latest released version in CHANGELOG.md
    4. Fallback to "unknown"
    """
    build_version = os.environ.get("BUILD_VERSION")
    if build_version and build_version.strip():
        return build_version.strip()

    try:
        return metadata.version(_DISTRIBUTION_NAME)
    except metadata.PackageNotFoundError:
        pass

    return _get_version_from_changelog() or _FALLBACK_VERSION


__version__ = get_version()
