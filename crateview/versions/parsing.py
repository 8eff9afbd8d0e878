"""Semantic version parsing and release-track classification."""

from __future__ import annotations

import logging
from typing import Optional

import semver

LOGGER = logging.getLogger(__name__)


def parse_semver(value: Optional[str]) -> Optional[semver.Version]:
    """Parse a version number, returning ``None`` when it is not valid SemVer.

    Surrounding whitespace and a leading ``v`` or ``=`` are tolerated, the same
    leniency registries apply to hand-typed version strings.
    """

    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if candidate.startswith("="):
        candidate = candidate[1:].lstrip()
    if candidate.startswith("v"):
        candidate = candidate[1:]
    if not candidate:
        return None
    try:
        return semver.Version.parse(candidate)
    except ValueError:
        LOGGER.debug("Unparsable version number %r", value)
        return None


def is_prerelease(parsed: Optional[semver.Version]) -> bool:
    return parsed is not None and bool(parsed.prerelease)


def release_track(parsed: Optional[semver.Version]) -> Optional[str]:
    """Return the release line a version belongs to.

    ``0.x`` versions are split by minor (``"0.3"``) since every minor bump is
    breaking there; ``1.0.0`` and later are grouped by major (``"1"``).
    """

    if parsed is None:
        return None
    if parsed.major == 0:
        return f"0.{parsed.minor}"
    return str(parsed.major)
