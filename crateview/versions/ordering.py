"""Total orderings over version records (newest first)."""

from __future__ import annotations

from functools import cmp_to_key
from typing import TYPE_CHECKING, Iterable, List

if TYPE_CHECKING:
    from crateview.models.version import Version


def _created_desc(a: "Version", b: "Version") -> int:
    if a.created_at == b.created_at:
        return 0
    return -1 if a.created_at > b.created_at else 1


def compare_by_semver(a: "Version", b: "Version") -> int:
    """Semver precedence descending; unparsable versions sink to the end."""

    a_semver = a.semver
    b_semver = b.semver

    if a_semver is None and b_semver is None:
        return _created_desc(a, b)
    if a_semver is None:
        return 1
    if b_semver is None:
        return -1
    result = b_semver.compare(a_semver)
    if result == 0:
        return _created_desc(a, b)
    return result


def compare_by_date(a: "Version", b: "Version") -> int:
    """Creation time descending; identical timestamps fall back to id descending."""

    if a.created_at == b.created_at:
        a_id, b_id = int(a.id), int(b.id)
        if a_id == b_id:
            return 0
        return -1 if a_id > b_id else 1
    return _created_desc(a, b)


semver_key = cmp_to_key(compare_by_semver)
date_key = cmp_to_key(compare_by_date)


def sort_by_semver(versions: Iterable["Version"]) -> List["Version"]:
    return sorted(versions, key=semver_key)


def sort_by_date(versions: Iterable["Version"]) -> List["Version"]:
    return sorted(versions, key=date_key)
