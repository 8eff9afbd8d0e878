"""Version parsing and ordering helpers."""

from .ordering import compare_by_date, compare_by_semver, sort_by_date, sort_by_semver
from .parsing import is_prerelease, parse_semver, release_track

__all__ = [
    "compare_by_date",
    "compare_by_semver",
    "sort_by_date",
    "sort_by_semver",
    "is_prerelease",
    "parse_semver",
    "release_track",
]
