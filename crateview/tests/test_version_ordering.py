import random
from datetime import datetime, timedelta, timezone

import pytest

from crateview.models import Version
from crateview.versions import (
    compare_by_date,
    compare_by_semver,
    parse_semver,
    release_track,
    sort_by_date,
    sort_by_semver,
)

BASE = datetime(2024, 1, 1, tzinfo=timezone.utc)


def _version(version_id: int, num: str, minutes: int, **extra) -> Version:
    return Version(
        id=version_id,
        num=num,
        crate="demo",
        created_at=BASE + timedelta(minutes=minutes),
        **extra,
    )


def test_scenario_semver_and_date_orders():
    versions = [
        _version(1, "1.0.0", 1),
        _version(2, "2.0.0", 2),
        _version(3, "not-a-version", 3),
    ]

    assert [v.id for v in sort_by_semver(versions)] == [2, 1, 3]
    assert [v.id for v in sort_by_date(versions)] == [3, 2, 1]


def test_semver_equal_precedence_prefers_later_creation():
    older = _version(1, "1.0.0+build.1", 1)
    newer = _version(2, "1.0.0+build.2", 5)

    assert compare_by_semver(newer, older) < 0
    assert compare_by_semver(older, newer) > 0
    assert [v.id for v in sort_by_semver([older, newer])] == [2, 1]


def test_unparsable_versions_sink_regardless_of_timestamp():
    versions = [
        _version(1, "garbage", 100),
        _version(2, "0.0.1", 0),
        _version(3, "also bad", 50),
        _version(4, "10.0.0", 10),
    ]

    ordered = [v.id for v in sort_by_semver(versions)]

    assert ordered[:2] == [4, 2]
    # unparsable ones keep the creation-date tie-break among themselves
    assert ordered[2:] == [1, 3]


def test_prerelease_precedence():
    versions = [
        _version(1, "1.0.0-beta.2", 1),
        _version(2, "1.0.0", 2),
        _version(3, "1.0.0-beta.11", 3),
        _version(4, "1.0.0-rc.1", 4),
        _version(5, "0.9.9", 5),
    ]

    assert [v.num for v in sort_by_semver(versions)] == [
        "1.0.0",
        "1.0.0-rc.1",
        "1.0.0-beta.11",
        "1.0.0-beta.2",
        "0.9.9",
    ]


def test_date_order_is_reverse_chronological():
    minutes = random.Random(7).sample(range(10_000), 50)
    versions = [_version(index + 1, f"1.0.{index}", minute) for index, minute in enumerate(minutes)]

    ordered = sort_by_date(versions)

    assert [v.created_at for v in ordered] == sorted((v.created_at for v in versions), reverse=True)


def test_date_ties_break_by_numeric_id_descending():
    a = _version(9, "1.0.0", 0)
    b = _version(10, "1.0.1", 0)

    assert compare_by_date(b, a) < 0
    assert [v.id for v in sort_by_date([a, b])] == [10, 9]


def test_comparators_are_zero_for_same_record():
    version = _version(1, "1.0.0", 0)

    assert compare_by_semver(version, version) == 0
    assert compare_by_date(version, version) == 0


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("1.2.3", "1.2.3"),
        (" v1.2.3 ", "1.2.3"),
        ("=2.0.0-alpha.1", "2.0.0-alpha.1"),
        ("=v1.4.0", "1.4.0"),
        ("vv1.0.0", None),
        ("==1.0.0", None),
        ("vv==v1.0.0", None),
        ("1.0", None),
        ("", None),
        (None, None),
        ("one.two.three", None),
    ],
)
def test_parse_semver(raw, expected):
    parsed = parse_semver(raw)
    if expected is None:
        assert parsed is None
    else:
        assert str(parsed) == expected


@pytest.mark.parametrize(
    "num, track, prerelease",
    [
        ("0.3.7", "0.3", False),
        ("1.4.0", "1", False),
        ("12.0.0-rc.1", "12", True),
        ("broken", None, False),
    ],
)
def test_release_track_and_prerelease_flags(num, track, prerelease):
    version = _version(1, num, 0)

    assert version.release_track == track
    assert version.is_prerelease is prerelease
    assert release_track(parse_semver(num)) == track
