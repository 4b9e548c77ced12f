"""Tests for the update data models."""

import pytest
from packaging.version import Version

from autoupdater.core.models import ModMetadata, UpdateCandidate, UpdateQueue, spaced_pascal_case


@pytest.mark.parametrize("name, expected", [
    ("PolygonDreams", "Polygon Dreams"),
    ("XMLHelper", "XML Helper"),
    ("Helper2Mod", "Helper2 Mod"),
    ("already spaced", "already spaced"),
    ("snake_case_mod", "snake case mod"),
])
def test_spaced_pascal_case(name, expected):
    assert spaced_pascal_case(name) == expected


def test_display_name_defaults_to_spaced_name():
    candidate = UpdateCandidate(name="CollabUtils", url="u", checksums=())
    assert candidate.display_name == "Collab Utils"


def test_explicit_display_name_kept():
    candidate = UpdateCandidate(name="CollabUtils", url="u", checksums=(), display_name="Collab")
    assert candidate.display_name == "Collab"


def test_candidate_is_immutable():
    candidate = UpdateCandidate(name="A", url="u", checksums=(), version=Version("1.0"))
    with pytest.raises(AttributeError):
        candidate.url = "other"


def test_queue_from_pairs_sorted_by_name():
    pairs = [
        (UpdateCandidate(name=n, url="u", checksums=()), ModMetadata(name=n))
        for n in ("beta", "Alpha", "gamma")
    ]

    queue = UpdateQueue.from_pairs(pairs)

    assert [c.name for c, _ in queue] == ["Alpha", "beta", "gamma"]
    assert len(queue) == 3


def test_empty_queue_is_falsy():
    assert not UpdateQueue()
    assert len(UpdateQueue()) == 0
