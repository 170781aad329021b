"""Enter/update/exit reconciliation of artists."""

from __future__ import annotations

import pytest
from matplotlib.figure import Figure
from matplotlib.patches import Rectangle

from paygap_charts.join import ArtistJoin

pytestmark = pytest.mark.unit


@pytest.fixture
def ax():
    return Figure().add_subplot()


def _bind(ax, join, items):
    return join.join(
        items,
        enter=lambda item: ax.add_patch(Rectangle((0, 0), 1, 1)),
        update=lambda artist, item: artist.set_height(item[1]),
    )


def test_first_join_enters_everything(ax) -> None:
    join = ArtistJoin(key=lambda i, item: item[0])
    result = _bind(ax, join, [("a", 1), ("b", 2)])
    assert result.entered == ["a", "b"]
    assert result.updated == [] and result.exited == []
    assert len(ax.patches) == 2
    assert join["b"].get_height() == 2


def test_rejoin_updates_creates_and_removes(ax) -> None:
    join = ArtistJoin(key=lambda i, item: item[0])
    _bind(ax, join, [("a", 1), ("b", 2)])
    kept = join["b"]

    result = _bind(ax, join, [("c", 3), ("b", 5)])
    assert result.entered == ["c"]
    assert result.updated == ["b"]
    assert result.exited == ["a"]
    assert join.keys() == ["c", "b"]
    assert join["b"] is kept and kept.get_height() == 5
    assert len(ax.patches) == 2


def test_default_key_is_position(ax) -> None:
    join = ArtistJoin()
    _bind(ax, join, [("x", 1), ("y", 2), ("z", 3)])
    result = _bind(ax, join, [("y", 7)])
    assert result.updated == [0]
    assert result.exited == [1, 2]
    assert join[0].get_height() == 7


def test_empty_join_removes_all(ax) -> None:
    join = ArtistJoin()
    _bind(ax, join, [("a", 1)])
    result = _bind(ax, join, [])
    assert result.exited == [0]
    assert len(join) == 0
    assert len(ax.patches) == 0


def test_duplicate_keys_raise(ax) -> None:
    join = ArtistJoin(key=lambda i, item: item[0])
    with pytest.raises(ValueError, match="duplicate"):
        _bind(ax, join, [("a", 1), ("a", 2)])


def test_clear(ax) -> None:
    join = ArtistJoin()
    _bind(ax, join, [("a", 1), ("b", 2)])
    join.clear()
    assert len(join) == 0 and 0 not in join
    assert len(ax.patches) == 0
