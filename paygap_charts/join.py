"""Keyed enter/update/exit binding between data items and matplotlib artists."""
from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, Iterable, List, Optional

from matplotlib.artist import Artist


@dataclass
class JoinResult:
    entered: List[Hashable] = field(default_factory=list)
    updated: List[Hashable] = field(default_factory=list)
    exited: List[Hashable] = field(default_factory=list)


class ArtistJoin:
    """
    One chart layer: keeps `key -> artist` in data order.

    `join` computes the target keys from the items, removes artists whose key is
    gone, creates artists for new keys with `enter(item)` and then applies
    `update(artist, item)` to every bound artist. Without a key function the
    item's position is its key.
    """

    def __init__(self, key: Optional[Callable[[int, Any], Hashable]] = None):
        self.key = key
        self._artists: Dict[Hashable, Artist] = {}

    def join(
        self,
        items: Iterable[Any],
        enter: Callable[[Any], Artist],
        update: Callable[[Artist, Any], None],
    ) -> JoinResult:
        target: Dict[Hashable, Any] = {}
        for i, item in enumerate(items):
            k = self.key(i, item) if self.key else i
            if k in target:
                raise ValueError(f"duplicate join key: {k!r}")
            target[k] = item

        result = JoinResult()
        for k in [k for k in self._artists if k not in target]:
            self._artists.pop(k).remove()
            result.exited.append(k)

        bound: Dict[Hashable, Artist] = {}
        for k, item in target.items():
            artist = self._artists.get(k)
            if artist is None:
                artist = enter(item)
                result.entered.append(k)
            else:
                result.updated.append(k)
            update(artist, item)
            bound[k] = artist
        self._artists = bound
        return result

    def clear(self) -> None:
        for artist in self._artists.values():
            artist.remove()
        self._artists = {}

    def keys(self) -> List[Hashable]:
        return list(self._artists)

    def artists(self) -> List[Artist]:
        return list(self._artists.values())

    def __getitem__(self, key: Hashable) -> Artist:
        return self._artists[key]

    def __contains__(self, key: object) -> bool:
        return key in self._artists

    def __len__(self) -> int:
        return len(self._artists)
