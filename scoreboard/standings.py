from collections.abc import Callable, Iterable, Iterator


class Standings:
    """
    Ordered sequence of team names, best first, with an index from name to position.

    The order is only as fresh as the last `rebuild` or `promote`: mutating a team does not reorder it.
    """

    def __init__(self, names: Iterable[str] = ()):
        self._order: list[str] = list(names)
        self._index: dict[str, int] = {}
        self._reindex(0)

    def _reindex(self, start: int, end: int | None = None):
        for i in range(start, len(self._order) if end is None else end):
            self._index[self._order[i]] = i

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[str]:
        return iter(self._order)

    def __contains__(self, name: object) -> bool:
        return name in self._index

    def __getitem__(self, pos: int) -> str:
        return self._order[pos]

    def names(self) -> list[str]:
        return list(self._order)

    def position(self, name: str) -> int:
        "Zero-based position of a team."
        return self._index[name]

    def rank(self, name: str) -> int:
        "One-based rank of a team."
        return self._index[name] + 1

    def rebuild(self, names: Iterable[str]):
        self._order = list(names)
        self._index = {}
        self._reindex(0)

    def promote(self, name: str, is_better: Callable[[str, str], bool]) -> int:
        """
        Move a team upwards one adjacent step at a time while it beats the team directly above it.
        Every other team keeps its relative order.
        Returns the new zero-based position.
        """
        old = self._index[name]
        new = old
        while new > 0 and is_better(name, self._order[new - 1]):
            new -= 1
        if new != old:
            del self._order[old]
            self._order.insert(new, name)
            self._reindex(new, old + 1)
        return new

    def scan_from_bottom(self) -> Iterator[str]:
        return reversed(self._order)
