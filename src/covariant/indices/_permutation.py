from __future__ import annotations

__all__ = ["Permutation", "index_orbit"]

from dataclasses import dataclass

from ._index import Index
from ._indices import Indices


@dataclass(frozen=True, slots=True)
class Permutation:
    """Rearrangement of slots: slot `i` of the result takes slot `images[i]` of the input."""

    images: tuple[int, ...]

    def __post_init__(self):
        if sorted(self.images) != list(range(len(self.images))):
            raise ValueError(
                f"Expected a rearrangement of 0 until {len(self.images)}, got {self.images}"
            )

    @staticmethod
    def identity(size: int) -> Permutation:
        return Permutation(tuple(range(size)))

    @staticmethod
    def between(source: Indices, target: Indices) -> Permutation:
        """The permutation that maps the `source` ordering onto the `target` ordering."""
        return Permutation(tuple(source.index_of(index) for index in target))

    def __len__(self) -> int:
        return len(self.images)

    def __call__(self, indices: Indices) -> Indices:
        return Indices(*(indices[i] for i in self.images))

    def inverse(self) -> Permutation:
        inverse = [0] * len(self.images)
        for i, image in enumerate(self.images):
            inverse[image] = i
        return Permutation(tuple(inverse))

    def sign(self) -> int:
        # Each cycle of length n is made of n - 1 transpositions
        visited = [False] * len(self.images)
        transpositions = 0
        for start in range(len(self.images)):
            length = 0
            position = start
            while not visited[position]:
                visited[position] = True
                position = self.images[position]
                length += 1
            if length > 0:
                transpositions += length - 1
        return -1 if transpositions % 2 == 1 else 1


def index_orbit(indices: Indices, selected: Indices) -> list[Indices]:
    """All distinct index lists obtained by permuting the `selected` indexes among their slots.

    Slots holding an index that is not selected keep it. The first list of the orbit is always
    the original order.
    """
    positions = sorted({indices.index_of(index) for index in selected})
    candidates = tuple(indices[position] for position in positions)

    orbit: list[Indices] = []
    seen: set[tuple[tuple[str, int, int, bool], ...]] = set()

    def fill(slot: int, used: tuple[Index, ...], remaining: tuple[Index, ...]):
        if slot == len(indices):
            key = tuple(
                (index.name, index.range.start, index.range.stop, index.contravariant)
                for index in used
            )
            if key not in seen:
                seen.add(key)
                orbit.append(Indices(*used))
        elif slot not in positions:
            fill(slot + 1, (*used, indices[slot]), remaining)
        else:
            for i, candidate in enumerate(remaining):
                fill(slot + 1, (*used, candidate), remaining[:i] + remaining[i + 1 :])

    fill(0, (), candidates)

    return orbit
