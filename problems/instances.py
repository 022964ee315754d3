"""
instances.py — Non-graph Problem Instances
============================================
Graph algorithms consume a `graph.Graph`.  The other problems get their
own small immutable records here.  All of them are produced by the
validator; generators read them once and keep nothing.
"""

import math
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence, Tuple


class InstanceKind(Enum):
    """Closed set of problem shapes a trace generator can consume."""

    GRAPH       = "graph"
    WORD_LADDER = "word_ladder"
    TOUR        = "tour"


# ---------------------------------------------------------------------------
# Word ladder
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class WordLadderInstance:
    """
    Attributes:
        begin_word : Start of the ladder.  Need not be in the word list.
        end_word   : Goal.  Always a member of the word list.
        word_list  : Dictionary, duplicates removed, input order kept.
    """

    begin_word: str
    end_word:   str
    word_list:  Tuple[str, ...]


# ---------------------------------------------------------------------------
# Travelling salesman
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class City:
    id:   int
    x:    float
    y:    float
    name: str = ""


@dataclass(frozen=True)
class TourInstance:
    """
    Attributes:
        distances : Square matrix, distances[i][j] = cost of travelling i → j.
        cities    : Optional positions/names (empty when built from a matrix).
    """

    distances: Tuple[Tuple[float, ...], ...]
    cities:    Tuple[City, ...] = ()

    @property
    def size(self) -> int:
        return len(self.distances)

    def name(self, city_id: int) -> str:
        if self.cities and self.cities[city_id].name:
            return self.cities[city_id].name
        return chr(65 + city_id) if city_id < 26 else str(city_id)

    def tour_cost(self, path: Sequence[int]) -> float:
        """Cost of the closed tour visiting `path` in order and returning home."""
        if len(path) < 2:
            return 0.0
        legs = sum(self.distances[a][b] for a, b in zip(path, path[1:]))
        return legs + self.distances[path[-1]][path[0]]

    @classmethod
    def from_cities(cls, cities: Sequence[City]) -> "TourInstance":
        """Distances are floored Euclidean distances between city positions."""
        matrix = tuple(
            tuple(
                0.0 if a.id == b.id else float(math.floor(math.hypot(a.x - b.x, a.y - b.y)))
                for b in cities
            )
            for a in cities
        )
        return cls(distances=matrix, cities=tuple(cities))

    @classmethod
    def from_matrix(cls, matrix: Sequence[Sequence[float]], names: Optional[Sequence[str]] = None) -> "TourInstance":
        cities: Tuple[City, ...] = ()
        if names:
            cities = tuple(City(id=i, x=0.0, y=0.0, name=n) for i, n in enumerate(names))
        return cls(distances=tuple(tuple(float(v) for v in row) for row in matrix), cities=cities)
