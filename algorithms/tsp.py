"""
tsp.py — Travelling Salesman
=============================
Two generators over the same TourInstance:

tsp_backtracking — exact branch-and-bound.
  Depth-first over permutations starting at city 0, children in ascending
  city id.  Paths are immutable tuples: every recursive call extends its
  own copy, so no Step ever aliases a path that is later changed.

  Yields a Step at:
    1. Start at city 0
    2. Each candidate next city  →  "trying"
    3. Partial cost ≥ best so far  →  PRUNED (that subtree is skipped)
    4. Complete permutation  →  closed-tour cost vs best (improvement or not)
    5. All children of a city exhausted  →  backtrack
    6. Final  →  optimal tour

tsp_two_opt — nearest-neighbour construction followed by 2-opt segment
  reversals until no reversal shortens the tour.  Fast, not guaranteed
  optimal; handy to compare against the exact search.
"""

from typing import Generator, List, Tuple

from algorithms.step import INF, Step, StepBuilder, TourPayload
from problems.instances import TourInstance


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def TSP(dist):",                                          # 0
    "    best ← ([], ∞);  explore([0], 0)",                    # 1
    "def explore(path, cost):",                                # 2
    "    for city in ascending ids not in path:",              # 3
    "        try path + [city], cost + dist[last][city]",      # 4
    "        if cost' ≥ best.cost: prune; continue",           # 5
    "        if path' is complete:",                           # 6
    "            tour ← cost' + dist[city][0]",                # 7
    "            if tour < best.cost: best ← (path', tour)",   # 8
    "        else: explore(path', cost')",                     # 9
    "    backtrack",                                           # 10
    "    return best",                                         # 11
]

TWO_OPT_PSEUDOCODE: List[str] = [
    "def TwoOpt(dist):",                                       # 0
    "    tour ← nearest-neighbour tour from city 0",           # 1
    "    repeat until no improvement:",                        # 2
    "        for i < j: reverse tour[i..j]",                   # 3
    "            if shorter: keep it",                         # 4
    "    return tour",                                         # 5
]


def _format_path(instance: TourInstance, path: Tuple[int, ...], closed: bool = False) -> str:
    names = [instance.name(c) for c in path]
    if closed and path:
        names.append(instance.name(path[0]))
    return " → ".join(names)


# ---------------------------------------------------------------------------
# Generator — branch and bound
# ---------------------------------------------------------------------------
def tsp_backtracking(instance: TourInstance) -> Generator[Step, None, None]:
    sb = StepBuilder()
    n = instance.size
    dist = instance.distances

    best_path: Tuple[int, ...] = ()
    best_cost: float = INF

    def payload(path, cost, pruned=False, candidate=None) -> TourPayload:
        return TourPayload(
            current_path=path,
            current_cost=cost,
            best_path=best_path,
            best_cost=best_cost,
            pruned=pruned,
            candidate=candidate,
        )

    if n == 0:
        yield sb.emit(payload((), 0.0), "No cities to visit.", pseudocode_line=0)
        yield sb.emit(payload((), 0.0), "Solution complete: the empty tour.", pseudocode_line=11, is_final=True)
        return

    start = (0,)
    yield sb.emit(
        payload(start, 0.0),
        f"Starting TSP solution. Beginning at city {instance.name(0)}",
        pseudocode_line=1,
    )

    if n == 1:
        best_path, best_cost = start, 0.0

    def explore(path: Tuple[int, ...], cost: float, parent_cost: float):
        nonlocal best_path, best_cost
        last = path[-1]

        for city in range(n):
            if city in path:
                continue
            new_path = path + (city,)
            new_cost = cost + dist[last][city]

            yield sb.emit(
                payload(new_path, new_cost, candidate=city),
                f"Trying city {instance.name(city)} from {instance.name(last)}. "
                f"Distance so far: {new_cost:g}",
                pseudocode_line=4,
            )

            if new_cost >= best_cost:
                yield sb.emit(
                    payload(new_path, new_cost, pruned=True, candidate=city),
                    f"Pruning path as current distance {new_cost:g} is already "
                    f">= best distance {best_cost:g}",
                    pseudocode_line=5,
                )
                continue

            if len(new_path) == n:
                tour = new_cost + dist[city][new_path[0]]
                if tour < best_cost:
                    best_path, best_cost = new_path, tour
                    yield sb.emit(
                        payload(new_path, tour, candidate=city),
                        f"Found new best path with distance {tour:g}: "
                        f"{_format_path(instance, new_path, closed=True)}",
                        pseudocode_line=8,
                    )
                else:
                    yield sb.emit(
                        payload(new_path, tour, candidate=city),
                        f"Path complete but not better than best ({tour:g} >= {best_cost:g}): "
                        f"{_format_path(instance, new_path, closed=True)}",
                        pseudocode_line=7,
                    )
                continue

            yield from explore(new_path, new_cost, cost)

        if len(path) > 1:
            yield sb.emit(
                payload(path[:-1], parent_cost),
                f"Backtracking from {instance.name(last)} to {instance.name(path[-2])}",
                pseudocode_line=10,
            )

    yield from explore(start, 0.0, 0.0)

    yield sb.emit(
        payload((), 0.0),
        f"Solution complete! Best tour has distance {best_cost:g}: "
        f"{_format_path(instance, best_path, closed=True)}",
        pseudocode_line=11,
        is_final=True,
    )


# ---------------------------------------------------------------------------
# Generator — nearest neighbour + 2-opt
# ---------------------------------------------------------------------------
def tsp_two_opt(instance: TourInstance) -> Generator[Step, None, None]:
    sb = StepBuilder()
    n = instance.size
    dist = instance.distances

    if n == 0:
        yield sb.emit(TourPayload(), "No cities to visit.", pseudocode_line=0)
        yield sb.emit(TourPayload(best_cost=0.0), "Final tour: the empty tour.", pseudocode_line=5, is_final=True)
        return

    path: Tuple[int, ...] = (0,)
    yield sb.emit(
        TourPayload(current_path=path),
        f"Building a nearest-neighbour tour from city {instance.name(0)}",
        pseudocode_line=1,
    )

    while len(path) < n:
        last = path[-1]
        nxt = min((c for c in range(n) if c not in path), key=lambda c: (dist[last][c], c))
        path = path + (nxt,)
        partial = sum(dist[a][b] for a, b in zip(path, path[1:]))
        yield sb.emit(
            TourPayload(current_path=path, current_cost=partial, candidate=nxt),
            f"Nearest unvisited city to {instance.name(last)} is {instance.name(nxt)} "
            f"({dist[last][nxt]:g})",
            pseudocode_line=1,
        )

    best_path, best_cost = path, instance.tour_cost(path)
    yield sb.emit(
        TourPayload(current_path=best_path, current_cost=best_cost, best_path=best_path, best_cost=best_cost),
        f"Initial path using nearest neighbour: {_format_path(instance, best_path, closed=True)} "
        f"with distance {best_cost:g}",
        pseudocode_line=2,
    )

    improved = True
    while improved:
        improved = False
        for i in range(1, n - 1):
            for j in range(i + 1, n):
                candidate = best_path[:i] + best_path[i:j + 1][::-1] + best_path[j + 1:]
                cost = instance.tour_cost(candidate)
                if cost < best_cost:
                    best_path, best_cost = candidate, cost
                    improved = True
                    yield sb.emit(
                        TourPayload(
                            current_path=candidate,
                            current_cost=cost,
                            best_path=best_path,
                            best_cost=best_cost,
                        ),
                        f"2-opt improvement: reversed the segment from position {i} to {j}, "
                        f"distance now {cost:g}",
                        pseudocode_line=4,
                    )

    yield sb.emit(
        TourPayload(current_path=best_path, current_cost=best_cost, best_path=best_path, best_cost=best_cost),
        f"Final tour with distance {best_cost:g}: {_format_path(instance, best_path, closed=True)}",
        pseudocode_line=5,
        is_final=True,
    )
