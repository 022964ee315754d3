"""
algorithms/__init__.py — Algorithm Registry
=============================================
Single source of truth for every algorithm the visualizer knows about.

    from algorithms import Algorithm, REGISTRY, generate

REGISTRY is a dict keyed by the closed Algorithm enum:
    {
        Algorithm.KRUSKAL: AlgoInfo(key, label, fn, pseudocode, instance_kind, …),
        …
    }

AlgoInfo is a lightweight dataclass.  The engine, the web layer and the
CLI all consume it, so adding a new algorithm is: write the generator,
add an enum member and one entry here.

generate() drains a generator into an immutable Trace.  It is the only
place a generator is run.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Tuple, Union

from errors import ValidationError
from graph import Graph
from problems.instances import InstanceKind, TourInstance, WordLadderInstance

from algorithms.cycle_detection import directed_cycle   as _directed,   PSEUDOCODE as _directed_pc
from algorithms.cycle_detection import undirected_cycle as _undirected, UNDIRECTED_PSEUDOCODE as _undirected_pc
from algorithms.feedback_arc_set import feedback_arc_set as _fas,       PSEUDOCODE as _fas_pc
from algorithms.kruskal         import kruskal          as _kruskal,    PSEUDOCODE as _kruskal_pc
from algorithms.prim            import prim             as _prim,       PSEUDOCODE as _prim_pc
from algorithms.step            import Step, Trace
from algorithms.tsp             import tsp_backtracking as _tsp_bt,     PSEUDOCODE as _tsp_bt_pc
from algorithms.tsp             import tsp_two_opt      as _tsp_2opt,   TWO_OPT_PSEUDOCODE as _tsp_2opt_pc
from algorithms.word_ladder     import word_ladder      as _ladder,     PSEUDOCODE as _ladder_pc


class Algorithm(Enum):
    KRUSKAL          = "kruskal"
    PRIM             = "prim"
    TSP_BACKTRACKING = "tsp_backtracking"
    TSP_TWO_OPT      = "tsp_two_opt"
    WORD_LADDER      = "word_ladder"
    DIRECTED_CYCLE   = "directed_cycle"
    UNDIRECTED_CYCLE = "undirected_cycle"
    FEEDBACK_ARC_SET = "feedback_arc_set"


_INSTANCE_TYPES = {
    InstanceKind.GRAPH:       Graph,
    InstanceKind.WORD_LADDER: WordLadderInstance,
    InstanceKind.TOUR:        TourInstance,
}


# ---------------------------------------------------------------------------
# AlgoInfo — metadata card for each algorithm
# ---------------------------------------------------------------------------
@dataclass
class AlgoInfo:
    key:              Algorithm
    label:            str                    # human label, e.g. "Kruskal's MST"
    fn:               Callable               # the generator function
    pseudocode:       List[str]              # lines for the side-panel
    instance_kind:    InstanceKind           # what the generator consumes
    tags:             List[str] = field(default_factory=list)   # e.g. ["mst", "greedy"]
    options:          Tuple[str, ...] = ()   # keyword options fn accepts, e.g. ("start",)
    directed:         Optional[bool] = None  # force the graph's direction when validating
    complexity_time:  str       = ""         # e.g. "O(E log E)"
    complexity_space: str       = ""         # e.g. "O(V)"
    description:      str       = ""         # one-liner for the UI card

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key":              self.key.value,
            "label":            self.label,
            "instance":         self.instance_kind.value,
            "tags":             list(self.tags),
            "options":          list(self.options),
            "directed":         self.directed,
            "complexity_time":  self.complexity_time,
            "complexity_space": self.complexity_space,
            "description":      self.description,
            "pseudocode":       list(self.pseudocode),
        }


# ---------------------------------------------------------------------------
# THE REGISTRY
# ---------------------------------------------------------------------------
REGISTRY: Dict[Algorithm, AlgoInfo] = {

    Algorithm.KRUSKAL: AlgoInfo(
        key=Algorithm.KRUSKAL, label="Kruskal's MST", fn=_kruskal, pseudocode=_kruskal_pc,
        instance_kind=InstanceKind.GRAPH, directed=False,
        tags=["mst", "greedy", "union-find"],
        complexity_time="O(E log E)", complexity_space="O(V)",
        description="Sorts edges by weight and joins components without forming cycles.",
    ),

    Algorithm.PRIM: AlgoInfo(
        key=Algorithm.PRIM, label="Prim's MST", fn=_prim, pseudocode=_prim_pc,
        instance_kind=InstanceKind.GRAPH, options=("start",), directed=False,
        tags=["mst", "greedy"],
        complexity_time="O(V · E)", complexity_space="O(V)",
        description="Grows one tree from a start vertex, always taking the cheapest crossing edge.",
    ),

    Algorithm.TSP_BACKTRACKING: AlgoInfo(
        key=Algorithm.TSP_BACKTRACKING, label="TSP Backtracking", fn=_tsp_bt, pseudocode=_tsp_bt_pc,
        instance_kind=InstanceKind.TOUR,
        tags=["tsp", "exact", "branch-and-bound"],
        complexity_time="O(n!)", complexity_space="O(n)",
        description="Explores every tour from city A, pruning partial paths that can't beat the best.",
    ),

    Algorithm.TSP_TWO_OPT: AlgoInfo(
        key=Algorithm.TSP_TWO_OPT, label="TSP Nearest Neighbour + 2-opt", fn=_tsp_2opt,
        pseudocode=_tsp_2opt_pc, instance_kind=InstanceKind.TOUR,
        tags=["tsp", "heuristic", "suboptimal"],
        complexity_time="O(n²) per pass", complexity_space="O(n)",
        description="Greedy tour, then segment reversals until none helps. Fast but NOT always optimal.",
    ),

    Algorithm.WORD_LADDER: AlgoInfo(
        key=Algorithm.WORD_LADDER, label="Word Ladder (Bidirectional BFS)", fn=_ladder,
        pseudocode=_ladder_pc, instance_kind=InstanceKind.WORD_LADDER,
        tags=["bfs", "bidirectional", "shortest-path"],
        complexity_time="O(N · L · 26)", complexity_space="O(N · L)",
        description="Two frontiers from begin and end word. Meets in the middle.",
    ),

    Algorithm.DIRECTED_CYCLE: AlgoInfo(
        key=Algorithm.DIRECTED_CYCLE, label="Directed Cycle Detection", fn=_directed,
        pseudocode=_directed_pc, instance_kind=InstanceKind.GRAPH, directed=True,
        tags=["dfs", "cycle", "directed"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="Three-colour DFS. A back edge to an in-progress vertex is a cycle.",
    ),

    Algorithm.UNDIRECTED_CYCLE: AlgoInfo(
        key=Algorithm.UNDIRECTED_CYCLE, label="Undirected Cycle Detection", fn=_undirected,
        pseudocode=_undirected_pc, instance_kind=InstanceKind.GRAPH, directed=False,
        tags=["dfs", "cycle", "undirected"],
        complexity_time="O(V + E)", complexity_space="O(V)",
        description="DFS that ignores the edge to its parent. Any other visited neighbour is a cycle.",
    ),

    Algorithm.FEEDBACK_ARC_SET: AlgoInfo(
        key=Algorithm.FEEDBACK_ARC_SET, label="Feedback Arc Set", fn=_fas,
        pseudocode=_fas_pc, instance_kind=InstanceKind.GRAPH, directed=True,
        tags=["dfs", "cycle", "directed", "greedy"],
        complexity_time="O(V · (V + E))", complexity_space="O(V + E)",
        description="Repeated DFS removing back edges until the graph is a DAG. Greedy, not always minimum.",
    ),
}


# ---------------------------------------------------------------------------
# Lookup helpers
# ---------------------------------------------------------------------------
def get_algorithm(key: Union[Algorithm, str]) -> Optional[AlgoInfo]:
    """Return AlgoInfo by enum member or key string, or None."""
    if isinstance(key, Algorithm):
        return REGISTRY.get(key)
    try:
        return REGISTRY.get(Algorithm(key))
    except ValueError:
        return None


def parse_algorithm(key: Any) -> Algorithm:
    """Like get_algorithm, but an unknown key is a ValidationError."""
    info = get_algorithm(key) if isinstance(key, (Algorithm, str)) else None
    if info is None:
        known = ", ".join(a.value for a in Algorithm)
        raise ValidationError([f"Unknown algorithm {key!r}. Choose one of: {known}"])
    return info.key


def list_algorithms() -> List[AlgoInfo]:
    """Return all registered algorithms in insertion order."""
    return list(REGISTRY.values())


def algorithms_by_tag(tag: str) -> List[AlgoInfo]:
    """Filter registry by tag."""
    return [a for a in REGISTRY.values() if tag in a.tags]


# ---------------------------------------------------------------------------
# Trace generation
# ---------------------------------------------------------------------------
def generate(algorithm: Union[Algorithm, str], instance: Any, **options: Any) -> Trace:
    """
    Run `algorithm` on a validated instance and collect every Step.

    Raises ValidationError for an unknown algorithm, an instance of the
    wrong kind, or an option the algorithm doesn't take.
    """
    info = REGISTRY[parse_algorithm(algorithm)]

    expected = _INSTANCE_TYPES[info.instance_kind]
    if not isinstance(instance, expected):
        raise ValidationError([
            f"{info.label} needs a {info.instance_kind.value} instance, "
            f"got {type(instance).__name__}"
        ])

    unknown = sorted(set(options) - set(info.options))
    if unknown:
        raise ValidationError([f"{info.label} does not accept option(s): {', '.join(unknown)}"])

    steps: Tuple[Step, ...] = tuple(info.fn(instance, **options))
    return Trace(algorithm=info.key.value, steps=steps)


__all__ = [
    "AlgoInfo",
    "Algorithm",
    "REGISTRY",
    "algorithms_by_tag",
    "generate",
    "get_algorithm",
    "list_algorithms",
    "parse_algorithm",
]
