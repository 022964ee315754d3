"""
step.py — Algorithm Step Snapshot
==================================
Every algorithm is a generator that yields Step objects.
A Step is a frozen-in-time picture of everything a renderer needs to
draw one frame:

    • A human-readable narration of *why* this step happened
    • An algorithm-specific payload:
        – GraphPayload   vertices / edges with their visual roles (MST, cycles)
        – SearchPayload  visited sets, frontiers, meeting point (word ladder)
        – TourPayload    current path, best path, best cost, pruned flag (TSP)
    • Which line of pseudocode is executing right now

Design decisions:
  - Step and every payload are frozen dataclasses holding tuples only.
    A Step is never mutated after creation; a modified copy is a brand new
    value (`dataclasses.replace`).
  - Generators build Steps through a StepBuilder, a mutable scratch-pad
    that snapshots its state into fresh tuples on every build, so emitted
    Steps never alias the generator's working state.
  - A Trace is the drained generator: non-empty, numbered 0..n-1, last
    Step final.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Dict, FrozenSet, Iterator, Optional, Tuple, Union

from errors import AlgorithmInvariantError
from graph import EdgeKind, EdgeRole, Graph, VisitState

INF = float("inf")


# ---------------------------------------------------------------------------
# Graph payload
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class VertexView:
    id:          int
    x:           float
    y:           float
    visit_state: VisitState = VisitState.UNVISITED


@dataclass(frozen=True)
class EdgeView:
    id:     int
    source: int
    target: int
    weight: float
    role:   EdgeRole           = EdgeRole.UNPROCESSED
    kind:   Optional[EdgeKind] = None


@dataclass(frozen=True)
class GraphPayload:
    """
    Attributes:
        vertices     : Every vertex, input order, with its visit state.
        edges        : Every edge, input order, with its role.
        total_weight : Weight of the edges included so far (MST).
        spanning     : MST only: True/False once known, else None.
        cycle_found  : Cycle detection only: True/False once known, else None.
        cycle        : Vertex ids around the detected cycle, first == last.
        stack        : Current DFS stack (cycle detection).
    """

    vertices:     Tuple[VertexView, ...] = ()
    edges:        Tuple[EdgeView, ...]   = ()
    total_weight: float                  = 0.0
    spanning:     Optional[bool]         = None
    cycle_found:  Optional[bool]         = None
    cycle:        Tuple[int, ...]        = ()
    stack:        Tuple[int, ...]        = ()

    def edges_with_role(self, role: EdgeRole) -> Tuple[EdgeView, ...]:
        return tuple(e for e in self.edges if e.role is role)


# ---------------------------------------------------------------------------
# Search payload
# ---------------------------------------------------------------------------
class SearchDirection(Enum):
    FORWARD  = "forward"
    BACKWARD = "backward"


@dataclass(frozen=True)
class FrontierEntry:
    node:  str
    path:  Tuple[str, ...]
    depth: int


@dataclass(frozen=True)
class RejectedCandidate:
    word:   str
    reason: str


@dataclass(frozen=True)
class SearchPayload:
    visited_forward:   Tuple[str, ...]               = ()
    visited_backward:  Tuple[str, ...]               = ()
    frontier_forward:  Tuple[FrontierEntry, ...]     = ()
    frontier_backward: Tuple[FrontierEntry, ...]     = ()
    direction:         Optional[SearchDirection]     = None
    current:           Optional[str]                 = None
    rejected:          Tuple[RejectedCandidate, ...] = ()
    meeting_point:     Optional[str]                 = None
    best_path:         Tuple[str, ...]               = ()
    found:             Optional[bool]                = None

    @property
    def visited_set(self) -> FrozenSet[str]:
        return frozenset(self.visited_forward) | frozenset(self.visited_backward)


# ---------------------------------------------------------------------------
# Tour payload
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class TourPayload:
    current_path: Tuple[int, ...] = ()
    current_cost: float           = 0.0
    best_path:    Tuple[int, ...] = ()
    best_cost:    float           = INF
    pruned:       bool            = False
    candidate:    Optional[int]   = None


Payload = Union[GraphPayload, SearchPayload, TourPayload]


# ---------------------------------------------------------------------------
# Step & Trace
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Step:
    """
    Attributes:
        step_number     : 0-based index of this step in its trace.
        description     : Human-readable "why" text.
        payload         : Algorithm-specific snapshot.
        pseudocode_line : 0-based index of the pseudocode line executing now.
        is_final        : True on the very last step (result or exhausted).
    """

    step_number:     int
    description:     str
    payload:         Payload
    pseudocode_line: int  = 0
    is_final:        bool = False


@dataclass(frozen=True)
class Trace:
    """Ordered, immutable, non-empty sequence of Steps from one generator run."""

    algorithm: str
    steps:     Tuple[Step, ...]

    def __post_init__(self):
        if not self.steps:
            raise AlgorithmInvariantError(f"{self.algorithm}: generator produced no steps")
        for i, step in enumerate(self.steps):
            if step.step_number != i:
                raise AlgorithmInvariantError(
                    f"{self.algorithm}: step {i} is numbered {step.step_number}"
                )
        if not self.steps[-1].is_final:
            raise AlgorithmInvariantError(f"{self.algorithm}: last step is not final")

    def __len__(self) -> int:
        return len(self.steps)

    def __iter__(self) -> Iterator[Step]:
        return iter(self.steps)

    def __getitem__(self, index: int) -> Step:
        return self.steps[index]

    @property
    def initial(self) -> Step:
        return self.steps[0]

    @property
    def final(self) -> Step:
        return self.steps[-1]


# ---------------------------------------------------------------------------
# Builders so algorithms don't have to number steps by hand
# ---------------------------------------------------------------------------
class StepBuilder:
    """
    Numbers Steps as they are emitted.

    Usage inside an algorithm generator:
        sb = StepBuilder()
        yield sb.emit(TourPayload(current_path=(0,)), "Start at city A.", pseudocode_line=1)
    """

    def __init__(self):
        self.step_no: int = 0

    def emit(
        self,
        payload: Payload,
        description: str,
        pseudocode_line: int = 0,
        is_final: bool = False,
    ) -> Step:
        step = Step(
            step_number=self.step_no,
            description=description,
            payload=payload,
            pseudocode_line=pseudocode_line,
            is_final=is_final,
        )
        self.step_no += 1
        return step


class GraphStepBuilder(StepBuilder):
    """
    Mutable scratch-pad over a graph.  Algorithms flip vertex states and
    edge roles, then call build() to freeze the current picture.

        sb = GraphStepBuilder(graph)
        sb.set_edge(3, EdgeRole.CURRENT)
        yield sb.build("Considering edge (1-4) with weight 2", pseudocode_line=5)
    """

    def __init__(self, graph: Graph):
        super().__init__()
        self._vertices = list(graph.vertices.values())
        self._edges = list(graph.edges)
        self.vertex_states: Dict[int, VisitState] = {v.id: VisitState.UNVISITED for v in self._vertices}
        self.edge_roles:    Dict[int, EdgeRole]   = {e.id: EdgeRole.UNPROCESSED for e in self._edges}
        self.edge_kinds:    Dict[int, EdgeKind]   = {}
        self.total_weight:  float                 = 0.0
        self.spanning:      Optional[bool]        = None
        self.cycle_found:   Optional[bool]        = None
        self.cycle:         Tuple[int, ...]       = ()
        self.stack:         Tuple[int, ...]       = ()

    # -- helpers --
    def set_vertex(self, vertex_id: int, state: VisitState) -> None:
        self.vertex_states[vertex_id] = state

    def set_edge(self, edge_id: int, role: EdgeRole) -> None:
        self.edge_roles[edge_id] = role

    def classify(self, edge_id: int, kind: EdgeKind) -> None:
        self.edge_kinds[edge_id] = kind

    def replace_roles(self, old: EdgeRole, new: EdgeRole) -> None:
        for eid, role in self.edge_roles.items():
            if role is old:
                self.edge_roles[eid] = new

    def replace_states(self, old: VisitState, new: VisitState) -> None:
        for vid, state in self.vertex_states.items():
            if state is old:
                self.vertex_states[vid] = new

    def snapshot(self) -> GraphPayload:
        return GraphPayload(
            vertices=tuple(
                VertexView(v.id, v.x, v.y, self.vertex_states[v.id]) for v in self._vertices
            ),
            edges=tuple(
                EdgeView(e.id, e.source, e.target, e.weight, self.edge_roles[e.id], self.edge_kinds.get(e.id))
                for e in self._edges
            ),
            total_weight=self.total_weight,
            spanning=self.spanning,
            cycle_found=self.cycle_found,
            cycle=self.cycle,
            stack=self.stack,
        )

    def build(self, description: str, pseudocode_line: int = 0, is_final: bool = False) -> Step:
        return self.emit(self.snapshot(), description, pseudocode_line, is_final)
