from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


# ---------------------------------------------------------------------------
# Visit State Enum — how a vertex looks in a given Step
# ---------------------------------------------------------------------------
class VisitState(Enum):
    UNVISITED   = "unvisited"    # default grey
    CURRENT     = "current"      # bright highlight: the vertex being processed RIGHT NOW
    IN_PROGRESS = "inProgress"   # on the DFS stack (grey in three-colour DFS)
    VISITED     = "visited"      # fully processed ("done" in three-colour DFS)
    IN_RESULT   = "inResult"     # part of the answer: MST vertex, cycle vertex


# ---------------------------------------------------------------------------
# Vertex
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Vertex:
    """
    One vertex of a problem graph.  Identity and position only; per-step
    visual state lives in the Step snapshots, never on the vertex.

    Attributes:
        id : Integer identifier, unique within its graph.
        x  : Canvas x coordinate.
        y  : Canvas y coordinate.
    """

    id: int
    x:  float = 0.0
    y:  float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "x": self.x, "y": self.y}

    def __repr__(self) -> str:
        return f"Vertex(id={self.id}, pos=({self.x:.2f},{self.y:.2f}))"
