"""
edge.py — Graph Edge
====================
Connects two vertices and carries a weight.  Like `Vertex`, an Edge is
pure problem data: the role an edge plays at a given moment (candidate,
rejected, in the MST, …) is recorded in the Step snapshots.

Design decisions:
  - `source` and `target` are vertex ids, NOT Vertex references.
    This keeps edges serialisable and avoids circular references.
  - `id` is the edge's position in the input list.  Kruskal's stable sort
    and Prim's tie-breaking both rely on it.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict


# ---------------------------------------------------------------------------
# Edge Role Enum — what the algorithm is doing with this edge
# ---------------------------------------------------------------------------
class EdgeRole(Enum):
    UNPROCESSED = "unprocessed"        # thin, neutral grey
    CANDIDATE   = "candidate"          # amber: crosses the current cut / under consideration
    INCLUDED    = "includedInResult"   # bright green, thick: part of the answer
    REJECTED    = "rejected"           # faded / dashed: explicitly discarded
    CURRENT     = "current"            # the edge being examined RIGHT NOW


# ---------------------------------------------------------------------------
# Edge Kind Enum — DFS edge classification (cycle detection only)
# ---------------------------------------------------------------------------
class EdgeKind(Enum):
    TREE    = "tree"
    BACK    = "back"
    FORWARD = "forward"
    CROSS   = "cross"


# ---------------------------------------------------------------------------
# Edge
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class Edge:
    """
    Attributes:
        id     : Position of the edge in its graph's input order.
        source : ID of the tail vertex.
        target : ID of the head vertex.
        weight : Numeric cost (default 1).
    """

    id:     int
    source: int
    target: int
    weight: float = 1.0

    def to_dict(self) -> Dict[str, Any]:
        return {"source": self.source, "target": self.target, "weight": self.weight}

    def __repr__(self) -> str:
        return f"Edge#{self.id}({self.source} ↔ {self.target}, w={self.weight})"
