"""
graph/
-----
Problem data layer.  Public API:

    from graph import Graph, Vertex, Edge, DisjointSet
    from graph import VisitState, EdgeRole, EdgeKind
"""

from graph.node         import Vertex, VisitState
from graph.edge         import Edge, EdgeRole, EdgeKind
from graph.graph        import Graph
from graph.disjoint_set import DisjointSet

__all__ = [
    "Vertex",      "VisitState",
    "Edge",        "EdgeRole",    "EdgeKind",
    "Graph",
    "DisjointSet",
]
