"""
graph.py — Graph Container & Generator
=======================================
The problem instance every graph algorithm consumes.  Built once (by the
validator or a generator factory), then treated as read-only: trace
generators only query it and never keep a reference after they finish.

Responsibilities:
  1. Building vertices & edges                 (add / create)
  2. Adjacency queries                         (neighbours, index_of, …)
  3. Random connected graph factory            (seeded, deterministic)
  4. Serialisation for the API                 (to_dict)

Design decisions:
  - Vertices stored in an insertion-ordered dict keyed by id for O(1)
    lookup; edges in a list so an edge's id is its input position.
  - Two adjacency dicts are maintained incrementally: one treating edges as
    directed (source → target), one treating them as undirected.  Cycle
    detection picks whichever it needs, independent of the graph flag.
  - Neighbour lists preserve input order, which keeps every trace
    deterministic.
"""

import math
import random
from typing import Any, Dict, List, Optional, Set, Tuple

from graph.edge import Edge
from graph.node import Vertex


class Graph:
    """
    Attributes:
        vertices  : {vertex_id: Vertex}, insertion-ordered
        edges     : [Edge], index == edge.id
        directed  : bool – graph-level directedness
        _out      : {vertex_id: [(neighbour_id, edge_id), …]}  directed view
        _adj      : {vertex_id: [(neighbour_id, edge_id), …]}  undirected view
    """

    def __init__(self, directed: bool = False):
        self.vertices: Dict[int, Vertex] = {}
        self.edges:    List[Edge]        = []
        self.directed: bool              = directed
        self._index:   Dict[int, int]    = {}
        self._out:     Dict[int, List[Tuple[int, int]]] = {}
        self._adj:     Dict[int, List[Tuple[int, int]]] = {}

    # ==================================================================
    # BUILDING
    # ==================================================================
    def add_vertex(self, vertex: Vertex) -> Vertex:
        if vertex.id not in self.vertices:
            self._index[vertex.id] = len(self._index)
        self.vertices[vertex.id] = vertex
        self._out.setdefault(vertex.id, [])
        self._adj.setdefault(vertex.id, [])
        return vertex

    def create_vertex(self, x: float, y: float, vertex_id: Optional[int] = None) -> Vertex:
        """Convenience: create + add in one call.  Ids default to 0, 1, 2, …"""
        if vertex_id is None:
            vertex_id = len(self.vertices)
        return self.add_vertex(Vertex(id=vertex_id, x=x, y=y))

    def add_edge(self, source: int, target: int, weight: float = 1.0) -> Edge:
        edge = Edge(id=len(self.edges), source=source, target=target, weight=weight)
        self.edges.append(edge)
        self._out.setdefault(source, []).append((target, edge.id))
        self._adj.setdefault(source, []).append((target, edge.id))
        self._adj.setdefault(target, []).append((source, edge.id))
        return edge

    # ==================================================================
    # QUERIES
    # ==================================================================
    def get_vertex(self, vertex_id: int) -> Optional[Vertex]:
        return self.vertices.get(vertex_id)

    def vertex_ids(self) -> List[int]:
        return list(self.vertices.keys())

    def index_of(self, vertex_id: int) -> int:
        """Dense 0-based index of a vertex (its insertion position)."""
        return self._index[vertex_id]

    def neighbours(self, vertex_id: int, directed: Optional[bool] = None) -> List[Tuple[int, Edge]]:
        """
        Return [(neighbour_id, edge)] in input order.  `directed` overrides
        the graph-level flag.
        """
        if directed is None:
            directed = self.directed
        table = self._out if directed else self._adj
        return [(nbr, self.edges[eid]) for nbr, eid in table.get(vertex_id, [])]

    def vertex_count(self) -> int:
        return len(self.vertices)

    def edge_count(self) -> int:
        return len(self.edges)

    # ==================================================================
    # SERIALISATION
    # ==================================================================
    def to_dict(self) -> Dict[str, Any]:
        return {
            "directed": self.directed,
            "vertices": [v.to_dict() for v in self.vertices.values()],
            "edges":    [e.to_dict() for e in self.edges],
        }

    # ==================================================================
    # GENERATOR — Factory class-method
    # ==================================================================
    @classmethod
    def generate_random(
        cls,
        num_vertices: int = 7,
        extra_edge_ratio: float = 0.8,
        weight_range: Tuple[int, int] = (1, 20),
        seed: Optional[int] = None,
        directed: bool = False,
        canvas_w: float = 800,
        canvas_h: float = 500,
    ) -> "Graph":
        """
        Random connected graph: vertices on a circle, a random spanning-tree
        backbone (each new vertex hooks onto an earlier one), then
        `num_vertices * extra_edge_ratio` extra edges with no self-loops or
        duplicates.  The same seed always yields the same graph.
        """
        rng = random.Random(seed)
        g = cls(directed=directed)

        cx, cy = canvas_w / 2, canvas_h / 2
        radius = min(canvas_w, canvas_h) * 0.4
        for i in range(num_vertices):
            angle = 2 * math.pi * i / max(num_vertices, 1)
            g.create_vertex(
                round(cx + radius * math.cos(angle), 2),
                round(cy + radius * math.sin(angle), 2),
                vertex_id=i,
            )

        seen: Set[frozenset] = set()
        for i in range(1, num_vertices):
            j = rng.randrange(i)
            seen.add(frozenset((i, j)))
            g.add_edge(j, i, rng.randint(*weight_range))

        # the complete graph caps how many extra edges can exist
        max_edges = num_vertices * (num_vertices - 1) // 2
        wanted = min(int(num_vertices * extra_edge_ratio), max_edges - len(seen))
        while wanted > 0:
            a, b = rng.randrange(num_vertices), rng.randrange(num_vertices)
            key = frozenset((a, b))
            if a == b or key in seen:
                continue
            seen.add(key)
            g.add_edge(a, b, rng.randint(*weight_range))
            wanted -= 1

        return g

    def __repr__(self) -> str:
        return f"Graph(vertices={self.vertex_count()}, edges={self.edge_count()}, directed={self.directed})"
