"""
kruskal.py — Kruskal's Minimum Spanning Tree
=============================================
Sort edges by weight, then greedily accept every edge that joins two
different components, tracked with a DisjointSet.

Yields a Step at:
  1. Start  →  edges sorted by weight (stable: ties keep input order)
  2. Each edge in order  →  CURRENT
  3. Its verdict  →  REJECTED (would form a cycle) or INCLUDED
  4. Final summary  →  MST complete, or the forest is not a single spanning tree

Stops as soon as |V| - 1 edges are included.
"""

from typing import Generator, List

from algorithms.step import GraphStepBuilder, Step
from graph import DisjointSet, EdgeRole, Graph, VisitState


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Kruskal(vertices, edges):",                    # 0
    "    sort edges by weight",                         # 1
    "    ds ← DisjointSet(vertices)",                   # 2
    "    mst ← []",                                     # 3
    "    for (u, v, w) in edges:",                      # 4
    "        if ds.find(u) == ds.find(v):",             # 5
    "            reject (u, v)  # would form a cycle",  # 6
    "        else:",                                    # 7
    "            ds.union(u, v);  mst.add((u, v))",     # 8
    "            if |mst| == |V| - 1: break",           # 9
    "    return mst",                                   # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def kruskal(graph: Graph) -> Generator[Step, None, None]:
    sb = GraphStepBuilder(graph)
    n = graph.vertex_count()
    needed = max(n - 1, 0)

    # sorted() is stable, so equal weights keep their input order
    ordered = sorted(graph.edges, key=lambda e: e.weight)

    # --- init step ---
    order_text = ", ".join(f"({e.source}-{e.target}):{e.weight:g}" for e in ordered)
    yield sb.build(
        f"Starting Kruskal's Algorithm: edges sorted by weight [{order_text}]",
        pseudocode_line=1,
    )

    ds = DisjointSet.make(n)
    included = 0

    for edge in ordered:
        if included == needed:
            break

        sb.set_edge(edge.id, EdgeRole.CURRENT)
        yield sb.build(
            f"Considering edge ({edge.source}-{edge.target}) with weight {edge.weight:g}",
            pseudocode_line=4,
        )

        src = graph.index_of(edge.source)
        tgt = graph.index_of(edge.target)
        if ds.find(src) == ds.find(tgt):
            sb.set_edge(edge.id, EdgeRole.REJECTED)
            yield sb.build(
                f"Edge ({edge.source}-{edge.target}) rejected: would create a cycle",
                pseudocode_line=6,
            )
            continue

        ds.union(src, tgt)
        included += 1
        sb.total_weight += edge.weight
        sb.set_edge(edge.id, EdgeRole.INCLUDED)
        sb.set_vertex(edge.source, VisitState.IN_RESULT)
        sb.set_vertex(edge.target, VisitState.IN_RESULT)
        yield sb.build(
            f"Edge ({edge.source}-{edge.target}) added to MST: no cycle formed "
            f"({included}/{needed} edges, total weight {sb.total_weight:g})",
            pseudocode_line=8,
        )

    # --- final summary ---
    sb.spanning = included == needed
    if sb.spanning:
        for vid in graph.vertex_ids():
            sb.set_vertex(vid, VisitState.IN_RESULT)
        description = (
            f"MST complete! All {n} vertices connected with minimum total weight "
            f"{sb.total_weight:g} using {included} edges."
        )
    else:
        description = (
            f"All edges processed but only {included} of {needed} edges were accepted: "
            f"the graph is disconnected, so the result is a forest of "
            f"{ds.components} trees, not a single spanning tree."
        )
    yield sb.build(description, pseudocode_line=10, is_final=True)
