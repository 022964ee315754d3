"""
prim.py — Prim's Minimum Spanning Tree
=======================================
Grow one tree from a start vertex.  Each round scans every edge crossing
the cut between tree and non-tree vertices and takes the cheapest.

Yields a Step at:
  1. Start
  2. Start vertex selected  →  IN_RESULT
  3. Each round  →  the full crossing set as CANDIDATE
  4. The cheapest crossing edge  →  CURRENT
     (ties: lowest source id, then lowest target id)
  5. Its inclusion  →  INCLUDED, new vertex CURRENT
  6. Final summary  →  spanning tree, or incomplete if the graph is disconnected

Edges whose both endpoints end up inside the tree are shown as REJECTED.
"""

from typing import Generator, List, Optional, Set

from algorithms.step import GraphStepBuilder, Step
from graph import EdgeRole, Graph, VisitState


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def Prim(vertices, edges, start):",                   # 0
    "    tree ← {start}",                                   # 1
    "    while |tree| < |V|:",                              # 2
    "        cut ← edges with exactly one end in tree",     # 3
    "        if cut is empty: return INCOMPLETE",           # 4
    "        (u, v) ← min-weight edge in cut",              # 5
    "        tree.add(v);  mst.add((u, v))",                # 6
    "    return mst",                                       # 7
]


def _default_start(graph: Graph) -> Optional[int]:
    if graph.get_vertex(0) is not None:
        return 0
    ids = graph.vertex_ids()
    return ids[0] if ids else None


def _settle(sb: GraphStepBuilder, graph: Graph, tree: Set[int]) -> None:
    """Start-of-round cleanup: last round's highlights fade, inner edges are rejected."""
    sb.replace_states(VisitState.CURRENT, VisitState.IN_RESULT)
    sb.replace_roles(EdgeRole.CANDIDATE, EdgeRole.UNPROCESSED)
    for e in graph.edges:
        if e.source in tree and e.target in tree and sb.edge_roles[e.id] is not EdgeRole.INCLUDED:
            sb.set_edge(e.id, EdgeRole.REJECTED)


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def prim(graph: Graph, start: Optional[int] = None) -> Generator[Step, None, None]:
    sb = GraphStepBuilder(graph)
    n = graph.vertex_count()
    if start is None:
        start = _default_start(graph)

    yield sb.build("Starting Prim's Algorithm: grow a tree from a single vertex", pseudocode_line=0)

    if start is None:
        sb.spanning = True
        yield sb.build("The graph has no vertices: nothing to span.", pseudocode_line=7, is_final=True)
        return

    tree: Set[int] = {start}
    sb.set_vertex(start, VisitState.CURRENT)
    yield sb.build(f"Selected vertex {start} as the starting vertex", pseudocode_line=1)

    while len(tree) < n:
        crossing = [e for e in graph.edges if (e.source in tree) != (e.target in tree)]

        _settle(sb, graph, tree)

        if not crossing:
            break

        for e in crossing:
            sb.set_edge(e.id, EdgeRole.CANDIDATE)
        yield sb.build(
            f"Identified {len(crossing)} candidate edges that connect the tree to "
            f"non-tree vertices: " + ", ".join(f"({e.source}-{e.target}):{e.weight:g}" for e in crossing),
            pseudocode_line=3,
        )

        best = min(crossing, key=lambda e: (e.weight, e.source, e.target))
        sb.set_edge(best.id, EdgeRole.CURRENT)
        yield sb.build(
            f"Selected edge ({best.source}-{best.target}) with minimum weight {best.weight:g}",
            pseudocode_line=5,
        )

        added = best.target if best.source in tree else best.source
        tree.add(added)
        sb.total_weight += best.weight
        sb.set_edge(best.id, EdgeRole.INCLUDED)
        sb.set_vertex(added, VisitState.CURRENT)
        yield sb.build(
            f"Added vertex {added} and edge ({best.source}-{best.target}) to MST "
            f"(total weight {sb.total_weight:g})",
            pseudocode_line=6,
        )

    # --- final summary ---
    _settle(sb, graph, tree)
    sb.spanning = len(tree) == n
    if sb.spanning:
        description = (
            f"MST complete! All {n} vertices connected with minimum total weight "
            f"{sb.total_weight:g}."
        )
        line = 7
    else:
        description = (
            f"No edge crosses the cut: only {len(tree)} of {n} vertices are reachable "
            f"from vertex {start}. The graph is disconnected, so the tree is incomplete."
        )
        line = 4
    yield sb.build(description, pseudocode_line=line, is_final=True)
