"""
cycle_detection.py — Cycle Detection
======================================
Depth-first search for a cycle, with one generator per graph flavour.

directed_cycle
  Three colours: unvisited → inProgress (on the DFS stack) → visited (done).
  Every examined edge is classified:
      tree     target unvisited, DFS descends into it
      back     target inProgress  →  a cycle, search ends
      forward  target done, discovered after the source
      cross    target done, discovered before the source

undirected_cycle
  An edge is always seen from both ends, so the edge that brought us to a
  vertex is skipped (by edge id, which keeps parallel edges distinct).  Any
  other edge reaching an already visited vertex closes a cycle.

Roots are taken in vertex input order; neighbours in edge input order.
The DFS is iterative so deep graphs never hit the recursion limit.

On success the cycle's edges become INCLUDED, its vertices IN_RESULT, and
GraphPayload.cycle lists the vertex ids with the first repeated at the end.
"""

from typing import Dict, Generator, Iterator, List, Optional, Tuple

from algorithms.step import GraphStepBuilder, Step
from graph import Edge, EdgeKind, EdgeRole, Graph, VisitState


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def DirectedCycle(graph):",                        # 0
    "    for root in vertices if unvisited:",           # 1
    "        colour[root] ← inProgress;  push root",    # 2
    "        while stack:",                             # 3
    "            u ← top;  (u, v) ← next edge",         # 4
    "            if colour[v] = unvisited: tree, push v",  # 5
    "            elif colour[v] = inProgress:",         # 6
    "                back edge → return CYCLE",         # 7
    "            else: forward / cross edge",           # 8
    "            no edges left: colour[u] ← done, pop", # 9
    "    return NO CYCLE",                              # 10
]

UNDIRECTED_PSEUDOCODE: List[str] = [
    "def UndirectedCycle(graph):",                      # 0
    "    for root in vertices if unvisited:",           # 1
    "        visit root;  push (root, parent=None)",    # 2
    "        while stack:",                             # 3
    "            (u, parent) ← top;  e=(u, v) ← next",  # 4
    "            if e is parent: skip",                 # 5
    "            if v unvisited: visit v, push (v, e)", # 6
    "            else: return CYCLE",                   # 7
    "            no edges left: pop u",                 # 8
    "    return NO CYCLE",                              # 9
]


def _unwind(parent: Dict[int, Tuple[int, int]], u: int, v: int, closing: Edge) -> Tuple[Tuple[int, ...], List[int]]:
    """Walk tree edges from u back up to v.  Returns (v … u v, edge ids)."""
    vertices = [u]
    edge_ids = [closing.id]
    x = u
    while x != v:
        x, eid = parent[x]
        vertices.append(x)
        edge_ids.append(eid)
    vertices.reverse()
    return tuple(vertices) + (v,), edge_ids


def _mark_cycle(sb: GraphStepBuilder, cycle: Tuple[int, ...], edge_ids: List[int]) -> None:
    sb.cycle_found = True
    sb.cycle = cycle
    for eid in edge_ids:
        sb.set_edge(eid, EdgeRole.INCLUDED)
    for vid in cycle:
        sb.set_vertex(vid, VisitState.IN_RESULT)


def _format_cycle(cycle: Tuple[int, ...], arrow: str) -> str:
    return f" {arrow} ".join(str(v) for v in cycle)


# ---------------------------------------------------------------------------
# Generator — directed
# ---------------------------------------------------------------------------
def directed_cycle(graph: Graph) -> Generator[Step, None, None]:
    sb = GraphStepBuilder(graph)
    colour: Dict[int, VisitState] = {vid: VisitState.UNVISITED for vid in graph.vertex_ids()}
    discovered: Dict[int, int] = {}
    parent: Dict[int, Tuple[int, int]] = {}

    yield sb.build("Starting directed cycle detection: every vertex is unvisited", pseudocode_line=0)

    for root in graph.vertex_ids():
        if colour[root] is not VisitState.UNVISITED:
            continue

        stack: List[Tuple[int, Iterator[Tuple[int, Edge]]]] = []

        def enter(vid: int) -> None:
            colour[vid] = VisitState.IN_PROGRESS
            discovered[vid] = len(discovered)
            sb.set_vertex(vid, VisitState.IN_PROGRESS)
            stack.append((vid, iter(graph.neighbours(vid, directed=True))))
            sb.stack = tuple(s[0] for s in stack)

        enter(root)
        yield sb.build(f"Starting DFS from vertex {root}: marked in progress", pseudocode_line=2)

        while stack:
            u, edges = stack[-1]
            nxt: Optional[Tuple[int, Edge]] = next(edges, None)

            if nxt is None:
                stack.pop()
                colour[u] = VisitState.VISITED
                sb.set_vertex(u, VisitState.VISITED)
                sb.stack = tuple(s[0] for s in stack)
                yield sb.build(f"All edges of vertex {u} explored: marked done", pseudocode_line=9)
                continue

            v, edge = nxt
            sb.set_edge(edge.id, EdgeRole.CURRENT)

            if colour[v] is VisitState.UNVISITED:
                sb.classify(edge.id, EdgeKind.TREE)
                yield sb.build(f"Edge ({u}→{v}) is a tree edge: vertex {v} is unvisited", pseudocode_line=5)
                sb.set_edge(edge.id, EdgeRole.UNPROCESSED)
                parent[v] = (u, edge.id)
                enter(v)
                yield sb.build(f"Visiting vertex {v}: marked in progress", pseudocode_line=5)

            elif colour[v] is VisitState.IN_PROGRESS:
                sb.classify(edge.id, EdgeKind.BACK)
                yield sb.build(
                    f"Edge ({u}→{v}) is a back edge: vertex {v} is still on the DFS stack",
                    pseudocode_line=7,
                )
                cycle, edge_ids = _unwind(parent, u, v, edge)
                _mark_cycle(sb, cycle, edge_ids)
                yield sb.build(
                    f"Cycle detected: {_format_cycle(cycle, '→')}",
                    pseudocode_line=7,
                    is_final=True,
                )
                return

            else:
                kind = EdgeKind.FORWARD if discovered[u] < discovered[v] else EdgeKind.CROSS
                sb.classify(edge.id, kind)
                yield sb.build(
                    f"Edge ({u}→{v}) is a {kind.value} edge: vertex {v} is already done",
                    pseudocode_line=8,
                )
                sb.set_edge(edge.id, EdgeRole.UNPROCESSED)

    sb.cycle_found = False
    sb.stack = ()
    yield sb.build("DFS finished without a back edge: the graph is acyclic", pseudocode_line=10, is_final=True)


# ---------------------------------------------------------------------------
# Generator — undirected
# ---------------------------------------------------------------------------
def undirected_cycle(graph: Graph) -> Generator[Step, None, None]:
    sb = GraphStepBuilder(graph)
    visited: Dict[int, bool] = {vid: False for vid in graph.vertex_ids()}
    parent: Dict[int, Tuple[int, int]] = {}

    yield sb.build("Starting undirected cycle detection: every vertex is unvisited", pseudocode_line=0)

    for root in graph.vertex_ids():
        if visited[root]:
            continue

        # (vertex, id of the edge that reached it, remaining neighbours)
        stack: List[Tuple[int, Optional[int], Iterator[Tuple[int, Edge]]]] = []

        def enter(vid: int, via: Optional[int]) -> None:
            visited[vid] = True
            sb.set_vertex(vid, VisitState.IN_PROGRESS)
            stack.append((vid, via, iter(graph.neighbours(vid, directed=False))))
            sb.stack = tuple(s[0] for s in stack)

        enter(root, None)
        yield sb.build(f"Starting DFS from vertex {root}", pseudocode_line=2)

        while stack:
            u, via, edges = stack[-1]
            nxt: Optional[Tuple[int, Edge]] = next(edges, None)

            if nxt is None:
                stack.pop()
                sb.set_vertex(u, VisitState.VISITED)
                sb.stack = tuple(s[0] for s in stack)
                yield sb.build(f"All edges of vertex {u} explored", pseudocode_line=8)
                continue

            v, edge = nxt
            if edge.id == via:
                yield sb.build(
                    f"Skipping edge ({u}-{v}): it leads back to the parent",
                    pseudocode_line=5,
                )
                continue

            sb.set_edge(edge.id, EdgeRole.CURRENT)

            if not visited[v]:
                sb.classify(edge.id, EdgeKind.TREE)
                yield sb.build(f"Edge ({u}-{v}) leads to unvisited vertex {v}", pseudocode_line=6)
                sb.set_edge(edge.id, EdgeRole.UNPROCESSED)
                parent[v] = (u, edge.id)
                enter(v, edge.id)
                yield sb.build(f"Visiting vertex {v}", pseudocode_line=6)
                continue

            sb.classify(edge.id, EdgeKind.BACK)
            yield sb.build(
                f"Edge ({u}-{v}) reaches already visited vertex {v} that is not the parent",
                pseudocode_line=7,
            )
            cycle, edge_ids = _unwind(parent, u, v, edge)
            _mark_cycle(sb, cycle, edge_ids)
            yield sb.build(
                f"Cycle detected: {_format_cycle(cycle, '-')}",
                pseudocode_line=7,
                is_final=True,
            )
            return

    sb.cycle_found = False
    sb.stack = ()
    yield sb.build("DFS finished without a cycle: the graph is a forest", pseudocode_line=9, is_final=True)
