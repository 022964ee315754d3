"""
feedback_arc_set.py — Feedback Arc Set by Back-Edge Removal
=============================================================
Greedy feedback arc set for a directed graph: run a three-colour DFS,
remove every back edge it meets, and repeat until a full pass finds none.
What is left is a directed acyclic graph.

Removing the back edges of one DFS already leaves a DAG, so the second pass
only confirms it.  The result is a feedback arc set, not necessarily a
minimum one (that problem is NP-hard).

Yields a Step at:
  1. Start
  2. Each pass  →  DFS restarted over the edges still present
  3. Each vertex entered / finished, each back edge removed
  4. End of a pass that removed something
  5. Final summary  →  removed edges REJECTED, kept edges INCLUDED
"""

from typing import Dict, Generator, Iterator, List, Tuple

from algorithms.step import GraphStepBuilder, Step
from graph import Edge, EdgeKind, EdgeRole, Graph, VisitState


# ---------------------------------------------------------------------------
# Pseudocode
# ---------------------------------------------------------------------------
PSEUDOCODE: List[str] = [
    "def FeedbackArcSet(graph):",                          # 0
    "    removed ← {}",                                    # 1
    "    repeat:",                                         # 2
    "        for root in vertices if unvisited: DFS(root)",  # 3
    "            colour[u] ← inProgress",                  # 4
    "            for (u, v) not in removed:",              # 5
    "                if colour[v] = inProgress: removed.add((u, v))",  # 6
    "                elif colour[v] = unvisited: DFS(v)",  # 7
    "            colour[u] ← done",                        # 8
    "    until no back edge found",                        # 9
    "    return removed",                                  # 10
]


# ---------------------------------------------------------------------------
# Generator
# ---------------------------------------------------------------------------
def feedback_arc_set(graph: Graph) -> Generator[Step, None, None]:
    sb = GraphStepBuilder(graph)
    removed: List[int] = []

    yield sb.build(
        "Starting feedback arc set: remove DFS back edges until no cycle is left",
        pseudocode_line=1,
    )

    iteration = 0
    while True:
        iteration += 1
        before = len(removed)
        colour: Dict[int, VisitState] = {vid: VisitState.UNVISITED for vid in graph.vertex_ids()}
        discovered: Dict[int, int] = {}
        for vid in colour:
            sb.set_vertex(vid, VisitState.UNVISITED)
        sb.edge_kinds.clear()

        yield sb.build(
            f"Pass {iteration}: DFS over the {graph.edge_count() - len(removed)} remaining edges",
            pseudocode_line=2,
        )

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
            yield sb.build(f"Visiting vertex {root}: added to the DFS stack", pseudocode_line=4)

            while stack:
                u, edges = stack[-1]
                nxt = next(edges, None)

                if nxt is None:
                    stack.pop()
                    colour[u] = VisitState.VISITED
                    sb.set_vertex(u, VisitState.VISITED)
                    sb.stack = tuple(s[0] for s in stack)
                    yield sb.build(f"Finished vertex {u}: removed from the DFS stack", pseudocode_line=8)
                    continue

                v, edge = nxt
                if edge.id in removed:
                    continue

                if colour[v] is VisitState.UNVISITED:
                    sb.classify(edge.id, EdgeKind.TREE)
                    enter(v)
                    yield sb.build(f"Edge ({u}→{v}) leads to vertex {v}: added to the DFS stack", pseudocode_line=7)

                elif colour[v] is VisitState.IN_PROGRESS:
                    sb.classify(edge.id, EdgeKind.BACK)
                    sb.set_edge(edge.id, EdgeRole.REJECTED)
                    removed.append(edge.id)
                    yield sb.build(
                        f"Back edge ({u}→{v}) closes a cycle: removed "
                        f"({len(removed)} removed so far)",
                        pseudocode_line=6,
                    )

                else:
                    kind = EdgeKind.FORWARD if discovered[u] < discovered[v] else EdgeKind.CROSS
                    sb.classify(edge.id, kind)

        sb.stack = ()
        if len(removed) == before:
            break
        yield sb.build(
            f"Pass {iteration} removed {len(removed) - before} edge(s): checking again for cycles",
            pseudocode_line=9,
        )

    sb.cycle_found = False
    for e in graph.edges:
        if e.id not in removed:
            sb.set_edge(e.id, EdgeRole.INCLUDED)
    edges_text = ", ".join(f"({graph.edges[eid].source}→{graph.edges[eid].target})" for eid in removed)
    if removed:
        description = (
            f"Feedback arc set complete: removed {len(removed)} edge(s) [{edges_text}]. "
            f"The remaining graph is a directed acyclic graph (DAG)."
        )
    else:
        description = "No back edge found: the graph is already a directed acyclic graph (DAG)."
    yield sb.build(description, pseudocode_line=10, is_final=True)
