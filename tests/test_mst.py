"""Tests for Kruskal's and Prim's trace generators."""

import itertools
import random

import pytest

from algorithms import Algorithm, generate
from algorithms.step import GraphPayload
from graph import DisjointSet, EdgeRole, Graph, VisitState


def brute_force_mst_weight(graph: Graph) -> float:
    n = graph.vertex_count()
    best = float("inf")
    for combo in itertools.combinations(graph.edges, n - 1):
        ds = DisjointSet.make(n)
        if all(ds.union(graph.index_of(e.source), graph.index_of(e.target)) for e in combo):
            best = min(best, sum(e.weight for e in combo))
    return best


def included_weight(payload: GraphPayload) -> float:
    return sum(e.weight for e in payload.edges_with_role(EdgeRole.INCLUDED))


def random_connected(seed: int) -> Graph:
    return Graph.generate_random(num_vertices=6, extra_edge_ratio=1.0, seed=seed)


class TestKruskal:
    def test_known_graph(self, mst_graph):
        trace = generate(Algorithm.KRUSKAL, mst_graph)
        final = trace.final.payload
        assert final.spanning is True
        assert final.total_weight == 11
        assert {(e.source, e.target) for e in final.edges_with_role(EdgeRole.INCLUDED)} == {
            (0, 2), (1, 2), (3, 4), (1, 3),
        }
        assert [(e.source, e.target) for e in final.edges_with_role(EdgeRole.REJECTED)] == [(0, 1)]

    def test_step_sequence(self, mst_graph):
        trace = generate(Algorithm.KRUSKAL, mst_graph)
        # init, (current + verdict) for five edges, final
        assert len(trace) == 12
        assert trace.initial.pseudocode_line == 1
        assert trace[1].payload.edges[1].role is EdgeRole.CURRENT
        assert trace[2].payload.edges[1].role is EdgeRole.INCLUDED

    def test_stops_after_v_minus_one_edges(self, mst_graph):
        final = generate(Algorithm.KRUSKAL, mst_graph).final.payload
        # (2-3, 8) and (2-4, 9) are never looked at
        assert final.edges[4].role is EdgeRole.UNPROCESSED
        assert final.edges[6].role is EdgeRole.UNPROCESSED

    def test_equal_weights_keep_input_order(self, graph_factory):
        g = graph_factory([0, 1, 2], [(0, 1, 1), (1, 2, 1), (0, 2, 1)])
        final = generate(Algorithm.KRUSKAL, g).final.payload
        assert [e.id for e in final.edges_with_role(EdgeRole.INCLUDED)] == [0, 1]

    def test_disconnected_graph_is_a_forest(self, disconnected_graph):
        trace = generate(Algorithm.KRUSKAL, disconnected_graph)
        assert trace.final.payload.spanning is False
        assert "not a single spanning tree" in trace.final.description
        assert len(trace.final.payload.edges_with_role(EdgeRole.INCLUDED)) == 2

    def test_single_vertex(self, graph_factory):
        trace = generate(Algorithm.KRUSKAL, graph_factory([7], []))
        assert trace.final.payload.spanning is True
        assert trace.final.payload.total_weight == 0

    @pytest.mark.parametrize("seed", range(8))
    def test_matches_brute_force(self, seed):
        g = random_connected(seed)
        final = generate(Algorithm.KRUSKAL, g).final.payload
        assert final.total_weight == brute_force_mst_weight(g)
        assert included_weight(final) == final.total_weight


class TestPrim:
    def test_known_graph(self, mst_graph):
        trace = generate(Algorithm.PRIM, mst_graph)
        final = trace.final.payload
        assert final.spanning is True
        assert final.total_weight == 11
        assert all(v.visit_state is VisitState.IN_RESULT for v in final.vertices)
        # init, start, 3 steps per round for 4 rounds, final
        assert len(trace) == 15

    def test_candidate_step_exposes_whole_cut(self, mst_graph):
        trace = generate(Algorithm.PRIM, mst_graph)
        first_round = trace[2].payload
        assert {e.id for e in first_round.edges_with_role(EdgeRole.CANDIDATE)} == {0, 1}

    def test_edges_inside_tree_are_rejected(self, mst_graph):
        final = generate(Algorithm.PRIM, mst_graph).final.payload
        assert {e.id for e in final.edges_with_role(EdgeRole.REJECTED)} == {0, 4, 6}

    def test_explicit_start(self, mst_graph):
        trace = generate(Algorithm.PRIM, mst_graph, start=3)
        assert trace[1].payload.vertices[3].visit_state is VisitState.CURRENT
        assert trace.final.payload.total_weight == 11

    def test_default_start_without_vertex_zero(self, graph_factory):
        g = graph_factory([5, 6], [(5, 6, 2)])
        trace = generate(Algorithm.PRIM, g)
        assert "vertex 5" in trace[1].description

    def test_disconnected_graph_is_incomplete(self, disconnected_graph):
        trace = generate(Algorithm.PRIM, disconnected_graph)
        final = trace.final.payload
        assert final.spanning is False
        assert final.total_weight == 1
        assert trace.final.pseudocode_line == 4

    @pytest.mark.parametrize("seed", range(8))
    def test_agrees_with_kruskal(self, seed):
        g = random_connected(seed)
        prim_weight = generate(Algorithm.PRIM, g).final.payload.total_weight
        kruskal_weight = generate(Algorithm.KRUSKAL, g).final.payload.total_weight
        assert prim_weight == kruskal_weight == brute_force_mst_weight(g)


class TestGraphSnapshots:
    @pytest.mark.parametrize("algorithm", [Algorithm.KRUSKAL, Algorithm.PRIM])
    def test_every_step_shows_every_vertex_and_edge(self, mst_graph, algorithm):
        for step in generate(algorithm, mst_graph):
            assert len(step.payload.vertices) == 5
            assert len(step.payload.edges) == 7

    @pytest.mark.parametrize("algorithm", [Algorithm.KRUSKAL, Algorithm.PRIM])
    def test_only_last_step_is_final(self, mst_graph, algorithm):
        trace = generate(algorithm, mst_graph)
        assert [s.is_final for s in trace] == [False] * (len(trace) - 1) + [True]

    def test_total_weight_never_decreases(self, mst_graph):
        weights = [s.payload.total_weight for s in generate(Algorithm.KRUSKAL, mst_graph)]
        assert weights == sorted(weights)
