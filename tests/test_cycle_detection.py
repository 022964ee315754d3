"""Tests for directed and undirected cycle detection."""

import pytest

from algorithms import Algorithm, generate
from graph import EdgeKind, EdgeRole, VisitState


class TestDirectedCycle:
    def test_three_cycle(self, triangle):
        trace = generate(Algorithm.DIRECTED_CYCLE, triangle)
        final = trace.final.payload
        assert final.cycle_found is True
        assert final.cycle == (0, 1, 2, 0)
        assert {e.id for e in final.edges_with_role(EdgeRole.INCLUDED)} == {0, 1, 2}
        assert all(v.visit_state is VisitState.IN_RESULT for v in final.vertices)

    def test_back_edge_is_classified(self, triangle):
        final = generate(Algorithm.DIRECTED_CYCLE, triangle).final.payload
        assert [e.kind for e in final.edges] == [EdgeKind.TREE, EdgeKind.TREE, EdgeKind.BACK]

    def test_stack_holds_the_cycle_at_detection(self, triangle):
        final = generate(Algorithm.DIRECTED_CYCLE, triangle).final.payload
        assert final.stack == (0, 1, 2)

    def test_tree_has_no_cycle(self, tree_graph):
        trace = generate(Algorithm.DIRECTED_CYCLE, tree_graph)
        final = trace.final.payload
        assert final.cycle_found is False
        assert final.cycle == ()
        assert all(v.visit_state is VisitState.VISITED for v in final.vertices)

    def test_forward_and_cross_edges(self, graph_factory):
        g = graph_factory([0, 1, 2, 3], [(0, 1, 1), (1, 2, 1), (0, 2, 1), (3, 1, 1)], directed=True)
        final = generate(Algorithm.DIRECTED_CYCLE, g).final.payload
        assert final.cycle_found is False
        assert [e.kind for e in final.edges] == [
            EdgeKind.TREE, EdgeKind.TREE, EdgeKind.FORWARD, EdgeKind.CROSS,
        ]

    def test_two_cycle(self, graph_factory):
        g = graph_factory([0, 1], [(0, 1, 1), (1, 0, 1)], directed=True)
        assert generate(Algorithm.DIRECTED_CYCLE, g).final.payload.cycle == (0, 1, 0)

    def test_self_loop(self, graph_factory):
        g = graph_factory([0], [(0, 0, 1)], directed=True)
        assert generate(Algorithm.DIRECTED_CYCLE, g).final.payload.cycle == (0, 0)

    def test_cycle_in_later_component(self, graph_factory):
        g = graph_factory([0, 1, 2, 3], [(0, 1, 1), (2, 3, 1), (3, 2, 1)], directed=True)
        final = generate(Algorithm.DIRECTED_CYCLE, g).final.payload
        assert final.cycle == (2, 3, 2)

    def test_direction_matters(self, graph_factory):
        # 0 → 1, 0 → 2, 1 → 2 is a triangle only when undirected
        g = graph_factory([0, 1, 2], [(0, 1, 1), (0, 2, 1), (1, 2, 1)], directed=True)
        assert generate(Algorithm.DIRECTED_CYCLE, g).final.payload.cycle_found is False
        assert generate(Algorithm.UNDIRECTED_CYCLE, g).final.payload.cycle_found is True


class TestUndirectedCycle:
    def test_triangle(self, graph_factory):
        g = graph_factory([0, 1, 2], [(0, 1, 1), (1, 2, 1), (2, 0, 1)])
        final = generate(Algorithm.UNDIRECTED_CYCLE, g).final.payload
        assert final.cycle_found is True
        assert final.cycle == (0, 1, 2, 0)
        assert {e.id for e in final.edges_with_role(EdgeRole.INCLUDED)} == {0, 1, 2}

    def test_tree_has_no_cycle(self, tree_graph):
        trace = generate(Algorithm.UNDIRECTED_CYCLE, tree_graph)
        assert trace.final.payload.cycle_found is False
        assert "forest" in trace.final.description

    def test_parent_edge_is_skipped(self, graph_factory):
        g = graph_factory([0, 1], [(0, 1, 1)])
        trace = generate(Algorithm.UNDIRECTED_CYCLE, g)
        assert trace.final.payload.cycle_found is False
        assert any("leads back to the parent" in s.description for s in trace)

    def test_parallel_edges_form_a_cycle(self, graph_factory):
        g = graph_factory([0, 1], [(0, 1, 1), (0, 1, 2)])
        final = generate(Algorithm.UNDIRECTED_CYCLE, g).final.payload
        assert final.cycle == (0, 1, 0)
        assert {e.id for e in final.edges_with_role(EdgeRole.INCLUDED)} == {0, 1}

    def test_self_loop(self, graph_factory):
        g = graph_factory([0], [(0, 0, 1)])
        assert generate(Algorithm.UNDIRECTED_CYCLE, g).final.payload.cycle == (0, 0)

    @pytest.mark.parametrize("algorithm", [Algorithm.DIRECTED_CYCLE, Algorithm.UNDIRECTED_CYCLE])
    def test_isolated_vertices(self, graph_factory, algorithm):
        trace = generate(algorithm, graph_factory([0, 1, 2], []))
        assert trace.final.payload.cycle_found is False
        assert trace.final.is_final
