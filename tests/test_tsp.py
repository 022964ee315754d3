"""Tests for the TSP trace generators."""

import itertools
import math
import random

import pytest

from algorithms import Algorithm, generate
from algorithms.step import TourPayload
from problems.instances import City, TourInstance


def brute_force_optimum(instance: TourInstance) -> float:
    n = instance.size
    return min(instance.tour_cost((0,) + perm) for perm in itertools.permutations(range(1, n)))


def random_instance(seed: int, n: int = 5) -> TourInstance:
    rng = random.Random(seed)
    matrix = [[0] * n for _ in range(n)]
    for i in range(n):
        for j in range(i + 1, n):
            matrix[i][j] = matrix[j][i] = rng.randint(1, 50)
    return TourInstance.from_matrix(matrix)


class TestBacktracking:
    def test_four_city_optimum(self, four_cities):
        trace = generate(Algorithm.TSP_BACKTRACKING, four_cities)
        final = trace.final.payload
        assert isinstance(final, TourPayload)
        assert final.best_cost == 80
        assert final.best_path == (0, 1, 3, 2)
        assert "80" in trace.final.description

    def test_first_step_starts_at_city_a(self, four_cities):
        first = generate(Algorithm.TSP_BACKTRACKING, four_cities).initial
        assert first.payload.current_path == (0,)
        assert math.isinf(first.payload.best_cost)
        assert "city A" in first.description

    def test_prunes_hopeless_branches(self, four_cities):
        trace = generate(Algorithm.TSP_BACKTRACKING, four_cities)
        pruned = [s for s in trace if s.payload.pruned]
        assert pruned
        for step in pruned:
            assert step.payload.current_cost >= step.payload.best_cost

    def test_best_cost_never_increases(self, four_cities):
        costs = [s.payload.best_cost for s in generate(Algorithm.TSP_BACKTRACKING, four_cities)]
        assert all(a >= b for a, b in zip(costs, costs[1:]))

    def test_every_path_starts_at_zero(self, four_cities):
        for step in generate(Algorithm.TSP_BACKTRACKING, four_cities):
            path = step.payload.current_path
            assert not path or path[0] == 0

    def test_backtrack_steps_are_emitted(self, four_cities):
        trace = generate(Algorithm.TSP_BACKTRACKING, four_cities)
        assert any(s.description.startswith("Backtracking") for s in trace)

    def test_tie_does_not_replace_best(self, four_cities):
        trace = generate(Algorithm.TSP_BACKTRACKING, four_cities)
        # 0 → 2 → 3 → 1 is the mirror image of the optimum, also 80
        assert any("not better" in s.description for s in trace)

    def test_single_city(self):
        trace = generate(Algorithm.TSP_BACKTRACKING, TourInstance.from_matrix([[0]]))
        assert len(trace) == 2
        assert trace.final.payload.best_path == (0,)
        assert trace.final.payload.best_cost == 0

    def test_two_cities(self):
        trace = generate(Algorithm.TSP_BACKTRACKING, TourInstance.from_matrix([[0, 4], [6, 0]]))
        assert trace.final.payload.best_cost == 10

    @pytest.mark.parametrize("seed", range(6))
    def test_matches_brute_force(self, seed):
        instance = random_instance(seed)
        final = generate(Algorithm.TSP_BACKTRACKING, instance).final.payload
        assert final.best_cost == brute_force_optimum(instance)
        assert instance.tour_cost(final.best_path) == final.best_cost

    def test_city_names_from_coordinates(self):
        cities = [City(0, 0, 0, "Home"), City(1, 3, 4, "Shop"), City(2, 0, 8, "Park")]
        instance = TourInstance.from_cities(cities)
        assert instance.distances[0][1] == 5
        trace = generate(Algorithm.TSP_BACKTRACKING, instance)
        assert "Home" in trace.final.description


class TestTwoOpt:
    def test_four_city_nearest_neighbour_is_already_optimal(self, four_cities):
        final = generate(Algorithm.TSP_TWO_OPT, four_cities).final.payload
        assert final.best_path == (0, 1, 3, 2)
        assert final.best_cost == 80

    @pytest.mark.parametrize("seed", range(6))
    def test_never_worse_than_nearest_neighbour(self, seed):
        instance = random_instance(seed, n=6)
        trace = generate(Algorithm.TSP_TWO_OPT, instance)
        start = next(s for s in trace if s.description.startswith("Initial path"))
        final = trace.final.payload
        assert final.best_cost <= start.payload.best_cost
        assert final.best_cost >= brute_force_optimum(instance)
        assert sorted(final.best_path) == list(range(6))

    @pytest.mark.parametrize("seed", range(6))
    def test_each_improvement_is_strict(self, seed):
        trace = generate(Algorithm.TSP_TWO_OPT, random_instance(seed, n=6))
        costs = [s.payload.best_cost for s in trace if s.description.startswith("2-opt")]
        assert all(a > b for a, b in zip(costs, costs[1:]))
