"""Shared fixtures: a hand-driven event loop and a few small problem instances."""

import heapq

import pytest

from graph import Graph
from problems.instances import TourInstance, WordLadderInstance


# ---------------------------------------------------------------------------
# Fake event loop
# ---------------------------------------------------------------------------
class FakeTimerHandle:
    def __init__(self, when, callback, args):
        self.when = when
        self._callback = callback
        self._args = args
        self._cancelled = False

    def cancel(self):
        self._cancelled = True

    def cancelled(self):
        return self._cancelled

    def run(self):
        self._callback(*self._args)


class FakeLoop:
    """
    Just enough of asyncio's loop for the schedulers: time() and
    call_later().  Time only moves when a test calls advance(ms).
    """

    def __init__(self):
        self._now = 0.0
        self._seq = 0
        self._queue = []

    def time(self):
        return self._now

    def call_later(self, delay, callback, *args):
        handle = FakeTimerHandle(self._now + delay, callback, args)
        heapq.heappush(self._queue, (handle.when, self._seq, handle))
        self._seq += 1
        return handle

    @property
    def pending(self):
        return sum(1 for _, _, h in self._queue if not h.cancelled())

    def advance(self, ms):
        target = self._now + ms / 1000.0
        while self._queue and self._queue[0][0] <= target + 1e-9:
            when, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if not handle.cancelled():
                handle.run()
        self._now = target

    def run_until_idle(self, max_callbacks=100_000):
        ran = 0
        while self._queue and ran < max_callbacks:
            when, _, handle = heapq.heappop(self._queue)
            self._now = max(self._now, when)
            if not handle.cancelled():
                handle.run()
                ran += 1
        return ran


@pytest.fixture
def loop():
    return FakeLoop()


# ---------------------------------------------------------------------------
# Graphs
# ---------------------------------------------------------------------------
def make_graph(vertex_ids, edges, directed=False):
    g = Graph(directed=directed)
    for i, vid in enumerate(vertex_ids):
        g.create_vertex(100.0 * i, 50.0, vertex_id=vid)
    for source, target, weight in edges:
        g.add_edge(source, target, weight)
    return g


@pytest.fixture
def mst_graph():
    """Five vertices, MST weight 1 + 2 + 3 + 5 = 11."""
    return make_graph(
        [0, 1, 2, 3, 4],
        [
            (0, 1, 4),
            (0, 2, 1),
            (1, 2, 2),
            (1, 3, 5),
            (2, 3, 8),
            (3, 4, 3),
            (2, 4, 9),
        ],
    )


@pytest.fixture
def disconnected_graph():
    return make_graph([0, 1, 2, 3], [(0, 1, 1), (2, 3, 2)])


@pytest.fixture
def triangle():
    return make_graph([0, 1, 2], [(0, 1, 1), (1, 2, 1), (2, 0, 1)], directed=True)


@pytest.fixture
def tree_graph():
    return make_graph([0, 1, 2, 3], [(0, 1, 1), (0, 2, 1), (2, 3, 1)])


# ---------------------------------------------------------------------------
# Other instances
# ---------------------------------------------------------------------------
FOUR_CITY_DISTANCES = [
    [0, 10, 15, 20],
    [10, 0, 35, 25],
    [15, 35, 0, 30],
    [20, 25, 30, 0],
]


@pytest.fixture
def four_cities():
    """Optimal closed tour 0 → 1 → 3 → 2 → 0 with length 80."""
    return TourInstance.from_matrix(FOUR_CITY_DISTANCES)


@pytest.fixture
def hit_cog():
    return WordLadderInstance(
        begin_word="hit",
        end_word="cog",
        word_list=("hot", "dot", "dog", "lot", "log", "cog"),
    )


@pytest.fixture
def graph_factory():
    return make_graph
