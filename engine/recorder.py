"""
recorder.py — Run Recorder & Analytics
========================================
Records a complete algorithm run (the whole Trace), then computes the
analytics metrics for the Analytics panel and Comparison Mode.

Usage:
    rec = Recorder()
    rec.start(Algorithm.KRUSKAL, graph)
    rec.run_to_completion()          # drains the generator into a Trace
    metrics = rec.get_metrics()      # the analytics card
    rec.export()                     # JSON-safe snapshot for save/replay

Comparison Mode:
    Two Recorders (one per algorithm) run on the SAME instance, then
    compare(rec1, rec2) → ComparisonResult.  Kruskal vs Prim on one graph,
    or TSP backtracking vs 2-opt on one tour, are the natural pairs.
"""

import dataclasses
import logging
import math
import sys
import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from algorithms import AlgoInfo, Algorithm, REGISTRY, generate, parse_algorithm
from algorithms.step import GraphPayload, SearchPayload, Step, TourPayload, Trace
from graph import EdgeRole, VisitState
from problems import instance_to_dict

logger = logging.getLogger(__name__)

_PAYLOAD_TYPES = {GraphPayload: "graph", SearchPayload: "search", TourPayload: "tour"}


# ---------------------------------------------------------------------------
# JSON helpers
# ---------------------------------------------------------------------------
def to_jsonable(value: Any) -> Any:
    """Enums → their value, tuples → lists, ±inf/nan → None, dataclasses → dicts."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, float) and not math.isfinite(value):
        return None
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {str(to_jsonable(k)): to_jsonable(v) for k, v in value.items()}
    return value


def step_to_dict(step: Step) -> Dict[str, Any]:
    data = to_jsonable(step)
    data["payload"]["type"] = _PAYLOAD_TYPES[type(step.payload)]
    return data


def trace_to_dict(trace: Trace) -> Dict[str, Any]:
    return {
        "algorithm": trace.algorithm,
        "steps":     [step_to_dict(s) for s in trace],
    }


# ---------------------------------------------------------------------------
# Metrics dataclass — what the Analytics panel renders
# ---------------------------------------------------------------------------
@dataclass
class RunMetrics:
    algo_key:      str   = ""
    algo_label:    str   = ""
    total_steps:   int   = 0          # number of Steps yielded
    wall_time_ms:  float = 0.0        # wall-clock time to run to completion
    memory_bytes:  int   = 0          # approx size of the step buffer (sys.getsizeof)
    result_found:  bool  = False      # spanning tree / ladder / tour / cycle found
    result_cost:   float = 0.0        # MST weight, tour length, ladder transformations
    result_size:   int   = 0          # edges in MST or cycle, words in ladder, cities in tour
    explored:      int   = 0          # vertices / words touched by the search
    discarded:     int   = 0          # rejected edges, rejected words or pruned branches


# ---------------------------------------------------------------------------
# ComparisonResult — side-by-side analytics
# ---------------------------------------------------------------------------
@dataclass
class ComparisonResult:
    left:  RunMetrics = field(default_factory=RunMetrics)
    right: RunMetrics = field(default_factory=RunMetrics)
    # derived
    winner_steps:    str = ""   # which algo needed fewer steps
    winner_explored: str = ""   # which algo touched less of the instance
    winner_result:   str = ""   # which algo found the better (cheaper) result


# ---------------------------------------------------------------------------
# Recorder
# ---------------------------------------------------------------------------
class Recorder:
    """
    Attributes:
        trace   : The Trace from the run (available after run_to_completion).
        metrics : Computed RunMetrics (available after run_to_completion).
    """

    def __init__(self):
        self.trace:   Optional[Trace]      = None
        self.metrics: Optional[RunMetrics] = None

        self._algo_info: Optional[AlgoInfo]  = None
        self._instance:  Any                 = None
        self._options:   Dict[str, Any]      = {}

    # ------------------------------------------------------------------
    # Setup & run
    # ------------------------------------------------------------------
    def start(self, algorithm, instance: Any, **options: Any) -> None:
        """Remember what to run.  Unknown algorithms raise ValidationError."""
        self._algo_info = REGISTRY[parse_algorithm(algorithm)]
        self._instance  = instance
        self._options   = options
        self.trace      = None
        self.metrics    = None

    def run_to_completion(self) -> RunMetrics:
        """Drain the generator, keep the Trace, compute metrics."""
        if self._algo_info is None:
            raise RuntimeError("Call start() first.")

        started = time.monotonic()
        self.trace = generate(self._algo_info.key, self._instance, **self._options)
        wall_ms = (time.monotonic() - started) * 1000

        self.metrics = self._compute_metrics(wall_ms)
        logger.debug("Recorded %s: %d steps in %.2f ms",
                     self._algo_info.key.value, len(self.trace), wall_ms)
        return self.metrics

    def get_metrics(self) -> Optional[RunMetrics]:
        return self.metrics

    # ------------------------------------------------------------------
    # Export (serialisable snapshot)
    # ------------------------------------------------------------------
    def export(self) -> Dict[str, Any]:
        if self.trace is None:
            raise RuntimeError("Call run_to_completion() first.")
        return {
            "algo_key": self._algo_info.key.value,
            "instance": instance_to_dict(self._instance),
            "options":  to_jsonable(self._options),
            "metrics":  to_jsonable(self.metrics),
            "steps":    trace_to_dict(self.trace)["steps"],
        }

    # ------------------------------------------------------------------
    # Internal
    # ------------------------------------------------------------------
    def _compute_metrics(self, wall_ms: float) -> RunMetrics:
        info = self._algo_info
        steps = self.trace.steps
        last = self.trace.final.payload

        # approximate memory: sizeof the steps buffer
        mem = sys.getsizeof(steps)
        for s in steps:
            mem += sys.getsizeof(s)

        metrics = RunMetrics(
            algo_key=info.key.value,
            algo_label=info.label,
            total_steps=len(steps),
            wall_time_ms=round(wall_ms, 2),
            memory_bytes=mem,
        )

        if isinstance(last, GraphPayload):
            if info.key in (Algorithm.DIRECTED_CYCLE, Algorithm.UNDIRECTED_CYCLE):
                metrics.result_found = bool(last.cycle_found)
            elif info.key is Algorithm.FEEDBACK_ARC_SET:
                # the set itself is the result; the rest of the graph is INCLUDED
                metrics.result_found = True
                metrics.result_cost = len(last.edges_with_role(EdgeRole.REJECTED))
            else:
                metrics.result_found = bool(last.spanning)
                metrics.result_cost = last.total_weight
            metrics.result_size = len(last.edges_with_role(EdgeRole.INCLUDED))
            metrics.explored = sum(1 for v in last.vertices if v.visit_state is not VisitState.UNVISITED)
            metrics.discarded = len(last.edges_with_role(EdgeRole.REJECTED))

        elif isinstance(last, SearchPayload):
            metrics.result_found = bool(last.found)
            metrics.result_size = len(last.best_path)
            metrics.result_cost = max(len(last.best_path) - 1, 0)
            metrics.explored = len(last.visited_set)
            metrics.discarded = sum(len(s.payload.rejected) for s in steps)

        elif isinstance(last, TourPayload):
            metrics.result_found = math.isfinite(last.best_cost)
            metrics.result_cost = last.best_cost
            metrics.result_size = len(last.best_path)
            metrics.explored = len(steps)
            metrics.discarded = sum(1 for s in steps if s.payload.pruned)

        return metrics


# ---------------------------------------------------------------------------
# Comparison helper
# ---------------------------------------------------------------------------
def compare(left: Recorder, right: Recorder) -> ComparisonResult:
    """Given two completed Recorders, produce a ComparisonResult."""
    l = left.metrics  or RunMetrics()
    r = right.metrics or RunMetrics()

    def winner(l_val, r_val, l_key, r_key, lower_is_better=True):
        if l_val == r_val:
            return "tie"
        if lower_is_better:
            return l_key if l_val < r_val else r_key
        return l_key if l_val > r_val else r_key

    if l.result_found and r.result_found:
        winner_result = winner(l.result_cost, r.result_cost, l.algo_label, r.algo_label)
    elif l.result_found or r.result_found:
        winner_result = l.algo_label if l.result_found else r.algo_label
    else:
        winner_result = "tie"

    return ComparisonResult(
        left=l,
        right=r,
        winner_steps   =winner(l.total_steps, r.total_steps, l.algo_label, r.algo_label),
        winner_explored=winner(l.explored, r.explored, l.algo_label, r.algo_label),
        winner_result  =winner_result,
    )
