"""
validator.py — Input Validation
================================
Turns raw, untrusted user input into validated problem instances before
any trace generation starts.  Every check runs and every failure is
collected, so the caller gets the full list in one `ValidationError`
rather than fixing problems one at a time.

Accepted formats:

    custom graph   {"vertices": [{"id": 0, "x": 200, "y": 100}, …],
                    "edges":    [{"source": 0, "target": 1, "weight": 5}, …],
                    "directed": false}                       (directed optional)

    word ladder    {"beginWord": "hit", "endWord": "cog",
                    "wordList": ["hot", "dot", "dog", "lot", "log", "cog"]}

    tour           {"cities": [{"x": 10, "y": 20, "name": "A"}, …]}
                or {"distances": [[0, 3, 4], [3, 0, 5], [4, 5, 0]]}
"""

import json
import logging
import math
import re
from typing import Any, Dict, List, Mapping, Optional, Union

from config import DEFAULT_MAX_CITIES, DEFAULT_MAX_VERTICES
from errors import ValidationError
from graph import Graph, Vertex
from problems.instances import City, InstanceKind, TourInstance, WordLadderInstance

logger = logging.getLogger(__name__)

_WORD_RE = re.compile(r"^[a-z]+$")

RawInput = Union[str, bytes, Mapping[str, Any]]


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _is_number(value: Any) -> bool:
    # bool is an int subclass; true/false are not coordinates
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_finite_number(value: Any) -> bool:
    return _is_number(value) and math.isfinite(value)


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _load(raw: RawInput) -> Mapping[str, Any]:
    if isinstance(raw, (str, bytes)):
        if not raw.strip():
            raise ValidationError(["Please enter graph data"])
        try:
            raw = json.loads(raw)
        except json.JSONDecodeError as exc:
            raise ValidationError([f"Invalid JSON: {exc.msg}"]) from exc
    if not isinstance(raw, Mapping):
        raise ValidationError(["Input must be a JSON object"])
    return raw


def _fail(kind: str, errors: List[str]) -> None:
    if errors:
        logger.warning("Rejected %s input: %s", kind, "; ".join(errors))
        raise ValidationError(errors)


# ---------------------------------------------------------------------------
# Custom graph
# ---------------------------------------------------------------------------
def validate_graph(
    raw: RawInput,
    max_vertices: int = DEFAULT_MAX_VERTICES,
    directed: Optional[bool] = None,
) -> Graph:
    """
    Validate a custom graph and build it.  `directed` overrides the
    optional "directed" field of the input.
    """
    data = _load(raw)
    errors: List[str] = []

    vertices = data.get("vertices")
    edges = data.get("edges")

    if not isinstance(vertices, list):
        errors.append('Invalid format: "vertices" must be an array')
        vertices = []
    elif not vertices:
        errors.append("Graph must have at least one vertex")
    elif len(vertices) > max_vertices:
        errors.append(f"Too many vertices. Maximum allowed is {max_vertices}")

    if not isinstance(edges, list):
        errors.append('Invalid format: "edges" must be an array')
        edges = []

    if "directed" in data and not isinstance(data["directed"], bool):
        errors.append('"directed" must be true or false')

    # an oversized vertex list is rejected outright, no point checking each entry
    if errors:
        _fail("graph", errors)

    ids: List[int] = []
    for i, vd in enumerate(vertices):
        if not isinstance(vd, Mapping) or not all(k in vd for k in ("id", "x", "y")):
            errors.append(f"vertices[{i}]: each vertex must have id, x, and y properties")
            continue
        if not _is_int(vd["id"]):
            errors.append(f"vertices[{i}]: id must be an integer")
        elif vd["id"] in ids:
            errors.append(f"vertices[{i}]: duplicate vertex id {vd['id']}")
        else:
            ids.append(vd["id"])
        if not (_is_finite_number(vd["x"]) and _is_finite_number(vd["y"])):
            errors.append(f"vertices[{i}]: x and y must be finite numbers")

    known = set(ids)
    for i, ed in enumerate(edges):
        if not isinstance(ed, Mapping) or not all(k in ed for k in ("source", "target", "weight")):
            errors.append(f"edges[{i}]: each edge must have source, target, and weight properties")
            continue
        if not (_is_int(ed["source"]) and _is_int(ed["target"])):
            errors.append(f"edges[{i}]: source and target must be integer vertex ids")
        elif ed["source"] not in known or ed["target"] not in known:
            errors.append(f"edges[{i}]: edge references a vertex id that doesn't exist")
        if not _is_finite_number(ed["weight"]):
            errors.append(f"edges[{i}]: weight must be a finite number")

    _fail("graph", errors)

    g = Graph(directed=data.get("directed", False) if directed is None else directed)
    for vd in vertices:
        g.add_vertex(Vertex(id=vd["id"], x=float(vd["x"]), y=float(vd["y"])))
    for ed in edges:
        g.add_edge(ed["source"], ed["target"], ed["weight"])
    logger.debug("Validated %r", g)
    return g


def validate_start(graph: Graph, start: Any) -> Optional[int]:
    """Check an optional start-vertex id against a validated graph."""
    if start is None:
        return None
    if not _is_int(start):
        raise ValidationError(["start must be an integer vertex id"])
    if graph.get_vertex(start) is None:
        raise ValidationError([f"start vertex {start} doesn't exist"])
    return start


# ---------------------------------------------------------------------------
# Word ladder
# ---------------------------------------------------------------------------
def validate_word_ladder(raw: RawInput) -> WordLadderInstance:
    data = _load(raw)
    errors: List[str] = []

    begin = data.get("beginWord")
    end = data.get("endWord")
    word_list = data.get("wordList")

    for label, word in (("beginWord", begin), ("endWord", end)):
        if not isinstance(word, str) or not _WORD_RE.match(word):
            errors.append(f"{label} must be a non-empty lowercase word (a-z)")
    if not isinstance(word_list, list):
        errors.append("wordList must be an array of words")
        word_list = []

    bad = [w for w in word_list if not isinstance(w, str) or not _WORD_RE.match(w)]
    if bad:
        errors.append(f"wordList entries must be lowercase words (a-z): {bad[:5]!r}")
    _fail("word ladder", errors)

    length = len(begin)
    uneven = [w for w in [end] + word_list if len(w) != length]
    if uneven:
        errors.append(f"All words must have the same length as beginWord ({length}): {uneven[:5]!r}")
    if end not in word_list:
        errors.append(f"endWord '{end}' must be in wordList")
    _fail("word ladder", errors)

    return WordLadderInstance(
        begin_word=begin,
        end_word=end,
        word_list=tuple(dict.fromkeys(word_list)),
    )


# ---------------------------------------------------------------------------
# Travelling salesman
# ---------------------------------------------------------------------------
def validate_tour(raw: RawInput, max_cities: int = DEFAULT_MAX_CITIES) -> TourInstance:
    data = _load(raw)
    errors: List[str] = []

    if "cities" in data:
        cities = data["cities"]
        if not isinstance(cities, list) or not cities:
            _fail("tour", ["cities must be a non-empty array"])
        if len(cities) > max_cities:
            _fail("tour", [f"Too many cities. Maximum allowed is {max_cities}"])
        parsed: List[City] = []
        for i, cd in enumerate(cities):
            if not isinstance(cd, Mapping) or not (
                _is_finite_number(cd.get("x")) and _is_finite_number(cd.get("y"))
            ):
                errors.append(f"cities[{i}]: x and y must be finite numbers")
                continue
            name = cd.get("name", "")
            if not isinstance(name, str):
                errors.append(f"cities[{i}]: name must be a string")
                continue
            parsed.append(City(id=i, x=float(cd["x"]), y=float(cd["y"]), name=name))
        _fail("tour", errors)
        return TourInstance.from_cities(parsed)

    if "distances" in data:
        matrix = data["distances"]
        if not isinstance(matrix, list) or not matrix:
            _fail("tour", ["distances must be a non-empty square matrix"])
        n = len(matrix)
        if n > max_cities:
            _fail("tour", [f"Too many cities. Maximum allowed is {max_cities}"])
        for i, row in enumerate(matrix):
            if not isinstance(row, list) or len(row) != n:
                errors.append(f"distances[{i}]: every row must have {n} entries")
            elif not all(_is_finite_number(v) and v >= 0 for v in row):
                errors.append(f"distances[{i}]: distances must be non-negative finite numbers")
        names = data.get("names")
        if names is not None and (
            not isinstance(names, list) or len(names) != n or not all(isinstance(s, str) for s in names)
        ):
            errors.append(f"names must be an array of {n} strings")
        _fail("tour", errors)
        return TourInstance.from_matrix(matrix, names)

    logger.warning("Rejected tour input: no cities or distances")
    raise ValidationError(['Tour input needs either "cities" or "distances"'])


def validate_instance(
    kind: InstanceKind,
    raw: RawInput,
    max_vertices: int = DEFAULT_MAX_VERTICES,
    max_cities: int = DEFAULT_MAX_CITIES,
    directed: Optional[bool] = None,
):
    """Dispatch to the validator for `kind`."""
    if kind is InstanceKind.GRAPH:
        return validate_graph(raw, max_vertices=max_vertices, directed=directed)
    if kind is InstanceKind.WORD_LADDER:
        return validate_word_ladder(raw)
    return validate_tour(raw, max_cities=max_cities)


def instance_to_dict(instance: Any) -> Dict[str, Any]:
    """Echo a validated instance back in its ingestion format."""
    if isinstance(instance, Graph):
        return instance.to_dict()
    if isinstance(instance, WordLadderInstance):
        return {
            "beginWord": instance.begin_word,
            "endWord":   instance.end_word,
            "wordList":  list(instance.word_list),
        }
    if isinstance(instance, TourInstance):
        return {
            "distances": [list(row) for row in instance.distances],
            "names":     [instance.name(i) for i in range(instance.size)],
        }
    raise TypeError(f"Not a problem instance: {type(instance).__name__}")
