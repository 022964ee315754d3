"""
main.py — Algorithm Trace Visualizer Flask App
================================================
The web server and command line front-ends over the trace & playback core.

Routes:
  GET  /api/algorithms         – registry cards (optional ?tag= filter)
  POST /api/graph/validate     – validate a custom graph, echo it back
  POST /api/graph/generate     – seeded random connected graph
  POST /api/trace              – validate an instance, generate the full trace
  POST /api/compare            – run two algorithms on one instance, compare

CLI (FLASK_APP=main):
  flask trace ALGORITHM INPUT.json            – print the trace as JSON
  flask replay ALGORITHM INPUT.json           – play it back through a
      [--speed MS] [--scheduler timer|frame]    PlaybackController

Every ValidationError becomes HTTP 400 {"errors": [...]} (or a CLI usage
error).  Traces are generated eagerly and returned whole; playback state
lives with the client.

Configuration:
  Defaults come from config.Settings; any ALGOVIZ_* environment variable
  overrides them (ALGOVIZ_MAX_VERTICES=30, ALGOVIZ_SCHEDULER="frame", …),
  and create_app(config) overrides both.
"""

import asyncio
import json
import logging
from typing import Any, Dict, Mapping, Optional

import click
from flask import Blueprint, Flask, current_app, jsonify, request
from flask.cli import with_appcontext

from algorithms import REGISTRY, AlgoInfo, algorithms_by_tag, generate, list_algorithms, parse_algorithm
from algorithms.step import Step, Trace
from config import SCHEDULER_FRAME, SCHEDULER_TIMER, Settings
from engine import (
    PlaybackController,
    PlaybackState,
    PlaybackStatus,
    Recorder,
    compare,
    make_scheduler,
    to_jsonable,
    trace_to_dict,
)
from errors import SchedulerCallbackError, ValidationError
from graph import Graph
from problems import instance_to_dict, validate_graph, validate_instance, validate_start

logger = logging.getLogger(__name__)

api = Blueprint("api", __name__, url_prefix="/api")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def get_settings() -> Settings:
    return Settings.from_mapping(current_app.config)


def _json_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError(["Request body must be a JSON object"])
    return data


def _build_instance(info: AlgoInfo, raw: Any, settings: Settings):
    return validate_instance(
        info.instance_kind,
        raw,
        max_vertices=settings.max_vertices,
        max_cities=settings.max_cities,
        directed=info.directed,
    )


def _build_options(info: AlgoInfo, instance: Any, raw: Any) -> Dict[str, Any]:
    """Check per-algorithm options; unknown names are rejected by generate()."""
    if raw is None:
        return {}
    if not isinstance(raw, Mapping):
        raise ValidationError(["options must be a JSON object"])
    options = dict(raw)
    if "start" in options and isinstance(instance, Graph):
        options["start"] = validate_start(instance, options["start"])
    return options


def run_trace(algorithm: Any, raw_instance: Any, raw_options: Any, settings: Settings):
    """Validate, then generate.  Returns (AlgoInfo, instance, Trace)."""
    info = REGISTRY[parse_algorithm(algorithm)]
    instance = _build_instance(info, raw_instance, settings)
    options = _build_options(info, instance, raw_options)
    trace = generate(info.key, instance, **options)
    logger.info("Generated %s trace with %d steps", info.key.value, len(trace))
    return info, instance, trace


# ---------------------------------------------------------------------------
# API: Registry
# ---------------------------------------------------------------------------
@api.route("/algorithms", methods=["GET"])
def api_algorithms():
    tag = request.args.get("tag")
    infos = algorithms_by_tag(tag) if tag else list_algorithms()
    return jsonify({"algorithms": [info.to_dict() for info in infos]})


# ---------------------------------------------------------------------------
# API: Graphs
# ---------------------------------------------------------------------------
@api.route("/graph/validate", methods=["POST"])
def api_graph_validate():
    settings = get_settings()
    g = validate_graph(_json_body(), max_vertices=settings.max_vertices)
    return jsonify({"valid": True, "graph": g.to_dict()})


@api.route("/graph/generate", methods=["POST"])
def api_graph_generate():
    settings = get_settings()
    data = request.get_json(silent=True) or {}
    if not isinstance(data, dict):
        raise ValidationError(["Request body must be a JSON object"])

    errors = []
    vertices = data.get("vertices", 7)
    if isinstance(vertices, bool) or not isinstance(vertices, int) or not 1 <= vertices <= settings.max_vertices:
        errors.append(f"vertices must be an integer between 1 and {settings.max_vertices}")
    ratio = data.get("extra_edge_ratio", 0.8)
    if isinstance(ratio, bool) or not isinstance(ratio, (int, float)) or ratio < 0:
        errors.append("extra_edge_ratio must be a non-negative number")
    seed = data.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        errors.append("seed must be an integer")
    directed = data.get("directed", False)
    if not isinstance(directed, bool):
        errors.append('"directed" must be true or false')
    if errors:
        raise ValidationError(errors)

    g = Graph.generate_random(
        num_vertices=vertices,
        extra_edge_ratio=ratio,
        seed=seed,
        directed=directed,
    )
    return jsonify({"graph": g.to_dict()})


# ---------------------------------------------------------------------------
# API: Traces
# ---------------------------------------------------------------------------
@api.route("/trace", methods=["POST"])
def api_trace():
    data = _json_body()
    info, instance, trace = run_trace(
        data.get("algorithm"), data.get("instance"), data.get("options"), get_settings()
    )
    return jsonify({
        "algorithm":   info.key.value,
        "label":       info.label,
        "pseudocode":  list(info.pseudocode),
        "instance":    instance_to_dict(instance),
        "total_steps": len(trace),
        "steps":       trace_to_dict(trace)["steps"],
    })


@api.route("/compare", methods=["POST"])
def api_compare():
    data = _json_body()
    settings = get_settings()
    left = REGISTRY[parse_algorithm(data.get("left"))]
    right = REGISTRY[parse_algorithm(data.get("right"))]
    if left.instance_kind is not right.instance_kind:
        raise ValidationError([
            f"{left.label} and {right.label} do not run on the same kind of instance"
        ])

    instance = validate_instance(
        left.instance_kind,
        data.get("instance"),
        max_vertices=settings.max_vertices,
        max_cities=settings.max_cities,
    )

    recorders = []
    for info in (left, right):
        rec = Recorder()
        rec.start(info.key, instance)
        rec.run_to_completion()
        recorders.append(rec)

    result = compare(*recorders)
    return jsonify(to_jsonable(result))


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------
def handle_validation_error(error: ValidationError):
    return jsonify({"errors": error.errors}), 400


# ---------------------------------------------------------------------------
# CLI
# ---------------------------------------------------------------------------
def _read_input(input_file) -> Any:
    text = input_file.read()
    try:
        return json.loads(text)
    except json.JSONDecodeError as exc:
        raise click.UsageError(f"{input_file.name}: invalid JSON ({exc.msg})") from exc


def _cli_trace(algorithm: str, input_file, start: Optional[int]):
    options = {"start": start} if start is not None else None
    try:
        return run_trace(algorithm, _read_input(input_file), options, get_settings())
    except ValidationError as exc:
        raise click.UsageError("\n".join(exc.errors)) from exc


def _echo_step(state: PlaybackState, step: Step) -> None:
    marker = "■" if step.is_final else "▶"
    click.echo(f"{marker} [{step.step_number:>3}] {step.description}")


async def replay_trace(trace: Trace, speed_ms: int, scheduler: str, frame_ms: int) -> PlaybackController:
    """Play `trace` to completion on the running loop, echoing every Step."""
    loop = asyncio.get_running_loop()
    done = loop.create_future()
    controller = PlaybackController(
        trace,
        scheduler=make_scheduler(scheduler, loop, frame_ms=frame_ms),
        speed_ms=speed_ms,
    )

    def on_state(state: PlaybackState, step: Step) -> None:
        if state.status is PlaybackStatus.COMPLETE and not done.done():
            done.set_result(state)

    def on_error(error: SchedulerCallbackError) -> None:
        if not done.done():
            done.set_exception(error)

    controller.subscribe(_echo_step)
    controller.subscribe(on_state)
    controller.subscribe_errors(on_error)

    try:
        controller.start()
        await done
    finally:
        controller.dispose()
    return controller


@click.command("trace")
@click.argument("algorithm")
@click.argument("input_file", type=click.File("r"))
@click.option("--start", type=int, default=None, help="Start vertex (Prim).")
@with_appcontext
def trace_command(algorithm, input_file, start):
    """Generate a trace and print it as JSON."""
    info, instance, trace = _cli_trace(algorithm, input_file, start)
    click.echo(json.dumps(trace_to_dict(trace), indent=2, ensure_ascii=False))


@click.command("replay")
@click.argument("algorithm")
@click.argument("input_file", type=click.File("r"))
@click.option("--start", type=int, default=None, help="Start vertex (Prim).")
@click.option("--speed", "speed_ms", type=click.IntRange(min=1), default=None, help="Milliseconds per step.")
@click.option("--scheduler", type=click.Choice([SCHEDULER_TIMER, SCHEDULER_FRAME]), default=None)
@with_appcontext
def replay_command(algorithm, input_file, start, speed_ms, scheduler):
    """Play a trace back step by step in the terminal."""
    settings = get_settings()
    info, instance, trace = _cli_trace(algorithm, input_file, start)
    try:
        asyncio.run(replay_trace(
            trace,
            speed_ms=speed_ms or settings.speed_ms,
            scheduler=scheduler or settings.scheduler,
            frame_ms=settings.frame_ms,
        ))
    except SchedulerCallbackError as exc:
        raise click.ClickException(exc.message) from exc


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(config: Optional[Mapping[str, Any]] = None) -> Flask:
    app = Flask(__name__)
    app.config.from_mapping(Settings().as_flask_config())
    app.config.from_prefixed_env("ALGOVIZ")
    if config:
        app.config.update(config)

    app.register_blueprint(api)
    app.register_error_handler(ValidationError, handle_validation_error)
    app.cli.add_command(trace_command)
    app.cli.add_command(replay_command)
    return app


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    print("=" * 60)
    print("  Algorithm Trace Visualizer")
    print("  Starting Flask server...")
    print("  Open http://localhost:5000/api/algorithms")
    print("=" * 60)
    create_app().run(debug=True, host="0.0.0.0", port=5000)
