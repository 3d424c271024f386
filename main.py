"""
main.py — Algorithm Engine Flask API
=====================================
JSON API over the two run controllers.  A rendering client polls
`/state` (or replays a recorded run) and draws the snapshot.

Routes:
  GET  /api/algorithms                 – registry cards (?family=sort|search)
  GET  /api/<widget>/state             – snapshot, config and metrics
  POST /api/<widget>/configure         – speed / size / dimensions
  POST /api/<widget>/start             – start a paced run
  POST /api/<widget>/cancel            – cancel the active run
  POST /api/<widget>/clear             – clear annotations
  POST /api/<widget>/regenerate        – new random array / default grid
  POST /api/sorting/load               – explicit input values
  POST /api/sorting/race               – every sort on the same input
  POST /api/pathfinding/edit           – wall / start / end / erase / toggle
  POST /api/pathfinding/maze           – random maze
  POST /api/pathfinding/compare        – two searches on the current grid

  <widget> is "sorting" or "pathfinding".

State management:
  The controllers live on an EngineHost (asyncio loop on a daemon
  thread).  Handlers never touch a model directly; every call goes
  through host.call(), which serialises access on the engine loop.
"""

import logging
from dataclasses import asdict
from typing import Any, Dict, Optional

from flask import Blueprint, Flask, abort, current_app, jsonify, request

from algorithms import Family, algorithms_by_family, list_algorithms
from models import Grid
from engine import (
    SPEED_PRESETS,
    EngineError,
    EngineHost,
    IllegalStateTransition,
    InvalidConfiguration,
    compare_on,
    race,
)

logger = logging.getLogger(__name__)

WIDGETS = ("sorting", "pathfinding")

api = Blueprint("api", __name__, url_prefix="/api")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def get_host() -> EngineHost:
    return current_app.extensions["engine"]


def get_controller(widget: str):
    if widget not in WIDGETS:
        abort(404)
    return getattr(get_host(), widget)


def get_body() -> Dict[str, Any]:
    data = request.get_json(silent=True)
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise InvalidConfiguration("request body must be a JSON object")
    return data


def require(data: Dict[str, Any], key: str, kind=None):
    if key not in data:
        raise InvalidConfiguration(f"missing field {key!r}", details={"field": key})
    value = data[key]
    if kind is not None and (isinstance(value, bool) or not isinstance(value, kind)):
        raise InvalidConfiguration(f"field {key!r} has the wrong type", details={"field": key, "value": value})
    return value


def state_payload(ctl) -> Dict[str, Any]:
    return {
        "step":    ctl.snapshot().to_dict(),
        "config":  asdict(ctl.config),
        "metrics": ctl.metrics().to_dict(),
        "interval_ms": round(ctl.config.interval * 1000, 3),
    }


def get_state(widget: str) -> Dict[str, Any]:
    ctl = get_controller(widget)
    return get_host().call(state_payload, ctl)


# ---------------------------------------------------------------------------
# API: Registry
# ---------------------------------------------------------------------------
@api.route("/algorithms", methods=["GET"])
def api_algorithms():
    family = request.args.get("family")
    if family is None:
        algos = list_algorithms()
    else:
        try:
            algos = algorithms_by_family(Family(family))
        except ValueError:
            raise InvalidConfiguration(f"unknown family {family!r}", details={"choices": [f.value for f in Family]})
    return jsonify({"algorithms": [a.to_dict() for a in algos]})


# ---------------------------------------------------------------------------
# API: Shared widget routes
# ---------------------------------------------------------------------------
@api.route("/<widget>/state", methods=["GET"])
def api_state(widget):
    return jsonify(get_state(widget))


@api.route("/<widget>/configure", methods=["POST"])
def api_configure(widget):
    ctl = get_controller(widget)
    changes = get_body()
    speed = changes.get("speed")
    if isinstance(speed, str):
        if speed not in SPEED_PRESETS:
            raise InvalidConfiguration(f"unknown speed preset {speed!r}", details={"choices": list(SPEED_PRESETS)})
        changes["speed"] = SPEED_PRESETS[speed]
    get_host().call(ctl.configure, **changes)
    return jsonify(get_state(widget))


@api.route("/<widget>/start", methods=["POST"])
def api_start(widget):
    ctl = get_controller(widget)
    algorithm = require(get_body(), "algorithm", str)
    run = get_host().call(ctl.start, algorithm)
    return jsonify({"run_id": run.run_id, "algorithm": run.algo.key, "state": ctl.state.value})


@api.route("/<widget>/cancel", methods=["POST"])
def api_cancel(widget):
    ctl = get_controller(widget)
    canceled = get_host().call(ctl.cancel)
    return jsonify({"canceled": canceled})


@api.route("/<widget>/clear", methods=["POST"])
def api_clear(widget):
    ctl = get_controller(widget)
    get_host().call(ctl.clear_annotations)
    return jsonify(get_state(widget))


@api.route("/<widget>/regenerate", methods=["POST"])
def api_regenerate(widget):
    ctl = get_controller(widget)
    if widget == "sorting":
        get_host().call(ctl.regenerate, get_body().get("seed"))
    else:
        get_host().call(ctl.reset)
    return jsonify(get_state(widget))


# ---------------------------------------------------------------------------
# API: Sorting
# ---------------------------------------------------------------------------
@api.route("/sorting/load", methods=["POST"])
def api_sorting_load():
    values = require(get_body(), "values", list)
    host = get_host()
    host.call(host.sorting.load, values)
    return jsonify(get_state("sorting"))


@api.route("/sorting/race", methods=["POST"])
def api_sorting_race():
    data = get_body()
    host = get_host()
    if "values" in data:
        values = require(data, "values", list)
    else:
        values = host.call(lambda: host.sorting.model.values())
    keys = require(data, "keys", list) if "keys" in data else None
    results = race(values, keys)
    return jsonify({"results": [m.to_dict() for m in results]})


# ---------------------------------------------------------------------------
# API: Pathfinding
# ---------------------------------------------------------------------------
@api.route("/pathfinding/edit", methods=["POST"])
def api_pathfinding_edit():
    data = get_body()
    op = require(data, "op", str)
    row = require(data, "row", int)
    col = require(data, "col", int)
    host = get_host()
    host.call(host.pathfinding.edit, op, row, col)
    return jsonify(get_state("pathfinding"))


@api.route("/pathfinding/maze", methods=["POST"])
def api_pathfinding_maze():
    host = get_host()
    host.call(host.pathfinding.random_maze, get_body().get("seed"))
    return jsonify(get_state("pathfinding"))


@api.route("/pathfinding/compare", methods=["POST"])
def api_pathfinding_compare():
    data = get_body()
    left = require(data, "left", str) if "left" in data else "dijkstra"
    right = require(data, "right", str) if "right" in data else "astar"
    host = get_host()
    ctl = host.pathfinding
    if host.call(lambda: ctl.is_running):
        raise IllegalStateTransition("cannot compare while a run is active")
    layout = host.call(lambda: ctl.model.to_rows())
    result = compare_on(Grid.from_rows(layout), left, right)
    return jsonify(result.to_dict())


# ---------------------------------------------------------------------------
# Error handling
# ---------------------------------------------------------------------------
def handle_engine_error(exc: EngineError):
    if isinstance(exc, InvalidConfiguration):
        status = 400
    elif isinstance(exc, IllegalStateTransition):
        status = 409
    else:
        status = 500
    logger.warning("%s %s rejected: %s", request.method, request.path, exc.message)
    return jsonify(exc.to_dict()), status


# ---------------------------------------------------------------------------
# App factory
# ---------------------------------------------------------------------------
def create_app(host: Optional[EngineHost] = None) -> Flask:
    app = Flask(__name__)
    host = host or EngineHost()
    app.extensions["engine"] = host.start()
    app.register_blueprint(api)
    app.register_error_handler(EngineError, handle_engine_error)
    return app


# ---------------------------------------------------------------------------
# Run
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logger.info("Algorithm Engine API on http://localhost:5000")
    create_app().run(debug=False, port=5000, threaded=True)
