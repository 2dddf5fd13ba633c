"""Flask application factory for the py-pager web API.

The ``create_app`` function builds a Flask app around the policy engine
with four endpoints:

- ``GET /api/config`` — return input bounds, defaults and policy names.
- ``GET /api/generate`` — return a random reference string.
- ``POST /api/faults`` — count faults for one policy and return JSON.
- ``POST /api/compare`` — count faults for every policy and return JSON.

Request bodies for the two POST endpoints look like::

    {"reference": "1, 2, 3, 1", "pages": 9, "frames": 3, "policy": "lru"}

``reference`` may also be a JSON list of integers.  Page and frame
counts are checked against the app's ``SimulatorConfig``.
"""

from __future__ import annotations

import random
from typing import Any

from flask import Flask, Response, jsonify, request

from py_pager.config import DEFAULT_CONFIG, SimulatorConfig
from py_pager.policies import compare_policies, get_policy
from py_pager.refstring import format_reference_string, generate, parse_reference_string
from py_pager.session import Session

_HTTP_BAD_REQUEST = 400
# OPT look-ahead is quadratic in the reference length.
_MAX_REFERENCE_LENGTH = 1_000
_MAX_GENERATED_LENGTH = _MAX_REFERENCE_LENGTH


def _require_int(data: dict[str, Any], field: str) -> int:
    """Return ``data[field]`` as an int or raise ValueError."""
    if field not in data:
        msg = f"Missing '{field}' field"
        raise ValueError(msg)
    value = data[field]
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"'{field}' must be an integer"
        raise ValueError(msg)
    return value


def _parse_reference(data: dict[str, Any]) -> list[int]:
    """Return the request's reference string as a list of page numbers."""
    if "reference" not in data:
        msg = "Missing 'reference' field"
        raise ValueError(msg)
    reference = data["reference"]
    if isinstance(reference, str):
        requests = parse_reference_string(reference)
    elif isinstance(reference, list) and all(
        isinstance(page, int) and not isinstance(page, bool) for page in reference
    ):
        requests = list(reference)
    else:
        msg = "'reference' must be a string or a list of integers"
        raise ValueError(msg)
    if len(requests) > _MAX_REFERENCE_LENGTH:
        msg = f"'reference' must have at most {_MAX_REFERENCE_LENGTH} requests"
        raise ValueError(msg)
    return requests


def _parse_inputs(config: SimulatorConfig) -> tuple[list[int], int, int]:
    """Read and validate reference, pages and frames from the JSON body."""
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        msg = "Expected a JSON object body"
        raise ValueError(msg)
    requests = _parse_reference(data)
    pages = config.check_pages(_require_int(data, "pages"))
    frames = config.check_frames(_require_int(data, "frames"))
    return requests, pages, frames


def _query_int(name: str, default: int) -> int:
    """Return an integer query parameter, or *default* if absent."""
    raw = request.args.get(name)
    if raw is None:
        return default
    try:
        return int(raw)
    except ValueError:
        msg = f"'{name}' must be an integer"
        raise ValueError(msg) from None


def create_app(
    config: SimulatorConfig | None = None,
    rng: random.Random | None = None,
) -> Flask:
    """Create and configure the Flask application.

    Args:
        config: Input bounds (defaults to ``DEFAULT_CONFIG``).
        rng: Random source for ``/api/generate``.

    Returns:
        A configured Flask application ready to serve.

    """
    cfg = config if config is not None else DEFAULT_CONFIG
    source = rng if rng is not None else random.Random()

    app = Flask(__name__)

    @app.errorhandler(ValueError)
    def bad_request(exc: ValueError) -> tuple[Response, int]:  # pyright: ignore[reportUnusedFunction]
        """Turn validation failures into a JSON 400 response."""
        return jsonify({"error": str(exc)}), _HTTP_BAD_REQUEST

    @app.route("/api/config")
    def show_config() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return the bounds and defaults as JSON."""
        return jsonify(cfg.as_dict())

    @app.route("/api/generate")
    def generate_reference() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Return a random reference string.

        Query parameters ``length`` and ``upper_bound`` default to the
        configured generated length and default page count.

        Returns:
            JSON with ``reference`` (list) and ``text`` (comma-separated).

        """
        length = _query_int("length", cfg.generated_length)
        upper_bound = _query_int("upper_bound", cfg.default_pages)
        if length > _MAX_GENERATED_LENGTH:
            msg = f"'length' must be at most {_MAX_GENERATED_LENGTH}"
            raise ValueError(msg)
        sequence = generate(length, upper_bound, rng=source)
        return jsonify({"reference": sequence, "text": format_reference_string(sequence)})

    @app.route("/api/faults", methods=["POST"])
    def faults() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Count faults for the policy named in the body.

        Returns:
            JSON with ``policy``, ``faults`` and ``message`` fields.

        """
        requests, pages, frames = _parse_inputs(cfg)
        data: dict[str, Any] = request.get_json(silent=True) or {}
        policy = get_policy(str(data.get("policy", cfg.default_policy)))
        count = policy.compute_faults(requests, pages, frames)
        return jsonify(
            {
                "policy": str(policy.kind),
                "faults": count,
                "message": Session.describe(count),
            }
        )

    @app.route("/api/compare", methods=["POST"])
    def compare() -> Response:  # pyright: ignore[reportUnusedFunction]
        """Count faults for every policy.

        Returns:
            JSON mapping each policy name to its fault count.

        """
        requests, pages, frames = _parse_inputs(cfg)
        results = compare_policies(requests, pages, frames)
        return jsonify({str(kind): count for kind, count in results.items()})

    return app


def main() -> None:
    """Run the web API development server.

    This is the ``py-pager-web`` console entry point.
    """
    app = create_app()
    app.run(debug=True, port=8080)
