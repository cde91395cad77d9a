from __future__ import annotations

from flask import Flask, request, jsonify
from flask_cors import CORS

from kinsei_engine.config import CFG, configure_logging
from kinsei_engine.generator import create_random
from kinsei_engine.reports import generate_violation_report
from kinsei_engine.solver import brute_force_solve, logic_solve

app = Flask(__name__)
CORS(app)

SOLVERS = {
    "logic": logic_solve,
    "brute": brute_force_solve,
}


def _rows(data) -> list:
    rows = data.get("rows")
    if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
        raise ValueError("'rows' must be a list of strings of '.', 'x' and 'o'")
    return rows


def _int_grid(data, key: str) -> list:
    grid = data.get(key)
    if not isinstance(grid, list) or not all(isinstance(line, list) for line in grid):
        raise ValueError(f"'{key}' must be a list of integer lists")
    return [[int(v) for v in line] for line in grid]


def _board_payload(result) -> dict:
    """
    Shape shared by /solve and /generate.
    """
    if not result.is_solvable or result.board is None:
        return {
            "ok": False,
            "reason": result.reason,
            "rows": None,
            "sections": None,
            "x_per_section": None,
            "text": "",
            "validation": {"ok": False, "explanation": result.reason},
        }

    board = result.board
    report = generate_violation_report(board)
    return {
        "ok": True,
        "reason": "",
        "rows": board.starting_rows(),
        "sections": board.sections,
        "x_per_section": board.x_per_section,
        "text": board.pretty(),
        "validation": {"ok": not report.has_violation, "explanation": report.explanation},
    }


@app.get("/health")
def health():
    return jsonify({"ok": True})


@app.post("/solve")
def solve():
    try:
        data = request.get_json(force=True) or {}
        mode = data.get("mode", "logic")
        if mode not in SOLVERS:
            raise ValueError(f"Unknown mode '{mode}', expected one of {sorted(SOLVERS)}")

        rows = _rows(data)
        sections = _int_grid(data, "sections")
        x_per_section = [int(v) for v in data.get("x_per_section") or []]

        result = SOLVERS[mode](rows, sections, x_per_section)
        return jsonify({"mode": mode, **_board_payload(result)})

    except (ValueError, TypeError) as e:
        return jsonify({"error": str(e)}), 400


@app.post("/generate")
def generate():
    try:
        data = request.get_json(force=True) or {}
        size = int(data.get("size", CFG.DEFAULT_SIZE))
        seed = data.get("seed")
        seed = int(seed) if seed is not None else None

        result = create_random(size, seed)
        return jsonify({"size": size, "seed": seed, **_board_payload(result)})

    except (ValueError, TypeError) as e:
        return jsonify({"error": str(e)}), 400


if __name__ == "__main__":
    configure_logging()
    app.run(host=CFG.API_HOST, port=CFG.API_PORT, debug=True)
