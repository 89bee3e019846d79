from __future__ import annotations

import random
import sys
from pathlib import Path
from typing import Any, Dict, List

from flask import Flask, jsonify, request

# Ensure project root is importable when running this file directly
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from connectron import Game, GameError, GameSettings, MoveOutcome


def _reply(game: Game, move: MoveOutcome | None = None, ai_moves: List[MoveOutcome] | None = None):
    snap: Dict[str, Any] = game.snapshot()
    snap["move"] = move.to_dict() if move else None
    snap["ai_moves"] = [o.to_dict() for o in ai_moves or []]
    return jsonify(snap)


def _column_from(payload: Dict[str, Any]) -> int:
    column = payload.get("column")
    if column is None:
        raise GameError("Missing column")
    try:
        return int(column)
    except (TypeError, ValueError):
        raise GameError(f"Column must be a number, got {column!r}") from None


def create_app() -> Flask:
    app = Flask(__name__)

    # one live series per app, replaced by /api/new
    session: Dict[str, Game] = {"game": Game(GameSettings())}

    @app.errorhandler(GameError)
    def handle_game_error(exc: GameError):
        return jsonify({"error": str(exc)}), 400

    @app.get("/api/state")
    def api_state():
        return _reply(session["game"])

    @app.post("/api/new")
    def api_new():
        data = request.get_json(silent=True) or {}
        settings = GameSettings.from_dict(data)
        seed = data.get("seed")
        game = Game(settings, rng=random.Random(seed) if seed is not None else None)
        session["game"] = game
        app.logger.info(
            "New %dx%d series for %d players, best of %d",
            settings.width, settings.height, settings.player_count, settings.best_of,
        )

        # AI seats at the start of the round move straight away
        ai_moves = game.play_ai_turns()
        return _reply(game, ai_moves=ai_moves)

    @app.post("/api/move")
    def api_move():
        payload = request.get_json(silent=True) or {}
        game = session["game"]
        column = _column_from(payload)
        game.require_human_turn()
        outcome = game.drop_at(column)
        return _reply(game, outcome, game.play_ai_turns())

    @app.post("/api/bomb")
    def api_bomb():
        payload = request.get_json(silent=True) or {}
        game = session["game"]
        column = _column_from(payload)
        game.require_human_turn()
        outcome = game.use_bomb(column)
        return _reply(game, outcome, game.play_ai_turns())

    return app


app = create_app()

if __name__ == "__main__":
    app.run(host="0.0.0.0", port=5000, debug=True)
