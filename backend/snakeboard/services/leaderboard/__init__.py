from flask import current_app

from .board import Leaderboard
from .store import KeyValueStore, SqlStore, UpstashStore, build_store

__all__ = ["KeyValueStore", "Leaderboard", "SqlStore", "UpstashStore", "build_store", "get_leaderboard"]


def get_leaderboard(app=None) -> Leaderboard:
    """Leaderboard bound to the store configured on ``app`` (default: current app).

    Raises ConfigurationError when the backend is not configured.
    """
    cfg = (app or current_app).config
    return Leaderboard(
        build_store(cfg),
        key=cfg.get('LEADERBOARD_KEY', 'snake:top5'),
        size=int(cfg.get('LEADERBOARD_SIZE', 5)),
    )
