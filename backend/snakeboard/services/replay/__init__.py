"""Deterministic replay of a snake run.

Pure domain code: no Flask, no I/O, no wall clock. Everything needed to
reproduce a run is the seed, the tick count and the input list.
"""
from .engine import ReplayResult, collapse_inputs, iter_replay, replay
from .prng import Mulberry32
from .rules import RuleSet, get_rules
from .simulation import Frame, Position, Simulation

__all__ = [
    "Frame",
    "Mulberry32",
    "Position",
    "ReplayResult",
    "RuleSet",
    "Simulation",
    "collapse_inputs",
    "get_rules",
    "iter_replay",
    "replay",
]
