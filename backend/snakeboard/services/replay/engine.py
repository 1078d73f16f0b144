import math
import re
from dataclasses import dataclass, asdict
from typing import Dict, Iterable, Iterator, Optional

from .prng import Mulberry32, MASK32
from .rules import RuleSet, get_rules
from .simulation import DIRECTIONS, FAULT, RUNNING, Frame, Simulation


@dataclass(frozen=True)
class ReplayResult:
    ok: bool
    score: int = 0
    reason: Optional[str] = None
    termination: Optional[str] = None
    ticks_played: int = 0

    def to_dict(self) -> dict:
        return asdict(self)


_DECIMAL = re.compile(r'[+-]?(\d+\.?\d*|\.\d+)([eE][+-]?\d+)?')
_PREFIXED = re.compile(r'0([xX][0-9a-fA-F]+|[oO][0-7]+|[bB][01]+)')
_RADIX = {'x': 16, 'o': 8, 'b': 2}


def _to_number(value) -> float:
    """JS ``Number()`` for JSON scalars; NaN where JS gives NaN."""
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        try:
            return float(value)
        except OverflowError:
            return math.inf if value > 0 else -math.inf
    if isinstance(value, str):
        s = value.strip()
        if not s:
            return 0.0
        if _DECIMAL.fullmatch(s):
            return float(s)
        if _PREFIXED.fullmatch(s):
            try:
                return float(int(s[2:], _RADIX[s[1].lower()]))
            except OverflowError:
                return math.inf
        if s in ('Infinity', '+Infinity'):
            return math.inf
        if s == '-Infinity':
            return -math.inf
    return math.nan


def clamp_int(value, lo: int, hi: int) -> int:
    """Coerce like JS ``Number()`` then floor and clamp; NaN and infinities map to ``lo``."""
    n = _to_number(value)
    if not math.isfinite(n):
        return lo
    return max(lo, min(hi, math.floor(n)))


def collapse_inputs(inputs: Iterable, tick_count: int) -> Dict[int, str]:
    """Map tick -> direction code, last event registered for a tick wins."""
    by_tick: Dict[int, str] = {}
    for item in inputs or ():
        if not isinstance(item, dict):
            continue
        code = item.get('d')
        if not isinstance(code, str) or code not in DIRECTIONS:
            continue
        by_tick[clamp_int(item.get('t'), 0, tick_count)] = code
    return by_tick


def iter_replay(seed: int, tick_count: int, inputs: Iterable,
                rules: Optional[RuleSet] = None, sim: Optional[Simulation] = None) -> Iterator[Frame]:
    """Yield a frame per tick actually played.

    Stops early on wall/self collision or a fault; inspect ``sim`` afterwards
    for the terminal status.
    """
    if sim is None:
        sim = Simulation(rules or get_rules(), Mulberry32(seed & MASK32))
    sim.start()
    if sim.status != RUNNING:
        return
    by_tick = collapse_inputs(inputs, tick_count)
    for tick in range(1, tick_count + 1):
        status = sim.step(tick, by_tick.get(tick))
        if sim.last_tick == tick:
            yield sim.snapshot()
        if status != RUNNING:
            return
    sim.finish()


def replay(seed: int, tick_count: int, inputs: Iterable, rules: Optional[RuleSet] = None) -> ReplayResult:
    """Re-simulate a finished run and derive its score.

    Only faults (no room for food) reject the run; collisions and an
    exhausted tick budget keep the score reached so far.
    """
    sim = Simulation(rules or get_rules(), Mulberry32(seed & MASK32))
    for _ in iter_replay(seed, tick_count, inputs, sim=sim):
        pass
    if sim.status == FAULT:
        return ReplayResult(ok=False, reason=sim.termination, termination=sim.termination,
                            ticks_played=sim.ticks_played)
    return ReplayResult(ok=True, score=sim.score, termination=sim.termination,
                        ticks_played=sim.ticks_played)
