"""Submission checks: ticket, size ceilings, replay, then leaderboard.

Adversarial input never raises from ``verify_submission``; it comes back as
``{'ok': False, 'reason': ...}``. Only ServerFault subclasses propagate.
"""
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from .leaderboard import Leaderboard
from .replay import replay
from .replay.engine import clamp_int
from .replay.prng import MASK32
from .replay.rules import RuleSet
from .tickets import TicketAuthority, sanitize_name

TICK_CLAMP = 200000


class MalformedSubmission(ValueError):
    pass


@dataclass(frozen=True)
class VerificationPolicy:
    max_ticks: int = 60000
    max_inputs: int = 20000

    @classmethod
    def from_config(cls, config) -> 'VerificationPolicy':
        return cls(
            max_ticks=int(config.get('MAX_TICKS', 60000)),
            max_inputs=int(config.get('MAX_INPUTS', 20000)),
        )


@dataclass
class Submission:
    name: str
    session_id: str
    seed: int
    sig: str
    tick_count: int
    inputs: List = field(default_factory=list)


def _optional_str(data: dict, key: str) -> str:
    value = data.get(key)
    if value is None:
        return ''
    if not isinstance(value, str):
        raise MalformedSubmission(f'{key} must be a string')
    return value


def parse_submission(data) -> Submission:
    """Type-check a decoded JSON body. Raises MalformedSubmission."""
    if not isinstance(data, dict):
        raise MalformedSubmission('body must be an object')

    seed = data.get('seed')
    if isinstance(seed, bool) or not isinstance(seed, int) or not 0 <= seed <= MASK32:
        raise MalformedSubmission('seed must be a 32-bit unsigned integer')

    tick_count = data.get('tickCount')
    if isinstance(tick_count, bool) or not isinstance(tick_count, (int, float)):
        raise MalformedSubmission('tickCount must be a number')

    inputs = data.get('inputs')
    if inputs is None:
        inputs = []
    if not isinstance(inputs, list):
        raise MalformedSubmission('inputs must be a list')

    return Submission(
        name=sanitize_name(data.get('name')),
        session_id=_optional_str(data, 'sessionId'),
        seed=seed,
        sig=_optional_str(data, 'sig'),
        tick_count=clamp_int(tick_count, 1, TICK_CLAMP),
        inputs=inputs,
    )


def reject(reason: str) -> dict:
    return {'ok': False, 'reason': reason}


def verify_submission(submission: Submission, authority: TicketAuthority,
                      leaderboard: Callable[[], Leaderboard], policy: VerificationPolicy,
                      now_ms: int, rules: Optional[RuleSet] = None) -> dict:
    """Run the checks in order. ``leaderboard`` is a factory, only called once a replay passes."""
    if not authority.verify(submission.session_id, submission.seed, submission.name, submission.sig):
        return reject('bad session')

    if submission.tick_count > policy.max_ticks:
        return reject('run too long')
    if len(submission.inputs) > policy.max_inputs:
        return reject('too many inputs')

    result = replay(submission.seed, submission.tick_count, submission.inputs, rules=rules)
    if not result.ok:
        return reject(f'replay failed ({result.reason})')

    top5 = leaderboard().record(submission.name, result.score, now_ms)
    return {
        'ok': True,
        'verifiedScore': result.score,
        'top5': top5,
    }
