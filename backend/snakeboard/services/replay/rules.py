from dataclasses import dataclass, asdict
from typing import Dict, Optional

from ..errors import ConfigurationError


@dataclass(frozen=True)
class RuleSet:
    """Game constants shared with the client. Changing any value is a new version."""
    version: str
    grid: int
    bonus_chance: float
    bonus_min_sec: int
    bonus_max_sec: int
    food_score: int
    tick_ms: int
    start_length: int = 4
    random_cell_attempts: int = 200

    def bonus_ticks(self, seconds: int) -> int:
        """Ticks a bonus of ``seconds`` stays on the board (rounded up)."""
        return -(-(seconds * 1000) // self.tick_ms)

    def ticks_to_seconds(self, ticks: int) -> int:
        return -(-(ticks * self.tick_ms) // 1000)

    def to_dict(self) -> dict:
        return asdict(self)


RULES_V1 = RuleSet(
    version='v1',
    grid=24,
    bonus_chance=0.25,
    bonus_min_sec=10,
    bonus_max_sec=20,
    food_score=3,
    tick_ms=110,
)

CANONICAL_VERSION = RULES_V1.version

RULESETS: Dict[str, RuleSet] = {RULES_V1.version: RULES_V1}


def get_rules(version: Optional[str] = None) -> RuleSet:
    """Return the rule set for ``version`` (canonical when omitted); ConfigurationError if unknown."""
    try:
        return RULESETS[version or CANONICAL_VERSION]
    except KeyError:
        raise ConfigurationError(f"Unknown RULES_VERSION {version!r}") from None
