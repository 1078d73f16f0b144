from dataclasses import dataclass
from typing import List, NamedTuple, Optional

from .prng import Mulberry32
from .rules import RuleSet


class Position(NamedTuple):
    x: int
    y: int


DIRECTIONS = {
    'U': Position(0, -1),
    'D': Position(0, 1),
    'L': Position(-1, 0),
    'R': Position(1, 0),
}

RUNNING = 'running'
GAME_OVER = 'game_over'
FAULT = 'fault'


@dataclass
class Bonus:
    position: Position
    expires_tick: int
    total_sec: int


@dataclass(frozen=True)
class Frame:
    """Read-only view of the board after a tick."""
    tick: int
    head: Position
    length: int
    score: int
    food: Optional[Position]
    bonus: Optional[Position]
    status: str


class Simulation:
    """Board state for one replay. Owned by a single engine run.

    status moves running -> game_over (score kept) or running -> fault
    (run rejected); both are terminal.
    """

    def __init__(self, rules: RuleSet, rng: Mulberry32):
        self.rules = rules
        self.rng = rng
        self.snake: List[Position] = []
        self.heading = DIRECTIONS['R']
        self.food: Optional[Position] = None
        self.bonus: Optional[Bonus] = None
        self.score = 0
        self.status = RUNNING
        self.termination: Optional[str] = None
        self.ticks_played = 0
        self.last_tick = 0

    def start(self) -> None:
        mid = self.rules.grid // 2
        self.snake = [Position(mid - i, mid) for i in range(self.rules.start_length)]
        self.heading = DIRECTIONS['R']
        self.food = self.random_empty_cell()
        if self.food is None:
            self._fault('no space')

    def in_bounds(self, p: Position) -> bool:
        return 0 <= p.x < self.rules.grid and 0 <= p.y < self.rules.grid

    def is_free(self, p: Position) -> bool:
        if p in self.snake:
            return False
        if self.food is not None and p == self.food:
            return False
        if self.bonus is not None and p == self.bonus.position:
            return False
        return True

    def random_empty_cell(self) -> Optional[Position]:
        grid = self.rules.grid
        for _ in range(self.rules.random_cell_attempts):
            x = int(self.rng.next() * grid)
            y = int(self.rng.next() * grid)
            p = Position(x, y)
            if self.is_free(p):
                return p
        # near-full board: deterministic row-major scan
        for y in range(grid):
            for x in range(grid):
                p = Position(x, y)
                if self.is_free(p):
                    return p
        return None

    def maybe_spawn_bonus(self, tick: int) -> None:
        if self.bonus is not None:
            return
        if self.rng.next() >= self.rules.bonus_chance:
            return
        sec = self.rng.randint(self.rules.bonus_min_sec, self.rules.bonus_max_sec)
        pos = self.random_empty_cell()
        if pos is None:
            return
        self.bonus = Bonus(position=pos, expires_tick=tick + self.rules.bonus_ticks(sec), total_sec=sec)

    def turn(self, code: Optional[str]) -> None:
        nd = DIRECTIONS.get(code) if code else None
        if nd is None:
            return
        if nd.x == -self.heading.x and nd.y == -self.heading.y:
            return
        self.heading = nd

    def step(self, tick: int, code: Optional[str] = None) -> str:
        """Advance one tick, applying ``code`` at the tick boundary. Returns the status."""
        if self.status != RUNNING:
            return self.status
        self.turn(code)

        head = self.snake[0]
        nxt = Position(head.x + self.heading.x, head.y + self.heading.y)
        if not self.in_bounds(nxt):
            return self._game_over('wall')

        will_eat_food = self.food is not None and nxt == self.food
        will_eat_bonus = self.bonus is not None and nxt == self.bonus.position

        # the tail cell is released this tick unless the snake grows
        tail_idx = len(self.snake) - 1
        for idx, seg in enumerate(self.snake):
            if seg == nxt and not (idx == tail_idx and not will_eat_food):
                return self._game_over('self')

        self.snake.insert(0, nxt)

        bonus_expires_tick = self.bonus.expires_tick if self.bonus is not None else None
        if self.bonus is not None and tick >= self.bonus.expires_tick:
            self.bonus = None

        if will_eat_food:
            self.score += self.rules.food_score
            self.food = self.random_empty_cell()
            self.maybe_spawn_bonus(tick)
        elif will_eat_bonus:
            rem_sec = 0
            if bonus_expires_tick is not None:
                rem_sec = max(0, self.rules.ticks_to_seconds(bonus_expires_tick - tick))
            self.score += rem_sec
            self.snake.pop()
            self.bonus = None
        else:
            self.snake.pop()

        self.ticks_played += 1
        self.last_tick = tick
        if self.food is None:
            self._fault('no food space')
        return self.status

    def finish(self) -> None:
        """Mark a run that used its whole tick budget."""
        if self.status == RUNNING:
            self.status = GAME_OVER
            self.termination = 'ticks'

    def snapshot(self) -> Frame:
        return Frame(
            tick=self.last_tick,
            head=self.snake[0],
            length=len(self.snake),
            score=self.score,
            food=self.food,
            bonus=self.bonus.position if self.bonus is not None else None,
            status=self.status,
        )

    def _game_over(self, why: str) -> str:
        self.status = GAME_OVER
        self.termination = why
        return self.status

    def _fault(self, reason: str) -> str:
        self.status = FAULT
        self.termination = reason
        return self.status
