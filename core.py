import math
import random
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, List, Optional, Tuple

from config import (
    W, H, PADDLE_INSET, PADDLE_W, PADDLE_H, PADDLE_SPEED, PUCK_R, SERVE_ANGLE,
    CYAN, PINK, WHITE, CourtConfig, ModeConfig,
)


def clamp(v, a, b):
    return max(a, min(b, v))


def lerp(a, b, t):
    return a + (b - a) * t


def reflect_value(v, lo, hi):
    """Fold ``v`` back into [lo, hi] as if it bounced off both ends."""
    width = hi - lo
    if width <= 0:
        return lo
    period = 2 * width
    m = (v - lo) % period
    if m > width:
        m = period - m
    return lo + m


class Vec2:
    __slots__ = ("x", "y")
    def __init__(self, x=0.0, y=0.0):
        self.x = float(x)
        self.y = float(y)
    def __add__(self, o): return Vec2(self.x + o.x, self.y + o.y)
    def __sub__(self, o): return Vec2(self.x - o.x, self.y - o.y)
    def __mul__(self, k): return Vec2(self.x * k, self.y * k)
    def __repr__(self): return f"Vec2({self.x:.3f}, {self.y:.3f})"
    def length(self): return math.hypot(self.x, self.y)


def set_speed(v: Vec2, speed: float) -> Vec2:
    s = v.length() or 1.0
    return v * (speed / s)


def limit_speed(v: Vec2, max_speed: float) -> Vec2:
    s = v.length()
    if s > max_speed:
        return v * (max_speed / s)
    return v


# Held-control identifiers, one triple per paddle side.
P1_UP, P1_DOWN, P1_SLAP = "p1_up", "p1_down", "p1_slap"
P2_UP, P2_DOWN, P2_SLAP = "p2_up", "p2_down", "p2_slap"


@dataclass(frozen=True)
class Controls:
    held: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, *ids):
        return cls(frozenset(ids))

    def is_held(self, control_id):
        return control_id in self.held


@dataclass
class Paddle:
    x: float
    y: float
    up: str
    down: str
    slap: str
    color: tuple
    w: float = PADDLE_W
    base_h: float = PADDLE_H
    h: float = PADDLE_H
    speed: float = PADDLE_SPEED
    slap_ready: bool = False
    slap_cooldown_until: float = 0.0
    ai_driven: bool = False

    @property
    def center_y(self):
        return self.y + self.h / 2

    @property
    def face_x(self):
        return self.x + self.w if self.x < W / 2 else self.x

    def move_to(self, y):
        self.y = clamp(y, 0, H - self.h)


@dataclass
class Puck:
    pos: Vec2
    vel: Vec2
    r: float = PUCK_R
    color: tuple = WHITE

    @property
    def speed(self):
        return self.vel.length()


def create_paddles(ai_side: Optional[int] = None) -> List[Paddle]:
    paddles = [
        Paddle(PADDLE_INSET, H / 2 - PADDLE_H / 2, P1_UP, P1_DOWN, P1_SLAP, CYAN),
        Paddle(W - PADDLE_INSET - PADDLE_W, H / 2 - PADDLE_H / 2, P2_UP, P2_DOWN, P2_SLAP, PINK),
    ]
    if ai_side is not None:
        paddles[ai_side].ai_driven = True
    return paddles


def create_puck(mode: ModeConfig, serving_player=0, rng=None, moving=True) -> Puck:
    rng = rng or random
    pos = Vec2(W / 2, H / 2)
    if not moving:
        return Puck(pos, Vec2(0, 0))
    direction = 1 if serving_player == 0 else -1
    angle = rng.uniform(-SERVE_ANGLE, SERVE_ANGLE)
    speed = mode.base_puck_speed
    return Puck(pos, Vec2(math.cos(angle) * speed * direction, math.sin(angle) * speed))


class Phase(Enum):
    IDLE = "idle"
    RALLYING = "rallying"
    PAUSED = "paused"
    ENDED = "ended"


class Opponent(Enum):
    HUMAN = "human"
    AI = "ai"


_LEGAL = {
    (Phase.IDLE, Phase.RALLYING),
    (Phase.RALLYING, Phase.PAUSED),
    (Phase.PAUSED, Phase.RALLYING),
    (Phase.RALLYING, Phase.ENDED),
}


class IllegalTransition(RuntimeError):
    pass


def transition(state, to: Phase):
    if to is Phase.IDLE or (state.phase, to) in _LEGAL:
        state.phase = to
        return state
    raise IllegalTransition(f"cannot go from {state.phase.value} to {to.value}")


class EventKind(Enum):
    SERVE = "serve"
    PADDLE_HIT = "paddle_hit"
    SLAP = "slap"
    WALL_BOUNCE = "wall_bounce"
    RISK_ZONE = "risk_zone"
    GOAL = "goal"
    TIER_UP = "tier_up"
    NEW_BEST = "new_best"
    MATCH_END = "match_end"


@dataclass(frozen=True)
class Event:
    kind: EventKind
    player: Optional[int] = None
    value: float = 0.0
    x: float = 0.0
    y: float = 0.0


@dataclass
class MatchState:
    court: CourtConfig
    mode: ModeConfig
    paddles: List[Paddle]
    puck: Puck
    store: object
    rng: random.Random
    opponent: Opponent = Opponent.HUMAN
    ai: object = None
    phase: Phase = Phase.IDLE
    scores: List[int] = field(default_factory=lambda: [0, 0])
    tempo: float = 0.0
    combo: int = 0
    last_hit_by: int = 0
    last_scorer: int = 0
    winner: Optional[int] = None
    rally_start: float = 0.0
    endurance_current: float = 0.0
    endurance_best: float = 0.0
    in_risk_zone: bool = False
    paused_at: float = 0.0

    @property
    def ended(self):
        return self.phase is Phase.ENDED


@dataclass(frozen=True)
class MatchSnapshot:
    phase: Phase
    mode_key: str
    mode_label: str
    endurance: bool
    paddles: Tuple[Tuple[float, float, float, float, bool], ...]
    puck: Tuple[float, float, float]
    puck_speed: float
    scores: Tuple[int, int]
    tempo: float
    combo: int
    combo_tier: int
    winner: Optional[int]
    endurance_current: float
    endurance_best: float
    opponent: Opponent

    @property
    def ended(self):
        return self.phase is Phase.ENDED


def snapshot(state: MatchState) -> MatchSnapshot:
    from progression import combo_tier

    return MatchSnapshot(
        phase=state.phase,
        mode_key=state.mode.key,
        mode_label=state.mode.label,
        endurance=state.mode.endurance,
        paddles=tuple((p.x, p.y, p.w, p.h, p.slap_ready) for p in state.paddles),
        puck=(state.puck.pos.x, state.puck.pos.y, state.puck.r),
        puck_speed=state.puck.speed,
        scores=(state.scores[0], state.scores[1]),
        tempo=state.tempo,
        combo=state.combo,
        combo_tier=combo_tier(state.combo),
        winner=state.winner,
        endurance_current=state.endurance_current,
        endurance_best=max(state.endurance_best, state.endurance_current),
        opponent=state.opponent,
    )
