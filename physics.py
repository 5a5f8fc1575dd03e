import math
from typing import List, Optional

from config import (
    W, H, GOAL_MARGIN, MAX_BOUNCE_ANGLE, PADDLE_TEMPO_BOOST, HIT_TEMPO_GAIN, SLAP_CEILING,
)
from core import (
    Controls, Event, EventKind, MatchState, Paddle, Vec2, clamp, limit_speed,
)


def arm_slap(paddle: Paddle, now: float) -> bool:
    if paddle.slap_ready or now < paddle.slap_cooldown_until:
        return False
    paddle.slap_ready = True
    return True


def update_paddles(state: MatchState, controls: Controls, now: float):
    for p in state.paddles:
        if p.ai_driven:
            continue
        if controls.is_held(p.up):
            p.move_to(p.y - p.speed)
        if controls.is_held(p.down):
            p.move_to(p.y + p.speed)
        if controls.is_held(p.slap):
            arm_slap(p, now)


def update_tempo(state: MatchState):
    state.tempo = clamp(state.tempo + state.mode.tempo_ramp, 0.0, 100.0)


def wall_collide_puck(state: MatchState, events: List[Event]):
    puck = state.puck
    mode = state.mode
    hit_top = puck.pos.y - puck.r <= 0 and puck.vel.y < 0
    hit_bottom = puck.pos.y + puck.r >= H and puck.vel.y > 0
    if not (hit_top or hit_bottom):
        return False

    before = puck.speed
    puck.pos.y = clamp(puck.pos.y, puck.r, H - puck.r)
    boost = 1.0 + (state.tempo / 100.0) * mode.wall_bounce_boost
    puck.vel.y = clamp(-puck.vel.y * boost, -mode.max_puck_speed, mode.max_puck_speed)
    puck.vel = limit_speed(puck.vel, max(mode.max_puck_speed, before))
    events.append(Event(EventKind.WALL_BOUNCE, value=puck.speed, x=puck.pos.x, y=puck.pos.y))
    return True


def reflect_from_paddle(state: MatchState, player: int, now: float, events: List[Event]):
    paddle = state.paddles[player]
    puck = state.puck
    mode = state.mode

    rel = (puck.pos.y - paddle.center_y) / (paddle.h / 2)
    angle = clamp(rel, -1.0, 1.0) * MAX_BOUNCE_ANGLE

    boost = 1.0 + (state.tempo / 100.0) * PADDLE_TEMPO_BOOST
    speed = clamp(puck.speed * boost, mode.base_puck_speed, mode.max_puck_speed)

    slapped = paddle.slap_ready
    if slapped:
        speed = clamp(speed * mode.slap_multiplier, mode.base_puck_speed,
                      mode.max_puck_speed * SLAP_CEILING)
        paddle.slap_ready = False
        paddle.slap_cooldown_until = now + mode.slap_cooldown_ms / 1000.0

    direction = 1 if player == 0 else -1
    puck.vel = Vec2(math.cos(angle) * speed * direction, math.sin(angle) * speed)

    state.combo += 1
    state.last_hit_by = player
    state.tempo = clamp(state.tempo + HIT_TEMPO_GAIN, 0.0, 100.0)

    events.append(Event(EventKind.PADDLE_HIT, player, speed, puck.pos.x, puck.pos.y))
    if slapped:
        events.append(Event(EventKind.SLAP, player, speed, puck.pos.x, puck.pos.y))


def paddle_collide_puck(state: MatchState, now: float, events: List[Event]):
    puck = state.puck
    p1, p2 = state.paddles

    if (puck.vel.x < 0
            and puck.pos.x - puck.r <= p1.x + p1.w
            and puck.pos.x + puck.r >= p1.x
            and p1.y <= puck.pos.y <= p1.y + p1.h):
        puck.pos.x = p1.x + p1.w + puck.r
        reflect_from_paddle(state, 0, now, events)
        return 0

    if (puck.vel.x > 0
            and puck.pos.x + puck.r >= p2.x
            and puck.pos.x - puck.r <= p2.x + p2.w
            and p2.y <= puck.pos.y <= p2.y + p2.h):
        puck.pos.x = p2.x - puck.r
        reflect_from_paddle(state, 1, now, events)
        return 1

    return None


def check_goal(state: MatchState) -> Optional[int]:
    """Index of the scoring player once the puck is well past an end line."""
    x = state.puck.pos.x
    if x < -GOAL_MARGIN:
        return 1
    if x > W + GOAL_MARGIN:
        return 0
    return None


def step_puck(state: MatchState, now: float, events: List[Event]):
    puck = state.puck
    puck.pos = puck.pos + puck.vel
    wall_collide_puck(state, events)
    paddle_collide_puck(state, now, events)
