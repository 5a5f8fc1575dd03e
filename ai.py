import random
from config import (
    H, AI_WEIGHTS, AI_COMBO_CAP, AI_RALLY_SECONDS, AI_REACTION, AI_STEP, AI_ERROR,
    AI_IDLE_EASE, AI_NEUTRAL_BLEND, AI_SLAP_MIN_INTENSITY, AI_SLAP_REACH, AI_SLAP_SPEED,
    AI_SLAP_WINDOW,
)
from core import MatchState, Puck, clamp, lerp, reflect_value
from physics import arm_slap


class AIController:
    """Drives one paddle. Every competence knob scales with rally intensity."""

    def __init__(self, side=1, rng=None):
        self.side = side
        self.rng = rng or random.Random()
        self.reset()

    def reset(self):
        self.target_y = H / 2
        self.error_unit = 0.0
        self.incoming = False

    def intensity(self, state: MatchState, now):
        wt, wc, wr = AI_WEIGHTS
        tempo_t = clamp(state.tempo / 100.0, 0.0, 1.0)
        combo_t = clamp(state.combo / AI_COMBO_CAP, 0.0, 1.0)
        rally_t = clamp((now - state.rally_start) / AI_RALLY_SECONDS, 0.0, 1.0)
        return clamp(wt * tempo_t + wc * combo_t + wr * rally_t, 0.0, 1.0)

    def is_incoming(self, puck: Puck):
        if self.side == 1:
            return puck.vel.x > 0
        return puck.vel.x < 0

    def predict_y(self, state: MatchState):
        paddle = state.paddles[self.side]
        puck = state.puck
        if self.side == 1:
            plane_x = paddle.x - puck.r
        else:
            plane_x = paddle.x + paddle.w + puck.r
        vx = puck.vel.x
        if abs(vx) < 1e-6:
            return puck.pos.y
        t = (plane_x - puck.pos.x) / vx
        if t <= 0:
            return puck.pos.y
        y = puck.pos.y + puck.vel.y * t
        return reflect_value(y, puck.r, H - puck.r)

    def error_spread(self, k):
        return lerp(AI_ERROR[0], AI_ERROR[1], k)

    def should_slap(self, state: MatchState, now, k, predicted):
        paddle = state.paddles[self.side]
        puck = state.puck
        if paddle.slap_ready or now < paddle.slap_cooldown_until:
            return False
        if k < AI_SLAP_MIN_INTENSITY:
            return False
        if abs(paddle.face_x - puck.pos.x) > lerp(AI_SLAP_REACH[0], AI_SLAP_REACH[1], k):
            return False
        if puck.speed < state.mode.base_puck_speed * lerp(AI_SLAP_SPEED[0], AI_SLAP_SPEED[1], k):
            return False
        window = paddle.h * lerp(AI_SLAP_WINDOW[0], AI_SLAP_WINDOW[1], k)
        return abs(predicted - paddle.center_y) <= window

    def update(self, state: MatchState, now):
        paddle = state.paddles[self.side]
        puck = state.puck
        k = self.intensity(state, now)
        max_step = paddle.speed * lerp(AI_STEP[0], AI_STEP[1], k)

        incoming = self.is_incoming(puck)
        predicted = None
        if incoming:
            # one error draw per approach, shrinking as the rally heats up
            if not self.incoming:
                self.error_unit = self.rng.uniform(-1.0, 1.0)
            predicted = self.predict_y(state)
            aim = predicted + self.error_unit * self.error_spread(k)
            self.target_y = lerp(self.target_y, aim, lerp(AI_REACTION[0], AI_REACTION[1], k))
        else:
            neutral = lerp(H / 2, puck.pos.y, AI_NEUTRAL_BLEND)
            self.target_y = lerp(self.target_y, neutral, AI_IDLE_EASE)
        self.incoming = incoming

        step = clamp(self.target_y - paddle.center_y, -max_step, max_step)
        paddle.move_to(paddle.y + step)

        if incoming and self.should_slap(state, now, k, predicted):
            arm_slap(paddle, now)
        return step
