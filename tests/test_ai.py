"""Tests for the AI paddle controller."""

import random

import pytest

from ai import AIController
from config import H
from core import Opponent
from conftest import place_puck


@pytest.fixture
def ai_match(make_match):
    return make_match(opponent=Opponent.AI)


def heat_up(state):
    state.tempo = 100
    state.combo = 20
    return 30.0  # rally seconds that max out the rally term


class TestIntensity:
    def test_calm_rally_is_zero(self, ai_match):
        assert ai_match.ai.intensity(ai_match, 0.0) == 0.0

    def test_hot_rally_is_one(self, ai_match):
        now = heat_up(ai_match)
        assert ai_match.ai.intensity(ai_match, now) == pytest.approx(1.0)

    def test_stays_in_unit_range(self, ai_match):
        ai_match.tempo = 500
        ai_match.combo = 900
        assert 0.0 <= ai_match.ai.intensity(ai_match, 1e6) <= 1.0


class TestPrediction:
    def test_straight_line(self, ai_match):
        place_puck(ai_match, 852, 300, 5, 5)
        assert ai_match.ai.predict_y(ai_match) == pytest.approx(400)

    def test_folds_through_wall_bounce(self, ai_match):
        place_puck(ai_match, 852, 300, 5, -25)
        assert ai_match.ai.predict_y(ai_match) == pytest.approx(220)

    def test_stalled_puck_predicts_current_height(self, ai_match):
        place_puck(ai_match, 500, 123, 0, 4)
        assert ai_match.ai.predict_y(ai_match) == 123


def test_only_the_ai_paddle_is_flagged(ai_match):
    assert ai_match.paddles[1].ai_driven
    assert not ai_match.paddles[0].ai_driven
    assert ai_match.ai.side == 1


def test_error_shrinks_with_intensity():
    ai = AIController(rng=random.Random(0))
    assert ai.error_spread(0.0) == pytest.approx(70.0)
    assert ai.error_spread(1.0) == pytest.approx(3.0)


def test_target_stays_within_error_band(ai_match):
    place_puck(ai_match, 852, 300, 5, 5)
    ai = ai_match.ai
    ai.update(ai_match, 0.0)
    predicted = 400
    low = 300 + 0.08 * (predicted - 70 - 300)
    high = 300 + 0.08 * (predicted + 70 - 300)
    assert low <= ai.target_y <= high


def test_same_seed_same_decisions(court, store):
    from match import new_match, start_match

    targets = []
    for _ in range(2):
        state = new_match(court, "casual", store, opponent=Opponent.AI, rng=random.Random(99))
        start_match(state, 0.0)
        place_puck(state, 700, 200, 6, 3)
        state.ai.update(state, 0.5)
        targets.append(state.ai.target_y)
    assert targets[0] == targets[1]


def test_step_limited_per_tick(ai_match):
    paddle = ai_match.paddles[1]
    place_puck(ai_match, 852, 580, 5, 0)
    before = paddle.y
    ai_match.ai.update(ai_match, 0.0)
    assert paddle.y - before == pytest.approx(paddle.speed * 0.65)


def test_drifts_slowly_when_puck_leaves(ai_match):
    paddle = ai_match.paddles[1]
    paddle.move_to(0)
    place_puck(ai_match, 500, 300, -6, 0)
    ai_match.ai.update(ai_match, 0.0)
    assert not ai_match.ai.incoming
    assert ai_match.ai.target_y == pytest.approx(H / 2)
    assert paddle.y > 0


class TestSlap:
    def test_arms_when_hot_close_and_aligned(self, ai_match):
        now = heat_up(ai_match)
        place_puck(ai_match, 852, 300, 10, 0)
        ai_match.ai.update(ai_match, now)
        assert ai_match.paddles[1].slap_ready

    def test_never_when_calm(self, ai_match):
        place_puck(ai_match, 852, 300, 10, 0)
        ai_match.ai.update(ai_match, 0.0)
        assert not ai_match.paddles[1].slap_ready

    def test_respects_cooldown(self, ai_match):
        now = heat_up(ai_match)
        ai_match.paddles[1].slap_cooldown_until = now + 1
        place_puck(ai_match, 852, 300, 10, 0)
        ai_match.ai.update(ai_match, now)
        assert not ai_match.paddles[1].slap_ready

    def test_slow_puck_not_worth_it(self, ai_match):
        now = heat_up(ai_match)
        place_puck(ai_match, 852, 300, 5, 0)
        ai_match.ai.update(ai_match, now)
        assert not ai_match.paddles[1].slap_ready

    def test_far_puck_not_yet(self, ai_match):
        now = heat_up(ai_match)
        place_puck(ai_match, 500, 300, 10, 0)
        ai_match.ai.update(ai_match, now)
        assert not ai_match.paddles[1].slap_ready

    def test_misaligned_impact_skipped(self, ai_match):
        now = heat_up(ai_match)
        place_puck(ai_match, 852, 520, 10, 0)
        ai_match.ai.update(ai_match, now)
        assert not ai_match.paddles[1].slap_ready
