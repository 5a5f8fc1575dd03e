"""Shared pytest fixtures for the game core tests."""

import random

import pytest

from config import parse_court_config
from core import Opponent, Vec2
from match import new_match, start_match
from storage import HighScoreStore


COURT_DATA = {
    "default_mode": "casual",
    "modes": {
        "casual": {
            "label": "Casual",
            "base_puck_speed": 6.0,
            "max_puck_speed": 14.0,
            "tempo_ramp": 0.02,
            "wall_bounce_boost": 0.12,
            "slap_multiplier": 1.35,
            "slap_cooldown_ms": 1500,
            "points_to_win": 7,
            "risk_bonus": 1,
        },
        "quiet": {
            "label": "Quiet",
            "base_puck_speed": 6.0,
            "max_puck_speed": 14.0,
            "tempo_ramp": 0.02,
            "wall_bounce_boost": 0.12,
            "slap_multiplier": 1.35,
            "slap_cooldown_ms": 1500,
            "points_to_win": 3,
        },
        "endurance": {
            "label": "Endurance",
            "base_puck_speed": 6.0,
            "max_puck_speed": 16.0,
            "tempo_ramp": 0.03,
            "wall_bounce_boost": 0.15,
            "slap_multiplier": 1.3,
            "slap_cooldown_ms": 1500,
            "points_to_win": 1,
            "risk_bonus": 3,
            "scoring": "endurance",
        },
    },
    "risk_zones": [
        {"x": 440, "y": 70, "w": 120, "h": 60},
    ],
}


@pytest.fixture
def court():
    return parse_court_config(COURT_DATA)


@pytest.fixture
def store(tmp_path):
    return HighScoreStore(str(tmp_path / "scores.json"))


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def make_match(court, store, rng):
    """Build a started match for a mode at time zero."""
    def _make(mode_key="casual", opponent=Opponent.HUMAN, started=True):
        state = new_match(court, mode_key, store, opponent=opponent, rng=rng, now=0.0)
        if started:
            start_match(state, 0.0)
        return state
    return _make


@pytest.fixture
def match(make_match):
    return make_match()


def place_puck(state, x, y, vx, vy):
    state.puck.pos = Vec2(x, y)
    state.puck.vel = Vec2(vx, vy)
    return state.puck
