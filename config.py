import json
import logging
import math
import os
from dataclasses import dataclass
from typing import Dict, Optional, Tuple

logger = logging.getLogger(__name__)

W, H = 1000, 600

BG = (10, 14, 20)
WHITE = (235, 242, 250)
CYAN = (91, 224, 255)
PINK = (255, 110, 156)
GRAY = (130, 130, 130)
YELLOW = (255, 230, 111)
ZONE = (255, 196, 74)

PADDLE_INSET = 24
PADDLE_W = 14
PADDLE_H = 110
PADDLE_SPEED = 7.0

PUCK_R = 10
GOAL_MARGIN = 40

SERVE_ANGLE = 0.4
MAX_BOUNCE_ANGLE = 0.95
PADDLE_TEMPO_BOOST = 0.35
HIT_TEMPO_GAIN = 4.5
SLAP_CEILING = 1.3

ZONE_SPEED_BOOST = 1.04
ZONE_CEILING = 1.2

COMBO_TIERS = (5, 10, 15, 20)
GAIN_BOOST_MIN = 0.8
GAIN_BOOST_MAX = 1.4
GOAL_SPLASH_FRAMES = 42

AI_WEIGHTS = (0.5, 0.3, 0.2)
AI_COMBO_CAP = 20
AI_RALLY_SECONDS = 30.0
AI_REACTION = (0.08, 0.32)
AI_STEP = (0.65, 1.15)
AI_ERROR = (70.0, 3.0)
AI_IDLE_EASE = 0.04
AI_NEUTRAL_BLEND = 0.35
AI_SLAP_MIN_INTENSITY = 0.35
AI_SLAP_REACH = (150.0, 260.0)
AI_SLAP_SPEED = (1.6, 1.1)
AI_SLAP_WINDOW = (0.12, 0.34)

HIGHSCORE_PREFIX = "uberpong_best_"
HIGHSCORE_FILE = "highscores.json"

FPS = 60
MUSIC_VOL_DEFAULT = 0.18

SCORING_KINDS = ("points", "endurance")


class ConfigError(ValueError):
    pass


@dataclass(frozen=True)
class RiskZone:
    x: float
    y: float
    w: float
    h: float

    def overlaps(self, cx, cy, r):
        return (cx + r >= self.x and cx - r <= self.x + self.w
                and cy + r >= self.y and cy - r <= self.y + self.h)


@dataclass(frozen=True)
class ModeConfig:
    key: str
    label: str
    base_puck_speed: float
    max_puck_speed: float
    tempo_ramp: float
    wall_bounce_boost: float
    slap_multiplier: float
    slap_cooldown_ms: float
    points_to_win: int
    risk_bonus: int = 0
    scoring: str = "points"
    win_by: int = 2

    @property
    def endurance(self) -> bool:
        return self.scoring == "endurance"


@dataclass(frozen=True)
class CourtConfig:
    modes: Dict[str, ModeConfig]
    risk_zones: Tuple[RiskZone, ...]
    default_mode: str

    def mode(self, key: str) -> ModeConfig:
        try:
            return self.modes[key]
        except KeyError:
            raise ConfigError(f"unknown mode {key!r}") from None

    def mode_keys(self):
        return list(self.modes)


_REQUIRED_NUMBERS = (
    "base_puck_speed",
    "max_puck_speed",
    "tempo_ramp",
    "wall_bounce_boost",
    "slap_multiplier",
    "slap_cooldown_ms",
)


def _number(where, data, name, default=None):
    if name not in data:
        if default is not None:
            return default
        raise ConfigError(f"{where}: missing field {name!r}")
    value = data[name]
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{where}: field {name!r} must be a number, got {value!r}")
    value = float(value)
    if not math.isfinite(value) or value < 0:
        raise ConfigError(f"{where}: field {name!r} must be finite and >= 0, got {value!r}")
    return value


def _parse_mode(key, data) -> ModeConfig:
    where = f"mode {key!r}"
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: expected an object")
    nums = {name: _number(where, data, name) for name in _REQUIRED_NUMBERS}
    points = _number(where, data, "points_to_win")
    if points < 1 or points != int(points):
        raise ConfigError(f"{where}: points_to_win must be a positive integer")
    win_by = _number(where, data, "win_by", default=2)
    if win_by < 1 or win_by != int(win_by):
        raise ConfigError(f"{where}: win_by must be a positive integer")
    bonus = _number(where, data, "risk_bonus", default=0)
    if bonus != int(bonus):
        raise ConfigError(f"{where}: risk_bonus must be a whole number")
    if nums["base_puck_speed"] <= 0:
        raise ConfigError(f"{where}: base_puck_speed must be > 0")
    if nums["base_puck_speed"] > nums["max_puck_speed"]:
        raise ConfigError(f"{where}: base_puck_speed exceeds max_puck_speed")
    if nums["slap_multiplier"] < 1:
        raise ConfigError(f"{where}: slap_multiplier must be >= 1")
    scoring = data.get("scoring", "points")
    if scoring not in SCORING_KINDS:
        raise ConfigError(f"{where}: scoring must be one of {SCORING_KINDS}, got {scoring!r}")
    label = data.get("label", key)
    if not isinstance(label, str) or not label:
        raise ConfigError(f"{where}: label must be a non-empty string")
    return ModeConfig(
        key=key,
        label=label,
        points_to_win=int(points),
        risk_bonus=int(bonus),
        scoring=scoring,
        win_by=int(win_by),
        **nums,
    )


def _parse_zone(i, data) -> RiskZone:
    where = f"risk zone #{i}"
    if not isinstance(data, dict):
        raise ConfigError(f"{where}: expected an object")
    zone = RiskZone(*(_number(where, data, k) for k in ("x", "y", "w", "h")))
    if zone.w <= 0 or zone.h <= 0:
        raise ConfigError(f"{where}: width and height must be > 0")
    return zone


def parse_court_config(data) -> CourtConfig:
    if not isinstance(data, dict):
        raise ConfigError("court document must be an object")
    raw_modes = data.get("modes")
    if not isinstance(raw_modes, dict) or not raw_modes:
        raise ConfigError("court document needs a non-empty 'modes' object")
    modes = {key: _parse_mode(key, raw) for key, raw in raw_modes.items()}

    raw_zones = data.get("risk_zones", [])
    if not isinstance(raw_zones, list):
        raise ConfigError("'risk_zones' must be a list")
    zones = tuple(_parse_zone(i, z) for i, z in enumerate(raw_zones))

    default = data.get("default_mode", next(iter(modes)))
    if default not in modes:
        raise ConfigError(f"default_mode {default!r} is not a configured mode")
    return CourtConfig(modes=modes, risk_zones=zones, default_mode=default)


def default_config_path():
    return os.path.join(os.path.dirname(os.path.abspath(__file__)), "courts.json")


def load_court_config(path: Optional[str] = None) -> CourtConfig:
    path = path or default_config_path()
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise ConfigError(f"court config not found: {path}") from None
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"court config unreadable: {path}: {exc}") from exc
    court = parse_court_config(data)
    logger.info("Loaded %d modes and %d risk zones from %s",
                len(court.modes), len(court.risk_zones), path)
    return court
