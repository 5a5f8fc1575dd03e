"""Tests for court document loading and validation."""

import copy
import json

import pytest

from config import ConfigError, load_court_config, parse_court_config
from conftest import COURT_DATA


def data():
    return copy.deepcopy(COURT_DATA)


def test_shipped_courts_load():
    court = load_court_config()
    assert court.default_mode in court.modes
    assert court.mode("endurance").endurance
    assert not court.mode("casual").endurance
    assert len(court.risk_zones) >= 1


def test_defaults_for_optional_fields(court):
    quiet = court.mode("quiet")
    assert quiet.risk_bonus == 0
    assert quiet.win_by == 2
    assert quiet.scoring == "points"


def test_mode_order_is_kept(court):
    assert court.mode_keys() == ["casual", "quiet", "endurance"]


def test_unknown_mode_raises(court):
    with pytest.raises(ConfigError, match="unknown mode"):
        court.mode("nope")


@pytest.mark.parametrize("field", [
    "base_puck_speed", "max_puck_speed", "tempo_ramp", "wall_bounce_boost",
    "slap_multiplier", "slap_cooldown_ms", "points_to_win",
])
def test_missing_core_number_is_fatal(field):
    d = data()
    del d["modes"]["casual"][field]
    with pytest.raises(ConfigError, match=field):
        parse_court_config(d)


@pytest.mark.parametrize("value", ["fast", None, True, float("nan"), float("inf"), -1])
def test_bad_number_is_fatal(value):
    d = data()
    d["modes"]["casual"]["max_puck_speed"] = value
    with pytest.raises(ConfigError):
        parse_court_config(d)


def test_base_above_max_is_fatal():
    d = data()
    d["modes"]["casual"]["base_puck_speed"] = 20
    with pytest.raises(ConfigError, match="exceeds"):
        parse_court_config(d)


def test_unknown_scoring_is_fatal():
    d = data()
    d["modes"]["casual"]["scoring"] = "sudden_death"
    with pytest.raises(ConfigError, match="scoring"):
        parse_court_config(d)


def test_fractional_points_to_win_is_fatal():
    d = data()
    d["modes"]["casual"]["points_to_win"] = 6.5
    with pytest.raises(ConfigError, match="points_to_win"):
        parse_court_config(d)


def test_fractional_risk_bonus_is_fatal():
    d = data()
    d["modes"]["casual"]["risk_bonus"] = 1.5
    with pytest.raises(ConfigError, match="risk_bonus"):
        parse_court_config(d)


def test_empty_modes_is_fatal():
    with pytest.raises(ConfigError, match="modes"):
        parse_court_config({"modes": {}})


def test_flat_zone_is_fatal():
    d = data()
    d["risk_zones"] = [{"x": 0, "y": 0, "w": 0, "h": 10}]
    with pytest.raises(ConfigError, match="risk zone #0"):
        parse_court_config(d)


def test_bad_default_mode_is_fatal():
    d = data()
    d["default_mode"] = "ghost"
    with pytest.raises(ConfigError, match="default_mode"):
        parse_court_config(d)


def test_missing_file_is_fatal(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        load_court_config(str(tmp_path / "missing.json"))


def test_malformed_json_is_fatal(tmp_path):
    path = tmp_path / "courts.json"
    path.write_text("{ not json")
    with pytest.raises(ConfigError, match="unreadable"):
        load_court_config(str(path))


def test_loads_from_file(tmp_path):
    path = tmp_path / "courts.json"
    path.write_text(json.dumps(COURT_DATA))
    court = load_court_config(str(path))
    assert court.mode("casual").base_puck_speed == 6.0
