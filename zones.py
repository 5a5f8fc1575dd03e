from typing import List, Optional

from config import ZONE_SPEED_BOOST, ZONE_CEILING, RiskZone
from core import Event, EventKind, MatchState, clamp, set_speed


def overlapping_zone(state: MatchState) -> Optional[RiskZone]:
    puck = state.puck
    for zone in state.court.risk_zones:
        if zone.overlaps(puck.pos.x, puck.pos.y, puck.r):
            return zone
    return None


def check_risk_zones(state: MatchState, events: List[Event]):
    """Award the entry bonus once per transition into a zone."""
    zone = overlapping_zone(state)
    entered = zone is not None and not state.in_risk_zone
    state.in_risk_zone = zone is not None
    if not entered:
        return False

    mode = state.mode
    bonus = 0
    if not mode.endurance and mode.risk_bonus > 0:
        bonus = mode.risk_bonus
        state.scores[state.last_hit_by] += bonus

    puck = state.puck
    boosted = clamp(puck.speed * ZONE_SPEED_BOOST, mode.base_puck_speed,
                    mode.max_puck_speed * ZONE_CEILING)
    puck.vel = set_speed(puck.vel, boosted)

    events.append(Event(EventKind.RISK_ZONE, state.last_hit_by, bonus, puck.pos.x, puck.pos.y))
    return True
