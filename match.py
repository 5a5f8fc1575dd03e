"""Match lifecycle: mode selection, serving, ticking and goal resolution.

All functions take the :class:`~core.MatchState` they act on; nothing here
keeps module-level game state, so several matches can run side by side.
"""
import logging
import random
from typing import List, Optional

from ai import AIController
from config import CourtConfig
from core import (
    Controls, Event, EventKind, MatchState, Opponent, Phase, create_paddles, create_puck,
    transition,
)
from physics import check_goal, step_puck, update_paddles, update_tempo
from progression import combo_tier
from zones import check_risk_zones

logger = logging.getLogger(__name__)

AI_SIDE = 1


def new_match(court: CourtConfig, mode_key: str, store, *, opponent=Opponent.HUMAN,
              rng: Optional[random.Random] = None, now=0.0) -> MatchState:
    """Fresh, idle match for ``mode_key``; the puck waits at centre until started."""
    mode = court.mode(mode_key)
    rng = rng or random.Random()
    ai_side = AI_SIDE if opponent is Opponent.AI else None
    state = MatchState(
        court=court,
        mode=mode,
        paddles=create_paddles(ai_side),
        puck=create_puck(mode, moving=False),
        store=store,
        rng=rng,
        opponent=opponent,
        rally_start=now,
    )
    if ai_side is not None:
        state.ai = AIController(ai_side, rng)
    state.endurance_best = store.load(mode.key)
    return state


def reset_rally(state: MatchState, serving_player: int, now):
    state.combo = 0
    state.tempo = 0.0
    state.rally_start = now
    state.endurance_current = 0.0
    state.last_hit_by = serving_player
    state.in_risk_zone = False
    state.puck = create_puck(state.mode, serving_player, state.rng)
    state.paddles = create_paddles(AI_SIDE if state.opponent is Opponent.AI else None)
    if state.ai is not None:
        state.ai.reset()


def start_match(state: MatchState, now) -> List[Event]:
    transition(state, Phase.RALLYING)
    reset_rally(state, 0, now)
    return [Event(EventKind.SERVE, 0, state.puck.speed)]


def restart(state: MatchState, now) -> List[Event]:
    """Re-seed scores and best, then serve."""
    transition(state, Phase.IDLE)
    state.scores = [0, 0]
    state.winner = None
    state.last_scorer = 0
    state.endurance_best = state.store.load(state.mode.key)
    return start_match(state, now)


def toggle_pause(state: MatchState, now):
    """Pause or resume; time spent paused does not count toward the rally."""
    if state.phase is Phase.RALLYING:
        transition(state, Phase.PAUSED)
        state.paused_at = now
    elif state.phase is Phase.PAUSED:
        transition(state, Phase.RALLYING)
        shift = max(0.0, now - state.paused_at)
        state.rally_start += shift
        for p in state.paddles:
            p.slap_cooldown_until += shift
    return state.phase


def has_won(state: MatchState, player: int) -> bool:
    mode = state.mode
    own = state.scores[player]
    other = state.scores[1 - player]
    return own >= mode.points_to_win and own - other >= mode.win_by


def _record_endurance(state: MatchState, events: List[Event]):
    if state.endurance_current > state.endurance_best:
        state.endurance_best = state.endurance_current
        state.store.save(state.mode.key, state.endurance_best)
        logger.info("New %s best: %.1fs", state.mode.key, state.endurance_best)
        events.append(Event(EventKind.NEW_BEST, value=state.endurance_best))


def on_goal(state: MatchState, scorer: int, now, events: List[Event]):
    x, y = state.puck.pos.x, state.puck.pos.y
    state.last_scorer = scorer

    if state.mode.endurance:
        state.endurance_current = max(0.0, now - state.rally_start)
        events.append(Event(EventKind.GOAL, scorer, state.endurance_current, x, y))
        _record_endurance(state, events)
        reset_rally(state, scorer, now)
        return

    state.scores[scorer] += 1
    events.append(Event(EventKind.GOAL, scorer, state.scores[scorer], x, y))
    logger.debug("Goal for P%d: %d-%d", scorer + 1, *state.scores)

    # bonuses can leave the non-scorer ahead by the margin
    winner = next((p for p in (scorer, 1 - scorer) if has_won(state, p)), None)
    if winner is not None:
        state.winner = winner
        transition(state, Phase.ENDED)
        logger.info("Match over in %s: P%d wins %d-%d",
                    state.mode.key, winner + 1, *state.scores)
        events.append(Event(EventKind.MATCH_END, winner, state.scores[winner]))
        return

    reset_rally(state, scorer, now)


def tick(state: MatchState, controls: Controls, now) -> List[Event]:
    """Advance one frame. Returns what happened for sound, particles and HUD."""
    events: List[Event] = []
    if state.phase is not Phase.RALLYING:
        return events

    tier_before = combo_tier(state.combo)

    if state.ai is not None:
        state.ai.update(state, now)
    update_paddles(state, controls, now)
    update_tempo(state)
    step_puck(state, now, events)
    check_risk_zones(state, events)

    if state.mode.endurance:
        state.endurance_current = max(0.0, now - state.rally_start)

    tier_after = combo_tier(state.combo)
    if tier_after > tier_before:
        events.append(Event(EventKind.TIER_UP, state.last_hit_by, tier_after))

    scorer = check_goal(state)
    if scorer is not None:
        on_goal(state, scorer, now, events)
    return events


def persist_best(state: MatchState, now):
    """Save an endurance rally still in progress if it already beats the best."""
    if not state.mode.endurance or state.phase is not Phase.RALLYING:
        return False
    state.endurance_current = max(0.0, now - state.rally_start)
    if state.endurance_current <= state.endurance_best:
        return False
    state.endurance_best = state.endurance_current
    return state.store.save(state.mode.key, state.endurance_best)
