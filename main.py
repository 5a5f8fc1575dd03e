import logging
import os
import random
import sys
import time

import pygame

from audio import MusicScheduler, MusicThread, SnapshotBox, SoundBoard
from config import W, H, FPS, CYAN, PINK, ConfigError, load_court_config
from core import (
    Controls, EventKind, Opponent, Phase, P1_UP, P1_DOWN, P1_SLAP, P2_UP, P2_DOWN, P2_SLAP,
    snapshot,
)
from fx import Spectacle
from match import new_match, persist_best, restart, start_match, tick, toggle_pause
from storage import HighScoreStore
from ui import (
    GoalSplash, draw_court, draw_hud, draw_objects, draw_phase_overlay, draw_scores,
    draw_splash,
)

logger = logging.getLogger(__name__)

KEYMAP = {
    pygame.K_w: P1_UP,
    pygame.K_s: P1_DOWN,
    pygame.K_LSHIFT: P1_SLAP,
    pygame.K_UP: P2_UP,
    pygame.K_DOWN: P2_DOWN,
    pygame.K_RSHIFT: P2_SLAP,
    pygame.K_RETURN: P2_SLAP,
}


def read_controls():
    pressed = pygame.key.get_pressed()
    return Controls(frozenset(cid for key, cid in KEYMAP.items() if pressed[key]))


def main():
    logging.basicConfig(
        level=os.environ.get("UBERPONG_LOG", "INFO").upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        court = load_court_config(os.environ.get("UBERPONG_COURTS"))
    except ConfigError as exc:
        logger.error("Cannot start: %s", exc)
        return 1

    pygame.init()
    screen = pygame.display.set_mode((W, H))
    pygame.display.set_caption("UBERPONG")
    clock = pygame.time.Clock()

    font = pygame.font.SysFont("consolas", 36, bold=True)
    small = pygame.font.SysFont("consolas", 16)
    big = pygame.font.SysFont("consolas", 64, bold=True)

    store = HighScoreStore(os.environ.get("UBERPONG_SCORES"))
    rng = random.Random()
    board = SoundBoard()
    scheduler = MusicScheduler()
    box = SnapshotBox()
    music = MusicThread(scheduler, box, board)
    music.start()

    spectacle = Spectacle(rng)
    splash = GoalSplash()
    mode_keys = court.mode_keys()
    mode_key = court.default_mode
    opponent = Opponent.HUMAN
    show_debug = False

    def select(key, opp):
        spectacle.clear()
        return new_match(court, key, store, opponent=opp, rng=rng, now=time.monotonic())

    state = select(mode_key, opponent)

    running = True
    while running:
        dt = clock.tick(FPS) / 1000.0
        now = time.monotonic()

        for e in pygame.event.get():
            if e.type == pygame.QUIT:
                running = False
            elif e.type == pygame.KEYDOWN:
                if e.key == pygame.K_ESCAPE:
                    running = False
                elif e.key == pygame.K_F3:
                    show_debug = not show_debug
                elif e.key == pygame.K_SPACE:
                    if state.phase is Phase.IDLE:
                        start_match(state, now)
                    elif state.phase is Phase.ENDED:
                        spectacle.clear()
                        restart(state, now)
                elif e.key == pygame.K_p:
                    toggle_pause(state, now)
                elif e.key == pygame.K_n:
                    logger.info("Now playing %s", scheduler.next_track())
                elif e.key == pygame.K_o:
                    persist_best(state, now)
                    opponent = Opponent.HUMAN if opponent is Opponent.AI else Opponent.AI
                    state = select(mode_key, opponent)
                elif pygame.K_1 <= e.key <= pygame.K_9:
                    idx = e.key - pygame.K_1
                    if idx < len(mode_keys):
                        persist_best(state, now)
                        mode_key = mode_keys[idx]
                        state = select(mode_key, opponent)

        events = tick(state, read_controls(), now)
        board.handle(events, state.tempo)
        spectacle.handle(events, state.tempo)
        for ev in events:
            if ev.kind is EventKind.GOAL and not state.ended:
                color = CYAN if ev.player == 0 else PINK
                text = "RALLY OVER" if state.mode.endurance else f"P{ev.player + 1} SCORES"
                splash.trigger(text, color)
            elif ev.kind is EventKind.NEW_BEST:
                splash.trigger(f"NEW BEST {ev.value:.1f}s", CYAN)

        if state.phase is not Phase.PAUSED:
            spectacle.update(dt)
            splash.update()

        snap = snapshot(state)
        box.put(snap)

        offset = spectacle.shake.offset()
        draw_court(screen, snap, court.risk_zones, offset)
        draw_objects(screen, snap, offset)
        spectacle.sparks.draw(screen, offset)
        spectacle.confetti.draw(screen)
        draw_scores(screen, font, snap)
        draw_hud(screen, small, snap, scheduler.track_name, clock.get_fps(), show_debug)
        draw_splash(screen, big, splash)
        draw_phase_overlay(screen, big, small, snap, mode_keys)
        pygame.display.flip()

    persist_best(state, time.monotonic())
    music.stop()
    music.join(timeout=1.0)
    pygame.quit()
    return 0


if __name__ == "__main__":
    sys.exit(main())
