import pygame
from config import W, H, BG, WHITE, GRAY, YELLOW, CYAN, PINK, ZONE, GOAL_SPLASH_FRAMES
from core import MatchSnapshot, Opponent, Phase
from progression import goal_splash_frame

PADDLE_COLORS = (CYAN, PINK)


class GoalSplash:
    def __init__(self, total=GOAL_SPLASH_FRAMES):
        self.total = total
        self.remaining = 0
        self.text = ""
        self.color = WHITE

    def trigger(self, text, color):
        self.remaining = self.total
        self.text = text
        self.color = color

    def update(self):
        if self.remaining > 0:
            self.remaining -= 1

    def frame(self):
        return goal_splash_frame(self.remaining, self.total)


def draw_court(surf, snap: MatchSnapshot, zones, offset=(0, 0)):
    ox, oy = offset
    glow = 30 + (snap.tempo / 100.0) * 150
    surf.fill((int(BG[0] + glow / 12), int(BG[1] + glow / 14), int(BG[2] + glow / 10)))

    zone_fill = pygame.Surface((W, H), pygame.SRCALPHA)
    for z in zones:
        rect = pygame.Rect(int(z.x + ox), int(z.y + oy), int(z.w), int(z.h))
        pygame.draw.rect(zone_fill, ZONE + (66,), rect)
        pygame.draw.rect(zone_fill, ZONE + (230,), rect, 2)
    surf.blit(zone_fill, (0, 0))

    for y in range(0, H, 18):
        pygame.draw.line(surf, GRAY, (W // 2 + ox, y + oy), (W // 2 + ox, y + 8 + oy), 2)


def draw_objects(surf, snap: MatchSnapshot, offset=(0, 0)):
    ox, oy = offset
    for i, (x, y, w, h, slap_ready) in enumerate(snap.paddles):
        rect = pygame.Rect(int(x + ox), int(y + oy), int(w), int(h))
        pygame.draw.rect(surf, PADDLE_COLORS[i], rect)
        if slap_ready:
            pygame.draw.rect(surf, YELLOW, rect.inflate(6, 6), 3)

    px, py, pr = snap.puck
    pygame.draw.circle(surf, WHITE, (int(px + ox), int(py + oy)), int(pr))


def draw_scores(surf, font, snap: MatchSnapshot):
    if snap.endurance:
        return
    for i, cx in enumerate((W * 0.25, W * 0.75)):
        t = font.render(str(snap.scores[i]), True, WHITE)
        surf.blit(t, t.get_rect(center=(int(cx), 40)))


def draw_hud(surf, small, snap: MatchSnapshot, track_name, fps=None, show_debug=False):
    ai = "ON" if snap.opponent is Opponent.AI else "OFF"
    parts = [
        f"{snap.mode_label}",
        f"tempo {snap.tempo:3.0f}",
        f"combo {snap.combo}",
        f"tier {snap.combo_tier}",
    ]
    if snap.endurance:
        parts.append(f"rally {snap.endurance_current:.1f}s  best {snap.endurance_best:.1f}s")
    parts.append(f"AI {ai}")
    parts.append(f"track {track_name}")
    t = small.render("   ".join(parts), True, GRAY)
    surf.blit(t, (14, H - 24))

    if not show_debug:
        return
    px, py, _ = snap.puck
    lines = [
        f"FPS: {fps or 0:5.1f}   phase:{snap.phase.value}",
        f"PUCK  x={px:7.1f} y={py:7.1f}  speed={snap.puck_speed:5.2f}",
    ]
    y = 70
    for text in lines:
        surf.blit(small.render(text, True, WHITE), (14, y))
        y += 20


def draw_splash(surf, big, splash: GoalSplash):
    alpha, scale = splash.frame()
    if alpha <= 0:
        return
    t = big.render(splash.text, True, splash.color)
    tw, th = t.get_size()
    t = pygame.transform.smoothscale(t, (max(1, int(tw * scale)), max(1, int(th * scale))))
    t.set_alpha(int(255 * alpha))
    surf.blit(t, t.get_rect(center=(W // 2, H // 2 - 40)))


def draw_overlay(surf, big, small, msg, hint, color=WHITE):
    panel = pygame.Surface((W, H), pygame.SRCALPHA)
    panel.fill((0, 0, 0, 140))
    surf.blit(panel, (0, 0))
    t = big.render(msg, True, color)
    surf.blit(t, t.get_rect(center=(W // 2, H // 2 - 10)))
    if hint:
        h = small.render(hint, True, GRAY)
        surf.blit(h, h.get_rect(center=(W // 2, H // 2 + 40)))


def draw_phase_overlay(surf, big, small, snap: MatchSnapshot, mode_keys):
    keys = "  ".join(f"{i + 1}:{k}" for i, k in enumerate(mode_keys))
    if snap.phase is Phase.IDLE:
        draw_overlay(surf, big, small, "UBERPONG",
                     f"SPACE start   O toggle AI   N next track   modes {keys}")
    elif snap.phase is Phase.PAUSED:
        draw_overlay(surf, big, small, "PAUSED", "P resume")
    elif snap.phase is Phase.ENDED and snap.winner is not None:
        draw_overlay(surf, big, small, f"P{snap.winner + 1} WINS",
                     "SPACE restart", PADDLE_COLORS[snap.winner])
