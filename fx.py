import math
import random
import pygame
from config import W, H, CYAN, PINK, YELLOW, ZONE, WHITE
from core import EventKind
from progression import tempo_gain_boost

SPARK_LIFE = (0.20, 0.48)
SPARK_N = 14
SPARK_DRAG = 0.90


def age_particles(parts, dt, drift):
    """Burn `dt` off each particle's life and let `drift` move the survivors."""
    survivors = [p for p in parts if p["life"] > dt]
    for p in survivors:
        p["life"] -= dt
        drift(p, dt)
    return survivors


class Confetti:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()
        self.parts = []

    def burst(self, center, n=320):
        rng = self.rng
        cx, cy = center
        for _ in range(n):
            a = rng.random() * math.tau
            s = rng.uniform(240, 980)
            self.parts.append({
                "p": [cx + rng.uniform(-10, 10), cy + rng.uniform(-10, 10)],
                "v": [math.cos(a) * s, math.sin(a) * s],
                "g": rng.uniform(680, 1200),
                "life": rng.uniform(1.6, 2.9),
                "size": rng.randint(2, 5),
                "col": rng.choice([YELLOW, CYAN, PINK, ZONE, WHITE]),
                "spin": rng.uniform(-10, 10),
                "ang": rng.uniform(0, math.tau),
            })

    @staticmethod
    def _fall(p, dt):
        vel = p["v"]
        vel[1] += p["g"] * dt
        p["p"] = [p["p"][0] + vel[0] * dt, p["p"][1] + vel[1] * dt]
        p["ang"] += p["spin"] * dt

    def update(self, dt):
        self.parts = age_particles(self.parts, dt, self._fall)

    def draw(self, surf, offset=(0, 0)):
        ox, oy = offset
        for p in self.parts:
            x, y = p["p"]
            s = p["size"]
            dx = math.cos(p["ang"]) * s
            dy = math.sin(p["ang"]) * s
            pygame.draw.line(surf, p["col"], (x - dx + ox, y - dy + oy), (x + dx + ox, y + dy + oy), s)


class Sparks:
    def __init__(self, rng=None):
        self.rng = rng or random.Random()
        self.parts = []

    def burst(self, center, color, n=SPARK_N, power=1.0):
        rng = self.rng
        cx, cy = center
        for _ in range(int(n)):
            a = rng.random() * math.tau
            s = rng.uniform(120, 520) * power
            self.parts.append({
                "p": [cx, cy],
                "v": [math.cos(a) * s, math.sin(a) * s],
                "life": rng.uniform(*SPARK_LIFE),
                "size": rng.randint(2, 4),
                "col": color,
            })

    @staticmethod
    def _glide(p, dt):
        vx, vy = p["v"]
        p["p"] = [p["p"][0] + vx * dt, p["p"][1] + vy * dt]
        drag = SPARK_DRAG ** (dt * 60.0)
        p["v"] = [vx * drag, vy * drag]

    def update(self, dt):
        self.parts = age_particles(self.parts, dt, self._glide)

    def draw(self, surf, offset=(0, 0)):
        ox, oy = offset
        for p in self.parts:
            x, y = p["p"]
            pygame.draw.circle(surf, p["col"], (int(x + ox), int(y + oy)), p["size"])


class ScreenShake:
    def __init__(self, rng=None, decay=0.86):
        self.rng = rng or random.Random()
        self.decay = decay
        self.magnitude = 0.0

    def kick(self, amount):
        self.magnitude = max(self.magnitude, amount)

    def update(self, dt):
        self.magnitude *= self.decay ** (dt * 60.0)
        if self.magnitude < 0.1:
            self.magnitude = 0.0

    def offset(self):
        if self.magnitude <= 0:
            return (0, 0)
        m = self.magnitude
        return (int(self.rng.uniform(-m, m)), int(self.rng.uniform(-m, m)))


class Spectacle:
    """Turns tick events into particles and shake."""

    def __init__(self, rng=None):
        rng = rng or random.Random()
        self.sparks = Sparks(rng)
        self.confetti = Confetti(rng)
        self.shake = ScreenShake(rng)

    def handle(self, events, tempo):
        boost = tempo_gain_boost(tempo)
        for ev in events:
            at = (ev.x, ev.y)
            color = CYAN if ev.player == 0 else PINK
            if ev.kind is EventKind.PADDLE_HIT:
                self.sparks.burst(at, color, n=SPARK_N * boost, power=boost)
                self.shake.kick(2.0 * boost)
            elif ev.kind is EventKind.SLAP:
                self.sparks.burst(at, YELLOW, n=SPARK_N * 2 * boost, power=1.4 * boost)
                self.shake.kick(7.0 * boost)
            elif ev.kind is EventKind.WALL_BOUNCE:
                self.sparks.burst(at, WHITE, n=6 * boost)
            elif ev.kind is EventKind.RISK_ZONE:
                self.sparks.burst(at, ZONE, n=SPARK_N * boost, power=boost)
                self.shake.kick(3.0 * boost)
            elif ev.kind is EventKind.GOAL:
                self.shake.kick(10.0)
            elif ev.kind is EventKind.MATCH_END:
                self.confetti.burst((W * 0.5, H * 0.45), n=360)

    def update(self, dt):
        self.sparks.update(dt)
        self.confetti.update(dt)
        self.shake.update(dt)

    def clear(self):
        self.sparks.parts = []
        self.confetti.parts = []
        self.shake.magnitude = 0.0
