from config import COMBO_TIERS, GAIN_BOOST_MIN, GAIN_BOOST_MAX, GOAL_SPLASH_FRAMES
from core import clamp, lerp


def combo_tier(combo, thresholds=COMBO_TIERS):
    tier = 0
    for t in thresholds:
        if combo >= t:
            tier += 1
    return tier


def tempo_gain_boost(tempo):
    """Multiplier for tempo-driven effects; never applied to puck velocity."""
    t = clamp(tempo / 100.0, 0.0, 1.0)
    return lerp(GAIN_BOOST_MIN, GAIN_BOOST_MAX, t)


def goal_splash_frame(remaining, total=GOAL_SPLASH_FRAMES):
    """Return ``(alpha, scale)`` for a countdown that started at ``total``.

    Alpha holds at 1 while at least half the countdown remains and then fades
    linearly to 0. Scale starts at 1 and drifts up by at most 8%.
    """
    if remaining <= 0 or total <= 0:
        return 0.0, 1.0
    t = remaining / total
    alpha = min(1.0, t * 2)
    scale = 1.0 + (1.0 - t) * 0.08
    return alpha, scale
