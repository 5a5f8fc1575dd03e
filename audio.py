import logging
import math
import threading
from array import array
from dataclasses import dataclass
from typing import Optional

import pygame

from config import MUSIC_VOL_DEFAULT
from core import EventKind, MatchSnapshot, Phase, lerp
from progression import tempo_gain_boost

logger = logging.getLogger(__name__)

SAMPLE_RATE = 22050
AMP = 32767

# name, root frequency, semitone pattern (None = rest)
TRACKS = (
    ("Neon Drive", 110.0, (0, 7, 12, 7, 3, 7, 10, 7)),
    ("Laser Grid", 130.81, (0, 12, 0, 10, 0, 7, 0, 5)),
    ("Afterburner", 98.0, (0, 3, 5, 7, 10, 7, 5, 3)),
    ("Prism Rush", 146.83, (0, 4, 7, 11, 12, 11, 7, 4)),
    ("Arcade Pulse", 123.47, (0, None, 7, None, 12, 10, 7, None)),
    ("Laser Skyline", 116.54, (0, 5, 9, 12, 9, 5, 0, -5)),
    ("Hyperdrive Glow", 103.83, (0, 0, 12, 0, 10, 0, 7, 5)),
    ("Neon Valkyrie", 87.31, (0, 3, 7, 3, 8, 7, 3, 2)),
    ("Circuit Bloom", 138.59, (0, 7, 4, 11, 7, 14, 11, 12)),
)

# frequency, duration, gain
SFX = {
    EventKind.PADDLE_HIT: ((520.0, 0.05, 0.45),),
    EventKind.WALL_BOUNCE: ((340.0, 0.04, 0.30),),
    EventKind.SLAP: ((880.0, 0.05, 0.55), (1320.0, 0.08, 0.45)),
    EventKind.RISK_ZONE: ((660.0, 0.06, 0.40), (990.0, 0.06, 0.40)),
    EventKind.GOAL: ((392.0, 0.10, 0.50), (262.0, 0.18, 0.50)),
    EventKind.TIER_UP: ((523.0, 0.06, 0.40), (659.0, 0.06, 0.40), (784.0, 0.10, 0.40)),
    EventKind.NEW_BEST: ((784.0, 0.08, 0.45), (1046.0, 0.14, 0.45)),
    EventKind.MATCH_END: ((523.0, 0.12, 0.55), (659.0, 0.12, 0.55), (784.0, 0.12, 0.55),
                          (1046.0, 0.30, 0.55)),
}


def render_tone(frequency_hz, duration_s, gain, sample_rate=SAMPLE_RATE):
    sample_count = max(1, int(sample_rate * duration_s))
    fade_n = max(1, int(sample_rate * 0.006))
    out = array("h")
    for idx in range(sample_count):
        envelope = 1.0
        if idx < fade_n:
            envelope = idx / float(fade_n)
        tail = sample_count - idx - 1
        if tail < fade_n:
            envelope = min(envelope, tail / float(fade_n))
        phase = (2.0 * math.pi * frequency_hz * idx) / float(sample_rate)
        # square-ish lead: sine plus a little third harmonic
        sample = (math.sin(phase) + 0.3 * math.sin(3 * phase)) / 1.3 * gain * envelope
        out.append(int(max(-1.0, min(1.0, sample)) * AMP))
    return out


def to_channels(pcm, channels):
    if channels == 1:
        return pcm
    out = array("h")
    for s in pcm:
        out.extend([s] * channels)
    return out


class SoundBoard:
    """Synthesised effects. Every call is a no-op when the mixer is unavailable."""

    def __init__(self):
        self._available = False
        self._channels = 1
        self._sounds = {}
        self._notes = {}
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=1)
            _, _, self._channels = pygame.mixer.get_init()
            for kind, parts in SFX.items():
                pcm = array("h")
                for freq, dur, gain in parts:
                    pcm.extend(render_tone(freq, dur, gain))
                self._sounds[kind] = pygame.mixer.Sound(buffer=to_channels(pcm, self._channels).tobytes())
            self._available = True
        except pygame.error as exc:
            logger.info("Audio unavailable, continuing silently: %s", exc)

    @property
    def available(self):
        return self._available

    def play(self, kind, gain=1.0):
        if not self._available:
            return False
        sound = self._sounds.get(kind)
        if sound is None:
            return False
        try:
            sound.set_volume(max(0.0, min(1.0, 0.7 * gain)))
            sound.play()
        except pygame.error as exc:
            logger.debug("Dropped %s sound: %s", kind.value, exc)
            return False
        return True

    def handle(self, events, tempo):
        gain = tempo_gain_boost(tempo)
        for ev in events:
            self.play(ev.kind, gain)

    def play_note(self, note):
        if not self._available:
            return False
        key = (round(note.frequency, 1), round(note.duration, 3))
        try:
            sound = self._notes.get(key)
            if sound is None:
                pcm = render_tone(note.frequency, note.duration, 1.0)
                sound = pygame.mixer.Sound(buffer=to_channels(pcm, self._channels).tobytes())
                self._notes[key] = sound
            sound.set_volume(max(0.0, min(1.0, note.gain)))
            sound.play()
        except pygame.error as exc:
            logger.debug("Dropped music note: %s", exc)
            return False
        return True


@dataclass(frozen=True)
class Note:
    frequency: float
    duration: float
    gain: float


class SnapshotBox:
    """Latest match snapshot, handed from the frame loop to the music thread."""

    def __init__(self):
        self._lock = threading.Lock()
        self._snap = None

    def put(self, snap: MatchSnapshot):
        with self._lock:
            self._snap = snap

    def get(self) -> Optional[MatchSnapshot]:
        with self._lock:
            return self._snap


class MusicScheduler:
    def __init__(self, tracks=TRACKS, volume=MUSIC_VOL_DEFAULT):
        self.tracks = tracks
        self.volume = volume
        self._index = 0
        self._step = 0
        self._lock = threading.Lock()

    @property
    def track_name(self):
        return self.tracks[self._index][0]

    def next_track(self):
        with self._lock:
            self._index = (self._index + 1) % len(self.tracks)
            self._step = 0
            return self.tracks[self._index][0]

    def beat_interval(self, snap: Optional[MatchSnapshot]):
        tempo = snap.tempo if snap is not None else 0.0
        bpm = lerp(96.0, 156.0, max(0.0, min(1.0, tempo / 100.0)))
        return 60.0 / bpm / 2

    def step(self, snap: Optional[MatchSnapshot]) -> Optional[Note]:
        if snap is None or snap.phase is not Phase.RALLYING:
            return None
        with self._lock:
            _, root, pattern = self.tracks[self._index]
            semis = pattern[self._step % len(pattern)]
            self._step += 1
        if semis is None:
            return None
        freq = root * 2 ** (semis / 12.0)
        if snap.combo_tier >= 3:
            freq *= 2
        gain = self.volume * tempo_gain_boost(snap.tempo)
        return Note(freq, self.beat_interval(snap) * 0.85, gain)


class MusicThread(threading.Thread):
    """Plays the scheduler's notes; only ever reads snapshots."""

    def __init__(self, scheduler: MusicScheduler, box: SnapshotBox, board: SoundBoard):
        super().__init__(name="music", daemon=True)
        self.scheduler = scheduler
        self.box = box
        self.board = board
        self._halt = threading.Event()

    def run(self):
        while True:
            snap = self.box.get()
            if self._halt.wait(self.scheduler.beat_interval(snap)):
                return
            note = self.scheduler.step(self.box.get())
            if note is not None:
                self.board.play_note(note)

    def stop(self):
        self._halt.set()
