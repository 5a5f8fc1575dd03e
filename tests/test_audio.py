"""Tests for sound effects, the music scheduler and snapshot hand-off (no mixer needed)."""

import pygame
import pytest

from audio import (
    SAMPLE_RATE, TRACKS, MusicScheduler, Note, SnapshotBox, SoundBoard, render_tone, to_channels,
)
from core import Event, EventKind, snapshot
from match import toggle_pause


def test_no_notes_without_a_rally(make_match):
    scheduler = MusicScheduler()
    assert scheduler.step(None) is None
    assert scheduler.step(snapshot(make_match(started=False))) is None


def test_first_note_is_track_root(match):
    scheduler = MusicScheduler()
    note = scheduler.step(snapshot(match))
    assert note.frequency == pytest.approx(TRACKS[0][1])
    assert note.duration > 0


def test_rests_produce_no_note(match):
    scheduler = MusicScheduler()
    for _ in range(4):
        scheduler.next_track()
    assert scheduler.track_name == "Arcade Pulse"
    snap = snapshot(match)
    assert scheduler.step(snap) is not None
    assert scheduler.step(snap) is None


def test_tempo_speeds_up_and_louder(match):
    scheduler = MusicScheduler()
    calm = snapshot(match)
    match.tempo = 100
    hot = snapshot(match)
    assert scheduler.beat_interval(hot) < scheduler.beat_interval(calm)
    assert scheduler.step(hot).gain > scheduler.step(calm).gain


def test_paused_match_is_silent(match):
    toggle_pause(match, 1.0)
    assert MusicScheduler().step(snapshot(match)) is None


def test_next_track_cycles():
    scheduler = MusicScheduler()
    names = [scheduler.next_track() for _ in range(len(TRACKS))]
    assert names[-1] == TRACKS[0][0]
    assert len(set(names)) == len(TRACKS)


def test_snapshot_box_hands_over_latest(match):
    box = SnapshotBox()
    assert box.get() is None
    first = snapshot(match)
    box.put(first)
    match.tempo = 40
    second = snapshot(match)
    box.put(second)
    assert box.get() is second
    assert first.tempo == 0


def test_render_tone_length_and_range():
    pcm = render_tone(440.0, 0.1, 1.0)
    assert len(pcm) == int(SAMPLE_RATE * 0.1)
    assert max(pcm) <= 32767 and min(pcm) >= -32767
    assert pcm[0] == 0
    assert len(to_channels(pcm, 2)) == 2 * len(pcm)


class BrokenSound:
    def __init__(self, buffer=None):
        self.buffer = buffer

    def set_volume(self, value):
        pass

    def play(self):
        raise pygame.error("device went away")


def raise_mixer_error(*args, **kwargs):
    raise pygame.error("no audio device")


@pytest.fixture
def silent_board(monkeypatch):
    monkeypatch.setattr(pygame.mixer, "get_init", lambda: None)
    monkeypatch.setattr(pygame.mixer, "init", raise_mixer_error)
    return SoundBoard()


@pytest.fixture
def flaky_board(monkeypatch):
    monkeypatch.setattr(pygame.mixer, "get_init", lambda: (SAMPLE_RATE, -16, 1))
    monkeypatch.setattr(pygame.mixer, "Sound", BrokenSound)
    return SoundBoard()


GOAL_EVENTS = [Event(EventKind.PADDLE_HIT, 0), Event(EventKind.GOAL, 1), Event(EventKind.MATCH_END, 1)]


class TestSoundBoardWithoutMixer:
    def test_reports_unavailable(self, silent_board):
        assert not silent_board.available

    def test_calls_are_no_ops(self, silent_board):
        assert silent_board.play(EventKind.SLAP) is False
        assert silent_board.play_note(Note(440.0, 0.1, 0.5)) is False
        silent_board.handle(GOAL_EVENTS, 80.0)


class TestSoundBoardWhenPlaybackFails:
    def test_effects_still_built(self, flaky_board):
        assert flaky_board.available

    def test_play_swallows_device_errors(self, flaky_board):
        assert flaky_board.play(EventKind.PADDLE_HIT) is False
        assert flaky_board.play_note(Note(220.0, 0.1, 0.5)) is False

    def test_handle_completes(self, flaky_board):
        flaky_board.handle(GOAL_EVENTS, 10.0)

    def test_unknown_kind_is_ignored(self, flaky_board):
        assert flaky_board.play(EventKind.SERVE) is False
