import pytest

from audio.engine import PlaybackEngine
from audio.synth import MasterBus
from notes.instruments import get_instrument
from notes.model import EventKind
from session import Session


@pytest.fixture
def events():
    return []


@pytest.fixture
def engine(clock, tones, events):
    return PlaybackEngine(Session(), tones, clock=clock, sink=events.append,
                          bus=MasterBus(0.6), sustain_time=0.5, velocity=60, attack=0.3)


def test_play_twice_begins_one_tone(engine, tones):
    assert engine.play(60) is True
    assert engine.play(60) is False
    assert len(tones.begun) == 1
    assert len(engine.voices) == 1
    assert 60 in engine.highlight_pitches


def test_begin_tone_parameters(engine, tones, clock):
    clock.t = 2.5
    engine.play(64)
    program, start, pitch, velocity, attack = tones.begun[0]
    assert (program, start, pitch, velocity, attack) == (0, 2.5, 64, 60, 0.3)


def test_begin_tone_uses_current_instrument_program(engine, tones):
    engine.session.instrument = get_instrument("cello")
    engine.play(48)
    assert tones.begun[0][0] == 42


def test_stop_without_play_is_noop(engine, tones):
    assert engine.stop(60) is False
    assert tones.handles == []
    assert len(engine.voices) == 0


def test_stop_releases_with_ramp(engine, tones, clock):
    engine.play(60)
    clock.t = 1.0
    assert engine.stop(60) is True
    h = tones.handles[0]
    assert h.calls == [("cancel", 1.0), ("ramp", 0.0, 1.5)]
    assert 60 not in engine.highlight_pitches
    assert engine.stop(60) is False
    assert len(h.calls) == 2


def test_sustain_time_is_configurable(engine, tones, clock):
    engine.sustain_time = 2.0
    engine.play(60)
    engine.stop(60)
    assert tones.handles[0].calls[-1] == ("ramp", 0.0, 2.0)


def test_replay_after_stop_starts_new_voice(engine, tones):
    engine.play(60)
    engine.stop(60)
    engine.play(60)
    assert len(tones.begun) == 2


def test_events_captured_only_while_recording(engine, events, clock):
    engine.play(60)
    engine.stop(60)
    assert events == []

    engine.session.recording = True
    engine.session.record_start = 10.0
    clock.t = 10.1
    engine.play(64)
    clock.t = 10.45
    engine.stop(64)
    assert [(e.midi, e.kind) for e in events] == [(64, EventKind.START), (64, EventKind.STOP)]
    assert events[0].offset == pytest.approx(0.10, abs=1e-3)
    assert events[1].offset == pytest.approx(0.45, abs=1e-3)


def test_record_false_is_not_captured(engine, events):
    engine.session.recording = True
    engine.play(60, record=False)
    engine.stop(60, record=False)
    assert events == []


def test_duplicates_are_not_captured(engine, events):
    engine.session.recording = True
    engine.play(60)
    engine.play(60)
    engine.stop(60)
    engine.stop(60)
    assert [e.kind for e in events] == [EventKind.START, EventKind.STOP]


def test_out_of_range_notes_are_ignored(engine, tones):
    engine.session.instrument = get_instrument("violin")  # 55..103
    assert engine.play(40) is False
    assert engine.play(127) is False
    assert tones.begun == []
    assert engine.play(55) is True


def test_stop_all_releases_everything(engine, tones, events):
    engine.session.recording = True
    for p in (60, 64, 67):
        engine.play(p)
    events.clear()
    engine.stop_all()
    assert len(engine.voices) == 0
    assert engine.highlight_pitches == set()
    assert all(h.calls[-1][0] == "ramp" for h in tones.handles)
    assert events == []
