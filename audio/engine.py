# audio/engine.py
import logging
import time
from typing import Callable, Optional, Set
from audio.synth import MasterBus, ToneGenerator
from audio.voices import VoiceRegistry
from notes.model import EventKind, RecordedEvent
from session import Session

class PlaybackEngine:
    """Hub between input, the voice registry, the tone generator and the recorder.

    play/stop are idempotent per pitch, so key repeat and overlapping mouse and
    keyboard triggers on the same note are harmless.
    """
    def __init__(self, session: Session, tone_generator: ToneGenerator,
                 clock: Callable[[], float] = time.perf_counter,
                 sink: Optional[Callable[[RecordedEvent], None]] = None,
                 bus: Optional[MasterBus] = None,
                 sustain_time: float = 0.5, velocity: int = 60, attack: float = 0.3):
        self.session = session
        self.synth = tone_generator
        self.clock = clock
        self.sink = sink
        self.bus = bus or MasterBus()
        self.sustain_time = sustain_time
        self.velocity = velocity
        self.attack = attack
        self.voices: VoiceRegistry = VoiceRegistry()
        self.highlight_pitches: Set[int] = set()

    def _capture(self, pitch: int, kind: EventKind, now: float):
        if self.sink is None or not self.session.recording:
            return
        self.sink(RecordedEvent(pitch, now - self.session.record_start, kind))

    def play(self, pitch: int, record: bool = True) -> bool:
        if not self.session.in_range(pitch):
            logging.debug("play(%d) ignored: outside %s range %r", pitch,
                          self.session.instrument.name, self.session.note_range)
            return False
        now = self.clock()
        inst = self.session.instrument
        handle, created = self.voices.start_voice(
            pitch,
            lambda: self.synth.begin_tone(inst.program, self.bus, now, pitch,
                                          self.velocity, self.attack))
        if not created:
            return False
        handle.on_steal = lambda: self._drop_stolen(pitch, handle)
        self.highlight_pitches.add(pitch)
        if record:
            self._capture(pitch, EventKind.START, now)
        return True

    def _drop_stolen(self, pitch: int, handle):
        # 音源搶占了這個 voice：同步移出 registry 與高亮
        if self.voices.get(pitch) is not handle:
            return
        self.voices.stop_voice(pitch)
        self.highlight_pitches.discard(pitch)
        self._capture(pitch, EventKind.STOP, self.clock())

    def stop(self, pitch: int, record: bool = True) -> bool:
        handle = self.voices.stop_voice(pitch)
        if handle is None:
            return False
        now = self.clock()
        handle.cancel_scheduled(now)
        handle.ramp_level_to(0.0, now + self.sustain_time)
        self.highlight_pitches.discard(pitch)
        if record:
            self._capture(pitch, EventKind.STOP, now)
        return True

    def stop_all(self, record: bool = False):
        now = self.clock()
        for pitch, handle in self.voices.stop_all():
            handle.cancel_scheduled(now)
            handle.ramp_level_to(0.0, now + self.sustain_time)
            if record:
                self._capture(pitch, EventKind.STOP, now)
        self.highlight_pitches.clear()
