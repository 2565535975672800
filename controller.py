# controller.py
import logging
import time
from typing import Callable, List, Optional
from config import AppConfig
from audio.engine import PlaybackEngine
from audio.synth import MasterBus, SilentToneGenerator, ToneGenerator
from input.keymap import key_to_midi
from notes.instruments import get_instrument
from notes.model import KeySlot
from render.layout import generate_layout
from session import Session
from timeline.recorder import Recorder
from timeline.scheduler import Scheduler

class PianoController:
    """Input and UI-button actions for one keyboard instance (no pygame needed)."""
    def __init__(self, cfg: AppConfig, tone_generator: Optional[ToneGenerator] = None,
                 clock: Callable[[], float] = time.perf_counter):
        self.cfg = cfg
        self.clock = clock
        self.synth = tone_generator or SilentToneGenerator()
        self.session = Session(
            instrument=get_instrument(cfg.audio.instrument),
            octave_offset=cfg.keyboard.start_octave,
            compact=cfg.compact,
            compact_lo=cfg.render.compact_lo,
            compact_hi=cfg.render.compact_hi,
        )
        self.scheduler = Scheduler(clock)
        self.recorder = Recorder(self.session, self.scheduler, cancel_on_arm=cfg.cancel_on_arm)
        self.engine = PlaybackEngine(
            self.session, self.synth, clock=clock,
            bus=MasterBus(cfg.audio.master_level),
            sustain_time=cfg.audio.sustain_time,
            velocity=cfg.audio.velocity,
            attack=cfg.audio.attack,
        )
        self.recorder.attach(self.engine)
        self.layout: List[KeySlot] = []
        self.rebuild_layout()

    # ---------- layout ----------
    def rebuild_layout(self) -> List[KeySlot]:
        lo, hi = self.session.note_range
        self.layout = generate_layout(self.session.instrument, self.cfg.render.white_key_w, lo, hi)
        return self.layout

    # ---------- input ----------
    def map_key(self, symbol: str) -> Optional[int]:
        kb = self.cfg.keyboard
        return key_to_midi(symbol, self.session.octave_offset, kb.key_layout, kb.base_midi)

    def key_down(self, symbol: str, repeat: bool = False) -> Optional[int]:
        if repeat:
            return None
        kb = self.cfg.keyboard
        if symbol == kb.octave_down_key:
            self.session.transpose(-1)
        elif symbol == kb.octave_up_key:
            self.session.transpose(+1)
        pitch = self.map_key(symbol)
        if pitch is not None:
            self.engine.play(pitch)
        return pitch

    def key_up(self, symbol: str) -> Optional[int]:
        pitch = self.map_key(symbol)
        if pitch is not None:
            self.engine.stop(pitch)
        return pitch

    def pointer_down(self, pitch: Optional[int]):
        if pitch is not None:
            self.engine.play(pitch)

    def pointer_up(self, pitch: Optional[int]):
        if pitch is not None:
            self.engine.stop(pitch)

    # ---------- buttons ----------
    def toggle_record(self) -> bool:
        return self.recorder.toggle()

    def trigger_playback(self):
        return self.recorder.play()

    def stop_playback(self) -> int:
        return self.recorder.stop_playback()

    def cycle_instrument(self):
        self.engine.stop_all(record=True)
        inst = self.session.cycle_instrument()
        logging.info("Instrument -> %s [%d,%d]", inst.name, inst.min_midi, inst.max_midi)
        self.rebuild_layout()
        return inst

    def cycle_range(self) -> bool:
        self.engine.stop_all(record=True)
        compact = self.session.toggle_compact()
        logging.info("Range -> %s %r", "Compact" if compact else "Full", self.session.note_range)
        self.rebuild_layout()
        return compact

    # ---------- per-frame ----------
    def update(self):
        now = self.clock()
        self.scheduler.run_due(now)
        self.synth.update(now)

    def shutdown(self):
        self.recorder.stop_playback()
        self.scheduler.cancel_all()
        self.engine.stop_all()
        self.synth.close()

    def status_fields(self) -> List[str]:
        s = self.session
        lo, hi = s.note_range
        return [
            f"MODE: {s.instrument.name}",
            f"RANGE: {'Compact' if s.compact else 'Full'} [{lo}-{hi}]",
            f"OCT: {s.octave_offset:+d}",
            f"REC: {'ON' if s.recording else 'OFF'}",
            f"TAKE: {len(self.recorder.events)} ev",
            f"VOICES: {len(self.engine.voices)}",
        ]
