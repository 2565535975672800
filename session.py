# session.py
from dataclasses import dataclass, field
from typing import Tuple
from notes.model import Instrument
from notes.instruments import get_instrument, next_instrument, visible_range

@dataclass
class Session:
    """Per-keyboard mutable state shared by the engine and the recorder."""
    instrument: Instrument = field(default_factory=lambda: get_instrument("piano"))
    octave_offset: int = 0
    compact: bool = False
    recording: bool = False
    record_start: float = 0.0
    compact_lo: int = 48
    compact_hi: int = 84

    @property
    def note_range(self) -> Tuple[int, int]:
        return visible_range(self.instrument, self.compact, self.compact_lo, self.compact_hi)

    def in_range(self, pitch: int) -> bool:
        lo, hi = self.note_range
        return lo <= pitch <= hi

    def transpose(self, octaves: int) -> int:
        self.octave_offset += octaves
        return self.octave_offset

    def cycle_instrument(self) -> Instrument:
        self.instrument = next_instrument(self.instrument.name)
        return self.instrument

    def toggle_compact(self) -> bool:
        self.compact = not self.compact
        return self.compact
