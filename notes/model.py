# notes/model.py
from dataclasses import dataclass
from enum import Enum

WHITE_SET = {0, 2, 4, 5, 7, 9, 11}

@dataclass(frozen=True)
class Instrument:
    name: str
    program: int    # General MIDI program number
    min_midi: int
    max_midi: int

class EventKind(str, Enum):
    START = "start"
    STOP = "stop"

@dataclass(frozen=True)
class RecordedEvent:
    midi: int       # MIDI note number
    offset: float   # seconds since the recorder was armed
    kind: EventKind

@dataclass(frozen=True)
class KeySlot:
    midi: int
    x: float        # pixels from the left edge of the keyboard
    kind: str       # "white" | "black"

    @property
    def is_black(self) -> bool:
        return self.kind == "black"

    def width(self, white_w: float) -> float:
        return white_w * 0.6 if self.is_black else white_w
