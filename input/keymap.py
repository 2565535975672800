# ========================= input/keymap.py =========================
import pygame
from typing import Optional

KEY_LAYOUT = "awsedftgyhujkolp;'"
BASE_MIDI = 60  # C4

def key_to_midi(symbol: str, octave_offset: int = 0,
                layout: str = KEY_LAYOUT, base_midi: int = BASE_MIDI) -> Optional[int]:
    """Symbol position in the layout -> MIDI note; None when unmapped.

    No clamping here: the playback engine decides what is playable.
    """
    if not symbol or len(symbol) != 1:
        return None
    idx = layout.find(symbol)
    if idx == -1:
        return None
    return base_midi + idx + octave_offset * 12

def keycode_to_name(k: int) -> str:
    try:
        return pygame.key.name(k)
    except Exception:
        return str(k)
