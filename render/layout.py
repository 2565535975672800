# render/layout.py
import logging
from typing import List, Optional
from notes.model import Instrument, KeySlot, WHITE_SET

WHITE_KEY_W = 40.0
# 黑鍵相對於該八度 C 所在位置的偏移（以白鍵寬為單位）
BLACK_OFFSETS = {1: 0.65, 3: 1.65, 6: 3.65, 8: 4.65, 10: 5.65}
# 同一八度中，黑鍵之前的白鍵數
NATURALS_BEFORE = {1: 1, 3: 2, 6: 4, 8: 5, 10: 6}

def generate_layout(inst: Instrument, key_width: float = WHITE_KEY_W,
                    lo: Optional[int] = None, hi: Optional[int] = None) -> List[KeySlot]:
    """Ascending list of key slots for the instrument's range (or [lo, hi])."""
    first = inst.min_midi if lo is None else lo
    last = inst.max_midi if hi is None else hi
    out: List[KeySlot] = []
    white_index = 0
    for p in range(first, last + 1):
        pc = p % 12
        if pc in WHITE_SET:
            out.append(KeySlot(p, white_index * key_width, "white"))
            white_index += 1
        else:
            group_start = white_index - NATURALS_BEFORE[pc]
            out.append(KeySlot(p, (group_start + BLACK_OFFSETS[pc]) * key_width, "black"))
    logging.debug("Keyboard layout rebuilt: %s range=[%d,%d], keys=%d, white=%d",
                  inst.name, first, last, len(out), white_index)
    return out

def layout_width(layout: List[KeySlot], key_width: float = WHITE_KEY_W) -> float:
    return sum(1 for k in layout if not k.is_black) * key_width

def key_at(layout: List[KeySlot], x: float, y: float, key_width: float = WHITE_KEY_W,
           white_h: float = 200, black_h: float = 120) -> Optional[int]:
    """Hit test in keyboard-local coordinates; black keys sit on top."""
    if y < 0 or y > white_h:
        return None
    if y <= black_h:
        for k in layout:
            if k.is_black and k.x <= x < k.x + k.width(key_width):
                return k.midi
    for k in layout:
        if not k.is_black and k.x <= x < k.x + key_width:
            return k.midi
    return None
