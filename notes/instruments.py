# ========================= notes/instruments.py =========================
from typing import Dict, Tuple
from notes.model import Instrument

# GM program 0/40/41/42 = Acoustic Grand / Violin / Viola / Cello
INSTRUMENTS: Dict[str, Instrument] = {
    "piano":  Instrument("piano", 0, 21, 108),
    "violin": Instrument("violin", 40, 55, 103),
    "viola":  Instrument("viola", 41, 48, 91),
    "cello":  Instrument("cello", 42, 36, 76),
}

def get_instrument(name: str) -> Instrument:
    try:
        return INSTRUMENTS[name]
    except KeyError:
        raise ValueError(f"Unknown instrument: {name}")

def next_instrument(name: str) -> Instrument:
    """Catalog order, wrapping around after the last entry."""
    names = list(INSTRUMENTS)
    idx = names.index(name) if name in names else -1
    return INSTRUMENTS[names[(idx + 1) % len(names)]]

def visible_range(inst: Instrument, compact: bool = False,
                  compact_lo: int = 48, compact_hi: int = 84) -> Tuple[int, int]:
    if not compact:
        return inst.min_midi, inst.max_midi
    lo, hi = max(inst.min_midi, compact_lo), min(inst.max_midi, compact_hi)
    if lo > hi:
        # 樂器音域與 compact 視窗不重疊時退回完整音域
        return inst.min_midi, inst.max_midi
    return lo, hi
