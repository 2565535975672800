# ========================= config.py =========================
from dataclasses import dataclass, field
from typing import Optional

@dataclass
class KeyboardConfig:
    key_layout: str = "awsedftgyhujkolp;'"  # 每個位置 = 一個半音
    base_midi: int = 60                     # C4
    octave_down_key: str = "z"
    octave_up_key: str = "x"
    start_octave: int = 0

@dataclass
class RenderConfig:
    window_w: int = 1600
    window_h: int = 360
    white_key_w: float = 40.0
    white_key_h: int = 200
    black_key_h: int = 120
    compact_lo: int = 48     # C3
    compact_hi: int = 84     # C6

@dataclass
class AudioConfig:
    instrument: str = "piano"
    sustain_time: float = 0.5   # release ramp (seconds)
    velocity: int = 60
    attack: float = 0.3
    master_level: float = 0.6
    device_id: Optional[int] = None  # None = system default output

@dataclass
class AppConfig:
    keyboard: KeyboardConfig = field(default_factory=KeyboardConfig)
    render: RenderConfig = field(default_factory=RenderConfig)
    audio: AudioConfig = field(default_factory=AudioConfig)
    compact: bool = False
    cancel_on_arm: bool = False
