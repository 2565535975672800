# audio/synth.py
import logging
from typing import Callable, List, Optional
import pygame.midi

DRUM_CH = 9  # GM: ch10(索引9)為打擊，避免使用
CC_VOLUME = 7

class MasterBus:
    """Output stage every voice is routed through; scales the final level."""
    def __init__(self, level: float = 0.6):
        self.level = max(0.0, min(float(level), 1.0))

class MidiVoice:
    """
    Sound handle of one sounding note. The level follows a piecewise-linear
    envelope on the audio clock and is sent to the synth as channel volume:
    - cancel_scheduled(t) freezes the envelope at its value at t
    - ramp_level_to(v, t) ramps linearly from the last anchor to v at t
    - advance(now) pushes the level out; False once the note has ended
    """
    def __init__(self, out, channel: int, pitch: int, bus: MasterBus,
                 start_time: float, attack: float = 0.0):
        self.out = out
        self.channel = channel
        self.pitch = pitch
        self.bus = bus
        self.finished = False
        self.on_steal: Optional[Callable[[], None]] = None
        self._sent: Optional[int] = None
        self._anchor_t = start_time
        self._anchor_v = 0.0 if attack > 0 else 1.0
        self._ramp = (start_time, 0.0, start_time + attack, 1.0) if attack > 0 else None

    def level_at(self, t: float) -> float:
        if self._ramp is None:
            return self._anchor_v
        t0, v0, t1, v1 = self._ramp
        if t >= t1: return v1
        if t <= t0: return v0
        return v0 + (v1 - v0) * (t - t0) / (t1 - t0)

    def cancel_scheduled(self, at_time: float):
        self._anchor_v = self.level_at(at_time)
        self._anchor_t = at_time
        self._ramp = None

    def ramp_level_to(self, value: float, at_time: float):
        value = max(0.0, min(float(value), 1.0))
        if at_time <= self._anchor_t:
            self._anchor_v = value; self._anchor_t = at_time; self._ramp = None
            return
        self._ramp = (self._anchor_t, self._anchor_v, at_time, value)

    def advance(self, now: float) -> bool:
        if self.finished:
            return False
        v = self.level_at(now)
        if self._ramp is not None and now >= self._ramp[2]:
            self._anchor_t, self._anchor_v = self._ramp[2], self._ramp[3]
            self._ramp = None
        self._send_volume(v)
        if self._ramp is None and self._anchor_v <= 0.0:
            self.kill()
            return False
        return True

    def kill(self):
        if self.finished: return
        self.finished = True
        if self.out is None: return
        try: self.out.note_off(self.pitch, 0, self.channel)
        except Exception: logging.debug("note_off failed: ch=%d pitch=%d", self.channel, self.pitch, exc_info=True)

    def steal(self):
        """Cut off by the generator to free its channel; tells the owner."""
        self.kill()
        if self.on_steal is not None:
            self.on_steal()

    def _send_volume(self, v: float):
        cc = max(0, min(127, int(round(127 * self.bus.level * v))))
        if cc == self._sent or self.out is None:
            return
        try:
            self.out.write_short(0xB0 | self.channel, CC_VOLUME, cc)
            self._sent = cc
        except Exception:
            logging.debug("CC7 write failed: ch=%d", self.channel, exc_info=True)

class ToneGenerator:
    """Fire-and-forget note source. Subclasses decide where the sound goes."""
    def __init__(self):
        self.voices: List[MidiVoice] = []

    def begin_tone(self, program: int, destination: MasterBus, start_time: float,
                   pitch: int, velocity: int, attack: float) -> MidiVoice:
        raise NotImplementedError

    def update(self, now: float):
        """Advance envelopes; drop voices whose release has finished."""
        self.voices = [v for v in self.voices if v.advance(now)]

    def close(self):
        for v in self.voices:
            v.kill()
        self.voices.clear()

class SilentToneGenerator(ToneGenerator):
    """Used when no MIDI output is available: envelopes run, nothing sounds."""
    def begin_tone(self, program, destination, start_time, pitch, velocity, attack):
        v = MidiVoice(None, 0, pitch, destination, start_time, attack)
        self.voices.append(v)
        return v

class MidiToneGenerator(ToneGenerator):
    """
    系統 MIDI 音源：每個 voice 佔用一個非打擊 channel（取第一個空閒的），
    以 CC7 表達該 voice 的音量包絡。15 個 channel 全滿時才搶占最舊的 voice。
    """
    def __init__(self, out):
        super().__init__()
        self.out = out
        self.channels = [ch for ch in range(16) if ch != DRUM_CH]

    @classmethod
    def open(cls, device_id: Optional[int] = None) -> Optional["MidiToneGenerator"]:
        try:
            pygame.midi.init()
            dev = pygame.midi.get_default_output_id() if device_id is None else device_id
            if dev == -1:
                logging.warning("No MIDI output device found")
                return None
            logging.info("Using system MIDI out (device %d)", dev)
            return cls(pygame.midi.Output(dev))
        except Exception:
            logging.exception("MIDI init failed")
            return None

    def _alloc_channel(self) -> int:
        busy = {v.channel for v in self.voices if not v.finished}
        for ch in self.channels:
            if ch not in busy:
                return ch
        oldest = next(v for v in self.voices if not v.finished)
        logging.debug("Voice steal: ch=%d pitch=%d", oldest.channel, oldest.pitch)
        oldest.steal()
        return oldest.channel

    def begin_tone(self, program, destination, start_time, pitch, velocity, attack):
        ch = self._alloc_channel()
        voice = MidiVoice(self.out, ch, int(pitch), destination, start_time, attack)
        try:
            self.out.set_instrument(int(program), ch)
            voice.advance(start_time)
            self.out.note_on(int(pitch), max(1, min(int(velocity), 127)), ch)
        except Exception:
            logging.debug("note_on failed: ch=%d pitch=%d", ch, pitch, exc_info=True)
        self.voices = [v for v in self.voices if not v.finished]
        self.voices.append(voice)
        return voice

    def close(self):
        super().close()
        try:
            if self.out:
                self.out.close()
        except Exception:
            logging.debug("MIDI output close failed", exc_info=True)
        pygame.midi.quit()
        self.out = None
