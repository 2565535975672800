import pytest

from config import AppConfig
from controller import PianoController


class FakeClock:
    def __init__(self, t: float = 0.0):
        self.t = t

    def __call__(self) -> float:
        return self.t

    def advance(self, dt: float) -> float:
        self.t += dt
        return self.t


class FakeHandle:
    def __init__(self, pitch):
        self.pitch = pitch
        self.calls = []

    def cancel_scheduled(self, at_time):
        self.calls.append(("cancel", at_time))

    def ramp_level_to(self, value, at_time):
        self.calls.append(("ramp", value, at_time))


class FakeToneGenerator:
    """Records begin_tone calls instead of making sound."""

    def __init__(self):
        self.begun = []
        self.handles = []
        self.updates = []
        self.closed = False

    def begin_tone(self, program, destination, start_time, pitch, velocity, attack):
        self.begun.append((program, start_time, pitch, velocity, attack))
        h = FakeHandle(pitch)
        self.handles.append(h)
        return h

    def update(self, now):
        self.updates.append(now)

    def close(self):
        self.closed = True


class FakeMidiOut:
    def __init__(self):
        self.sent = []

    def set_instrument(self, program, channel):
        self.sent.append(("program", program, channel))

    def note_on(self, note, velocity, channel):
        self.sent.append(("on", note, velocity, channel))

    def note_off(self, note, velocity, channel):
        self.sent.append(("off", note, channel))

    def write_short(self, status, data1, data2):
        self.sent.append(("cc", status, data1, data2))

    def close(self):
        self.sent.append(("close",))


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def tones():
    return FakeToneGenerator()


@pytest.fixture
def ctrl(clock, tones):
    return PianoController(AppConfig(), tone_generator=tones, clock=clock)
