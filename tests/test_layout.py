import pytest

from notes.instruments import INSTRUMENTS
from notes.model import Instrument
from render.layout import generate_layout, key_at, layout_width


def test_small_range_positions():
    layout = generate_layout(Instrument("test", 0, 60, 63), key_width=1.0)
    assert [(k.midi, k.kind) for k in layout] == [
        (60, "white"), (61, "black"), (62, "white"), (63, "black"),
    ]
    xs = {k.midi: k.x for k in layout}
    assert xs[60] == pytest.approx(0.0)
    assert xs[61] == pytest.approx(0.65)
    assert xs[62] == pytest.approx(1.0)
    assert xs[63] == pytest.approx(1.65)


def test_positions_scale_with_key_width():
    layout = generate_layout(Instrument("test", 0, 60, 63), key_width=40.0)
    assert [k.x for k in layout] == pytest.approx([0.0, 26.0, 40.0, 66.0])


def test_full_octave_black_offsets():
    layout = generate_layout(Instrument("test", 0, 60, 71), key_width=1.0)
    blacks = {k.midi: k.x for k in layout if k.is_black}
    assert blacks == pytest.approx({61: 0.65, 63: 1.65, 66: 3.65, 68: 4.65, 70: 5.65})
    whites = [k.x for k in layout if not k.is_black]
    assert whites == [0, 1, 2, 3, 4, 5, 6]


def test_second_octave_continues_counter():
    layout = generate_layout(Instrument("test", 0, 60, 73), key_width=1.0)
    xs = {k.midi: k.x for k in layout}
    assert xs[72] == pytest.approx(7.0)
    assert xs[73] == pytest.approx(7.65)


def test_range_starting_on_a_places_black_key_after_first_white():
    layout = generate_layout(INSTRUMENTS["piano"], key_width=1.0)
    xs = {k.midi: k.x for k in layout}
    assert xs[21] == 0
    assert xs[22] == pytest.approx(0.65)
    assert xs[23] == 1
    assert xs[24] == 2


def test_piano_has_88_keys_in_ascending_order():
    layout = generate_layout(INSTRUMENTS["piano"])
    assert len(layout) == 88
    assert [k.midi for k in layout] == list(range(21, 109))
    assert sum(1 for k in layout if not k.is_black) == 52
    assert layout_width(layout, 40.0) == 52 * 40.0


def test_lo_hi_narrow_the_range():
    layout = generate_layout(INSTRUMENTS["piano"], lo=48, hi=84)
    assert layout[0].midi == 48 and layout[-1].midi == 84
    assert layout[0].x == 0


def test_key_at_prefers_black_keys():
    layout = generate_layout(Instrument("test", 0, 60, 64), key_width=40.0)
    # 61 spans 26..50 in the upper part
    assert key_at(layout, 30, 10, 40.0, 200, 120) == 61
    # below the black keys the same x hits the white key
    assert key_at(layout, 30, 150, 40.0, 200, 120) == 60
    assert key_at(layout, 45, 150, 40.0, 200, 120) == 62
    assert key_at(layout, 5, 10, 40.0, 200, 120) == 60


def test_key_at_outside_returns_none():
    layout = generate_layout(Instrument("test", 0, 60, 64), key_width=40.0)
    assert key_at(layout, 10, -1) is None
    assert key_at(layout, 10, 500) is None
    assert key_at(layout, 1000, 150) is None
