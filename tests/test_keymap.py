from input.keymap import BASE_MIDI, KEY_LAYOUT, key_to_midi


def test_first_two_keys_are_c4_and_c_sharp():
    assert key_to_midi("a", 0) == 60
    assert key_to_midi("w", 0) == 61


def test_whole_layout_is_chromatic_from_base():
    got = [key_to_midi(ch) for ch in KEY_LAYOUT]
    assert got == list(range(BASE_MIDI, BASE_MIDI + len(KEY_LAYOUT)))
    assert key_to_midi(";") == 76
    assert key_to_midi("'") == 77


def test_unmapped_symbols_return_none():
    for sym in ["q", "z", "A", "", "space", "left shift"]:
        assert key_to_midi(sym) is None


def test_octave_offset_shifts_by_twelve():
    for sym in "awsedf":
        base = key_to_midi(sym, 0)
        assert key_to_midi(sym, 1) == base + 12
        assert key_to_midi(sym, -1) == base - 12
        assert key_to_midi(sym, 3) == base + 36


def test_mapping_is_pure():
    assert [key_to_midi("k", 2) for _ in range(5)] == [84] * 5


def test_no_clamping():
    assert key_to_midi("a", 10) == 180
    assert key_to_midi("a", -6) == -12


def test_custom_layout_and_base():
    assert key_to_midi("b", 0, layout="abc", base_midi=48) == 49
    assert key_to_midi("a", 0, layout="abc", base_midi=48) == 48
