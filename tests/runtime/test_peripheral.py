import pytest

from chip8.runtime.peripheral import Key, Keypad, Timers, Display
from chip8.runtime.rng import SequenceRandom, DefaultRandom


def test_timers_floor_at_zero():
    timers = Timers()
    timers.delay = 2
    timers.sound = 1

    timers.tick()
    assert (timers.delay, timers.sound) == (1, 0)
    assert not timers.sound_active

    timers.tick()
    timers.tick()
    assert (timers.delay, timers.sound) == (0, 0)


def test_timers_are_independent():
    timers = Timers()
    timers.sound = 3

    timers.tick()

    assert timers.delay == 0
    assert timers.sound == 2
    assert timers.sound_active


def test_keypad_press_release():
    keypad = Keypad()
    assert keypad.first_pressed() is None

    keypad.press(Key.KB)
    keypad.press(Key.K4)
    assert keypad.is_pressed(0xB)
    assert keypad.first_pressed() == 4

    keypad.release(Key.K4)
    keypad.release(Key.K4)
    assert not keypad.is_pressed(4)
    assert keypad.first_pressed() == 0xB


def test_keypad_index_uses_low_nibble():
    keypad = Keypad()
    keypad.press(Key.KB)

    assert keypad.is_pressed(0x1B)
    assert keypad.is_pressed(0xFB)
    assert not keypad.is_pressed(0x10)


def test_keypad_rejects_unknown_key():
    with pytest.raises(ValueError):
        Keypad().press(16)


def test_display_toggle_reports_collision():
    display = Display()

    assert display.toggle(3, 4) is False
    assert display.get(3, 4)
    assert display.toggle(3, 4) is True
    assert not display.get(3, 4)


def test_display_wraps_and_snapshots():
    display = Display()
    display.toggle(63, 31)

    assert display.get(-1, -1)
    assert display.get(127, 63)

    pixels = display.snapshot()
    assert len(pixels) == 64 * 32
    assert pixels[-1]
    assert sum(pixels) == 1


def test_sequence_random_cycles():
    rng = SequenceRandom([1, 0x102])
    assert [rng.next_byte() for _ in range(3)] == [1, 2, 1]


def test_default_random_seeded():
    a = DefaultRandom(7)
    b = DefaultRandom(7)
    values = [a.next_byte() for _ in range(16)]

    assert values == [b.next_byte() for _ in range(16)]
    assert all(0 <= v <= 0xFF for v in values)
