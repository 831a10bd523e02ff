import logging as lg
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

from chip8.runtime.peripheral import Key


# Classic COSMAC VIP keypad laid over the left of a QWERTY keyboard
DEFAULT_KEYMAP = {
    '1': Key.K1, '2': Key.K2, '3': Key.K3, '4': Key.KC,
    'q': Key.K4, 'w': Key.K5, 'e': Key.K6, 'r': Key.KD,
    'a': Key.K7, 's': Key.K8, 'd': Key.K9, 'f': Key.KE,
    'z': Key.KA, 'x': Key.K0, 'c': Key.KB, 'v': Key.KF,
}


@dataclass
class Settings:
    scale: int = 15
    cycles_per_frame: int = 10
    frame_rate: int = 60
    foreground: tuple[int, int, int] = (255, 255, 255)
    background: tuple[int, int, int] = (0, 0, 0)
    seed: int | None = None
    keymap: dict[str, Key] = field(default_factory=lambda: dict(DEFAULT_KEYMAP))


class ConfigError(Exception):
    pass


def parse_key(name: str) -> Key:
    try:
        return Key(int(name, 16))
    except ValueError:
        raise ConfigError(f'Invalid key {name!r}, expected a hex digit 0-F')


def is_channel(c) -> bool:
    return isinstance(c, int) and not isinstance(c, bool) and 0 <= c <= 255


def parse_colour(value) -> tuple[int, int, int]:
    if not isinstance(value, list) or len(value) != 3 or not all(is_channel(c) for c in value):
        raise ConfigError(f'Invalid colour {value!r}')

    return (value[0], value[1], value[2])


def positive(section: dict, name: str, default: int) -> int:
    value = section.get(name, default)

    if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
        raise ConfigError(f'{name} must be a positive integer')

    return value


def parse_settings(text: str) -> Settings:
    '''
    [display]
    scale = 15
    foreground = [255, 255, 255]

    [cpu]
    cycles_per_frame = 10
    frame_rate = 60
    seed = 42

    [keymap]
    x = "0"
    '''
    try:
        config = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f'Malformed configuration: {e}')

    settings = Settings()

    display = config.get('display', {})
    settings.scale = positive(display, 'scale', settings.scale)

    if 'foreground' in display:
        settings.foreground = parse_colour(display['foreground'])

    if 'background' in display:
        settings.background = parse_colour(display['background'])

    cpu = config.get('cpu', {})
    settings.cycles_per_frame = positive(cpu, 'cycles_per_frame', settings.cycles_per_frame)
    settings.frame_rate = positive(cpu, 'frame_rate', settings.frame_rate)
    settings.seed = cpu.get('seed')

    if 'keymap' in config:
        settings.keymap = {
            host_key.lower(): parse_key(str(chip_key))
            for host_key, chip_key in config['keymap'].items()
        }

    return settings


def load_settings(path: Path | None) -> Settings:
    if path is None:
        return Settings()

    lg.debug(f'Loading settings from {path}')
    return parse_settings(path.read_text())
