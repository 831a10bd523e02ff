import sys
import traceback
import logging as lg
from pathlib import Path

import click
import pygame

from chip8.common.hwconf import DISPLAY_WIDTH, DISPLAY_HEIGHT
from chip8.runtime.config import Settings, ConfigError, load_settings
from chip8.runtime.faults import MachineFault
from chip8.runtime.machine import Machine
from chip8.runtime.peripheral import Key
from chip8.runtime.rng import DefaultRandom


EXIT_QUIT = 0
EXIT_FAULT = 2
EXIT_KEYBOARD = 3
EXIT_EXEC_ERROR = 100


def run_frame(machine: Machine, cycles_per_frame: int):
    for _ in range(cycles_per_frame):
        machine.step()

    machine.tick_timers()


def run_frames(machine: Machine, frames: int, cycles_per_frame: int):
    for _ in range(frames):
        run_frame(machine, cycles_per_frame)


def resolve_keymap(keymap: dict[str, Key]) -> dict[int, Key]:
    ''' Translate host key names into pygame key codes '''
    codes = {}

    for name, key in keymap.items():
        try:
            codes[pygame.key.key_code(name)] = key
        except ValueError:
            raise ConfigError(f'Unknown host key {name!r}')

    return codes


class Screen:
    def __init__(self, settings: Settings):
        self.settings = settings
        # resolved before the window opens
        self.keymap = resolve_keymap(settings.keymap)
        self.window = pygame.display.set_mode(
            (DISPLAY_WIDTH * settings.scale, DISPLAY_HEIGHT * settings.scale)
        )
        pygame.display.set_caption('CHIP-8')

    def draw(self, pixels: tuple[bool, ...]):
        scale = self.settings.scale
        self.window.fill(self.settings.background)

        for i, lit in enumerate(pixels):
            if lit:
                x, y = i % DISPLAY_WIDTH, i // DISPLAY_WIDTH
                rect = pygame.Rect(x * scale, y * scale, scale, scale)
                self.window.fill(self.settings.foreground, rect)

        pygame.display.flip()

    def handle_events(self, machine: Machine) -> bool:
        ''' Feed key events to the machine, False once the user quits '''
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                return False

            if event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                return False

            if event.type in (pygame.KEYDOWN, pygame.KEYUP) and event.key in self.keymap:
                key = self.keymap[event.key]

                if event.type == pygame.KEYDOWN:
                    machine.press_key(key)
                else:
                    machine.release_key(key)

        return True


def execute(rom: bytes, settings: Settings):
    machine = Machine(DefaultRandom(settings.seed))
    machine.load(rom)

    pygame.init()

    try:
        screen = Screen(settings)
        clock = pygame.time.Clock()

        while screen.handle_events(machine):
            run_frame(machine, settings.cycles_per_frame)
            screen.draw(machine.read_display())
            clock.tick(settings.frame_rate)

    except MachineFault:
        machine.cpu.debug_dump()
        raise

    finally:
        pygame.quit()


@click.command()
@click.option('-v', '--verbose', is_flag=True, help='Sets logging level to debug')
@click.option('-c', '--config', 'config_path', type=Path, help='TOML settings file')
@click.argument('rom_filename', type=Path)
def run(verbose: bool, config_path: Path | None, rom_filename: Path):
    lg.basicConfig(level=lg.DEBUG if verbose else lg.INFO)
    lg.info("CHIP8")

    try:
        settings = load_settings(config_path)
        rom = rom_filename.read_bytes()
        execute(rom, settings)
        lg.info('Execution stopped by the user')
        sys.exit(EXIT_QUIT)

    except ConfigError as e:
        lg.info(f'Bad configuration: {e}')
        sys.exit(EXIT_EXEC_ERROR)

    except MachineFault as e:
        lg.info(f'Execution halted on machine fault: {e}')
        sys.exit(EXIT_FAULT)

    except KeyboardInterrupt:
        lg.info('Execution halted by the user')
        return sys.exit(EXIT_KEYBOARD)

    except Exception as e:
        lg.info(f'Execution halted on general error {e}')
        traceback.print_exc()
        return sys.exit(EXIT_EXEC_ERROR)


if __name__ == '__main__':
    run()
