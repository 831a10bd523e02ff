import pytest

import chip8.sasm.asm as asm
from chip8.runtime.machine import Machine
from chip8.runtime.rng import SequenceRandom


@pytest.fixture
def machine():
    yield Machine(SequenceRandom([0xAB, 0x5C]))


@pytest.fixture
def with_program(machine):
    def load(source: str) -> Machine:
        machine.load(asm.compile_string(source))
        return machine

    yield load
