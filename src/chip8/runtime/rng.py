from random import Random
from typing import Protocol


class RandomSource(Protocol):
    def next_byte(self) -> int:
        ...


class DefaultRandom:
    ''' Default source for RND, seedable for reproducible runs '''

    def __init__(self, seed: int | None = None):
        self.random = Random(seed)

    def next_byte(self) -> int:
        return self.random.randrange(0x100)


class SequenceRandom:
    ''' Replays a fixed sequence of bytes, cycling when exhausted '''

    def __init__(self, values: list[int]):
        self.values = [v & 0xFF for v in values]
        self.pos = 0

    def next_byte(self) -> int:
        val = self.values[self.pos % len(self.values)]
        self.pos += 1
        return val
