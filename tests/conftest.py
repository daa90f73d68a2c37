import random

import pytest

SMALL_PRIME = 2089
LARGE_PRIME = 2**61 - 1


@pytest.fixture
def rng():
    return random.Random(1234)


class CountingRandom(random.Random):
    """random.Random that records how often it was asked for a value."""

    def __init__(self, seed=0):
        super().__init__(seed)
        self.calls = 0

    def randrange(self, *args, **kwargs):
        self.calls += 1
        return super().randrange(*args, **kwargs)


@pytest.fixture
def counting_rng():
    return CountingRandom(7)
