"""Общие fixtures: учёт выделенных BigInteger для проверки утечек."""

import pytest

from src.bignum.digits import set_allocation_hook


class AllocationCounter:
    """Счётчик живых BigInteger: +1 при создании, -1 при release()."""

    def __init__(self) -> None:
        self.live = 0
        self.created = 0

    def __call__(self, delta: int) -> None:
        self.live += delta
        if delta > 0:
            self.created += delta


@pytest.fixture
def allocations():
    counter = AllocationCounter()
    previous = set_allocation_hook(counter)
    try:
        yield counter
    finally:
        set_allocation_hook(previous)
