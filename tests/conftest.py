"""Shared helpers for the simulation tests."""

from typing import Iterable, List

import pytest


class ScriptedSource:
    """Uniform source replaying fixed values and counting draws."""

    def __init__(self, values: Iterable[float]):
        self.values: List[float] = list(values)
        self.calls = 0

    def __call__(self) -> float:
        value = self.values[self.calls]
        self.calls += 1
        return value


@pytest.fixture
def scripted():
    return ScriptedSource
