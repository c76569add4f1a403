import random

import pytest

from minigame.logic.input import InputBus
from minigame.tests.mocks import ManualScheduler, RecordingDisplay


@pytest.fixture
def scheduler():
    return ManualScheduler()


@pytest.fixture
def display():
    return RecordingDisplay()


@pytest.fixture
def input_bus():
    return InputBus()


@pytest.fixture
def rng():
    return random.Random(1234)  # noqa: S311
