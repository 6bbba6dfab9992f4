from __future__ import annotations

from typing import List

import pytest

from route_playback.models.route_models import Fix
from route_playback.services.playback import PlaybackEngine
from tests.helpers import FakeClock, ManualScheduler


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def scheduler(clock: FakeClock) -> ManualScheduler:
    return ManualScheduler(clock)


@pytest.fixture
def fixes() -> List[Fix]:
    return []


@pytest.fixture
def engine(scheduler: ManualScheduler, clock: FakeClock, fixes: List[Fix]) -> PlaybackEngine:
    eng = PlaybackEngine(scheduler, clock=clock, sink=fixes.append, speed_mps=5.0)
    yield eng
    eng.close()
