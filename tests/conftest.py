import pytest

from motionblocks.graph import BlockGraph
from motionblocks.lifecycle import TaskRegistry
from motionblocks.models.config import EditorConfig
from motionblocks.models.enums import StepIdStrategy
from motionblocks.services import EventBus


# Short timers so coordinator tests finish quickly
DEBOUNCE_MS = 20.0
GRACE_MS = 30.0
DELAY_MS = 10.0

# Long enough for any of the timers above to have fired
SETTLE_S = 0.15


@pytest.fixture(autouse=True)
def fresh_task_registry():
    TaskRegistry.reset()
    yield
    TaskRegistry.reset()


@pytest.fixture
def graph():
    return BlockGraph()


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def fast_config():
    return EditorConfig(
        debounce_ms=DEBOUNCE_MS,
        grace_ms=GRACE_MS,
        decompile_delay_ms=DELAY_MS,
        step_ids=StepIdStrategy.POSITIONAL,
        log_colors=False,
    )


@pytest.fixture
def recorder():
    """Collects events handed to it (sync bus handler)"""
    class Recorder:
        def __init__(self):
            self.events = []

        def __call__(self, event):
            self.events.append(event)

        @property
        def programs(self):
            return [e.program for e in self.events]

    return Recorder()
