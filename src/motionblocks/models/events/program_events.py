"""Program and playback events"""

from dataclasses import dataclass

from motionblocks.models.events.base import Event
from motionblocks.models.events.types import EventType
from motionblocks.models.events.sources import EventSource
from motionblocks.models.step import Program


@dataclass(init=False)
class ProgramChangedEvent(Event):
    """A debounced recompilation produced a new program"""
    program: Program

    def __init__(self, program: Program):
        super().__init__(type=EventType.PROGRAM_CHANGED, source=EventSource.COORDINATOR)
        self.program = program


@dataclass(init=False)
class ProgramInstalledEvent(Event):
    """A host program was decompiled into the graph"""
    program: Program

    def __init__(self, program: Program):
        super().__init__(type=EventType.PROGRAM_INSTALLED, source=EventSource.COORDINATOR)
        self.program = program


@dataclass(init=False)
class PlaybackRequestedEvent(Event):
    """Host should play this program"""
    program: Program

    def __init__(self, program: Program):
        super().__init__(type=EventType.PLAYBACK_REQUESTED, source=EventSource.SESSION)
        self.program = program


@dataclass(init=False)
class EmptyProgramEvent(Event):
    """
    Playback was requested but there is nothing to play.

    Raised as an event, never as an exception: the host decides how to tell
    the user (e.g. refuse playback).
    """
    reason: str

    def __init__(self, reason: str):
        """
        Args:
            reason: "no_start_block" or "no_steps"
        """
        super().__init__(type=EventType.EMPTY_PROGRAM, source=EventSource.SESSION)
        self.reason = reason


@dataclass(init=False)
class PlaybackStopRequestedEvent(Event):
    def __init__(self):
        super().__init__(type=EventType.PLAYBACK_STOP_REQUESTED, source=EventSource.SESSION)


@dataclass(init=False)
class PlaybackResetRequestedEvent(Event):
    def __init__(self):
        super().__init__(type=EventType.PLAYBACK_RESET_REQUESTED, source=EventSource.SESSION)
