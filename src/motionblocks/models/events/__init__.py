"""
Event system for the block editor compiler

Graph notifications are delivered synchronously to graph listeners;
program and playback events travel over the async EventBus.
"""

# Event type, base class, and sources
from motionblocks.models.events.types import EventType
from motionblocks.models.events.base import Event
from motionblocks.models.events.sources import EventSource

# Graph notifications
from motionblocks.models.events.graph_events import GraphChangedEvent

# Program / playback
from motionblocks.models.events.program_events import (
    ProgramChangedEvent,
    ProgramInstalledEvent,
    PlaybackRequestedEvent,
    PlaybackStopRequestedEvent,
    PlaybackResetRequestedEvent,
    EmptyProgramEvent,
)

__all__ = [
    # Type, base, and sources
    "EventType",
    "Event",
    "EventSource",

    # Graph
    "GraphChangedEvent",

    # Program / playback
    "ProgramChangedEvent",
    "ProgramInstalledEvent",
    "PlaybackRequestedEvent",
    "PlaybackStopRequestedEvent",
    "PlaybackResetRequestedEvent",
    "EmptyProgramEvent",
]
