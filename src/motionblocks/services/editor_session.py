"""
Editor Session - host-facing facade

Owns one block graph, its change coordinator and the event bus, and
exposes the in-process boundary the host (playback / persistence) uses:

    host -> core   set_active_program(), request_play(), clear()
    core -> host   on_program_changed(callback)
"""

import inspect
from pathlib import Path
from typing import Any, Awaitable, Callable, Iterable, List, Optional, Sequence, Union

from motionblocks.compiler.diagnostics import CompileWarning
from motionblocks.graph.block_graph import BlockGraph
from motionblocks.graph.examples import load_example
from motionblocks.managers.config_manager import ConfigManager
from motionblocks.models.config import EditorConfig
from motionblocks.models.enums import BlockKind, ChangeReason
from motionblocks.models.events import (
    EventType,
    ProgramChangedEvent,
    PlaybackRequestedEvent,
    PlaybackStopRequestedEvent,
    PlaybackResetRequestedEvent,
    EmptyProgramEvent,
)
from motionblocks.models.step import AnimationStep, Program, ProgramSummary, summarize, EMPTY_PROGRAM
from motionblocks.services.change_coordinator import ChangeCoordinator
from motionblocks.services.event_bus import EventBus
from motionblocks.services.middleware import log_middleware
from motionblocks.utils.logger import get_logger, configure_logger, LogCategory
from motionblocks.utils.serialization import Serializer

log = get_logger().for_category(LogCategory.SESSION)

ProgramCallback = Callable[[Program], Union[None, Awaitable[None]]]


class EditorSession:
    """
    One editor session bound to one host target

    Example:
        async with EditorSession(config) as session:
            session.on_program_changed(store.save_steps)
            session.set_active_program(store.load_steps(target))
            ...
            program = await session.request_play()
    """

    def __init__(
        self,
        config: Optional[EditorConfig] = None,
        event_bus: Optional[EventBus] = None,
        graph: Optional[BlockGraph] = None,
        name: str = "editor",
    ):
        self.config = config or EditorConfig()
        self.name = name
        self._log = log.bind(session=name)
        self.graph = graph or BlockGraph()

        if event_bus is None:
            event_bus = EventBus()
            event_bus.add_middleware(log_middleware)
        self.bus = event_bus

        self.coordinator = ChangeCoordinator(self.graph, self.bus, self.config, owner=name)
        self._started = False

    @classmethod
    def from_config_file(cls, config_path: Optional[Union[str, Path]] = None, **kwargs) -> "EditorSession":
        """Load YAML config, apply its logging settings and build a session"""
        manager = ConfigManager(config_path) if config_path else ConfigManager()
        config = manager.load()
        configure_logger(config.log_level, config.log_colors)
        return cls(config=config, **kwargs)

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def start(self) -> None:
        if self._started:
            return
        self.coordinator.attach()
        self._started = True
        self._log.info("Editor session started", debounce_ms=self.config.debounce_ms, step_ids=self.config.step_ids.value)

    def dispose(self) -> None:
        """Tear down: pending compiles and decompiles never fire afterwards"""
        self.coordinator.dispose()
        self._started = False
        self._log.info("Editor session disposed")

    @property
    def disposed(self) -> bool:
        return self.coordinator.disposed

    async def __aenter__(self) -> "EditorSession":
        self.start()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    # -----------------------------
    # Core -> host
    # -----------------------------

    def on_program_changed(self, callback: ProgramCallback, priority: int = 0) -> None:
        """Register a callback receiving each published program"""
        if inspect.iscoroutinefunction(callback):
            async def handler(event: ProgramChangedEvent) -> None:
                await callback(event.program)
        else:
            def handler(event: ProgramChangedEvent) -> None:
                callback(event.program)

        handler.__name__ = getattr(callback, "__name__", "program_callback")
        self.bus.subscribe(EventType.PROGRAM_CHANGED, handler, priority=priority)

    # -----------------------------
    # Host -> core
    # -----------------------------

    def set_active_program(self, steps: Sequence[AnimationStep]) -> bool:
        """
        Make steps the session's program and rebuild the graph from it.

        The rebuild is deferred so the editor can finish its current render
        pass; it runs under suppression and never triggers a recompile.
        Returns False when the program is already shown.
        """
        if self.disposed:
            self._log.warn("set_active_program() on disposed session ignored")
            return False
        return self.coordinator.request_decompile(steps)

    def set_active_records(self, records: Iterable[Any]) -> bool:
        """set_active_program() from serialized step records"""
        return self.set_active_program(Serializer.program_from_records(records))

    async def request_play(self) -> Program:
        """
        Current program for playback.

        Pending edits are compiled first. An empty program is signalled with
        an EmptyProgramEvent and returned as (), never raised.
        """
        if self.coordinator.compile_pending:
            program = await self.coordinator.flush()
        else:
            program = self.coordinator.program

        if not program:
            reason = "no_steps" if self._has_start() else "no_start_block"
            self._log.info("Nothing to play", reason=reason)
            await self.bus.publish(EmptyProgramEvent(reason))
            return EMPTY_PROGRAM

        await self.bus.publish(PlaybackRequestedEvent(program))
        return program

    async def request_stop(self) -> None:
        await self.bus.publish(PlaybackStopRequestedEvent())

    async def request_reset(self) -> None:
        await self.bus.publish(PlaybackResetRequestedEvent())

    async def clear(self) -> None:
        await self.coordinator.clear()

    def load_example(self) -> None:
        """
        Load the demo chain.

        Built with PROGRAMMATIC reason but without suppression, so it is
        compiled and published like an edit (unless the policy ignores
        programmatic changes).
        """
        if self.disposed:
            self._log.warn("load_example() on disposed session ignored")
            return
        load_example(self.graph, reason=ChangeReason.PROGRAMMATIC)

    # -----------------------------
    # Introspection
    # -----------------------------

    @property
    def program(self) -> Program:
        return self.coordinator.program

    def program_records(self) -> List[dict]:
        return Serializer.program_to_records(self.program)

    def summary(self) -> ProgramSummary:
        return summarize(self.program)

    @property
    def warnings(self) -> List[CompileWarning]:
        """Warnings of the most recent compilation"""
        return self.coordinator.compiler.warnings

    def _has_start(self) -> bool:
        return any(b.kind == BlockKind.START for b in self.graph.get_top_blocks())
