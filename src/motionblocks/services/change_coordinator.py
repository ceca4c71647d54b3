"""
Change Coordinator

Keeps the block graph and the compiled program in sync without feedback
loops. Two states:

    IDLE        graph notifications restart the debounce timer; when it
                fires the graph is compiled once and the program published
    SUPPRESSED  entered around every decompile; notifications are dropped
                unconditionally until the grace window after the rebuild ends

Reason tags on notifications are advisory only. The SUPPRESSED state is
what keeps a programmatic rebuild from being compiled back.
"""

from typing import Optional, Sequence

from motionblocks.compiler.compiler import Compiler
from motionblocks.compiler.decompiler import Decompiler
from motionblocks.graph.block_graph import BlockGraph
from motionblocks.lifecycle.scheduled_task import ScheduledTask
from motionblocks.lifecycle.task_registry import TaskCategory
from motionblocks.models.config import EditorConfig
from motionblocks.models.enums import ChangeReason, CoordinatorState
from motionblocks.models.events import GraphChangedEvent, ProgramChangedEvent, ProgramInstalledEvent
from motionblocks.models.step import AnimationStep, Program, EMPTY_PROGRAM
from motionblocks.services.event_bus import EventBus
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.COORDINATOR)


class ChangeCoordinator:
    """
    Debounced compile / suppressed decompile state machine

    Example:
        coordinator = ChangeCoordinator(graph, bus, config)
        coordinator.attach()

        # user edits -> one ProgramChangedEvent per debounce window
        graph.set_field(block, "DIRECTION", "moveDown")

        # host switches target -> deferred rebuild, no recompilation
        coordinator.request_decompile(other_program)

        coordinator.dispose()
    """

    def __init__(
        self,
        graph: BlockGraph,
        event_bus: EventBus,
        config: Optional[EditorConfig] = None,
        compiler: Optional[Compiler] = None,
        decompiler: Optional[Decompiler] = None,
        owner: str = "coordinator",
    ):
        self.graph = graph
        self.bus = event_bus
        self.config = config or EditorConfig()
        self.compiler = compiler or Compiler(self.config.step_ids)
        self.decompiler = decompiler or Decompiler(self.config.start_anchor)
        self.owner = owner
        self._log = log.bind(owner=owner)

        self._state = CoordinatorState.IDLE
        self._attached = False
        self._disposed = False

        self._program: Program = EMPTY_PROGRAM
        self._installed: Optional[Program] = None    # last program decompiled from
        self._published: Optional[Program] = None    # last program compiled + published
        self._pending_install: Optional[Program] = None

        self.discarded_count = 0
        self.compile_count = 0

        self._debounce = ScheduledTask(
            self._on_debounce,
            self.config.debounce_s,
            category=TaskCategory.DEBOUNCE,
            description="recompile after graph edits",
            owner=owner,
        )
        self._grace = ScheduledTask(
            self._end_suppression,
            self.config.grace_s,
            category=TaskCategory.GRACE,
            description="end suppression after decompile",
            owner=owner,
        )
        self._deferred = ScheduledTask(
            self._on_deferred_decompile,
            self.config.decompile_delay_s,
            category=TaskCategory.DECOMPILE,
            description="deferred decompile of host program",
            owner=owner,
        )

    # -----------------------------
    # State
    # -----------------------------

    @property
    def state(self) -> CoordinatorState:
        return self._state

    @property
    def is_suppressed(self) -> bool:
        return self._state == CoordinatorState.SUPPRESSED

    @property
    def disposed(self) -> bool:
        return self._disposed

    @property
    def program(self) -> Program:
        """Current program: last published, or the one the host installed"""
        return self._program

    @property
    def compile_pending(self) -> bool:
        return self._debounce.pending

    @property
    def decompile_pending(self) -> bool:
        return self._deferred.pending

    # -----------------------------
    # Lifecycle
    # -----------------------------

    def attach(self) -> None:
        """Start listening to graph notifications"""
        if self._attached or self._disposed:
            return
        self.graph.add_change_listener(self._on_graph_change)
        self._attached = True
        self._log.debug("Attached to graph")

    def dispose(self) -> None:
        """Cancel every timer and stop reacting; nothing fires against the graph afterwards"""
        if self._disposed:
            return
        self._disposed = True
        self._debounce.cancel()
        self._grace.cancel()
        self._deferred.cancel()
        self._pending_install = None

        if self._attached:
            self.graph.remove_change_listener(self._on_graph_change)
            self._attached = False

        self._log.info("Coordinator disposed", compiles=self.compile_count, discarded=self.discarded_count)

    # -----------------------------
    # Graph -> program
    # -----------------------------

    def _on_graph_change(self, event: GraphChangedEvent) -> None:
        if self._disposed:
            return

        if self._state == CoordinatorState.SUPPRESSED:
            self.discarded_count += 1
            self._log.debug("Notification discarded (suppressed)", change=event.change.name, block=event.block_id)
            return

        if event.reason == ChangeReason.PROGRAMMATIC and self.config.ignore_programmatic_changes:
            self._log.debug("Programmatic notification ignored by policy", change=event.change.name)
            return

        self._debounce.schedule()

    async def _on_debounce(self) -> None:
        if self._disposed:
            return
        await self._compile_and_publish()

    async def flush(self) -> Program:
        """Compile now (dropping a pending debounce) and publish the result"""
        self._debounce.cancel()
        if self._disposed:
            self._log.warn("flush() on disposed coordinator ignored")
            return self._program
        return await self._compile_and_publish()

    async def _compile_and_publish(self) -> Program:
        program = self.compiler.compile(self.graph)
        self.compile_count += 1
        self._program = program
        self._installed = None
        self._published = program

        self._log.info("Program compiled", steps=len(program), warnings=len(self.compiler.warnings))
        await self.bus.publish(ProgramChangedEvent(program))
        return program

    # -----------------------------
    # Program -> graph
    # -----------------------------

    def is_current(self, program: Sequence[AnimationStep]) -> bool:
        """True if the graph already reflects this exact program"""
        if self._debounce.pending:
            return False
        program = tuple(program)
        return program == self._installed or program == self._published

    def decompile(self, program: Sequence[AnimationStep]) -> bool:
        """
        Rebuild the graph from program right away, under suppression.

        Returns False when skipped (disposed, or value-identical to what the
        graph already shows).
        """
        if self._disposed:
            self._log.warn("decompile() on disposed coordinator ignored")
            return False

        program = tuple(program)
        if self.is_current(program):
            self._log.debug("Program unchanged, decompile skipped", steps=len(program))
            return False

        self._debounce.cancel()
        self._state = CoordinatorState.SUPPRESSED
        try:
            self.decompiler.decompile(self.graph, program)
        finally:
            # Trailing notifications from the editor's render pass land in the grace window
            self._grace.schedule()

        self._installed = program
        self._published = None
        self._program = program
        return True

    def request_decompile(self, program: Sequence[AnimationStep]) -> bool:
        """
        Schedule a decompile after the configured delay.

        The program becomes current immediately and any pending recompile is
        dropped. A newer request replaces a pending one. Returns False when
        the request was skipped.
        """
        if self._disposed:
            self._log.warn("request_decompile() on disposed coordinator ignored")
            return False

        program = tuple(program)
        if self.is_current(program) and not self._deferred.pending:
            self._log.debug("Program unchanged, request skipped", steps=len(program))
            return False

        self._debounce.cancel()
        self._pending_install = program
        self._program = program
        self._deferred.schedule()
        return True

    async def _on_deferred_decompile(self) -> None:
        program = self._pending_install
        if program is None or self._disposed:
            return

        # A rebuild is still settling; try again once it is done
        if self._state == CoordinatorState.SUPPRESSED:
            self._log.debug("Still suppressed, deferring decompile again")
            self._deferred.schedule()
            return

        self._pending_install = None
        if self.decompile(program):
            await self.bus.publish(ProgramInstalledEvent(program))

    def _end_suppression(self) -> None:
        if self._state == CoordinatorState.SUPPRESSED:
            self._state = CoordinatorState.IDLE
            self._log.debug("Suppression ended", discarded=self.discarded_count)

    # -----------------------------
    # Clear
    # -----------------------------

    async def clear(self) -> None:
        """Empty the graph (no START left) and publish the empty program"""
        if self._disposed:
            self._log.warn("clear() on disposed coordinator ignored")
            return

        self._debounce.cancel()
        self._deferred.cancel()
        self._pending_install = None

        self._state = CoordinatorState.SUPPRESSED
        try:
            self.graph.clear(reason=ChangeReason.PROGRAMMATIC)
        finally:
            self._grace.schedule()

        self._installed = None
        self._program = EMPTY_PROGRAM
        self._published = EMPTY_PROGRAM
        await self.bus.publish(ProgramChangedEvent(EMPTY_PROGRAM))
