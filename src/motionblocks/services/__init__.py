"""Event bus, change coordinator and the host-facing editor session"""

from motionblocks.services.event_bus import EventBus
from motionblocks.services.change_coordinator import ChangeCoordinator
from motionblocks.services.editor_session import EditorSession

__all__ = ["EventBus", "ChangeCoordinator", "EditorSession"]
