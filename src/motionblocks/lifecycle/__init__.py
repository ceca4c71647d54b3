"""Timer tasks and their tracking"""

from motionblocks.lifecycle.task_registry import TaskRegistry, TaskCategory, create_tracked_task
from motionblocks.lifecycle.scheduled_task import ScheduledTask

__all__ = ["TaskRegistry", "TaskCategory", "create_tracked_task", "ScheduledTask"]
