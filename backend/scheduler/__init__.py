from .scheduler import SchedulerManager

__all__ = ["SchedulerManager"]
