"""DRC — clearance checking between traces and pads.

Submodules:
  models     DrcResult, DrcStatus, TraceSamples.
  checker    run_drc (single synchronous pass over a board snapshot).
  scheduler  DrcScheduler: debounced, one-run-at-a-time scheduling.
"""

from .models import DrcResult, DrcStatus, TraceSamples
from .checker import run_drc, sample_traces, too_close
from .scheduler import DrcScheduler, ScheduledRun, SchedulerState

__all__ = [
    # Models
    "DrcResult", "DrcStatus", "TraceSamples",
    # Checker
    "run_drc", "sample_traces", "too_close",
    # Scheduler
    "DrcScheduler", "ScheduledRun", "SchedulerState",
]
