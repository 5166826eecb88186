"""Glob tracking, event dispatch and filesystem subscription."""

from .globs import GlobTracker, WatchRoot, normalize_path
from .pipeline import PipelineState, SweepResult, WatchEvent, WatchPipeline
from .subscription import PipelineEventHandler, WatchSession

__all__ = [
    "GlobTracker",
    "PipelineEventHandler",
    "PipelineState",
    "SweepResult",
    "WatchEvent",
    "WatchPipeline",
    "WatchRoot",
    "WatchSession",
    "normalize_path",
]
