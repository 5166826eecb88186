"""Console diagnostics and structured event logging."""

from .console import ConsoleReporter
from .events import JsonlEventLog, RenderEvent, utc_timestamp

__all__ = ["ConsoleReporter", "JsonlEventLog", "RenderEvent", "utc_timestamp"]
