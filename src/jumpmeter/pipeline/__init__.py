"""Session orchestration and collaborator adapters."""

from jumpmeter.pipeline.adapters import (
    CollectingSink,
    JumpSink,
    LoggingSink,
    ReplaySource,
    SampleAdapter,
    SampleSource,
    including_gravity_adapter,
    linear_acceleration_adapter,
)
from jumpmeter.pipeline.session import SessionAggregator

__all__ = [
    "SessionAggregator",
    "SampleSource",
    "JumpSink",
    "SampleAdapter",
    "ReplaySource",
    "CollectingSink",
    "LoggingSink",
    "including_gravity_adapter",
    "linear_acceleration_adapter",
]
