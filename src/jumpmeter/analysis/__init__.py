"""Pure analysis logic: jump phase detection and metrics.

This module contains NO sensor or UI code.
All functions operate on typed dataclasses and return results.
"""

from jumpmeter.analysis.detector import PhaseStateMachine, detect_jumps_batch
from jumpmeter.analysis.metrics import compute_metrics, summarize

__all__ = ["PhaseStateMachine", "detect_jumps_batch", "compute_metrics", "summarize"]
