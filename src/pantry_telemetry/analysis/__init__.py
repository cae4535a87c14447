"""
Analysis and computation layer.

This package contains modules for reconstructing door cycles and computing
summaries.
"""

from .cycles import CycleReconstructor, PendingOpen, apply_open
from .summarizer import TelemetrySummarizer, classify_cycle

__all__ = [
    "CycleReconstructor",
    "PendingOpen",
    "TelemetrySummarizer",
    "apply_open",
    "classify_cycle",
]
