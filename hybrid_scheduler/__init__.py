"""
Hybrid scheduler package.

Simulates single-CPU process scheduling under FCFS, SJF, Priority,
Round Robin and a prediction-guided Hybrid AI policy, and reports the
timeline and performance metrics of each.
"""

from .aggregator import run
from .algorithms import run_algorithm
from .models import PredictedAttributes, ProcessInput, SchedulingResult
from .predictor import predict
from .validation import InvalidInput

__all__ = [
    "InvalidInput",
    "PredictedAttributes",
    "ProcessInput",
    "SchedulingResult",
    "predict",
    "run",
    "run_algorithm",
]
