"""
OS Lab package.

Deterministic simulators for classic operating-systems algorithms (CPU
scheduling, page replacement, Banker's safety check) plus small teaching
models for concurrency and a toy shell, with a rich command-line front end.
"""

from .algorithms import run_schedule, schedule
from .bankers import check_safety, evaluate_request
from .errors import ConfigurationError
from .paging import run_paging, simulate

__all__ = [
    "ConfigurationError",
    "check_safety",
    "evaluate_request",
    "run_paging",
    "run_schedule",
    "schedule",
    "simulate",
    "cli",
]
