"""Data sub-package for the staff-scorer project.

Exports the loader and the per-employee aggregation entry point::

    from staff_scorer.data import load_dataset, build_performance_inputs
"""

from staff_scorer.data.aggregates import build_performance_inputs
from staff_scorer.data.loader import DatasetError, load_dataset

__all__ = ["DatasetError", "build_performance_inputs", "load_dataset"]
