"""Structural comparison engine."""

from .evaluator import MismatchOutcome, compare, compare_to_type, evaluate, values_match
from .scanner import GraphScanner, MatchRecord, ScanState, scan

__all__ = [
    "GraphScanner",
    "MatchRecord",
    "ScanState",
    "scan",
    "MismatchOutcome",
    "compare",
    "compare_to_type",
    "evaluate",
    "values_match",
]
