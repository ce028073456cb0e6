"""Tier classifier."""

from cartographer.classifier.engine import (
    ClassifiedFile,
    CostEstimate,
    classify,
    classify_files,
    estimate_cost,
    tier_summary,
)

__all__ = [
    "ClassifiedFile",
    "CostEstimate",
    "classify",
    "classify_files",
    "estimate_cost",
    "tier_summary",
]
