"""Scoring metrics module.

Contains implementations of:
- Natural-log and log2 scores of the outcome-consistent probability
- Confidence-weighted absolute error (binary and numeric)
"""

from __future__ import annotations

__all__: list[str] = []
