"""Scoring engine for resolved questions.

This package contains the pure scoring logic:
- Input validation for forecasts and outcomes
- Time-weighted logarithmic scoring against the 50% baseline
- Plain log2 scoring of the latest forecast
- Confidence-weighted absolute-error scoring (binary and numeric)
- Audit logging and hashing of scoring passes

Nothing here touches the database; handlers feed it snapshots.
"""

from __future__ import annotations

__all__: list[str] = []
