"""Deterministic hashing for scoring outputs.

Two passes over the same resolved question must hash identically; the
audit log records the hash so a re-score can be checked against the
first pass.
"""

from __future__ import annotations

import hashlib
import json
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Mapping

from ..types import UserScore


def _serialize_value(val: Any) -> Any:
    """Serialize a value for deterministic hashing."""
    if val is None:
        return None
    elif isinstance(val, Enum):
        return val.value
    elif isinstance(val, datetime):
        return val.isoformat()
    elif isinstance(val, dict):
        return {str(k): _serialize_value(v) for k, v in sorted(val.items(), key=lambda kv: str(kv[0]))}
    elif isinstance(val, (list, tuple)):
        return [_serialize_value(v) for v in val]
    elif isinstance(val, float):
        # repr round-trips exactly; avoids platform-specific formatting
        return repr(val)
    elif isinstance(val, (int, str, bool)):
        return val
    else:
        return str(val)


def compute_hash(data: Dict[str, Any]) -> str:
    """Compute deterministic SHA256 hash of a dictionary.

    Returns:
        Hex-encoded SHA256 hash (64 characters)
    """
    serialized = _serialize_value(data)
    canonical = json.dumps(serialized, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


def compute_results_hash(question_id: int, results: Mapping[int, UserScore]) -> str:
    """Hash of one question's scoring outputs, independent of dict order."""
    payload = {
        "question_id": question_id,
        "results": [
            {
                "user_id": r.user_id,
                "forecast_id": r.latest_forecast_id,
                "score": r.score,
                "clips_change": r.clips_change,
            }
            for _, r in sorted(results.items())
        ],
    }
    return compute_hash(payload)


__all__ = ["compute_hash", "compute_results_hash"]
