"""Audit trail for scoring passes: hashing and structured logging."""

from .hashing import compute_hash, compute_results_hash
from .logging import ScoringAuditLogger, get_audit_logger

__all__ = ["compute_hash", "compute_results_hash", "ScoringAuditLogger", "get_audit_logger"]
