"""Types and helpers shared across the ledger: enums, rows, errors, clock, logging."""
