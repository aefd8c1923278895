"""Comparison engine: data model, reconciliation and orchestration."""
