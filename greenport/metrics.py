# -*- coding: utf-8 -*-
"""
Prometheus Metrics - AGENT-PORT-001: Port Electrification Engine

10 Prometheus metrics for the PIECE engine with graceful fallback when
prometheus_client is not installed.

Metrics:
    1.  gp_piece_calculations_total (Counter)
    2.  gp_piece_calculation_duration_seconds (Histogram)
    3.  gp_piece_terminals_calculated_total (Counter)
    4.  gp_piece_reference_gaps_total (Counter)
    5.  gp_piece_validation_failures_total (Counter)
    6.  gp_piece_assumption_loads_total (Counter)
    7.  gp_piece_override_changes_total (Counter)
    8.  gp_piece_results_cleared_total (Counter)
    9.  gp_piece_results_stale_total (Counter)
    10. gp_piece_profiles (Gauge)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Graceful prometheus_client import
# ---------------------------------------------------------------------------

try:
    from prometheus_client import Counter, Gauge, Histogram
    PROMETHEUS_AVAILABLE = True
except ImportError:
    PROMETHEUS_AVAILABLE = False
    logger.info(
        "prometheus_client not installed; PIECE engine metrics disabled"
    )


# ---------------------------------------------------------------------------
# Metric definitions
# ---------------------------------------------------------------------------

if PROMETHEUS_AVAILABLE:
    # 1. Calculations count
    piece_calculations_total = Counter(
        "gp_piece_calculations_total",
        "Total port calculations performed",
        labelnames=["result"],
    )

    # 2. Calculation duration
    piece_calculation_duration_seconds = Histogram(
        "gp_piece_calculation_duration_seconds",
        "Port calculation duration in seconds",
        buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 1.0),
    )

    # 3. Terminals calculated
    piece_terminals_calculated_total = Counter(
        "gp_piece_terminals_calculated_total",
        "Total terminals calculated by terminal type",
        labelnames=["terminal_type"],
    )

    # 4. Reference data gaps
    piece_reference_gaps_total = Counter(
        "gp_piece_reference_gaps_total",
        "Total unknown reference keys encountered during calculation",
        labelnames=["table"],
    )

    # 5. Validation failures
    piece_validation_failures_total = Counter(
        "gp_piece_validation_failures_total",
        "Total rejected calculation requests",
    )

    # 6. Assumption loads
    piece_assumption_loads_total = Counter(
        "gp_piece_assumption_loads_total",
        "Total assumption set loads",
        labelnames=["result"],
    )

    # 7. Override changes
    piece_override_changes_total = Counter(
        "gp_piece_override_changes_total",
        "Total assumption override changes",
        labelnames=["change_type"],
    )

    # 8. Results cleared by assumption change
    piece_results_cleared_total = Counter(
        "gp_piece_results_cleared_total",
        "Total held results discarded after an assumption change",
    )

    # 9. Results flagged stale
    piece_results_stale_total = Counter(
        "gp_piece_results_stale_total",
        "Total held results flagged stale after an input change",
    )

    # 10. Profiles gauge
    piece_profiles = Gauge(
        "gp_piece_profiles",
        "Current number of assumption profiles with overrides",
    )

else:
    # No-op placeholders
    piece_calculations_total = None  # type: ignore[assignment]
    piece_calculation_duration_seconds = None  # type: ignore[assignment]
    piece_terminals_calculated_total = None  # type: ignore[assignment]
    piece_reference_gaps_total = None  # type: ignore[assignment]
    piece_validation_failures_total = None  # type: ignore[assignment]
    piece_assumption_loads_total = None  # type: ignore[assignment]
    piece_override_changes_total = None  # type: ignore[assignment]
    piece_results_cleared_total = None  # type: ignore[assignment]
    piece_results_stale_total = None  # type: ignore[assignment]
    piece_profiles = None  # type: ignore[assignment]


# ---------------------------------------------------------------------------
# Helper functions (safe to call even without prometheus_client)
# ---------------------------------------------------------------------------


def record_calculation(result: str, duration_seconds: float) -> None:
    """Record a port calculation.

    Args:
        result: Calculation result ("success" or "error").
        duration_seconds: Calculation duration in seconds.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    piece_calculations_total.labels(result=result).inc()
    piece_calculation_duration_seconds.observe(duration_seconds)


def record_terminal(terminal_type: str) -> None:
    """Record a calculated terminal.

    Args:
        terminal_type: Terminal type value.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    piece_terminals_calculated_total.labels(terminal_type=terminal_type).inc()


def record_reference_gap(table: str) -> None:
    """Record an unknown reference key.

    Args:
        table: Assumption table that lacked the key.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    piece_reference_gaps_total.labels(table=table).inc()


def record_validation_failure() -> None:
    """Record a rejected calculation request."""
    if not PROMETHEUS_AVAILABLE:
        return
    piece_validation_failures_total.inc()


def record_assumption_load(result: str) -> None:
    """Record an assumption set load.

    Args:
        result: Load result ("success" or "error").
    """
    if not PROMETHEUS_AVAILABLE:
        return
    piece_assumption_loads_total.labels(result=result).inc()


def record_override_change(change_type: str) -> None:
    """Record an override insert, update or delete.

    Args:
        change_type: Change type value.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    piece_override_changes_total.labels(change_type=change_type).inc()


def record_result_cleared() -> None:
    """Record a result discarded after an assumption change."""
    if not PROMETHEUS_AVAILABLE:
        return
    piece_results_cleared_total.inc()


def record_result_stale() -> None:
    """Record a result flagged stale."""
    if not PROMETHEUS_AVAILABLE:
        return
    piece_results_stale_total.inc()


def update_profiles_count(count: int) -> None:
    """Set the profiles gauge.

    Args:
        count: Current number of profiles holding overrides.
    """
    if not PROMETHEUS_AVAILABLE:
        return
    piece_profiles.set(count)


__all__ = [
    "PROMETHEUS_AVAILABLE",
    # Metric objects
    "piece_calculations_total",
    "piece_calculation_duration_seconds",
    "piece_terminals_calculated_total",
    "piece_reference_gaps_total",
    "piece_validation_failures_total",
    "piece_assumption_loads_total",
    "piece_override_changes_total",
    "piece_results_cleared_total",
    "piece_results_stale_total",
    "piece_profiles",
    # Helper functions
    "record_calculation",
    "record_terminal",
    "record_reference_gap",
    "record_validation_failure",
    "record_assumption_load",
    "record_override_change",
    "record_result_cleared",
    "record_result_stale",
    "update_profiles_count",
]
