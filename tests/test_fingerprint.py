# -*- coding: utf-8 -*-
"""
Tests for override fingerprints.

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

from greenport.fingerprint import EMPTY_FINGERPRINT, compute_fingerprint
from greenport.models import AssumptionTable, OverrideRow


def _row(table, row_key, column, value, profile="default"):
    return OverrideRow(
        profile_name=profile,
        table_name=table,
        row_key=row_key,
        column_name=column,
        custom_value=value,
    )


PRICE = _row(AssumptionTable.ECONOMIC, "diesel_price", "value", 1.5)
CAPEX = _row(AssumptionTable.EQUIPMENT, "agv", "capex_usd", 400000)


class TestComputeFingerprint:
    """Test fingerprint stability and sensitivity."""

    def test_empty(self):
        assert compute_fingerprint([]) == EMPTY_FINGERPRINT == "0:"

    def test_count_prefix(self):
        fingerprint = compute_fingerprint([PRICE, CAPEX])
        count, digest = fingerprint.split(":")
        assert count == "2"
        assert len(digest) == 64

    def test_order_independent(self):
        assert compute_fingerprint([PRICE, CAPEX]) == compute_fingerprint([CAPEX, PRICE])

    def test_value_change_changes_fingerprint(self):
        cheaper = _row(AssumptionTable.ECONOMIC, "diesel_price", "value", 1.4)
        assert compute_fingerprint([PRICE]) != compute_fingerprint([cheaper])

    def test_profile_name_not_hashed(self):
        renamed = _row(AssumptionTable.ECONOMIC, "diesel_price", "value", 1.5, profile="scenario_2")
        assert compute_fingerprint([PRICE]) == compute_fingerprint([renamed])

    def test_int_and_float_values_equal(self):
        as_float = _row(AssumptionTable.EQUIPMENT, "agv", "capex_usd", 400000.0)
        assert compute_fingerprint([CAPEX]) == compute_fingerprint([as_float])
