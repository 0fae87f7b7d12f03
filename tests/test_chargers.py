# -*- coding: utf-8 -*-
"""
Tests for ChargerSizingEngine.

Comprehensive test suite covering:
- Ceiling division of units per charger
- Manual charger overrides
- Power, CAPEX and OPEX totals

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import pytest

from greenport.chargers import ChargerSizingEngine, chargers_required


# ==============================================================================
# chargers_required
# ==============================================================================

class TestChargersRequired:
    """Test the sharing-ratio rule."""

    @pytest.mark.parametrize("count,ratio,expected", [
        (15, 4, 4),
        (16, 4, 4),
        (17, 4, 5),
        (1, 15, 1),
        (0, 4, 0),
    ])
    def test_ceiling(self, count, ratio, expected):
        assert chargers_required(count, ratio) == expected

    def test_non_positive_ratio_means_one_per_unit(self):
        assert chargers_required(7, 0) == 7


# ==============================================================================
# ChargerSizingEngine
# ==============================================================================

class TestChargerSizing:
    """Test EVSE sizing against the EVSE table."""

    def test_sized_from_new_units(self, resolver):
        items, totals = ChargerSizingEngine().calculate({"terminal_tractor": 15}, resolver)

        assert len(items) == 1
        item = items[0]
        assert item.chargers_required == 4
        assert item.chargers_override is None
        assert item.chargers_final == 4
        assert item.total_power_kw == pytest.approx(600.0)
        assert totals.total_capex_usd == pytest.approx(400000.0)
        assert totals.total_annual_opex_usd == pytest.approx(8000.0)

    def test_override_replaces_count(self, resolver):
        items, totals = ChargerSizingEngine().calculate(
            {"terminal_tractor": 15}, resolver, {"evse_terminal_tractor": 6},
        )

        assert items[0].chargers_required == 4
        assert items[0].chargers_final == 6
        assert totals.total_chargers == 6
        assert totals.total_power_kw == pytest.approx(900.0)

    def test_override_without_new_units(self, resolver):
        items, totals = ChargerSizingEngine().calculate(
            {}, resolver, {"evse_terminal_tractor": 2},
        )
        assert items[0].equipment_count == 0
        assert totals.total_chargers == 2

    def test_no_units_no_items(self, resolver):
        items, totals = ChargerSizingEngine().calculate({}, resolver)
        assert items == []
        assert totals.total_chargers == 0

    def test_unknown_evse_override_ignored(self, resolver):
        items, totals = ChargerSizingEngine().calculate(
            {}, resolver, {"evse_hovercraft": 3},
        )
        assert items == []
        assert totals.total_capex_usd == 0.0

    def test_units_without_evse_row_not_sized(self, resolver):
        items, _ = ChargerSizingEngine().calculate({"agv": 10}, resolver)
        assert items == []
