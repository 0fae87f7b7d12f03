# -*- coding: utf-8 -*-
"""
Tests for the assumption resolver.

Comprehensive test suite covering:
- Override layer taking precedence over base rows
- Typed row access and unknown keys
- Economic defaults and required keys
- Completeness checks on assumption sets
- EconomicContext conversions

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import pytest

from greenport.exceptions import AssumptionLoadError
from greenport.models import EquipmentCategory
from greenport.resolver import (
    ECONOMIC_DEFAULTS,
    AssumptionResolver,
    AssumptionSet,
    EconomicContext,
)


# ==============================================================================
# Override layering
# ==============================================================================

class TestOverrideLayering:
    """Test read-time merge of base rows and overrides."""

    def test_base_value_without_override(self, resolver):
        assert resolver.value("piece_equipment", "terminal_tractor", "capex_usd") == 50000.0

    def test_override_replaces_cell(self, base_tables):
        aset = AssumptionSet(
            "custom", base_tables,
            overrides={"piece_equipment": {"terminal_tractor": {"capex_usd": 65000}}},
        )
        resolver = AssumptionResolver(aset)

        assert resolver.value("piece_equipment", "terminal_tractor", "capex_usd") == 65000.0
        assert resolver.equipment("terminal_tractor").install_cost_usd == 10000.0

    def test_base_rows_never_modified(self, base_tables):
        aset = AssumptionSet(
            "custom", base_tables,
            overrides={"economic_assumptions": {"diesel_price": {"value": 2.0}}},
        )

        AssumptionResolver(aset).economic("diesel_price")

        assert aset.base["economic_assumptions"]["diesel_price"]["value"] == 1.0
        assert base_tables["economic_assumptions"]["diesel_price"]["value"] == 1.0

    def test_override_for_unknown_row_ignored(self, base_tables):
        aset = AssumptionSet(
            "custom", base_tables,
            overrides={"piece_equipment": {"hovercraft": {"capex_usd": 1.0}}},
        )

        assert aset.override_count == 0
        assert AssumptionResolver(aset).equipment("hovercraft") is None

    def test_override_count(self, base_tables):
        aset = AssumptionSet(
            "custom", base_tables,
            overrides={
                "economic_assumptions": {"diesel_price": {"value": 2.0}},
                "piece_grid": {"grid_simultaneity": {"simultaneity_factor": 0.7}},
            },
        )
        assert aset.override_count == 2


# ==============================================================================
# Typed access
# ==============================================================================

class TestTypedAccess:
    """Test typed row accessors."""

    def test_equipment_row(self, resolver):
        row = resolver.equipment("rtg_crane")
        assert row.equipment_category == EquipmentCategory.GRID_POWERED
        assert row.peak_power_kw == 400.0

    def test_unknown_equipment_is_none(self, resolver):
        assert resolver.equipment("space_elevator") is None

    def test_evse_rows_sorted(self, resolver):
        rows = resolver.evse_rows()
        assert [r.evse_key for r in rows] == ["evse_terminal_tractor"]
        assert rows[0].units_per_charger == 4.0

    def test_fleet_empty_key_is_none(self, resolver):
        assert resolver.fleet("") is None

    def test_fleet_optional_dc_fields(self, resolver):
        assert resolver.fleet("container_3_8k").dc_power_mw == 1.0
        assert resolver.fleet("tug_70bp").dc_power_mw is None

    def test_simultaneity_row_found_by_key(self, resolver):
        assert resolver.simultaneity_row().simultaneity_factor == 0.8

    def test_row_keys_sorted(self, resolver):
        keys = resolver.row_keys("piece_grid")
        assert keys == sorted(keys)


# ==============================================================================
# Economic values
# ==============================================================================

class TestEconomic:
    """Test economic resolution and defaults."""

    def test_present_key(self, resolver):
        assert resolver.economic("grid_ef") == 0.5

    def test_documented_default(self, resolver):
        assert resolver.economic("reefer_utilization") == ECONOMIC_DEFAULTS["reefer_utilization"]

    def test_explicit_default(self, resolver):
        assert resolver.economic("carbon_price", default=80.0) == 80.0

    def test_unknown_key_without_default_raises(self, resolver):
        with pytest.raises(KeyError):
            resolver.economic("carbon_price")

    def test_economic_map_includes_defaults(self, resolver):
        values = resolver.economic_map()
        assert values["diesel_price"] == 1.0
        assert values["engine_efficiency"] == 0.45
        assert list(values) == sorted(values)


# ==============================================================================
# Completeness
# ==============================================================================

class TestRequireComplete:
    """Test rejection of incomplete assumption sets."""

    def test_complete_set_passes(self, assumption_set):
        assumption_set.require_complete()

    def test_empty_table_rejected(self, base_tables):
        base_tables["piece_evse"] = {}
        with pytest.raises(AssumptionLoadError) as exc_info:
            AssumptionSet("default", base_tables).require_complete()
        assert "piece_evse" in exc_info.value.context["missing"]

    def test_missing_required_economic_key_rejected(self, base_tables):
        del base_tables["economic_assumptions"]["grid_ef"]
        with pytest.raises(AssumptionLoadError) as exc_info:
            AssumptionSet("default", base_tables).require_complete()
        assert "economic_assumptions.grid_ef" in exc_info.value.context["missing"]

    def test_missing_simultaneity_rejected(self, base_tables):
        del base_tables["piece_grid"]["grid_simultaneity"]
        with pytest.raises(AssumptionLoadError, match="simultaneity"):
            AssumptionSet("default", base_tables).require_complete()

    def test_unparseable_row_rejected(self, base_tables):
        base_tables["piece_equipment"]["rtg_crane"]["capex_usd"] = "expensive"
        with pytest.raises(AssumptionLoadError, match="rtg_crane"):
            AssumptionSet("default", base_tables).require_complete()

    def test_profile_in_context(self, base_tables):
        base_tables["piece_grid"] = {}
        with pytest.raises(AssumptionLoadError) as exc_info:
            AssumptionSet("scenario_7", base_tables).require_complete()
        assert exc_info.value.context["profile"] == "scenario_7"


# ==============================================================================
# EconomicContext
# ==============================================================================

class TestEconomicContext:
    """Test conversion helpers."""

    def test_useful_kwh_per_liter(self, economics):
        assert economics.useful_kwh_per_liter == pytest.approx(9.7 * 0.45 / 0.95)

    def test_zero_motor_efficiency_falls_back(self, resolver):
        context = EconomicContext.from_resolver(resolver, 8760.0, 0.0)
        assert context.useful_kwh_per_liter == pytest.approx(9.7 * 0.45)

    def test_co2_helpers(self, economics):
        assert economics.diesel_co2_tons(1000.0) == pytest.approx(3.0)
        assert economics.electric_co2_tons(1000.0) == pytest.approx(0.5)

    def test_liters_for_kwh(self, economics):
        assert economics.liters_for_kwh(economics.useful_kwh_per_liter * 10) == pytest.approx(10.0)

    def test_context_is_frozen(self, economics):
        with pytest.raises(AttributeError):
            economics.diesel_price = 2.0
