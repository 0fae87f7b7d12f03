# -*- coding: utf-8 -*-
"""
Tests for buildings and lighting electricity.

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import pytest

from greenport.buildings import calculate_buildings_lighting
from greenport.models import BuildingsLightingConfig
from greenport.resolver import AssumptionResolver, AssumptionSet


class TestBuildingsLighting:
    """Test floor-area and fixture loads."""

    def test_buildings_and_lights(self, resolver, economics):
        config = BuildingsLightingConfig(
            warehouse_sqm=1000,
            office_sqm=100,
            high_mast_lights=10,
            area_lights=5,
            roadway_lights=4,
        )

        result = calculate_buildings_lighting(config, resolver, economics)

        assert result.buildings_kwh == pytest.approx(100000.0)
        assert result.lighting_kwh == pytest.approx(13000.0 * 8760.0 / 1000.0)
        assert result.total_kwh == pytest.approx(213880.0)
        assert result.co2_tons == pytest.approx(106.94)
        assert result.energy_cost_usd == pytest.approx(21388.0)

    def test_single_high_mast_light(self, resolver, economics):
        result = calculate_buildings_lighting(
            BuildingsLightingConfig(high_mast_lights=1), resolver, economics,
        )
        assert result.total_kwh == pytest.approx(8760.0)

    def test_operating_hours(self, resolver, economics):
        result = calculate_buildings_lighting(
            BuildingsLightingConfig(area_lights=10, annual_operating_hours=4000),
            resolver, economics,
        )
        assert result.lighting_kwh == pytest.approx(16000.0)

    def test_intensity_override(self, base_tables, economics):
        base_tables["economic_assumptions"]["workshop_kwh_per_sqm"] = {
            "assumption_key": "workshop_kwh_per_sqm", "value": 200.0,
        }
        resolver = AssumptionResolver(AssumptionSet("default", base_tables))
        result = calculate_buildings_lighting(
            BuildingsLightingConfig(workshop_sqm=10), resolver, economics,
        )
        assert result.buildings_kwh == pytest.approx(2000.0)

    def test_empty_config(self, resolver, economics):
        result = calculate_buildings_lighting(BuildingsLightingConfig(), resolver, economics)
        assert result.total_kwh == 0.0
        assert result.energy_cost_usd == 0.0
