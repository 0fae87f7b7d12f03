# -*- coding: utf-8 -*-
"""
Buildings & Lighting - AGENT-PORT-001: Port Electrification Engine

Grid electricity of terminal buildings and yard lighting. The load is the
same in the baseline and the scenario.

    kWh = warehouse_sqm * warehouse_kwh_per_sqm
        + office_sqm * office_kwh_per_sqm
        + workshop_sqm * workshop_kwh_per_sqm
        + (high_mast * 1000 + area * 400 + roadway * 250) W * hours / 1000

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

from greenport.models import BuildingsLightingConfig, BuildingsLightingResult
from greenport.resolver import AssumptionResolver, EconomicContext

#: Fixture wattage by light type.
HIGH_MAST_WATTS = 1000.0
AREA_LIGHT_WATTS = 400.0
ROADWAY_LIGHT_WATTS = 250.0


def calculate_buildings_lighting(
    config: BuildingsLightingConfig,
    resolver: AssumptionResolver,
    economics: EconomicContext,
) -> BuildingsLightingResult:
    """Annual electricity, CO2 and cost of buildings and lighting."""
    buildings_kwh = (
        config.warehouse_sqm * resolver.economic("warehouse_kwh_per_sqm")
        + config.office_sqm * resolver.economic("office_kwh_per_sqm")
        + config.workshop_sqm * resolver.economic("workshop_kwh_per_sqm")
    )
    watts = (
        config.high_mast_lights * HIGH_MAST_WATTS
        + config.area_lights * AREA_LIGHT_WATTS
        + config.roadway_lights * ROADWAY_LIGHT_WATTS
    )
    lighting_kwh = watts * config.annual_operating_hours / 1000.0
    total = buildings_kwh + lighting_kwh
    return BuildingsLightingResult(
        buildings_kwh=buildings_kwh,
        lighting_kwh=lighting_kwh,
        total_kwh=total,
        co2_tons=economics.electric_co2_tons(total),
        energy_cost_usd=total * economics.electricity_price,
    )


__all__ = [
    "HIGH_MAST_WATTS",
    "AREA_LIGHT_WATTS",
    "ROADWAY_LIGHT_WATTS",
    "calculate_buildings_lighting",
]
