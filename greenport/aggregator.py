# -*- coding: utf-8 -*-
"""
Port Aggregator - AGENT-PORT-001: Port Electrification Engine

Sole calculation entry point. Drives the equipment, charger, berth, grid,
buildings and port-services calculators per terminal and rolls the results
into port totals, deltas and simple payback.

Terminal OPEX:
    baseline = equipment + berth baseline (energy + OPS/DC OPEX) + buildings
    scenario = equipment + chargers + berth scenario (energy + OPS/DC OPEX)
               + buildings + grid OPEX
Terminal CAPEX:
    equipment + chargers + OPS + DC + grid

Port totals add port services. Edge cases resolve to sentinels:
    simple_payback_years  = None when annual savings <= 0
    co2_reduction_percent = 0    when baseline CO2 is 0

Zero-Hallucination Guarantees:
    - calculate() performs no I/O and reads no clock or randomness
    - Identical request and assumptions give byte-identical results
    - A SHA-256 provenance hash covers the full result content
    - Incomplete assumption sets are rejected before any arithmetic

Example:
    >>> from greenport.aggregator import calculate
    >>> result = calculate(request, store.load_assumptions("default"))
    >>> print(result.totals.simple_payback_years)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
import logging
from typing import List, Optional

from greenport.berths import BerthElectrificationEngine
from greenport.buildings import calculate_buildings_lighting
from greenport.chargers import ChargerSizingEngine
from greenport.config import PortEngineConfig, get_config
from greenport.equipment import EquipmentEmissionsEngine
from greenport.grid import GridSizingEngine
from greenport.models import (
    AssumptionTable,
    CalculationRequest,
    CapexBreakdown,
    PortResult,
    PortServicesResult,
    PortTotals,
    TerminalConfig,
    TerminalResult,
)
from greenport.port_services import PortServicesEngine
from greenport.resolver import AssumptionResolver, AssumptionSet, EconomicContext

logger = logging.getLogger(__name__)


def _result_hash(result: PortResult) -> str:
    """SHA-256 over the canonical JSON of a result without its hash."""
    payload = result.model_dump(mode="json", exclude={"provenance_hash"})
    serialized = json.dumps(payload, sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


def _reference_gaps(terminal: TerminalResult) -> List[str]:
    gaps = set()
    for item in terminal.baseline_equipment + terminal.scenario_equipment:
        if not item.reference_found:
            gaps.add(f"{AssumptionTable.EQUIPMENT.value}.{item.equipment_key}")
    for berth in terminal.berths:
        if not berth.design_reference_found and berth.design_segment_key:
            gaps.add(f"{AssumptionTable.FLEET_OPS.value}.{berth.design_segment_key}")
        for call in berth.vessel_calls:
            if not call.reference_found:
                gaps.add(f"{AssumptionTable.FLEET_OPS.value}.{call.vessel_segment_key}")
    return sorted(gaps)


# ===========================================================================
# PortAggregator
# ===========================================================================


class PortAggregator:
    """Runs every calculator over a request and aggregates the results.

    Attributes:
        config: Engine configuration shared with the calculators.
    """

    def __init__(self, config: Optional[PortEngineConfig] = None) -> None:
        self.config = config or get_config()
        self.equipment = EquipmentEmissionsEngine(self.config)
        self.chargers = ChargerSizingEngine()
        self.berths = BerthElectrificationEngine()
        self.grid = GridSizingEngine(self.config)
        self.port_services = PortServicesEngine()

    def calculate(
        self,
        request: CalculationRequest,
        assumptions: AssumptionSet,
    ) -> PortResult:
        """Calculate a port under baseline and scenario.

        Args:
            request: Validated calculation request.
            assumptions: Complete assumption set of the active profile.

        Returns:
            Immutable PortResult with provenance hash.

        Raises:
            AssumptionLoadError: If the assumption set is incomplete.
        """
        assumptions.require_complete()
        resolver = AssumptionResolver(assumptions)
        economics = EconomicContext.from_resolver(
            resolver,
            hours_per_year=self.config.hours_per_year,
            motor_efficiency=self.config.electric_motor_efficiency,
        )

        terminals = [
            self.calculate_terminal(terminal, resolver, economics)
            for terminal in request.terminals
        ]
        services: Optional[PortServicesResult] = None
        if request.port_services is not None:
            services = self.port_services.calculate(
                request.port_services, request.terminals, resolver, economics,
            )

        result = PortResult(
            port=request.port,
            terminals=terminals,
            port_services=services,
            totals=self.port_totals(terminals, services),
            economic_assumptions_used=resolver.economic_map(),
            assumption_profile=assumptions.profile,
            assumption_fingerprint=assumptions.fingerprint,
        )
        result = result.model_copy(update={"provenance_hash": _result_hash(result)})
        logger.debug(
            "Calculated %d terminals under profile %s: capex=%.2f savings=%.2f",
            len(terminals), assumptions.profile,
            result.totals.total_capex_usd, result.totals.annual_opex_savings_usd,
        )
        return result

    def calculate_terminal(
        self,
        terminal: TerminalConfig,
        resolver: AssumptionResolver,
        economics: EconomicContext,
    ) -> TerminalResult:
        """Calculate one terminal under baseline and scenario."""
        baseline_items, baseline_totals = self.equipment.calculate_baseline(
            terminal, resolver, economics,
        )
        scenario_items, scenario_totals = self.equipment.calculate_scenario(
            terminal, resolver, economics,
        )
        charger_items, charger_totals = self.chargers.calculate(
            self.equipment.new_battery_units(scenario_items),
            resolver,
            terminal.charger_overrides,
        )
        berth_items, berth_totals = self.berths.calculate(terminal, resolver, economics)

        buildings = None
        if terminal.buildings_lighting is not None:
            buildings = calculate_buildings_lighting(
                terminal.buildings_lighting, resolver, economics,
            )
        buildings_kwh = buildings.total_kwh if buildings else 0.0
        buildings_co2 = buildings.co2_tons if buildings else 0.0
        buildings_cost = buildings.energy_cost_usd if buildings else 0.0

        baseline_kwh = (
            baseline_totals.total_kwh + berth_totals.baseline_shore_power_kwh + buildings_kwh
        )
        scenario_kwh = (
            scenario_totals.total_kwh + berth_totals.scenario_shore_power_kwh + buildings_kwh
        )

        grid = self.grid.calculate(
            equipment_peak_mw=scenario_totals.grid_peak_kw / 1000.0,
            berth_peak_mw=berth_totals.total_new_peak_mw,
            evse_peak_mw=charger_totals.total_power_kw / 1000.0,
            cable_length_m=terminal.cable_length_m,
            scenario_kwh=scenario_kwh,
            resolver=resolver,
        )

        baseline_co2 = (
            baseline_totals.total_co2_tons + berth_totals.baseline_co2_tons + buildings_co2
        )
        scenario_co2 = (
            scenario_totals.total_co2_tons + berth_totals.scenario_co2_tons + buildings_co2
        )
        baseline_opex = (
            baseline_totals.total_opex_usd + berth_totals.baseline_cost_usd + buildings_cost
        )
        scenario_opex = (
            scenario_totals.total_opex_usd
            + charger_totals.total_annual_opex_usd
            + berth_totals.scenario_cost_usd
            + buildings_cost
            + grid.grid_opex_usd
        )
        capex = CapexBreakdown(
            equipment_usd=scenario_totals.total_capex_usd,
            charger_usd=charger_totals.total_capex_usd,
            ops_usd=berth_totals.total_ops_capex_usd,
            dc_usd=berth_totals.total_dc_capex_usd,
            grid_usd=grid.total_grid_capex_usd,
            total_usd=(
                scenario_totals.total_capex_usd
                + charger_totals.total_capex_usd
                + berth_totals.total_ops_capex_usd
                + berth_totals.total_dc_capex_usd
                + grid.total_grid_capex_usd
            ),
        )

        result = TerminalResult(
            terminal_id=terminal.id,
            terminal_name=terminal.name,
            terminal_type=terminal.terminal_type,
            annual_throughput=terminal.throughput,
            baseline_equipment=baseline_items,
            baseline_totals=baseline_totals,
            scenario_equipment=scenario_items,
            scenario_totals=scenario_totals,
            chargers=charger_items,
            charger_totals=charger_totals,
            berths=berth_items,
            berth_totals=berth_totals,
            buildings_lighting=buildings,
            grid=grid,
            capex=capex,
            baseline_diesel_liters=(
                baseline_totals.total_diesel_liters + berth_totals.baseline_diesel_liters
            ),
            baseline_kwh=baseline_kwh,
            baseline_co2_tons=baseline_co2,
            scenario_diesel_liters=(
                scenario_totals.total_diesel_liters + berth_totals.scenario_diesel_liters
            ),
            scenario_kwh=scenario_kwh,
            scenario_co2_tons=scenario_co2,
            total_baseline_opex_usd=baseline_opex,
            total_scenario_opex_usd=scenario_opex,
            annual_opex_savings_usd=baseline_opex - scenario_opex,
            annual_co2_savings_tons=baseline_co2 - scenario_co2,
        )
        gaps = _reference_gaps(result)
        if gaps:
            result = result.model_copy(update={"reference_gaps": gaps})
        return result

    @staticmethod
    def port_totals(
        terminals: List[TerminalResult],
        services: Optional[PortServicesResult],
    ) -> PortTotals:
        """Sum terminals and port services into port totals."""
        baseline_diesel = sum(t.baseline_diesel_liters for t in terminals)
        baseline_kwh = sum(t.baseline_kwh for t in terminals)
        baseline_co2 = sum(t.baseline_co2_tons for t in terminals)
        baseline_opex = sum(t.total_baseline_opex_usd for t in terminals)
        scenario_diesel = sum(t.scenario_diesel_liters for t in terminals)
        scenario_kwh = sum(t.scenario_kwh for t in terminals)
        scenario_co2 = sum(t.scenario_co2_tons for t in terminals)
        scenario_opex = sum(t.total_scenario_opex_usd for t in terminals)
        services_capex = 0.0

        if services is not None:
            baseline_diesel += services.baseline_tug_fuel_liters + services.baseline_pilot_fuel_liters
            baseline_kwh += services.baseline_tug_energy_kwh + services.baseline_pilot_energy_kwh
            baseline_co2 += services.baseline_co2_tons
            baseline_opex += services.baseline_total_opex_usd
            scenario_diesel += services.scenario_tug_fuel_liters + services.scenario_pilot_fuel_liters
            scenario_kwh += services.scenario_tug_energy_kwh + services.scenario_pilot_energy_kwh
            scenario_co2 += services.scenario_co2_tons
            scenario_opex += services.scenario_total_opex_usd
            services_capex = services.total_capex_usd

        equipment_capex = sum(t.capex.equipment_usd for t in terminals)
        charger_capex = sum(t.capex.charger_usd for t in terminals)
        ops_capex = sum(t.capex.ops_usd for t in terminals)
        dc_capex = sum(t.capex.dc_usd for t in terminals)
        grid_capex = sum(t.capex.grid_usd for t in terminals)
        total_capex = (
            equipment_capex + charger_capex + ops_capex + dc_capex + grid_capex
            + services_capex
        )

        co2_saved = baseline_co2 - scenario_co2
        savings = baseline_opex - scenario_opex

        return PortTotals(
            baseline_diesel_liters=baseline_diesel,
            baseline_kwh=baseline_kwh,
            baseline_co2_tons=baseline_co2,
            baseline_opex_usd=baseline_opex,
            scenario_diesel_liters=scenario_diesel,
            scenario_kwh=scenario_kwh,
            scenario_co2_tons=scenario_co2,
            scenario_opex_usd=scenario_opex,
            equipment_capex_usd=equipment_capex,
            charger_capex_usd=charger_capex,
            ops_capex_usd=ops_capex,
            dc_capex_usd=dc_capex,
            grid_capex_usd=grid_capex,
            port_services_capex_usd=services_capex,
            total_capex_usd=total_capex,
            diesel_liters_saved=baseline_diesel - scenario_diesel,
            co2_tons_saved=co2_saved,
            co2_reduction_percent=(
                co2_saved / baseline_co2 * 100.0 if baseline_co2 > 0 else 0.0
            ),
            annual_opex_delta_usd=scenario_opex - baseline_opex,
            annual_opex_savings_usd=savings,
            simple_payback_years=total_capex / savings if savings > 0 else None,
        )


def calculate(
    request: CalculationRequest,
    assumptions: AssumptionSet,
    config: Optional[PortEngineConfig] = None,
) -> PortResult:
    """Calculate a port; see :meth:`PortAggregator.calculate`."""
    return PortAggregator(config).calculate(request, assumptions)


__all__ = [
    "PortAggregator",
    "calculate",
]
