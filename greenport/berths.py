# -*- coding: utf-8 -*-
"""
BerthElectrificationEngine - AGENT-PORT-001: Port Electrification Engine

Onshore Power Supply (OPS) and DC charging infrastructure per berth.

Two bases are kept apart:

1. **Design basis** (CAPEX and peak demand): the berth's largest vessel
   segment (``max_vessel_segment_key``) sizes OPS power, the
   transformer/converter/civil works CAPEX and the DC charger.
2. **Operating basis** (annual energy and OPEX): the berth's vessel-call
   records. Each record contributes
       hours  = annual_calls * avg_berth_hours
       energy = hours * ops_power_mw(record segment) * 1000   [kWh]
   Berth energy is the sum of record energies. Berth operating MW is
       total energy / total hours / 1000
   i.e. the berth-hours-weighted average of the record MW, 0 with no hours.

Vessels at berth burn auxiliary diesel unless shore power is in place:
    liters = kWh / (diesel_energy_density * engine_efficiency / motor_efficiency)

Electrification state per berth, separately for OPS and DC:
    none         -> no infrastructure, vessels on diesel
    existing     -> already installed, zero incremental CAPEX
    scenario_new -> installed by the scenario, full design-basis CAPEX

Example:
    >>> from greenport.berths import BerthElectrificationEngine
    >>> items, totals = BerthElectrificationEngine().calculate(
    ...     terminal, resolver, economics,
    ... )
    >>> print(totals.total_ops_capex_usd)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional, Tuple

from greenport.models import (
    BerthDefinition,
    BerthLineItem,
    BerthScenarioConfig,
    BerthVesselCall,
    BerthTotals,
    ElectrificationState,
    FleetOpsRow,
    TerminalConfig,
    VesselCallLineItem,
)
from greenport.resolver import AssumptionResolver, EconomicContext

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Fallbacks for vessel segments missing from piece_fleet_ops
# ---------------------------------------------------------------------------

DEFAULT_OPS_POWER_MW = 2.0
DEFAULT_TRANSFORMER_CAPEX_USD = 350_000.0
DEFAULT_CONVERTER_CAPEX_USD = 280_000.0
DEFAULT_CIVIL_WORKS_CAPEX_USD = 124_000.0
DEFAULT_OPS_OPEX_USD = 10_000.0
DEFAULT_DC_POWER_MW = 1.0
DEFAULT_DC_CAPEX_USD = 500_000.0
DEFAULT_DC_OPEX_USD = 5_000.0


@dataclass(frozen=True)
class DesignBasis:
    """Infrastructure sizing of a berth from its largest vessel segment."""

    segment_key: str
    segment_name: str
    reference_found: bool
    ops_power_mw: float
    transformer_capex_usd: float
    converter_capex_usd: float
    civil_works_capex_usd: float
    ops_opex_usd: float
    dc_power_mw: float
    dc_capex_usd: float
    dc_opex_usd: float

    @property
    def ops_capex_usd(self) -> float:
        return (
            self.transformer_capex_usd
            + self.converter_capex_usd
            + self.civil_works_capex_usd
        )

    @classmethod
    def from_row(cls, segment_key: str, row: Optional[FleetOpsRow]) -> DesignBasis:
        """Build the basis from a fleet row, falling back to defaults."""
        if row is None:
            return cls(
                segment_key=segment_key,
                segment_name=segment_key,
                reference_found=False,
                ops_power_mw=DEFAULT_OPS_POWER_MW,
                transformer_capex_usd=DEFAULT_TRANSFORMER_CAPEX_USD,
                converter_capex_usd=DEFAULT_CONVERTER_CAPEX_USD,
                civil_works_capex_usd=DEFAULT_CIVIL_WORKS_CAPEX_USD,
                ops_opex_usd=DEFAULT_OPS_OPEX_USD,
                dc_power_mw=DEFAULT_DC_POWER_MW,
                dc_capex_usd=DEFAULT_DC_CAPEX_USD,
                dc_opex_usd=DEFAULT_DC_OPEX_USD,
            )
        return cls(
            segment_key=segment_key,
            segment_name=row.display_name or segment_key,
            reference_found=True,
            ops_power_mw=row.ops_power_mw,
            transformer_capex_usd=row.transformer_capex_usd,
            converter_capex_usd=row.converter_capex_usd,
            civil_works_capex_usd=row.civil_works_capex_usd,
            ops_opex_usd=row.annual_opex_usd,
            dc_power_mw=_or_default(row.dc_power_mw, DEFAULT_DC_POWER_MW),
            dc_capex_usd=_or_default(row.dc_capex_usd, DEFAULT_DC_CAPEX_USD),
            dc_opex_usd=_or_default(row.dc_annual_opex_usd, DEFAULT_DC_OPEX_USD),
        )


def _or_default(value: Optional[float], default: float) -> float:
    return default if value is None else value


def electrification_state(existing: bool, enabled: bool) -> ElectrificationState:
    """Classify OPS or DC infrastructure of a berth."""
    if existing:
        return ElectrificationState.EXISTING
    if enabled:
        return ElectrificationState.SCENARIO_NEW
    return ElectrificationState.NONE


# ===========================================================================
# BerthElectrificationEngine
# ===========================================================================


class BerthElectrificationEngine:
    """Stateless OPS/DC calculator for the berths of a terminal."""

    def calculate(
        self,
        terminal: TerminalConfig,
        resolver: AssumptionResolver,
        economics: EconomicContext,
    ) -> Tuple[List[BerthLineItem], BerthTotals]:
        """Calculate every berth of a terminal.

        Args:
            terminal: Terminal with berths and berth scenarios.
            resolver: Assumption resolver.
            economics: Prices and emission factors.

        Returns:
            Tuple of (line items in berth order, totals).
        """
        items = [
            self.calculate_berth(
                berth, terminal.berth_scenario(berth.id), resolver, economics,
            )
            for berth in terminal.berths
        ]
        return items, self._totals(items)

    def calculate_berth(
        self,
        berth: BerthDefinition,
        scenario: BerthScenarioConfig,
        resolver: AssumptionResolver,
        economics: EconomicContext,
    ) -> BerthLineItem:
        """Calculate one berth.

        Args:
            berth: Berth definition.
            scenario: Scenario OPS/DC choice for the berth.
            resolver: Assumption resolver.
            economics: Prices and emission factors.

        Returns:
            BerthLineItem with design, operating and cost figures.
        """
        design = DesignBasis.from_row(
            berth.max_vessel_segment_key,
            resolver.fleet(berth.max_vessel_segment_key),
        )
        if not design.reference_found:
            logger.warning(
                "Berth %s: unknown design segment '%s'; using default %.1f MW",
                berth.id, berth.max_vessel_segment_key, DEFAULT_OPS_POWER_MW,
            )

        calls = [self._vessel_call(berth.id, call, resolver) for call in berth.vessel_calls]
        total_calls = sum(c.annual_calls for c in calls)
        total_hours = sum(c.annual_berth_hours for c in calls)
        energy_kwh = sum(c.energy_kwh for c in calls)
        operating_mw = energy_kwh / total_hours / 1000.0 if total_hours > 0 else 0.0

        ops_state = electrification_state(berth.ops_existing, scenario.ops_enabled)
        dc_state = electrification_state(berth.dc_existing, scenario.dc_enabled)
        ops_new = ops_state == ElectrificationState.SCENARIO_NEW
        dc_new = dc_state == ElectrificationState.SCENARIO_NEW

        baseline = self._energy_account(
            energy_kwh, berth.ops_existing, economics,
        )
        scenario_account = self._energy_account(
            energy_kwh, berth.ops_existing or scenario.ops_enabled, economics,
        )
        baseline_infra = (
            (design.ops_opex_usd if berth.ops_existing else 0.0)
            + (design.dc_opex_usd if berth.dc_existing else 0.0)
        )
        scenario_infra = (
            (design.ops_opex_usd if ops_state != ElectrificationState.NONE else 0.0)
            + (design.dc_opex_usd if dc_state != ElectrificationState.NONE else 0.0)
        )

        return BerthLineItem(
            berth_id=berth.id,
            berth_name=berth.berth_name,
            berth_number=berth.berth_number,
            design_segment_key=design.segment_key,
            design_segment_name=design.segment_name,
            design_reference_found=design.reference_found,
            design_ops_power_mw=design.ops_power_mw,
            design_dc_power_mw=design.dc_power_mw,
            ops_state=ops_state,
            dc_state=dc_state,
            total_annual_calls=total_calls,
            total_annual_berth_hours=total_hours,
            operating_power_mw=operating_mw,
            operating_energy_kwh=energy_kwh,
            vessel_calls=calls,
            ops_transformer_capex_usd=design.transformer_capex_usd if ops_new else 0.0,
            ops_converter_capex_usd=design.converter_capex_usd if ops_new else 0.0,
            ops_civil_works_capex_usd=design.civil_works_capex_usd if ops_new else 0.0,
            ops_total_capex_usd=design.ops_capex_usd if ops_new else 0.0,
            dc_capex_usd=design.dc_capex_usd if dc_new else 0.0,
            new_peak_mw=(
                (design.ops_power_mw if ops_new else 0.0)
                + (design.dc_power_mw if dc_new else 0.0)
            ),
            baseline_diesel_liters=baseline[0],
            baseline_shore_power_kwh=baseline[1],
            baseline_co2_tons=baseline[2],
            baseline_energy_cost_usd=baseline[3],
            baseline_infrastructure_opex_usd=baseline_infra,
            scenario_diesel_liters=scenario_account[0],
            scenario_shore_power_kwh=scenario_account[1],
            scenario_co2_tons=scenario_account[2],
            scenario_energy_cost_usd=scenario_account[3],
            scenario_infrastructure_opex_usd=scenario_infra,
        )

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _vessel_call(
        berth_id: str,
        call: BerthVesselCall,
        resolver: AssumptionResolver,
    ) -> VesselCallLineItem:
        row = resolver.fleet(call.vessel_segment_key)
        if row is None:
            logger.warning(
                "Berth %s: unknown vessel segment '%s'; using default %.1f MW",
                berth_id, call.vessel_segment_key, DEFAULT_OPS_POWER_MW,
            )
        power_mw = row.ops_power_mw if row is not None else DEFAULT_OPS_POWER_MW
        hours = call.annual_calls * call.avg_berth_hours
        return VesselCallLineItem(
            vessel_segment_key=call.vessel_segment_key,
            vessel_segment_name=(
                row.display_name if row is not None and row.display_name
                else call.vessel_segment_key
            ),
            reference_found=row is not None,
            annual_calls=call.annual_calls,
            avg_berth_hours=call.avg_berth_hours,
            annual_berth_hours=hours,
            operating_power_mw=power_mw,
            energy_kwh=hours * power_mw * 1000.0,
        )

    @staticmethod
    def _energy_account(
        energy_kwh: float,
        shore_power: bool,
        economics: EconomicContext,
    ) -> Tuple[float, float, float, float]:
        """Return (diesel L, shore kWh, CO2 t, energy cost USD)."""
        if shore_power:
            return (
                0.0,
                energy_kwh,
                economics.electric_co2_tons(energy_kwh),
                energy_kwh * economics.electricity_price,
            )
        liters = economics.liters_for_kwh(energy_kwh)
        return (
            liters,
            0.0,
            economics.diesel_co2_tons(liters),
            liters * economics.diesel_price,
        )

    @staticmethod
    def _totals(items: List[BerthLineItem]) -> BerthTotals:
        return BerthTotals(
            total_ops_capex_usd=sum(i.ops_total_capex_usd for i in items),
            total_dc_capex_usd=sum(i.dc_capex_usd for i in items),
            total_new_peak_mw=sum(i.new_peak_mw for i in items),
            total_design_mw=sum(i.design_ops_power_mw for i in items),
            baseline_diesel_liters=sum(i.baseline_diesel_liters for i in items),
            baseline_shore_power_kwh=sum(i.baseline_shore_power_kwh for i in items),
            baseline_co2_tons=sum(i.baseline_co2_tons for i in items),
            baseline_cost_usd=sum(
                i.baseline_energy_cost_usd + i.baseline_infrastructure_opex_usd
                for i in items
            ),
            scenario_diesel_liters=sum(i.scenario_diesel_liters for i in items),
            scenario_shore_power_kwh=sum(i.scenario_shore_power_kwh for i in items),
            scenario_co2_tons=sum(i.scenario_co2_tons for i in items),
            scenario_cost_usd=sum(
                i.scenario_energy_cost_usd + i.scenario_infrastructure_opex_usd
                for i in items
            ),
        )


__all__ = [
    "DEFAULT_OPS_POWER_MW",
    "DEFAULT_TRANSFORMER_CAPEX_USD",
    "DEFAULT_CONVERTER_CAPEX_USD",
    "DEFAULT_CIVIL_WORKS_CAPEX_USD",
    "DEFAULT_OPS_OPEX_USD",
    "DEFAULT_DC_POWER_MW",
    "DEFAULT_DC_CAPEX_USD",
    "DEFAULT_DC_OPEX_USD",
    "DesignBasis",
    "electrification_state",
    "BerthElectrificationEngine",
]
