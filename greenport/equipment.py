# -*- coding: utf-8 -*-
"""
EquipmentEmissionsEngine - AGENT-PORT-001: Port Electrification Engine

Annual energy, fuel, CO2, OPEX and CAPEX of terminal equipment classes under
the baseline and scenario configuration.

Per-unit demand (throughput method):
    kwh_per_unit    = kwh_per_teu    * throughput / teu_ratio
    liters_per_unit = liters_per_teu * throughput / teu_ratio

Reefer plugs use capacity instead of throughput:
    kwh_per_unit = peak_power_kw * reefer_utilization * hours_per_year

Fleet split:
    baseline:  diesel = existing_diesel, electric = existing_electric
    scenario:  converted = min(num_to_convert, existing_diesel)
               diesel    = existing_diesel - converted
               electric  = existing_electric + converted + num_to_add

Costs:
    maintenance = opex * diesel + opex * (1 - maintenance_saving) * electric
    capex       = (converted + added) * (capex_usd + install_cost_usd)

Zero-Hallucination Guarantees:
    - Every coefficient comes from the resolved equipment row
    - Unknown equipment keys yield zero-contribution entries
    - Pre-existing electric units never carry CAPEX

Example:
    >>> from greenport.equipment import EquipmentEmissionsEngine
    >>> engine = EquipmentEmissionsEngine()
    >>> items, totals = engine.calculate_scenario(terminal, resolver, economics)
    >>> print(totals.total_capex_usd)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from greenport.config import PortEngineConfig, get_config
from greenport.models import (
    EquipmentCategory,
    EquipmentLineItem,
    EquipmentRow,
    EquipmentTotals,
    TerminalConfig,
)
from greenport.resolver import AssumptionResolver, EconomicContext

logger = logging.getLogger(__name__)

#: Equipment class sized by plug capacity rather than throughput.
REEFER_KEY = "reefer"

#: Equipment classes a terminal may declare.
EQUIPMENT_KEYS = frozenset({
    "sts_crane",
    "rtg_crane",
    "rmg_crane",
    "asc",
    "straddle_carrier",
    "agv",
    "reach_stacker",
    "ech",
    "terminal_tractor",
    "high_bay_storage",
    "mobile_harbor_crane",
    "portal_crane",
    REEFER_KEY,
})


# ===========================================================================
# EquipmentEmissionsEngine
# ===========================================================================


class EquipmentEmissionsEngine:
    """Stateless calculator for terminal equipment classes.

    Attributes:
        config: Engine configuration (hours per year).
    """

    def __init__(self, config: Optional[PortEngineConfig] = None) -> None:
        self.config = config or get_config()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def calculate_baseline(
        self,
        terminal: TerminalConfig,
        resolver: AssumptionResolver,
        economics: EconomicContext,
    ) -> Tuple[List[EquipmentLineItem], EquipmentTotals]:
        """Calculate the existing fleet of a terminal.

        Args:
            terminal: Terminal configuration.
            resolver: Assumption resolver.
            economics: Prices and emission factors.

        Returns:
            Tuple of (line items, totals).
        """
        items: List[EquipmentLineItem] = []
        for key, entry in terminal.baseline_equipment.items():
            if entry.existing_diesel + entry.existing_electric <= 0:
                continue
            items.append(self._line_item(
                key,
                resolver.equipment(key),
                terminal.throughput,
                economics,
                diesel_units=entry.existing_diesel,
                electric_units=entry.existing_electric,
            ))
        return items, self._totals(items)

    def calculate_scenario(
        self,
        terminal: TerminalConfig,
        resolver: AssumptionResolver,
        economics: EconomicContext,
    ) -> Tuple[List[EquipmentLineItem], EquipmentTotals]:
        """Calculate the electrified fleet of a terminal.

        Classes present only in the baseline keep their diesel units; classes
        present only in the scenario start from an empty fleet.

        Args:
            terminal: Terminal configuration.
            resolver: Assumption resolver.
            economics: Prices and emission factors.

        Returns:
            Tuple of (line items, totals).
        """
        keys = list(terminal.baseline_equipment)
        keys.extend(k for k in terminal.scenario_equipment if k not in keys)

        items: List[EquipmentLineItem] = []
        for key in keys:
            baseline = terminal.baseline_equipment.get(key)
            scenario = terminal.scenario_equipment.get(key)
            existing_diesel = baseline.existing_diesel if baseline else 0
            existing_electric = baseline.existing_electric if baseline else 0
            to_convert = scenario.num_to_convert if scenario else 0
            to_add = scenario.num_to_add if scenario else 0

            converted = min(to_convert, existing_diesel)
            if converted < to_convert:
                logger.warning(
                    "Terminal %s: num_to_convert %d exceeds existing diesel "
                    "%d for %s; clamped",
                    terminal.id, to_convert, existing_diesel, key,
                )

            diesel_units = existing_diesel - converted
            electric_units = existing_electric + converted + to_add
            if diesel_units + electric_units <= 0:
                continue

            items.append(self._line_item(
                key,
                resolver.equipment(key),
                terminal.throughput,
                economics,
                diesel_units=diesel_units,
                electric_units=electric_units,
                converted_units=converted,
                added_units=to_add,
            ))
        return items, self._totals(items)

    @staticmethod
    def new_battery_units(items: List[EquipmentLineItem]) -> Dict[str, int]:
        """Return newly electrified battery-powered units by equipment key."""
        counts: Dict[str, int] = {}
        for item in items:
            new_units = item.converted_units + item.added_units
            if (
                item.equipment_category == EquipmentCategory.BATTERY_POWERED
                and new_units > 0
            ):
                counts[item.equipment_key] = new_units
        return counts

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _per_unit_demand(
        self,
        row: EquipmentRow,
        throughput: float,
        economics: EconomicContext,
    ) -> Tuple[float, float]:
        """Return (kWh, liters) one unit of the class needs per year."""
        if row.equipment_key == REEFER_KEY:
            kwh = row.peak_power_kw * economics.reefer_utilization * economics.hours_per_year
            return kwh, 0.0
        if row.teu_ratio <= 0:
            logger.warning(
                "Equipment %s has non-positive teu_ratio %s; demand set to zero",
                row.equipment_key, row.teu_ratio,
            )
            return 0.0, 0.0
        return (
            row.kwh_per_teu * throughput / row.teu_ratio,
            row.liters_per_teu * throughput / row.teu_ratio,
        )

    def _line_item(
        self,
        key: str,
        row: Optional[EquipmentRow],
        throughput: float,
        economics: EconomicContext,
        diesel_units: int,
        electric_units: int,
        converted_units: int = 0,
        added_units: int = 0,
    ) -> EquipmentLineItem:
        if row is None:
            logger.warning("Unknown equipment key %s; zero contribution", key)
            return EquipmentLineItem(
                equipment_key=key,
                display_name=key,
                reference_found=False,
                diesel_units=diesel_units,
                electric_units=electric_units,
                converted_units=converted_units,
                added_units=added_units,
            )

        kwh_per_unit, liters_per_unit = self._per_unit_demand(row, throughput, economics)
        liters = liters_per_unit * diesel_units
        kwh = kwh_per_unit * electric_units
        fuel_cost = liters * economics.diesel_price
        energy_cost = kwh * economics.electricity_price
        maintenance = (
            row.annual_opex_usd * diesel_units
            + row.annual_opex_usd * (1.0 - economics.maintenance_saving) * electric_units
        )
        new_units = converted_units + added_units

        return EquipmentLineItem(
            equipment_key=key,
            display_name=row.display_name or key,
            equipment_category=row.equipment_category,
            reference_found=True,
            diesel_units=diesel_units,
            electric_units=electric_units,
            converted_units=converted_units,
            added_units=added_units,
            annual_diesel_liters=liters,
            annual_kwh=kwh,
            annual_co2_tons=economics.diesel_co2_tons(liters) + economics.electric_co2_tons(kwh),
            annual_fuel_cost_usd=fuel_cost,
            annual_energy_cost_usd=energy_cost,
            annual_maintenance_usd=maintenance,
            annual_total_opex_usd=fuel_cost + energy_cost + maintenance,
            unit_capex_usd=row.capex_usd,
            install_cost_usd=row.install_cost_usd,
            total_capex_usd=new_units * (row.capex_usd + row.install_cost_usd),
            new_peak_kw=new_units * row.peak_power_kw,
            lifespan_years=row.lifespan_years,
        )

    @staticmethod
    def _totals(items: List[EquipmentLineItem]) -> EquipmentTotals:
        return EquipmentTotals(
            total_diesel_liters=sum(i.annual_diesel_liters for i in items),
            total_kwh=sum(i.annual_kwh for i in items),
            total_co2_tons=sum(i.annual_co2_tons for i in items),
            total_opex_usd=sum(i.annual_total_opex_usd for i in items),
            total_capex_usd=sum(i.total_capex_usd for i in items),
            grid_peak_kw=sum(
                i.new_peak_kw for i in items
                if i.equipment_category == EquipmentCategory.GRID_POWERED
            ),
        )


__all__ = [
    "REEFER_KEY",
    "EQUIPMENT_KEYS",
    "EquipmentEmissionsEngine",
]
