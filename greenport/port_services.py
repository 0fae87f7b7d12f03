# -*- coding: utf-8 -*-
"""
PortServicesEngine - AGENT-PORT-001: Port Electrification Engine

Port-wide tug and pilot boat fleet: service demand from vessel traffic,
fleet energy under the baseline and scenario, and charging CAPEX for newly
electrified craft.

Demand (over every vessel-call record of every berth):
    tug_trips   = sum(annual_calls * tugs_per_call(segment))
    tug_hours   = tug_trips * tug_avg_hours_per_call
    min_tugs    = max(ceil(max_tugs_per_call),
                      ceil(tug_hours / (hours_per_year * utilization_factor)))
Pilot boats follow the same rule with ``pilots_per_call``.

Fleet energy: operating hours are shared across the fleet in proportion to
diesel and electric craft.
    diesel_L     = diesel_hours * service_fuel_l_per_hour
    electric_kWh = electric_hours * service_fuel_l_per_hour * useful_kwh_per_liter

Example:
    >>> from greenport.port_services import PortServicesEngine
    >>> result = PortServicesEngine().calculate(
    ...     request.port_services, request.terminals, resolver, economics,
    ... )
    >>> print(result.min_tugs_required, result.total_capex_usd)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from greenport.models import (
    PortServicesConfig,
    PortServicesResult,
    TerminalConfig,
)
from greenport.resolver import AssumptionResolver, EconomicContext

logger = logging.getLogger(__name__)

TUG_SEGMENT_KEY = "tug_70bp"
PILOT_SEGMENT_KEY = "pilot_boat"
DEFAULT_HOURS_PER_CALL = 4.0


@dataclass(frozen=True)
class CraftProfile:
    """Operating and cost figures of one service craft type."""

    fuel_l_per_hour: float
    annual_opex_usd: float
    charging_capex_usd: float
    avg_hours_per_call: float


#: Fallback profiles when the fleet table lacks the craft row.
DEFAULT_PROFILES: Dict[str, CraftProfile] = {
    TUG_SEGMENT_KEY: CraftProfile(300.0, 150_000.0, 1_500_000.0, DEFAULT_HOURS_PER_CALL),
    PILOT_SEGMENT_KEY: CraftProfile(60.0, 40_000.0, 400_000.0, DEFAULT_HOURS_PER_CALL),
}


@dataclass(frozen=True)
class FleetEnergy:
    """Annual figures of a diesel/electric craft fleet."""

    fuel_liters: float = 0.0
    energy_kwh: float = 0.0
    maintenance_usd: float = 0.0


class PortServicesEngine:
    """Stateless tug and pilot boat calculator."""

    def calculate(
        self,
        services: PortServicesConfig,
        terminals: Sequence[TerminalConfig],
        resolver: AssumptionResolver,
        economics: EconomicContext,
    ) -> PortServicesResult:
        """Calculate the port-service fleet.

        Args:
            services: Baseline fleet and scenario plan.
            terminals: Terminals whose vessel calls drive demand.
            resolver: Assumption resolver.
            economics: Prices, emission factors and utilization.

        Returns:
            PortServicesResult.
        """
        baseline = services.baseline
        scenario = services.scenario
        tug = self.craft_profile(TUG_SEGMENT_KEY, resolver)
        pilot = self.craft_profile(PILOT_SEGMENT_KEY, resolver)

        tug_trips = pilot_trips = 0.0
        max_tugs = max_pilots = 0.0
        for terminal in terminals:
            for berth in terminal.berths:
                for call in berth.vessel_calls:
                    row = resolver.fleet(call.vessel_segment_key)
                    if row is None:
                        logger.warning(
                            "Berth %s: unknown vessel segment '%s'; no tug or pilot demand counted",
                            berth.id, call.vessel_segment_key,
                        )
                        continue
                    if call.annual_calls <= 0:
                        continue
                    tug_trips += call.annual_calls * row.tugs_per_call
                    pilot_trips += call.annual_calls * row.pilots_per_call
                    max_tugs = max(max_tugs, row.tugs_per_call)
                    max_pilots = max(max_pilots, row.pilots_per_call)

        tug_hours = tug_trips * self._hours_per_call(baseline.tug_avg_hours_per_call, tug)
        pilot_hours = pilot_trips * self._hours_per_call(
            baseline.pilot_avg_hours_per_call, pilot,
        )

        tugs_converted = min(scenario.tugs_to_convert, baseline.tugs_diesel)
        pilots_converted = min(scenario.pilot_boats_to_convert, baseline.pilot_boats_diesel)
        if tugs_converted < scenario.tugs_to_convert:
            logger.warning(
                "tugs_to_convert %d exceeds diesel tugs %d; clamped",
                scenario.tugs_to_convert, baseline.tugs_diesel,
            )
        if pilots_converted < scenario.pilot_boats_to_convert:
            logger.warning(
                "pilot_boats_to_convert %d exceeds diesel pilot boats %d; clamped",
                scenario.pilot_boats_to_convert, baseline.pilot_boats_diesel,
            )

        fleets = {
            "baseline": (
                baseline.tugs_diesel,
                baseline.tugs_electric,
                baseline.pilot_boats_diesel,
                baseline.pilot_boats_electric,
            ),
            "scenario": (
                baseline.tugs_diesel - tugs_converted,
                baseline.tugs_electric + tugs_converted + scenario.tugs_to_add,
                baseline.pilot_boats_diesel - pilots_converted,
                baseline.pilot_boats_electric + pilots_converted + scenario.pilot_boats_to_add,
            ),
        }

        figures: Dict[str, float] = {}
        for name, (tugs_d, tugs_e, pilots_d, pilots_e) in fleets.items():
            tug_energy = self.fleet_energy(tug_hours, tugs_d, tugs_e, tug, economics)
            pilot_energy = self.fleet_energy(pilot_hours, pilots_d, pilots_e, pilot, economics)
            liters = tug_energy.fuel_liters + pilot_energy.fuel_liters
            kwh = tug_energy.energy_kwh + pilot_energy.energy_kwh
            fuel_cost = liters * economics.diesel_price
            energy_cost = kwh * economics.electricity_price
            maintenance = tug_energy.maintenance_usd + pilot_energy.maintenance_usd
            figures.update({
                f"{name}_tugs_diesel": tugs_d,
                f"{name}_tugs_electric": tugs_e,
                f"{name}_pilots_diesel": pilots_d,
                f"{name}_pilots_electric": pilots_e,
                f"{name}_tug_fuel_liters": tug_energy.fuel_liters,
                f"{name}_tug_energy_kwh": tug_energy.energy_kwh,
                f"{name}_pilot_fuel_liters": pilot_energy.fuel_liters,
                f"{name}_pilot_energy_kwh": pilot_energy.energy_kwh,
                f"{name}_co2_tons": (
                    economics.diesel_co2_tons(liters) + economics.electric_co2_tons(kwh)
                ),
                f"{name}_fuel_cost_usd": fuel_cost,
                f"{name}_energy_cost_usd": energy_cost,
                f"{name}_maintenance_usd": maintenance,
                f"{name}_total_opex_usd": fuel_cost + energy_cost + maintenance,
            })

        tug_capex = (tugs_converted + scenario.tugs_to_add) * tug.charging_capex_usd
        pilot_capex = (
            (pilots_converted + scenario.pilot_boats_to_add) * pilot.charging_capex_usd
        )

        return PortServicesResult(
            total_tug_trips=tug_trips,
            total_tug_hours=tug_hours,
            total_pilot_trips=pilot_trips,
            total_pilot_hours=pilot_hours,
            min_tugs_required=self.min_required(max_tugs, tug_hours, economics),
            min_pilots_required=self.min_required(max_pilots, pilot_hours, economics),
            max_tugs_per_call=max_tugs,
            max_pilots_per_call=max_pilots,
            tug_charging_capex_usd=tug_capex,
            pilot_charging_capex_usd=pilot_capex,
            total_capex_usd=tug_capex + pilot_capex,
            **figures,
        )

    # ------------------------------------------------------------------
    # Building blocks
    # ------------------------------------------------------------------

    @staticmethod
    def craft_profile(segment_key: str, resolver: AssumptionResolver) -> CraftProfile:
        """Resolve a craft profile, falling back to the documented defaults."""
        default = DEFAULT_PROFILES[segment_key]
        row = resolver.fleet(segment_key)
        if row is None:
            logger.warning("Fleet row %s missing; using default craft profile", segment_key)
            return default
        return CraftProfile(
            fuel_l_per_hour=row.service_fuel_l_per_hour,
            annual_opex_usd=row.annual_opex_usd,
            charging_capex_usd=(
                default.charging_capex_usd if row.dc_capex_usd is None
                else row.dc_capex_usd
            ),
            avg_hours_per_call=(
                row.avg_hours_per_call if row.avg_hours_per_call > 0
                else DEFAULT_HOURS_PER_CALL
            ),
        )

    @staticmethod
    def _hours_per_call(configured: Optional[float], profile: CraftProfile) -> float:
        return profile.avg_hours_per_call if configured is None else configured

    @staticmethod
    def min_required(
        max_per_call: float,
        total_hours: float,
        economics: EconomicContext,
    ) -> int:
        """Smallest fleet covering both peak assists and annual hours."""
        if max_per_call <= 0 and total_hours <= 0:
            return 0
        available = economics.hours_per_year * economics.utilization_factor
        by_hours = math.ceil(total_hours / available) if available > 0 else 0
        return int(max(math.ceil(max_per_call), by_hours))

    @staticmethod
    def fleet_energy(
        hours: float,
        diesel_units: int,
        electric_units: int,
        profile: CraftProfile,
        economics: EconomicContext,
    ) -> FleetEnergy:
        """Split service hours across a mixed fleet."""
        units = diesel_units + electric_units
        maintenance = (
            profile.annual_opex_usd * diesel_units
            + profile.annual_opex_usd * (1.0 - economics.maintenance_saving) * electric_units
        )
        if units <= 0:
            return FleetEnergy(maintenance_usd=maintenance)
        diesel_hours = hours * diesel_units / units
        electric_hours = hours * electric_units / units
        return FleetEnergy(
            fuel_liters=diesel_hours * profile.fuel_l_per_hour,
            energy_kwh=(
                electric_hours * profile.fuel_l_per_hour * economics.useful_kwh_per_liter
            ),
            maintenance_usd=maintenance,
        )


__all__ = [
    "TUG_SEGMENT_KEY",
    "PILOT_SEGMENT_KEY",
    "DEFAULT_HOURS_PER_CALL",
    "DEFAULT_PROFILES",
    "CraftProfile",
    "FleetEnergy",
    "PortServicesEngine",
]
