# -*- coding: utf-8 -*-
"""
PIECE Engine Data Models - AGENT-PORT-001: Port Electrification Engine

Pydantic v2 data models for the port electrification engine. Input models
describe a port under its baseline and scenario configuration, row models
describe the five assumption tables, and result models carry the immutable
output of a calculation.

Models:
    - Enums: TerminalType, PortSize, EquipmentCategory, ElectrificationState,
             AssumptionTable, OverrideChangeType
    - Input: PortConfig, BaselineEquipmentEntry, ScenarioEquipmentEntry,
             BerthVesselCall, BerthDefinition, BerthScenarioConfig,
             BuildingsLightingConfig, TerminalConfig, PortServicesBaseline,
             PortServicesScenario, PortServicesConfig, CalculationRequest
    - Assumption rows: EquipmentRow, EvseRow, FleetOpsRow, GridRow,
             EconomicRow, OverrideRow
    - Results: EquipmentLineItem, EquipmentTotals, ChargerLineItem,
             ChargerTotals, VesselCallLineItem, BerthLineItem, BerthTotals,
             GridResult, BuildingsLightingResult, PortServicesResult,
             CapexBreakdown, TerminalResult, PortTotals, PortResult
    - Audit: ProvenanceEntry

Units never mix within a field: money in USD, energy in kWh, mass in metric
tons, volume in liters, power in kW or MW as named.

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, Field

NonNegativeInt = Annotated[int, Field(ge=0)]


def _utcnow() -> datetime:
    """Return current UTC datetime with microseconds zeroed."""
    return datetime.now(timezone.utc).replace(microsecond=0)


# =============================================================================
# Enumerations
# =============================================================================


class TerminalType(str, Enum):
    """Terminal types handled by the engine."""
    CONTAINER = "container"
    CRUISE = "cruise"
    RORO = "roro"
    PORT_SERVICES = "port_services"


class PortSize(str, Enum):
    """Port size classification."""
    UNSPECIFIED = ""
    SMALL_FEEDER = "small_feeder"
    REGIONAL = "regional"
    HUB = "hub"
    MEGA_HUB = "mega_hub"


class EquipmentCategory(str, Enum):
    """How an equipment class draws electricity once electrified."""
    GRID_POWERED = "grid_powered"
    BATTERY_POWERED = "battery_powered"


class ElectrificationState(str, Enum):
    """OPS or DC state of a berth."""
    NONE = "none"
    EXISTING = "existing"
    SCENARIO_NEW = "scenario_new"


class AssumptionTable(str, Enum):
    """Reference tables that assumption overrides may target."""
    ECONOMIC = "economic_assumptions"
    EQUIPMENT = "piece_equipment"
    EVSE = "piece_evse"
    FLEET_OPS = "piece_fleet_ops"
    GRID = "piece_grid"


class OverrideChangeType(str, Enum):
    """Kinds of change recorded against an assumption profile."""
    INSERT = "insert"
    UPDATE = "update"
    DELETE = "delete"
    COPY_PROFILE = "copy_profile"
    DELETE_PROFILE = "delete_profile"


#: Row key column of each assumption table.
ROW_KEY_COLUMNS: Dict[str, str] = {
    AssumptionTable.ECONOMIC.value: "assumption_key",
    AssumptionTable.EQUIPMENT.value: "equipment_key",
    AssumptionTable.EVSE.value: "evse_key",
    AssumptionTable.FLEET_OPS.value: "vessel_segment_key",
    AssumptionTable.GRID.value: "component_key",
}


# =============================================================================
# Input Models
# =============================================================================


class PortConfig(BaseModel):
    """Port identity."""
    name: str = Field(default="", description="Port name")
    location: str = Field(default="", description="Port location")
    size_key: PortSize = Field(
        default=PortSize.UNSPECIFIED, description="Port size classification",
    )

    model_config = {"extra": "forbid"}


class BaselineEquipmentEntry(BaseModel):
    """Existing fleet of one equipment class."""
    existing_diesel: NonNegativeInt = Field(default=0, description="Diesel units in service")
    existing_electric: NonNegativeInt = Field(default=0, description="Electric units in service")

    model_config = {"extra": "forbid"}


class ScenarioEquipmentEntry(BaseModel):
    """Electrification plan for one equipment class."""
    num_to_convert: NonNegativeInt = Field(default=0, description="Diesel units replaced by electric")
    num_to_add: NonNegativeInt = Field(default=0, description="Additional electric units")

    model_config = {"extra": "forbid"}


class BerthVesselCall(BaseModel):
    """Vessel traffic of one segment at a berth."""
    id: str = Field(default="", description="Vessel call record identifier")
    vessel_segment_key: str = Field(..., description="Vessel segment key")
    annual_calls: float = Field(default=0.0, ge=0, description="Calls per year")
    avg_berth_hours: float = Field(default=0.0, ge=0, description="Average hours alongside per call")

    model_config = {"extra": "forbid"}


class BerthDefinition(BaseModel):
    """Physical berth with its design vessel class and traffic."""
    id: str = Field(..., min_length=1, description="Berth identifier")
    berth_number: int = Field(default=1, ge=1, description="Berth number")
    berth_name: str = Field(default="", description="Berth name")
    max_vessel_segment_key: str = Field(
        default="", description="Largest vessel segment the berth is designed for",
    )
    vessel_calls: List[BerthVesselCall] = Field(
        default_factory=list, description="Operating traffic records",
    )
    ops_existing: bool = Field(default=False, description="Shore power already installed")
    dc_existing: bool = Field(default=False, description="DC charging already installed")

    model_config = {"extra": "forbid"}


class BerthScenarioConfig(BaseModel):
    """Scenario choice for one berth."""
    berth_id: str = Field(..., description="Berth identifier")
    ops_enabled: bool = Field(default=False, description="Install shore power")
    dc_enabled: bool = Field(default=False, description="Install DC charging")

    model_config = {"extra": "forbid"}


class BuildingsLightingConfig(BaseModel):
    """Terminal buildings and yard lighting."""
    warehouse_sqm: float = Field(default=0.0, ge=0, description="Warehouse floor area")
    office_sqm: float = Field(default=0.0, ge=0, description="Office floor area")
    workshop_sqm: float = Field(default=0.0, ge=0, description="Workshop floor area")
    high_mast_lights: NonNegativeInt = Field(default=0, description="High-mast lights (1000 W)")
    area_lights: NonNegativeInt = Field(default=0, description="Area lights (400 W)")
    roadway_lights: NonNegativeInt = Field(default=0, description="Roadway lights (250 W)")
    annual_operating_hours: float = Field(
        default=8760.0, ge=0, description="Lighting hours per year",
    )

    model_config = {"extra": "forbid"}


class TerminalConfig(BaseModel):
    """One terminal under both baseline and scenario configuration."""
    id: str = Field(..., min_length=1, description="Terminal identifier")
    name: str = Field(default="", description="Terminal name")
    terminal_type: TerminalType = Field(
        default=TerminalType.CONTAINER, description="Terminal type",
    )
    annual_teu: float = Field(default=0.0, ge=0, description="Annual container throughput")
    annual_passengers: Optional[float] = Field(
        default=None, ge=0, description="Annual passengers (cruise)",
    )
    annual_ceu: Optional[float] = Field(
        default=None, ge=0, description="Annual car equivalent units (roro)",
    )
    berths: List[BerthDefinition] = Field(default_factory=list, description="Ordered berths")
    baseline_equipment: Dict[str, BaselineEquipmentEntry] = Field(
        default_factory=dict, description="Existing fleet by equipment key",
    )
    scenario_equipment: Dict[str, ScenarioEquipmentEntry] = Field(
        default_factory=dict, description="Electrification plan by equipment key",
    )
    berth_scenarios: List[BerthScenarioConfig] = Field(
        default_factory=list, description="Scenario OPS/DC choices by berth",
    )
    buildings_lighting: Optional[BuildingsLightingConfig] = Field(
        default=None, description="Buildings and lighting",
    )
    charger_overrides: Dict[str, NonNegativeInt] = Field(
        default_factory=dict, description="Manual charger counts by EVSE key",
    )
    cable_length_m: Optional[float] = Field(
        default=None, ge=0, description="Grid connection cable length",
    )

    model_config = {"extra": "forbid"}

    @property
    def throughput(self) -> float:
        """Throughput in the unit that matches the terminal type."""
        if self.terminal_type == TerminalType.CRUISE and self.annual_passengers is not None:
            return self.annual_passengers
        if self.terminal_type == TerminalType.RORO and self.annual_ceu is not None:
            return self.annual_ceu
        return self.annual_teu

    def berth_scenario(self, berth_id: str) -> BerthScenarioConfig:
        """Return the scenario choice for a berth, disabled if none is set."""
        for scenario in self.berth_scenarios:
            if scenario.berth_id == berth_id:
                return scenario
        return BerthScenarioConfig(berth_id=berth_id)


class PortServicesBaseline(BaseModel):
    """Existing tug and pilot boat fleet."""
    tugs_diesel: NonNegativeInt = Field(default=0, description="Diesel tugs")
    tugs_electric: NonNegativeInt = Field(default=0, description="Electric tugs")
    pilot_boats_diesel: NonNegativeInt = Field(default=0, description="Diesel pilot boats")
    pilot_boats_electric: NonNegativeInt = Field(default=0, description="Electric pilot boats")
    tug_avg_hours_per_call: Optional[float] = Field(
        default=None, ge=0, description="Tug hours per assisted call",
    )
    pilot_avg_hours_per_call: Optional[float] = Field(
        default=None, ge=0, description="Pilot boat hours per call",
    )

    model_config = {"extra": "forbid"}


class PortServicesScenario(BaseModel):
    """Electrification plan for the port-service fleet."""
    tugs_to_convert: NonNegativeInt = Field(default=0, description="Diesel tugs converted")
    tugs_to_add: NonNegativeInt = Field(default=0, description="Electric tugs added")
    pilot_boats_to_convert: NonNegativeInt = Field(default=0, description="Pilot boats converted")
    pilot_boats_to_add: NonNegativeInt = Field(default=0, description="Electric pilot boats added")

    model_config = {"extra": "forbid"}


class PortServicesConfig(BaseModel):
    """Port-wide service fleet in both configurations."""
    baseline: PortServicesBaseline = Field(default_factory=PortServicesBaseline)
    scenario: PortServicesScenario = Field(default_factory=PortServicesScenario)

    model_config = {"extra": "forbid"}


class CalculationRequest(BaseModel):
    """Complete input of a port calculation."""
    port: PortConfig = Field(default_factory=PortConfig)
    terminals: List[TerminalConfig] = Field(..., description="Terminals to calculate")
    port_services: Optional[PortServicesConfig] = Field(
        default=None, description="Port-wide tug and pilot fleet",
    )

    model_config = {"extra": "forbid"}


# =============================================================================
# Assumption Row Models
# =============================================================================


class EquipmentRow(BaseModel):
    """Unit assumptions of one equipment class."""
    equipment_key: str
    display_name: str = ""
    equipment_category: EquipmentCategory = EquipmentCategory.BATTERY_POWERED
    equipment_type: str = ""
    terminal_type_key: str = ""
    capex_usd: float = 0.0
    install_cost_usd: float = 0.0
    annual_opex_usd: float = 0.0
    peak_power_kw: float = 0.0
    kwh_per_teu: float = 0.0
    liters_per_teu: float = 0.0
    teu_ratio: float = 1.0
    lifespan_years: float = 0.0

    model_config = {"extra": "ignore"}


class EvseRow(BaseModel):
    """Charger assumptions for one battery-powered class."""
    evse_key: str
    display_name: str = ""
    equipment_key: str
    capex_usd: float = 0.0
    annual_opex_usd: float = 0.0
    power_kw: float = 0.0
    units_per_charger: float = 1.0

    model_config = {"extra": "ignore"}


class FleetOpsRow(BaseModel):
    """Vessel segment assumptions (berth OPS/DC, tugs, pilots)."""
    vessel_segment_key: str
    display_name: str = ""
    terminal_type_key: str = ""
    ops_power_mw: float = 0.0
    transformer_capex_usd: float = 0.0
    converter_capex_usd: float = 0.0
    civil_works_capex_usd: float = 0.0
    annual_opex_usd: float = 0.0
    tugs_per_call: float = 0.0
    pilots_per_call: float = 0.0
    service_fuel_l_per_hour: float = 0.0
    avg_hours_per_call: float = 0.0
    dc_power_mw: Optional[float] = None
    dc_capex_usd: Optional[float] = None
    dc_annual_opex_usd: Optional[float] = None

    model_config = {"extra": "ignore"}


class GridRow(BaseModel):
    """Grid component assumptions."""
    component_key: str
    display_name: str = ""
    cost_per_mw: Optional[float] = None
    cost_per_meter: Optional[float] = None
    voltage_kv: float = 0.0
    simultaneity_factor: Optional[float] = None

    model_config = {"extra": "ignore"}


class EconomicRow(BaseModel):
    """Scalar economic or physical assumption."""
    assumption_key: str
    value: float
    unit: str = ""

    model_config = {"extra": "ignore"}


class OverrideRow(BaseModel):
    """Profile-scoped replacement of one assumption cell."""
    profile_name: str = Field(..., min_length=1, description="Assumption profile")
    table_name: AssumptionTable = Field(..., description="Target table")
    row_key: str = Field(..., min_length=1, description="Target row key")
    column_name: str = Field(..., min_length=1, description="Target column")
    custom_value: float = Field(..., description="Replacement value")

    model_config = {"extra": "forbid", "frozen": True}


# =============================================================================
# Result Models
# =============================================================================

_RESULT_CONFIG = {"extra": "forbid", "frozen": True}


class EquipmentLineItem(BaseModel):
    """Annual figures of one equipment class in one configuration."""
    equipment_key: str
    display_name: str = ""
    equipment_category: Optional[EquipmentCategory] = None
    reference_found: bool = True
    diesel_units: int = 0
    electric_units: int = 0
    converted_units: int = 0
    added_units: int = 0
    annual_diesel_liters: float = 0.0
    annual_kwh: float = 0.0
    annual_co2_tons: float = 0.0
    annual_fuel_cost_usd: float = 0.0
    annual_energy_cost_usd: float = 0.0
    annual_maintenance_usd: float = 0.0
    annual_total_opex_usd: float = 0.0
    unit_capex_usd: float = 0.0
    install_cost_usd: float = 0.0
    total_capex_usd: float = 0.0
    new_peak_kw: float = 0.0
    lifespan_years: float = 0.0

    model_config = _RESULT_CONFIG


class EquipmentTotals(BaseModel):
    """Equipment totals of one configuration."""
    total_diesel_liters: float = 0.0
    total_kwh: float = 0.0
    total_co2_tons: float = 0.0
    total_opex_usd: float = 0.0
    total_capex_usd: float = 0.0
    grid_peak_kw: float = 0.0

    model_config = _RESULT_CONFIG


class ChargerLineItem(BaseModel):
    """Charger sizing for one EVSE type."""
    evse_key: str
    display_name: str = ""
    equipment_key: str
    equipment_count: int = 0
    units_per_charger: float = 1.0
    chargers_required: int = 0
    chargers_override: Optional[int] = None
    chargers_final: int = 0
    power_kw: float = 0.0
    total_power_kw: float = 0.0
    capex_usd: float = 0.0
    total_capex_usd: float = 0.0
    annual_opex_usd: float = 0.0
    total_annual_opex_usd: float = 0.0

    model_config = _RESULT_CONFIG


class ChargerTotals(BaseModel):
    """Charger totals of a terminal."""
    total_chargers: int = 0
    total_power_kw: float = 0.0
    total_capex_usd: float = 0.0
    total_annual_opex_usd: float = 0.0

    model_config = _RESULT_CONFIG


class VesselCallLineItem(BaseModel):
    """Operating load of one vessel-call record."""
    vessel_segment_key: str
    vessel_segment_name: str = ""
    reference_found: bool = True
    annual_calls: float = 0.0
    avg_berth_hours: float = 0.0
    annual_berth_hours: float = 0.0
    operating_power_mw: float = 0.0
    energy_kwh: float = 0.0

    model_config = _RESULT_CONFIG


class BerthLineItem(BaseModel):
    """Design, operating and cost figures of one berth."""
    berth_id: str
    berth_name: str = ""
    berth_number: int = 1
    design_segment_key: str = ""
    design_segment_name: str = ""
    design_reference_found: bool = True
    design_ops_power_mw: float = 0.0
    design_dc_power_mw: float = 0.0
    ops_state: ElectrificationState = ElectrificationState.NONE
    dc_state: ElectrificationState = ElectrificationState.NONE
    total_annual_calls: float = 0.0
    total_annual_berth_hours: float = 0.0
    operating_power_mw: float = 0.0
    operating_energy_kwh: float = 0.0
    vessel_calls: List[VesselCallLineItem] = Field(default_factory=list)
    ops_transformer_capex_usd: float = 0.0
    ops_converter_capex_usd: float = 0.0
    ops_civil_works_capex_usd: float = 0.0
    ops_total_capex_usd: float = 0.0
    dc_capex_usd: float = 0.0
    new_peak_mw: float = 0.0
    baseline_diesel_liters: float = 0.0
    baseline_shore_power_kwh: float = 0.0
    baseline_co2_tons: float = 0.0
    baseline_energy_cost_usd: float = 0.0
    baseline_infrastructure_opex_usd: float = 0.0
    scenario_diesel_liters: float = 0.0
    scenario_shore_power_kwh: float = 0.0
    scenario_co2_tons: float = 0.0
    scenario_energy_cost_usd: float = 0.0
    scenario_infrastructure_opex_usd: float = 0.0

    model_config = _RESULT_CONFIG


class BerthTotals(BaseModel):
    """Berth totals of a terminal."""
    total_ops_capex_usd: float = 0.0
    total_dc_capex_usd: float = 0.0
    total_new_peak_mw: float = 0.0
    total_design_mw: float = 0.0
    baseline_diesel_liters: float = 0.0
    baseline_shore_power_kwh: float = 0.0
    baseline_co2_tons: float = 0.0
    baseline_cost_usd: float = 0.0
    scenario_diesel_liters: float = 0.0
    scenario_shore_power_kwh: float = 0.0
    scenario_co2_tons: float = 0.0
    scenario_cost_usd: float = 0.0

    model_config = _RESULT_CONFIG


class GridResult(BaseModel):
    """Grid connection sizing of a terminal."""
    total_equipment_peak_mw: float = 0.0
    total_berth_peak_mw: float = 0.0
    total_evse_peak_mw: float = 0.0
    gross_peak_demand_mw: float = 0.0
    simultaneity_factor: float = 1.0
    net_peak_demand_mw: float = 0.0
    transformer_rating_mw: float = 0.0
    substation_type: str = ""
    substation_material_capex_usd: float = 0.0
    civil_works_capex_usd: float = 0.0
    substation_capex_usd: float = 0.0
    cable_length_m: float = 0.0
    cable_type: str = ""
    cable_capex_usd: float = 0.0
    grid_opex_usd: float = 0.0
    grid_consumption_kwh: float = 0.0
    total_grid_capex_usd: float = 0.0

    model_config = _RESULT_CONFIG


class BuildingsLightingResult(BaseModel):
    """Annual electricity of buildings and lighting."""
    buildings_kwh: float = 0.0
    lighting_kwh: float = 0.0
    total_kwh: float = 0.0
    co2_tons: float = 0.0
    energy_cost_usd: float = 0.0

    model_config = _RESULT_CONFIG


class PortServicesResult(BaseModel):
    """Tug and pilot boat demand, fleet energy and CAPEX."""
    total_tug_trips: float = 0.0
    total_tug_hours: float = 0.0
    total_pilot_trips: float = 0.0
    total_pilot_hours: float = 0.0
    min_tugs_required: int = 0
    min_pilots_required: int = 0
    max_tugs_per_call: float = 0.0
    max_pilots_per_call: float = 0.0
    baseline_tugs_diesel: int = 0
    baseline_tugs_electric: int = 0
    baseline_pilots_diesel: int = 0
    baseline_pilots_electric: int = 0
    baseline_tug_fuel_liters: float = 0.0
    baseline_tug_energy_kwh: float = 0.0
    baseline_pilot_fuel_liters: float = 0.0
    baseline_pilot_energy_kwh: float = 0.0
    baseline_co2_tons: float = 0.0
    baseline_fuel_cost_usd: float = 0.0
    baseline_energy_cost_usd: float = 0.0
    baseline_maintenance_usd: float = 0.0
    baseline_total_opex_usd: float = 0.0
    scenario_tugs_diesel: int = 0
    scenario_tugs_electric: int = 0
    scenario_pilots_diesel: int = 0
    scenario_pilots_electric: int = 0
    scenario_tug_fuel_liters: float = 0.0
    scenario_tug_energy_kwh: float = 0.0
    scenario_pilot_fuel_liters: float = 0.0
    scenario_pilot_energy_kwh: float = 0.0
    scenario_co2_tons: float = 0.0
    scenario_fuel_cost_usd: float = 0.0
    scenario_energy_cost_usd: float = 0.0
    scenario_maintenance_usd: float = 0.0
    scenario_total_opex_usd: float = 0.0
    tug_charging_capex_usd: float = 0.0
    pilot_charging_capex_usd: float = 0.0
    total_capex_usd: float = 0.0

    model_config = _RESULT_CONFIG


class CapexBreakdown(BaseModel):
    """CAPEX by category."""
    equipment_usd: float = 0.0
    charger_usd: float = 0.0
    ops_usd: float = 0.0
    dc_usd: float = 0.0
    grid_usd: float = 0.0
    total_usd: float = 0.0

    model_config = _RESULT_CONFIG


class TerminalResult(BaseModel):
    """Baseline versus scenario figures of one terminal."""
    terminal_id: str
    terminal_name: str = ""
    terminal_type: TerminalType
    annual_throughput: float = 0.0
    baseline_equipment: List[EquipmentLineItem] = Field(default_factory=list)
    baseline_totals: EquipmentTotals
    scenario_equipment: List[EquipmentLineItem] = Field(default_factory=list)
    scenario_totals: EquipmentTotals
    chargers: List[ChargerLineItem] = Field(default_factory=list)
    charger_totals: ChargerTotals
    berths: List[BerthLineItem] = Field(default_factory=list)
    berth_totals: BerthTotals
    buildings_lighting: Optional[BuildingsLightingResult] = None
    grid: GridResult
    capex: CapexBreakdown
    baseline_diesel_liters: float = 0.0
    baseline_kwh: float = 0.0
    baseline_co2_tons: float = 0.0
    scenario_diesel_liters: float = 0.0
    scenario_kwh: float = 0.0
    scenario_co2_tons: float = 0.0
    total_baseline_opex_usd: float = 0.0
    total_scenario_opex_usd: float = 0.0
    annual_opex_savings_usd: float = 0.0
    annual_co2_savings_tons: float = 0.0
    reference_gaps: List[str] = Field(default_factory=list)

    model_config = _RESULT_CONFIG


class PortTotals(BaseModel):
    """Port-level totals, deltas and payback."""
    baseline_diesel_liters: float = 0.0
    baseline_kwh: float = 0.0
    baseline_co2_tons: float = 0.0
    baseline_opex_usd: float = 0.0
    scenario_diesel_liters: float = 0.0
    scenario_kwh: float = 0.0
    scenario_co2_tons: float = 0.0
    scenario_opex_usd: float = 0.0
    equipment_capex_usd: float = 0.0
    charger_capex_usd: float = 0.0
    ops_capex_usd: float = 0.0
    dc_capex_usd: float = 0.0
    grid_capex_usd: float = 0.0
    port_services_capex_usd: float = 0.0
    total_capex_usd: float = 0.0
    diesel_liters_saved: float = 0.0
    co2_tons_saved: float = 0.0
    co2_reduction_percent: float = 0.0
    annual_opex_delta_usd: float = 0.0
    annual_opex_savings_usd: float = 0.0
    simple_payback_years: Optional[float] = None

    model_config = _RESULT_CONFIG


class PortResult(BaseModel):
    """Immutable result of a port calculation."""
    port: PortConfig
    terminals: List[TerminalResult] = Field(default_factory=list)
    port_services: Optional[PortServicesResult] = None
    totals: PortTotals
    economic_assumptions_used: Dict[str, float] = Field(default_factory=dict)
    assumption_profile: str = ""
    assumption_fingerprint: str = ""
    provenance_hash: str = ""

    model_config = _RESULT_CONFIG


# =============================================================================
# Audit Models
# =============================================================================


class ProvenanceEntry(BaseModel):
    """Audit log entry for an override change or a calculation."""
    entry_id: str = Field(
        default_factory=lambda: str(uuid.uuid4()),
        description="Unique entry ID",
    )
    timestamp: datetime = Field(default_factory=_utcnow, description="Event timestamp")
    change_type: str = Field(..., description="Override change type or \"calculation\"")
    profile_name: str = Field(..., description="Affected assumption profile")
    target: str = Field(default="", description="table.row.column or result hash")
    old_value: Optional[Any] = Field(None, description="Previous value")
    new_value: Optional[Any] = Field(None, description="New value")
    provenance_hash: str = Field(default="", description="SHA-256 chain hash")

    model_config = {"extra": "forbid"}


__all__ = [
    # Enumerations
    "TerminalType",
    "PortSize",
    "EquipmentCategory",
    "ElectrificationState",
    "AssumptionTable",
    "OverrideChangeType",
    "ROW_KEY_COLUMNS",
    # Input models
    "PortConfig",
    "BaselineEquipmentEntry",
    "ScenarioEquipmentEntry",
    "BerthVesselCall",
    "BerthDefinition",
    "BerthScenarioConfig",
    "BuildingsLightingConfig",
    "TerminalConfig",
    "PortServicesBaseline",
    "PortServicesScenario",
    "PortServicesConfig",
    "CalculationRequest",
    # Assumption rows
    "EquipmentRow",
    "EvseRow",
    "FleetOpsRow",
    "GridRow",
    "EconomicRow",
    "OverrideRow",
    # Results
    "EquipmentLineItem",
    "EquipmentTotals",
    "ChargerLineItem",
    "ChargerTotals",
    "VesselCallLineItem",
    "BerthLineItem",
    "BerthTotals",
    "GridResult",
    "BuildingsLightingResult",
    "PortServicesResult",
    "CapexBreakdown",
    "TerminalResult",
    "PortTotals",
    "PortResult",
    # Audit
    "ProvenanceEntry",
]
