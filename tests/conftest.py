# -*- coding: utf-8 -*-
"""Pytest configuration and shared fixtures."""

import copy
from typing import Any, Dict

import pytest

from greenport.config import PortEngineConfig, reset_config, set_config
from greenport.models import (
    BaselineEquipmentEntry,
    BerthDefinition,
    BerthVesselCall,
    ScenarioEquipmentEntry,
    TerminalConfig,
)
from greenport.provenance import ProvenanceTracker
from greenport.resolver import AssumptionResolver, AssumptionSet, EconomicContext
from greenport.setup import reset_piece_service
from greenport.store import AssumptionStore


# Round-number reference tables so expected values can be worked by hand.
BASE_TABLES: Dict[str, Dict[str, Dict[str, Any]]] = {
    "economic_assumptions": {
        "diesel_price": {"assumption_key": "diesel_price", "value": 1.0},
        "electricity_price": {"assumption_key": "electricity_price", "value": 0.1},
        "diesel_ef_wtw": {"assumption_key": "diesel_ef_wtw", "value": 3.0},
        "grid_ef": {"assumption_key": "grid_ef", "value": 0.5},
        "maintenance_saving": {"assumption_key": "maintenance_saving", "value": 0.25},
    },
    "piece_equipment": {
        "terminal_tractor": {
            "equipment_key": "terminal_tractor",
            "display_name": "Terminal Tractor",
            "equipment_category": "battery_powered",
            "capex_usd": 50000.0,
            "install_cost_usd": 10000.0,
            "annual_opex_usd": 20000.0,
            "peak_power_kw": 150.0,
            "kwh_per_teu": 2.0,
            "liters_per_teu": 1.0,
            "teu_ratio": 10.0,
            "lifespan_years": 10.0,
        },
        "rtg_crane": {
            "equipment_key": "rtg_crane",
            "display_name": "RTG Crane",
            "equipment_category": "grid_powered",
            "capex_usd": 1000000.0,
            "install_cost_usd": 100000.0,
            "annual_opex_usd": 50000.0,
            "peak_power_kw": 400.0,
            "kwh_per_teu": 4.0,
            "liters_per_teu": 2.0,
            "teu_ratio": 10.0,
            "lifespan_years": 20.0,
        },
        "reefer": {
            "equipment_key": "reefer",
            "display_name": "Reefer Plug",
            "equipment_category": "grid_powered",
            "capex_usd": 3000.0,
            "install_cost_usd": 1000.0,
            "annual_opex_usd": 100.0,
            "peak_power_kw": 7.0,
            "teu_ratio": 1.0,
        },
    },
    "piece_evse": {
        "evse_terminal_tractor": {
            "evse_key": "evse_terminal_tractor",
            "display_name": "Tractor Charger",
            "equipment_key": "terminal_tractor",
            "capex_usd": 100000.0,
            "annual_opex_usd": 2000.0,
            "power_kw": 150.0,
            "units_per_charger": 4.0,
        },
    },
    "piece_fleet_ops": {
        "container_3_8k": {
            "vessel_segment_key": "container_3_8k",
            "display_name": "Container 3-8k TEU",
            "ops_power_mw": 2.0,
            "transformer_capex_usd": 300000.0,
            "converter_capex_usd": 200000.0,
            "civil_works_capex_usd": 100000.0,
            "annual_opex_usd": 10000.0,
            "tugs_per_call": 2.0,
            "pilots_per_call": 1.0,
            "dc_power_mw": 1.0,
            "dc_capex_usd": 500000.0,
            "dc_annual_opex_usd": 5000.0,
        },
        "container_8_15k": {
            "vessel_segment_key": "container_8_15k",
            "display_name": "Container 8-15k TEU",
            "ops_power_mw": 4.0,
            "transformer_capex_usd": 600000.0,
            "converter_capex_usd": 450000.0,
            "civil_works_capex_usd": 180000.0,
            "annual_opex_usd": 15000.0,
            "tugs_per_call": 3.0,
            "pilots_per_call": 1.0,
            "dc_power_mw": 2.0,
            "dc_capex_usd": 800000.0,
            "dc_annual_opex_usd": 8000.0,
        },
        "tug_70bp": {
            "vessel_segment_key": "tug_70bp",
            "display_name": "Tug 70t BP",
            "annual_opex_usd": 150000.0,
            "service_fuel_l_per_hour": 300.0,
            "avg_hours_per_call": 4.0,
            "dc_capex_usd": 1500000.0,
        },
        "pilot_boat": {
            "vessel_segment_key": "pilot_boat",
            "display_name": "Pilot Boat",
            "annual_opex_usd": 40000.0,
            "service_fuel_l_per_hour": 60.0,
            "avg_hours_per_call": 4.0,
            "dc_capex_usd": 400000.0,
        },
    },
    "piece_grid": {
        "substation_11kv": {"component_key": "substation_11kv", "cost_per_mw": 200000.0},
        "substation_33kv": {"component_key": "substation_33kv", "cost_per_mw": 230000.0},
        "substation_110kv": {"component_key": "substation_110kv", "cost_per_mw": 240000.0},
        "cable_11kv_3core": {"component_key": "cable_11kv_3core", "cost_per_meter": 90.0},
        "cable_33kv_3x1core": {"component_key": "cable_33kv_3x1core", "cost_per_meter": 150.0},
        "grid_simultaneity": {"component_key": "grid_simultaneity", "simultaneity_factor": 0.8},
    },
}


@pytest.fixture(autouse=True)
def engine_config():
    """Install a default engine config and drop singletons afterwards."""
    config = PortEngineConfig()
    set_config(config)
    yield config
    reset_config()
    reset_piece_service()


@pytest.fixture
def base_tables():
    """Deep copy of the hand-checkable reference tables."""
    return copy.deepcopy(BASE_TABLES)


@pytest.fixture
def assumption_set(base_tables):
    """Complete assumption set without overrides."""
    return AssumptionSet(profile="default", base=base_tables, fingerprint="0:")


@pytest.fixture
def resolver(assumption_set):
    """Resolver over the base tables."""
    return AssumptionResolver(assumption_set)


@pytest.fixture
def economics(resolver):
    """Economic context with default hours and motor efficiency."""
    return EconomicContext.from_resolver(resolver, hours_per_year=8760.0, motor_efficiency=0.95)


@pytest.fixture
def store(engine_config, base_tables):
    """Assumption store over the hand-checkable tables."""
    return AssumptionStore(engine_config, base=base_tables, provenance=ProvenanceTracker())


@pytest.fixture
def bundled_store(engine_config):
    """Assumption store over the bundled reference data."""
    return AssumptionStore(engine_config)


@pytest.fixture
def tractor_terminal():
    """Container terminal converting 12 of 20 diesel tractors and adding 3."""
    return TerminalConfig(
        id="t1",
        name="Terminal 1",
        annual_teu=100000.0,
        baseline_equipment={
            "terminal_tractor": BaselineEquipmentEntry(existing_diesel=20),
        },
        scenario_equipment={
            "terminal_tractor": ScenarioEquipmentEntry(num_to_convert=12, num_to_add=3),
        },
    )


@pytest.fixture
def berth_terminal():
    """Container terminal with one berth and mixed vessel traffic."""
    return TerminalConfig(
        id="t2",
        name="Terminal 2",
        annual_teu=0.0,
        berths=[
            BerthDefinition(
                id="b1",
                berth_number=1,
                berth_name="North Quay",
                max_vessel_segment_key="container_8_15k",
                vessel_calls=[
                    BerthVesselCall(
                        id="b1-call-1",
                        vessel_segment_key="container_3_8k",
                        annual_calls=100,
                        avg_berth_hours=10,
                    ),
                    BerthVesselCall(
                        id="b1-call-2",
                        vessel_segment_key="container_8_15k",
                        annual_calls=50,
                        avg_berth_hours=20,
                    ),
                ],
            ),
        ],
    )


@pytest.fixture
def sample_payload():
    """Valid request payload with one converting terminal."""
    return {
        "port": {"name": "Port of Testing", "location": "Testland", "size_key": "regional"},
        "terminals": [
            {
                "id": "t1",
                "name": "Terminal 1",
                "terminal_type": "container",
                "annual_teu": 100000,
                "baseline_equipment": {"terminal_tractor": {"existing_diesel": 20}},
                "scenario_equipment": {
                    "terminal_tractor": {"num_to_convert": 12, "num_to_add": 3},
                },
            },
        ],
    }
