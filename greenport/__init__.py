# -*- coding: utf-8 -*-
"""
AGENT-PORT-001: GreenPort PIECE Engine
======================================

Port Infrastructure Electrification & Cost Estimation. This package turns a
port's asset inventory under a baseline and a scenario configuration into
comparable cost, energy and emissions projections. It supports:

- Equipment, berth (OPS/DC), charger, grid, buildings and port-service
  calculators driven by five reference assumption tables
- Profile-scoped assumption overrides layered over the base tables
- Override fingerprints and a staleness tracker that discards results
  computed under other assumptions
- Boundary validation, project/scenario reconstitution, planning sessions
- SHA-256 provenance tracking for override changes and calculations
- 10 Prometheus metrics for observability
- FastAPI REST API with 7 endpoints
- Thread-safe configuration with GREENPORT_ env prefix

Key Components:
    - resolver: AssumptionSet, AssumptionResolver, EconomicContext
    - equipment, berths, chargers, grid, buildings, port_services: calculators
    - aggregator: PortAggregator and the ``calculate`` entry point
    - fingerprint / staleness: result validity tracking
    - store: AssumptionStore with profile overrides
    - validation: validate_request
    - projects: project baseline / scenario helpers
    - session: PlanningSession
    - provenance: ProvenanceTracker for SHA-256 audit trails
    - config: PortEngineConfig with GREENPORT_ env prefix
    - setup: PortElectrificationService facade and router

Example:
    >>> from greenport import AssumptionStore, calculate, validate_request
    >>> store = AssumptionStore()
    >>> request = validate_request({"terminals": [{"id": "t1", "annual_teu": 500000}]})
    >>> result = calculate(request, store.load_assumptions())
    >>> result.totals.simple_payback_years is None
    True

Agent ID: AGENT-PORT-001
Agent Name: PIECE Port Electrification Engine
"""

__version__ = "1.0.0"
__agent_id__ = "AGENT-PORT-001"
__agent_name__ = "PIECE Port Electrification Engine"

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------
from greenport.config import (
    PortEngineConfig,
    get_config,
    set_config,
    reset_config,
)

# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------
from greenport.exceptions import (
    GreenPortException,
    ValidationError,
    AssumptionLoadError,
    ProfileError,
    CalculationError,
    CalculationInProgressError,
)

# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------
from greenport.models import (
    # Enumerations
    TerminalType,
    PortSize,
    EquipmentCategory,
    ElectrificationState,
    AssumptionTable,
    OverrideChangeType,
    # Input models
    PortConfig,
    BaselineEquipmentEntry,
    ScenarioEquipmentEntry,
    BerthVesselCall,
    BerthDefinition,
    BerthScenarioConfig,
    BuildingsLightingConfig,
    TerminalConfig,
    PortServicesBaseline,
    PortServicesScenario,
    PortServicesConfig,
    CalculationRequest,
    # Assumption rows
    OverrideRow,
    # Results
    TerminalResult,
    PortTotals,
    PortResult,
    # Audit
    ProvenanceEntry,
)

# ---------------------------------------------------------------------------
# Core engines
# ---------------------------------------------------------------------------
from greenport.resolver import AssumptionResolver, AssumptionSet, EconomicContext
from greenport.equipment import EquipmentEmissionsEngine
from greenport.chargers import ChargerSizingEngine
from greenport.berths import BerthElectrificationEngine
from greenport.grid import GridSizingEngine
from greenport.buildings import calculate_buildings_lighting
from greenport.port_services import PortServicesEngine
from greenport.aggregator import PortAggregator, calculate

# ---------------------------------------------------------------------------
# Assumptions, staleness and sessions
# ---------------------------------------------------------------------------
from greenport.fingerprint import compute_fingerprint
from greenport.staleness import ResultStatus, StalenessTracker, TrackerState
from greenport.store import AssumptionStore, scenario_profile_name
from greenport.validation import validate_request
from greenport.projects import (
    ProjectBaseline,
    ScenarioConfig,
    TerminalSequence,
    decompose,
    reconstitute,
)
from greenport.session import PlanningSession
from greenport.provenance import ProvenanceTracker

# ---------------------------------------------------------------------------
# Metrics
# ---------------------------------------------------------------------------
from greenport.metrics import PROMETHEUS_AVAILABLE

# ---------------------------------------------------------------------------
# Service setup facade
# ---------------------------------------------------------------------------
from greenport.setup import (
    PortElectrificationService,
    configure_port_service,
    get_port_service,
    get_router,
)

__all__ = [
    # Version
    "__version__",
    "__agent_id__",
    "__agent_name__",
    # Configuration
    "PortEngineConfig",
    "get_config",
    "set_config",
    "reset_config",
    # Exceptions
    "GreenPortException",
    "ValidationError",
    "AssumptionLoadError",
    "ProfileError",
    "CalculationError",
    "CalculationInProgressError",
    # Enumerations
    "TerminalType",
    "PortSize",
    "EquipmentCategory",
    "ElectrificationState",
    "AssumptionTable",
    "OverrideChangeType",
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
    "OverrideRow",
    # Results
    "TerminalResult",
    "PortTotals",
    "PortResult",
    "ProvenanceEntry",
    # Core engines
    "AssumptionResolver",
    "AssumptionSet",
    "EconomicContext",
    "EquipmentEmissionsEngine",
    "ChargerSizingEngine",
    "BerthElectrificationEngine",
    "GridSizingEngine",
    "calculate_buildings_lighting",
    "PortServicesEngine",
    "PortAggregator",
    "calculate",
    # Assumptions, staleness and sessions
    "compute_fingerprint",
    "ResultStatus",
    "StalenessTracker",
    "TrackerState",
    "AssumptionStore",
    "scenario_profile_name",
    "validate_request",
    "ProjectBaseline",
    "ScenarioConfig",
    "TerminalSequence",
    "decompose",
    "reconstitute",
    "PlanningSession",
    "ProvenanceTracker",
    # Metrics
    "PROMETHEUS_AVAILABLE",
    # Service setup facade
    "PortElectrificationService",
    "configure_port_service",
    "get_port_service",
    "get_router",
]
