# -*- coding: utf-8 -*-
"""
Project and Scenario Helpers - AGENT-PORT-001: Port Electrification Engine

A project stores what is shared by all of its scenarios (the baseline:
terminals, berths, traffic, existing fleet) separately from what each
scenario chooses (conversions, additions, OPS/DC, charger overrides). The
engine needs the flat :class:`~greenport.models.CalculationRequest`, so this
module converts between the two shapes and keeps a scenario consistent with
an edited baseline.

Also provided:
    - TerminalSequence: session-scoped "Terminal N" naming
    - migrate_berth / migrate_terminals: upgrade saved berths that still use
      the single-call layout (``current_vessel_segment_key``,
      ``annual_calls``, ``avg_berth_hours``) to the vessel-call list

Example:
    >>> from greenport.projects import decompose, reconstitute
    >>> baseline, scenario = decompose(request)
    >>> reconstitute(baseline, scenario) == request
    True

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import re
import threading
import uuid
from typing import Any, Dict, Iterable, List, Mapping, Optional, Tuple

from pydantic import BaseModel, Field

from greenport.models import (
    BaselineEquipmentEntry,
    BerthDefinition,
    BerthScenarioConfig,
    BuildingsLightingConfig,
    CalculationRequest,
    NonNegativeInt,
    PortConfig,
    PortServicesBaseline,
    PortServicesConfig,
    PortServicesScenario,
    ScenarioEquipmentEntry,
    TerminalConfig,
    TerminalType,
)

logger = logging.getLogger(__name__)

_TERMINAL_NAME = re.compile(r"Terminal\s+(\d+)", re.IGNORECASE)


# =============================================================================
# Project Models
# =============================================================================


class BaselineTerminal(BaseModel):
    """Terminal data shared by every scenario of a project."""
    id: str = Field(..., min_length=1, description="Terminal identifier")
    name: str = Field(default="", description="Terminal name")
    terminal_type: TerminalType = Field(default=TerminalType.CONTAINER)
    annual_teu: float = Field(default=0.0, ge=0)
    annual_passengers: Optional[float] = Field(default=None, ge=0)
    annual_ceu: Optional[float] = Field(default=None, ge=0)
    berths: List[BerthDefinition] = Field(default_factory=list)
    baseline_equipment: Dict[str, BaselineEquipmentEntry] = Field(default_factory=dict)
    buildings_lighting: Optional[BuildingsLightingConfig] = None
    cable_length_m: Optional[float] = Field(default=None, ge=0)

    model_config = {"extra": "forbid"}


class ScenarioTerminal(BaseModel):
    """Electrification choices of one scenario for one terminal."""
    terminal_id: str = Field(..., min_length=1, description="Baseline terminal identifier")
    scenario_equipment: Dict[str, ScenarioEquipmentEntry] = Field(default_factory=dict)
    berth_scenarios: List[BerthScenarioConfig] = Field(default_factory=list)
    charger_overrides: Dict[str, NonNegativeInt] = Field(default_factory=dict)

    model_config = {"extra": "forbid"}


class ProjectBaseline(BaseModel):
    """Baseline half of a project."""
    port: PortConfig = Field(default_factory=PortConfig)
    terminals: List[BaselineTerminal] = Field(default_factory=list)
    port_services_baseline: Optional[PortServicesBaseline] = None

    model_config = {"extra": "forbid"}


class ScenarioConfig(BaseModel):
    """Scenario half of a project."""
    terminals: List[ScenarioTerminal] = Field(default_factory=list)
    port_services_scenario: Optional[PortServicesScenario] = None

    model_config = {"extra": "forbid"}


# =============================================================================
# Terminal naming
# =============================================================================


class TerminalSequence:
    """Counter behind default terminal names ("Terminal 1", "Terminal 2", ...).

    One sequence per planning session; thread-safe.
    """

    def __init__(self) -> None:
        self._counter = 0
        self._lock = threading.Lock()

    @property
    def current(self) -> int:
        return self._counter

    def next_name(self) -> str:
        with self._lock:
            self._counter += 1
            return f"Terminal {self._counter}"

    def sync(self, names: Iterable[str]) -> int:
        """Continue after the highest "Terminal N" suffix, or the name count.

        Args:
            names: Names of the terminals now loaded.

        Returns:
            The new counter value.
        """
        names = list(names)
        highest = len(names)
        for name in names:
            match = _TERMINAL_NAME.search(name or "")
            if match:
                highest = max(highest, int(match.group(1)))
        with self._lock:
            self._counter = highest
        return highest

    def reset(self) -> None:
        with self._lock:
            self._counter = 0


def create_default_terminal(sequence: TerminalSequence) -> TerminalConfig:
    """Return an empty container terminal with the next default name."""
    return TerminalConfig(
        id=str(uuid.uuid4()),
        name=sequence.next_name(),
        terminal_type=TerminalType.CONTAINER,
    )


# =============================================================================
# Legacy migration
# =============================================================================


def migrate_berth(berth: Mapping[str, Any]) -> Dict[str, Any]:
    """Upgrade a saved berth to the vessel-call list layout.

    Berths that already carry ``vessel_calls`` are returned unchanged (as a
    copy). Single-call berths get one vessel-call record whose segment is
    ``current_vessel_segment_key``, falling back to the design segment, and
    whose id is derived from the berth id.

    Args:
        berth: Raw berth mapping.

    Returns:
        Berth mapping accepted by :class:`BerthDefinition`.
    """
    if isinstance(berth.get("vessel_calls"), list):
        return dict(berth)

    number = berth.get("berth_number") or 1
    berth_id = berth.get("id") or f"berth-{number}"
    design_key = berth.get("max_vessel_segment_key") or ""
    migrated = {
        "id": berth_id,
        "berth_number": number,
        "berth_name": berth.get("berth_name") or "",
        "max_vessel_segment_key": design_key,
        "vessel_calls": [{
            "id": f"{berth_id}-call-1",
            "vessel_segment_key": berth.get("current_vessel_segment_key") or design_key,
            "annual_calls": berth.get("annual_calls") or 0,
            "avg_berth_hours": berth.get("avg_berth_hours") or 0,
        }],
        "ops_existing": bool(berth.get("ops_existing")),
        "dc_existing": bool(berth.get("dc_existing")),
    }
    logger.debug("Migrated single-call berth %s", berth_id)
    return migrated


def migrate_terminals(terminals: Iterable[Mapping[str, Any]]) -> List[Dict[str, Any]]:
    """Apply :func:`migrate_berth` to every berth of every terminal."""
    migrated = []
    for terminal in terminals:
        if not isinstance(terminal, Mapping) or not isinstance(terminal.get("berths"), list):
            migrated.append(terminal)
            continue
        data = dict(terminal)
        data["berths"] = [
            migrate_berth(b) if isinstance(b, Mapping) else b for b in terminal["berths"]
        ]
        migrated.append(data)
    return migrated


# =============================================================================
# Reconstitute / decompose
# =============================================================================


def reconstitute(baseline: ProjectBaseline, scenario: ScenarioConfig) -> CalculationRequest:
    """Merge a project baseline and a scenario into a calculation request.

    Baseline terminals without scenario choices get an empty plan. Port
    services are included when either half defines them.
    """
    choices = {t.terminal_id: t for t in scenario.terminals}
    terminals = []
    for bt in baseline.terminals:
        st = choices.get(bt.id) or ScenarioTerminal(terminal_id=bt.id)
        terminals.append(TerminalConfig(
            id=bt.id,
            name=bt.name,
            terminal_type=bt.terminal_type,
            annual_teu=bt.annual_teu,
            annual_passengers=bt.annual_passengers,
            annual_ceu=bt.annual_ceu,
            berths=list(bt.berths),
            baseline_equipment=dict(bt.baseline_equipment),
            scenario_equipment=dict(st.scenario_equipment),
            berth_scenarios=list(st.berth_scenarios),
            buildings_lighting=bt.buildings_lighting,
            charger_overrides=dict(st.charger_overrides),
            cable_length_m=bt.cable_length_m,
        ))

    services = None
    if baseline.port_services_baseline is not None or scenario.port_services_scenario is not None:
        services = PortServicesConfig(
            baseline=baseline.port_services_baseline or PortServicesBaseline(),
            scenario=scenario.port_services_scenario or PortServicesScenario(),
        )
    return CalculationRequest(port=baseline.port, terminals=terminals, port_services=services)


def decompose(request: CalculationRequest) -> Tuple[ProjectBaseline, ScenarioConfig]:
    """Split a calculation request into its project baseline and scenario."""
    baseline_terminals = []
    scenario_terminals = []
    for t in request.terminals:
        baseline_terminals.append(BaselineTerminal(
            id=t.id,
            name=t.name,
            terminal_type=t.terminal_type,
            annual_teu=t.annual_teu,
            annual_passengers=t.annual_passengers,
            annual_ceu=t.annual_ceu,
            berths=list(t.berths),
            baseline_equipment=dict(t.baseline_equipment),
            buildings_lighting=t.buildings_lighting,
            cable_length_m=t.cable_length_m,
        ))
        scenario_terminals.append(ScenarioTerminal(
            terminal_id=t.id,
            scenario_equipment=dict(t.scenario_equipment),
            berth_scenarios=list(t.berth_scenarios),
            charger_overrides=dict(t.charger_overrides),
        ))

    services = request.port_services
    return (
        ProjectBaseline(
            port=request.port,
            terminals=baseline_terminals,
            port_services_baseline=services.baseline if services else None,
        ),
        ScenarioConfig(
            terminals=scenario_terminals,
            port_services_scenario=services.scenario if services else None,
        ),
    )


def create_empty_scenario_config(baseline: ProjectBaseline) -> ScenarioConfig:
    """Scenario with no conversions and every berth's OPS/DC disabled."""
    return ScenarioConfig(terminals=[
        ScenarioTerminal(
            terminal_id=bt.id,
            berth_scenarios=[BerthScenarioConfig(berth_id=b.id) for b in bt.berths],
        )
        for bt in baseline.terminals
    ])


def sync_scenario_with_baseline(
    baseline: ProjectBaseline,
    scenario: ScenarioConfig,
) -> ScenarioConfig:
    """Bring a scenario back in line with an edited baseline.

    - Terminals removed from the baseline are dropped; new ones get an empty
      plan.
    - Equipment classes no longer in the baseline are dropped;
      ``num_to_convert`` is capped at the class's ``existing_diesel``.
    - Berth choices follow the baseline berth order; new berths start
      disabled.
    - Port-service conversions are capped at the diesel fleet.

    Returns:
        A new ScenarioConfig; the input is not modified.
    """
    choices = {t.terminal_id: t for t in scenario.terminals}
    terminals = []
    for bt in baseline.terminals:
        st = choices.get(bt.id) or ScenarioTerminal(terminal_id=bt.id)

        equipment: Dict[str, ScenarioEquipmentEntry] = {}
        for key, entry in st.scenario_equipment.items():
            existing = bt.baseline_equipment.get(key)
            if existing is None:
                logger.info("Dropping scenario equipment %s from terminal %s", key, bt.id)
                continue
            if entry.num_to_convert > existing.existing_diesel:
                entry = entry.model_copy(update={"num_to_convert": existing.existing_diesel})
            equipment[key] = entry

        by_berth = {b.berth_id: b for b in st.berth_scenarios}
        berth_scenarios = [
            by_berth.get(b.id) or BerthScenarioConfig(berth_id=b.id)
            for b in bt.berths
        ]

        terminals.append(ScenarioTerminal(
            terminal_id=bt.id,
            scenario_equipment=equipment,
            berth_scenarios=berth_scenarios,
            charger_overrides=dict(st.charger_overrides),
        ))

    services = scenario.port_services_scenario
    fleet = baseline.port_services_baseline
    if services is not None:
        fleet = fleet or PortServicesBaseline()
        services = services.model_copy(update={
            "tugs_to_convert": min(services.tugs_to_convert, fleet.tugs_diesel),
            "pilot_boats_to_convert": min(
                services.pilot_boats_to_convert, fleet.pilot_boats_diesel,
            ),
        })

    return ScenarioConfig(terminals=terminals, port_services_scenario=services)


__all__ = [
    "BaselineTerminal",
    "ScenarioTerminal",
    "ProjectBaseline",
    "ScenarioConfig",
    "TerminalSequence",
    "create_default_terminal",
    "migrate_berth",
    "migrate_terminals",
    "reconstitute",
    "decompose",
    "create_empty_scenario_config",
    "sync_scenario_with_baseline",
]
