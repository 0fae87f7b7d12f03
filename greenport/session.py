# -*- coding: utf-8 -*-
"""
Planning Session - AGENT-PORT-001: Port Electrification Engine

One user's working state: the port and terminal inputs being edited, the
active assumption profile, and the staleness tracker that decides whether
the held result may still be shown.

Responsibilities:
    - Bump the input generation on every input edit
    - Refresh the live fingerprint after every override edit of the active
      profile, which discards a result computed under other assumptions
    - Serialise calculate(): a second call while one is running raises
      CalculationInProgressError instead of queueing
    - Record metrics and provenance at the calculation boundary; the engine
      itself stays free of I/O

Example:
    >>> from greenport.session import PlanningSession
    >>> from greenport.store import AssumptionStore
    >>> session = PlanningSession(AssumptionStore())
    >>> terminal = session.add_terminal()
    >>> result = session.calculate()
    >>> session.status.value
    'fresh'

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any, List, Mapping, Optional, Union

from greenport.aggregator import PortAggregator
from greenport.config import PortEngineConfig, get_config
from greenport.exceptions import (
    CalculationError,
    CalculationInProgressError,
    GreenPortException,
)
from greenport.metrics import (
    record_calculation,
    record_reference_gap,
    record_result_cleared,
    record_result_stale,
    record_terminal,
)
from greenport.models import (
    AssumptionTable,
    CalculationRequest,
    OverrideChangeType,
    PortConfig,
    PortResult,
    PortServicesConfig,
    TerminalConfig,
)
from greenport.projects import (
    ProjectBaseline,
    ScenarioConfig,
    TerminalSequence,
    create_default_terminal,
    create_empty_scenario_config,
    migrate_terminals,
    reconstitute,
    sync_scenario_with_baseline,
)
from greenport.provenance import ProvenanceTracker
from greenport.staleness import ResultStatus, StalenessTracker, TrackerState
from greenport.store import AssumptionStore, scenario_profile_name
from greenport.validation import validate_request

logger = logging.getLogger(__name__)


class PlanningSession:
    """Inputs, active profile and held result of one planning session.

    Attributes:
        store: Assumption store the profile lives in.
        config: Engine configuration.
        aggregator: Calculation engine.
        tracker: Staleness tracker of the held result.
        sequence: Default terminal naming.
        profile: Active assumption profile.
    """

    def __init__(
        self,
        store: AssumptionStore,
        config: Optional[PortEngineConfig] = None,
        aggregator: Optional[PortAggregator] = None,
        provenance: Optional[ProvenanceTracker] = None,
    ) -> None:
        self.store = store
        self.config = config or get_config()
        self.aggregator = aggregator or PortAggregator(self.config)
        self.provenance = provenance if provenance is not None else store.provenance
        self.tracker = StalenessTracker()
        self.sequence = TerminalSequence()
        self.profile = self.config.default_profile

        self._port = PortConfig()
        self._terminals: List[TerminalConfig] = []
        self._port_services: Optional[PortServicesConfig] = None
        self._calculate_lock = threading.Lock()
        self._inputs_lock = threading.Lock()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def port(self) -> PortConfig:
        return self._port

    @property
    def terminals(self) -> List[TerminalConfig]:
        return list(self._terminals)

    @property
    def port_services(self) -> Optional[PortServicesConfig]:
        return self._port_services

    @property
    def state(self) -> TrackerState:
        return self.tracker.state

    @property
    def result(self) -> Optional[PortResult]:
        return self.tracker.state.result

    @property
    def status(self) -> ResultStatus:
        return self.tracker.state.status

    @property
    def is_calculating(self) -> bool:
        return self._calculate_lock.locked()

    def request(self) -> CalculationRequest:
        """Current inputs as a calculation request."""
        with self._inputs_lock:
            return CalculationRequest(
                port=self._port,
                terminals=list(self._terminals),
                port_services=self._port_services,
            )

    # ------------------------------------------------------------------
    # Input edits
    # ------------------------------------------------------------------

    def set_port(self, port: PortConfig) -> None:
        with self._inputs_lock:
            self._port = port
        self._input_changed()

    def set_terminals(self, terminals: List[TerminalConfig]) -> None:
        with self._inputs_lock:
            self._terminals = list(terminals)
        self._input_changed()

    def add_terminal(self) -> TerminalConfig:
        """Append an empty terminal named after the session sequence."""
        terminal = create_default_terminal(self.sequence)
        with self._inputs_lock:
            self._terminals.append(terminal)
        self._input_changed()
        return terminal

    def update_terminal(self, terminal: TerminalConfig) -> None:
        """Replace the terminal with the same id.

        Raises:
            KeyError: If no terminal has that id.
        """
        with self._inputs_lock:
            for index, existing in enumerate(self._terminals):
                if existing.id == terminal.id:
                    self._terminals[index] = terminal
                    break
            else:
                raise KeyError(f"Unknown terminal '{terminal.id}'")
        self._input_changed()

    def remove_terminal(self, terminal_id: str) -> bool:
        with self._inputs_lock:
            before = len(self._terminals)
            self._terminals = [t for t in self._terminals if t.id != terminal_id]
            removed = len(self._terminals) != before
        if removed:
            self._input_changed()
        return removed

    def set_port_services(self, services: Optional[PortServicesConfig]) -> None:
        with self._inputs_lock:
            self._port_services = services
        self._input_changed()

    # ------------------------------------------------------------------
    # Assumption profile
    # ------------------------------------------------------------------

    def set_active_profile(self, profile: str) -> str:
        """Switch the active profile and refresh the live fingerprint."""
        self.profile = profile
        logger.info("Active assumption profile set to %s", profile)
        return self.refresh_fingerprint()

    def refresh_fingerprint(self) -> str:
        """Fetch the active profile's fingerprint and reconcile the result."""
        fingerprint = self.store.fingerprint(self.profile)
        self._transition(self.tracker.record_fingerprint, fingerprint)
        return fingerprint

    def set_override(
        self,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
        value: float,
    ) -> Optional[OverrideChangeType]:
        """Override a cell in the active profile."""
        change = self.store.set_override(self.profile, table, row_key, column, value)
        if change is not None:
            self.refresh_fingerprint()
        return change

    def delete_override(
        self,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
    ) -> bool:
        """Remove a cell override from the active profile."""
        removed = self.store.delete_override(self.profile, table, row_key, column)
        if removed:
            self.refresh_fingerprint()
        return removed

    # ------------------------------------------------------------------
    # Calculation
    # ------------------------------------------------------------------

    def calculate(self) -> PortResult:
        """Validate the inputs, calculate, and hold the result as fresh.

        Returns:
            The new PortResult.

        Raises:
            CalculationInProgressError: If a calculation is already running.
            ValidationError: If the inputs fail boundary validation.
            AssumptionLoadError: If the active profile cannot be loaded.
            CalculationError: For any unexpected failure inside the engine.
        """
        if not self._calculate_lock.acquire(blocking=False):
            raise CalculationInProgressError(
                "A calculation is already in progress for this session",
                context={"profile": self.profile},
            )
        start = time.time()
        try:
            generation = self.tracker.state.input_generation
            request = validate_request(self.request(), self.config)
            assumptions = self.store.load_assumptions(self.profile)
            self._transition(self.tracker.record_fingerprint, assumptions.fingerprint)
            try:
                result = self.aggregator.calculate(request, assumptions)
            except GreenPortException:
                raise
            except Exception as exc:
                logger.error("Calculation failed: %s", exc, exc_info=True)
                raise CalculationError(
                    "Calculation failed",
                    context={"profile": self.profile},
                    cause=exc,
                ) from exc
        except GreenPortException:
            record_calculation("error", time.time() - start)
            raise
        finally:
            self._calculate_lock.release()

        self._transition(
            self.tracker.record_result, result, assumptions.fingerprint, generation,
        )

        record_calculation("success", time.time() - start)
        for terminal in result.terminals:
            record_terminal(terminal.terminal_type.value)
            for gap in terminal.reference_gaps:
                record_reference_gap(gap.split(".", 1)[0])
        if self.provenance is not None:
            self.provenance.record_calculation(
                self.profile, assumptions.fingerprint, result.provenance_hash,
            )
        logger.info(
            "Calculated %d terminals under %s (fingerprint %s) in %.3fs",
            len(result.terminals), self.profile, assumptions.fingerprint,
            time.time() - start,
        )
        return result

    def mark_stale(self) -> TrackerState:
        return self._transition(self.tracker.mark_stale)

    # ------------------------------------------------------------------
    # Loading and clearing
    # ------------------------------------------------------------------

    def load_saved(self, payload: Mapping[str, Any], result: Optional[PortResult] = None) -> None:
        """Load saved inputs, and optionally a result saved without fingerprint.

        Saved berths are migrated to the vessel-call layout first. A loaded
        result is shown stale until recalculated.
        """
        data = dict(payload)
        if isinstance(data.get("terminals"), list):
            data["terminals"] = migrate_terminals(data["terminals"])
        request = validate_request(data, self.config)
        self._replace_inputs(request)
        self.tracker.load_saved_result(result)

    def load_project(self, baseline: ProjectBaseline) -> None:
        """Load a project baseline with an empty plan under the default profile."""
        self._replace_inputs(reconstitute(baseline, create_empty_scenario_config(baseline)))
        self.profile = self.config.default_profile
        self.tracker.load_project()
        self.refresh_fingerprint()

    def load_project_scenario(
        self,
        baseline: ProjectBaseline,
        scenario: ScenarioConfig,
        scenario_id: Union[int, str],
        result: Optional[PortResult] = None,
        assumption_hash: Optional[str] = None,
    ) -> None:
        """Load a saved scenario of a project.

        The result is held under the scenario's saved hash, then checked
        against the live fingerprint of the scenario profile; a result saved
        under other assumptions is cleared.
        """
        synced = sync_scenario_with_baseline(baseline, scenario)
        self._replace_inputs(reconstitute(baseline, synced))
        self.profile = scenario_profile_name(scenario_id)
        self._transition(
            self.tracker.load_project_scenario,
            result,
            assumption_hash,
            self.store.fingerprint(self.profile),
        )

    def clear(self) -> None:
        """Drop inputs, naming sequence and result; keep the live fingerprint."""
        with self._inputs_lock:
            self._port = PortConfig()
            self._terminals = []
            self._port_services = None
        self.sequence.reset()
        self.tracker.clear()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _replace_inputs(self, request: CalculationRequest) -> None:
        with self._inputs_lock:
            self._port = request.port
            self._terminals = list(request.terminals)
            self._port_services = request.port_services
        self.sequence.sync(t.name for t in request.terminals)

    def _input_changed(self) -> None:
        self._transition(self.tracker.record_input_change)

    def _transition(self, transition: Any, *args: Any) -> TrackerState:
        before = self.tracker.state.status
        state = transition(*args)
        if state.status != before:
            if state.status == ResultStatus.STALE:
                record_result_stale()
            elif state.status == ResultStatus.CLEARED:
                record_result_cleared()
                logger.info("Result cleared by assumption change in %s", self.profile)
        return state


__all__ = [
    "PlanningSession",
]
