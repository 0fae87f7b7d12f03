# -*- coding: utf-8 -*-
"""
Tests for PlanningSession.

Comprehensive test suite covering:
- Terminal edits and default names
- Fresh, stale and cleared results
- Override edits on the active and other profiles
- Calculation serialisation and error wrapping
- Loading saved inputs, projects and project scenarios
- Provenance of calculations

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import threading

import pytest

from greenport.aggregator import PortAggregator
from greenport.exceptions import (
    CalculationError,
    CalculationInProgressError,
    ValidationError,
)
from greenport.models import AssumptionTable, CalculationRequest, PortConfig
from greenport.projects import BaselineTerminal, ProjectBaseline, ScenarioConfig
from greenport.provenance import CALCULATION_EVENT
from greenport.session import PlanningSession
from greenport.staleness import ResultStatus

ECONOMIC = AssumptionTable.ECONOMIC


class BlockingAggregator:
    """Aggregator that waits for a release signal before calculating."""

    def __init__(self, config):
        self._inner = PortAggregator(config)
        self.started = threading.Event()
        self.release = threading.Event()

    def calculate(self, request, assumptions):
        self.started.set()
        self.release.wait(5)
        return self._inner.calculate(request, assumptions)


class FailingAggregator:
    """Aggregator that fails with an unexpected error."""

    def calculate(self, request, assumptions):
        raise ZeroDivisionError("float division by zero")


class EditingAggregator:
    """Aggregator that edits the session inputs while calculating."""

    def __init__(self, config):
        self._inner = PortAggregator(config)
        self.session = None

    def calculate(self, request, assumptions):
        self.session.set_port(PortConfig(name="Edited mid-run"))
        return self._inner.calculate(request, assumptions)


@pytest.fixture
def session(store, engine_config):
    """Planning session over the hand-checkable store."""
    return PlanningSession(store, config=engine_config)


@pytest.fixture
def calculated(session, tractor_terminal):
    """Session holding a fresh result for the tractor terminal."""
    session.set_terminals([tractor_terminal])
    session.calculate()
    return session


@pytest.fixture
def saved_result(engine_config, assumption_set, tractor_terminal):
    """Result computed outside any session."""
    request = CalculationRequest(terminals=[tractor_terminal])
    return PortAggregator(engine_config).calculate(request, assumption_set)


# ==============================================================================
# Inputs
# ==============================================================================

class TestInputs:
    """Test terminal and port edits."""

    def test_add_terminal_names(self, session):
        first = session.add_terminal()
        second = session.add_terminal()

        assert [first.name, second.name] == ["Terminal 1", "Terminal 2"]
        assert len(session.terminals) == 2

    def test_update_terminal(self, session, tractor_terminal):
        session.set_terminals([tractor_terminal])
        session.update_terminal(tractor_terminal.model_copy(update={"annual_teu": 5.0}))
        assert session.terminals[0].annual_teu == 5.0

    def test_update_unknown_terminal(self, session, tractor_terminal):
        with pytest.raises(KeyError):
            session.update_terminal(tractor_terminal)

    def test_remove_terminal(self, session, tractor_terminal):
        session.set_terminals([tractor_terminal])
        assert session.remove_terminal("t1") is True
        assert session.remove_terminal("t1") is False
        assert session.terminals == []

    def test_request_reflects_inputs(self, session, tractor_terminal):
        session.set_port(PortConfig(name="Harbour"))
        session.set_terminals([tractor_terminal])

        request = session.request()

        assert request.port.name == "Harbour"
        assert request.terminals == [tractor_terminal]


# ==============================================================================
# Result status
# ==============================================================================

class TestResultStatus:
    """Test the status of the held result through edits."""

    def test_no_result(self, session):
        assert session.status == ResultStatus.NONE
        assert session.result is None

    def test_calculate_is_fresh(self, calculated):
        assert calculated.status == ResultStatus.FRESH
        assert calculated.result.assumption_fingerprint == "0:"
        assert calculated.result.assumption_profile == "default"

    def test_input_edit_marks_stale(self, calculated):
        calculated.set_port(PortConfig(name="Renamed"))
        assert calculated.status == ResultStatus.STALE
        assert calculated.result is not None

    def test_override_on_active_profile_clears(self, calculated):
        change = calculated.set_override(ECONOMIC, "diesel_price", "value", 1.5)

        assert change is not None
        assert calculated.status == ResultStatus.CLEARED
        assert calculated.result is None
        assert calculated.state.cleared_by_assumption_change is True

    def test_same_value_override_keeps_result(self, session, tractor_terminal):
        session.set_terminals([tractor_terminal])
        session.set_override(ECONOMIC, "diesel_price", "value", 1.5)
        session.calculate()

        assert session.set_override(ECONOMIC, "diesel_price", "value", 1.5) is None
        assert session.status == ResultStatus.FRESH

    def test_override_on_other_profile_keeps_result(self, calculated, store):
        store.set_override("scenario_9", ECONOMIC, "diesel_price", "value", 1.5)
        calculated.refresh_fingerprint()
        assert calculated.status == ResultStatus.FRESH

    def test_delete_override_clears(self, session, tractor_terminal):
        session.set_terminals([tractor_terminal])
        session.set_override(ECONOMIC, "grid_ef", "value", 0.4)
        session.calculate()

        assert session.delete_override(ECONOMIC, "grid_ef", "value") is True
        assert session.status == ResultStatus.CLEARED

    def test_switch_profile_clears(self, calculated, store):
        store.set_override("scenario_1", ECONOMIC, "diesel_price", "value", 1.5)

        fingerprint = calculated.set_active_profile("scenario_1")

        assert fingerprint.startswith("1:")
        assert calculated.status == ResultStatus.CLEARED

    def test_recalculate_after_clear(self, calculated):
        calculated.set_override(ECONOMIC, "diesel_price", "value", 1.5)
        result = calculated.calculate()

        assert calculated.status == ResultStatus.FRESH
        assert result.economic_assumptions_used["diesel_price"] == 1.5

    def test_mark_stale(self, calculated):
        calculated.mark_stale()
        assert calculated.status == ResultStatus.STALE


# ==============================================================================
# Calculation boundary
# ==============================================================================

class TestCalculate:
    """Test validation, locking and error wrapping in calculate()."""

    def test_empty_terminals_rejected(self, session):
        with pytest.raises(ValidationError):
            session.calculate()
        assert session.is_calculating is False
        assert session.status == ResultStatus.NONE

    def test_concurrent_calculate_rejected(self, store, engine_config, tractor_terminal):
        aggregator = BlockingAggregator(engine_config)
        session = PlanningSession(store, config=engine_config, aggregator=aggregator)
        session.set_terminals([tractor_terminal])
        worker = threading.Thread(target=session.calculate)
        worker.start()
        try:
            assert aggregator.started.wait(5)
            assert session.is_calculating is True
            with pytest.raises(CalculationInProgressError):
                session.calculate()
        finally:
            aggregator.release.set()
            worker.join(5)

        assert session.is_calculating is False
        assert session.status == ResultStatus.FRESH

    def test_unexpected_error_wrapped(self, store, engine_config, tractor_terminal):
        session = PlanningSession(store, config=engine_config, aggregator=FailingAggregator())
        session.set_terminals([tractor_terminal])

        with pytest.raises(CalculationError) as exc_info:
            session.calculate()

        assert exc_info.value.context["cause_type"] == "ZeroDivisionError"
        assert isinstance(exc_info.value.__cause__, ZeroDivisionError)
        assert session.is_calculating is False
        assert session.result is None

    def test_edit_during_calculation_marks_stale(self, store, engine_config, tractor_terminal):
        aggregator = EditingAggregator(engine_config)
        session = PlanningSession(store, config=engine_config, aggregator=aggregator)
        aggregator.session = session
        session.set_terminals([tractor_terminal])

        session.calculate()

        assert session.status == ResultStatus.STALE
        assert session.port.name == "Edited mid-run"

    def test_edit_during_calculation_never_shown_fresh(
        self, store, engine_config, tractor_terminal, monkeypatch,
    ):
        aggregator = EditingAggregator(engine_config)
        session = PlanningSession(store, config=engine_config, aggregator=aggregator)
        aggregator.session = session
        session.set_terminals([tractor_terminal])
        observed = []
        record_result = session.tracker.record_result

        def recording(*args):
            state = record_result(*args)
            observed.append(state.status)
            return state

        monkeypatch.setattr(session.tracker, "record_result", recording)
        session.calculate()

        assert observed == [ResultStatus.STALE]
        assert session.state.result_generation < session.state.input_generation

    def test_calculation_recorded_in_provenance(self, calculated, store):
        latest = store.provenance.get_audit_trail(limit=1)[0]

        assert latest.change_type == CALCULATION_EVENT
        assert latest.profile_name == "default"
        assert latest.target == calculated.result.provenance_hash
        assert latest.new_value == "0:"


# ==============================================================================
# Loading and clearing
# ==============================================================================

class TestLoading:
    """Test loading saved state and clearing the session."""

    def test_load_saved_migrates_and_shows_stale(self, session, saved_result):
        session.load_saved(
            {"terminals": [{
                "id": "t1",
                "name": "Terminal 4",
                "berths": [{
                    "id": "b1",
                    "max_vessel_segment_key": "container_3_8k",
                    "annual_calls": 10,
                    "avg_berth_hours": 5,
                }],
            }]},
            result=saved_result,
        )

        berth = session.terminals[0].berths[0]
        assert berth.vessel_calls[0].id == "b1-call-1"
        assert berth.vessel_calls[0].annual_calls == 10
        assert session.status == ResultStatus.STALE
        assert session.add_terminal().name == "Terminal 5"

    def test_load_saved_rejects_invalid(self, session):
        with pytest.raises(ValidationError):
            session.load_saved({"terminals": [{"id": "t1", "annual_teu": -1}]})

    def test_load_project(self, calculated):
        baseline = ProjectBaseline(terminals=[BaselineTerminal(id="p1", name="Terminal 2")])

        calculated.load_project(baseline)

        assert [t.id for t in calculated.terminals] == ["p1"]
        assert calculated.profile == "default"
        assert calculated.status == ResultStatus.NONE

    def test_load_project_scenario_matching_hash(self, session, saved_result):
        baseline = ProjectBaseline(terminals=[BaselineTerminal(id="t1")])

        session.load_project_scenario(
            baseline, ScenarioConfig(), 3, result=saved_result, assumption_hash="0:",
        )

        assert session.profile == "scenario_3"
        assert session.status == ResultStatus.FRESH
        session.refresh_fingerprint()
        assert session.status == ResultStatus.FRESH

    def test_load_project_scenario_outdated_hash(self, session, saved_result):
        baseline = ProjectBaseline(terminals=[BaselineTerminal(id="t1")])

        session.load_project_scenario(
            baseline, ScenarioConfig(), 3, result=saved_result, assumption_hash="1:outdated",
        )

        assert session.status == ResultStatus.CLEARED
        assert session.result is None

    def test_load_project_scenario_after_price_change(self, session, store, saved_result):
        store.set_override("scenario_3", ECONOMIC, "diesel_price", "value", 9.99)
        baseline = ProjectBaseline(terminals=[BaselineTerminal(id="t1")])

        session.load_project_scenario(
            baseline, ScenarioConfig(), 3, result=saved_result, assumption_hash="0:",
        )

        assert session.status == ResultStatus.CLEARED
        assert session.state.current_fingerprint == store.fingerprint("scenario_3")

    def test_clear(self, calculated):
        calculated.clear()

        assert calculated.status == ResultStatus.NONE
        assert calculated.terminals == []
        assert calculated.state.current_fingerprint == "0:"
        assert calculated.add_terminal().name == "Terminal 1"
