# -*- coding: utf-8 -*-
"""
Tests for calculation request validation.

Comprehensive test suite covering:
- Valid payloads and request instances
- Path-qualified error messages
- Unknown terminal types, port sizes and equipment keys
- Terminal count limits
- Conversion caps for equipment and port services
- Berth scenario references

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import copy

import pytest

from greenport.config import PortEngineConfig
from greenport.exceptions import ValidationError
from greenport.models import CalculationRequest, TerminalType
from greenport.validation import validate_request


def _terminal(**fields):
    data = {"id": "t1", "name": "Terminal 1", "annual_teu": 1000}
    data.update(fields)
    return data


def _rejected(payload, config=None):
    with pytest.raises(ValidationError) as exc_info:
        validate_request(payload, config)
    return exc_info.value


# ==============================================================================
# Accepted requests
# ==============================================================================

class TestAccepted:
    """Test payloads that pass validation."""

    def test_sample_payload(self, sample_payload):
        request = validate_request(sample_payload)

        assert isinstance(request, CalculationRequest)
        assert request.terminals[0].terminal_type == TerminalType.CONTAINER
        assert request.terminals[0].scenario_equipment["terminal_tractor"].num_to_convert == 12

    def test_request_instance(self, sample_payload):
        request = CalculationRequest.model_validate(sample_payload)
        assert validate_request(request) == request

    def test_minimal_terminal(self):
        request = validate_request({"terminals": [{"id": "t1"}]})
        assert request.port.name == ""
        assert request.port_services is None

    def test_port_services(self, sample_payload):
        sample_payload["port_services"] = {
            "baseline": {"tugs_diesel": 3},
            "scenario": {"tugs_to_convert": 3, "tugs_to_add": 1},
        }
        assert validate_request(sample_payload).port_services.scenario.tugs_to_add == 1


# ==============================================================================
# Rejected requests
# ==============================================================================

class TestRejected:
    """Test rejected payloads and their messages."""

    def test_negative_annual_calls_path(self):
        payload = {"terminals": [_terminal(berths=[
            {"id": "b1", "vessel_calls": []},
            {"id": "b2", "vessel_calls": [
                {"vessel_segment_key": "container_3_8k", "annual_calls": -5},
            ]},
        ])]}

        error = _rejected(payload)

        path = "terminals[0].berths[1].vessel_calls[0].annual_calls"
        assert str(error.message) == f"{path} must be non-negative"
        assert path in error.invalid_fields
        assert error.context["invalid_fields"][path] == f"{path} must be non-negative"

    def test_no_terminals(self):
        error = _rejected({"terminals": []})
        assert error.message == "terminals must contain at least one terminal"

    def test_missing_terminals(self):
        assert "terminals" in _rejected({}).invalid_fields

    def test_too_many_terminals(self):
        config = PortEngineConfig(max_terminals=2)
        payload = {"terminals": [_terminal(id=f"t{i}") for i in range(3)]}
        error = _rejected(payload, config)
        assert error.message == "terminals must contain at most 2 terminals"

    def test_missing_terminal_id(self):
        error = _rejected({"terminals": [_terminal(id="")]})
        assert error.message == "terminals[0].id is required"

    def test_unknown_terminal_type(self):
        error = _rejected({"terminals": [_terminal(terminal_type="airport")]})
        assert "terminals[0].terminal_type" in error.invalid_fields

    def test_unknown_port_size(self):
        error = _rejected({"port": {"size_key": "gigantic"}, "terminals": [_terminal()]})
        assert "port.size_key" in error.invalid_fields

    def test_negative_throughput(self):
        error = _rejected({"terminals": [_terminal(annual_teu=-1)]})
        assert error.message == "terminals[0].annual_teu must be non-negative"

    def test_boolean_is_not_a_number(self):
        error = _rejected({"terminals": [_terminal(annual_teu=True)]})
        assert error.message == "terminals[0].annual_teu must be a number"

    def test_unknown_equipment_key(self):
        error = _rejected({"terminals": [_terminal(
            baseline_equipment={"flying_crane": {"existing_diesel": 1}},
        )]})
        assert error.message == (
            "terminals[0].baseline_equipment.flying_crane is not a known equipment key"
        )

    def test_convert_exceeds_existing_diesel(self):
        error = _rejected({"terminals": [_terminal(
            baseline_equipment={"agv": {"existing_diesel": 4}},
            scenario_equipment={"agv": {"num_to_convert": 5}},
        )]})
        assert error.message == (
            "terminals[0].scenario_equipment.agv.num_to_convert "
            "must not exceed existing_diesel (4)"
        )

    def test_berth_scenario_must_reference_berth(self):
        error = _rejected({"terminals": [_terminal(
            berths=[{"id": "b1"}],
            berth_scenarios=[{"berth_id": "b9", "ops_enabled": True}],
        )]})
        assert "terminals[0].berth_scenarios[0].berth_id" in error.invalid_fields

    def test_berth_number_positive(self):
        error = _rejected({"terminals": [_terminal(berths=[{"id": "b1", "berth_number": 0}])]})
        assert "terminals[0].berths[0].berth_number" in error.invalid_fields

    def test_negative_lighting(self):
        error = _rejected({"terminals": [_terminal(buildings_lighting={"area_lights": -2})]})
        assert "terminals[0].buildings_lighting.area_lights" in error.invalid_fields

    def test_negative_charger_override(self):
        error = _rejected({"terminals": [_terminal(charger_overrides={"evse_agv": -1})]})
        assert "terminals[0].charger_overrides.evse_agv" in error.invalid_fields

    def test_tug_conversion_cap(self):
        error = _rejected({
            "terminals": [_terminal()],
            "port_services": {
                "baseline": {"tugs_diesel": 2},
                "scenario": {"tugs_to_convert": 3},
            },
        })
        assert error.message == (
            "port_services.scenario.tugs_to_convert must not exceed tugs_diesel (2)"
        )

    def test_unknown_field_rejected(self):
        error = _rejected({"terminals": [_terminal(colour="green")]})
        assert "terminals[0].colour" in error.invalid_fields

    def test_non_mapping_payload(self):
        assert _rejected(["not", "a", "request"]).message == "request must be an object"

    def test_all_problems_collected(self):
        error = _rejected({"terminals": [
            _terminal(annual_teu=-1),
            _terminal(id="t2", terminal_type="airport"),
        ]})
        assert set(error.invalid_fields) == {
            "terminals[0].annual_teu",
            "terminals[1].terminal_type",
        }

    def test_payload_not_modified(self, sample_payload):
        sample_payload["terminals"][0]["annual_teu"] = -3
        before = copy.deepcopy(sample_payload)
        _rejected(sample_payload)
        assert sample_payload == before
