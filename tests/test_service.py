# -*- coding: utf-8 -*-
"""
Tests for the PortElectrificationService facade.

Comprehensive test suite covering:
- One-shot calculations over the bundled reference data
- Profile operations through the facade
- Sessions bound to the shared store
- Health, metrics and lifecycle
- Singleton access

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import pytest

from greenport.config import PortEngineConfig
from greenport.exceptions import ValidationError
from greenport.models import OverrideChangeType
from greenport.provenance import CALCULATION_EVENT
from greenport.setup import (
    PortElectrificationService,
    get_piece_service,
    reset_piece_service,
)
from greenport.staleness import ResultStatus


@pytest.fixture
def service(engine_config):
    """Service over the bundled reference data."""
    return PortElectrificationService(config=engine_config)


class TestCalculate:
    """Test one-shot calculations."""

    def test_calculate_payload(self, service, sample_payload):
        result = service.calculate(sample_payload)

        assert result.assumption_profile == "default"
        assert result.assumption_fingerprint == "0:"
        assert result.terminals[0].terminal_id == "t1"
        assert result.totals.total_capex_usd > 0
        assert result.economic_assumptions_used["diesel_price"] == 1.23

    def test_calculate_under_profile(self, service, sample_payload):
        service.set_override("scenario_1", "economic_assumptions", "diesel_price", "value", 2.0)

        result = service.calculate(sample_payload, profile="scenario_1")

        assert result.assumption_profile == "scenario_1"
        assert result.assumption_fingerprint == service.fingerprint("scenario_1")
        assert result.economic_assumptions_used["diesel_price"] == 2.0

    def test_invalid_payload(self, service):
        with pytest.raises(ValidationError):
            service.calculate({"terminals": []})

    def test_calculation_recorded(self, service, sample_payload):
        result = service.calculate(sample_payload)
        latest = service.provenance.get_audit_trail(limit=1)[0]
        assert latest.change_type == CALCULATION_EVENT
        assert latest.target == result.provenance_hash


class TestProfiles:
    """Test profile operations through the facade."""

    def test_override_lifecycle(self, service):
        assert service.set_override(
            "default", "economic_assumptions", "grid_ef", "value", 0.3,
        ) == OverrideChangeType.INSERT
        assert len(service.list_overrides("default")) == 1

        assert service.copy_profile("default", "scenario_4") == 1
        assert service.fingerprint("scenario_4") == service.fingerprint("default")

        assert service.delete_override("default", "economic_assumptions", "grid_ef", "value")
        assert service.fingerprint("default") == "0:"
        assert service.delete_profile("scenario_4") is True

    def test_sessions_share_store(self, service, tractor_terminal):
        session = service.new_session()
        session.set_terminals([tractor_terminal])
        session.calculate()

        service.set_override("default", "economic_assumptions", "grid_ef", "value", 0.3)
        session.refresh_fingerprint()

        assert session.status == ResultStatus.CLEARED

    def test_new_session_profile(self, service):
        assert service.new_session("scenario_2").profile == "scenario_2"


class TestHealthAndLifecycle:
    """Test health, metrics and lifecycle."""

    def test_health(self, service):
        health = service.get_health()

        assert health["status"] == "healthy"
        assert health["assumptions"] == "available"
        assert health["provenance_chain_valid"] is True

    def test_metrics(self, service):
        service.set_override("scenario_1", "economic_assumptions", "grid_ef", "value", 0.3)
        metrics = service.get_metrics()

        assert metrics["profiles_count"] == 2
        assert metrics["provenance_entries"] == 1

    def test_provenance_disabled(self):
        service = PortElectrificationService(config=PortEngineConfig(enable_provenance=False))
        assert service.provenance is None
        assert service.get_metrics()["provenance_entries"] == 0
        assert service.get_health()["provenance_chain_valid"] is True

    def test_startup_shutdown(self, service):
        service.startup()
        service.startup()
        assert service.get_health()["started"] is True

        service.shutdown()
        assert service.get_metrics()["started"] is False

    def test_singleton(self):
        first = get_piece_service()
        assert get_piece_service() is first

        reset_piece_service()
        assert get_piece_service() is not first
