# -*- coding: utf-8 -*-
"""
Tests for the GreenPort exception hierarchy.

Comprehensive test suite covering:
- Generated error codes
- Context fields of each exception
- Serialization to dict and JSON
- Retry classification and chain formatting

Author: GreenPort Platform Team
Date: October 2026
Status: Production Ready
"""

import json

import pytest

from greenport.exceptions import (
    AssumptionLoadError,
    CalculationError,
    CalculationInProgressError,
    GreenPortException,
    ProfileError,
    ValidationError,
    format_exception_chain,
    is_retriable,
)


class TestErrorCodes:
    """Test error code generation."""

    @pytest.mark.parametrize("exc_type,code", [
        (GreenPortException, "GP_GREEN_PORT_EXCEPTION"),
        (ValidationError, "GP_VALIDATION_ERROR"),
        (AssumptionLoadError, "GP_ASSUMPTION_LOAD_ERROR"),
        (ProfileError, "GP_PROFILE_ERROR"),
        (CalculationError, "GP_CALCULATION_ERROR"),
        (CalculationInProgressError, "GP_CALCULATION_IN_PROGRESS_ERROR"),
    ])
    def test_generated_codes(self, exc_type, code):
        assert exc_type("boom").error_code == code

    def test_explicit_code(self):
        assert GreenPortException("boom", error_code="GP_CUSTOM").error_code == "GP_CUSTOM"

    def test_str(self):
        assert str(ProfileError("bad profile")) == "[GP_PROFILE_ERROR] - bad profile"


class TestContext:
    """Test exception-specific context."""

    def test_validation_invalid_fields(self):
        exc = ValidationError(
            "terminals must contain at least one terminal",
            invalid_fields={"terminals": "terminals must contain at least one terminal"},
        )
        assert exc.invalid_fields == {"terminals": "terminals must contain at least one terminal"}
        assert "terminals" in exc.context["invalid_fields"]

    def test_validation_without_fields(self):
        exc = ValidationError("bad")
        assert exc.invalid_fields == {}
        assert exc.context == {}

    def test_assumption_load_context(self):
        exc = AssumptionLoadError("missing", profile="scenario_7", missing=["piece_grid"])
        assert exc.context == {"profile": "scenario_7", "missing": ["piece_grid"]}

    def test_calculation_cause(self):
        exc = CalculationError("failed", cause=KeyError("agv"))
        assert exc.context["cause_type"] == "KeyError"


class TestSerialization:
    """Test dict and JSON output."""

    def test_to_dict(self):
        data = ProfileError("nope", profile="default").to_dict()

        assert data["error_type"] == "ProfileError"
        assert data["error_code"] == "GP_PROFILE_ERROR"
        assert data["message"] == "nope"
        assert data["context"] == {"profile": "default"}

    def test_to_json(self):
        data = json.loads(CalculationError("failed", cause=ValueError("x")).to_json())
        assert data["context"]["cause"] == "x"


class TestUtilities:
    """Test retry classification and chain formatting."""

    @pytest.mark.parametrize("exc,expected", [
        (AssumptionLoadError("x"), True),
        (CalculationInProgressError("x"), True),
        (ValidationError("x"), False),
        (ProfileError("x"), False),
        (CalculationError("x"), False),
        (RuntimeError("x"), False),
    ])
    def test_is_retriable(self, exc, expected):
        assert is_retriable(exc) is expected

    def test_format_exception_chain(self):
        try:
            try:
                raise ZeroDivisionError("division by zero")
            except ZeroDivisionError as inner:
                raise CalculationError("Calculation failed", cause=inner) from inner
        except CalculationError as exc:
            text = format_exception_chain(exc)

        lines = text.splitlines()
        assert lines[0] == "[GP_CALCULATION_ERROR] - Calculation failed"
        assert lines[-1] == "ZeroDivisionError: division by zero"
