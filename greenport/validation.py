# -*- coding: utf-8 -*-
"""
Request Validation - AGENT-PORT-001: Port Electrification Engine

Boundary validation of calculation requests. Payloads arrive as plain
mappings (JSON bodies, saved projects) and are checked field by field before
being parsed into :class:`~greenport.models.CalculationRequest`. The engine
itself assumes validated input and only clamps as a last resort.

Checks:
    - Numeric fields are numbers and non-negative
    - Terminal type, port size and equipment keys come from known sets
    - At least one terminal, at most ``max_terminals``
    - Conversions do not exceed the diesel units they convert
    - Berth scenarios reference berths of their terminal

Every problem is collected under a path such as
``terminals[0].berths[1].vessel_calls[0].annual_calls``; the raised
ValidationError carries the first message and all of them in
``invalid_fields``.

Example:
    >>> from greenport.validation import validate_request
    >>> request = validate_request({"terminals": [{"id": "t1"}]})
    >>> request.terminals[0].terminal_type.value
    'container'

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import math
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from greenport.config import PortEngineConfig, get_config
from greenport.equipment import EQUIPMENT_KEYS
from greenport.exceptions import ValidationError
from greenport.metrics import record_validation_failure
from greenport.models import CalculationRequest, PortSize, TerminalType

logger = logging.getLogger(__name__)

_TERMINAL_TYPES = frozenset(t.value for t in TerminalType)
_PORT_SIZES = frozenset(s.value for s in PortSize)

_TERMINAL_NUMBERS = ("annual_teu", "annual_passengers", "annual_ceu", "cable_length_m")
_BUILDING_NUMBERS = (
    "warehouse_sqm", "office_sqm", "workshop_sqm", "high_mast_lights",
    "area_lights", "roadway_lights", "annual_operating_hours",
)
_CALL_NUMBERS = ("annual_calls", "avg_berth_hours")
_SERVICE_BASELINE_NUMBERS = (
    "tugs_diesel", "tugs_electric", "pilot_boats_diesel", "pilot_boats_electric",
    "tug_avg_hours_per_call", "pilot_avg_hours_per_call",
)
_SERVICE_SCENARIO_NUMBERS = (
    "tugs_to_convert", "tugs_to_add", "pilot_boats_to_convert", "pilot_boats_to_add",
)


def _is_number(value: Any) -> bool:
    return (
        isinstance(value, (int, float))
        and not isinstance(value, bool)
        and math.isfinite(value)
    )


class _Collector:
    """Ordered path -> message map of validation problems."""

    def __init__(self) -> None:
        self.errors: Dict[str, str] = {}

    def add(self, path: str, message: str) -> None:
        self.errors.setdefault(path, f"{path} {message}")

    def number(self, data: Mapping[str, Any], field: str, path: str) -> Optional[float]:
        """Check an optional non-negative number; return it when valid."""
        if field not in data or data[field] is None:
            return None
        value = data[field]
        if not _is_number(value):
            self.add(f"{path}.{field}", "must be a number")
            return None
        if value < 0:
            self.add(f"{path}.{field}", "must be non-negative")
            return None
        return float(value)

    def mapping(self, value: Any, path: str) -> Optional[Mapping[str, Any]]:
        if value is None:
            return None
        if not isinstance(value, Mapping):
            self.add(path, "must be an object")
            return None
        return value


def validate_request(
    payload: Any,
    config: Optional[PortEngineConfig] = None,
) -> CalculationRequest:
    """Validate a calculation payload and parse it.

    Args:
        payload: Mapping shaped like CalculationRequest, or a request instance.
        config: Engine configuration (``max_terminals``).

    Returns:
        Parsed CalculationRequest.

    Raises:
        ValidationError: If any check fails.
    """
    cfg = config or get_config()
    if isinstance(payload, CalculationRequest):
        payload = payload.model_dump(mode="json")

    check = _Collector()
    if not isinstance(payload, Mapping):
        check.add("request", "must be an object")
    else:
        _check_port(check, payload.get("port"))
        _check_terminals(check, payload.get("terminals"), cfg.max_terminals)
        _check_port_services(check, payload.get("port_services"))

    if not check.errors:
        try:
            return CalculationRequest.model_validate(payload)
        except PydanticValidationError as exc:
            for error in exc.errors():
                path = _pydantic_path(error.get("loc", ()))
                check.add(path or "request", error.get("msg", "is invalid").lower())

    raise _rejection(check.errors)


# ---------------------------------------------------------------------------
# Section checks
# ---------------------------------------------------------------------------


def _check_port(check: _Collector, port: Any) -> None:
    data = check.mapping(port, "port")
    if data is None:
        return
    size = data.get("size_key", "")
    if size not in _PORT_SIZES:
        check.add("port.size_key", f"must be one of {sorted(_PORT_SIZES)}")


def _check_terminals(check: _Collector, terminals: Any, max_terminals: int) -> None:
    if not isinstance(terminals, list) or not terminals:
        check.add("terminals", "must contain at least one terminal")
        return
    if len(terminals) > max_terminals:
        check.add("terminals", f"must contain at most {max_terminals} terminals")

    for index, terminal in enumerate(terminals):
        path = f"terminals[{index}]"
        data = check.mapping(terminal, path)
        if data is None:
            if terminal is None:
                check.add(path, "must be an object")
            continue
        _check_terminal(check, data, path)


def _check_terminal(check: _Collector, data: Mapping[str, Any], path: str) -> None:
    if not isinstance(data.get("id"), str) or not data.get("id"):
        check.add(f"{path}.id", "is required")
    terminal_type = data.get("terminal_type", TerminalType.CONTAINER.value)
    if terminal_type not in _TERMINAL_TYPES:
        check.add(f"{path}.terminal_type", f"must be one of {sorted(_TERMINAL_TYPES)}")
    for field in _TERMINAL_NUMBERS:
        check.number(data, field, path)

    # Equipment
    baseline = check.mapping(data.get("baseline_equipment"), f"{path}.baseline_equipment") or {}
    diesel_counts: Dict[str, float] = {}
    for key, entry in baseline.items():
        entry_path = f"{path}.baseline_equipment.{key}"
        if key not in EQUIPMENT_KEYS:
            check.add(entry_path, "is not a known equipment key")
        entry = check.mapping(entry, entry_path) or {}
        diesel_counts[key] = check.number(entry, "existing_diesel", entry_path) or 0.0
        check.number(entry, "existing_electric", entry_path)

    scenario = check.mapping(data.get("scenario_equipment"), f"{path}.scenario_equipment") or {}
    for key, entry in scenario.items():
        entry_path = f"{path}.scenario_equipment.{key}"
        if key not in EQUIPMENT_KEYS:
            check.add(entry_path, "is not a known equipment key")
        entry = check.mapping(entry, entry_path) or {}
        to_convert = check.number(entry, "num_to_convert", entry_path)
        check.number(entry, "num_to_add", entry_path)
        if to_convert is not None and to_convert > diesel_counts.get(key, 0.0):
            check.add(
                f"{entry_path}.num_to_convert",
                f"must not exceed existing_diesel ({int(diesel_counts.get(key, 0.0))})",
            )

    # Berths
    berth_ids: List[str] = []
    berths = data.get("berths") or []
    if not isinstance(berths, list):
        check.add(f"{path}.berths", "must be a list")
        berths = []
    for b_index, berth in enumerate(berths):
        berth_path = f"{path}.berths[{b_index}]"
        berth_data = check.mapping(berth, berth_path) or {}
        berth_id = berth_data.get("id")
        if not isinstance(berth_id, str) or not berth_id:
            check.add(f"{berth_path}.id", "is required")
        else:
            berth_ids.append(berth_id)
        number = berth_data.get("berth_number")
        if number is not None and (not _is_number(number) or number < 1):
            check.add(f"{berth_path}.berth_number", "must be a positive integer")
        calls = berth_data.get("vessel_calls") or []
        if not isinstance(calls, list):
            check.add(f"{berth_path}.vessel_calls", "must be a list")
            calls = []
        for c_index, call in enumerate(calls):
            call_path = f"{berth_path}.vessel_calls[{c_index}]"
            call_data = check.mapping(call, call_path) or {}
            for field in _CALL_NUMBERS:
                check.number(call_data, field, call_path)

    scenarios = data.get("berth_scenarios") or []
    if not isinstance(scenarios, list):
        check.add(f"{path}.berth_scenarios", "must be a list")
        scenarios = []
    for s_index, scenario_entry in enumerate(scenarios):
        s_path = f"{path}.berth_scenarios[{s_index}]"
        s_data = check.mapping(scenario_entry, s_path) or {}
        if s_data.get("berth_id") not in berth_ids:
            check.add(f"{s_path}.berth_id", "must reference a berth of this terminal")

    # Buildings and chargers
    buildings = check.mapping(data.get("buildings_lighting"), f"{path}.buildings_lighting")
    if buildings is not None:
        for field in _BUILDING_NUMBERS:
            check.number(buildings, field, f"{path}.buildings_lighting")
    overrides = check.mapping(data.get("charger_overrides"), f"{path}.charger_overrides") or {}
    for evse_key in overrides:
        check.number(overrides, evse_key, f"{path}.charger_overrides")


def _check_port_services(check: _Collector, services: Any) -> None:
    data = check.mapping(services, "port_services")
    if data is None:
        return
    baseline = check.mapping(data.get("baseline"), "port_services.baseline") or {}
    scenario = check.mapping(data.get("scenario"), "port_services.scenario") or {}
    for field in _SERVICE_BASELINE_NUMBERS:
        check.number(baseline, field, "port_services.baseline")
    for field in _SERVICE_SCENARIO_NUMBERS:
        check.number(scenario, field, "port_services.scenario")

    for convert, diesel in (
        ("tugs_to_convert", "tugs_diesel"),
        ("pilot_boats_to_convert", "pilot_boats_diesel"),
    ):
        to_convert = scenario.get(convert) or 0
        available = baseline.get(diesel) or 0
        if _is_number(to_convert) and _is_number(available) and to_convert > available:
            check.add(
                f"port_services.scenario.{convert}",
                f"must not exceed {diesel} ({int(available)})",
            )


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _pydantic_path(loc: Any) -> str:
    path = ""
    for part in loc:
        if isinstance(part, int):
            path += f"[{part}]"
        else:
            path += f".{part}" if path else str(part)
    return path


def _rejection(errors: Dict[str, str]) -> ValidationError:
    record_validation_failure()
    first = next(iter(errors.values()))
    logger.warning("Calculation request rejected: %d problems, first: %s", len(errors), first)
    return ValidationError(first, invalid_fields=dict(errors))


__all__ = [
    "validate_request",
]
