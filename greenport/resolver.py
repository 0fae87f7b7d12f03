# -*- coding: utf-8 -*-
"""
Assumption Resolver - AGENT-PORT-001: Port Electrification Engine

Layers profile-scoped overrides on top of the base reference tables. The
two layers are held as separate maps and merged at read time; base rows are
never modified.

Zero-Hallucination Guarantees:
    - Every value comes from a base row or an explicit override
    - An override replaces a cell wholesale, never partially
    - Missing keys resolve to ``None`` or to a documented default
    - Incomplete assumption sets are rejected before reaching the engine

Example:
    >>> from greenport.resolver import AssumptionResolver, AssumptionSet
    >>> aset = AssumptionSet(
    ...     profile="default",
    ...     base={"economic_assumptions": {"diesel_price": {"value": 1.23}}},
    ...     overrides={"economic_assumptions": {"diesel_price": {"value": 1.5}}},
    ... )
    >>> AssumptionResolver(aset).economic("diesel_price")
    1.5

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
from copy import deepcopy
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from pydantic import ValidationError as PydanticValidationError

from greenport.exceptions import AssumptionLoadError
from greenport.models import (
    ROW_KEY_COLUMNS,
    AssumptionTable,
    EquipmentRow,
    EvseRow,
    FleetOpsRow,
    GridRow,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Economic keys
# ---------------------------------------------------------------------------

#: Economic keys without which no calculation is attempted.
REQUIRED_ECONOMIC_KEYS = (
    "diesel_price",
    "electricity_price",
    "diesel_ef_wtw",
    "grid_ef",
)

#: Documented defaults for optional economic keys.
ECONOMIC_DEFAULTS: Dict[str, float] = {
    "maintenance_saving": 0.25,
    "reefer_utilization": 0.55,
    "utilization_factor": 0.85,
    "diesel_energy_density": 9.7,
    "engine_efficiency": 0.45,
    "warehouse_kwh_per_sqm": 85.0,
    "office_kwh_per_sqm": 150.0,
    "workshop_kwh_per_sqm": 120.0,
}

_ECONOMIC = AssumptionTable.ECONOMIC.value
_EQUIPMENT = AssumptionTable.EQUIPMENT.value
_EVSE = AssumptionTable.EVSE.value
_FLEET = AssumptionTable.FLEET_OPS.value
_GRID = AssumptionTable.GRID.value

_ROW_MODELS = {
    _EQUIPMENT: EquipmentRow,
    _EVSE: EvseRow,
    _FLEET: FleetOpsRow,
    _GRID: GridRow,
}

TableMap = Dict[str, Dict[str, Dict[str, Any]]]


# ---------------------------------------------------------------------------
# AssumptionSet
# ---------------------------------------------------------------------------


class AssumptionSet:
    """Base reference rows plus one profile's overrides.

    Attributes:
        profile: Assumption profile the overrides belong to.
        base: table -> row key -> column -> value.
        overrides: table -> row key -> column -> replacement value.
        fingerprint: Fingerprint of the profile's override rows.
    """

    def __init__(
        self,
        profile: str,
        base: Mapping[str, Mapping[str, Mapping[str, Any]]],
        overrides: Optional[Mapping[str, Mapping[str, Mapping[str, float]]]] = None,
        fingerprint: str = "",
    ) -> None:
        self.profile = profile
        self.base: TableMap = {
            table: {key: dict(row) for key, row in rows.items()}
            for table, rows in deepcopy(dict(base)).items()
        }
        self.overrides: TableMap = {}
        self.fingerprint = fingerprint

        for table, rows in (overrides or {}).items():
            for row_key, columns in rows.items():
                if row_key not in self.base.get(table, {}):
                    logger.warning(
                        "Ignoring override for unknown row %s.%s in profile %s",
                        table, row_key, profile,
                    )
                    continue
                target = self.overrides.setdefault(table, {}).setdefault(row_key, {})
                for column, value in columns.items():
                    target[column] = float(value)

    @property
    def override_count(self) -> int:
        """Number of override cells applied."""
        return sum(
            len(columns)
            for rows in self.overrides.values()
            for columns in rows.values()
        )

    def require_complete(self) -> None:
        """Reject an assumption set that would force the engine to guess.

        Raises:
            AssumptionLoadError: If a table is empty, a required economic key
                is absent, no simultaneity row exists, or a row fails to parse.
        """
        missing: List[str] = []
        for table in ROW_KEY_COLUMNS:
            if not self.base.get(table):
                missing.append(table)

        resolver = AssumptionResolver(self)
        economic_keys = set(resolver.row_keys(_ECONOMIC))
        for key in REQUIRED_ECONOMIC_KEYS:
            if key not in economic_keys:
                missing.append(f"{_ECONOMIC}.{key}")

        if self.base.get(_GRID) and resolver.simultaneity_row() is None:
            missing.append(f"{_GRID}.simultaneity")

        if missing:
            raise AssumptionLoadError(
                f"Failed to load assumptions: missing {', '.join(missing)}",
                profile=self.profile,
                missing=missing,
            )

        for table, model in _ROW_MODELS.items():
            for row_key in resolver.row_keys(table):
                try:
                    model.model_validate(resolver.row(table, row_key))
                except PydanticValidationError as exc:
                    raise AssumptionLoadError(
                        f"Failed to load assumptions: invalid row "
                        f"{table}.{row_key}: {exc.errors()[0]['msg']}",
                        profile=self.profile,
                        missing=[f"{table}.{row_key}"],
                    ) from exc
        for row_key in resolver.row_keys(_ECONOMIC):
            try:
                float(resolver.row(_ECONOMIC, row_key)["value"])
            except (KeyError, TypeError, ValueError) as exc:
                raise AssumptionLoadError(
                    f"Failed to load assumptions: invalid economic value {row_key}",
                    profile=self.profile,
                    missing=[f"{_ECONOMIC}.{row_key}"],
                ) from exc


# ---------------------------------------------------------------------------
# AssumptionResolver
# ---------------------------------------------------------------------------


class AssumptionResolver:
    """Read-time merge of base rows and profile overrides.

    Example:
        >>> resolver = AssumptionResolver(assumption_set)
        >>> row = resolver.equipment("terminal_tractor")
        >>> row.capex_usd if row else 0.0
    """

    def __init__(self, assumptions: AssumptionSet) -> None:
        self.assumptions = assumptions

    # ------------------------------------------------------------------
    # Generic access
    # ------------------------------------------------------------------

    def value(self, table: str, row_key: str, column: str) -> Optional[Any]:
        """Resolve one cell, preferring the override layer.

        Args:
            table: Assumption table name.
            row_key: Row key within the table.
            column: Column name.

        Returns:
            The effective value, or None when the row or column is absent.
        """
        override = self.assumptions.overrides.get(table, {}).get(row_key, {})
        if column in override:
            return override[column]
        return self.assumptions.base.get(table, {}).get(row_key, {}).get(column)

    def row(self, table: str, row_key: str) -> Optional[Dict[str, Any]]:
        """Return a merged copy of one row, or None if the base lacks it."""
        base_row = self.assumptions.base.get(table, {}).get(row_key)
        if base_row is None:
            return None
        merged = dict(base_row)
        merged.update(self.assumptions.overrides.get(table, {}).get(row_key, {}))
        merged.setdefault(ROW_KEY_COLUMNS.get(table, "key"), row_key)
        return merged

    def row_keys(self, table: str) -> List[str]:
        """Return the sorted row keys of a table."""
        return sorted(self.assumptions.base.get(table, {}))

    # ------------------------------------------------------------------
    # Typed access
    # ------------------------------------------------------------------

    def equipment(self, equipment_key: str) -> Optional[EquipmentRow]:
        """Return the equipment class row, or None for an unknown key."""
        row = self.row(_EQUIPMENT, equipment_key)
        return EquipmentRow.model_validate(row) if row is not None else None

    def evse_rows(self) -> List[EvseRow]:
        """Return all EVSE rows sorted by EVSE key."""
        return [
            EvseRow.model_validate(self.row(_EVSE, key))
            for key in self.row_keys(_EVSE)
        ]

    def fleet(self, segment_key: str) -> Optional[FleetOpsRow]:
        """Return the vessel segment row, or None for an unknown key."""
        if not segment_key:
            return None
        row = self.row(_FLEET, segment_key)
        return FleetOpsRow.model_validate(row) if row is not None else None

    def grid(self, component_key: str) -> Optional[GridRow]:
        """Return the grid component row, or None for an unknown key."""
        row = self.row(_GRID, component_key)
        return GridRow.model_validate(row) if row is not None else None

    def simultaneity_row(self) -> Optional[GridRow]:
        """Return the first grid row whose key mentions simultaneity."""
        for key in self.row_keys(_GRID):
            if "simultaneity" in key:
                return self.grid(key)
        return None

    def economic(self, key: str, default: Optional[float] = None) -> float:
        """Resolve an economic value.

        Args:
            key: Economic assumption key.
            default: Value used when the key is absent. Falls back to
                ``ECONOMIC_DEFAULTS`` when not given.

        Returns:
            The effective value.

        Raises:
            KeyError: If the key is absent and has no default.
        """
        value = self.value(_ECONOMIC, key, "value")
        if value is not None:
            return float(value)
        if default is not None:
            return default
        if key in ECONOMIC_DEFAULTS:
            return ECONOMIC_DEFAULTS[key]
        raise KeyError(f"Economic assumption '{key}' not available")

    def economic_map(self) -> Dict[str, float]:
        """Return every effective economic value, defaults included."""
        values = dict(ECONOMIC_DEFAULTS)
        for key in self.row_keys(_ECONOMIC):
            values[key] = self.economic(key)
        return {key: values[key] for key in sorted(values)}


# ---------------------------------------------------------------------------
# EconomicContext
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class EconomicContext:
    """Prices, emission factors and conversion constants for one calculation.

    Attributes:
        diesel_price: USD per liter.
        electricity_price: USD per kWh.
        diesel_ef_wtw: kg CO2e per liter, well-to-wake.
        grid_ef: kg CO2 per kWh.
        maintenance_saving: Fractional maintenance saving of electric units.
        reefer_utilization: Average load of reefer plugs.
        utilization_factor: Share of the year a service craft can operate.
        useful_kwh_per_liter: Shore-side kWh that replace one liter of diesel.
        hours_per_year: Hours in an operating year.
    """

    diesel_price: float
    electricity_price: float
    diesel_ef_wtw: float
    grid_ef: float
    maintenance_saving: float
    reefer_utilization: float
    utilization_factor: float
    useful_kwh_per_liter: float
    hours_per_year: float

    @classmethod
    def from_resolver(
        cls,
        resolver: AssumptionResolver,
        hours_per_year: float,
        motor_efficiency: float,
    ) -> EconomicContext:
        """Build the context from resolved economic assumptions.

        Args:
            resolver: Resolver over a complete assumption set.
            hours_per_year: Hours in an operating year.
            motor_efficiency: Efficiency of electric drives.

        Returns:
            Populated EconomicContext.
        """
        useful = (
            resolver.economic("diesel_energy_density")
            * resolver.economic("engine_efficiency")
        )
        return cls(
            diesel_price=resolver.economic("diesel_price"),
            electricity_price=resolver.economic("electricity_price"),
            diesel_ef_wtw=resolver.economic("diesel_ef_wtw"),
            grid_ef=resolver.economic("grid_ef"),
            maintenance_saving=resolver.economic("maintenance_saving"),
            reefer_utilization=resolver.economic("reefer_utilization"),
            utilization_factor=resolver.economic("utilization_factor"),
            useful_kwh_per_liter=useful / motor_efficiency if motor_efficiency > 0 else useful,
            hours_per_year=hours_per_year,
        )

    def diesel_co2_tons(self, liters: float) -> float:
        """CO2 of burning diesel, in metric tons."""
        return liters * self.diesel_ef_wtw / 1000.0

    def electric_co2_tons(self, kwh: float) -> float:
        """CO2 of grid electricity, in metric tons."""
        return kwh * self.grid_ef / 1000.0

    def liters_for_kwh(self, kwh: float) -> float:
        """Diesel liters that deliver the same useful work as ``kwh``."""
        if self.useful_kwh_per_liter <= 0:
            return 0.0
        return kwh / self.useful_kwh_per_liter


__all__ = [
    "REQUIRED_ECONOMIC_KEYS",
    "ECONOMIC_DEFAULTS",
    "AssumptionSet",
    "AssumptionResolver",
    "EconomicContext",
]
