# -*- coding: utf-8 -*-
"""
Assumption Store - AGENT-PORT-001: Port Electrification Engine

In-process home of the five reference tables and of the profile-scoped
override rows layered on top of them. The base tables are seeded from the
bundled ``data/reference_assumptions.yaml`` (or a configured file) and are
never modified; profiles only ever hold sparse numeric overrides.

Profiles:
    - ``default``: the project-wide profile, always present.
    - ``scenario_{id}``: per-scenario profiles, usually created by copying
      the default profile.

Every override mutation is recorded in Prometheus and, when enabled, in the
provenance chain. A mutation that leaves the value unchanged is a no-op, so
the fingerprint of a profile changes exactly when its overrides change.

Example:
    >>> from greenport.store import AssumptionStore
    >>> store = AssumptionStore()
    >>> store.set_override("default", "economic_assumptions", "diesel_price", "value", 1.5)
    <OverrideChangeType.INSERT: 'insert'>
    >>> aset = store.load_assumptions("default")
    >>> aset.override_count
    1

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import math
import threading
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from greenport.config import PortEngineConfig, get_config
from greenport.exceptions import AssumptionLoadError, ProfileError
from greenport.fingerprint import compute_fingerprint
from greenport.metrics import (
    record_assumption_load,
    record_override_change,
    update_profiles_count,
)
from greenport.models import ROW_KEY_COLUMNS, AssumptionTable, OverrideChangeType, OverrideRow
from greenport.provenance import ProvenanceTracker
from greenport.resolver import AssumptionSet

logger = logging.getLogger(__name__)

DEFAULT_DATA_PATH = Path(__file__).parent / "data" / "reference_assumptions.yaml"

#: Numeric columns an override may replace, per table.
EDITABLE_COLUMNS: Dict[str, frozenset] = {
    AssumptionTable.ECONOMIC.value: frozenset({"value"}),
    AssumptionTable.EQUIPMENT.value: frozenset({
        "capex_usd", "install_cost_usd", "annual_opex_usd", "peak_power_kw",
        "kwh_per_teu", "liters_per_teu", "teu_ratio", "lifespan_years",
    }),
    AssumptionTable.EVSE.value: frozenset({
        "capex_usd", "annual_opex_usd", "power_kw", "units_per_charger",
    }),
    AssumptionTable.FLEET_OPS.value: frozenset({
        "ops_power_mw", "transformer_capex_usd", "converter_capex_usd",
        "civil_works_capex_usd", "annual_opex_usd", "tugs_per_call",
        "pilots_per_call", "service_fuel_l_per_hour", "avg_hours_per_call",
        "dc_power_mw", "dc_capex_usd", "dc_annual_opex_usd",
    }),
    AssumptionTable.GRID.value: frozenset({
        "cost_per_mw", "cost_per_meter", "voltage_kv", "simultaneity_factor",
    }),
}

Tables = Dict[str, Dict[str, Dict[str, Any]]]


def scenario_profile_name(scenario_id: Union[int, str]) -> str:
    """Return the assumption profile name of a scenario."""
    return f"scenario_{scenario_id}"


def load_reference_tables(path: Optional[Union[str, Path]] = None) -> Tables:
    """Read the base reference tables from a YAML file.

    The file maps each table name to a list of rows; rows are re-keyed by the
    table's row key column.

    Args:
        path: YAML file to read. Defaults to the bundled reference data.

    Returns:
        table -> row key -> row.

    Raises:
        AssumptionLoadError: If the file is missing, unreadable, or a row
            lacks its key column.
    """
    data_path = Path(path) if path else DEFAULT_DATA_PATH
    if not data_path.exists():
        raise AssumptionLoadError(
            f"Reference data file not found: {data_path}",
            context={"path": str(data_path)},
        )

    try:
        with open(data_path, "r", encoding="utf-8") as f:
            raw = yaml.safe_load(f) or {}
    except yaml.YAMLError as exc:
        raise AssumptionLoadError(
            f"Failed to parse reference data {data_path}: {exc}",
            context={"path": str(data_path)},
        ) from exc

    tables: Tables = {}
    for table, key_column in ROW_KEY_COLUMNS.items():
        rows: Dict[str, Dict[str, Any]] = {}
        for index, row in enumerate(raw.get(table) or []):
            key = row.get(key_column) if isinstance(row, dict) else None
            if not key:
                raise AssumptionLoadError(
                    f"Row {index} of {table} has no {key_column}",
                    context={"path": str(data_path)},
                    missing=[f"{table}[{index}].{key_column}"],
                )
            rows[str(key)] = dict(row)
        tables[table] = rows

    logger.info(
        "Loaded reference data from %s: %s",
        data_path,
        ", ".join(f"{t}={len(r)}" for t, r in tables.items()),
    )
    return tables


# ===========================================================================
# AssumptionStore
# ===========================================================================


class AssumptionStore:
    """Base reference tables plus profile-scoped override rows.

    Overrides are held as profile -> (table, row key, column) -> value.
    All public methods are thread-safe.

    Attributes:
        config: Engine configuration.
        provenance: Provenance tracker, None when provenance is disabled.
    """

    def __init__(
        self,
        config: Optional[PortEngineConfig] = None,
        base: Optional[Tables] = None,
        provenance: Optional[ProvenanceTracker] = None,
    ) -> None:
        self.config = config or get_config()
        self._base: Tables = (
            base if base is not None
            else load_reference_tables(self.config.reference_data_path or None)
        )
        if provenance is None and self.config.enable_provenance:
            provenance = ProvenanceTracker()
        self.provenance = provenance
        self._overrides: Dict[str, Dict[tuple, float]] = {
            self.config.default_profile: {},
        }
        self._lock = threading.RLock()
        update_profiles_count(len(self._overrides))
        logger.info(
            "AssumptionStore initialized: %d tables, default profile %s",
            len(self._base), self.config.default_profile,
        )

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def load_assumptions(self, profile: Optional[str] = None) -> AssumptionSet:
        """Return the base rows plus one profile's overrides.

        An unknown profile has no overrides and resolves to the base tables.

        Args:
            profile: Profile name. Defaults to the configured default profile.

        Returns:
            Complete AssumptionSet tagged with the profile fingerprint.

        Raises:
            AssumptionLoadError: If the assumption set is incomplete.
        """
        name = profile or self.config.default_profile
        with self._lock:
            rows = self._rows(name)
            nested: Dict[str, Dict[str, Dict[str, float]]] = {}
            for row in rows:
                nested.setdefault(row.table_name.value, {}).setdefault(
                    row.row_key, {},
                )[row.column_name] = row.custom_value
            aset = AssumptionSet(
                profile=name,
                base=self._base,
                overrides=nested,
                fingerprint=compute_fingerprint(rows),
            )

        try:
            aset.require_complete()
        except AssumptionLoadError:
            record_assumption_load("failure")
            logger.error("Assumption set for profile %s is incomplete", name)
            raise
        record_assumption_load("success")
        logger.debug(
            "Loaded assumptions for %s: %d overrides, fingerprint %s",
            name, aset.override_count, aset.fingerprint,
        )
        return aset

    def fingerprint(self, profile: Optional[str] = None) -> str:
        """Return the fingerprint of a profile's override rows."""
        name = profile or self.config.default_profile
        with self._lock:
            return compute_fingerprint(self._rows(name))

    def list_overrides(self, profile: Optional[str] = None) -> List[OverrideRow]:
        """Return a profile's override rows sorted by table, row and column."""
        name = profile or self.config.default_profile
        with self._lock:
            return self._rows(name)

    def profiles(self) -> List[str]:
        """Return the known profile names, sorted."""
        with self._lock:
            return sorted(self._overrides)

    def base_row(self, table: str, row_key: str) -> Optional[Dict[str, Any]]:
        """Return a copy of a base reference row."""
        row = self._base.get(table, {}).get(row_key)
        return dict(row) if row is not None else None

    # ------------------------------------------------------------------
    # Override mutations
    # ------------------------------------------------------------------

    def set_override(
        self,
        profile: str,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
        value: float,
    ) -> Optional[OverrideChangeType]:
        """Insert or update one override cell.

        Args:
            profile: Target profile (created on first override).
            table: Assumption table.
            row_key: Row key of an existing base row.
            column: Numeric column of that table.
            value: Replacement value.

        Returns:
            INSERT or UPDATE, or None when the stored value is unchanged.

        Raises:
            ProfileError: For an unknown table, row or column, or a value
                that is not a finite number.
        """
        table_name = self._check_target(profile, table, row_key, column)
        try:
            new_value = float(value)
        except (TypeError, ValueError) as exc:
            raise ProfileError(
                f"Override value for {table_name}.{row_key}.{column} must be numeric",
                profile=profile,
            ) from exc
        if not math.isfinite(new_value):
            raise ProfileError(
                f"Override value for {table_name}.{row_key}.{column} must be finite",
                profile=profile,
            )

        cell = (table_name, row_key, column)
        with self._lock:
            overrides = self._overrides.setdefault(profile, {})
            old_value = overrides.get(cell)
            if old_value is not None and old_value == new_value:
                logger.debug("Override %s unchanged in %s", ".".join(cell), profile)
                return None
            overrides[cell] = new_value
            change = (
                OverrideChangeType.INSERT if old_value is None
                else OverrideChangeType.UPDATE
            )
            update_profiles_count(len(self._overrides))

        self._record(change, profile, ".".join(cell), old_value, new_value)
        logger.info(
            "Override %s %s in profile %s: %s -> %s",
            change.value, ".".join(cell), profile, old_value, new_value,
        )
        return change

    def delete_override(
        self,
        profile: str,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
    ) -> bool:
        """Remove one override cell.

        Returns:
            True if an override was removed, False if none existed.
        """
        table_name = _table_value(table)
        cell = (table_name, row_key, column)
        with self._lock:
            overrides = self._overrides.get(profile, {})
            if cell not in overrides:
                return False
            old_value = overrides.pop(cell)

        self._record(
            OverrideChangeType.DELETE, profile, ".".join(cell), old_value, None,
        )
        logger.info("Override deleted %s in profile %s", ".".join(cell), profile)
        return True

    def copy_profile(self, source: str, target: str) -> int:
        """Replace the overrides of ``target`` with those of ``source``.

        Args:
            source: Profile to copy from.
            target: Profile to copy into.

        Returns:
            Number of override rows copied.

        Raises:
            ProfileError: If source and target are the same profile.
        """
        if not target:
            raise ProfileError("Target profile name must not be empty", profile=target)
        if source == target:
            raise ProfileError(
                f"Cannot copy profile '{source}' onto itself", profile=source,
            )
        with self._lock:
            copied = dict(self._overrides.get(source, {}))
            self._overrides[target] = copied
            update_profiles_count(len(self._overrides))

        self._record(
            OverrideChangeType.COPY_PROFILE, target, source, None, len(copied),
        )
        logger.info(
            "Copied %d overrides from profile %s to %s", len(copied), source, target,
        )
        return len(copied)

    def delete_profile(self, profile: str) -> bool:
        """Remove a profile and all of its overrides.

        Returns:
            True if the profile existed.

        Raises:
            ProfileError: For the default profile.
        """
        if profile == self.config.default_profile:
            raise ProfileError(
                f"Profile '{profile}' cannot be deleted", profile=profile,
            )
        with self._lock:
            removed = self._overrides.pop(profile, None)
            update_profiles_count(len(self._overrides))
        if removed is None:
            return False

        self._record(
            OverrideChangeType.DELETE_PROFILE, profile, "", len(removed), None,
        )
        logger.info("Deleted profile %s (%d overrides)", profile, len(removed))
        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    def _rows(self, profile: str) -> List[OverrideRow]:
        return [
            OverrideRow(
                profile_name=profile,
                table_name=AssumptionTable(table),
                row_key=row_key,
                column_name=column,
                custom_value=value,
            )
            for (table, row_key, column), value in sorted(
                self._overrides.get(profile, {}).items(),
            )
        ]

    def _check_target(
        self,
        profile: str,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
    ) -> str:
        if not profile:
            raise ProfileError("Profile name must not be empty", profile=profile)
        table_name = _table_value(table)
        if table_name not in EDITABLE_COLUMNS:
            raise ProfileError(f"Unknown assumption table '{table_name}'", profile=profile)
        if self.base_row(table_name, row_key) is None:
            raise ProfileError(
                f"Unknown row '{row_key}' in {table_name}", profile=profile,
            )
        if column not in EDITABLE_COLUMNS[table_name]:
            raise ProfileError(
                f"Column '{column}' of {table_name} is not editable", profile=profile,
            )
        return table_name

    def _record(
        self,
        change: OverrideChangeType,
        profile: str,
        target: str,
        old_value: Any,
        new_value: Any,
    ) -> None:
        record_override_change(change.value)
        if self.provenance is not None:
            self.provenance.record_change(
                change_type=change.value,
                profile_name=profile,
                target=target,
                old_value=old_value,
                new_value=new_value,
            )


def _table_value(table: Union[str, AssumptionTable]) -> str:
    return table.value if isinstance(table, AssumptionTable) else str(table)


__all__ = [
    "DEFAULT_DATA_PATH",
    "EDITABLE_COLUMNS",
    "scenario_profile_name",
    "load_reference_tables",
    "AssumptionStore",
]
