# -*- coding: utf-8 -*-
"""
ChargerSizingEngine - AGENT-PORT-001: Port Electrification Engine

Sizes EVSE charging infrastructure for newly electrified battery-powered
equipment. Several units share one charger:

    chargers_required = ceil(equipment_count / units_per_charger)

A manual override replaces the calculated count wholesale. EVSE types with
no new equipment and no override are left out of the result.

Example:
    >>> from greenport.chargers import ChargerSizingEngine
    >>> items, totals = ChargerSizingEngine().calculate(
    ...     {"terminal_tractor": 15}, resolver, overrides={},
    ... )
    >>> print(totals.total_chargers)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import math
from typing import Dict, List, Mapping, Optional, Tuple

from greenport.models import ChargerLineItem, ChargerTotals
from greenport.resolver import AssumptionResolver

logger = logging.getLogger(__name__)


def chargers_required(equipment_count: int, units_per_charger: float) -> int:
    """Return the chargers needed for ``equipment_count`` units.

    A non-positive sharing ratio means one charger per unit.
    """
    if equipment_count <= 0:
        return 0
    if units_per_charger <= 0:
        return equipment_count
    return int(math.ceil(equipment_count / units_per_charger))


class ChargerSizingEngine:
    """Stateless EVSE sizer."""

    def calculate(
        self,
        new_battery_units: Mapping[str, int],
        resolver: AssumptionResolver,
        overrides: Optional[Mapping[str, int]] = None,
    ) -> Tuple[List[ChargerLineItem], ChargerTotals]:
        """Size chargers for newly electrified battery-powered equipment.

        Args:
            new_battery_units: equipment_key -> newly electrified units.
            resolver: Assumption resolver.
            overrides: evse_key -> manual charger count.

        Returns:
            Tuple of (line items sorted by EVSE key, totals).
        """
        overrides = overrides or {}
        items: List[ChargerLineItem] = []

        for evse in resolver.evse_rows():
            count = new_battery_units.get(evse.equipment_key, 0)
            override = overrides.get(evse.evse_key)
            if count <= 0 and override is None:
                continue

            required = chargers_required(count, evse.units_per_charger)
            final = override if override is not None else required
            items.append(ChargerLineItem(
                evse_key=evse.evse_key,
                display_name=evse.display_name or evse.evse_key,
                equipment_key=evse.equipment_key,
                equipment_count=count,
                units_per_charger=evse.units_per_charger,
                chargers_required=required,
                chargers_override=override,
                chargers_final=final,
                power_kw=evse.power_kw,
                total_power_kw=evse.power_kw * final,
                capex_usd=evse.capex_usd,
                total_capex_usd=evse.capex_usd * final,
                annual_opex_usd=evse.annual_opex_usd,
                total_annual_opex_usd=evse.annual_opex_usd * final,
            ))

        known = {evse.evse_key for evse in resolver.evse_rows()}
        for evse_key in sorted(set(overrides) - known):
            logger.warning("Charger override for unknown EVSE %s ignored", evse_key)

        totals = ChargerTotals(
            total_chargers=sum(i.chargers_final for i in items),
            total_power_kw=sum(i.total_power_kw for i in items),
            total_capex_usd=sum(i.total_capex_usd for i in items),
            total_annual_opex_usd=sum(i.total_annual_opex_usd for i in items),
        )
        return items, totals


__all__ = [
    "chargers_required",
    "ChargerSizingEngine",
]
