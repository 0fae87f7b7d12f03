# -*- coding: utf-8 -*-
"""
GridSizingEngine - AGENT-PORT-001: Port Electrification Engine

Sizes the grid connection of a terminal from the new peak demand that the
scenario adds:

    gross = grid-powered equipment peak + berth OPS/DC peak + charger peak
    net   = gross * simultaneity_factor

The simultaneity factor is read from the ``piece_grid`` row whose key
contains ``simultaneity``; it is never hardcoded.

Substation band (net MW):   > 30 -> substation_110kv
                            > 10 -> substation_33kv
                            else -> substation_11kv
Cable (net MW):             > 20 -> cable_33kv_3x1core
                            else -> cable_11kv_3core

Example:
    >>> from greenport.grid import GridSizingEngine
    >>> grid = GridSizingEngine().calculate(
    ...     equipment_peak_mw=1.2, berth_peak_mw=7.5, evse_peak_mw=0.9,
    ...     cable_length_m=800, scenario_kwh=12_000_000, resolver=resolver,
    ... )
    >>> print(grid.substation_type, grid.total_grid_capex_usd)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
from typing import Optional, Tuple

from greenport.config import PortEngineConfig, get_config
from greenport.exceptions import AssumptionLoadError
from greenport.models import GridResult
from greenport.resolver import AssumptionResolver

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Bands and fallback unit costs
# ---------------------------------------------------------------------------

#: (threshold MW, component key, fallback USD per MW), checked top-down.
SUBSTATION_BANDS = (
    (30.0, "substation_110kv", 240_000.0),
    (10.0, "substation_33kv", 230_000.0),
    (0.0, "substation_11kv", 200_000.0),
)

#: (threshold MW, component key, fallback USD per meter), checked top-down.
CABLE_BANDS = (
    (20.0, "cable_33kv_3x1core", 150.0),
    (0.0, "cable_11kv_3core", 90.0),
)

#: Fixed and per-MW parts of annual grid connection OPEX, in kUSD.
_GRID_OPEX_FIXED_KUSD = 200.0
_GRID_OPEX_PER_MW_KUSD = 2.0


def _select_band(net_mw: float, bands) -> Tuple[str, float]:
    for threshold, key, fallback in bands:
        if net_mw > threshold:
            return key, fallback
    _, key, fallback = bands[-1]
    return key, fallback


class GridSizingEngine:
    """Stateless grid connection sizer.

    Attributes:
        config: Engine configuration (transformer factors, material share,
            loss fraction, default cable length).
    """

    def __init__(self, config: Optional[PortEngineConfig] = None) -> None:
        self.config = config or get_config()

    def calculate(
        self,
        equipment_peak_mw: float,
        berth_peak_mw: float,
        evse_peak_mw: float,
        cable_length_m: Optional[float],
        scenario_kwh: float,
        resolver: AssumptionResolver,
    ) -> GridResult:
        """Size substation and cabling for the new peak demand.

        Args:
            equipment_peak_mw: New grid-powered equipment peak.
            berth_peak_mw: New OPS/DC berth peak.
            evse_peak_mw: Charger peak.
            cable_length_m: Declared cable length, None for the default.
            scenario_kwh: Terminal electricity use in the scenario.
            resolver: Assumption resolver.

        Returns:
            GridResult.

        Raises:
            AssumptionLoadError: If no simultaneity row is available.
        """
        simultaneity = resolver.simultaneity_row()
        if simultaneity is None or simultaneity.simultaneity_factor is None:
            raise AssumptionLoadError(
                "Failed to load assumptions: missing piece_grid.simultaneity",
                profile=resolver.assumptions.profile,
                missing=["piece_grid.simultaneity"],
            )
        factor = simultaneity.simultaneity_factor

        gross_mw = equipment_peak_mw + berth_peak_mw + evse_peak_mw
        net_mw = gross_mw * factor
        length = (
            self.config.default_cable_length_m if cable_length_m is None
            else cable_length_m
        )

        substation_type, substation_rate = _select_band(net_mw, SUBSTATION_BANDS)
        row = resolver.grid(substation_type)
        if row is not None and row.cost_per_mw is not None:
            substation_rate = row.cost_per_mw
        substation_capex = substation_rate * net_mw
        material = substation_capex * self.config.substation_material_share

        cable_type, cable_rate = _select_band(net_mw, CABLE_BANDS)
        row = resolver.grid(cable_type)
        if row is not None and row.cost_per_meter is not None:
            cable_rate = row.cost_per_meter
        cable_capex = cable_rate * length if net_mw > 0 else 0.0

        grid_opex = (
            (_GRID_OPEX_PER_MW_KUSD * net_mw + _GRID_OPEX_FIXED_KUSD) * 1000.0
            if net_mw > 0 else 0.0
        )

        logger.debug(
            "Grid sizing: gross=%.3f MW net=%.3f MW substation=%s cable=%s",
            gross_mw, net_mw, substation_type, cable_type,
        )

        return GridResult(
            total_equipment_peak_mw=equipment_peak_mw,
            total_berth_peak_mw=berth_peak_mw,
            total_evse_peak_mw=evse_peak_mw,
            gross_peak_demand_mw=gross_mw,
            simultaneity_factor=factor,
            net_peak_demand_mw=net_mw,
            transformer_rating_mw=(
                net_mw
                * self.config.transformer_growth_factor
                * self.config.transformer_safety_factor
            ),
            substation_type=substation_type,
            substation_material_capex_usd=material,
            civil_works_capex_usd=substation_capex - material,
            substation_capex_usd=substation_capex,
            cable_length_m=length,
            cable_type=cable_type,
            cable_capex_usd=cable_capex,
            grid_opex_usd=grid_opex,
            grid_consumption_kwh=scenario_kwh * self.config.grid_loss_fraction,
            total_grid_capex_usd=substation_capex + cable_capex,
        )


__all__ = [
    "SUBSTATION_BANDS",
    "CABLE_BANDS",
    "GridSizingEngine",
]
