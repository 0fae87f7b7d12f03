# -*- coding: utf-8 -*-
"""
PIECE Engine Configuration - AGENT-PORT-001: Port Electrification Engine

Centralized configuration for the port electrification engine covering:
- Default assumption profile and reference data location
- Physical constants used by the calculators (hours per year, motor efficiency)
- Grid sizing factors (transformer growth/safety, substation split, losses)
- Boundary limits (maximum terminals per request)
- Provenance toggle

All settings can be overridden via environment variables with the
``GREENPORT_`` prefix (e.g. ``GREENPORT_DEFAULT_CABLE_LENGTH_M``).

Example:
    >>> from greenport.config import get_config
    >>> cfg = get_config()
    >>> print(cfg.default_profile, cfg.default_cable_length_m)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import os
import threading
from dataclasses import dataclass
from typing import Any, Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Environment variable prefix
# ---------------------------------------------------------------------------

_ENV_PREFIX = "GREENPORT_"


# ---------------------------------------------------------------------------
# PortEngineConfig
# ---------------------------------------------------------------------------


@dataclass
class PortEngineConfig:
    """Complete configuration for the GreenPort PIECE engine.

    Attributes are grouped by concern: profiles, physical constants,
    grid sizing, boundary limits and provenance.

    All attributes can be overridden via environment variables using the
    ``GREENPORT_`` prefix.

    Attributes:
        default_profile: Assumption profile used when none is given.
        reference_data_path: Optional path to a YAML file with the base
            reference tables. Empty means the bundled data file.
        default_cable_length_m: Cable length used when a terminal does not
            declare one.
        hours_per_year: Hours in an operating year.
        electric_motor_efficiency: Efficiency of electric drives, used to turn
            useful diesel work into shore-side kWh.
        transformer_growth_factor: Demand growth allowance on transformer rating.
        transformer_safety_factor: Safety margin on transformer rating.
        substation_material_share: Share of substation CAPEX that is material;
            the remainder is civil works.
        grid_loss_fraction: Fraction of scenario kWh reported as grid losses.
        max_terminals: Maximum number of terminals accepted per request.
        enable_provenance: Whether to record provenance chain entries.
    """

    # -- Profiles ------------------------------------------------------------
    default_profile: str = "default"
    reference_data_path: str = ""

    # -- Physical constants --------------------------------------------------
    default_cable_length_m: float = 500.0
    hours_per_year: float = 8760.0
    electric_motor_efficiency: float = 0.95

    # -- Grid sizing ---------------------------------------------------------
    transformer_growth_factor: float = 1.2
    transformer_safety_factor: float = 1.2
    substation_material_share: float = 0.8
    grid_loss_fraction: float = 0.07

    # -- Boundary limits -----------------------------------------------------
    max_terminals: int = 50

    # -- Provenance ----------------------------------------------------------
    enable_provenance: bool = True

    # ------------------------------------------------------------------
    # Factory helpers
    # ------------------------------------------------------------------

    @classmethod
    def from_env(cls) -> PortEngineConfig:
        """Build a PortEngineConfig from environment variables.

        Every field can be overridden via ``GREENPORT_<FIELD_UPPER>``.
        Boolean values accept ``true/1/yes`` (case-insensitive).
        Integer values are parsed via ``int()``.
        Float values are parsed via ``float()``.

        Returns:
            Populated PortEngineConfig instance.
        """
        prefix = _ENV_PREFIX

        def _env(name: str, default: Any = None) -> Optional[str]:
            return os.environ.get(f"{prefix}{name}", default)

        def _bool(name: str, default: bool) -> bool:
            val = _env(name)
            if val is None:
                return default
            return val.lower() in ("true", "1", "yes")

        def _int(name: str, default: int) -> int:
            val = _env(name)
            if val is None:
                return default
            try:
                return int(val)
            except ValueError:
                logger.warning(
                    "Invalid integer for %s%s=%s, using default %d",
                    prefix, name, val, default,
                )
                return default

        def _float(name: str, default: float) -> float:
            val = _env(name)
            if val is None:
                return default
            try:
                return float(val)
            except ValueError:
                logger.warning(
                    "Invalid float for %s%s=%s, using default %.2f",
                    prefix, name, val, default,
                )
                return default

        def _str(name: str, default: str) -> str:
            val = _env(name)
            if val is None:
                return default
            return val

        config = cls(
            default_profile=_str("DEFAULT_PROFILE", cls.default_profile),
            reference_data_path=_str(
                "REFERENCE_DATA_PATH", cls.reference_data_path,
            ),
            default_cable_length_m=_float(
                "DEFAULT_CABLE_LENGTH_M", cls.default_cable_length_m,
            ),
            hours_per_year=_float("HOURS_PER_YEAR", cls.hours_per_year),
            electric_motor_efficiency=_float(
                "ELECTRIC_MOTOR_EFFICIENCY", cls.electric_motor_efficiency,
            ),
            transformer_growth_factor=_float(
                "TRANSFORMER_GROWTH_FACTOR", cls.transformer_growth_factor,
            ),
            transformer_safety_factor=_float(
                "TRANSFORMER_SAFETY_FACTOR", cls.transformer_safety_factor,
            ),
            substation_material_share=_float(
                "SUBSTATION_MATERIAL_SHARE", cls.substation_material_share,
            ),
            grid_loss_fraction=_float(
                "GRID_LOSS_FRACTION", cls.grid_loss_fraction,
            ),
            max_terminals=_int("MAX_TERMINALS", cls.max_terminals),
            enable_provenance=_bool("ENABLE_PROVENANCE", cls.enable_provenance),
        )

        logger.info(
            "PortEngineConfig loaded: profile=%s, cable=%.0fm, "
            "hours=%.0f, max_terminals=%d, provenance=%s",
            config.default_profile,
            config.default_cable_length_m,
            config.hours_per_year,
            config.max_terminals,
            config.enable_provenance,
        )
        return config


# ---------------------------------------------------------------------------
# Thread-safe singleton accessor
# ---------------------------------------------------------------------------

_config_instance: Optional[PortEngineConfig] = None
_config_lock = threading.Lock()


def get_config() -> PortEngineConfig:
    """Return the singleton PortEngineConfig, creating from env if needed.

    Returns:
        PortEngineConfig singleton instance.
    """
    global _config_instance
    if _config_instance is None:
        with _config_lock:
            if _config_instance is None:
                _config_instance = PortEngineConfig.from_env()
    return _config_instance


def set_config(config: PortEngineConfig) -> None:
    """Replace the singleton PortEngineConfig (useful for testing).

    Args:
        config: New configuration to install.
    """
    global _config_instance
    with _config_lock:
        _config_instance = config
    logger.info("PortEngineConfig replaced programmatically")


def reset_config() -> None:
    """Reset the singleton (primarily for test teardown)."""
    global _config_instance
    with _config_lock:
        _config_instance = None


__all__ = [
    "PortEngineConfig",
    "get_config",
    "set_config",
    "reset_config",
]
