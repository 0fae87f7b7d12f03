# -*- coding: utf-8 -*-
"""
PIECE Service Setup - AGENT-PORT-001: Port Electrification Engine

Provides ``configure_port_service(app)`` which wires up the PIECE engine
(assumption store, aggregator, provenance) and mounts the REST API.

Also exposes ``get_port_service(app)`` for programmatic access, the
``PortElectrificationService`` facade class, and ``get_router()`` which
builds the FastAPI router with 7 endpoints at ``/api/v1/piece``:

    POST   /calculate
    GET    /assumptions/{profile}/fingerprint
    PUT    /assumptions/{profile}/overrides
    DELETE /assumptions/{profile}/overrides
    POST   /assumptions/{profile}/copy
    DELETE /assumptions/{profile}
    GET    /health

Usage:
    >>> from fastapi import FastAPI
    >>> from greenport.setup import configure_port_service
    >>> app = FastAPI()
    >>> configure_port_service(app)

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import logging
import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Union

from greenport.aggregator import PortAggregator
from greenport.config import PortEngineConfig, get_config
from greenport.exceptions import (
    AssumptionLoadError,
    CalculationInProgressError,
    GreenPortException,
    ProfileError,
    ValidationError,
)
from greenport.metrics import PROMETHEUS_AVAILABLE
from greenport.models import AssumptionTable, OverrideChangeType, OverrideRow, PortResult
from greenport.provenance import ProvenanceTracker
from greenport.session import PlanningSession
from greenport.store import AssumptionStore

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Optional FastAPI import
# ---------------------------------------------------------------------------

try:
    from fastapi import FastAPI
    FASTAPI_AVAILABLE = True
except ImportError:
    FastAPI = None  # type: ignore[assignment, misc]
    FASTAPI_AVAILABLE = False


# ===================================================================
# PortElectrificationService facade
# ===================================================================

# Thread-safe singleton lock
_singleton_lock = threading.Lock()
_singleton_instance: Optional["PortElectrificationService"] = None


class PortElectrificationService:
    """Unified facade over the PIECE engine.

    Owns the assumption store, the aggregator and the provenance chain, and
    hands out planning sessions bound to them.

    Attributes:
        config: PortEngineConfig instance.
        provenance: ProvenanceTracker instance, None when disabled.
        store: AssumptionStore instance.
        aggregator: PortAggregator instance.

    Example:
        >>> service = PortElectrificationService()
        >>> result = service.calculate({"terminals": [{"id": "t1"}]})
        >>> result.totals.total_capex_usd
        0.0
    """

    def __init__(
        self,
        config: Optional[PortEngineConfig] = None,
        store: Optional[AssumptionStore] = None,
    ) -> None:
        """Initialize the PIECE service facade.

        Args:
            config: Optional engine config. Uses global config if None.
            store: Optional pre-built assumption store.
        """
        self.config = config or get_config()
        if store is not None:
            self.store = store
            self.provenance = store.provenance
        else:
            self.provenance = (
                ProvenanceTracker() if self.config.enable_provenance else None
            )
            self.store = AssumptionStore(config=self.config, provenance=self.provenance)
        self.aggregator = PortAggregator(self.config)
        self._started = False

        logger.info("PortElectrificationService facade created")

    # ------------------------------------------------------------------
    # Sessions and calculation
    # ------------------------------------------------------------------

    def new_session(self, profile: Optional[str] = None) -> PlanningSession:
        """Create a planning session bound to this service."""
        session = PlanningSession(
            self.store,
            config=self.config,
            aggregator=self.aggregator,
            provenance=self.provenance,
        )
        if profile:
            session.profile = profile
        return session

    def calculate(
        self,
        payload: Mapping[str, Any],
        profile: Optional[str] = None,
    ) -> PortResult:
        """Validate and calculate a request payload in a one-shot session.

        Args:
            payload: Mapping shaped like CalculationRequest.
            profile: Assumption profile. Defaults to the configured default.

        Returns:
            PortResult.
        """
        session = self.new_session(profile)
        session.load_saved(payload)
        return session.calculate()

    # ------------------------------------------------------------------
    # Assumption profiles
    # ------------------------------------------------------------------

    def fingerprint(self, profile: str) -> str:
        return self.store.fingerprint(profile)

    def list_overrides(self, profile: str) -> List[OverrideRow]:
        return self.store.list_overrides(profile)

    def set_override(
        self,
        profile: str,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
        value: float,
    ) -> Optional[OverrideChangeType]:
        return self.store.set_override(profile, table, row_key, column, value)

    def delete_override(
        self,
        profile: str,
        table: Union[str, AssumptionTable],
        row_key: str,
        column: str,
    ) -> bool:
        return self.store.delete_override(profile, table, row_key, column)

    def copy_profile(self, source: str, target: str) -> int:
        return self.store.copy_profile(source, target)

    def delete_profile(self, profile: str) -> bool:
        return self.store.delete_profile(profile)

    # ------------------------------------------------------------------
    # Metrics and health
    # ------------------------------------------------------------------

    def get_metrics(self) -> Dict[str, Any]:
        """Get PIECE service metrics summary.

        Returns:
            Dictionary with service metric summaries.
        """
        return {
            "prometheus_available": PROMETHEUS_AVAILABLE,
            "started": self._started,
            "profiles_count": len(self.store.profiles()),
            "provenance_entries": (
                self.provenance.entry_count if self.provenance is not None else 0
            ),
        }

    def get_health(self) -> Dict[str, Any]:
        """Health check: the default profile must load completely."""
        try:
            self.store.load_assumptions(self.config.default_profile)
            assumptions = "available"
        except AssumptionLoadError:
            assumptions = "unavailable"
        return {
            "status": "healthy" if assumptions == "available" else "unhealthy",
            "service": "piece",
            "started": self._started,
            "assumptions": assumptions,
            "provenance_chain_valid": (
                self.provenance.verify_chain() if self.provenance is not None else True
            ),
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def startup(self) -> None:
        """Start the PIECE service.

        Safe to call multiple times.
        """
        if self._started:
            logger.debug("PortElectrificationService already started; skipping")
            return

        logger.info("PortElectrificationService starting up...")
        self._started = True
        logger.info("PortElectrificationService startup complete")

    def shutdown(self) -> None:
        """Shutdown the PIECE service."""
        if not self._started:
            return

        self._started = False
        logger.info("PortElectrificationService shut down")


# ===================================================================
# Thread-safe singleton access
# ===================================================================


def get_piece_service() -> PortElectrificationService:
    """Get or create the singleton PortElectrificationService instance."""
    global _singleton_instance
    if _singleton_instance is None:
        with _singleton_lock:
            if _singleton_instance is None:
                _singleton_instance = PortElectrificationService()
    return _singleton_instance


def reset_piece_service() -> None:
    """Drop the singleton (primarily for test teardown)."""
    global _singleton_instance
    with _singleton_lock:
        _singleton_instance = None


# ===================================================================
# FastAPI integration
# ===================================================================


def configure_port_service(
    app: Any,
    config: Optional[PortEngineConfig] = None,
) -> PortElectrificationService:
    """Configure the PIECE service on a FastAPI application.

    Creates the PortElectrificationService, stores it in app.state, mounts
    the PIECE API router, and starts the service.

    Args:
        app: FastAPI application instance.
        config: Optional engine config.

    Returns:
        PortElectrificationService instance.
    """
    global _singleton_instance

    service = PortElectrificationService(config=config)

    # Store as singleton
    with _singleton_lock:
        _singleton_instance = service

    # Attach to app state
    app.state.port_service = service

    # Mount PIECE API router
    router = get_router(service)
    if router is not None:
        app.include_router(router)
        logger.info("PIECE API router mounted")
    else:
        logger.warning("PIECE router not available; API not mounted")

    # Start service
    service.startup()

    logger.info("PIECE service configured on app")
    return service


def get_port_service(app: Any) -> PortElectrificationService:
    """Get the PortElectrificationService instance from app state.

    Raises:
        RuntimeError: If the PIECE service is not configured.
    """
    service = getattr(app.state, "port_service", None)
    if service is None:
        raise RuntimeError(
            "PIECE service not configured. "
            "Call configure_port_service(app) first."
        )
    return service


def _status_code(exc: GreenPortException) -> int:
    if isinstance(exc, ValidationError):
        return 422
    if isinstance(exc, ProfileError):
        return 400
    if isinstance(exc, CalculationInProgressError):
        return 409
    if isinstance(exc, AssumptionLoadError):
        return 503
    return 500


def get_router(service: Optional[PortElectrificationService] = None) -> Any:
    """Get the PIECE API router.

    Creates a FastAPI APIRouter with all 7 endpoints at prefix
    ``/api/v1/piece``. Engine errors are returned as their ``to_dict()``
    payload under ``detail``.

    Args:
        service: Service the handlers use. Uses the singleton if None.

    Returns:
        FastAPI APIRouter or None if FastAPI not available.
    """
    if not FASTAPI_AVAILABLE:
        return None

    try:
        from fastapi import APIRouter, HTTPException, Query
    except ImportError:
        return None

    router = APIRouter(
        prefix="/api/v1/piece",
        tags=["piece"],
    )

    def _svc() -> PortElectrificationService:
        """Get the service for route handlers."""
        return service if service is not None else get_piece_service()

    def _http_error(exc: GreenPortException) -> HTTPException:
        return HTTPException(status_code=_status_code(exc), detail=exc.to_dict())

    # ------------------------------------------------------------------
    # 1. POST /calculate - Calculate a port
    # ------------------------------------------------------------------
    @router.post("/calculate")
    async def post_calculate(
        request: Dict[str, Any],
        profile: Optional[str] = Query(None),
    ) -> Dict[str, Any]:
        """Validate and calculate a port under baseline and scenario."""
        try:
            result = _svc().calculate(request, profile=profile)
        except GreenPortException as exc:
            raise _http_error(exc)
        return result.model_dump(mode="json")

    # ------------------------------------------------------------------
    # 2. GET /assumptions/{profile}/fingerprint - Profile fingerprint
    # ------------------------------------------------------------------
    @router.get("/assumptions/{profile}/fingerprint")
    async def get_fingerprint(profile: str) -> Dict[str, Any]:
        """Get the fingerprint of a profile's overrides."""
        return {"profile": profile, "fingerprint": _svc().fingerprint(profile)}

    # ------------------------------------------------------------------
    # 3. PUT /assumptions/{profile}/overrides - Insert or update an override
    # ------------------------------------------------------------------
    @router.put("/assumptions/{profile}/overrides")
    async def put_override(profile: str, request: Dict[str, Any]) -> Dict[str, Any]:
        """Insert or update one override cell."""
        svc = _svc()
        try:
            change = svc.set_override(
                profile,
                request.get("table_name", ""),
                request.get("row_key", ""),
                request.get("column_name", ""),
                request.get("custom_value"),
            )
        except GreenPortException as exc:
            raise _http_error(exc)
        return {
            "profile": profile,
            "change": change.value if change is not None else None,
            "fingerprint": svc.fingerprint(profile),
        }

    # ------------------------------------------------------------------
    # 4. DELETE /assumptions/{profile}/overrides - Remove an override
    # ------------------------------------------------------------------
    @router.delete("/assumptions/{profile}/overrides")
    async def delete_override(
        profile: str,
        table_name: str = Query(...),
        row_key: str = Query(...),
        column_name: str = Query(...),
    ) -> Dict[str, Any]:
        """Remove one override cell."""
        svc = _svc()
        if not svc.delete_override(profile, table_name, row_key, column_name):
            raise HTTPException(status_code=404, detail="Override not found")
        return {"profile": profile, "fingerprint": svc.fingerprint(profile)}

    # ------------------------------------------------------------------
    # 5. POST /assumptions/{profile}/copy - Copy another profile into this one
    # ------------------------------------------------------------------
    @router.post("/assumptions/{profile}/copy")
    async def post_copy_profile(profile: str, request: Dict[str, Any]) -> Dict[str, Any]:
        """Replace this profile's overrides with those of ``source``."""
        svc = _svc()
        source = request.get("source") or svc.config.default_profile
        try:
            copied = svc.copy_profile(source, profile)
        except GreenPortException as exc:
            raise _http_error(exc)
        return {
            "profile": profile,
            "source": source,
            "copied": copied,
            "fingerprint": svc.fingerprint(profile),
        }

    # ------------------------------------------------------------------
    # 6. DELETE /assumptions/{profile} - Delete a profile
    # ------------------------------------------------------------------
    @router.delete("/assumptions/{profile}", status_code=204)
    async def delete_profile(profile: str) -> None:
        """Delete a profile and its overrides."""
        try:
            deleted = _svc().delete_profile(profile)
        except GreenPortException as exc:
            raise _http_error(exc)
        if not deleted:
            raise HTTPException(status_code=404, detail="Profile not found")

    # ------------------------------------------------------------------
    # 7. GET /health - Service health
    # ------------------------------------------------------------------
    @router.get("/health")
    async def get_health() -> Dict[str, Any]:
        """Service health check."""
        return _svc().get_health()

    return router


__all__ = [
    "FASTAPI_AVAILABLE",
    "PortElectrificationService",
    "configure_port_service",
    "get_port_service",
    "get_piece_service",
    "reset_piece_service",
    "get_router",
]
