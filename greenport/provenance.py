# -*- coding: utf-8 -*-
"""
PIECE Provenance Tracker - AGENT-PORT-001: Port Electrification Engine

SHA-256 chained audit trail of assumption override changes and completed
calculations. Each entry hash links to the previous one, so any edit to
the log breaks verification.

Zero-Hallucination Guarantees:
    - All hashes are deterministic SHA-256
    - Chain hashing links entries in sequence from a fixed genesis hash
    - JSON export for external audit systems

Example:
    >>> from greenport.provenance import ProvenanceTracker
    >>> tracker = ProvenanceTracker()
    >>> entry_id = tracker.record_change(
    ...     change_type="insert",
    ...     profile_name="scenario_7",
    ...     target="economic_assumptions.diesel_price.value",
    ...     old_value=None,
    ...     new_value=1.5,
    ... )
    >>> tracker.verify_chain()
    True

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from typing import Any, Dict, List, Optional

from greenport.models import ProvenanceEntry

logger = logging.getLogger(__name__)

CALCULATION_EVENT = "calculation"


class ProvenanceTracker:
    """Chained audit log for the PIECE engine.

    Attributes:
        _entries: Ordered list of provenance entries.
        _last_chain_hash: Most recent chain hash for linking.
    """

    _GENESIS_HASH = hashlib.sha256(b"greenport-piece-genesis").hexdigest()

    def __init__(self) -> None:
        self._entries: List[ProvenanceEntry] = []
        self._last_chain_hash: str = self._GENESIS_HASH
        self._lock = threading.Lock()
        logger.info("ProvenanceTracker initialized")

    def record_change(
        self,
        change_type: str,
        profile_name: str,
        target: str = "",
        old_value: Any = None,
        new_value: Any = None,
    ) -> str:
        """Append an entry to the chain.

        Args:
            change_type: Override change type value or ``"calculation"``.
            profile_name: Affected assumption profile.
            target: ``table.row.column`` for overrides, the result hash for
                calculations, the source profile for copies.
            old_value: Previous value.
            new_value: New value.

        Returns:
            The entry_id of the new entry.
        """
        entry = ProvenanceEntry(
            change_type=change_type,
            profile_name=profile_name,
            target=target,
            old_value=old_value,
            new_value=new_value,
        )
        with self._lock:
            entry.provenance_hash = self._build_next_chain_hash(
                self._hash_dict(self._entry_data(entry)),
            )
            self._entries.append(entry)
            self._last_chain_hash = entry.provenance_hash

        logger.debug(
            "Recorded provenance: %s %s %s",
            change_type, profile_name, entry.entry_id,
        )
        return entry.entry_id

    def record_calculation(
        self,
        profile_name: str,
        fingerprint: str,
        result_hash: str,
    ) -> str:
        """Record a completed calculation."""
        return self.record_change(
            change_type=CALCULATION_EVENT,
            profile_name=profile_name,
            target=result_hash,
            new_value=fingerprint,
        )

    def get_audit_trail(
        self,
        profile_name: Optional[str] = None,
        limit: int = 100,
    ) -> List[ProvenanceEntry]:
        """Return entries, newest first, optionally for one profile."""
        with self._lock:
            entries = list(self._entries)
        if profile_name is not None:
            entries = [e for e in entries if e.profile_name == profile_name]
        entries.reverse()
        return entries[:limit]

    def verify_chain(self, entries: Optional[List[ProvenanceEntry]] = None) -> bool:
        """Recompute chain hashes from genesis and compare.

        Args:
            entries: Entries to verify. Uses all entries if None.

        Returns:
            True if chain is intact, False if tampered.
        """
        check_entries = entries if entries is not None else list(self._entries)
        current_hash = self._GENESIS_HASH

        for entry in check_entries:
            entry_hash = self._hash_dict(self._entry_data(entry))
            combined = f"{current_hash}:{entry_hash}"
            expected_hash = hashlib.sha256(combined.encode()).hexdigest()
            if entry.provenance_hash != expected_hash:
                logger.warning(
                    "Chain verification failed at entry %s", entry.entry_id,
                )
                return False
            current_hash = expected_hash

        return True

    def export_json(self) -> str:
        """Export all provenance entries as a JSON string."""
        records = [entry.model_dump(mode="json") for entry in self._entries]
        return json.dumps(records, indent=2, default=str)

    @property
    def entry_count(self) -> int:
        """Return the number of provenance entries."""
        return len(self._entries)

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _entry_data(entry: ProvenanceEntry) -> Dict[str, Any]:
        return {
            "type": entry.change_type,
            "profile": entry.profile_name,
            "target": entry.target,
            "old": entry.old_value,
            "new": entry.new_value,
            "timestamp": entry.timestamp.isoformat(),
        }

    def _build_next_chain_hash(self, entry_hash: str) -> str:
        combined = f"{self._last_chain_hash}:{entry_hash}"
        return hashlib.sha256(combined.encode()).hexdigest()

    @staticmethod
    def _hash_dict(data: Dict[str, Any]) -> str:
        serialized = json.dumps(data, sort_keys=True, default=str)
        return hashlib.sha256(serialized.encode()).hexdigest()


__all__ = [
    "CALCULATION_EVENT",
    "ProvenanceTracker",
]
