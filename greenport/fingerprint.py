# -*- coding: utf-8 -*-
"""
Assumption Fingerprint - AGENT-PORT-001: Port Electrification Engine

Content hash of one profile's override rows. A calculation result is tagged
with the fingerprint of the profile it was computed under; the staleness
tracker only compares fingerprints for equality.

Format: ``"{override_count}:{sha256 hexdigest}"``; a profile without
overrides fingerprints to ``"0:"``.

Example:
    >>> from greenport.fingerprint import compute_fingerprint
    >>> compute_fingerprint([])
    '0:'

Author: GreenPort Platform Team
Date: October 2026
PRD: AGENT-PORT-001 Port Electrification Engine
Status: Production Ready
"""

from __future__ import annotations

import hashlib
import json
from typing import Iterable

from greenport.models import OverrideRow

EMPTY_FINGERPRINT = "0:"


def compute_fingerprint(overrides: Iterable[OverrideRow]) -> str:
    """Fingerprint a profile's override rows.

    Rows are ordered by (table, row key, column) before hashing, so the
    result does not depend on insertion order. The profile name is not part
    of the hash.

    Args:
        overrides: Override rows of a single profile.

    Returns:
        Fingerprint string.
    """
    rows = sorted(
        (
            [row.table_name.value, row.row_key, row.column_name, float(row.custom_value)]
            for row in overrides
        ),
        key=lambda r: (r[0], r[1], r[2]),
    )
    if not rows:
        return EMPTY_FINGERPRINT
    canonical = json.dumps(rows, separators=(",", ":"))
    digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
    return f"{len(rows)}:{digest}"


__all__ = [
    "EMPTY_FINGERPRINT",
    "compute_fingerprint",
]
