"""Hashing utilities for cache key generation."""

import hashlib
import json
from decimal import Decimal
from typing import Any


def hash_value(value: Any) -> str:
    """Create a deterministic hash of a value.

    Args:
        value: Any JSON-serializable value. Callers normalize decimals
            with ``normalize_decimal`` first.

    Returns:
        A hexadecimal hash string (first 16 chars of SHA-256).
    """
    if value is None:
        return "none"

    # Normalize to JSON with sorted keys for determinism
    normalized = json.dumps(value, sort_keys=True, default=str)
    return hashlib.sha256(normalized.encode()).hexdigest()[:16]


def normalize_decimal(value: Decimal) -> str:
    """Render a decimal without exponent or trailing zeros.

    Args:
        value: The decimal to render.

    Returns:
        A canonical string, e.g. ``"10"`` for ``Decimal("10.00")``.
    """
    normalized = value.normalize()
    if normalized == normalized.to_integral_value():
        return str(normalized.quantize(Decimal(1)))
    return format(normalized, "f")
