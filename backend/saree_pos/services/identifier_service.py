# Overview: Code input adapter; turns typed or scanned text into a canonical item code.

"""
Identifier Service

Manual entry and the camera scanner both hand us free text. Everything that
reaches the ledger goes through normalize_code first so lookups, uniqueness
checks and sale references all compare the same canonical form.
"""

from __future__ import annotations

import random
from typing import Callable, Iterable


CODE_PREFIX = "SAR"


def normalize_code(value: str | None) -> str:
    """Strip whitespace and stray quote characters, upper-case."""
    if value is None:
        return ""
    return str(value).replace('"', "").strip().upper()


def generate_code(item_type: str | None, rng: Callable[[int, int], int] | None = None) -> str:
    """
    Build a printable code like SAR-COT-4821 from the saree type.

    Types shorter than three letters are used as-is; a missing type falls back
    to the bare prefix.
    """
    rng = rng or random.randint
    prefix = normalize_code(item_type)[:3] or "GEN"
    return f"{CODE_PREFIX}-{prefix}-{rng(1000, 9999)}"


def generate_unique_code(
    item_type: str | None,
    existing: Iterable[str],
    rng: Callable[[int, int], int] | None = None,
    attempts: int = 50,
) -> str:
    taken = set(existing)
    for _ in range(attempts):
        code = generate_code(item_type, rng)
        if code not in taken:
            return code
    raise RuntimeError("Could not generate a unique item code")
