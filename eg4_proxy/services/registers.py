"""
Typed access to named EG4 register fields.

The remote-read endpoint returns register values as a flat mapping of field
name to string, number or boolean. Unused or unsupported registers may simply
be absent, and the vendor is loose about types ("30", 30 and 30.0 all occur).
RegisterFields wraps such a mapping and returns a documented default when a
field is absent or unparseable, while recording which names were affected so
schema drift shows up in the debug log instead of as silent zeros.

CHANGELOG:
- 2026-10-16: Drop unused membership test
- 2026-10-14: Initial creation

TODO:
- None
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from typing import Any

logger = logging.getLogger(__name__)


def merge_batches(batches: Iterable[Mapping[str, Any]]) -> dict[str, Any]:
    """Merge register read batches into one namespace.

    Later batches overwrite earlier ones on key collision.
    """
    merged: dict[str, Any] = {}
    for batch in batches:
        merged.update(batch)
    return merged


class RegisterFields:
    """Defaulting accessors over a flat register-field mapping.

    Attributes:
        missing: Field names that were requested but absent.
        invalid: Field names that were present but could not be parsed.
    """

    def __init__(self, raw: Mapping[str, Any]) -> None:
        self._raw = raw
        self.missing: set[str] = set()
        self.invalid: set[str] = set()

    def _lookup(self, name: str) -> Any:
        if name not in self._raw or self._raw[name] is None:
            self.missing.add(name)
            return None
        return self._raw[name]

    def integer(self, name: str, default: int = 0) -> int:
        """Return the field as an int, truncating decimals; *default* otherwise."""
        value = self._lookup(name)
        if value is None:
            return default
        if isinstance(value, bool):
            self.invalid.add(name)
            return default
        if isinstance(value, int):
            return value
        try:
            if isinstance(value, float):
                return int(value)
            text = str(value).strip()
            try:
                return int(text)
            except ValueError:
                return int(float(text))
        except (TypeError, ValueError, OverflowError):
            self.invalid.add(name)
            return default

    def number(self, name: str, default: float = 0.0) -> float:
        """Return the field as a float; *default* when absent or unparseable."""
        value = self._lookup(name)
        if value is None:
            return default
        if isinstance(value, bool):
            self.invalid.add(name)
            return default
        try:
            result = float(value)
        except (TypeError, ValueError):
            self.invalid.add(name)
            return default
        if result != result:  # NaN
            self.invalid.add(name)
            return default
        return result

    def flag(self, name: str) -> bool:
        """Return True only for a literal ``True`` or the string ``"true"``."""
        value = self._lookup(name)
        return value is True or value == "true"

    def text(self, name: str) -> str | None:
        """Return the field as a string, or None when absent."""
        value = self._lookup(name)
        if value is None:
            return None
        return str(value)

    def log_gaps(self, context: str) -> None:
        """Log absent and unparseable field names at DEBUG level."""
        if self.missing:
            logger.debug(
                "%s: %d register field(s) absent, defaulted: %s",
                context,
                len(self.missing),
                ", ".join(sorted(self.missing)),
            )
        if self.invalid:
            logger.debug(
                "%s: %d register field(s) unparseable, defaulted: %s",
                context,
                len(self.invalid),
                ", ".join(sorted(self.invalid)),
            )
