"""
Environment variable reading.

Turns raw environment strings into typed values. Nothing here raises: input
that cannot be interpreted falls back to the supplied default, and string
variables that are not set stay ``None`` so "not configured" is never
confused with an empty value.
"""

from __future__ import annotations

import os
import re
from collections.abc import Mapping

RawEnv = Mapping[str, "str | None"]

TRUTHY = ("true", "1")

# Numeric literal grammar of JavaScript's Number(), ASCII only
_INTEGER = re.compile(r"[+-]?[0-9]+", re.ASCII)
_DECIMAL = re.compile(r"[+-]?(?:Infinity|(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?)", re.ASCII)
_NON_DECIMAL = re.compile(r"0(?P<prefix>[xXoObB])(?P<digits>[0-9a-fA-F]+)", re.ASCII)
_RADIX = {"x": 16, "o": 8, "b": 2}


def to_bool(raw: str | None) -> bool:
    """Only the literals ``"true"`` and ``"1"`` are true."""
    return raw in TRUTHY


def to_number(raw: str | None, default: int | float) -> int | float:
    """
    Parse a number the way a JavaScript ``Number()`` call would.

    Accepts an optional sign with decimal digits, fraction and exponent,
    ``Infinity``, and unsigned ``0x``/``0o``/``0b`` literals. Only ASCII
    digits are recognised and underscores are rejected. Blank input is 0.
    Integer literals are returned as ``int``, everything else as ``float``.
    Zero, negative and infinite values are returned unchanged; there is no
    range check.

    Args:
        raw: Raw environment value (may be None)
        default: Value returned when ``raw`` is absent or not a number

    Returns:
        Parsed number or ``default``
    """
    if raw is None:
        return default
    text = raw.strip()
    if not text:
        return 0
    if _INTEGER.fullmatch(text):
        return int(text)
    if _DECIMAL.fullmatch(text):
        return float(text)
    match = _NON_DECIMAL.fullmatch(text)
    if match:
        try:
            return int(match.group("digits"), _RADIX[match.group("prefix").lower()])
        except ValueError:
            return default
    return default


class EnvReader:
    """Typed, read-only view over a snapshot of the raw environment."""

    def __init__(self, environ: RawEnv | None = None):
        # Snapshot so later changes to os.environ don't leak into a resolution
        self._environ: dict[str, str | None] = dict(os.environ if environ is None else environ)

    def raw(self, name: str) -> str | None:
        return self._environ.get(name)

    def string(self, name: str, default: str | None = None) -> str | None:
        """Return the variable's value; unset or empty falls back to ``default``."""
        return self.first(name, default=default)

    def first(self, *names: str, default: str | None = None) -> str | None:
        """Return the first set, non-empty variable among ``names``."""
        for name in names:
            value = self._environ.get(name)
            if value:
                return value
        return default

    def boolean(self, name: str) -> bool:
        return to_bool(self._environ.get(name))

    def number(self, name: str, default: int | float) -> int | float:
        return to_number(self._environ.get(name), default)

    def __contains__(self, name: str) -> bool:
        return self._environ.get(name) is not None
