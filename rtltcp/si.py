"""Parse and format frequencies written with SI suffixes ("100M", "2.4M", "915k")."""

import re
from typing import Optional

SI_PREFIXES = {
    "p": 1e-12,
    "n": 1e-9,
    "u": 1e-6,
    "µ": 1e-6,
    "m": 1e-3,
    "":  1.0,
    "k": 1e3,
    "K": 1e3,
    "M": 1e6,
    "G": 1e9,
    "T": 1e12,
}

_SI_RE = re.compile(r"^\s*([-+]?(?:\d+\.?\d*|\.\d+)(?:[eE][-+]?\d+)?)\s*([pnuµmkKMGT]?)\s*$")


def parse(text: str) -> float:
    """Return the numeric value of ``text``.

    Raises ValueError when ``text`` is not a number with an optional single
    SI suffix.
    """
    match = _SI_RE.match(text or "")
    if match is None:
        raise ValueError(f"invalid scientific notation: {text!r}")
    mantissa, suffix = match.groups()
    return float(mantissa) * SI_PREFIXES[suffix]


def try_parse(text: str) -> Optional[float]:
    try:
        return parse(text)
    except ValueError:
        return None


def format_si(value: float) -> str:
    """Render ``value`` with the largest suffix that keeps the mantissa >= 1."""
    if value == 0:
        return "0"
    for suffix in ("T", "G", "M", "k", "", "m", "u", "n", "p"):
        scale = SI_PREFIXES[suffix]
        if abs(value) >= scale:
            return f"{value / scale:g}{suffix}"
    return f"{value:g}"
