"""Parsing of resource quantities such as ``500m``, ``2Gi`` or ``1e3``."""

import math
import re
from fractions import Fraction

_BINARY_SUFFIXES = {
    "Ki": 2**10,
    "Mi": 2**20,
    "Gi": 2**30,
    "Ti": 2**40,
    "Pi": 2**50,
    "Ei": 2**60,
}

_DECIMAL_SUFFIXES = {
    "n": Fraction(1, 10**9),
    "u": Fraction(1, 10**6),
    "m": Fraction(1, 10**3),
    "": Fraction(1),
    "k": Fraction(10**3),
    "M": Fraction(10**6),
    "G": Fraction(10**9),
    "T": Fraction(10**12),
    "P": Fraction(10**15),
    "E": Fraction(10**18),
}

_NUMBER = re.compile(r"([+-]?)(\d+(?:\.\d*)?|\.\d+)(.*)", re.DOTALL)
_EXPONENT = re.compile(r"[eE]([+-]?\d+)")


def _multiplier(suffix: str, text: str) -> Fraction:
    if suffix in _BINARY_SUFFIXES:
        return Fraction(_BINARY_SUFFIXES[suffix])
    if suffix in _DECIMAL_SUFFIXES:
        return _DECIMAL_SUFFIXES[suffix]
    exponent = _EXPONENT.fullmatch(suffix)
    if exponent:
        return Fraction(10) ** int(exponent.group(1))
    raise ValueError(f"unable to parse quantity's suffix: {text!r}")


def parse_quantity(text: str) -> Fraction:
    """Return the exact value of a quantity string."""
    match = _NUMBER.fullmatch(text)
    if match is None:
        raise ValueError(f"quantities must match the regular expression: {text!r}")
    sign, number, suffix = match.groups()
    value = Fraction(number) * _multiplier(suffix, text)
    return -value if sign == "-" else value


def quantity_value(text: str) -> int:
    """Return the quantity as an integer, rounded up."""
    return math.ceil(parse_quantity(text))


def quantity_milli_value(text: str) -> int:
    """Return the quantity in thousandths, rounded up."""
    return math.ceil(parse_quantity(text) * 1000)