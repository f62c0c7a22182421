"""Very basic package-wide utility functions for e.g. simple unit conversions.
"""

import os

from hicpage.constants import (
    HIC_EXTENSIONS,
    HORIZONTAL_JUSTS,
    UNIT_ALIASES,
    UNIT_TO_INCHES,
    VERTICAL_JUSTS,
)
from hicpage.errors import ValidationError


def chr_unprefix(chr_string: str) -> str:
    """Remove the "chr" prefix from a chromosome string.

    If no "chr" prefix is present, returns the string unchanged.
    """
    if chr_string.startswith("chr"):
        return chr_string[3:]
    return chr_string


def chr_prefix(chr_string: int | str) -> str:
    """Add the "chr" prefix to a chromosome if not already included.

    If the "chr" prefix is already present, returns the string unchanged.
    """
    if str(chr_string).startswith("chr"):
        return str(chr_string)
    return f"chr{str(chr_string)}"


def resolution_to_int(suffixed_str: str | int) -> int:
    """Convert a string with a "Mb" or "kb" suffix to an int.
    """
    if isinstance(suffixed_str, int):
        return suffixed_str
    if suffixed_str.endswith("Mb"):
        return int(float(suffixed_str[:-2]) * 1e6)
    elif suffixed_str.endswith("kb"):
        return int(float(suffixed_str[:-2]) * 1e3)
    else:
        return int(float(suffixed_str))


def int_to_resolution(resolution: int) -> str:
    """Convert an int resolution into a suffixed with either "kb" or "Mb".

    Rounds to the nearest whole thousand (kb) or million (Mb).

    """
    if resolution >= 1000000:
        if resolution % 1000000 == 0:
            return f"{resolution // 1000000}Mb"
        else:
            return f"{resolution / 1000000:.1f}Mb"
    elif resolution >= 1000:
        return f"{resolution // 1000}kb"
    else:
        return f"{resolution}b"


def has_hic_extension(filepath: str) -> bool:
    """Return True if the filepath ends with a recognized Hi-C extension (case-insensitive)."""
    return os.path.splitext(str(filepath))[1].lower() in HIC_EXTENSIONS


def normalize_units(units: str) -> str:
    """Return the canonical name of a physical unit, raising ValidationError if unknown."""
    canonical = UNIT_ALIASES.get(units, units)
    if canonical not in UNIT_TO_INCHES:
        raise ValidationError(
            f"Invalid units: '{units}' (expected one of {', '.join(sorted(UNIT_TO_INCHES))})."
        )
    return canonical


def convert_length(value: float, from_units: str, to_units: str) -> float:
    """Convert a length between two physical units (e.g. cm to inches)."""
    from_units = normalize_units(from_units)
    to_units = normalize_units(to_units)
    if from_units == to_units:
        return float(value)
    return float(value) * UNIT_TO_INCHES[from_units] / UNIT_TO_INCHES[to_units]


def parse_just(just: str | tuple[str, ...] | list[str]) -> tuple[str, ...]:
    """Normalize a justification to a tuple of one or two lowercase keywords.

    A single value may be any of left/right/top/bottom/center. Two values are
    (horizontal, vertical); a pair of known keywords in any other order is kept
    and later placed as centered. "centre" is accepted as an alias for "center".
    """
    if isinstance(just, str):
        values = (just,)
    else:
        values = tuple(just)

    values = tuple("center" if v.lower() == "centre" else v.lower() for v in values)

    match values:
        case (single,) if single in HORIZONTAL_JUSTS | VERTICAL_JUSTS:
            return values
        case (first, second) if {first, second} <= HORIZONTAL_JUSTS | VERTICAL_JUSTS:
            return values
        case _:
            raise ValidationError(
                f"Invalid justification: {just} (expected one or two of left/right/center/top/bottom)."
            )
