"""Placement geometry for triangle Hi-C plots.

A triangle Hi-C plot is a square matrix rotated by 45 degrees and cut along its
diagonal. For a plot of base width w the full triangle is w / 2 tall; if the
requested height is smaller, the top is cut off and the plot is a trapezoid
whose top edge is trap_top = 2 * (w / 2 - height) wide.

All functions work in page units with the origin at the bottom-left of the page.
"""

import logging
import math
from dataclasses import dataclass

from hicpage.constants import FULL_DEVICE_BASE_FRACTION, FULL_DEVICE_BOTTOM_FRACTION
from hicpage.definitions import Shape

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Geometry:
    """Bottom-left corner (new_x, new_y) of a plot's base and its visible shape."""
    new_x: float
    new_y: float
    shape: Shape


def is_full_triangle(width: float, height: float) -> bool:
    """Return True if a plot of this width shows its whole triangle at this height."""
    calc_height = width * 0.5
    return calc_height <= height or math.isclose(calc_height, height, rel_tol=1e-12)


def _as_pair(just: tuple[str, ...]) -> tuple[str, str]:
    """Expand a single-keyword justification to (horizontal, vertical)."""
    match just:
        case ("left",):
            return ("left", "center")
        case ("right",):
            return ("right", "center")
        case ("bottom",):
            return ("center", "bottom")
        case ("top",):
            return ("center", "top")
        case (_,):
            return ("center", "center")
        case _:
            return just


def reset_justification(
    just: tuple[str, ...], x: float | None, y: float | None, width: float | None, height: float | None
) -> tuple[str, ...]:
    """Collapse (left, top) and (right, top) to top when the whole triangle will be shown.

    Left and right have no meaning at the top of a full triangle (it is a single point).
    """
    if x is None or y is None:
        return just
    if is_full_triangle(width, height) and just in (("left", "top"), ("right", "top")):
        logger.info("Entire triangle will be plotted. Auto-adjusting plot justification to top.")
        return ("top",)
    return just


def resolve_geometry(x: float, y: float, width: float, height: float, just: tuple[str, ...]) -> Geometry:
    """Convert a justified (x, y) location to the bottom-left corner of the plot base."""

    if is_full_triangle(width, height):
        calc_height = width * 0.5
        match _as_pair(just):
            case ("left", "bottom"):
                new_x, new_y = x, y
            case ("right", "bottom"):
                new_x, new_y = x - width, y
            case ("left", "center"):
                new_x, new_y = x - 0.25 * width, y - 0.5 * calc_height
            case ("right", "center"):
                new_x, new_y = x - 0.75 * width, y - 0.5 * calc_height
            case ("center", "bottom"):
                new_x, new_y = x - 0.5 * width, y
            case ("center", "top"):
                new_x, new_y = x - 0.5 * width, y - calc_height
            case _:
                new_x, new_y = x - 0.5 * width, y - 0.5 * calc_height
        return Geometry(new_x, new_y, Shape.TRIANGLE)

    trap_top = 2 * (width * 0.5 - height)
    base_span = width - trap_top
    match _as_pair(just):
        case ("left", "bottom"):
            new_x, new_y = x, y
        case ("right", "bottom"):
            new_x, new_y = x - width, y
        case ("left", "center"):
            new_x, new_y = x - 0.25 * base_span, y - 0.5 * height
        case ("right", "center"):
            new_x, new_y = x - (0.75 * base_span + trap_top), y - 0.5 * height
        case ("center", "bottom"):
            new_x, new_y = x - (0.5 * trap_top + 0.5 * base_span), y
        case ("center", "top"):
            new_x, new_y = x - (0.5 * trap_top + 0.5 * base_span), y - height
        case ("left", "top"):
            new_x, new_y = x - 0.5 * base_span, y - height
        case ("right", "top"):
            new_x, new_y = x - (0.5 * base_span + trap_top), y - height
        case _:
            new_x, new_y = x - (0.5 * trap_top + 0.5 * base_span), y - 0.5 * height
    return Geometry(new_x, new_y, Shape.TRAPEZOID)


def triangle_outline(
    new_x: float, new_y: float, width: float, height: float, shape: Shape
) -> tuple[tuple[float, float], ...]:
    """Return the visible outline of a plot as polygon vertices (counter-clockwise from bottom-left)."""
    match shape:
        case Shape.TRIANGLE:
            return (
                (new_x, new_y),
                (new_x + width, new_y),
                (new_x + width * 0.5, new_y + width * 0.5),
            )
        case Shape.TRAPEZOID:
            return (
                (new_x, new_y),
                (new_x + width, new_y),
                (new_x + width - height, new_y + height),
                (new_x + height, new_y + height),
            )


def full_device_geometry(page_width: float, page_height: float) -> tuple[float, float, float, float]:
    """Return (x, y, width, height) of a full triangle laid out to fill a page.

    The base covers a fixed fraction of the page (limited so the apex still fits),
    is centered horizontally, and sits a fixed fraction of the page up from the bottom.
    """
    width = FULL_DEVICE_BASE_FRACTION * min(page_width, 2 * page_height)
    x = (page_width - width) / 2
    y = FULL_DEVICE_BOTTOM_FRACTION * page_height
    return (x, y, width, width * 0.5)
