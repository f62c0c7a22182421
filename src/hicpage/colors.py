"""Scaling contact values to a range and mapping them to palette colors.
"""

import numpy as np
import pandas as pd
from matplotlib import colormaps
from matplotlib.colors import Colormap, LinearSegmentedColormap, ListedColormap, to_hex

from hicpage.constants import DEFAULT_PALETTE_COLORS, PALETTE_STEPS
from hicpage.errors import ValidationError

# Default white to dark red colormap for triangle Hi-C plots
REDMAP = LinearSegmentedColormap.from_list("white_darkred", DEFAULT_PALETTE_COLORS)


def get_palette(palette=None) -> Colormap:
    """Return a matplotlib colormap for a palette.

    A palette may be a Colormap, a registered colormap name, a list of colors
    (interpolated linearly), or a function returning n colors when called with n.
    None gives the default white to dark red colormap.
    """
    if palette is None:
        return REDMAP
    if isinstance(palette, Colormap):
        return palette
    if isinstance(palette, str):
        try:
            return colormaps[palette]
        except KeyError:
            raise ValidationError(f"Invalid palette: '{palette}' is not a matplotlib colormap.")
    if isinstance(palette, (list, tuple)):
        return LinearSegmentedColormap.from_list("custom_palette", list(palette))
    if callable(palette):
        return ListedColormap(list(palette(PALETTE_STEPS)))
    raise ValidationError(f"Invalid palette: {palette!r}.")


def set_zrange(counts: pd.Series, zrange: tuple[float, float] | None) -> tuple[float, float] | None:
    """Return the value range for a set of counts.

    An explicit zrange is returned as is. Otherwise a single unique value v gives
    (v, v), several values give (0, max), and no values give None.
    """
    if zrange is not None:
        return (zrange[0], zrange[1])
    unique = pd.unique(counts)
    if len(unique) == 1:
        return (float(unique[0]), float(unique[0]))
    if len(unique) > 1:
        return (0.0, float(counts.max()))
    return None


def clamp_counts(counts: pd.Series, zrange: tuple[float, float] | None) -> pd.Series:
    """Set counts at or below zrange[0] to zrange[0] and counts at or above zrange[1] to zrange[1]."""
    if zrange is None:
        return counts
    return counts.clip(lower=zrange[0], upper=zrange[1])


def map_to_colors(values, palette, zrange: tuple[float, float], steps=PALETTE_STEPS) -> list[str]:
    """Map values onto `steps` evenly spaced palette colors across zrange (as hex strings)."""
    cmap = get_palette(palette)
    colors = [to_hex(c) for c in cmap(np.linspace(0, 1, steps))]
    lo, hi = zrange
    fraction = (np.asarray(values, dtype=float) - lo) / (hi - lo)
    indices = np.clip(np.floor(fraction * steps), 0, steps - 1).astype(int)
    return [colors[i] for i in indices]


def scale_counts(
    frame: pd.DataFrame, zrange: tuple[float, float] | None, palette
) -> tuple[pd.DataFrame, tuple[float, float] | None, Colormap | None]:
    """Clamp counts to a (possibly defaulted) zrange and assign a color to every contact.

    Returns the scaled table, the zrange used and the palette used. If the zrange
    does not have two distinct values, no colors are generated: the color column
    is None and the returned palette is None.
    """
    scaled = frame.copy()
    zrange = set_zrange(scaled["counts"], zrange)
    scaled["counts"] = clamp_counts(scaled["counts"], zrange)

    if zrange is not None and zrange[0] != zrange[1]:
        cmap = get_palette(palette)
        scaled["color"] = map_to_colors(scaled["counts"], cmap, zrange) if not scaled.empty else []
        return scaled, zrange, cmap

    scaled["color"] = None
    return scaled, zrange, None
