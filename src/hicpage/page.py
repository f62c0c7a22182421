"""The page plots are placed on.

A page has a physical size and units, lazily owns a matplotlib figure covering
exactly that size, and keeps a log of the viewports placed on it so that every
plot gets a unique name. One page is "current" per process; plot functions
read it to convert placement units and to register their viewport.
"""

import base64
import io
import logging
import threading

import matplotlib.pyplot as plt

from hicpage.errors import ValidationError
from hicpage.utilities import convert_length, normalize_units

logger = logging.getLogger(__name__)


class Page:
    """A drawing page of a given width and height (in units)."""

    def __init__(self, width: float, height: float, units: str = "inches"):
        self.units = normalize_units(units)
        if width <= 0 or height <= 0:
            raise ValidationError(f"Page dimensions must be positive (got {width} x {height}).")
        self.width = float(width)
        self.height = float(height)
        self._viewports: list[str] = []
        self._lock = threading.Lock()
        self._figure: plt.Figure | None = None
        self._axes: plt.Axes | None = None

    def __repr__(self) -> str:
        return f"Page({self.width} x {self.height} {self.units}, {len(self._viewports)} viewports)"

    @property
    def viewports(self) -> tuple[str, ...]:
        return tuple(self._viewports)

    def get_size(self, units: str | None = None) -> tuple[float, float]:
        """Return (width, height) in the given units (page units by default)."""
        if units is None:
            return (self.width, self.height)
        return (
            convert_length(self.width, self.units, units),
            convert_length(self.height, self.units, units),
        )

    def register_viewport(self, prefix: str) -> str:
        """Record a new viewport and return its unique name (prefix followed by a count)."""
        with self._lock:
            count = sum(1 for name in self._viewports if name.startswith(prefix)) + 1
            name = f"{prefix}{count}"
            self._viewports.append(name)
        return name

    def get_axes(self) -> plt.Axes:
        """Return axes spanning the whole page, with data coordinates in page units."""
        if self._axes is None:
            width_in, height_in = self.get_size("inches")
            self._figure = plt.figure(figsize=(width_in, height_in))
            self._axes = self._figure.add_axes((0, 0, 1, 1))
            self._axes.set_xlim(0, self.width)
            self._axes.set_ylim(0, self.height)
            self._axes.set_axis_off()
        return self._axes

    def get_figure(self) -> plt.Figure:
        self.get_axes()
        return self._figure

    def save(self, filepath: str, dpi=300):
        """Save the page to an image file (format from the extension)."""
        self.get_figure().savefig(filepath, dpi=dpi)
        logger.debug("Saved page to %s", filepath)

    def close(self):
        """Close the page figure (if one was created)."""
        if self._figure is not None:
            plt.close(self._figure)
        self._figure = None
        self._axes = None


# -------------------------------------------------------------------------------
# CURRENT PAGE
# -------------------------------------------------------------------------------

_current_page: Page | None = None
_current_page_lock = threading.Lock()


def create_page(width: float, height: float, units: str = "inches") -> Page:
    """Create a new page and make it the current page, closing the page it replaces."""
    global _current_page
    page = Page(width, height, units)
    with _current_page_lock:
        previous, _current_page = _current_page, page
    if previous is not None:
        previous.close()
    logger.debug("Created %r", page)
    return page


def get_current_page() -> Page | None:
    """Return the current page, or None if no page has been created."""
    return _current_page


def clear_page():
    """Close and forget the current page."""
    global _current_page
    with _current_page_lock:
        page, _current_page = _current_page, None
    if page is not None:
        page.close()


def page_to_base64_and_close(page: Page, dpi=72) -> str:
    """Converts a page's figure to a base64 PNG string and closes it"""

    # Save figure to bytes
    fig_io_bytes = io.BytesIO()
    page.get_figure().savefig(fig_io_bytes, format="png", dpi=dpi)
    fig_io_bytes.seek(0)
    fig_hash = base64.b64encode(fig_io_bytes.read())

    page.close()

    return fig_hash.decode("utf-8")
