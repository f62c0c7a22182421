"""Useful package-wide basic types.

These types describe a triangle Hi-C plot from the request (what to plot and
where) through to the result (which shapes to draw and in which frame).

"""
from __future__ import annotations
from dataclasses import dataclass, field, replace
from enum import Enum
from numbers import Real
from typing import Any

import numpy as np
import pandas as pd
from matplotlib.colors import Colormap

from hicpage.constants import ASSEMBLY_CHROM_SIZES, PREFIXED_ASSEMBLIES, SQRT2
from hicpage.errors import ValidationError
from hicpage.utilities import convert_length, normalize_units


class MatrixType(Enum):
    """The type of Hi-C matrix to read: raw OBSERVED counts or observed/expected (OE) ratios."""
    OBSERVED = "observed"
    OE = "oe"

    @staticmethod
    def from_string(string: str | MatrixType) -> MatrixType:
        """Convert 'observed' or 'oe' to MatrixType, raise ValidationError if neither."""
        if isinstance(string, MatrixType):
            return string
        match str(string).lower():
            case "observed":
                return MatrixType.OBSERVED
            case "oe":
                return MatrixType.OE
            case _:
                raise ValidationError(f"Invalid matrix type: {string} (expected observed or oe).")

    def __str__(self) -> str:
        return self.value


class Shape(Enum):
    """The visible outline of a triangle Hi-C plot."""
    TRIANGLE = "triangle"
    TRAPEZOID = "trapezoid"


@dataclass
class GenomicRegion:
    """A window on a single chromosome.

    Start and end are either both set, or both None to request the whole
    chromosome (resolved later from the assembly).

    Properties:
    - chrom: str: Chromosome name (as given, not prefixed)
    - start: int | None: Start point of the window
    - end: int | None: End point of the window
    - altchrom, altstart, altend: the plotted window kept alongside chrom/start/end
    """

    chrom: str
    start: int | None = None
    end: int | None = None
    altchrom: str | None = None
    altstart: int | None = None
    altend: int | None = None

    def __post_init__(self):
        self.chrom = str(self.chrom)
        if self.start is not None:
            self.start = int(self.start)
        if self.end is not None:
            self.end = int(self.end)
        if self.altchrom is None:
            self.altchrom = self.chrom
        if self.altstart is None:
            self.altstart = self.start
        if self.altend is None:
            self.altend = self.end

    def __str__(self) -> str:
        """Formatted as chrom:start-end (or just chrom for a whole chromosome)."""
        if self.is_whole_chromosome():
            return self.chrom
        return f"{self.chrom}:{self.start}-{self.end}"

    def is_whole_chromosome(self) -> bool:
        """Return True if neither start nor end is set."""
        return self.start is None and self.end is None

    def with_bounds(self, start: int, end: int) -> GenomicRegion:
        """Return a new region on the same chromosome with new (and alt) bounds."""
        return replace(self, start=int(start), end=int(end), altstart=int(start), altend=int(end))

    def get_size(self) -> int:
        """Return the size of the region."""
        return self.end - self.start

    def get_unpacked(self) -> tuple[str, int | None, int | None]:
        """Unpack into (chrom, start, end)."""
        return (self.chrom, self.start, self.end)


@dataclass(frozen=True)
class Assembly:
    """A genome assembly: a name, an optional chromosome size table and a required chromosome prefix."""

    name: str
    chrom_sizes: dict[str, int] | None = None
    chrom_prefix: str | None = None

    @staticmethod
    def from_name(name: str) -> Assembly:
        """Build an assembly from a name, attaching chromosome sizes if the assembly is known."""
        key = str(name).lower()
        return Assembly(
            name=str(name),
            chrom_sizes=ASSEMBLY_CHROM_SIZES.get(key),
            chrom_prefix="chr" if key in PREFIXED_ASSEMBLIES else None,
        )

    def get_chrom_size(self, chrom: str) -> int | None:
        """Return the size of a chromosome, or None if not known for this assembly."""
        if self.chrom_sizes is None:
            return None
        return self.chrom_sizes.get(chrom)


@dataclass(frozen=True)
class Unit:
    """A length with physical units (e.g. Unit(3, "cm"))."""

    value: float
    units: str

    def __post_init__(self):
        object.__setattr__(self, "units", normalize_units(self.units))

    def to(self, units: str) -> float:
        """Return the value converted to the given units."""
        return convert_length(self.value, self.units, units)

    @staticmethod
    def coerce(value: Any, default_units: str) -> Unit | None:
        """Wrap bare numbers in the default units; pass Units (and None) through."""
        if value is None or isinstance(value, Unit):
            return value
        if isinstance(value, Real) and not isinstance(value, bool):
            return Unit(float(value), default_units)
        raise ValidationError(f"Invalid length: {value!r} (expected a number or Unit).")


@dataclass(frozen=True)
class Placement:
    """Where a plot goes on the page: x and y (from the top-left of the page), width, height and justification."""

    x: Unit
    y: Unit
    width: Unit
    height: Unit
    just: tuple[str, ...]


@dataclass(frozen=True)
class FileSource:
    """Contacts read from a .hic file."""
    path: str


@dataclass(frozen=True, eq=False)
class FrameSource:
    """Contacts already in memory as a 3-column (binA, binB, counts) table."""
    frame: pd.DataFrame


InputSource = FileSource | FrameSource


@dataclass
class PlotParams:
    """An optional bundle of plot arguments.

    Any argument passed explicitly to a plot function takes precedence over the
    bundle; anything still unset falls back to the package defaults.
    """

    data: Any = None
    chrom: str | None = None
    chromstart: int | None = None
    chromend: int | None = None
    resolution: int | str | None = None
    zrange: tuple[float, float] | None = None
    norm: str | None = None
    matrix: str | None = None
    assembly: str | Assembly | None = None
    palette: Any = None
    x: float | Unit | None = None
    y: float | Unit | None = None
    width: float | Unit | None = None
    height: float | Unit | None = None
    just: str | tuple[str, ...] | None = None
    default_units: str | None = None
    draw: bool | None = None


@dataclass(frozen=True)
class PlotRequest:
    """A fully merged and validated triangle Hi-C plot request."""

    source: InputSource
    region: GenomicRegion
    resolution: int | str
    zrange: tuple[float, float] | None
    norm: str | None
    matrix: MatrixType
    palette: Colormap
    assembly: Assembly
    placement: Placement | None
    default_units: str
    draw: bool


@dataclass(frozen=True)
class TriangleFrame:
    """The rotated coordinate frame a triangle Hi-C plot is drawn in.

    The frame is a square of side width / sqrt(2), rotated by -45 degrees about
    its bottom-left corner, which sits at page point (x, y). Both native axes
    span the genomic scale, so the diagonal of the contact matrix lies along
    the base of the triangle and contacts with binB > binA sit above it.
    """

    x: float
    y: float
    width: float
    scale: tuple[float, float]

    @property
    def side(self) -> np.longdouble:
        return np.longdouble(self.width) / SQRT2

    def to_page(self, gx: float, gy: float) -> tuple[float, float]:
        """Map a native (genomic) point to page coordinates."""
        lo, hi = self.scale
        span = np.longdouble(hi) - np.longdouble(lo)
        local_x = (np.longdouble(gx) - lo) / span * self.side
        local_y = (np.longdouble(gy) - lo) / span * self.side
        page_x = self.x + (local_x + local_y) / SQRT2
        page_y = self.y + (local_y - local_x) / SQRT2
        return (float(page_x), float(page_y))


@dataclass(frozen=True)
class Square:
    """An off-diagonal contact cell, in native (genomic) coordinates."""

    x: float
    y: float
    width: float
    height: float
    color: str | None

    def native_vertices(self) -> list[tuple[float, float]]:
        return [
            (self.x, self.y),
            (self.x + self.width, self.y),
            (self.x + self.width, self.y + self.height),
            (self.x, self.y + self.height),
        ]

    def page_vertices(self, frame: TriangleFrame) -> list[tuple[float, float]]:
        return [frame.to_page(vx, vy) for vx, vy in self.native_vertices()]


@dataclass(frozen=True)
class Triangle:
    """A diagonal contact cell: the right triangle above the diagonal, in native (genomic) coordinates."""

    x: float
    y: float
    leg: float
    color: str | None

    def native_vertices(self) -> list[tuple[float, float]]:
        return [
            (self.x, self.y),
            (self.x, self.y + self.leg),
            (self.x + self.leg, self.y + self.leg),
        ]

    def page_vertices(self, frame: TriangleFrame) -> list[tuple[float, float]]:
        return [frame.to_page(vx, vy) for vx, vy in self.native_vertices()]


@dataclass(frozen=True)
class Viewport:
    """The clipped region of the page a plot occupies (page units, bottom-left origin)."""

    name: str
    x: float
    y: float
    width: float
    height: float
    units: str
    outline: tuple[tuple[float, float], ...]


@dataclass
class PlotResult:
    """The outcome of a triangle Hi-C plot.

    Properties:
    - request: PlotRequest: The merged request this result was computed from
    - region: GenomicRegion: The resolved window (whole chromosomes filled in where possible)
    - resolution: int | None: The resolution used (None if it could not be determined)
    - zrange: tuple[float, float] | None: The value range colors were scaled to
    - color_palette: Colormap | None: The palette used, or None if colors were not generated
    - outside_viewport: Viewport: The clipped page region of the plot
    - frame: TriangleFrame: The rotated frame primitives are drawn in
    - shape: Shape: Whether the full triangle or a trapezoid is shown
    - page_size: tuple[float, float, str]: Width, height and units of the page the plot was laid out on
    - primitives: list[Square | Triangle]: One shape per contact cell
    """

    request: PlotRequest
    region: GenomicRegion
    resolution: int | None
    zrange: tuple[float, float] | None
    color_palette: Colormap | None
    outside_viewport: Viewport
    frame: TriangleFrame
    shape: Shape
    page_size: tuple[float, float, str]
    primitives: list[Square | Triangle] = field(default_factory=list)

    def get_squares(self) -> list[Square]:
        return [p for p in self.primitives if isinstance(p, Square)]

    def get_triangles(self) -> list[Triangle]:
        return [p for p in self.primitives if isinstance(p, Triangle)]

    def get_page_vertices(self) -> list[list[tuple[float, float]]]:
        """Return each primitive's polygon in page coordinates."""
        return [p.page_vertices(self.frame) for p in self.primitives]
