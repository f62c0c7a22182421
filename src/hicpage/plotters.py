"""Triangle Hi-C plots.

compute_hic_triangle() turns a request into a PlotResult (pure apart from
reading contacts and registering a viewport name with the current page);
draw_hic_triangle() draws a PlotResult onto a page; plot_hic_triangle() does both.

"""

import logging
from numbers import Real

import pandas as pd
from matplotlib.collections import PolyCollection
from matplotlib.patches import Polygon

from hicpage.colors import get_palette, scale_counts
from hicpage.constants import DEFAULT_DEVICE_SIZE, DEFAULTS, MIN_TRIANGLE_HEIGHT_INCHES
from hicpage.definitions import (
    Assembly,
    GenomicRegion,
    MatrixType,
    Placement,
    PlotParams,
    PlotRequest,
    PlotResult,
    Shape,
    Square,
    Triangle,
    TriangleFrame,
    Unit,
    Viewport,
)
from hicpage.errors import HicPageError, ValidationError
from hicpage.geometry import (
    full_device_geometry,
    reset_justification,
    resolve_geometry,
    triangle_outline,
)
from hicpage.matrix import adjust_resolution, clip_to_window, extract_contacts, parse_resolution, subset_window
from hicpage.page import Page, create_page, get_current_page
from hicpage.readers import get_assembly, to_source, validate_source
from hicpage.utilities import normalize_units, parse_just

logger = logging.getLogger(__name__)

# Prefix of the viewport names registered by triangle Hi-C plots
VIEWPORT_PREFIX = "hicTriangle"


# -------------------------------------------------------------------------------
# PARAMETERS
# -------------------------------------------------------------------------------


def merge_params(explicit: dict, params: PlotParams | None = None) -> dict:
    """Merge plot arguments field by field: explicit arguments, then the params bundle, then defaults.

    An argument counts as given if it is not None.
    """
    merged = {}
    for name, value in explicit.items():
        if value is None and params is not None:
            value = getattr(params, name, None)
        if value is None:
            value = DEFAULTS.get(name)
        merged[name] = value
    return merged


def _check_zrange(zrange) -> tuple[float, float] | None:
    if zrange is None:
        return None
    if isinstance(zrange, (str, bytes)) or not hasattr(zrange, "__len__"):
        raise ValidationError("'zrange' must be a vector of length 2.")
    if len(zrange) != 2:
        raise ValidationError("'zrange' must be a vector of length 2.")
    if not all(isinstance(v, Real) and not isinstance(v, bool) for v in zrange):
        raise ValidationError("'zrange' must be a vector of two numbers.")
    if zrange[0] >= zrange[1]:
        raise ValidationError("'zrange' must be a vector of two numbers in which the 2nd value is larger than the 1st.")
    return (float(zrange[0]), float(zrange[1]))


def _check_placement(args: dict, page: Page | None) -> Placement | None:
    """Build the placement of a plot, or return None if the plot fills the device."""
    values = [args["x"], args["y"], args["width"], args["height"]]
    if all(v is None for v in values):
        return None
    if any(v is None for v in values):
        raise ValidationError("Plot placement requires all of 'x', 'y', 'width' and 'height'.")
    if page is None:
        raise ValidationError("Must create a page with create_page() before placing a plot.")

    units = normalize_units(args["default_units"])
    placement = Placement(
        x=Unit.coerce(args["x"], units),
        y=Unit.coerce(args["y"], units),
        width=Unit.coerce(args["width"], units),
        height=Unit.coerce(args["height"], units),
        just=parse_just(args["just"]),
    )
    if placement.height.to("inches") < MIN_TRIANGLE_HEIGHT_INCHES:
        raise ValidationError("Height is too small for a valid triangle Hi-C plot.")
    return placement


def build_request(args: dict, page: Page | None) -> PlotRequest:
    """Validate merged arguments and build a PlotRequest. Nothing is read here."""

    if args["data"] is None:
        raise ValidationError("argument 'data' is missing, with no default.")
    if args["chrom"] is None:
        raise ValidationError("argument 'chrom' is missing, with no default.")

    placement = _check_placement(args, page)
    assembly: Assembly = get_assembly(args["assembly"])

    source = to_source(args["data"])
    validate_source(source, args["norm"])

    chrom, chromstart, chromend = str(args["chrom"]), args["chromstart"], args["chromend"]
    if (chromstart is None) != (chromend is None):
        raise ValidationError("Cannot have one 'None' 'chromstart' or 'chromend'.")

    if assembly.chrom_prefix is not None and not chrom.startswith(assembly.chrom_prefix):
        raise ValidationError(
            f"'{chrom}' is an invalid input for an {assembly.name} chromosome. "
            f"Please specify chromosome as '{assembly.chrom_prefix}{chrom}'."
        )

    if chromstart is not None and chromstart > chromend:
        raise ValidationError("'chromstart' should not be larger than 'chromend'.")

    return PlotRequest(
        source=source,
        region=GenomicRegion(chrom, chromstart, chromend),
        resolution=parse_resolution(args["resolution"]),
        zrange=_check_zrange(args["zrange"]),
        norm=args["norm"],
        matrix=MatrixType.from_string(args["matrix"]),
        palette=get_palette(args["palette"]),
        assembly=assembly,
        placement=placement,
        default_units=normalize_units(args["default_units"]),
        draw=bool(args["draw"]),
    )


# -------------------------------------------------------------------------------
# PLOT STEPS
# -------------------------------------------------------------------------------


def resolve_whole_chromosome(region: GenomicRegion, assembly: Assembly) -> tuple[GenomicRegion, bool]:
    """Fill in the bounds of a whole-chromosome region from the assembly.

    Returns the region and whether the lookup succeeded. On failure the region
    is returned unchanged (still whole-chromosome) and a warning is logged.
    """
    if not region.is_whole_chromosome():
        return region, True
    if assembly.chrom_sizes is None:
        logger.warning(
            "Chromosome sizes for assembly '%s' are not available; "
            "data for the entire chromosome cannot be plotted.",
            assembly.name,
        )
        return region, False
    size = assembly.get_chrom_size(region.chrom)
    if size is None:
        logger.warning(
            "Chromosome '%s' not found in assembly '%s' "
            "and data for entire chromosome cannot be plotted.",
            region.chrom,
            assembly.name,
        )
        return region, False
    return region.with_bounds(1, size), True


def make_primitives(contacts: pd.DataFrame) -> list[Square | Triangle]:
    """Make a Square for every off-diagonal contact and a Triangle for every diagonal contact (in row order)."""
    primitives = []
    for row in contacts.itertuples(index=False):
        if row.y > row.x:
            primitives.append(Square(row.x, row.y, row.width, row.height, row.color))
        elif row.y == row.x:
            primitives.append(Triangle(row.x, row.y, row.width, row.color))
    return primitives


def layout_plot(
    request: PlotRequest, page: Page
) -> tuple[float, float, float, float, Shape]:
    """Return the (x, y, width, height) of a plot base in page units and its visible shape."""
    placement = request.placement
    if placement is None:
        x, y, width, height = full_device_geometry(page.width, page.height)
        return x, y, width, height, Shape.TRIANGLE

    width = placement.width.to(page.units)
    height = placement.height.to(page.units)
    x = placement.x.to(page.units)
    # Placement y is measured from the top of the page
    y = page.height - placement.y.to(page.units)

    just = reset_justification(placement.just, x, y, width, height)
    geometry = resolve_geometry(x, y, width, height, just)
    return geometry.new_x, geometry.new_y, width, height, geometry.shape


# -------------------------------------------------------------------------------
# TRIANGLE Hi-C PLOTS
# -------------------------------------------------------------------------------


def compute_hic_triangle(
    data=None,
    resolution=None,
    zrange=None,
    norm=None,
    matrix=None,
    chrom=None,
    chromstart=None,
    chromend=None,
    assembly=None,
    palette=None,
    x=None,
    y=None,
    width=None,
    height=None,
    just=None,
    default_units=None,
    draw=None,
    params: PlotParams | None = None,
) -> PlotResult:
    """Compute a triangle Hi-C plot of a region without drawing it.

    data is a path to a .hic file or a 3-column DataFrame of sparse upper
    triangular contacts (binA, binB, counts). Leave chromstart and chromend
    unset to plot the whole chromosome (sizes come from the assembly).
    Leave x, y, width and height unset to lay the plot out over the full
    device; otherwise a page must exist and y is measured from its top.

    If height is less than half the width, the top of the triangle is cut off
    at the given height. just is one keyword or a (horizontal, vertical) pair;
    pairs in any other order are centered on (x, y).
    """

    args = merge_params(
        dict(
            data=data,
            resolution=resolution,
            zrange=zrange,
            norm=norm,
            matrix=matrix,
            chrom=chrom,
            chromstart=chromstart,
            chromend=chromend,
            assembly=assembly,
            palette=palette,
            x=x,
            y=y,
            width=width,
            height=height,
            just=just,
            default_units=default_units,
            draw=draw,
        ),
        params,
    )

    page = get_current_page()
    request = build_request(args, page)
    if page is None:
        page = Page(*DEFAULT_DEVICE_SIZE, units="inches")

    # Whole chromosome information
    region, lookup_succeeded = resolve_whole_chromosome(request.region, request.assembly)
    scale = (0, 1) if region.is_whole_chromosome() else (region.start, region.end)

    # Resolution, then read, subset and scale data
    plot_resolution = adjust_resolution(request.source, region, request.resolution)
    contacts = extract_contacts(
        request.source, region, plot_resolution, norm=request.norm, matrix=request.matrix, zrange=request.zrange
    )
    if plot_resolution is not None:
        contacts = subset_window(contacts, region, plot_resolution)
    contacts, plot_zrange, color_palette = scale_counts(contacts, request.zrange, request.palette)

    # Placement on the page
    base_x, base_y, base_width, base_height, shape = layout_plot(request, page)
    frame = TriangleFrame(base_x, base_y, base_width, scale)
    outside_viewport = Viewport(
        name=page.register_viewport(VIEWPORT_PREFIX),
        x=base_x,
        y=base_y,
        width=base_width,
        height=base_height,
        units=page.units,
        outline=triangle_outline(base_x, base_y, base_width, base_height, shape),
    )

    # Clip cells to the window and make shapes
    primitives = []
    if not region.is_whole_chromosome():
        if plot_resolution is not None:
            contacts = clip_to_window(contacts, region, plot_resolution)
            primitives = make_primitives(contacts)
        if not primitives and lookup_succeeded:
            logger.warning("No data found in region. Suggestions: check chromosome, check region.")

    logger.info("%s[%s]", VIEWPORT_PREFIX, outside_viewport.name)

    return PlotResult(
        request=request,
        region=region,
        resolution=plot_resolution,
        zrange=plot_zrange,
        color_palette=color_palette,
        outside_viewport=outside_viewport,
        frame=frame,
        shape=shape,
        page_size=(page.width, page.height, page.units),
        primitives=primitives,
    )


def draw_hic_triangle(result: PlotResult, page: Page | None = None) -> Page:
    """Draw a computed triangle Hi-C plot onto a page and return the page.

    Full-device plots start a new page of the size they were laid out on.
    Placed plots are drawn onto the current page unless a page is given.
    """
    if page is None:
        if result.request.placement is None:
            page = create_page(*result.page_size)
        else:
            page = get_current_page()
            if page is None:
                raise HicPageError("No current page to draw on.")

    ax = page.get_axes()

    outline = Polygon(result.outside_viewport.outline, closed=True, facecolor="none", edgecolor="none")
    ax.add_patch(outline)

    collection = PolyCollection(
        result.get_page_vertices(),
        facecolors=[p.color if p.color is not None else "none" for p in result.primitives],
        edgecolors="none",
        linewidths=0,
    )
    ax.add_collection(collection)
    collection.set_clip_path(outline)

    return page


def plot_hic_triangle(*args, **kwargs) -> PlotResult:
    """Compute a triangle Hi-C plot (see compute_hic_triangle) and draw it unless draw is False."""
    result = compute_hic_triangle(*args, **kwargs)
    if result.request.draw:
        draw_hic_triangle(result)
    return result
