"""Resolution selection and windowing of sparse upper-triangular contact matrices.

Contacts are handled as pandas tables with columns x (binA), y (binB) and
counts, with x <= y. After clipping, each row also carries the width and
height of its cell in base pairs.
"""

import logging

import pandas as pd

from hicpage.constants import FINEST_RESOLUTION, RESOLUTION_BREAKPOINTS
from hicpage.definitions import FileSource, FrameSource, GenomicRegion, InputSource, MatrixType
from hicpage.errors import ValidationError
from hicpage.readers import empty_contacts, read_frame_contacts, read_hic_contacts
from hicpage.utilities import int_to_resolution, resolution_to_int

logger = logging.getLogger(__name__)


# -------------------------------------------------------------------------------
# RESOLUTION
# -------------------------------------------------------------------------------


def select_resolution(span: int) -> int:
    """Pick a resolution for a region of the given span (bp) from the breakpoint table."""
    for min_span, resolution in RESOLUTION_BREAKPOINTS:
        if span >= min_span:
            return resolution
    return FINEST_RESOLUTION


def detect_resolution(frame: pd.DataFrame) -> int | None:
    """Detect the resolution of a sparse table as the smallest off-diagonal bin distance.

    Returns None if the table has no off-diagonal contacts.
    """
    binA = frame.iloc[:, 0]
    binB = frame.iloc[:, 1]
    off_diagonal = binA != binB
    if not off_diagonal.any():
        return None
    return int((binB[off_diagonal] - binA[off_diagonal]).abs().min())


def adjust_resolution(source: InputSource, region: GenomicRegion, resolution: int | str) -> int | None:
    """Resolve the resolution for a plot.

    Explicit resolutions (ints, or strings like "10kb") are used as they are.
    "auto" picks from the breakpoint table by region size for .hic files (None
    if the region is not known), or detects the resolution of an in-memory table.
    """
    if resolution != "auto":
        return resolution_to_int(resolution)

    match source:
        case FileSource():
            if region.is_whole_chromosome():
                return None
            return select_resolution(region.get_size())
        case FrameSource(frame=frame):
            detected = detect_resolution(frame)
            if detected is None:
                logger.warning("Could not detect a resolution: data has no off-diagonal contacts.")
            return detected


def parse_resolution(resolution: int | str) -> int | str:
    """Validate a requested resolution, returning "auto" or a positive int."""
    if isinstance(resolution, str) and resolution.lower() == "auto":
        return "auto"
    try:
        value = resolution_to_int(resolution)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid resolution: {resolution!r} (expected \"auto\" or a number of bp).")
    if value <= 0:
        raise ValidationError(f"Invalid resolution: {resolution!r} (must be positive).")
    return value


# -------------------------------------------------------------------------------
# WINDOWING
# -------------------------------------------------------------------------------


def check_coverage(frame: pd.DataFrame, region: GenomicRegion) -> bool:
    """Warn (and return False) if the table does not span the whole region on both axes."""
    if frame.empty:
        logger.warning("Data is incomplete for the specified range.")
        return False
    binA = frame.iloc[:, 0]
    binB = frame.iloc[:, 1]
    if (
        binA.min() > region.start
        or binA.max() < region.end
        or binB.min() > region.start
        or binB.max() < region.end
    ):
        logger.warning("Data is incomplete for the specified range.")
        return False
    return True


def extract_contacts(
    source: InputSource,
    region: GenomicRegion,
    resolution: int | None,
    norm: str | None = "KR",
    matrix: MatrixType = MatrixType.OBSERVED,
    zrange: tuple[float, float] | None = None,
) -> pd.DataFrame:
    """Get the contacts needed to plot a region.

    For .hic files, the region is read with one extra bin on each side so that
    cells straddling the edges can be clipped. In-memory tables are checked for
    coverage of the region. Nothing is read if the region or resolution is unknown.
    """
    if region.is_whole_chromosome() or resolution is None:
        return empty_contacts()

    match source:
        case FileSource(path=path):
            return read_hic_contacts(
                path,
                region.chrom,
                region.start - resolution,
                region.end + resolution,
                resolution,
                norm=norm,
                matrix=matrix,
                zrange=zrange,
            )
        case FrameSource(frame=frame):
            logger.info("Read in dataframe. %s resolution detected.", int_to_resolution(resolution))
            check_coverage(frame, region)
            return read_frame_contacts(frame)


def subset_window(frame: pd.DataFrame, region: GenomicRegion, resolution: int) -> pd.DataFrame:
    """Keep contacts whose bins both lie in [start aligned down to a bin, end).

    The lower bound includes the bin containing start (clipped later); the upper
    bound is exact, so bins starting at or past end are dropped.
    """
    if frame.empty:
        return frame
    lower = region.start // resolution * resolution
    keep = (
        (frame["x"] >= lower)
        & (frame["x"] < region.end)
        & (frame["y"] >= lower)
        & (frame["y"] < region.end)
    )
    return frame[keep]


def clip_to_window(frame: pd.DataFrame, region: GenomicRegion, resolution: int) -> pd.DataFrame:
    """Give every contact a cell size and clip cells that cross the window edges.

    Off-diagonal cells (squares):
    - crossing both the left and top edges: clip width and height, move x to start
    - crossing the left edge only: clip width, move x to start
    - crossing the top edge only: clip height
    Diagonal cells (triangles, kept right isoceles):
    - crossing the top edge: leg becomes end - y
    - crossing the left edge: leg becomes the part right of start, moved to (start, start)
    - crossing both (window narrower than a bin): leg becomes end - start, moved to (start, start)
    Everything else keeps a full resolution-sized cell. Row order is preserved.
    """
    start, end = region.start, region.end
    clipped = frame.copy()
    clipped["width"] = resolution
    clipped["height"] = resolution
    if clipped.empty:
        return clipped

    x = frame["x"]
    y = frame["y"]
    left = x < start
    top = (y + resolution) > end
    diagonal = x == y

    left_width = resolution - (start - x)
    top_height = end - y

    corner = left & top & ~diagonal
    clipped.loc[corner, "width"] = left_width[corner]
    clipped.loc[corner, "height"] = top_height[corner]
    clipped.loc[corner, "x"] = start

    left_only = left & ~top & ~diagonal
    clipped.loc[left_only, "width"] = left_width[left_only]
    clipped.loc[left_only, "x"] = start

    top_only = top & ~left & ~diagonal
    clipped.loc[top_only, "height"] = top_height[top_only]

    diagonal_top = diagonal & top & ~left
    clipped.loc[diagonal_top, "height"] = top_height[diagonal_top]
    clipped.loc[diagonal_top, "width"] = top_height[diagonal_top]

    diagonal_left = diagonal & left & ~top
    clipped.loc[diagonal_left, "width"] = left_width[diagonal_left]
    clipped.loc[diagonal_left, "height"] = left_width[diagonal_left]
    clipped.loc[diagonal_left, ["x", "y"]] = start

    diagonal_both = diagonal & left & top
    clipped.loc[diagonal_both, ["width", "height"]] = end - start
    clipped.loc[diagonal_both, ["x", "y"]] = start

    return clipped
