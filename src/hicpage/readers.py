"""Functions for reading contact data and converting to types defined in definitions.py.
"""

import logging
import os

import numpy as np
import pandas as pd
from hicstraw import HiCFile  # type: ignore

from hicpage.definitions import Assembly, FileSource, FrameSource, InputSource, MatrixType
from hicpage.errors import ValidationError
from hicpage.utilities import chr_prefix, chr_unprefix, has_hic_extension

logger = logging.getLogger(__name__)

# Column names used for sparse contacts throughout the package
CONTACT_COLUMNS = ["x", "y", "counts"]


def empty_contacts() -> pd.DataFrame:
    """Return an empty sparse contact table."""
    return pd.DataFrame({"x": pd.Series(dtype="int64"), "y": pd.Series(dtype="int64"), "counts": pd.Series(dtype="float64")})


def read_hic(hic_file: str) -> HiCFile:
    """Read Hi-C file and return a HiCFile object.

    This is just a convenience wrapper for now, to be revised.
    """
    return HiCFile(hic_file)


def to_source(data) -> InputSource:
    """Wrap plot data as a FrameSource (for a DataFrame) or a FileSource (for a path)."""
    if isinstance(data, (FileSource, FrameSource)):
        return data
    if isinstance(data, pd.DataFrame):
        return FrameSource(data)
    if isinstance(data, (str, os.PathLike)):
        return FileSource(os.fspath(data))
    raise ValidationError("Invalid input. Provide a .hic file path or a 3-column DataFrame.")


def validate_source(source: InputSource, norm: str | None):
    """Raise ValidationError if the source cannot be read.

    A table must have exactly 3 columns (binA, binB, counts). A file must have
    a .hic extension, must exist, and needs a normalization method.
    """
    match source:
        case FrameSource(frame=frame):
            if frame.shape[1] != 3:
                raise ValidationError("Invalid dataframe format. Input a dataframe with 3 columns: binA, binB, counts.")
        case FileSource(path=path):
            if not has_hic_extension(path):
                raise ValidationError('Invalid input. File must have a ".hic" extension.')
            if not os.path.exists(path):
                raise ValidationError(f"File {path} does not exist.")
            if norm is None:
                raise ValidationError("If providing .hic file, please specify 'norm'.")


def get_assembly(assembly: str | Assembly) -> Assembly:
    """Return an Assembly from a name (e.g. "hg19") or pass an Assembly through."""
    if isinstance(assembly, Assembly):
        return assembly
    if isinstance(assembly, str):
        return Assembly.from_name(assembly)
    raise ValidationError(f"Invalid assembly: {assembly!r} (expected a name or Assembly).")


def match_hic_chrom(hic: HiCFile, chrom: str) -> str:
    """Return the chromosome name as it is spelled in the .hic file.

    .hic files may or may not prefix chromosomes with "chr"; both spellings are tried.
    If neither is found, the unprefixed name is returned (hicstraw will complain about it).
    """
    names = {c.name for c in hic.getChromosomes()}
    for candidate in (chrom, chr_unprefix(chrom), chr_prefix(chrom)):
        if candidate in names:
            return candidate
    return chr_unprefix(chrom)


def read_hic_contacts(
    hic_filepath: str,
    chrom: str,
    start: int,
    end: int,
    resolution: int,
    norm="KR",
    matrix: str | MatrixType = "observed",
    zrange: tuple[float, float] | None = None,
) -> pd.DataFrame:
    """Read sparse intra-chromosomal contacts from a .hic file as a (x, y, counts) table.

    Rows are upper triangular (x <= y). Retrieval bounds are constrained to start at 0.
    If a zrange is given, counts are clamped to it. Rows with missing counts are dropped.
    """

    hic = read_hic(hic_filepath)
    hic_chrom = match_hic_chrom(hic, chrom)
    matrix_type = MatrixType.from_string(matrix)

    zoom_data = hic.getMatrixZoomData(hic_chrom, hic_chrom, str(matrix_type), norm, "BP", resolution)
    records = zoom_data.getRecords(max(0, start), end, max(0, start), end)

    if len(records) == 0:
        return empty_contacts()

    binA = np.array([r.binX for r in records], dtype="int64")
    binB = np.array([r.binY for r in records], dtype="int64")
    counts = np.array([r.counts for r in records], dtype="float64")

    # Keep the matrix upper triangular regardless of how the records were ordered
    contacts = pd.DataFrame(
        {"x": np.minimum(binA, binB), "y": np.maximum(binA, binB), "counts": counts}
    )

    if zrange is not None:
        contacts["counts"] = contacts["counts"].clip(lower=zrange[0], upper=zrange[1])

    contacts = contacts.dropna().reset_index(drop=True)
    logger.debug("Read %d contacts from %s (%s:%d-%d)", len(contacts), hic_filepath, chrom, start, end)

    return contacts


def read_frame_contacts(frame: pd.DataFrame) -> pd.DataFrame:
    """Return an in-memory 3-column table as a (x, y, counts) table without missing values."""
    contacts = frame.copy()
    contacts.columns = CONTACT_COLUMNS
    return contacts.dropna().reset_index(drop=True)
