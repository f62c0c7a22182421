"""Useful package-wide basic constants.

Chromosome sizes are provided for the hg19 and hg38 assemblies only; any other
assembly name is treated as having no chromosome metadata (whole-chromosome
plots then fall back to a unit scale).
"""

import numpy as np

# -------------------------------------------------------------------------------
# HUMAN CHROMOSOMES
# -------------------------------------------------------------------------------

# hg38 chromosome sizes
HG38_CHROM_SIZES = {
    "chr1": 248956422,
    "chr2": 242193529,
    "chr3": 198295559,
    "chr4": 190214555,
    "chr5": 181538259,
    "chr6": 170805979,
    "chr7": 159345973,
    "chr8": 145138636,
    "chr9": 138394717,
    "chr10": 133797422,
    "chr11": 135086622,
    "chr12": 133275309,
    "chr13": 114364328,
    "chr14": 107043718,
    "chr15": 101991189,
    "chr16": 90338345,
    "chr17": 83257441,
    "chr18": 80373285,
    "chr19": 58617616,
    "chr20": 64444167,
    "chr21": 46709983,
    "chr22": 50818468,
    "chrX": 156040895,
    "chrY": 57227415,
}

# hg19 chromosome sizes
HG19_CHROM_SIZES = {
    "chr1": 249250621,
    "chr2": 243199373,
    "chr3": 198022430,
    "chr4": 191154276,
    "chr5": 180915260,
    "chr6": 171115067,
    "chr7": 159138663,
    "chr8": 146364022,
    "chr9": 141213431,
    "chr10": 135534747,
    "chr11": 135006516,
    "chr12": 133851895,
    "chr13": 115169878,
    "chr14": 107349540,
    "chr15": 102531392,
    "chr16": 90354753,
    "chr17": 81195210,
    "chr18": 78077248,
    "chr19": 59128983,
    "chr20": 63025520,
    "chr21": 48129895,
    "chr22": 51304566,
    "chrX": 155270560,
    "chrY": 59373566,
}

# Known assemblies, keyed by (lowercase) assembly name
ASSEMBLY_CHROM_SIZES = {
    "hg19": HG19_CHROM_SIZES,
    "hg38": HG38_CHROM_SIZES,
}

# Assemblies whose chromosomes must carry the "chr" prefix
PREFIXED_ASSEMBLIES = {"hg19", "hg38"}

# -------------------------------------------------------------------------------
# Hi-C DATA
# -------------------------------------------------------------------------------

# Accepted file extensions for Hi-C contact files
HIC_EXTENSIONS = {".hic"}

# Region span (bp) to resolution (bp) lookup, ordered from largest span down.
# The first breakpoint the span reaches wins; anything smaller falls through
# to FINEST_RESOLUTION.
RESOLUTION_BREAKPOINTS = [
    (150000000, 500000),
    (75000000, 250000),
    (35000000, 100000),
    (20000000, 50000),
    (5000000, 25000),
    (3000000, 10000),
]
FINEST_RESOLUTION = 5000

# -------------------------------------------------------------------------------
# PAGE & GEOMETRY
# -------------------------------------------------------------------------------

# Physical units and their size in inches
UNIT_TO_INCHES = {
    "inches": 1.0,
    "cm": 1 / 2.54,
    "mm": 1 / 25.4,
    "points": 1 / 72.27,
    "bigpts": 1 / 72.0,
}

# Aliases accepted for units
UNIT_ALIASES = {
    "in": "inches",
    "inch": "inches",
    "centimeters": "cm",
    "millimeters": "mm",
    "pt": "points",
    "pts": "points",
}

# Horizontal and vertical justification keywords ("centre" is normalized to "center")
HORIZONTAL_JUSTS = {"left", "right", "center"}
VERTICAL_JUSTS = {"top", "bottom", "center"}

# A triangle plot shorter than this (in inches) cannot be rendered meaningfully
MIN_TRIANGLE_HEIGHT_INCHES = 0.05

# sqrt(2) at extended precision, used for the side of the rotated square
SQRT2 = np.sqrt(np.longdouble(2))

# Page size (inches) used when plotting to the full device without a page
DEFAULT_DEVICE_SIZE = (7.0, 7.0)

# Full-device layout: fraction of the short dimension covered by the triangle base,
# and fraction of the page height below the triangle base
FULL_DEVICE_BASE_FRACTION = 0.75
FULL_DEVICE_BOTTOM_FRACTION = 0.25

# -------------------------------------------------------------------------------
# COLORS
# -------------------------------------------------------------------------------

# Default palette endpoints (white to dark red)
DEFAULT_PALETTE_COLORS = ["white", "darkred"]

# Number of discrete color steps when mapping values to colors
PALETTE_STEPS = 100

# -------------------------------------------------------------------------------
# DEFAULT PARAMETERS
# -------------------------------------------------------------------------------

# Hardcoded defaults, applied after explicit arguments and any PlotParams bundle
DEFAULTS = {
    "resolution": "auto",
    "palette": None,  # resolved to the white-to-dark-red colormap
    "assembly": "hg19",
    "just": ("left", "top"),
    "norm": "KR",
    "default_units": "inches",
    "draw": True,
    "matrix": "observed",
}
