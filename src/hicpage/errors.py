"""Exception types raised by hicpage.

Only invalid input raises; incomplete or missing data is logged as a warning
and the plot is still returned.
"""


class HicPageError(Exception):
    """Base class for all hicpage errors."""


class ValidationError(HicPageError, ValueError):
    """Raised when plot arguments are invalid, before any data is read."""
