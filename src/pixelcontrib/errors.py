"""
Error Taxonomy
==============
All failures raised by the package derive from ``PixelContribError`` and from
the closest built-in exception, so callers may catch either.
"""


class PixelContribError(Exception):
    """Base class for all pixel contribution errors."""


class FormatError(PixelContribError, ValueError):
    """The buffer does not start with the PCMP magic."""


class UnsupportedVersionError(PixelContribError, ValueError):
    """The PCMP version field is not supported."""


class TruncatedDataError(PixelContribError, ValueError):
    """The buffer is shorter than its header declares."""


class RangeError(PixelContribError, IndexError):
    """A map index or grid position lies outside the valid bounds."""


class ConfigurationError(PixelContribError, ValueError):
    """The sample set does not satisfy an interpolator's preconditions."""


class InvalidInputError(PixelContribError, ValueError):
    """A degenerate vector or coordinate was passed to the codec."""
