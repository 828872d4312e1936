"""Error kinds raised by magic-header.

Every failure aborts the job; there are no partial results.
"""


class MagicHeaderError(Exception):
    """Base class for all magic-header failures."""

    kind = "error"


class DecodeError(MagicHeaderError):
    """A source image could not be read or rasterized."""

    kind = "decode"


class InvalidDimensions(MagicHeaderError, ValueError):
    """Output width/height is not positive, or a source has zero area."""

    kind = "dimensions"


class ContextUnavailable(MagicHeaderError):
    """The output buffer could not be allocated."""

    kind = "context"
