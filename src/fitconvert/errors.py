"""Exception hierarchy for the FIT converter."""

from __future__ import annotations


class FitConvertError(Exception):
    """Base exception for all converter errors."""


class ConfigurationError(FitConvertError):
    """Raised when the run configuration is rejected before any I/O."""


class DecodeError(FitConvertError):
    """Raised when the FIT container cannot be decoded.

    ``cause`` is a short stable tag identifying the failure kind.
    """

    cause = "decode"
    default_message = "error decoding file"

    def __init__(self, message: str | None = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)


class MalformedFileError(DecodeError):
    cause = "malformed"
    default_message = "error decoding file"


class UnsupportedProtocolError(DecodeError):
    cause = "unsupported-protocol"
    default_message = "protocol version not supported"


class UnexpectedEndOfFileError(DecodeError):
    cause = "truncated"
    default_message = "unexpected end of file"


class NotFitFileError(DecodeError):
    cause = "not-fit"
    default_message = "file is not FIT file"


class SourceError(FitConvertError):
    """Raised when the input cannot be read."""


class DestinationError(FitConvertError):
    """Raised when the output cannot be written."""
