"""
ZakatFlow exception hierarchy.

All zakatflow exceptions inherit from ZakatFlowError, making it easy for
consumers to catch library-level errors while still distinguishing specific
failure modes.

Only UnknownMethodology is a hard failure inside the engine. Bad numeric input
is clamped and reported on the result instead of raised.
"""


class ZakatFlowError(Exception):
    """Base exception class for all zakatflow errors."""


class ConfigurationError(ZakatFlowError):
    """Raised for configuration errors (missing keys, invalid values, incomplete rule tables)."""


class UnknownMethodology(ZakatFlowError, ValueError):
    """Raised when a methodology identifier is not in the supported set."""

    def __init__(self, methodology: object, supported: list[str] | None = None):
        self.methodology = methodology
        self.supported = supported or []
        message = f"Unknown methodology: {methodology!r}"
        if self.supported:
            message += f". Supported: {', '.join(self.supported)}"
        super().__init__(message)


class InvalidInput(ZakatFlowError):
    """Raised when an input document cannot be read as a field mapping."""


class ConservationViolation(ZakatFlowError):
    """Raised when flow partitions do not add back up to the calculated amounts."""
