"""Exception types for Racfella."""


class RacfellaError(Exception):
    """Base class for all Racfella errors."""


class ProviderError(RacfellaError):
    """The completion provider failed or returned an unusable response."""


class ClassificationError(RacfellaError):
    """The classifier output could not be accepted.

    Attributes:
        reason: Short machine-readable reason ("json_parse_error" or "parse_error").
    """

    def __init__(self, reason: str, detail: str = ""):
        super().__init__(f"{reason}: {detail}" if detail else reason)
        self.reason = reason
        self.detail = detail


class StoreError(RacfellaError):
    """A persistence operation failed."""
