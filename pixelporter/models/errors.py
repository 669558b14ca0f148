"""
Failures of a single conversion.

Every error carries a user-facing message and a stable ``kind`` string the
HTTP API and CLI report back. None of them are fatal to the process.
"""


class ConversionError(Exception):
    kind = "ConversionError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NoInputProvided(ConversionError):
    kind = "NoInputProvided"

    def __init__(self, message: str = "Please select a file or enter a URL"):
        super().__init__(message)


class LoadError(ConversionError):
    kind = "LoadError"


class FetchFailed(LoadError):
    kind = "FetchFailed"


class DecodeFailed(LoadError):
    kind = "DecodeFailed"


class BackendUnavailable(ConversionError):
    """The decode/resample backend could not process this request."""
    kind = "BackendUnavailable"
