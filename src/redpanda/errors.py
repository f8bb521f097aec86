class RedpandaError(Exception):
    """Fatal error while printing an input, carrying the input and the step that failed."""

    def __init__(self, message: str, path: str | None = None, operation: str | None = None):
        super().__init__(message)
        self.message = message
        self.path = path
        self.operation = operation

    def __str__(self) -> str:
        if self.path is None:
            return self.message
        return f"{self.path}: {self.message}"


class NotFound(RedpandaError):
    """Input does not exist or cannot be opened."""


class DecodeFailure(RedpandaError):
    """Pillow could not parse the image."""


class EncodeFailure(RedpandaError):
    """A protocol encoder rejected the image."""


class IoFailure(RedpandaError):
    """Reading an input or writing the output failed part way."""


class LockFailure(RedpandaError):
    """The advisory lock on the output could not be taken."""
