"""Exceptions raised by the rtl_tcp client."""


class RtlTcpError(RuntimeError):
    """Base class for every error raised by this package."""


class TransportError(RtlTcpError):
    """Connect, read or write on the underlying connection failed."""


class ProtocolValidationError(RtlTcpError):
    """The server sent a record that does not match the protocol."""

    def __init__(self, message: str, expected: bytes = b"", received: bytes = b""):
        super().__init__(message)
        self.expected = expected
        self.received = received


class ArgumentValidationError(RtlTcpError):
    """A command argument was rejected before anything was written."""

    def __init__(self, message: str, value=None):
        super().__init__(message)
        self.value = value


class ConfigurationMappingError(RtlTcpError):
    """A Config field has no dispatcher entry (or the reverse)."""

    def __init__(self, message: str, field: str = ""):
        super().__init__(message)
        self.field = field


class ConfigurationError(RtlTcpError):
    """Applying one Config field failed; the original error is ``__cause__``."""

    def __init__(self, field: str, cause: Exception):
        super().__init__(f"error configuring sdr: {field}: {cause}")
        self.field = field
        self.cause = cause
