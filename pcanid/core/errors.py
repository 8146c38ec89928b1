"""Domain-specific errors for pcanid."""


class PcanIdError(Exception):
    """Base error for pcanid."""


class ArgumentError(PcanIdError):
    """Raised for malformed literals, out-of-range values, or a missing operation."""


class RegistryValidationError(PcanIdError):
    """Raised when a device registry file does not conform to schema or semantics."""


class RegistryLoadError(PcanIdError):
    """Raised when reading device registry sources fails."""


class EnumerationError(PcanIdError):
    """Raised when the platform USB device list cannot be retrieved."""


class DeviceNotFoundError(PcanIdError):
    """Raised when no supported device carries the requested index."""


class OpenFailedError(PcanIdError):
    """Raised when the selected device cannot be opened."""


class ClaimFailedError(PcanIdError):
    """Raised when interface 0 of the opened device cannot be claimed."""


class TransferError(PcanIdError):
    """Raised by a backend when a bulk transfer fails or times out."""
