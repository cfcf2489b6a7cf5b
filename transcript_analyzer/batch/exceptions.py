class BatchError(Exception):
    """Base exception for all batch-tracking errors."""


class BatchNotFoundError(BatchError):
    """Raised when a batch id is not present in the registry."""


class ConfigMissingError(BatchError):
    """Raised when a batch has no job configuration attached."""


class FileReadError(BatchError):
    """Raised when uploaded transcript content cannot be read."""


class BatchValidationError(BatchError):
    """Raised when a batch cannot be created from the given input."""


class BatchStateError(BatchError):
    """Raised when an operation would break a batch or file invariant."""
