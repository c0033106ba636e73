"""Exception types raised by the installment engine."""


class CarneError(Exception):
    """Base class for all carnes errors."""


class ValidationError(CarneError, ValueError):
    """Malformed input to a creation or edit call.

    Always raised before any state is touched.
    """


class InvalidScheduleError(ValidationError):
    """Installment schedule parameters out of range."""


class NotFoundError(CarneError, LookupError):
    """Referenced bill or installment does not exist."""


class StorageError(CarneError, OSError):
    """Repository load/save failure."""
