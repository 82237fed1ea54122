"""Exception types raised by the compliance search package."""


class ComplianceSearchError(Exception):
    """Base class for errors raised by this package."""


class InputError(ComplianceSearchError, ValueError):
    """Raised when a caller supplies input that cannot be processed."""


class CAPInputError(InputError):
    """Raised when a corrective action plan is requested without a description."""
