"""
Error taxonomy shared by the ledger and schedule services.
The API layer maps these onto HTTP responses in timebank.main.
"""


class TimeBankError(Exception):
    pass


class NotFoundError(TimeBankError):
    """A row id, staff email or table name does not exist."""


class ValidationFailure(TimeBankError):
    """Malformed submission or schema mismatch. Raised before anything is written."""


class InvalidTransition(ValidationFailure):
    """Requested status change is not an edge of the approval state machine."""


class ScopeViolation(TimeBankError):
    """A non-privileged caller tried to act on a row outside their buildings."""


class ArchiveMismatch(TimeBankError):
    """No archive row matched an earned request. Logged, never fatal."""
