"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTransactionDataError(DomainException):
    """Snapshot data is malformed or missing required fields"""

    pass
