"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidFinancialDataError(DomainException):
    """Record data is malformed (non-finite amounts, negative loan balance)"""

    pass


class UnknownStrategyError(DomainException):
    """Allocation or debt strategy name is not recognised"""

    pass
