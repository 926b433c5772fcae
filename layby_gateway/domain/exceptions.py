"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidPlanInputError(DomainException):
    """Calculator received input it cannot price (e.g. negative base cost)"""

    pass


class PlanNotAvailableError(DomainException):
    """Installments requested for a flight that does not qualify"""

    def __init__(self, reason: str):
        super().__init__(reason)
        self.reason = reason


class PaymentProcessorError(DomainException):
    """Payment processor webhook rejected the event or is unavailable"""

    pass


class BookingReferenceConflictError(DomainException):
    """No free booking reference after retrying"""

    pass
