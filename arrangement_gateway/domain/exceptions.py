"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class UnknownPlanTypeError(DomainException):
    """A plan type outside the known variants reached the core"""

    def __init__(self, plan_type: object):
        self.plan_type = plan_type
        super().__init__(f"Unknown plan type: {plan_type!r}")


class InvalidPlanRecordError(DomainException):
    """Stored plan record cannot be rebuilt into a plan variant"""

    pass


class PlanNotFoundError(DomainException):
    """No stored plan with the requested id"""

    pass


class TenantMismatchError(DomainException):
    """Plan does not belong to the requesting tenant"""

    pass


class ArrangementsAPIError(DomainException):
    """Arrangement options API returned an error or is unavailable"""

    pass


class InvalidPlanTermsError(DomainException):
    """Plan terms were built with values that break their invariants"""

    pass
