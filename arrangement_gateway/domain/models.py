"""Domain models - pure Python dataclasses representing arrangement plans"""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import ClassVar, Tuple, Union

from arrangement_gateway.domain.exceptions import InvalidPlanTermsError
from arrangement_gateway.domain.tiers import BalanceTier, range_for_tier

MAX_BASIS_POINTS = 10_000  # 100%


def _require(condition: bool, message: str) -> None:
    if not condition:
        raise InvalidPlanTermsError(message)


def _check_term(max_term_months: int | None) -> None:
    _require(max_term_months is None or max_term_months >= 1, "max_term_months must be at least 1")


def _check_basis_points(basis_points: int) -> None:
    _require(
        0 < basis_points <= MAX_BASIS_POINTS,
        f"payoff_percentage_basis_points must be in (0, {MAX_BASIS_POINTS}]",
    )


class PlanType(str, Enum):
    RANGE = "range"
    FIXED_MONTHLY = "fixed_monthly"
    SETTLEMENT = "settlement"
    CUSTOM_TERMS = "custom_terms"
    ONE_TIME_PAYMENT = "one_time_payment"
    PAY_IN_FULL = "pay_in_full"


class PaymentFrequency(str, Enum):
    WEEKLY = "weekly"
    BIWEEKLY = "biweekly"
    MONTHLY = "monthly"


@dataclass(frozen=True)
class RangeTerms:
    """Consumer picks a monthly payment inside a window.

    A missing minimum defers to the tenant-wide default at use time.
    """

    plan_type: ClassVar[PlanType] = PlanType.RANGE

    monthly_payment_min_cents: int | None = None
    monthly_payment_max_cents: int | None = None
    max_term_months: int | None = None  # None = until paid in full

    def __post_init__(self) -> None:
        low, high = self.monthly_payment_min_cents, self.monthly_payment_max_cents
        _require(low is None or low >= 0, "monthly_payment_min_cents cannot be negative")
        _require(high is None or high >= 0, "monthly_payment_max_cents cannot be negative")
        _require(low is None or high is None or low <= high, "monthly payment minimum exceeds maximum")
        _check_term(self.max_term_months)


@dataclass(frozen=True)
class FixedMonthlyTerms:
    """Same payment every month"""

    plan_type: ClassVar[PlanType] = PlanType.FIXED_MONTHLY

    fixed_monthly_payment_cents: int
    max_term_months: int | None = None  # None = until paid in full

    def __post_init__(self) -> None:
        _require(self.fixed_monthly_payment_cents > 0, "fixed_monthly_payment_cents must be positive")
        _check_term(self.max_term_months)


@dataclass(frozen=True)
class SettlementTerms:
    """Partial payoff of the balance across one of several payment counts"""

    plan_type: ClassVar[PlanType] = PlanType.SETTLEMENT

    payoff_percentage_basis_points: int
    payment_counts: Tuple[int, ...]
    payment_frequency: PaymentFrequency
    offer_expires_date: date | None = None
    terms_text: str | None = None

    def __post_init__(self) -> None:
        _check_basis_points(self.payoff_percentage_basis_points)
        _require(len(self.payment_counts) > 0, "payment_counts cannot be empty")
        _require(all(count > 0 for count in self.payment_counts), "payment_counts must be positive")


@dataclass(frozen=True)
class CustomTerms:
    """Free-text terms negotiated with the consumer"""

    plan_type: ClassVar[PlanType] = PlanType.CUSTOM_TERMS

    custom_terms_text: str

    def __post_init__(self) -> None:
        _require(bool(self.custom_terms_text.strip()), "custom_terms_text cannot be blank")


@dataclass(frozen=True)
class OneTimePaymentTerms:
    """Single payment of at least a minimum amount"""

    plan_type: ClassVar[PlanType] = PlanType.ONE_TIME_PAYMENT

    minimum_payment_cents: int

    def __post_init__(self) -> None:
        _require(self.minimum_payment_cents > 0, "minimum_payment_cents must be positive")


@dataclass(frozen=True)
class PayInFullTerms:
    """Pay a percentage of the balance in one go by a due date"""

    plan_type: ClassVar[PlanType] = PlanType.PAY_IN_FULL

    payoff_percentage_basis_points: int
    due_date: date
    terms_text: str | None = None

    def __post_init__(self) -> None:
        _check_basis_points(self.payoff_percentage_basis_points)


PlanTerms = Union[
    RangeTerms,
    FixedMonthlyTerms,
    SettlementTerms,
    CustomTerms,
    OneTimePaymentTerms,
    PayInFullTerms,
]


@dataclass(frozen=True)
class ArrangementPlan:
    """Payment arrangement offered to consumers whose balance falls in a tier"""

    name: str
    balance_tier: BalanceTier
    terms: PlanTerms
    description: str | None = None

    @property
    def plan_type(self) -> PlanType:
        return self.terms.plan_type

    @property
    def min_balance_cents(self) -> int:
        return range_for_tier(self.balance_tier)[0]

    @property
    def max_balance_cents(self) -> int | None:
        return range_for_tier(self.balance_tier)[1]


@dataclass(frozen=True)
class StoredPlan:
    """Plan as persisted by the arrangement options API"""

    id: str
    tenant_id: str | None
    plan: ArrangementPlan
    created_at: datetime | None = None
    is_active: bool = True


@dataclass(frozen=True)
class PlanSummary:
    """Consumer-facing text derived from a plan"""

    headline: str
    detail: str | None = None
