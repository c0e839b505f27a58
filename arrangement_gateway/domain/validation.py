"""
Plan validation - decides whether parsed form fields make a valid plan.

Invalid input is an expected outcome, not an exception: every rule failure
comes back as a Rejection naming the field and the reason, and the plan is
only constructed once all rules for its type pass. An unknown plan type is
a programming error and raises UnknownPlanTypeError.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Callable, Dict, Union

from arrangement_gateway.domain.exceptions import UnknownPlanTypeError
from arrangement_gateway.domain.models import (
    MAX_BASIS_POINTS,
    ArrangementPlan,
    CustomTerms,
    FixedMonthlyTerms,
    OneTimePaymentTerms,
    PayInFullTerms,
    PaymentFrequency,
    PlanTerms,
    PlanType,
    RangeTerms,
    SettlementTerms,
)
from arrangement_gateway.domain.parsing import ParsedFields
from arrangement_gateway.domain.tiers import BalanceTier


class RejectionReason(str, Enum):
    MISSING_FIELD = "missing_field"
    MALFORMED_VALUE = "malformed_value"
    MALFORMED_DATE = "malformed_date"
    OUT_OF_RANGE = "out_of_range"
    INVALID_RANGE = "invalid_range"
    INVALID_CHOICE = "invalid_choice"


@dataclass(frozen=True)
class Rejection:
    """Why a plan was not accepted, phrased for the admin who submitted it"""

    reason: RejectionReason
    field: str
    message: str


def _first(*rejections: Rejection | None) -> Rejection | None:
    return next((r for r in rejections if r is not None), None)


def _check_amount(
    fields: ParsedFields,
    attr: str,
    label: str,
    required: bool,
    allow_zero: bool,
) -> Rejection | None:
    if attr in fields.malformed:
        return Rejection(RejectionReason.MALFORMED_VALUE, attr, f"{label} must be a dollar amount")

    value = getattr(fields, attr)
    if value is None:
        if required:
            return Rejection(RejectionReason.MISSING_FIELD, attr, f"{label} is required")
        return None

    if value < 0:
        return Rejection(RejectionReason.OUT_OF_RANGE, attr, f"{label} cannot be negative")
    if value == 0 and not allow_zero:
        return Rejection(RejectionReason.OUT_OF_RANGE, attr, f"{label} must be greater than $0.00")
    return None


def _check_percentage(fields: ParsedFields) -> Rejection | None:
    attr = "payoff_percentage_basis_points"
    if attr in fields.malformed:
        return Rejection(RejectionReason.MALFORMED_VALUE, attr, "Payoff percentage must be a number")

    value = fields.payoff_percentage_basis_points
    if value is None:
        return Rejection(RejectionReason.MISSING_FIELD, attr, "Payoff percentage is required")
    if not 0 < value <= MAX_BASIS_POINTS:
        return Rejection(
            RejectionReason.OUT_OF_RANGE,
            attr,
            "Payoff percentage must be greater than 0% and no more than 100%",
        )
    return None


def _check_max_term(fields: ParsedFields) -> Rejection | None:
    attr = "max_term_months"
    if attr in fields.malformed:
        return Rejection(RejectionReason.MALFORMED_VALUE, attr, "Maximum term must be a number of months")
    if fields.max_term_months is not None and fields.max_term_months <= 0:
        return Rejection(RejectionReason.OUT_OF_RANGE, attr, "Maximum term must be at least 1 month")
    return None


def _check_date(fields: ParsedFields, attr: str, label: str, required: bool) -> Rejection | None:
    if attr in fields.malformed:
        return Rejection(RejectionReason.MALFORMED_DATE, attr, f"{label} must be a valid date (YYYY-MM-DD)")
    if required and getattr(fields, attr) is None:
        return Rejection(RejectionReason.MISSING_FIELD, attr, f"{label} is required")
    return None


def _check_common(fields: ParsedFields) -> Rejection | None:
    if not fields.name:
        return Rejection(RejectionReason.MISSING_FIELD, "name", "Plan name is required")

    if fields.balance_tier is None:
        return Rejection(RejectionReason.MISSING_FIELD, "balance_tier", "Balance tier is required")
    if fields.balance_tier not in {tier.value for tier in BalanceTier}:
        return Rejection(
            RejectionReason.INVALID_CHOICE,
            "balance_tier",
            f"Unknown balance tier: {fields.balance_tier}",
        )
    return None


def _range_terms(fields: ParsedFields) -> Union[RangeTerms, Rejection]:
    rejection = _first(
        _check_amount(fields, "monthly_payment_min_cents", "Minimum monthly payment", required=False, allow_zero=True),
        _check_amount(fields, "monthly_payment_max_cents", "Maximum monthly payment", required=False, allow_zero=True),
    )
    if rejection:
        return rejection

    low = fields.monthly_payment_min_cents
    high = fields.monthly_payment_max_cents
    if low is not None and high is not None and low > high:
        return Rejection(
            RejectionReason.INVALID_RANGE,
            "monthly_payment_max_cents",
            "Minimum monthly payment cannot be greater than maximum monthly payment",
        )

    rejection = _check_max_term(fields)
    if rejection:
        return rejection

    return RangeTerms(
        monthly_payment_min_cents=low,
        monthly_payment_max_cents=high,
        max_term_months=fields.max_term_months,
    )


def _fixed_monthly_terms(fields: ParsedFields) -> Union[FixedMonthlyTerms, Rejection]:
    rejection = _first(
        _check_amount(fields, "fixed_monthly_payment_cents", "Monthly payment", required=True, allow_zero=False),
        _check_max_term(fields),
    )
    if rejection:
        return rejection

    return FixedMonthlyTerms(
        fixed_monthly_payment_cents=fields.fixed_monthly_payment_cents,
        max_term_months=fields.max_term_months,
    )


def _settlement_terms(fields: ParsedFields) -> Union[SettlementTerms, Rejection]:
    rejection = _check_percentage(fields)
    if rejection:
        return rejection

    if not fields.payment_counts:
        return Rejection(
            RejectionReason.MISSING_FIELD,
            "payment_counts",
            "Enter at least one settlement payment count",
        )

    if fields.payment_frequency is None:
        return Rejection(RejectionReason.MISSING_FIELD, "payment_frequency", "Payment frequency is required")
    try:
        frequency = PaymentFrequency(fields.payment_frequency)
    except ValueError:
        return Rejection(
            RejectionReason.INVALID_CHOICE,
            "payment_frequency",
            "Payment frequency must be weekly, biweekly or monthly",
        )

    # Past expiration dates are accepted on purpose; see DESIGN.md
    rejection = _check_date(fields, "offer_expires_date", "Offer expiration date", required=False)
    if rejection:
        return rejection

    return SettlementTerms(
        payoff_percentage_basis_points=fields.payoff_percentage_basis_points,
        payment_counts=tuple(fields.payment_counts),
        payment_frequency=frequency,
        offer_expires_date=fields.offer_expires_date,
        terms_text=fields.terms_text,
    )


def _custom_terms(fields: ParsedFields) -> Union[CustomTerms, Rejection]:
    if not fields.custom_terms_text:
        return Rejection(RejectionReason.MISSING_FIELD, "custom_terms_text", "Custom terms text is required")
    return CustomTerms(custom_terms_text=fields.custom_terms_text)


def _one_time_payment_terms(fields: ParsedFields) -> Union[OneTimePaymentTerms, Rejection]:
    rejection = _check_amount(fields, "minimum_payment_cents", "Minimum payment", required=True, allow_zero=False)
    if rejection:
        return rejection
    return OneTimePaymentTerms(minimum_payment_cents=fields.minimum_payment_cents)


def _pay_in_full_terms(fields: ParsedFields) -> Union[PayInFullTerms, Rejection]:
    rejection = _first(
        _check_percentage(fields),
        _check_date(fields, "due_date", "Due date", required=True),
    )
    if rejection:
        return rejection

    return PayInFullTerms(
        payoff_percentage_basis_points=fields.payoff_percentage_basis_points,
        due_date=fields.due_date,
        terms_text=fields.terms_text,
    )


# One rule set per plan type; a PlanType missing here is a bug
TERMS_VALIDATORS: Dict[PlanType, Callable[[ParsedFields], Union[PlanTerms, Rejection]]] = {
    PlanType.RANGE: _range_terms,
    PlanType.FIXED_MONTHLY: _fixed_monthly_terms,
    PlanType.SETTLEMENT: _settlement_terms,
    PlanType.CUSTOM_TERMS: _custom_terms,
    PlanType.ONE_TIME_PAYMENT: _one_time_payment_terms,
    PlanType.PAY_IN_FULL: _pay_in_full_terms,
}


def validate_fields(plan_type: Union[str, PlanType], fields: ParsedFields) -> Union[ArrangementPlan, Rejection]:
    """
    Validate parsed fields for a plan type.

    Common rules (name, balance tier) run first, then the plan type's own
    rules in form order; the first failure is returned.

    Returns:
        The constructed ArrangementPlan, or a Rejection

    Raises:
        UnknownPlanTypeError: plan_type is not one of the known variants
    """
    try:
        kind = PlanType(plan_type)
    except ValueError:
        raise UnknownPlanTypeError(plan_type) from None

    build_terms = TERMS_VALIDATORS.get(kind)
    if build_terms is None:
        raise UnknownPlanTypeError(kind)

    rejection = _check_common(fields)
    if rejection:
        return rejection

    terms = build_terms(fields)
    if isinstance(terms, Rejection):
        return terms

    return ArrangementPlan(
        name=fields.name,
        balance_tier=BalanceTier(fields.balance_tier),
        terms=terms,
        description=fields.description,
    )
